#!/usr/bin/env python3
import argparse
import json
import os
from datetime import datetime

import rich.console

from contriblib import report_generator


RICH_CONSOLE = rich.console.Console()


#============================================
def log_step(message: str) -> None:
	"""
	Print one timestamped progress line.
	"""
	now_text = datetime.now().strftime("%H:%M:%S")
	line = f"[contributions_to_report {now_text}] {message}"
	lower = message.lower()
	style = "cyan"
	if ("failed" in lower) or ("error" in lower):
		style = "bold red"
	elif "wrote " in lower:
		style = "green"
	RICH_CONSOLE.print(line, style=style)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Render fetched contribution records into a markdown report."
	)
	parser.add_argument(
		"--input",
		default="out/contributions_{date}.json",
		help="Path to JSON input from fetch_contributions.py.",
	)
	parser.add_argument(
		"--output",
		default="out/weekly_report_{date}.md",
		help="Path to markdown output file.",
	)
	args = parser.parse_args(argv)
	return args


#============================================
def local_date_stamp() -> str:
	"""
	Return local date stamp for input and output filenames.
	"""
	return datetime.now().astimezone().strftime("%Y-%m-%d")


#============================================
def load_records(input_path: str) -> list[dict]:
	"""
	Load contribution records written by the fetch stage.
	"""
	if not os.path.isfile(input_path):
		raise FileNotFoundError(f"Contributions file not found: {input_path}")
	with open(input_path, "r", encoding="utf-8") as handle:
		payload = json.load(handle)
	if isinstance(payload, list):
		records = payload
	elif isinstance(payload, dict):
		records = payload.get("records", [])
	else:
		raise RuntimeError(f"Unexpected contributions payload in {input_path}")
	if not isinstance(records, list):
		raise RuntimeError(f"Contributions records must be a list: {input_path}")
	return [record for record in records if isinstance(record, dict)]


#============================================
def write_report(output_path: str, report_text: str) -> str:
	"""
	Write the markdown report and return its absolute path.
	"""
	output_dir = os.path.dirname(output_path)
	if output_dir:
		os.makedirs(output_dir, exist_ok=True)
	with open(output_path, "w", encoding="utf-8") as handle:
		handle.write(report_text)
	return os.path.abspath(output_path)


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Render the markdown report from fetched contributions.
	"""
	args = parse_args(argv)
	date_text = local_date_stamp()
	input_path = args.input.replace("{date}", date_text)
	output_path = args.output.replace("{date}", date_text)

	log_step(f"Reading contributions: {os.path.abspath(input_path)}")
	records = load_records(input_path)
	log_step(f"Rendering report for {len(records)} record(s)")
	report_text = report_generator.generate_combined_report(records)
	written_path = write_report(output_path, report_text)
	log_step(f"Wrote {written_path} ({len(report_text)} chars)")


if __name__ == "__main__":
	main()
