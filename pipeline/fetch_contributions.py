#!/usr/bin/env python3
import argparse
import json
import os
from datetime import datetime
from datetime import timezone

import rich.console

from contriblib import contribution_fetcher
from contriblib import pipeline_settings
from contriblib.github_graphql import DEFAULT_GRAPHQL_URL
from contriblib.github_graphql import DEFAULT_TIMEOUT_SECONDS
from contriblib.github_graphql import GitHubClient


RICH_CONSOLE = rich.console.Console()


#============================================
def log_step(message: str) -> None:
	"""
	Print one timestamped progress line.
	"""
	now_text = datetime.now().strftime("%H:%M:%S")
	line = f"[fetch_contributions {now_text}] {message}"
	lower = message.lower()
	style = "cyan"
	if ("failed" in lower) or ("error" in lower):
		style = "bold red"
	elif "rate limit" in lower:
		style = "yellow"
	elif ("wrote " in lower) or ("fetched" in lower):
		style = "green"
	RICH_CONSOLE.print(line, style=style)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Fetch weekly GitHub contributions for one or more tokens."
	)
	parser.add_argument(
		"--token",
		dest="tokens",
		action="append",
		default=[],
		help="GitHub token (repeatable; falls back to settings.yaml then GITHUB_TOKEN).",
	)
	parser.add_argument(
		"--start-date",
		default="",
		help="ISO-8601 start date (default: today minus report.window_days).",
	)
	parser.add_argument(
		"--settings",
		default="settings.yaml",
		help="YAML settings path for defaults.",
	)
	parser.add_argument(
		"--output",
		default="out/contributions_{date}.json",
		help="Path to JSON output file; {date} is replaced with today's date.",
	)
	args = parser.parse_args(argv)
	return args


#============================================
def local_date_stamp() -> str:
	"""
	Return local date stamp for output filenames.
	"""
	return datetime.now().astimezone().strftime("%Y-%m-%d")


#============================================
def build_output_payload(start_date: str, records: list[dict], fetched_at: datetime) -> dict:
	"""
	Wrap fetched records with the run metadata.
	"""
	return {
		"start_date": start_date,
		"fetched_at": fetched_at.isoformat(),
		"record_count": len(records),
		"records": records,
	}


#============================================
def write_json(output_path: str, payload: dict) -> str:
	"""
	Write one JSON document and return its absolute path.
	"""
	output_dir = os.path.dirname(output_path)
	if output_dir:
		os.makedirs(output_dir, exist_ok=True)
	with open(output_path, "w", encoding="utf-8") as handle:
		json.dump(payload, handle, ensure_ascii=True, indent=2)
		handle.write("\n")
	return os.path.abspath(output_path)


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Fetch contributions and write them for the report stage.
	"""
	args = parse_args(argv)
	settings, settings_path = pipeline_settings.load_settings(args.settings)
	log_step(f"Using settings file: {settings_path}")

	tokens = pipeline_settings.get_github_tokens(settings, args.tokens)
	if not tokens:
		raise RuntimeError(
			"No GitHub token provided. Use --token, github.tokens in settings.yaml, "
			+ "or GITHUB_TOKEN."
		)
	start_date = args.start_date.strip() or pipeline_settings.resolve_default_start_date(settings)
	api_url = pipeline_settings.get_setting_str(settings, ["github", "api_url"], DEFAULT_GRAPHQL_URL)
	timeout_seconds = pipeline_settings.get_setting_int(
		settings,
		["github", "timeout_seconds"],
		DEFAULT_TIMEOUT_SECONDS,
	)

	def client_factory(token: str, log_fn=None) -> GitHubClient:
		return GitHubClient(
			token,
			log_fn=log_fn,
			api_url=api_url,
			timeout_seconds=timeout_seconds,
		)

	log_step(f"Fetching contributions since {start_date} for {len(tokens)} token(s)")
	records = contribution_fetcher.fetch_contributions(
		tokens,
		start_date,
		client_factory=client_factory,
		log_fn=log_step,
	)
	log_step(f"Fetched {len(records)} contribution record(s)")

	output_path = args.output.replace("{date}", local_date_stamp())
	payload = build_output_payload(start_date, records, datetime.now(timezone.utc))
	written_path = write_json(output_path, payload)
	log_step(f"Wrote {written_path}")


if __name__ == "__main__":
	main()
