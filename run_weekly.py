#!/usr/bin/env python3
from __future__ import annotations

import argparse
import subprocess
import sys
from datetime import datetime


def _run(cmd: list[str]) -> None:
    print("+", " ".join(cmd))
    subprocess.run(cmd, check=True)


def build_commands(args: argparse.Namespace) -> list[list[str]]:
    run_date = args.run_date or datetime.now().astimezone().strftime("%Y-%m-%d")
    contributions_path = f"{args.out_dir}/contributions_{run_date}.json"
    report_path = f"{args.out_dir}/weekly_report_{run_date}.md"
    settings_args = ["--settings", args.settings]

    fetch = [sys.executable, "pipeline/fetch_contributions.py", *settings_args, "--output", contributions_path]
    if args.start_date:
        fetch.extend(["--start-date", args.start_date])
    commands = [
        fetch,
        [sys.executable, "pipeline/contributions_to_report.py", "--input", contributions_path, "--output", report_path],
    ]
    if not args.skip_issue:
        commands.append([sys.executable, "pipeline/report_to_issue.py", *settings_args, "--input", report_path])
    return commands


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run the weekly contributions report pipeline.")
    parser.add_argument("--date", dest="run_date", default="", help="Run date in YYYY-MM-DD for file names. Defaults to today.")
    parser.add_argument("--start-date", default="", help="ISO-8601 start date. Defaults to one window ago.")
    parser.add_argument("--settings", default="settings.yaml", help="YAML settings path passed to each stage.")
    parser.add_argument("--out-dir", default="out", help="Directory for intermediate and report files.")
    parser.add_argument("--skip-issue", action="store_true", help="Render the report without filing an issue.")
    args = parser.parse_args(argv)

    for cmd in build_commands(args):
        _run(cmd)


if __name__ == "__main__":
    main()
