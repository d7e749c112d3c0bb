#!/usr/bin/env python3
import argparse
import os
import sys
from datetime import datetime

import rich.console

from contriblib import identifier_resolver
from contriblib import issue_publisher
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
	line = f"[report_to_issue {now_text}] {message}"
	lower = message.lower()
	style = "cyan"
	if ("failed" in lower) or ("error" in lower):
		style = "bold red"
	elif ("created" in lower) or ("added" in lower):
		style = "green"
	RICH_CONSOLE.print(line, style=style)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="File the weekly markdown report as a GitHub issue."
	)
	parser.add_argument(
		"--input",
		default="out/weekly_report_{date}.md",
		help="Path to markdown report from contributions_to_report.py.",
	)
	parser.add_argument(
		"--token",
		default="",
		help="GitHub token used to create the issue (default: first configured token).",
	)
	parser.add_argument("--organization", default=None, help="Organization owning the project.")
	parser.add_argument("--owner", default=None, help="Repository owner login.")
	parser.add_argument("--repository", default=None, help="Target repository (owner/name).")
	parser.add_argument(
		"--username",
		default=None,
		help="Assignee login (default: github.username, then the token's user).",
	)
	parser.add_argument(
		"--project-number",
		type=int,
		default=None,
		help="ProjectV2 number to add the issue to (0 skips the project).",
	)
	parser.add_argument(
		"--settings",
		default="settings.yaml",
		help="YAML settings path for defaults.",
	)
	args = parser.parse_args(argv)
	return args


#============================================
def resolve_option(cli_value, settings: dict, keys: list[str], default_value: str) -> str:
	"""
	Prefer a CLI value, then settings.yaml, then the default.
	"""
	if cli_value is not None:
		return str(cli_value).strip()
	return pipeline_settings.get_setting_str(settings, keys, default_value)


#============================================
def read_report(input_path: str) -> str:
	"""
	Read the markdown issue body.
	"""
	if not os.path.isfile(input_path):
		raise FileNotFoundError(f"Report file not found: {input_path}")
	with open(input_path, "r", encoding="utf-8") as handle:
		return handle.read()


#============================================
def main(argv: list[str] | None = None) -> int:
	"""
	Create the weekly issue and link it to the project board.
	"""
	args = parse_args(argv)
	settings, settings_path = pipeline_settings.load_settings(args.settings)
	log_step(f"Using settings file: {settings_path}")

	cli_tokens = [args.token] if args.token else []
	tokens = pipeline_settings.get_github_tokens(settings, cli_tokens)
	if not tokens:
		raise RuntimeError(
			"No GitHub token provided. Use --token, github.tokens in settings.yaml, "
			+ "or GITHUB_TOKEN."
		)
	organization = resolve_option(args.organization, settings, ["report", "organization"], "")
	owner = resolve_option(args.owner, settings, ["report", "owner"], organization)
	repository = resolve_option(args.repository, settings, ["report", "repository"], "")
	if not repository:
		raise RuntimeError("A target repository is required (--repository or report.repository).")
	if args.project_number is not None:
		project_number = args.project_number
	else:
		project_number = pipeline_settings.get_setting_int(settings, ["report", "project_number"], 0)

	client = GitHubClient(
		tokens[0],
		log_fn=log_step,
		api_url=pipeline_settings.get_setting_str(settings, ["github", "api_url"], DEFAULT_GRAPHQL_URL),
		timeout_seconds=pipeline_settings.get_setting_int(
			settings,
			["github", "timeout_seconds"],
			DEFAULT_TIMEOUT_SECONDS,
		),
	)
	username = resolve_option(args.username, settings, ["github", "username"], "")
	if not username:
		username = identifier_resolver.resolve_authenticated_username(client)

	input_path = args.input.replace("{date}", datetime.now().astimezone().strftime("%Y-%m-%d"))
	body = read_report(input_path)
	log_step(f"Filing {os.path.abspath(input_path)} in {repository}")
	try:
		issue = issue_publisher.create_issue(
			client,
			organization,
			owner,
			repository,
			username,
			project_number,
			body,
		)
	except issue_publisher.ProjectLinkError as error:
		log_step(f"Created issue {error.issue.url}, but project link failed: {error}")
		return 1
	log_step(f"Created issue {issue.url} ({issue.title})")
	return 0


if __name__ == "__main__":
	sys.exit(main())
