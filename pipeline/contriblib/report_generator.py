from contriblib import repo_summary
from contriblib import template_loader


REPORT_SEPARATOR = "\n\n---\n\n"


#============================================
def truncate_date(timestamp: str) -> str:
	"""
	Keep the YYYY-MM-DD prefix of an ISO timestamp.
	"""
	return (timestamp or "")[:10]


#============================================
def render_section(section_template: str, rows_token: str, rows: list[str]) -> str:
	"""
	Wrap rendered rows into one section template.
	"""
	template = template_loader.load_template(section_template)
	rendered = template_loader.render_template(template, {rows_token: "\n".join(rows)})
	return rendered.rstrip("\n")


#============================================
def build_detail_row_values(element: dict, item: dict) -> dict:
	"""
	Build the row values shared by the issue, PR and review tables.
	"""
	repository = element["repository"]
	return {
		"nameWithOwner": repository["nameWithOwner"],
		"repoUrl": repository["url"],
		"createdAt": truncate_date(item["createdAt"]),
		"title": item["title"],
		"url": item["url"],
		"state": item["state"],
	}


#============================================
def generate_repo_summary(record: dict) -> str:
	"""
	Render the per-repository summary table.

	Each row looks like:
	| [`owner/name`](url) | issues | pull requests | reviews |
	"""
	summary = repo_summary.build_repo_summary(record)
	row_template = template_loader.load_template("repository_summary_row.md")
	rows = []
	for name, row in summary.items():
		rows.append(
			template_loader.render_template(
				row_template,
				{
					"nameWithOwner": name,
					"url": row.url,
					"issuesCreated": row.issues,
					"pullRequestsCreated": row.pull_requests,
					"pullRequestsReviewed": row.pull_request_reviews,
				},
			)
		)
	return render_section("repository_summary.md", "repositorySummaryRows", rows)


#============================================
def generate_repo_issues(record: dict) -> str:
	"""
	Render one row per issue, or empty text when there are no issues.
	"""
	grouping = repo_summary.get_grouping(record, repo_summary.ISSUES_KEY)
	if grouping is None:
		return ""
	row_template = template_loader.load_template("repository_issues_row.md")
	rows = []
	for element in grouping:
		for node in element["contributions"]["nodes"]:
			values = build_detail_row_values(element, node["issue"])
			rows.append(template_loader.render_template(row_template, values))
	return render_section("repository_issues.md", "repositoryIssuesRows", rows)


#============================================
def generate_repo_pull_requests(record: dict) -> str:
	"""
	Render one row per pull request, with its changed file count.
	"""
	grouping = repo_summary.get_grouping(record, repo_summary.PULL_REQUESTS_KEY)
	if grouping is None:
		return ""
	row_template = template_loader.load_template("repository_pull_requests_row.md")
	rows = []
	for element in grouping:
		for node in element["contributions"]["nodes"]:
			pull_request = node["pullRequest"]
			values = build_detail_row_values(element, pull_request)
			values["changedFiles"] = pull_request["changedFiles"]
			rows.append(template_loader.render_template(row_template, values))
	return render_section("repository_pull_requests.md", "repositoryPullRequestsRows", rows)


#============================================
def generate_repo_pull_request_reviews(record: dict) -> str:
	"""
	Render one row per review contribution.

	Rows describe the reviewed pull request, not the review itself.
	"""
	grouping = repo_summary.get_grouping(record, repo_summary.PULL_REQUEST_REVIEWS_KEY)
	if grouping is None:
		return ""
	row_template = template_loader.load_template("repository_pull_request_reviews_row.md")
	rows = []
	for element in grouping:
		for node in element["contributions"]["nodes"]:
			values = build_detail_row_values(element, node["pullRequest"])
			rows.append(template_loader.render_template(row_template, values))
	return render_section(
		"repository_pull_request_reviews.md",
		"repositoryPullRequestReviewsRows",
		rows,
	)


#============================================
def generate_report(record: dict) -> str:
	"""
	Join the non-empty sections of one record into a markdown document.
	"""
	sections = [
		generate_repo_summary(record),
		generate_repo_issues(record),
		generate_repo_pull_requests(record),
		generate_repo_pull_request_reviews(record),
	]
	text = "\n\n".join(section for section in sections if section)
	return text + "\n"


#============================================
def generate_combined_report(records: list[dict]) -> str:
	"""
	Join per-record reports with a horizontal rule.
	"""
	reports = [generate_report(record).rstrip("\n") for record in records]
	if not reports:
		return ""
	return REPORT_SEPARATOR.join(reports) + "\n"
