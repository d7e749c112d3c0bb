from contriblib import report_generator


#============================================
def make_group(name: str, total: int, nodes: list[dict]) -> dict:
	"""
	Build one contributions-by-repository entry.
	"""
	return {
		"repository": {"nameWithOwner": name, "url": f"https://x/{name}"},
		"contributions": {"totalCount": total, "nodes": nodes},
	}


#============================================
def issue_node(created_at: str, title: str, url: str, state: str) -> dict:
	return {"issue": {"createdAt": created_at, "title": title, "url": url, "state": state}}


#============================================
def pull_request_node(created_at: str, title: str, url: str, state: str, changed_files=None) -> dict:
	pull_request = {"createdAt": created_at, "title": title, "url": url, "state": state}
	if changed_files is not None:
		pull_request["changedFiles"] = changed_files
	return {"pullRequest": pull_request}


#============================================
def table_rows(markdown: str) -> list[str]:
	"""
	Return data rows of the single table in a section.
	"""
	lines = [line for line in markdown.splitlines() if line.startswith("|")]
	return lines[2:]


#============================================
def scenario_record() -> dict:
	return {
		"issueContributionsByRepository": [
			{
				"repository": {"nameWithOwner": "a/b", "url": "https://x/a/b"},
				"contributions": {
					"totalCount": 2,
					"nodes": [
						issue_node("2024-01-01T00:00:00Z", "T1", "https://x/1", "OPEN"),
					],
				},
			}
		]
	}


#============================================
def test_scenario_single_issue_summary() -> None:
	"""
	One issue grouping should yield one summary row with zero PR counters.
	"""
	summary = report_generator.generate_repo_summary(scenario_record())
	rows = table_rows(summary)
	assert rows == ["| [`a/b`](https://x/a/b) | 2 | 0 | 0 |"]


#============================================
def test_scenario_single_issue_details() -> None:
	"""
	Issue table should link repo and title, with a truncated date.
	"""
	issues = report_generator.generate_repo_issues(scenario_record())
	rows = table_rows(issues)
	assert rows == ["| [`a/b`](https://x/a/b) | 2024-01-01 | [T1](https://x/1) | OPEN |"]
	assert issues.startswith("## Issues")


#============================================
def test_scenario_missing_groupings_render_empty() -> None:
	"""
	Absent PR and review groupings should render as empty text.
	"""
	record = scenario_record()
	assert report_generator.generate_repo_pull_requests(record) == ""
	assert report_generator.generate_repo_pull_request_reviews(record) == ""


#============================================
def test_empty_record_renders_header_only_summary() -> None:
	"""
	A record without groupings gives an empty summary table and no sections.
	"""
	record = {}
	summary = report_generator.generate_repo_summary(record)
	assert summary.startswith("## Summary")
	assert "| Repository |" in summary
	assert table_rows(summary) == []
	assert report_generator.generate_repo_issues(record) == ""
	assert report_generator.generate_repo_pull_requests(record) == ""
	assert report_generator.generate_repo_pull_request_reviews(record) == ""


#============================================
def test_null_groupings_are_absent() -> None:
	"""
	Groupings set to None should behave like missing keys.
	"""
	record = {
		"issueContributionsByRepository": None,
		"pullRequestContributionsByRepository": None,
		"pullRequestReviewContributionsByRepository": None,
	}
	assert table_rows(report_generator.generate_repo_summary(record)) == []
	assert report_generator.generate_repo_issues(record) == ""


#============================================
def test_present_grouping_without_nodes_renders_header() -> None:
	"""
	A grouping with zero nodes should not raise and should render no rows.
	"""
	record = {"issueContributionsByRepository": [make_group("a/b", 0, [])]}
	issues = report_generator.generate_repo_issues(record)
	assert issues.startswith("## Issues")
	assert table_rows(issues) == []
	empty_list = {"pullRequestContributionsByRepository": []}
	pull_requests = report_generator.generate_repo_pull_requests(empty_list)
	assert pull_requests.startswith("## Pull Requests")
	assert table_rows(pull_requests) == []


#============================================
def test_date_truncation() -> None:
	"""
	createdAt should be cut to its YYYY-MM-DD prefix.
	"""
	assert report_generator.truncate_date("2024-03-15T10:22:31Z") == "2024-03-15"
	record = {
		"issueContributionsByRepository": [
			make_group("a/b", 1, [issue_node("2024-03-15T10:22:31Z", "T", "https://x/t", "CLOSED")]),
		]
	}
	rows = table_rows(report_generator.generate_repo_issues(record))
	assert "| 2024-03-15 |" in rows[0]
	assert "10:22" not in rows[0]


#============================================
def test_summary_union_of_repositories_in_first_seen_order() -> None:
	"""
	Summary keys should be the union of groupings, issues pass first.
	"""
	record = {
		"issueContributionsByRepository": [make_group("o/issues", 3, [])],
		"pullRequestContributionsByRepository": [
			make_group("o/prs", 4, []),
			make_group("o/issues", 1, []),
		],
		"pullRequestReviewContributionsByRepository": [
			make_group("o/reviews", 5, []),
			make_group("o/prs", 2, []),
		],
	}
	rows = table_rows(report_generator.generate_repo_summary(record))
	assert rows == [
		"| [`o/issues`](https://x/o/issues) | 3 | 1 | 0 |",
		"| [`o/prs`](https://x/o/prs) | 0 | 4 | 2 |",
		"| [`o/reviews`](https://x/o/reviews) | 0 | 0 | 5 |",
	]


#============================================
def test_pull_requests_include_changed_files_column() -> None:
	"""
	PR rows should place changed files between the title and the state.
	"""
	record = {
		"pullRequestContributionsByRepository": [
			make_group(
				"o/r",
				2,
				[
					pull_request_node("2024-02-01T08:00:00Z", "First", "https://x/p1", "MERGED", 7),
					pull_request_node("2024-02-03T08:00:00Z", "Second", "https://x/p2", "OPEN", 0),
				],
			)
		]
	}
	rows = table_rows(report_generator.generate_repo_pull_requests(record))
	assert rows == [
		"| [`o/r`](https://x/o/r) | 2024-02-01 | [First](https://x/p1) | 7 | MERGED |",
		"| [`o/r`](https://x/o/r) | 2024-02-03 | [Second](https://x/p2) | 0 | OPEN |",
	]


#============================================
def test_reviews_render_reviewed_pull_request_fields() -> None:
	"""
	Review rows should describe the reviewed pull request.
	"""
	record = {
		"pullRequestReviewContributionsByRepository": [
			make_group(
				"o/r",
				1,
				[pull_request_node("2024-02-05T00:00:00Z", "Reviewed PR", "https://x/pr", "MERGED")],
			)
		]
	}
	reviews = report_generator.generate_repo_pull_request_reviews(record)
	assert reviews.startswith("## Pull Request Reviews")
	assert table_rows(reviews) == [
		"| [`o/r`](https://x/o/r) | 2024-02-05 | [Reviewed PR](https://x/pr) | MERGED |",
	]


#============================================
def test_detail_rows_keep_source_order_across_repositories() -> None:
	"""
	Rows should follow repository order, then node order.
	"""
	record = {
		"issueContributionsByRepository": [
			make_group(
				"z/last",
				2,
				[
					issue_node("2024-01-02T00:00:00Z", "B", "https://x/b", "OPEN"),
					issue_node("2024-01-01T00:00:00Z", "A", "https://x/a", "OPEN"),
				],
			),
			make_group("a/first", 1, [issue_node("2024-01-03T00:00:00Z", "C", "https://x/c", "OPEN")]),
		]
	}
	rows = table_rows(report_generator.generate_repo_issues(record))
	titles = [row.split("[")[2].split("]")[0] for row in rows]
	assert titles == ["B", "A", "C"]


#============================================
def test_generators_are_idempotent() -> None:
	"""
	Rendering the same record twice should give identical text.
	"""
	record = scenario_record()
	record["pullRequestContributionsByRepository"] = [
		make_group("a/b", 1, [pull_request_node("2024-01-04T00:00:00Z", "P", "https://x/p", "OPEN", 3)]),
	]
	for generator in (
		report_generator.generate_repo_summary,
		report_generator.generate_repo_issues,
		report_generator.generate_repo_pull_requests,
		report_generator.generate_repo_pull_request_reviews,
	):
		assert generator(record) == generator(record)


#============================================
def test_titles_are_inserted_verbatim() -> None:
	"""
	Titles containing template-like text should not be re-rendered.
	"""
	record = {
		"issueContributionsByRepository": [
			make_group("a/b", 1, [issue_node("2024-01-01T00:00:00Z", "Fix {{url}} & <tag>", "https://x/1", "OPEN")]),
		]
	}
	rows = table_rows(report_generator.generate_repo_issues(record))
	assert "[Fix {{url}} & <tag>](https://x/1)" in rows[0]


#============================================
def test_generate_report_skips_empty_sections() -> None:
	"""
	The joined report should include only sections with content.
	"""
	report = report_generator.generate_report(scenario_record())
	assert "## Summary" in report
	assert "## Issues" in report
	assert "## Pull Requests" not in report
	assert "## Pull Request Reviews" not in report
	assert report.endswith("|\n")


#============================================
def test_generate_combined_report() -> None:
	"""
	Per-record reports should be separated by a horizontal rule.
	"""
	combined = report_generator.generate_combined_report([scenario_record(), {}])
	assert combined.count("## Summary") == 2
	assert "\n\n---\n\n" in combined
	assert report_generator.generate_combined_report([]) == ""
