import dataclasses


ISSUES_KEY = "issueContributionsByRepository"
PULL_REQUESTS_KEY = "pullRequestContributionsByRepository"
PULL_REQUEST_REVIEWS_KEY = "pullRequestReviewContributionsByRepository"

# Merge order: first-seen keys keep this pass order.
GROUPING_COUNTERS = (
	(ISSUES_KEY, "issues"),
	(PULL_REQUESTS_KEY, "pull_requests"),
	(PULL_REQUEST_REVIEWS_KEY, "pull_request_reviews"),
)


#============================================
@dataclasses.dataclass
class RepoSummaryRow:
	url: str
	issues: int = 0
	pull_requests: int = 0
	pull_request_reviews: int = 0


#============================================
def get_grouping(record: dict, key: str) -> list[dict] | None:
	"""
	Return one grouping list, or None when the record does not carry it.
	"""
	value = record.get(key)
	if value is None:
		return None
	return list(value)


#============================================
def build_repo_summary(record: dict) -> dict[str, RepoSummaryRow]:
	"""
	Merge the three groupings into one row per repository full name.

	Keys are created over all present groupings first, then each grouping
	overwrites only its own counter with the repository's totalCount.
	"""
	summary: dict[str, RepoSummaryRow] = {}
	for key, _counter in GROUPING_COUNTERS:
		grouping = get_grouping(record, key)
		if grouping is None:
			continue
		for element in grouping:
			repository = element["repository"]
			name = repository["nameWithOwner"]
			if name not in summary:
				summary[name] = RepoSummaryRow(url=repository["url"])
			else:
				summary[name].url = repository["url"]

	for key, counter in GROUPING_COUNTERS:
		grouping = get_grouping(record, key)
		if grouping is None:
			continue
		for element in grouping:
			name = element["repository"]["nameWithOwner"]
			total = element["contributions"]["totalCount"]
			setattr(summary[name], counter, total)
	return summary
