import dataclasses
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from datetime import timezone

from contriblib import graphql_documents
from contriblib import identifier_resolver
from contriblib.github_graphql import GitHubApiError
from contriblib.github_graphql import TransportError


ISSUE_TITLE_FORMAT = "Weekly GitHub Contributions ({date})"


#============================================
@dataclasses.dataclass(frozen=True)
class CreatedIssue:
	id: str
	number: int
	url: str
	title: str
	project_item_id: str | None = None


#============================================
class ProjectLinkError(GitHubApiError):
	"""
	Raised when the issue was created but adding it to the project failed.
	"""

	def __init__(self, message: str, issue: CreatedIssue):
		super().__init__(message)
		self.issue = issue


#============================================
def utc_now() -> datetime:
	"""
	Return UTC now as a timezone-aware datetime.
	"""
	return datetime.now(timezone.utc)


#============================================
def build_issue_title(now: datetime) -> str:
	"""
	Build the weekly issue title for one date.
	"""
	return ISSUE_TITLE_FORMAT.format(date=now.strftime("%Y-%m-%d"))


#============================================
def resolve_issue_targets(
	client,
	organization: str,
	owner: str,
	repository: str,
	username: str,
	project_number,
	assignee_id: str | None = None,
) -> tuple[str, str | None, str]:
	"""
	Resolve (assignee id, project id, repository id) concurrently.

	Every lookup finishes before this returns; the first failure in that
	order is raised.
	"""
	with ThreadPoolExecutor(max_workers=3) as executor:
		user_future = None
		if not assignee_id:
			user_future = executor.submit(identifier_resolver.resolve_user_id, client, username)
		project_future = None
		if project_number:
			project_future = executor.submit(
				identifier_resolver.resolve_project_id,
				client,
				organization,
				owner,
				project_number,
			)
		repository_future = executor.submit(
			identifier_resolver.resolve_repository_id,
			client,
			organization,
			owner,
			repository,
		)
	user_id = assignee_id or user_future.result()
	project_id = project_future.result() if project_future is not None else None
	repository_id = repository_future.result()
	return user_id, project_id, repository_id


#============================================
def parse_created_issue(data: dict, title: str) -> CreatedIssue:
	"""
	Read the created issue out of a createIssue mutation payload.
	"""
	issue = (data.get("createIssue") or {}).get("issue")
	if not issue or not issue.get("id"):
		raise TransportError("createIssue returned no issue.")
	return CreatedIssue(
		id=issue["id"],
		number=int(issue.get("number") or 0),
		url=str(issue.get("url") or ""),
		title=title,
	)


#============================================
def create_issue(
	client,
	organization: str,
	owner: str,
	repository: str,
	username: str,
	project_number,
	body: str,
	clock=None,
	assignee_id: str | None = None,
) -> CreatedIssue:
	"""
	Create the weekly report issue and add it to a project board.

	Node ids are resolved concurrently and all of them must succeed before
	the issue is created. The project link runs after creation; when it
	fails, ProjectLinkError carries the issue that was created. A falsy
	project_number skips the project entirely.
	"""
	now = clock() if clock is not None else utc_now()
	title = build_issue_title(now)

	user_id, project_id, repository_id = resolve_issue_targets(
		client,
		organization,
		owner,
		repository,
		username,
		project_number,
		assignee_id=assignee_id,
	)

	data = client.graphql(
		graphql_documents.CREATE_ISSUE,
		{
			"repositoryId": repository_id,
			"userId": user_id,
			"title": title,
			"body": body,
		},
		f"create issue in {repository}",
	)
	issue = parse_created_issue(data, title)
	client.log(f"Created issue #{issue.number}: {issue.url}")
	if project_id is None:
		return issue

	try:
		link_data = client.graphql(
			graphql_documents.ADD_ISSUE_TO_PROJECT,
			{"projectId": project_id, "issueId": issue.id},
			f"add issue #{issue.number} to project {project_number}",
		)
	except GitHubApiError as error:
		raise ProjectLinkError(
			f"Issue {issue.url} was created but adding it to project "
			+ f"{project_number} failed: {error}",
			issue,
		) from error
	item = (link_data.get("addProjectV2ItemById") or {}).get("item") or {}
	if not item.get("id"):
		raise ProjectLinkError(
			f"Issue {issue.url} was created but project {project_number} returned no item.",
			issue,
		)
	linked_issue = dataclasses.replace(issue, project_item_id=item["id"])
	client.log(f"Added issue #{issue.number} to project {project_number}")
	return linked_issue
