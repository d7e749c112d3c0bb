import threading
import time
from datetime import datetime
from datetime import timezone

import pytest

from contriblib import graphql_documents
from contriblib import issue_publisher
from contriblib.github_graphql import NotFoundError
from contriblib.github_graphql import TransportError


#============================================
class StubClient:
	"""
	Client stub returning canned payloads per GraphQL document.
	"""

	def __init__(self, failures: dict | None = None, repository_delay: float = 0.0):
		self.failures = failures or {}
		self.repository_delay = repository_delay
		self.events = []
		self.variables = {}
		self.log_lines = []
		self._lock = threading.Lock()

	def log(self, message: str) -> None:
		self.log_lines.append(message)

	def _record(self, event: str) -> None:
		with self._lock:
			self.events.append(event)

	def graphql(self, query: str, variables: dict, context: str) -> dict:
		name = {
			graphql_documents.USER_NODE_ID: "user",
			graphql_documents.ORGANIZATION_PROJECT_NODE_ID: "project",
			graphql_documents.USER_PROJECT_NODE_ID: "project",
			graphql_documents.REPOSITORY_NODE_ID: "repository",
			graphql_documents.CREATE_ISSUE: "create",
			graphql_documents.ADD_ISSUE_TO_PROJECT: "link",
		}[query]
		self._record(f"{name}:start")
		self.variables[name] = variables
		if name == "repository" and self.repository_delay:
			time.sleep(self.repository_delay)
		if name in self.failures:
			self._record(f"{name}:failed")
			raise self.failures[name]
		self._record(f"{name}:done")
		if name == "user":
			return {"user": {"id": "U_1"}}
		if name == "project":
			return {"organization": {"projectV2": {"id": "PVT_1"}}}
		if name == "repository":
			return {"repository": {"id": "R_1"}}
		if name == "create":
			return {"createIssue": {"issue": {"id": "I_1", "number": 42, "url": "https://github.com/org/reports/issues/42"}}}
		return {"addProjectV2ItemById": {"item": {"id": "PVTI_1"}}}


#============================================
def fixed_clock() -> datetime:
	return datetime(2024, 3, 15, 23, 59, tzinfo=timezone.utc)


#============================================
def publish(client: StubClient, project_number=3, assignee_id=None):
	return issue_publisher.create_issue(
		client,
		"org",
		"org",
		"org/reports",
		"octocat",
		project_number,
		"## Summary\n",
		clock=fixed_clock,
		assignee_id=assignee_id,
	)


#============================================
def test_build_issue_title() -> None:
	"""
	Title should embed the YYYY-MM-DD date.
	"""
	assert issue_publisher.build_issue_title(fixed_clock()) == "Weekly GitHub Contributions (2024-03-15)"


#============================================
def test_create_issue_full_pipeline() -> None:
	"""
	Issue should be created with resolved ids and linked to the project.
	"""
	client = StubClient()
	issue = publish(client)
	assert issue == issue_publisher.CreatedIssue(
		id="I_1",
		number=42,
		url="https://github.com/org/reports/issues/42",
		title="Weekly GitHub Contributions (2024-03-15)",
		project_item_id="PVTI_1",
	)
	assert client.variables["create"] == {
		"repositoryId": "R_1",
		"userId": "U_1",
		"title": "Weekly GitHub Contributions (2024-03-15)",
		"body": "## Summary\n",
	}
	assert client.variables["link"] == {"projectId": "PVT_1", "issueId": "I_1"}
	assert client.events[-4:] == ["create:start", "create:done", "link:start", "link:done"]


#============================================
def test_create_waits_for_all_resolutions() -> None:
	"""
	The create mutation should start only after every lookup finished.
	"""
	client = StubClient(repository_delay=0.05)
	publish(client)
	create_index = client.events.index("create:start")
	for name in ("user", "project", "repository"):
		assert client.events.index(f"{name}:done") < create_index


#============================================
@pytest.mark.parametrize("failing", ["user", "project", "repository"])
def test_failed_resolution_prevents_create(failing: str) -> None:
	"""
	Any failed lookup should raise and skip both mutations.
	"""
	client = StubClient(failures={failing: NotFoundError(f"{failing} missing")})
	with pytest.raises(NotFoundError):
		publish(client)
	assert "create:start" not in client.events
	assert "link:start" not in client.events


#============================================
def test_project_link_failure_is_partial_success() -> None:
	"""
	A failed project link should raise ProjectLinkError carrying the issue.
	"""
	client = StubClient(failures={"link": TransportError("boom")})
	with pytest.raises(issue_publisher.ProjectLinkError) as excinfo:
		publish(client)
	assert excinfo.value.issue.number == 42
	assert excinfo.value.issue.project_item_id is None
	assert isinstance(excinfo.value.__cause__, TransportError)


#============================================
def test_create_failure_is_not_project_link_error() -> None:
	"""
	A failed create mutation should propagate as-is.
	"""
	client = StubClient(failures={"create": TransportError("boom")})
	with pytest.raises(TransportError) as excinfo:
		publish(client)
	assert not isinstance(excinfo.value, issue_publisher.ProjectLinkError)
	assert "link:start" not in client.events


#============================================
def test_no_project_number_skips_project() -> None:
	"""
	A zero project number should skip project lookup and linking.
	"""
	client = StubClient()
	issue = publish(client, project_number=0)
	assert issue.project_item_id is None
	assert "project:start" not in client.events
	assert "link:start" not in client.events


#============================================
def test_supplied_assignee_id_skips_user_lookup() -> None:
	"""
	A supplied assignee id should be used without resolving the username.
	"""
	client = StubClient()
	publish(client, assignee_id="U_given")
	assert "user:start" not in client.events
	assert client.variables["create"]["userId"] == "U_given"


#============================================
def test_parse_created_issue_requires_id() -> None:
	"""
	A createIssue payload without an issue should raise TransportError.
	"""
	with pytest.raises(TransportError):
		issue_publisher.parse_created_issue({"createIssue": None}, "title")
