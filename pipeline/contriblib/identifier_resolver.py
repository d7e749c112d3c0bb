from contriblib import graphql_documents
from contriblib.github_graphql import NotFoundError


#============================================
def resolve_authenticated_username(client) -> str:
	"""
	Return the login of the account the client's token belongs to.
	"""
	return client.get_authenticated_login()


#============================================
def resolve_user_id(client, username: str) -> str:
	"""
	Resolve a GitHub login to its user node id.
	"""
	data = client.graphql(
		graphql_documents.USER_NODE_ID,
		{"username": username},
		f"resolve user id {username}",
	)
	user = data.get("user")
	if not user or not user.get("id"):
		raise NotFoundError(f"GitHub user not found: {username}")
	return user["id"]


#============================================
def resolve_project_id(client, organization: str, owner: str, project_number: int) -> str:
	"""
	Resolve a ProjectV2 number to its node id.

	Organization projects are looked up when an organization is given,
	otherwise the project is looked up under the user `owner`.
	"""
	number = int(project_number)
	if organization:
		login = organization
		owner_key = "organization"
		query = graphql_documents.ORGANIZATION_PROJECT_NODE_ID
	else:
		login = owner
		owner_key = "user"
		query = graphql_documents.USER_PROJECT_NODE_ID
	data = client.graphql(
		query,
		{"login": login, "projectNumber": number},
		f"resolve project id {login}#{number}",
	)
	project_owner = data.get(owner_key) or {}
	project = project_owner.get("projectV2")
	if not project or not project.get("id"):
		raise NotFoundError(f"Project {number} not found under {login}")
	return project["id"]


#============================================
def split_repository_name(organization: str, owner: str, repo_name: str) -> tuple[str, str]:
	"""
	Split a repository reference into (owner login, repository name).
	"""
	text = (repo_name or "").strip()
	if "/" in text:
		repo_owner, name = text.split("/", 1)
		return repo_owner, name
	return (organization or owner), text


#============================================
def resolve_repository_id(client, organization: str, owner: str, repo_name: str) -> str:
	"""
	Resolve a repository name to its node id.
	"""
	repo_owner, name = split_repository_name(organization, owner, repo_name)
	if not repo_owner or not name:
		raise NotFoundError(f"Repository reference is incomplete: {repo_name!r}")
	data = client.graphql(
		graphql_documents.REPOSITORY_NODE_ID,
		{"owner": repo_owner, "name": name},
		f"resolve repository id {repo_owner}/{name}",
	)
	repository = data.get("repository")
	if not repository or not repository.get("id"):
		raise NotFoundError(f"Repository not found or not accessible: {repo_owner}/{name}")
	return repository["id"]
