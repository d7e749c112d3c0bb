from concurrent.futures import ThreadPoolExecutor
from datetime import date
from datetime import datetime
from datetime import timezone

from contriblib import graphql_documents
from contriblib import identifier_resolver
from contriblib.github_graphql import GitHubClient
from contriblib.github_graphql import NotFoundError


#============================================
def normalize_start_date(start_date) -> str:
	"""
	Normalize a date, datetime or ISO-8601 string to a GraphQL DateTime.

	Plain dates are taken as midnight UTC.
	"""
	if isinstance(start_date, datetime):
		value = start_date
	elif isinstance(start_date, date):
		value = datetime(start_date.year, start_date.month, start_date.day, tzinfo=timezone.utc)
	else:
		text = str(start_date or "").strip()
		if not text:
			raise ValueError("start date is required")
		try:
			value = datetime.fromisoformat(text.replace("Z", "+00:00"))
		except ValueError as error:
			raise ValueError(f"Invalid ISO-8601 start date: {text}") from error
	if value.tzinfo is None:
		value = value.replace(tzinfo=timezone.utc)
	return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


#============================================
def fetch_user_contributions(client, start_date_text: str) -> dict:
	"""
	Resolve the token's user, then query its contributions collection.
	"""
	username = identifier_resolver.resolve_authenticated_username(client)
	data = client.graphql(
		graphql_documents.CONTRIBUTIONS,
		{"username": username, "startDate": start_date_text},
		f"fetch contributions {username}",
	)
	user = data.get("user") or {}
	collection = user.get("contributionsCollection")
	if collection is None:
		raise NotFoundError(f"No contributions collection returned for {username}")
	return collection


#============================================
def fetch_contributions(
	tokens: list[str],
	start_date,
	client_factory=GitHubClient,
	max_workers: int | None = None,
	log_fn=None,
) -> list[dict]:
	"""
	Fetch one contribution record per token, in token order.

	Each token runs on its own worker. When any token fails, every worker
	still finishes and the first failure in token order is raised.
	"""
	token_list = list(tokens)
	if not token_list:
		return []
	start_date_text = normalize_start_date(start_date)
	worker_count = max_workers or len(token_list)

	def fetch_one(token: str) -> dict:
		client = client_factory(token, log_fn=log_fn)
		return fetch_user_contributions(client, start_date_text)

	with ThreadPoolExecutor(max_workers=worker_count) as executor:
		futures = [executor.submit(fetch_one, token) for token in token_list]
	records = [future.result() for future in futures]
	return records
