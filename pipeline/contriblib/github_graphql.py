import threading
from datetime import datetime
from datetime import timezone

import requests
from github import Auth
from github import Github
from github.GithubException import BadCredentialsException
from github.GithubException import GithubException
from github.GithubException import RateLimitExceededException


DEFAULT_GRAPHQL_URL = "https://api.github.com/graphql"
DEFAULT_TIMEOUT_SECONDS = 30


#============================================
class GitHubApiError(RuntimeError):
	"""
	Base error for failed GitHub API round trips.
	"""


#============================================
class AuthenticationError(GitHubApiError):
	"""
	Raised when the credential is invalid or expired.
	"""


#============================================
class NotFoundError(GitHubApiError):
	"""
	Raised when a user, project or repository name does not resolve.
	"""


#============================================
class RateLimitError(GitHubApiError):
	"""
	Raised when GitHub API rate limits block further requests.
	"""


#============================================
class TransportError(GitHubApiError):
	"""
	Raised for network failures and unexpected API responses.
	"""


#============================================
class GitHubClient:
	"""
	GraphQL client for one credential, with PyGithub for identity lookups.
	"""

	def __init__(
		self,
		token: str,
		log_fn=None,
		api_url: str = DEFAULT_GRAPHQL_URL,
		timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
	):
		if not token:
			raise AuthenticationError("A GitHub token is required.")
		self.log_fn = log_fn
		self.api_url = api_url
		self.timeout_seconds = int(timeout_seconds)
		self._token = token
		self._api_call_count = 0
		self._api_calls_by_context: dict[str, int] = {}
		self._counter_lock = threading.Lock()
		self.client = self._build_github_client(Github, token)

	#============================================
	def _build_github_client(self, github_class, token: str):
		"""
		Create Github client with retry disabled when supported.
		"""
		try:
			return github_class(auth=Auth.Token(token), retry=None)
		except TypeError:
			return github_class(auth=Auth.Token(token))

	#============================================
	def log(self, message: str) -> None:
		"""
		Emit one log line when logger is configured.
		"""
		if self.log_fn is not None:
			self.log_fn(message)

	#============================================
	def record_api_call(self, context: str) -> None:
		"""
		Track one outbound GitHub API call.
		"""
		with self._counter_lock:
			self._api_call_count += 1
			if context not in self._api_calls_by_context:
				self._api_calls_by_context[context] = 0
			self._api_calls_by_context[context] += 1

	#============================================
	def api_usage_snapshot(self) -> dict:
		"""
		Return API call counters for reporting.
		"""
		with self._counter_lock:
			return {
				"api_call_count": self._api_call_count,
				"api_calls_by_context": dict(self._api_calls_by_context),
			}

	#============================================
	def request_headers(self) -> dict[str, str]:
		return {
			"Authorization": f"Bearer {self._token}",
			"Content-Type": "application/json",
			"Accept": "application/vnd.github+json",
		}

	#============================================
	def graphql(self, query: str, variables: dict, context: str) -> dict:
		"""
		Execute one GraphQL document and return its data payload.
		"""
		self.log(f"GitHub GraphQL [{context}]")
		self.record_api_call(context)
		try:
			response = requests.post(
				self.api_url,
				json={"query": query, "variables": variables},
				headers=self.request_headers(),
				timeout=self.timeout_seconds,
			)
		except requests.RequestException as error:
			raise TransportError(f"GitHub request failed while {context}: {error}") from error
		self.raise_for_status(response, context)
		try:
			payload = response.json()
		except ValueError as error:
			raise TransportError(f"GitHub returned invalid JSON while {context}.") from error
		if not isinstance(payload, dict):
			raise TransportError(f"GitHub returned an unexpected payload while {context}.")
		errors = payload.get("errors")
		if errors:
			self.raise_from_graphql_errors(errors, context)
		data = payload.get("data")
		if not isinstance(data, dict):
			raise TransportError(f"GitHub returned no data while {context}.")
		return data

	#============================================
	def raise_for_status(self, response, context: str) -> None:
		"""
		Map HTTP failure statuses onto the client error types.
		"""
		status = response.status_code
		if status < 400:
			return
		if status == 401:
			raise AuthenticationError(
				f"GitHub rejected the credential while {context} (HTTP 401)."
			)
		if status == 404:
			raise NotFoundError(f"GitHub returned HTTP 404 while {context}.")
		headers = response.headers or {}
		remaining = headers.get("X-RateLimit-Remaining")
		if status == 429 or (status == 403 and remaining == "0"):
			reset_text = format_rate_limit_reset(headers.get("X-RateLimit-Reset"))
			raise RateLimitError(
				"GitHub API rate limit exceeded while "
				+ f"{context}; remaining={remaining or 'unknown'}; reset_at={reset_text}."
			)
		body_text = (response.text or "")[:200]
		raise TransportError(f"GitHub API error {status} while {context}: {body_text}")

	#============================================
	def raise_from_graphql_errors(self, errors: list, context: str) -> None:
		"""
		Raise the error type matching the first GraphQL error entry.
		"""
		messages = []
		error_types = set()
		for entry in errors:
			if not isinstance(entry, dict):
				messages.append(str(entry))
				continue
			messages.append(str(entry.get("message", "")).strip())
			error_type = str(entry.get("type", "")).strip().upper()
			if error_type:
				error_types.add(error_type)
		message_text = "; ".join(message for message in messages if message)
		detail = f"GraphQL error while {context}: {message_text}"
		if "NOT_FOUND" in error_types:
			raise NotFoundError(detail)
		if "RATE_LIMITED" in error_types:
			raise RateLimitError(detail)
		if "UNAUTHENTICATED" in error_types:
			raise AuthenticationError(detail)
		raise TransportError(detail)

	#============================================
	def get_authenticated_login(self) -> str:
		"""
		Return the login name of the account owning this token.
		"""
		context = "GET /user"
		self.log(f"GitHub REST [{context}]")
		self.record_api_call(context)
		try:
			login = self.client.get_user().login
		except BadCredentialsException as error:
			raise AuthenticationError(
				"GitHub rejected the credential while resolving the authenticated user."
			) from error
		except GithubException as error:
			self.raise_from_github_error(error, context)
		except requests.RequestException as error:
			raise TransportError(f"GitHub request failed while {context}: {error}") from error
		if not login:
			raise AuthenticationError("GitHub returned no login for the authenticated user.")
		return str(login)

	#============================================
	def raise_from_github_error(self, error: GithubException, context: str) -> None:
		"""
		Re-raise a PyGithub exception as one of the client error types.
		"""
		status = getattr(error, "status", None)
		if status == 401:
			raise AuthenticationError(
				f"GitHub rejected the credential while {context} (HTTP 401)."
			) from error
		if status == 404:
			raise NotFoundError(f"GitHub returned HTTP 404 while {context}.") from error
		headers = getattr(error, "headers", None) or {}
		remaining = headers.get("x-ratelimit-remaining", headers.get("X-RateLimit-Remaining"))
		if (
			isinstance(error, RateLimitExceededException)
			or status == 429
			or (status == 403 and remaining == "0")
		):
			reset_text = format_rate_limit_reset(
				headers.get("x-ratelimit-reset", headers.get("X-RateLimit-Reset"))
			)
			raise RateLimitError(
				f"GitHub API rate limit exceeded while {context} (HTTP {status}); "
				+ f"reset_at={reset_text}."
			) from error
		if status == 403:
			raise AuthenticationError(
				f"GitHub denied the credential access while {context} (HTTP 403): {error}"
			) from error
		raise TransportError(f"GitHub API error {status} while {context}: {error}") from error


#============================================
def format_rate_limit_reset(reset_value) -> str:
	"""
	Render an X-RateLimit-Reset epoch header as an ISO timestamp.
	"""
	if reset_value is None:
		return "unknown"
	try:
		reset_time = datetime.fromtimestamp(float(reset_value), tz=timezone.utc)
	except (TypeError, ValueError, OverflowError):
		return "unknown"
	return reset_time.isoformat()
