import os
from datetime import date
from datetime import timedelta

import yaml


#============================================
def get_repo_root() -> str:
	"""
	Return repository root based on this module location.
	"""
	module_dir = os.path.dirname(os.path.abspath(__file__))
	pipeline_dir = os.path.dirname(module_dir)
	repo_root = os.path.dirname(pipeline_dir)
	return repo_root


#============================================
def resolve_settings_path(path_text: str) -> str:
	"""
	Resolve settings path against cwd first, then repo root.
	"""
	if os.path.isabs(path_text):
		return path_text
	cwd_candidate = os.path.abspath(path_text)
	if os.path.isfile(cwd_candidate):
		return cwd_candidate
	repo_root = get_repo_root()
	repo_candidate = os.path.join(repo_root, path_text)
	return os.path.abspath(repo_candidate)


#============================================
def load_settings(path_text: str) -> tuple[dict, str]:
	"""
	Load YAML settings dict and return it with resolved path.
	"""
	resolved_path = resolve_settings_path(path_text)
	if not os.path.isfile(resolved_path):
		return {}, resolved_path
	with open(resolved_path, "r", encoding="utf-8") as handle:
		data = yaml.safe_load(handle.read())
	if data is None:
		return {}, resolved_path
	if not isinstance(data, dict):
		raise RuntimeError(f"Settings file must contain a mapping: {resolved_path}")
	return data, resolved_path


#============================================
def get_nested_value(settings: dict, keys: list[str], default_value):
	"""
	Read nested mapping value by key path.
	"""
	current = settings
	for key in keys:
		if not isinstance(current, dict):
			return default_value
		if key not in current:
			return default_value
		current = current[key]
	return current


#============================================
def get_setting_str(settings: dict, keys: list[str], default_value: str) -> str:
	"""
	Read a string setting from nested path with fallback.
	"""
	value = get_nested_value(settings, keys, default_value)
	if value is None:
		return default_value
	return str(value).strip()


#============================================
def get_setting_int(settings: dict, keys: list[str], default_value: int) -> int:
	"""
	Read an integer setting from nested path with fallback.
	"""
	value = get_nested_value(settings, keys, default_value)
	if value is None:
		return default_value
	try:
		return int(value)
	except ValueError as error:
		raise RuntimeError(f"Invalid integer for setting path {'.'.join(keys)}: {value}") from error


#============================================
def get_setting_list(settings: dict, keys: list[str]) -> list[str]:
	"""
	Read a list of non-empty strings; a single string becomes a one-item list.
	"""
	value = get_nested_value(settings, keys, [])
	if value is None:
		return []
	if isinstance(value, str):
		value = [value]
	if not isinstance(value, list):
		raise RuntimeError(f"Invalid list for setting path {'.'.join(keys)}: {value}")
	items = []
	for item in value:
		text = str(item or "").strip()
		if text:
			items.append(text)
	return items


#============================================
def get_github_tokens(settings: dict, cli_tokens: list[str] | None = None) -> list[str]:
	"""
	Resolve tokens from CLI, then settings.yaml, then GITHUB_TOKEN.
	"""
	tokens = [token.strip() for token in (cli_tokens or []) if token and token.strip()]
	if tokens:
		return tokens
	tokens = get_setting_list(settings, ["github", "tokens"])
	if tokens:
		return tokens
	env_token = (os.environ.get("GITHUB_TOKEN", "") or "").strip()
	if env_token:
		return [env_token]
	return []


#============================================
def resolve_default_start_date(settings: dict, today: date | None = None) -> str:
	"""
	Return today minus report.window_days as YYYY-MM-DD.
	"""
	window_days = get_setting_int(settings, ["report", "window_days"], 7)
	if window_days < 1:
		raise RuntimeError("report.window_days must be >= 1")
	value = today or date.today()
	start = value - timedelta(days=window_days)
	return start.isoformat()
