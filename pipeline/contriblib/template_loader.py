import os
import re


TOKEN_RE = re.compile(r"\{\{\s*([A-Za-z0-9_]+)\s*\}\}")

_TEMPLATE_CACHE = {}


#============================================
def get_template_root() -> str:
	"""
	Return the directory holding the markdown templates.
	"""
	module_dir = os.path.dirname(os.path.abspath(__file__))
	return os.path.join(module_dir, "templates")


#============================================
def load_template(template_name: str) -> str:
	"""
	Load a markdown template from contriblib/templates/.
	"""
	if not template_name:
		raise ValueError("template_name is required")
	path = os.path.join(get_template_root(), template_name)
	if path in _TEMPLATE_CACHE:
		return _TEMPLATE_CACHE[path]
	if not os.path.exists(path):
		raise FileNotFoundError(f"Template file not found: {path}")
	with open(path, "r", encoding="utf-8") as handle:
		text = handle.read()
	# template files end with one newline the rendered fragment does not carry
	text = text.rstrip("\n")
	_TEMPLATE_CACHE[path] = text
	return text


#============================================
def render_template(template: str, values: dict) -> str:
	"""
	Replace {{token}} placeholders with supplied values in one pass.

	Unknown tokens render as empty text; values are inserted verbatim.
	"""
	if not template:
		return ""

	def replace(match) -> str:
		value = values.get(match.group(1))
		if value is None:
			return ""
		return str(value)

	return TOKEN_RE.sub(replace, template)
