"""
Output Formatting.

Optional re-indentation of the generated module code with `jsbeautifier`
(the Python port of js-beautify).
"""

import re

import jsbeautifier

_EXPORT_DEFAULT = re.compile(r"export\s+default\s+")


def beautify(code: str, indent_size: int = 4) -> str:
  """
  Re-indents JavaScript source.

  Args:
      code (str): JavaScript text.
      indent_size (int): Spaces per indentation level.

  Returns:
      str: The formatted text.
  """
  options = jsbeautifier.default_options()
  options.indent_size = indent_size
  return normalize_export_default(jsbeautifier.beautify(code, options))


def normalize_export_default(code: str) -> str:
  """
  Restores ``export default `` spacing mangled by the formatter.

  Only the first occurrence is touched; a module has one default export.
  """
  return _EXPORT_DEFAULT.sub("export default ", code, count=1)
