"""
Tests for the optional formatting pass.
"""

from amd_to_esm.core.formatting import beautify, normalize_export_default


def test_normalize_export_default():
  assert normalize_export_default("export   default\nfoo;") == "export default foo;"


def test_normalize_touches_first_only():
  code = "export  default a; var s = 'export  default b';"
  assert normalize_export_default(code) == "export default a; var s = 'export  default b';"


def test_beautify_indent_size():
  out = beautify("function f() {\nreturn 1;\n}", indent_size=2)
  assert "\n  return 1;" in out


def test_beautify_keeps_export_default():
  out = beautify("import a from 'a'; export default   a;")
  assert "export default a;" in out
