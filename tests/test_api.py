"""
Tests for the public package surface.
"""

import pytest

import amd_to_esm
from amd_to_esm import ConversionError, ParseError, StructuralConflictError, UnsupportedConstructError


def test_convert_shortcut():
  assert amd_to_esm.convert("define(function () { return 1; });") == " export default 1; "


def test_convert_forwards_options():
  src = "define(['a'], function (a) {\nreturn a;\n});"
  out = amd_to_esm.convert(src, beautify=True, indent_size=2)
  assert "export default a;" in out


def test_error_hierarchy():
  for cls in (ParseError, StructuralConflictError, UnsupportedConstructError):
    assert issubclass(cls, ConversionError)
  assert issubclass(ConversionError, ValueError)


def test_parse_error_position():
  with pytest.raises(ParseError) as exc_info:
    amd_to_esm.convert("var = ;")
  assert exc_info.value.line == 1


def test_version():
  assert amd_to_esm.__version__ == "0.1.0"
