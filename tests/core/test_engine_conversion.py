"""
End-to-end tests for the Conversion Engine.

Covers the documented scenarios plus the general properties:
identity on non-AMD input, one import per module path, unique binding names,
and conditional requires never being hoisted.
"""

import re

import pytest

from amd_to_esm import ConversionEngine, RuntimeConfig, convert
from amd_to_esm.errors import ParseError, StructuralConflictError, UnsupportedConstructError


def _imports(code: str):
  return re.findall(r"import (?:\S+ from )?'[^']*';", code)


def test_array_dependencies():
  out = convert("define(['a', './b'], function (a, b) { return a.x; });")
  assert out == "import a from 'a';\nimport b from './b'; export default a.x; "


def test_commonjs_require_hoisted():
  out = convert("define(function (require) { var x = require('a'); return x; });")
  assert out.startswith("import x from 'a';")
  assert "export default x;" in out
  assert "require" not in out


def test_standalone_side_effect_require():
  assert convert("require(['a']);") == "import 'a';"


def test_side_effect_require_keeps_surrounding_code():
  src = "var before = 1;\nrequire(['a', 'b']);\n"
  assert convert(src) == "var before = 1;\nimport 'a';\nimport 'b';\n"


def test_named_define_rejected():
  with pytest.raises(UnsupportedConstructError, match="named define"):
    convert("define('named', function () {});")


def test_identifier_factory_rejected():
  with pytest.raises(UnsupportedConstructError):
    convert("define(['a'], factory);")


def test_double_define_rejected():
  with pytest.raises(StructuralConflictError):
    convert("define(function () {});\ndefine(function () {});")


def test_dynamic_require_rejected():
  with pytest.raises(UnsupportedConstructError, match="Dynamic module names"):
    convert("define(function (require) { var m = require(name + '.js'); });")


def test_invalid_javascript():
  with pytest.raises(ParseError):
    convert("define(function () {")


@pytest.mark.parametrize(
  "src",
  [
    "",
    "var a = 1;\n// untouched\nfoo(bar);\n",
    "function load(require) { return require(name); }",
    "  /* spacing */  x  =  y ;",
  ],
)
def test_non_amd_input_unchanged(src):
  assert convert(src) == src


def test_untouched_text_preserved():
  src = "// header\ndefine(['a'], function (a) {\n  // keep me\n  return a;\n});\n"
  assert convert(src) == "// header\nimport a from 'a';\n  // keep me\n  export default a;\n\n"


def test_one_import_per_module_path():
  src = """
define(['a', 'b'], function (a, b) {
  var c = require('c');
  var again = require('c');
  var alsoA = require('a');
  require(['d', 'a']);
  return [a, b, c, again, alsoA];
});
"""
  out = convert(src)
  imports = _imports(out)
  paths = [re.search(r"'(.*)'", line).group(1) for line in imports]

  assert sorted(paths) == ["a", "b", "c", "d"]
  assert "import a from 'a';" in imports
  assert "import 'd';" in imports


def test_binding_names_are_unique():
  src = "define(function () { var p = require('x/y-z'); var q = require('x_y/z'); return p + q; });"
  out = convert(src)

  assert "import $__x_y_z from 'x/y-z';" in out
  assert "import $__x_y_z1 from 'x_y/z';" in out
  assert "var p = $__x_y_z;" in out
  assert "var q = $__x_y_z1;" in out


def test_conditional_require_not_hoisted():
  src = "define(function (require) { if (flag) { var y = require('b'); } var z = require('b'); return z; });"
  out = convert(src)

  assert _imports(out) == ["import z from 'b';"]
  assert "if (flag) { var y = z; }" in out
  assert "var z" not in out
  assert "require" not in out


def test_conditional_require_renamed_without_hoisting():
  src = "define(function (require) { var a = require('a'); if (flag) { var b = require('b'); } return a; });"
  out = convert(src)

  assert _imports(out) == ["import a from 'a';", "import $__b from 'b';"]
  assert "if (flag) { var b = $__b; }" in out
  assert "require" not in out


@pytest.mark.parametrize(
  "src,expected",
  [
    ("define(function (require) { return require('a'); });", "import $__a from 'a'; export default $__a; "),
    ("define(function (require) { var a; a = require('a'); });", "import $__a from 'a'; var a; a = $__a; "),
  ],
)
def test_commonjs_requires_outside_declarations(src, expected):
  assert convert(src) == expected


def test_regenerated_declaration():
  src = "define(function (require) { var x = require('a'), y = 2; return x + y; });"
  assert convert(src) == "import x from 'a'; var y = 2; export default x + y; "


def test_require_in_expression_renamed():
  src = "define(function (require) { var v = 1 + require('lib/a'); return v; });"
  out = convert(src)

  assert out.startswith("import $__lib_a from 'lib/a';")
  assert "var v = 1 + $__lib_a;" in out


def test_logical_names():
  src = "define(function () { var a = require('../utils/date-helper.js'); var b = require('lib/date-helper'); });"
  out = convert(src, logical_name=True)

  assert "import date_helper from '../utils/date-helper.js';" in out
  assert "import date_helper1 from 'lib/date-helper';" in out


def test_generated_name_avoids_function_declaration():
  src = (
    "define(function () { function date_helper() {} "
    "return date_helper(require('../utils/date-helper.js')); });"
  )
  out = convert(src, logical_name=True)

  assert "import date_helper1 from '../utils/date-helper.js';" in out
  assert "export default date_helper(date_helper1);" in out


def test_generated_name_avoids_class_declaration():
  src = "define(function () { class $__widget {} return require('widget'); });"
  out = convert(src)

  assert "import $__widget1 from 'widget';" in out
  assert "export default $__widget1;" in out


def test_logical_name_camel_case_alias():
  src = "define(function () { var a = require('../utils/date-helper.js'); });"
  assert "import date_helper from" in convert(src, logicalName=True)


def test_path_names_by_default():
  src = "define(function () { var a = require('../utils/date-helper.js'); });"
  (line,) = _imports(convert(src))

  assert line.startswith("import $__")
  assert "utils_date_helper_js from" in line


def test_require_with_callback_is_definition():
  src = "require(['a', 'b'], function (a) { a.start(); });"
  assert convert(src) == "import a from 'a';\nimport 'b'; a.start(); "


def test_beautify():
  src = "define(['a'], function (a) {\n        var x = a.y;\n  return   x;\n});"
  out = convert(src, beautify=True)

  assert out.startswith("import a from 'a';")
  assert "\nvar x = a.y;" in out
  assert "export default x;" in out


class TestEngineRun:
  def test_success_result(self):
    engine = ConversionEngine(RuntimeConfig())
    res = engine.run("define(['a'], function (a) { return a; });")

    assert res.success and res.changed
    assert not res.has_errors
    assert res.imports == {"a": "a"}
    assert any(e["type"] == "phase_start" for e in res.trace_events)

  def test_unchanged_result(self):
    res = ConversionEngine().run("var a = 1;")

    assert res.success
    assert res.changed is False
    assert res.code == "var a = 1;"

  def test_failure_is_reported(self):
    src = "define('named', function () {});"
    res = ConversionEngine().run(src)

    assert res.success is False
    assert res.code == src
    assert res.errors == ["Found a named define() - this is not supported."]

  def test_overrides(self):
    engine = ConversionEngine(RuntimeConfig(), logical_name=True)
    assert engine.config.logical_name is True

  def test_engine_is_reusable(self):
    engine = ConversionEngine()
    src = "define(function () { var a = require('x'); });"
    assert engine.convert(src) == engine.convert(src)

  def test_long_expression_chain(self):
    src = "define(function () { var x = " + "+".join(["1"] * 2000) + "; return x; });"
    res = ConversionEngine().run(src)

    assert res.success
    assert res.code.endswith("; export default x; ")
