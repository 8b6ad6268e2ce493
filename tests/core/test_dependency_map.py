"""
Tests for Dependency Map Construction.

Verifies:
1. Array dependencies pair with factory parameters by position.
2. CommonJS extraction is enabled by a local ``require`` binding.
3. Static requires assigned to a variable are hoisted; others are renamed.
4. Without a local ``require``, every synchronous require is renamed.
5. Side-effect requires add binding-less entries after everything else.
"""

import pytest

from amd_to_esm.core.classifier import ModuleClassifier
from amd_to_esm.core.dependencies import DependencyMap, build_rewrite_plan, has_local_require
from amd_to_esm.core.tree import parse_source
from amd_to_esm.errors import UnsupportedConstructError


def _plan(src: str, logical: bool = False):
  return build_rewrite_plan(ModuleClassifier().classify(parse_source(src)), logical)


def test_dependency_map_keeps_first_binding():
  deps = DependencyMap()
  deps.add("a")
  deps.add("b", "b")
  deps.add("a", "alpha")
  deps.add("a", "other")

  assert deps.items() == [("a", "alpha"), ("b", "b")]
  assert deps.path_for("b") == "b"
  assert "a" in deps and len(deps) == 2


def test_array_dependencies_by_position():
  plan = _plan("define(['a', './b', 'c'], function (a, b) { return a; });")
  assert plan.dependencies.as_dict() == {"a": "a", "./b": "b", "c": None}
  assert plan.commonjs is False


def test_non_literal_dependency_rejected():
  with pytest.raises(UnsupportedConstructError):
    _plan("define([name], function (x) {});")


@pytest.mark.parametrize(
  "src,expected",
  [
    ("define(function (require) {});", True),
    ("define(['require', 'a'], function (require, a) {});", True),
    ("define(['a'], function (a, require) {});", True),
    ("define(['require'], function (r) {});", True),
    ("define(['a'], function (require) {});", False),
    ("define(function (req) {});", False),
  ],
)
def test_has_local_require(src, expected):
  definition = ModuleClassifier().classify(parse_source(src)).definition
  assert has_local_require(definition) is expected


def test_require_dependency_not_imported():
  plan = _plan("define(['require', 'a'], function (require, a) { return a; });")
  assert plan.dependencies.as_dict() == {"a": "a"}


def test_commonjs_declarator_hoisted():
  src = """
define(function (require) {
  var x = require('a'), y = 2;
  return x;
});
"""
  plan = _plan(src)

  assert plan.commonjs is True
  assert plan.dependencies.as_dict() == {"a": "x"}
  assert plan.renames == []
  (declaration, removed), = plan.declarations.items()
  assert declaration.type == "VariableDeclaration"
  assert [d.id.name for d in removed] == ["x"]


def test_commonjs_expression_require_renamed():
  plan = _plan("define(function (require) { var v = 1 + require('lib/a'); });")
  assert plan.dependencies.as_dict() == {"lib/a": "$__lib_a"}
  assert [name for _, name in plan.renames] == ["$__lib_a"]


def test_commonjs_bare_statement_removed():
  plan = _plan("define(function (require) { require('polyfill'); });")
  assert plan.dependencies.as_dict() == {"polyfill": None}
  assert len(plan.removed_statements) == 1


def test_commonjs_conditional_require_renamed_in_place():
  plan = _plan("define(function (require) { if (x) { var y = require('b'); } });")
  assert plan.dependencies.as_dict() == {"b": "$__b"}
  assert [name for _, name in plan.renames] == ["$__b"]
  assert plan.declarations == {}


def test_commonjs_conditional_require_uses_hoisted_binding():
  plan = _plan("define(function (require) { if (x) { var y = require('b'); } var z = require('b'); });")
  assert plan.dependencies.as_dict() == {"b": "z"}
  assert [name for _, name in plan.renames] == ["z"]
  assert len(plan.declarations) == 1


def test_commonjs_reuses_existing_binding():
  src = "define(['a', 'require'], function (a, require) { var other = require('a'); });"
  plan = _plan(src)

  assert plan.dependencies.as_dict() == {"a": "a"}
  assert [name for _, name in plan.renames] == ["a"]
  assert plan.declarations == {}


def test_without_local_require_everything_is_renamed():
  src = "define(['a'], function (a) { if (a) { var b = require('lib/b'); } var c = require('c'); });"
  plan = _plan(src)

  assert plan.commonjs is False
  assert plan.dependencies.as_dict() == {"a": "a", "lib/b": "$__lib_b", "c": "$__c"}
  assert len(plan.renames) == 2


def test_side_effect_requires_last():
  src = "define(['a'], function (a) { require(['poly', 'a']); var b = require('b'); });"
  plan = _plan(src)

  assert list(plan.dependencies) == ["a", "b", "poly"]
  assert plan.dependencies.binding("poly") is None
  assert len(plan.side_effect_requires) == 1


def test_generated_names_avoid_declared_names():
  src = "define(function () { var user = 1; var u = require('models/user'); });"
  plan = _plan(src, logical=True)
  assert plan.dependencies.as_dict() == {"models/user": "user1"}
