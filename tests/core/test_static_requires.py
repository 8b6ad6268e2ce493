"""
Tests for the "always invoked" Walk.

Verifies:
1. Requires at the factory's top level (through declarations, calls, binary
   expressions and plain blocks) are static.
2. Requires behind a branch, a loop, a logical operator or a nested function are not.
3. Nothing is static without a factory or outside of it.
"""

import pytest

from amd_to_esm.core.classifier import ModuleClassifier
from amd_to_esm.core.static_requires import is_always_invoked, is_static_require
from amd_to_esm.core.tree import parse_source
from tests.conftest import find_call


def _check(body: str) -> bool:
  tree = parse_source(f"define(function (require) {{ {body} }});")
  factory = ModuleClassifier().classify(tree).definition.factory
  return is_static_require(find_call(tree, "require"), factory)


@pytest.mark.parametrize(
  "body",
  [
    "var a = require('a');",
    "require('a');",
    "var a = foo(require('a'));",
    "var a = 'x' + require('a');",
    "{ var a = require('a'); }",
    "const a = require('a'), b = 2;",
  ],
)
def test_static(body):
  assert _check(body) is True


@pytest.mark.parametrize(
  "body",
  [
    "if (x) { var a = require('a'); }",
    "for (;;) { require('a'); }",
    "var a = x && require('a');",
    "var a = x ? require('a') : null;",
    "var f = function () { return require('a'); };",
    "var a = require('a').b;",
    "return require('a');",
  ],
)
def test_not_static(body):
  assert _check(body) is False


def test_outside_factory_is_not_static():
  tree = parse_source("var a = require('a');\ndefine(function (require) {});")
  factory = ModuleClassifier().classify(tree).definition.factory
  assert is_always_invoked(find_call(tree, "require"), factory) is False


def test_without_factory():
  tree = parse_source("var a = require('a');")
  assert is_always_invoked(find_call(tree, "require"), None) is False
