"""
Tests for the Span Tree.

Verifies:
1. Node spans index the original source.
2. Parent links are set for every child.
3. Pre-order traversal follows source order.
4. Invalid JavaScript raises ParseError with a position.
"""

import pytest

from amd_to_esm.core.tree import JsVisitor, parse_source
from amd_to_esm.errors import ConversionError, ParseError
from tests.conftest import find_call


def test_spans_match_source():
  src = "var x = require('a');"
  tree = parse_source(src)
  call = find_call(tree, "require")

  assert tree.text(call) == "require('a')"
  assert call.arguments[0].value == "a"


def test_root_covers_whole_text():
  src = "\n\n  foo();  \n"
  tree = parse_source(src)
  assert tree.root.start == 0
  assert tree.root.end == len(src)
  assert tree.root.type == "Program"


def test_parent_links():
  tree = parse_source("foo(bar(1));")
  inner = find_call(tree, "bar")

  assert inner.parent.type == "CallExpression"
  assert inner.parent.callee.name == "foo"
  assert [a.type for a in inner.ancestors()] == ["CallExpression", "ExpressionStatement", "Program"]


def test_walk_is_source_ordered():
  tree = parse_source("a(); b(); c();")
  names = [n.name for n in tree.walk() if n.type == "Identifier"]
  assert names == ["a", "b", "c"]


def test_missing_field_is_none():
  tree = parse_source("x;")
  statement = tree.root.body[0]
  assert statement.callee is None


def test_visitor_dispatch():
  class Counter(JsVisitor):
    def __init__(self):
      self.calls = 0

    def visit_CallExpression(self, node):
      self.calls += 1

  counter = Counter()
  counter.visit_tree(parse_source("a(b(), c());"))
  assert counter.calls == 3


def test_parse_error():
  with pytest.raises(ParseError) as exc:
    parse_source("define([, function () {")

  assert isinstance(exc.value, ConversionError)
  assert "Invalid JavaScript" in str(exc.value)


def test_deep_expression_chain():
  src = "var x = " + " + ".join(["1"] * 2000) + ";"
  tree = parse_source(src)

  deepest = max(tree.walk(), key=lambda n: len(list(n.ancestors())))
  assert deepest.type == "Literal"
  assert tree.text(deepest) == "1"
