"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Helpers to parse snippets and locate nodes by type.
"""

import sys
from pathlib import Path
from typing import Callable, List

import pytest

# Add src to path so we can import 'amd_to_esm' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from amd_to_esm.core.tree import JsNode, JsTree, parse_source  # noqa: E402


def find_nodes(tree: JsTree, node_type: str) -> List[JsNode]:
  """Returns every node of ``node_type`` in source order."""
  return [n for n in tree.walk() if n.type == node_type]


def find_call(tree: JsTree, callee: str, index: int = 0) -> JsNode:
  """Returns the ``index``-th call to ``callee``."""
  calls = [
    n
    for n in tree.walk()
    if n.type == "CallExpression" and n.callee.type == "Identifier" and n.callee.name == callee
  ]
  return calls[index]


@pytest.fixture
def parse() -> Callable[[str], JsTree]:
  """Parses a JavaScript snippet into a span tree."""
  return parse_source
