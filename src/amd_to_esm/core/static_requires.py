"""
Static Require Detection.

A ``require('x')`` call inside an AMD factory can only be hoisted into an
``import`` if it runs every time the module loads. This module answers that
question syntactically by walking the ancestor chain of the call:

- The module factory itself terminates the walk: the call is always invoked.
- Call, binary, expression-statement, variable declaration/declarator and block
  nodes are transparent: the walk continues to their parent.
- Anything else (``if``, loops, nested functions, ``&&``/``?:``, the program
  root) means the call may not run, so it is not static.

This is a conservative approximation, not data-flow analysis.
"""

from typing import Optional

from amd_to_esm.core.tree import JsNode
from amd_to_esm.enums import NodeType

TRANSPARENT_TYPES = frozenset(
  {
    NodeType.CALL_EXPRESSION.value,
    NodeType.BINARY_EXPRESSION.value,
    NodeType.EXPRESSION_STATEMENT.value,
    NodeType.VARIABLE_DECLARATION.value,
    NodeType.VARIABLE_DECLARATOR.value,
    NodeType.BLOCK_STATEMENT.value,
  }
)


def is_always_invoked(node: JsNode, factory: Optional[JsNode]) -> bool:
  """
  Determines whether ``node`` executes unconditionally when ``factory`` runs.

  Args:
      node (JsNode): The call expression under test.
      factory (Optional[JsNode]): The module factory function. Without a
          factory nothing is considered always invoked.

  Returns:
      bool: True if every ancestor up to the factory is transparent.
  """
  if factory is None:
    return False

  for ancestor in node.ancestors():
    if ancestor is factory:
      return True
    if ancestor.type not in TRANSPARENT_TYPES:
      return False

  return False


def is_static_require(node: JsNode, factory: Optional[JsNode]) -> bool:
  """A require call is static exactly when it is always invoked."""
  return is_always_invoked(node, factory)
