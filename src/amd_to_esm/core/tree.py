"""
Span Tree over JavaScript Source.

This module wraps the ESTree produced by `esprima` into an immutable tree of
`JsNode` objects. Every node records:

1.  Its ESTree ``type`` (e.g. ``CallExpression``).
2.  Its ``[start, end)`` character span in the original source.
3.  An explicit ``parent`` link, assigned once while the tree is built.

The rewrite engine never mutates this tree. Textual changes are recorded in an
`EditBuffer` keyed by node spans and serialized in a single pass.

A small visitor base class (`JsVisitor`) mirrors the ``visit_<Type>`` dispatch
style used by CST visitors, so classification passes read like ordinary
tree visitors.
"""

from typing import Any, Dict, Iterator, List, Optional

import esprima
from esprima.error_handler import Error as EsprimaError
from esprima.nodes import Node as EsprimaNode

from amd_to_esm.errors import ParseError

# ESTree bookkeeping attributes that never hold child nodes.
_META_KEYS = frozenset({"type", "range", "loc"})


class JsNode:
  """
  A read-only view of one ESTree node.

  Child nodes and scalar properties are reachable as attributes
  (``node.callee``, ``node.arguments``, ``node.value``). Missing properties
  resolve to ``None`` as they do in ESTree consumers.

  Attributes:
      type (str): The ESTree node kind.
      start (int): Offset of the first character of the node.
      end (int): Offset one past the last character of the node.
      parent (Optional[JsNode]): The enclosing node, ``None`` for the Program.
  """

  __slots__ = ("type", "start", "end", "parent", "_fields")

  def __init__(self, node_type: str, start: int, end: int, parent: Optional["JsNode"]) -> None:
    self.type = node_type
    self.start = start
    self.end = end
    self.parent = parent
    self._fields: Dict[str, Any] = {}

  def __getattr__(self, name: str) -> Any:
    if name.startswith("__") or name == "_fields":
      raise AttributeError(name)
    return self._fields.get(name)

  def __repr__(self) -> str:
    return f"JsNode({self.type}, {self.start}:{self.end})"

  @property
  def field_names(self) -> List[str]:
    """The ESTree property names present on this node."""
    return list(self._fields)

  def children(self) -> Iterator["JsNode"]:
    """
    Yields the direct child nodes in source order.

    Returns:
        Iterator[JsNode]: Children sorted by start offset.
    """
    found: List[JsNode] = []
    for value in self._fields.values():
      if isinstance(value, JsNode):
        found.append(value)
      elif isinstance(value, list):
        found.extend(item for item in value if isinstance(item, JsNode))
    found.sort(key=lambda child: child.start)
    yield from found

  def walk(self) -> Iterator["JsNode"]:
    """
    Pre-order traversal of this node and all descendants, in source order.
    """
    stack = [self]
    while stack:
      node = stack.pop()
      yield node
      stack.extend(reversed(list(node.children())))

  def ancestors(self) -> Iterator["JsNode"]:
    """Yields the parent chain, nearest first."""
    node = self.parent
    while node is not None:
      yield node
      node = node.parent


class JsTree:
  """
  A parsed source file: the original text plus the root `JsNode`.
  """

  def __init__(self, source: str, root: JsNode) -> None:
    self.source = source
    self.root = root

  def text(self, node: JsNode) -> str:
    """
    Returns the original source text covered by ``node``.

    Args:
        node (JsNode): Any node of this tree.

    Returns:
        str: The untouched source slice.
    """
    return self.source[node.start : node.end]

  def walk(self) -> Iterator[JsNode]:
    return self.root.walk()


def parse_source(source: str) -> JsTree:
  """
  Parses JavaScript (script goal) into a span tree.

  Args:
      source (str): The module source text.

  Returns:
      JsTree: The immutable span tree.

  Raises:
      ParseError: If the source is not valid JavaScript.
  """
  try:
    program = esprima.parseScript(source, {"range": True})
  except EsprimaError as e:
    raise ParseError(
      f"Invalid JavaScript: {getattr(e, 'description', None) or e}",
      line=getattr(e, "lineNumber", None),
      column=getattr(e, "column", None),
    ) from e
  except RecursionError as e:
    raise ParseError("Invalid JavaScript: source nests too deeply to parse") from e

  root = _hydrate(program)
  # The Program range skips leading/trailing trivia; the tree owns the whole text.
  root.start = 0
  root.end = len(source)
  return JsTree(source, root)


def _hydrate(program: EsprimaNode) -> JsNode:
  """
  Copies an esprima tree into `JsNode` objects.

  Uses an explicit stack so deeply nested expressions (long ``a + b + ...``
  chains) never hit the interpreter recursion limit. Parents are created before
  their children so every child holds its final parent reference from the
  moment it exists.
  """
  root = _make_node(program, None)
  stack = [(program, root)]

  while stack:
    raw, node = stack.pop()
    for key, value in raw.__dict__.items():
      if key in _META_KEYS:
        continue
      if isinstance(value, EsprimaNode):
        child = _make_node(value, node)
        stack.append((value, child))
        node._fields[key] = child
      elif isinstance(value, list):
        items = []
        for item in value:
          if isinstance(item, EsprimaNode):
            child = _make_node(item, node)
            stack.append((item, child))
            item = child
          items.append(item)
        node._fields[key] = items
      else:
        node._fields[key] = value

  return root


def _make_node(raw: EsprimaNode, parent: Optional[JsNode]) -> JsNode:
  span = getattr(raw, "range", None)
  if span:
    start, end = span
  elif parent is not None:
    # A few synthetic nodes carry no range; they never receive edits.
    start, end = parent.start, parent.end
  else:
    start, end = 0, 0
  return JsNode(raw.type, start, end, parent)


class JsVisitor:
  """
  Base class for read-only passes over a `JsTree`.

  Subclasses implement ``visit_<NodeType>(node)`` methods, for example
  ``visit_CallExpression``. Nodes are dispatched in pre-order, source order.
  """

  def visit_tree(self, tree: JsTree) -> None:
    """
    Dispatches every node of ``tree`` to its ``visit_<type>`` handler.

    Args:
        tree (JsTree): The tree to traverse.
    """
    for node in tree.walk():
      handler = getattr(self, f"visit_{node.type}", None)
      if handler is not None:
        handler(node)
