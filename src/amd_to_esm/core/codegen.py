"""
Declaration Code Generation.

Rebuilds a ``var`` / ``let`` / ``const`` statement after some of its declarators
were hoisted into imports. The remaining declarators are rendered from the
edit buffer so any nested rewrite (e.g. a renamed ``require``) is kept.
"""

from typing import Iterable, List

from amd_to_esm.core.edits import EditBuffer
from amd_to_esm.core.tree import JsNode


def remaining_declarators(declaration: JsNode, removed: Iterable[JsNode]) -> List[JsNode]:
  """
  Returns the declarators of ``declaration`` not listed in ``removed``.

  Args:
      declaration (JsNode): A ``VariableDeclaration``.
      removed (Iterable[JsNode]): Declarators extracted from it.

  Returns:
      List[JsNode]: The declarators to keep, in source order.
  """
  removed_ids = {id(node) for node in removed}
  return [d for d in declaration.declarations or [] if id(d) not in removed_ids]


def generate_declaration(kind: str, declarators: List[JsNode], buffer: EditBuffer) -> str:
  """
  Emits ``<kind> a = 1, b = 2;`` for the given declarators.

  Args:
      kind (str): ``var``, ``let`` or ``const``.
      declarators (List[JsNode]): Declarators to emit.
      buffer (EditBuffer): Source of the (possibly edited) declarator text.

  Returns:
      str: The declaration statement, or an empty string if nothing is left.
  """
  if not declarators:
    return ""
  return f"{kind} " + ", ".join(buffer.render_node(d) for d in declarators) + ";"
