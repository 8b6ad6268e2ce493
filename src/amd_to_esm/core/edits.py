"""
Deferred Text Edits.

The engine never rebuilds the syntax tree. Instead each rewrite is recorded as
a replacement of one node span, and all replacements are applied to the
original text in a single ordered pass.

Edits may nest: an outer replacement (e.g. the whole ``define(...)`` statement)
is usually computed from a `render` of its interior, which already includes the
inner edits. When serializing, the outermost edit therefore wins and the
contained edits are skipped.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from amd_to_esm.core.tree import JsNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextEdit:
  """
  Replacement of ``source[start:end]`` with ``text``.
  """

  start: int
  end: int
  text: str


class EditBuffer:
  """
  Collects span replacements over one source string.

  Attributes:
      source (str): The original, unmodified text.
  """

  def __init__(self, source: str) -> None:
    self.source = source
    self._edits: Dict[Tuple[int, int], TextEdit] = {}

  def __len__(self) -> int:
    return len(self._edits)

  @property
  def edits(self) -> List[TextEdit]:
    """All recorded edits ordered by position, outer edits first."""
    return sorted(self._edits.values(), key=lambda e: (e.start, -e.end))

  def replace(self, target: Union[JsNode, Tuple[int, int]], text: str) -> TextEdit:
    """
    Schedules the replacement of a node (or explicit span) with ``text``.

    Replacing the same span twice keeps the latest text.

    Args:
        target: A `JsNode` or a ``(start, end)`` tuple.
        text (str): The replacement text.

    Returns:
        TextEdit: The recorded edit.

    Raises:
        ValueError: If the span lies outside the source.
    """
    start, end = (target.start, target.end) if isinstance(target, JsNode) else target
    if start < 0 or end > len(self.source) or start > end:
      raise ValueError(f"Edit span {start}:{end} is outside the source (length {len(self.source)}).")

    edit = TextEdit(start, end, text)
    self._edits[(start, end)] = edit
    logger.debug("edit %d:%d -> %r", start, end, text)
    return edit

  def remove(self, target: Union[JsNode, Tuple[int, int]]) -> TextEdit:
    """Schedules the deletion of a node (or span)."""
    return self.replace(target, "")

  def render(self, start: int = 0, end: Optional[int] = None) -> str:
    """
    Returns ``source[start:end]`` with every edit inside that range applied.

    Edits must either nest or be disjoint. Nested edits are dropped in favour
    of the edit that contains them.

    Args:
        start (int): Start offset (inclusive).
        end (Optional[int]): End offset (exclusive), defaults to end of source.

    Returns:
        str: The rendered text.

    Raises:
        ValueError: If two edits partially overlap.
    """
    if end is None:
      end = len(self.source)

    chunks: List[str] = []
    cursor = start
    outer_end = start

    for edit in self.edits:
      if edit.start < start or edit.end > end:
        continue
      if edit.start < outer_end:
        if edit.end > outer_end:
          raise ValueError(f"Overlapping edits at {edit.start}:{edit.end}.")
        continue
      chunks.append(self.source[cursor : edit.start])
      chunks.append(edit.text)
      cursor = edit.end
      outer_end = edit.end

    chunks.append(self.source[cursor:end])
    return "".join(chunks)

  def render_node(self, node: JsNode) -> str:
    """Renders the current text of ``node`` including nested edits."""
    return self.render(node.start, node.end)

  def apply(self) -> str:
    """
    Serializes the whole source with all edits applied.

    Returns:
        str: The rewritten text.
    """
    return self.render(0, len(self.source))
