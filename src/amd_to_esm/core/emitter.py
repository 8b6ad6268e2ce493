"""
Rewrite Emission.

Turns a `RewritePlan` into edits on an `EditBuffer`, in a fixed order:

1.  Renamed requires: ``require('a')`` becomes the binding name of ``'a'``.
2.  Side-effect requires: their statement is deleted.
3.  CommonJS declarations: deleted, or regenerated without the hoisted declarators.
4.  Module definition: its statement is replaced by the import block followed by
    the factory body, whose first top-level ``return`` becomes ``export default``.

Step 4 renders the factory body from the buffer, so it must run last.
"""

import logging
from typing import Optional

from amd_to_esm.core.classifier import enclosing_statement
from amd_to_esm.core.codegen import generate_declaration, remaining_declarators
from amd_to_esm.core.dependencies import DependencyMap, RewritePlan
from amd_to_esm.core.edits import EditBuffer
from amd_to_esm.core.formatting import beautify
from amd_to_esm.core.tracer import TraceLogger
from amd_to_esm.core.tree import JsNode
from amd_to_esm.enums import NodeType

logger = logging.getLogger(__name__)

RETURN_KEYWORD = "return"
EXPORT_DEFAULT = "export default"


def get_import_statements(dependencies: DependencyMap) -> str:
  """
  Renders the import block, one statement per line, in map order.

  Args:
      dependencies (DependencyMap): Paths and their bindings.

  Returns:
      str: e.g. ``import a from 'a';\\nimport 'polyfill';``.
  """
  statements = []
  for path, name in dependencies.items():
    if name is None:
      statements.append(f"import '{path}';")
    else:
      statements.append(f"import {name} from '{path}';")
  return "\n".join(statements)


def find_return_statement(factory: JsNode) -> Optional[JsNode]:
  """Returns the first ``return`` among the factory's top-level statements."""
  for statement in factory.body.body or []:
    if statement.type == NodeType.RETURN_STATEMENT:
      return statement
  return None


def get_module_code(factory: Optional[JsNode], buffer: EditBuffer) -> str:
  """
  Extracts the factory body as module-level code.

  The first top-level ``return expr;`` is rewritten to ``export default expr;``
  (a bare ``return;`` is dropped) and the surrounding braces are stripped.

  Args:
      factory (Optional[JsNode]): The factory function, if any.
      buffer (EditBuffer): Buffer holding the edits made so far.

  Returns:
      str: The body text with all nested edits applied.
  """
  if factory is None:
    return ""

  statement = find_return_statement(factory)
  if statement is not None:
    if statement.argument is None:
      buffer.remove(statement)
    else:
      buffer.replace((statement.start, statement.start + len(RETURN_KEYWORD)), EXPORT_DEFAULT)

  body = factory.body
  return buffer.render(body.start + 1, body.end - 1)


class RewriteEmitter:
  """
  Applies a `RewritePlan` to an `EditBuffer`.

  Attributes:
      beautify (bool): Re-indent the generated module code.
      indent_size (int): Indentation used when beautifying.
  """

  def __init__(self, beautify: bool = False, indent_size: int = 4, tracer: Optional[TraceLogger] = None) -> None:
    self.beautify = beautify
    self.indent_size = indent_size
    self.tracer = tracer or TraceLogger()

  def emit(self, plan: RewritePlan, buffer: EditBuffer) -> None:
    """
    Schedules every edit of ``plan`` on ``buffer``.

    Args:
        plan (RewritePlan): Output of the dependency map builder.
        buffer (EditBuffer): The buffer over the original source.
    """
    for node, name in plan.renames:
      buffer.replace(node, name)
      self.tracer.log_mutation("require", buffer.source[node.start : node.end], name)

    for node in plan.side_effect_requires:
      statement = enclosing_statement(node)
      if statement is node:
        # Used as a value: keep the expression well-formed.
        buffer.replace(node, "undefined")
      else:
        buffer.remove(statement)
      self.tracer.log_mutation("side-effect require", buffer.source[node.start : node.end], "")

    for statement in plan.removed_statements:
      buffer.remove(statement)

    for declaration, removed in plan.declarations.items():
      kept = remaining_declarators(declaration, removed)
      text = generate_declaration(declaration.kind, kept, buffer)
      buffer.replace(declaration, text)
      self.tracer.log_mutation("declaration", buffer.source[declaration.start : declaration.end], text)

    definition = plan.definition
    module_code = get_import_statements(plan.dependencies) + get_module_code(definition.factory, buffer)

    if self.beautify:
      module_code = beautify(module_code, self.indent_size)

    buffer.replace(definition.statement, module_code)
    logger.debug("module definition replaced with %d import(s)", len(plan.dependencies))
