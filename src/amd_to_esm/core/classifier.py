"""
AMD Node Classification.

This module implements the single classification pass of the engine. Every
node of the tree is inspected exactly once and sorted into one of the buckets
of `Classification`:

1.  **Module definition**: ``define(fn)``, ``define([...], fn)`` or
    ``require([...], fn)``. At most one may exist.
2.  **Synchronous requires**: ``require('path')``.
3.  **Side-effect requires**: ``require(['a', 'b'])`` with no callback.
4.  **Used names**: every identifier bound by ``var/let/const``, function and
    class declarations, and function parameters.

Unsupported constructs are rejected as soon as they are reached, before any
edit has been scheduled:

- ``define('name', ...)`` (named modules)
- ``define(factoryVariable)`` (factory not statically inspectable)
- ``require(someExpression)`` (dynamic module name)
- a second module definition in the same file
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set

from amd_to_esm.core.tree import JsNode, JsTree, JsVisitor
from amd_to_esm.enums import CallKind, NodeType
from amd_to_esm.errors import StructuralConflictError, UnsupportedConstructError

logger = logging.getLogger(__name__)


@dataclass
class ModuleDefinition:
  """
  The call expression that declares the module.

  Attributes:
      call (JsNode): The ``define`` / ``require`` call expression.
      dependencies (Optional[JsNode]): The dependency ``ArrayExpression``, if any.
      factory (Optional[JsNode]): The factory ``FunctionExpression``. ``None``
          for a bare ``require([...])`` used as the module body.
      statement (JsNode): The node replaced by the generated module code.
  """

  call: JsNode
  dependencies: Optional[JsNode]
  factory: Optional[JsNode]
  statement: JsNode

  @property
  def param_names(self) -> List[str]:
    """Factory parameter names, in order (non-identifier params excluded)."""
    if self.factory is None:
      return []
    return [p.name for p in self.factory.params or [] if p.type == NodeType.IDENTIFIER]


@dataclass
class Classification:
  """
  Result of the classification pass over one file.
  """

  definition: Optional[ModuleDefinition] = None
  sync_requires: List[JsNode] = field(default_factory=list)
  side_effect_requires: List[JsNode] = field(default_factory=list)
  used_names: Set[str] = field(default_factory=set)


# --- Predicates ---


def argument_types(call: JsNode) -> List[str]:
  """
  Returns the ESTree types of a call's arguments, in order.

  Args:
      call (JsNode): A ``CallExpression``.

  Returns:
      List[str]: e.g. ``["ArrayExpression", "FunctionExpression"]``.
  """
  return [arg.type for arg in call.arguments or []]


def _callee_is(node: JsNode, name: str) -> bool:
  if node.type != NodeType.CALL_EXPRESSION:
    return False
  callee = node.callee
  return callee is not None and callee.type == NodeType.IDENTIFIER and callee.name == name


def is_require(node: JsNode) -> bool:
  """True if ``node`` is a ``require(...)`` call."""
  return _callee_is(node, "require")


def is_define(node: JsNode) -> bool:
  """True if ``node`` is a ``define(...)`` call."""
  return _callee_is(node, "define")


def is_named_define(node: JsNode) -> bool:
  """
  True for ``define('my-module', ...)``: a define whose first argument is a literal.
  """
  return is_define(node) and argument_types(node)[:1] == [NodeType.LITERAL.value]


def is_define_with_identifier(node: JsNode) -> bool:
  """
  True for ``define(factory)`` or ``define([...], factory)`` where the factory is
  a variable reference rather than a function literal.
  """
  if not is_define(node):
    return False
  arg_types = argument_types(node)
  return arg_types in (
    [NodeType.IDENTIFIER.value],
    [NodeType.ARRAY_EXPRESSION.value, NodeType.IDENTIFIER.value],
  )


def is_module_definition(node: JsNode) -> bool:
  """
  True for ``define(fn)``, ``require(fn)``, ``define([...], fn)`` and
  ``require([...], fn)``.
  """
  if not (is_require(node) or is_define(node)):
    return False

  arg_types = argument_types(node)
  return arg_types in (
    [NodeType.ARRAY_EXPRESSION.value, NodeType.FUNCTION_EXPRESSION.value],
    [NodeType.FUNCTION_EXPRESSION.value],
  )


def is_sync_require(node: JsNode) -> bool:
  """True for ``require('path')`` with exactly one string literal argument."""
  if not is_require(node) or argument_types(node) != [NodeType.LITERAL.value]:
    return False
  return isinstance(node.arguments[0].value, str)


def is_require_with_side_effects(node: JsNode) -> bool:
  """True for ``require(['a', 'b'])``: an array and no callback."""
  return is_require(node) and argument_types(node) == [NodeType.ARRAY_EXPRESSION.value]


def is_require_with_dynamic_name(node: JsNode) -> bool:
  """
  True for ``require(expr)`` where ``expr`` is neither a literal nor an identifier.
  """
  if not is_require(node):
    return False
  arg_types = argument_types(node)
  if len(arg_types) != 1:
    return False
  return arg_types[0] not in (
    NodeType.LITERAL.value,
    NodeType.IDENTIFIER.value,
    NodeType.ARRAY_EXPRESSION.value,
    NodeType.FUNCTION_EXPRESSION.value,
  )


def classify_call(node: JsNode) -> CallKind:
  """
  Categorizes a call expression without side effects.

  Raises:
      UnsupportedConstructError: For named defines, identifier factories and
          dynamic module names.
  """
  if is_named_define(node):
    raise UnsupportedConstructError("Found a named define() - this is not supported.")
  if is_define_with_identifier(node):
    raise UnsupportedConstructError("Found a define() using a variable as the factory - this is not supported.")
  if is_module_definition(node):
    return CallKind.MODULE_DEFINITION
  if is_sync_require(node):
    return CallKind.SYNC_REQUIRE
  if is_require_with_side_effects(node):
    return CallKind.SIDE_EFFECT_REQUIRE
  if is_require_with_dynamic_name(node):
    raise UnsupportedConstructError("Dynamic module names are not supported.")
  if is_require(node) and argument_types(node) == [NodeType.IDENTIFIER.value]:
    return CallKind.IDENTIFIER_REQUIRE
  return CallKind.UNRELATED


def enclosing_statement(node: JsNode) -> JsNode:
  """
  Returns the expression statement wrapping ``node``, or ``node`` itself.

  Args:
      node (JsNode): A call expression.

  Returns:
      JsNode: The node whose span should be replaced when rewriting ``node``.
  """
  parent = node.parent
  if parent is not None and parent.type == NodeType.EXPRESSION_STATEMENT:
    return parent
  return node


def is_top_level(node: JsNode) -> bool:
  """True if ``node`` is a direct statement of the program."""
  statement = enclosing_statement(node)
  return statement.parent is not None and statement.parent.type == NodeType.PROGRAM


# --- Pass ---


class ModuleClassifier(JsVisitor):
  """
  Visitor collecting the AMD structure of one file.

  Attributes:
      result (Classification): The accumulated classification.
  """

  def __init__(self) -> None:
    self.result = Classification()

  def classify(self, tree: JsTree) -> Classification:
    """
    Runs the pass over ``tree``.

    When no ``define``/``require`` with a factory is present, the first
    top-level ``require([...])`` is promoted to the module definition so that a
    file made only of side-effect requires becomes a list of bare imports.

    Args:
        tree (JsTree): The parsed source.

    Returns:
        Classification: The buckets of interest for the rewrite.

    Raises:
        UnsupportedConstructError: On unsupported AMD constructs.
        StructuralConflictError: If more than one module definition exists.
    """
    self.visit_tree(tree)

    if self.result.definition is None:
      self._promote_side_effect_require()

    return self.result

  def visit_CallExpression(self, node: JsNode) -> None:
    kind = classify_call(node)

    if kind == CallKind.MODULE_DEFINITION:
      if self.result.definition is not None:
        raise StructuralConflictError("Found multiple module definitions in file.")
      self.result.definition = self._make_definition(node)
      logger.debug("module definition at %d:%d", node.start, node.end)

    elif kind == CallKind.SYNC_REQUIRE:
      self.result.sync_requires.append(node)

    elif kind == CallKind.SIDE_EFFECT_REQUIRE:
      self.result.side_effect_requires.append(node)

  def visit_VariableDeclarator(self, node: JsNode) -> None:
    self._bind(node.id)

  def visit_FunctionDeclaration(self, node: JsNode) -> None:
    self._bind(node.id)
    self._bind_params(node)

  def visit_FunctionExpression(self, node: JsNode) -> None:
    self._bind_params(node)

  def visit_ArrowFunctionExpression(self, node: JsNode) -> None:
    self._bind_params(node)

  def visit_ClassDeclaration(self, node: JsNode) -> None:
    self._bind(node.id)

  def _bind_params(self, function: JsNode) -> None:
    for param in function.params or []:
      self._bind(param)

  def _bind(self, target: Optional[JsNode]) -> None:
    """Records every identifier bound by a name or destructuring pattern."""
    stack = [target]
    while stack:
      node = stack.pop()
      if node is None:
        continue
      if node.type == NodeType.IDENTIFIER:
        self.result.used_names.add(node.name)
      elif node.type == NodeType.ASSIGNMENT_PATTERN:
        stack.append(node.left)
      elif node.type == NodeType.REST_ELEMENT:
        stack.append(node.argument)
      elif node.type == NodeType.ARRAY_PATTERN:
        stack.extend(node.elements or [])
      elif node.type == NodeType.OBJECT_PATTERN:
        for prop in node.properties or []:
          stack.append(prop.argument if prop.type == NodeType.REST_ELEMENT else prop.value)

  def _make_definition(self, call: JsNode) -> ModuleDefinition:
    args = call.arguments or []
    has_deps = len(args) > 1
    factory = args[-1] if args and args[-1].type == NodeType.FUNCTION_EXPRESSION else None
    definition = ModuleDefinition(
      call=call,
      dependencies=args[0] if has_deps or (args and factory is None) else None,
      factory=factory,
      statement=enclosing_statement(call),
    )
    self.result.used_names.update(definition.param_names)
    return definition

  def _promote_side_effect_require(self) -> None:
    node = next((n for n in self.result.side_effect_requires if is_top_level(n)), None)
    if node is None:
      return
    self.result.side_effect_requires.remove(node)
    self.result.definition = self._make_definition(node)
    logger.debug("promoted side-effect require at %d:%d to module definition", node.start, node.end)
