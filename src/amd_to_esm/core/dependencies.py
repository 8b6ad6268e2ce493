"""
Dependency Map Construction.

Merges the two ways an AMD module can declare dependencies into one ordered
import list:

1.  **Array dependencies**: ``define(['a', 'b'], function (a, b) {...})``. Each
    path is paired with the factory parameter at the same position.
2.  **CommonJS-style requires**: ``define(function (require) { var a = require('a'); })``.
    Active only when the factory has a local ``require`` binding. Static
    requires assigned to a variable become ``import a from 'a'`` and their
    declarator is removed.

Any other synchronous require is renamed in place to the binding of its module
(generating a fresh name if needed), and side-effect requires contribute
binding-less imports.

The output is a `RewritePlan`: the data the emitter needs to issue edits. No
text is changed here.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple

from amd_to_esm.core.classifier import Classification, ModuleDefinition
from amd_to_esm.core.naming import make_import_name
from amd_to_esm.core.static_requires import is_static_require
from amd_to_esm.core.tree import JsNode
from amd_to_esm.enums import NodeType
from amd_to_esm.errors import UnsupportedConstructError

logger = logging.getLogger(__name__)

LOCAL_REQUIRE = "require"


class DependencyMap:
  """
  Ordered mapping of module path to binding name (``None`` for side-effect imports).

  Insertion order is the emitted import order. A path is bound to at most one
  name and a name to at most one path.
  """

  def __init__(self) -> None:
    self._entries: Dict[str, Optional[str]] = {}

  def __contains__(self, path: object) -> bool:
    return path in self._entries

  def __iter__(self) -> Iterator[str]:
    return iter(self._entries)

  def __len__(self) -> int:
    return len(self._entries)

  def __repr__(self) -> str:
    return f"DependencyMap({self._entries!r})"

  def items(self) -> List[Tuple[str, Optional[str]]]:
    return list(self._entries.items())

  def as_dict(self) -> Dict[str, Optional[str]]:
    return dict(self._entries)

  def binding(self, path: str) -> Optional[str]:
    """Returns the binding for ``path``, ``None`` if unbound or absent."""
    return self._entries.get(path)

  def path_for(self, name: str) -> Optional[str]:
    """Returns the path already bound to ``name``, if any."""
    for path, bound in self._entries.items():
      if bound == name:
        return path
    return None

  def add(self, path: str, name: Optional[str] = None) -> None:
    """
    Registers ``path``, keeping its position if already present.

    An existing binding is never replaced; a missing one is filled in.
    """
    if self._entries.get(path) is None:
      self._entries[path] = name
    elif name is not None and self._entries[path] != name:
      logger.debug("'%s' already bound to '%s', ignoring '%s'", path, self._entries[path], name)


@dataclass
class RewritePlan:
  """
  Everything the emitter needs to rewrite one file.

  Attributes:
      definition (ModuleDefinition): The main module definition.
      dependencies (DependencyMap): Import list in emission order.
      renames (List[Tuple[JsNode, str]]): Require calls to replace by a name.
      side_effect_requires (List[JsNode]): ``require([...])`` calls to delete.
      removed_statements (List[JsNode]): Bare static require statements to delete.
      declarations (Dict[JsNode, List[JsNode]]): Declaration statement to the
          declarators extracted from it, in discovery order.
      commonjs (bool): True if CommonJS-style extraction was active.
  """

  definition: ModuleDefinition
  dependencies: DependencyMap = field(default_factory=DependencyMap)
  renames: List[Tuple[JsNode, str]] = field(default_factory=list)
  side_effect_requires: List[JsNode] = field(default_factory=list)
  removed_statements: List[JsNode] = field(default_factory=list)
  declarations: Dict[JsNode, List[JsNode]] = field(default_factory=dict)
  commonjs: bool = False


def array_paths(dependencies: Optional[JsNode]) -> List[str]:
  """
  Extracts the module paths of a dependency array.

  Args:
      dependencies (Optional[JsNode]): An ``ArrayExpression`` or None.

  Returns:
      List[str]: The string values, in order.

  Raises:
      UnsupportedConstructError: If an element is not a string literal.
  """
  if dependencies is None:
    return []

  paths = []
  for element in dependencies.elements or []:
    if element is None or element.type != NodeType.LITERAL or not isinstance(element.value, str):
      raise UnsupportedConstructError("Dynamic module names are not supported.")
    paths.append(element.value)
  return paths


def has_local_require(definition: ModuleDefinition) -> bool:
  """
  Detects a local ``require`` binding in the factory.

  Either ``'require'`` is listed as a dependency, or a factory parameter named
  ``require`` follows the declared dependencies
  (``define(function (require) {...})``).
  """
  paths = array_paths(definition.dependencies)
  if LOCAL_REQUIRE in paths:
    return True
  return LOCAL_REQUIRE in definition.param_names[len(paths) :]


def required_path(node: JsNode) -> str:
  """Returns the literal module path of a ``require('path')`` call."""
  return node.arguments[0].value


class DependencyMapBuilder:
  """
  Builds the `RewritePlan` for one classified file.

  Attributes:
      classification (Classification): Output of the classification pass.
      used_names (Set[str]): Names bound in the file; grows as names are generated.
      use_logical_name (bool): Name generated imports after the file stem.
  """

  def __init__(self, classification: Classification, use_logical_name: bool = False) -> None:
    if classification.definition is None:
      raise ValueError("Cannot build a dependency map without a module definition.")
    self.classification = classification
    self.used_names: Set[str] = set(classification.used_names)
    self.use_logical_name = use_logical_name
    self.plan = RewritePlan(definition=classification.definition)

  def build(self) -> RewritePlan:
    """
    Produces the plan: array dependencies first, then CommonJS requires, then
    renamed requires, then side-effect requires.

    Returns:
        RewritePlan: The completed plan.
    """
    definition = self.plan.definition
    self.plan.commonjs = has_local_require(definition)

    self._add_array_dependencies(definition)

    static_requires: List[JsNode] = []
    ordinary_requires: List[JsNode] = []
    for node in self.classification.sync_requires:
      if is_static_require(node, definition.factory):
        static_requires.append(node)
      else:
        ordinary_requires.append(node)

    if self.plan.commonjs:
      # Conditional requires keep their declaration; only the call is renamed.
      renamed = {id(node) for node in self._extract_commonjs(static_requires) + ordinary_requires}
      pending = [node for node in self.classification.sync_requires if id(node) in renamed]
      if ordinary_requires:
        logger.debug("renaming %d conditional require(s) in place", len(ordinary_requires))
    else:
      pending = self.classification.sync_requires

    for node in pending:
      self._rename(node)

    for node in self.classification.side_effect_requires:
      for path in array_paths(node.arguments[0]):
        self.plan.dependencies.add(path)
      self.plan.side_effect_requires.append(node)

    return self.plan

  def _add_array_dependencies(self, definition: ModuleDefinition) -> None:
    paths = array_paths(definition.dependencies)
    names = definition.param_names

    for index, path in enumerate(paths):
      name = names[index] if index < len(names) else None
      if path == LOCAL_REQUIRE:
        continue
      if path in self.plan.dependencies:
        logger.warning("Dependency '%s' is listed more than once.", path)
      self.plan.dependencies.add(path, name)

  def _extract_commonjs(self, static_requires: List[JsNode]) -> List[JsNode]:
    """
    Hoists static requires into the dependency map.

    Returns:
        List[JsNode]: Static requires that must still be renamed in place.
    """
    deps = self.plan.dependencies
    pending = []

    for node in static_requires:
      path = required_path(node)
      parent = node.parent

      if parent.type == NodeType.VARIABLE_DECLARATOR and parent.init is node and parent.id.type == NodeType.IDENTIFIER:
        name = parent.id.name
        bound = deps.binding(path)
        owner = deps.path_for(name)
        if (bound is None or bound == name) and owner in (None, path):
          deps.add(path, name)
          self.plan.declarations.setdefault(parent.parent, []).append(parent)
          continue
        pending.append(node)

      elif parent.type == NodeType.EXPRESSION_STATEMENT:
        deps.add(path)
        self.plan.removed_statements.append(parent)

      else:
        pending.append(node)

    return pending

  def _rename(self, node: JsNode) -> None:
    path = required_path(node)
    name = self.plan.dependencies.binding(path)
    if name is None:
      name = make_import_name(path, self.used_names, self.use_logical_name)
      self.plan.dependencies.add(path, name)
    self.plan.renames.append((node, name))


def build_rewrite_plan(classification: Classification, use_logical_name: bool = False) -> RewritePlan:
  """
  Convenience wrapper around `DependencyMapBuilder`.

  Args:
      classification (Classification): Output of the classification pass.
      use_logical_name (bool): Name generated imports after the file stem.

  Returns:
      RewritePlan: The rewrite plan.
  """
  return DependencyMapBuilder(classification, use_logical_name).build()
