"""
Orchestration Engine for AMD to ES Module Conversion.

This module provides the `ConversionEngine`, the primary driver for rewriting
one AMD module. The pipeline consists of:

1.  **Parsing**: source text -> immutable span tree (`esprima`).
2.  **Classification**: a single pass that finds the module definition,
    synchronous and side-effect requires, and every declared variable name.
    Unsupported constructs abort here, before any edit exists.
3.  **Dependency Map**: array dependencies and CommonJS-style requires are
    merged into one ordered import list, generating binding names as needed.
4.  **Emission**: edits are scheduled on an `EditBuffer` and the source is
    serialized once.

Files without a module definition are returned unchanged.
"""

import logging
from typing import Optional, Tuple

from amd_to_esm.config import RuntimeConfig
from amd_to_esm.core.classifier import Classification, ModuleClassifier
from amd_to_esm.core.conversion_result import ConversionResult
from amd_to_esm.core.dependencies import RewritePlan, build_rewrite_plan
from amd_to_esm.core.edits import EditBuffer
from amd_to_esm.core.emitter import RewriteEmitter
from amd_to_esm.core.tracer import TraceLogger
from amd_to_esm.core.tree import JsTree, parse_source
from amd_to_esm.errors import ConversionError

logger = logging.getLogger(__name__)


class ConversionEngine:
  """
  The main compilation unit.

  An engine holds configuration only. Every call to `convert` / `run` builds
  its own tree, dependency map, name set and edit buffer, so one engine can be
  reused across files.
  """

  def __init__(
    self,
    config: Optional[RuntimeConfig] = None,
    beautify: Optional[bool] = None,
    logical_name: Optional[bool] = None,
  ):
    """
    Initializes the Engine.

    Args:
        config (RuntimeConfig, optional): The runtime configuration object.
            Defaults to `RuntimeConfig()` (no pyproject lookup).
        beautify (bool, optional): Override for ``config.beautify``.
        logical_name (bool, optional): Override for ``config.logical_name``.
    """
    config = config or RuntimeConfig()
    updates = {}
    if beautify is not None:
      updates["beautify"] = beautify
    if logical_name is not None:
      updates["logical_name"] = logical_name
    self.config = config.model_copy(update=updates) if updates else config

  def parse(self, code: str) -> JsTree:
    """
    Parses source string into a span tree.

    Raises:
        ParseError: If the input is not valid JavaScript.
    """
    return parse_source(code)

  def convert(self, code: str) -> str:
    """
    Converts one AMD module to an ES module.

    Args:
        code (str): The AMD source.

    Returns:
        str: The ES module source, or ``code`` itself if it defines no module.

    Raises:
        ConversionError: On unsupported constructs, multiple definitions or
            invalid JavaScript.
    """
    output, _ = self._convert(code, TraceLogger())
    return output

  def run(self, code: str) -> ConversionResult:
    """
    Executes the full pipeline and reports instead of raising.

    Args:
        code (str): The input source string.

    Returns:
        ConversionResult: Object containing transformed code, imports and error logs.
    """
    tracer = TraceLogger()
    try:
      output, plan = self._convert(code, tracer)
    except ConversionError as e:
      tracer.log_warning(str(e))
      tracer.end_all_phases()
      return ConversionResult(code=code, errors=[str(e)], success=False, trace_events=tracer.export())

    return ConversionResult(
      code=output,
      success=True,
      changed=plan is not None,
      imports=plan.dependencies.as_dict() if plan else {},
      trace_events=tracer.export(),
    )

  def _convert(self, code: str, tracer: TraceLogger) -> Tuple[str, Optional[RewritePlan]]:
    tracer.start_phase("Conversion Pipeline", "AMD -> ES module")

    tracer.start_phase("Parse", "Source -> span tree")
    tree = self.parse(code)
    tracer.end_phase()

    tracer.start_phase("Classification", "Single pass over all nodes")
    classification: Classification = ModuleClassifier().classify(tree)
    tracer.end_phase()

    if classification.definition is None:
      tracer.log_inspection("source", "unchanged", "No module definition found")
      tracer.end_phase()
      logger.debug("no module definition found, returning source unchanged")
      return code, None

    tracer.start_phase("Dependency Map", "Array deps + CommonJS requires")
    plan = build_rewrite_plan(classification, self.config.logical_name)
    for path, name in plan.dependencies.items():
      tracer.log_import(path, name)
    tracer.end_phase()

    tracer.start_phase("Emission", "Edits -> text")
    buffer = EditBuffer(code)
    emitter = RewriteEmitter(beautify=self.config.beautify, indent_size=self.config.indent_size, tracer=tracer)
    emitter.emit(plan, buffer)
    output = buffer.apply()
    tracer.end_phase()

    tracer.end_phase()
    return output, plan
