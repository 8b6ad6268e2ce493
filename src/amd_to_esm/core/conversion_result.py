"""
Data structures representing the output of the conversion pipeline.

This module defines the `ConversionResult` Pydantic model, which encapsulates
the generated code, any errors encountered, the emitted imports and the
execution trace logs.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ConversionResult(BaseModel):
  """
  Container for the results of converting one module.
  """

  code: str = Field(default="", description="The generated source code (the input on failure).")
  errors: List[str] = Field(default_factory=list, description="List of error messages encountered.")
  success: bool = Field(
    default=True,
    description="True if the conversion completed without a fatal error.",
  )
  changed: bool = Field(default=False, description="False when the input had no module definition.")
  imports: Dict[str, Optional[str]] = Field(
    default_factory=dict, description="Emitted imports: module path -> binding name (None for side effects)."
  )
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Execution trace log data.")

  @property
  def has_errors(self) -> bool:
    """
    Check if the result contains any error messages.

    Returns:
        True if one or more errors are present.
    """
    return len(self.errors) > 0
