"""
Conversion Errors.

All failures raised by the rewrite engine derive from `ConversionError`, which
is a `ValueError` so callers that only expect bad-input errors keep working.

Taxonomy:

- `UnsupportedConstructError`: the module uses an AMD feature that cannot be
  expressed statically (named define, identifier factory, dynamic module name).
- `StructuralConflictError`: the file declares more than one module.
- `ParseError`: the input is not valid JavaScript.
"""

from typing import Optional


class ConversionError(ValueError):
  """Base class for every error raised while converting one module."""


class UnsupportedConstructError(ConversionError):
  """Raised when the source uses an AMD construct that cannot be rewritten."""


class StructuralConflictError(ConversionError):
  """Raised when a file contains more than one module definition."""


class ParseError(ConversionError):
  """
  Raised when the parser rejects the source text.

  Attributes:
      line (Optional[int]): 1-based line reported by the parser, if known.
      column (Optional[int]): 1-based column reported by the parser, if known.
  """

  def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
    super().__init__(message)
    self.line = line
    self.column = column
