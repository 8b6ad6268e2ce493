"""
Import Binding Names.

Synthesizes identifiers for dependencies that have no binding in the source
(e.g. ``require('lib/foo')`` used inline). Two naming schemes exist:

1.  **Path names** (default): ``'$__' + path`` with every character that is not
    valid in an identifier replaced by ``_``, e.g. ``lib/foo-bar`` becomes
    ``$__lib_foo_bar``.
2.  **Logical names**: the file stem of the last path segment, e.g.
    ``../utils/date-helper.js`` becomes ``date_helper``.

Generated names never collide with the ``used_names`` set passed in by the
caller; the first free numeric suffix is appended instead (``date_helper1``).
The set is owned by a single conversion and grows as names are handed out.
"""

import re
from typing import Set

PATH_NAME_PREFIX = "$__"

_INVALID_IDENTIFIER_CHARS = re.compile(r"[^A-Za-z0-9_$]")

# Reserved words that can never be used as a binding.
RESERVED_WORDS = frozenset(
  {
    "await",
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "debugger",
    "default",
    "delete",
    "do",
    "else",
    "enum",
    "export",
    "extends",
    "false",
    "finally",
    "for",
    "function",
    "if",
    "implements",
    "import",
    "in",
    "instanceof",
    "interface",
    "let",
    "new",
    "null",
    "package",
    "private",
    "protected",
    "public",
    "return",
    "static",
    "super",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "typeof",
    "var",
    "void",
    "while",
    "with",
    "yield",
  }
)


def sanitize_identifier(text: str) -> str:
  """
  Replaces every non-identifier character with ``_``.

  Args:
      text (str): Arbitrary text.

  Returns:
      str: A string made only of ``[A-Za-z0-9_$]``, never starting with a digit.
  """
  cleaned = _INVALID_IDENTIFIER_CHARS.sub("_", text)
  if cleaned and cleaned[0].isdigit():
    cleaned = "_" + cleaned
  return cleaned


def path_name(module_path: str) -> str:
  """
  Builds the sigil-prefixed name for a module path.

  >>> path_name("lib/foo-bar")
  '$__lib_foo_bar'
  """
  return PATH_NAME_PREFIX + _INVALID_IDENTIFIER_CHARS.sub("_", module_path)


def logical_name(module_path: str) -> str:
  """
  Derives a name from the file stem of the last path segment.

  The extension (text after the last dot) is dropped, then the stem is
  sanitized. Falls back to `path_name` when nothing usable remains, for
  example for ``'./'``.

  >>> logical_name("../utils/date-helper.js")
  'date_helper'
  """
  segment = module_path.rstrip("/").rsplit("/", 1)[-1]
  stem = segment.rsplit(".", 1)[0] if "." in segment.lstrip(".") else segment
  name = sanitize_identifier(stem)
  if not name.strip("_"):
    return path_name(module_path)
  return name


def make_import_name(module_path: str, used_names: Set[str], use_logical_name: bool = False) -> str:
  """
  Creates a unique binding name for ``module_path`` and reserves it.

  Args:
      module_path (str): The dependency path as written in the source.
      used_names (Set[str]): Names already bound in the file. Updated in place.
      use_logical_name (bool): Use the file stem instead of the full path.

  Returns:
      str: A binding name absent from ``used_names`` before the call.
  """
  base = logical_name(module_path) if use_logical_name else path_name(module_path)
  return reserve_name(base, used_names)


def reserve_name(base: str, used_names: Set[str]) -> str:
  """
  Reserves ``base`` or, if taken, ``base1``, ``base2``, ...

  Args:
      base (str): Preferred identifier.
      used_names (Set[str]): Names already bound in the file. Updated in place.

  Returns:
      str: The reserved identifier.
  """
  candidate = base
  counter = 1
  while candidate in used_names or candidate in RESERVED_WORDS:
    candidate = f"{base}{counter}"
    counter += 1

  used_names.add(candidate)
  return candidate
