"""
File-System Helpers for the Batch Driver.

Input discovery uses plain glob semantics:
every file under the input directory whose name ends with one of the
configured extensions, minus anything matched by an ignore glob (evaluated
relative to the same directory, e.g. ``libs/**/*``).
"""

from pathlib import Path
from typing import Iterable, List, Set


def list_input_files(root: Path, extensions: Iterable[str], ignore: Iterable[str] = ()) -> List[Path]:
  """
  Lists convertible files under ``root``.

  Args:
      root (Path): The input directory.
      extensions (Iterable[str]): Accepted suffixes, e.g. ``[".js"]``.
      ignore (Iterable[str]): Glob patterns relative to ``root``.

  Returns:
      List[Path]: Paths relative to ``root``, sorted.
  """
  suffixes = tuple(extensions)
  candidates = {p.relative_to(root) for p in root.rglob("*") if p.is_file() and p.name.endswith(suffixes)}

  ignored: Set[Path] = set()
  for pattern in ignore:
    ignored.update(p.relative_to(root) for p in root.glob(pattern))

  return sorted(candidates - ignored)


def read_source(path: Path) -> str:
  """Reads a source file as UTF-8 text."""
  with open(path, "rt", encoding="utf-8") as f:
    return f.read()


def write_output(path: Path, code: str) -> None:
  """
  Writes ``code`` to ``path``, creating parent directories as needed.

  Args:
      path (Path): Destination file.
      code (str): Converted source.
  """
  path.parent.mkdir(parents=True, exist_ok=True)
  with open(path, "wt", encoding="utf-8") as f:
    f.write(code)
