"""
Runtime Configuration Store.

Options are resolved in three layers, later layers winning:
1. Model defaults.
2. The ``[tool.amd_to_esm]`` table of the nearest ``pyproject.toml``.
3. Explicit overrides (CLI flags or keyword arguments).
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

TOOL_SECTION = "amd_to_esm"


class RuntimeConfig(BaseModel):
  """
  Configuration container for the conversion engine and batch driver.
  """

  model_config = ConfigDict(populate_by_name=True)

  beautify: bool = Field(False, description="Re-indent the generated module code with jsbeautifier.")
  logical_name: bool = Field(
    False,
    alias="logicalName",
    description="Name generated imports after the module file stem instead of the full path.",
  )
  indent_size: int = Field(4, ge=0, description="Indentation width used when beautifying.")
  extensions: List[str] = Field(default_factory=lambda: [".js"], description="File extensions to convert.")
  ignore: List[str] = Field(default_factory=list, description="Glob patterns excluded in directory mode.")

  @field_validator("extensions")
  @classmethod
  def normalize_extensions(cls, v: List[str]) -> List[str]:
    """
    Ensures every extension starts with a dot and drops empty entries.

    Args:
        v (List[str]): Raw extensions, e.g. ``["js", ".jsx"]``.

    Returns:
        List[str]: e.g. ``[".js", ".jsx"]``.

    Raises:
        ValueError: If no usable extension remains.
    """
    cleaned = []
    for ext in v:
      ext = ext.strip()
      if not ext:
        continue
      cleaned.append(ext if ext.startswith(".") else f".{ext}")
    if not cleaned:
      raise ValueError("At least one file extension is required.")
    return cleaned

  @classmethod
  def load(
    cls,
    beautify: Optional[bool] = None,
    logical_name: Optional[bool] = None,
    indent_size: Optional[int] = None,
    extensions: Optional[List[str]] = None,
    ignore: Optional[List[str]] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        beautify (Optional[bool]): Override for the formatting pass.
        logical_name (Optional[bool]): Override for logical import naming.
        indent_size (Optional[int]): Override for the beautifier indent.
        extensions (Optional[List[str]]): Override for directory-mode extensions.
        ignore (Optional[List[str]]): Extra ignore globs (added to the TOML ones).
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    toml_config, _ = _load_toml_settings(search_path or Path.cwd())
    settings: Dict[str, Any] = dict(toml_config)

    overrides = {
      "beautify": beautify,
      "logical_name": logical_name,
      "indent_size": indent_size,
      "extensions": extensions,
    }
    if logical_name is not None:
      # The alias would otherwise shadow the override.
      settings.pop("logicalName", None)
    for key, value in overrides.items():
      if value is not None:
        settings[key] = value

    toml_ignore = list(toml_config.get("ignore", []))
    settings["ignore"] = toml_ignore + [p for p in ignore or [] if p not in toml_ignore]

    return cls.model_validate(settings)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory definition was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get(TOOL_SECTION, {}), parent

  return {}, None


def parse_extensions(value: Optional[str]) -> Optional[List[str]]:
  """
  Parses a comma separated extension list (``"js,.jsx"``).

  Args:
      value (Optional[str]): Raw CLI value.

  Returns:
      Optional[List[str]]: The split list, or None if no value was given.
  """
  if not value:
    return None
  return [part for part in (p.strip() for p in value.split(",")) if part]
