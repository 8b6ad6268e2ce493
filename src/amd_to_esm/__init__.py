"""
amd-to-esm Package.

A source-to-source transpiler rewriting AMD modules (``define([...], function
(...) {...})``) into ECMAScript modules (``import`` / ``export default``).

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import amd_to_esm
    code = "define(['a'], function (a) { return a.x; });"
    print(amd_to_esm.convert(code))
    # import a from 'a'; export default a.x;

Advanced Usage (Engine)
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from amd_to_esm import ConversionEngine, RuntimeConfig

    engine = ConversionEngine(RuntimeConfig(beautify=True, logical_name=True))
    res = engine.run(code)

    if res.success:
        print(res.code)
    else:
        print(f"Errors: {res.errors}")
"""

from typing import Any

from amd_to_esm.config import RuntimeConfig
from amd_to_esm.core.conversion_result import ConversionResult
from amd_to_esm.core.engine import ConversionEngine
from amd_to_esm.errors import (
  ConversionError,
  ParseError,
  StructuralConflictError,
  UnsupportedConstructError,
)

__version__ = "0.1.0"


def convert(code: str, beautify: bool = False, logical_name: bool = False, **options: Any) -> str:
  """
  Converts a string of AMD JavaScript into an ES module.

  Args:
      code (str): The source code to convert.
      beautify (bool): Re-indent the generated module code.
      logical_name (bool): Name generated imports after the module's file stem
          (``date_helper``) instead of its full path (``$__utils_date_helper``).
      **options: Other `RuntimeConfig` fields (e.g. ``indent_size``). The
          camelCase ``logicalName`` spelling is accepted too.

  Returns:
      str: The converted source, or ``code`` unchanged if it defines no module.

  Raises:
      UnsupportedConstructError: Named defines, identifier factories, dynamic module names.
      StructuralConflictError: More than one module definition.
      ParseError: Invalid JavaScript.
  """
  if "logicalName" in options:
    logical_name = bool(options.pop("logicalName")) or logical_name
  config = RuntimeConfig(beautify=beautify, logical_name=logical_name, **options)
  return ConversionEngine(config).convert(code)


__all__ = [
  "ConversionEngine",
  "ConversionError",
  "ConversionResult",
  "ParseError",
  "RuntimeConfig",
  "StructuralConflictError",
  "UnsupportedConstructError",
  "convert",
  "__version__",
]
