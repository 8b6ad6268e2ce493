"""
Entry point for module execution (``python -m amd_to_esm``).

This module delegates execution to the CLI handler in ``amd_to_esm.cli.__main__``.
"""

import sys
from amd_to_esm.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
