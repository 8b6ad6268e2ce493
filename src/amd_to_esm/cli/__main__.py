"""
Main Entry Point for the amd-to-esm CLI.

This module handles argument parsing and dispatches to the command handler
defined in `amd_to_esm.cli.handlers`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from amd_to_esm import __version__
from amd_to_esm.cli import handlers
from amd_to_esm.config import RuntimeConfig, parse_extensions
from amd_to_esm.utils.console import log_error, set_verbosity


def build_parser() -> argparse.ArgumentParser:
  """Builds the argparse definition."""
  parser = argparse.ArgumentParser(prog="amd-to-esm", description="amd-to-esm: Convert AMD modules to ES modules")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  parser.add_argument("files", nargs="*", type=Path, help="Files to convert (printed to stdout)")
  parser.add_argument("-d", "--dir", type=Path, default=None, help="Directory to convert")
  parser.add_argument("-o", "--out", type=Path, default=None, help="Output directory (required with --dir)")
  parser.add_argument(
    "-i",
    "--ignore",
    action="append",
    default=[],
    help="Glob (relative to --dir) to exclude, e.g. 'libs/**/*'. Repeatable.",
  )
  parser.add_argument(
    "-b",
    "--beautify",
    action="store_true",
    default=None,
    help="Run the generated module code through jsbeautifier (mainly useful for fixing indentation)",
  )
  parser.add_argument(
    "-l",
    "--logical-name",
    "--logicalName",
    dest="logical_name",
    action="store_true",
    default=None,
    help="Use the module file name for newly named imports",
  )
  parser.add_argument("-e", "--ext", default=None, help="Extensions, separated by commas (default: .js)")
  parser.add_argument("--indent-size", type=int, default=None, help="Indentation used by --beautify (default: 4)")
  parser.add_argument("--json-trace", type=Path, default=None, help="Dump the conversion trace of every file to JSON")
  parser.add_argument("-v", "--verbose", action="store_true", help="Log engine decisions")
  return parser


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  args = build_parser().parse_args(argv)
  set_verbosity(args.verbose)

  if args.dir and not args.out:
    log_error("If using the --dir option you must also specify the --out option.")
    return 1

  if args.dir and args.files:
    log_error("Positional arguments are not allowed if using the --dir option.")
    return 1

  if not args.dir and not args.files:
    log_error("No files provided.")
    return 1

  try:
    config = RuntimeConfig.load(
      beautify=args.beautify,
      logical_name=args.logical_name,
      indent_size=args.indent_size,
      extensions=parse_extensions(args.ext),
      ignore=args.ignore,
      search_path=args.dir or Path.cwd(),
    )
  except ValueError as e:
    log_error(f"Invalid configuration: {e}")
    return 1

  return handlers.handle_convert(args.files, args.dir, args.out, config, args.json_trace)


if __name__ == "__main__":
  sys.exit(main())
