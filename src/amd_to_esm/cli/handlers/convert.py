"""
Convert Command Handler.

This module implements the batch driver behind the ``amd-to-esm`` command.
It orchestrates:
1. Input discovery (positional files, or a directory filtered by extension and ignore globs).
2. Conversion of each file by the Engine, in isolation.
3. Output writing (mirrored tree under ``--out``) or printing to stdout.
4. Per-file failure reporting and an optional JSON trace dump.

A failing file never stops the batch; the exit code reports whether any failed.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.markup import escape
from rich.table import Table

from amd_to_esm.config import RuntimeConfig
from amd_to_esm.core.conversion_result import ConversionResult
from amd_to_esm.core.engine import ConversionEngine
from amd_to_esm.utils.console import console, log_error, log_info, log_success, log_warning
from amd_to_esm.utils.files import list_input_files, read_source, write_output


def handle_convert(
  files: List[Path],
  input_dir: Optional[Path],
  output_dir: Optional[Path],
  config: RuntimeConfig,
  json_trace_path: Optional[Path] = None,
) -> int:
  """
  Handles the conversion of files or a directory.

  Args:
      files: Positional input files (file mode, output on stdout).
      input_dir: Directory to convert (directory mode).
      output_dir: Destination root in directory mode.
      config: Resolved runtime configuration.
      json_trace_path: Optional path to dump execution traces as JSON.

  Returns:
      int: Exit code (0 if every file converted, 1 otherwise).
  """
  engine = ConversionEngine(config)
  batch_results: Dict[str, ConversionResult] = {}

  if input_dir is not None:
    if not input_dir.is_dir():
      log_error(f"Input directory not found: {escape(str(input_dir))}")
      return 1

    rel_paths = list_input_files(input_dir, config.extensions, config.ignore)
    if not rel_paths:
      log_warning(f"No {', '.join(config.extensions)} files found in {escape(str(input_dir))}")
      return 0

    log_info(f"Processing {len(rel_paths)} files from [path]{escape(str(input_dir))}[/path]...")
    for rel_path in rel_paths:
      src_file = input_dir / rel_path
      dest_file = output_dir / rel_path if output_dir else None
      batch_results[str(src_file)] = _convert_single_file(engine, src_file, dest_file)
  else:
    for src_file in files:
      batch_results[str(src_file)] = _convert_single_file(engine, src_file, None)

  if json_trace_path:
    _dump_traces(batch_results, json_trace_path)

  _print_batch_summary(batch_results)
  return 0 if all(r.success for r in batch_results.values()) else 1


def _convert_single_file(engine: ConversionEngine, input_path: Path, output_path: Optional[Path]) -> ConversionResult:
  """
  Converts one file, writing or printing the result.

  Conversion errors and I/O errors are reported and returned as a failed
  result; they never propagate to the batch loop.

  Args:
      engine: The shared (stateless) engine.
      input_path: Source file path.
      output_path: Destination file path, or None to print to stdout.

  Returns:
      ConversionResult: Result object containing status and code.
  """
  try:
    code = read_source(input_path)
  except (OSError, ValueError) as e:
    result = ConversionResult(success=False, errors=[f"Cannot read file: {e}"])
    _report_failure(input_path, result)
    return result

  result = engine.run(code)
  if not result.success:
    _report_failure(input_path, result)
    return result

  if output_path is None:
    print(result.code)
    return result

  try:
    write_output(output_path, result.code)
  except OSError as e:
    result = ConversionResult(code=result.code, success=False, errors=[f"Cannot write output: {e}"])
    _report_failure(input_path, result)
    return result

  log_success(f"Successfully compiled [path]{escape(str(input_path))}[/path] to [path]{escape(str(output_path))}[/path]")
  return result


def _report_failure(input_path: Path, result: ConversionResult) -> None:
  reason = "; ".join(result.errors) or "Unknown Error"
  log_error(f"{escape(str(input_path))} - Unable to compile. Reason: {escape(reason)}")


def _dump_traces(results: Dict[str, ConversionResult], json_trace_path: Path) -> None:
  payload: List[Dict[str, Any]] = [
    {"file": name, "success": res.success, "events": res.trace_events} for name, res in results.items()
  ]
  try:
    json_trace_path.parent.mkdir(parents=True, exist_ok=True)
    with open(json_trace_path, "wt", encoding="utf-8") as f:
      json.dump(payload, f, indent=2)
    log_info(f"Trace saved to [path]{escape(str(json_trace_path))}[/path]")
  except OSError as e:
    log_error(f"Failed to write trace: {e}")


def _print_batch_summary(results: Dict[str, ConversionResult]) -> None:
  """
  Renders a summary table of failed conversions to the console.

  Args:
      results: Dictionary mapping file paths to conversion results.
  """
  total = len(results)
  failures = {name: res for name, res in results.items() if not res.success}

  if not failures:
    unchanged = sum(1 for r in results.values() if not r.changed)
    if total > 1:
      log_success(f"Batch Complete: {total}/{total} files converted ({unchanged} without AMD structure).")
    return

  table = Table(title="Conversion Report")
  table.add_column("File", style="cyan")
  table.add_column("Reason", style="red")

  for filename, res in failures.items():
    table.add_row(escape(filename), escape("; ".join(res.errors) or "Unknown Error"))

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {total - len(failures)} Passed, {len(failures)} Failed.")
