from __future__ import annotations

import argparse
import dataclasses
import sys
import time
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from attribute_slicer.config.loader import ConfigError, default_settings_path, load_settings
from attribute_slicer.dataview.frame import (
    TABLE_SUFFIXES,
    DataViewReadError,
    data_view_from_frame,
    read_data_view_file,
    read_table,
)
from attribute_slicer.logging.init import log_summary, set_debug, setup_logging
from attribute_slicer.models.config_models import WIDTH_BASES, SlicerSettings
from attribute_slicer.models.options import ConversionOptions
from attribute_slicer.models.run_result import FileStat, RunResult
from attribute_slicer.services.conversion import convert
from attribute_slicer.services.progress import ProgressTracker
from attribute_slicer.services.summary import render_summary_line

"""CLI entrypoint.

Converts one or more inputs (JSON data views, CSV/Excel tables) into render
model JSON:
- Load .env, then the settings file (--settings or ATTRIBUTE_SLICER_SETTINGS)
- Convert each input; write <stem>.json into --output-dir or print to stdout
- Emit a SUMMARY line

Exit codes: 0 all inputs converted, 2 some inputs failed, 1 fatal (settings).
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env via python-dotenv; existing environment wins unless override."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="attribute-slicer", description="Convert data views into slicer render models"
    )
    p.add_argument("inputs", nargs="+", type=Path, help="JSON data view or CSV/Excel table files")
    p.add_argument("--settings", type=Path, default=None, help="YAML settings file")
    p.add_argument("--search", default=None, help="Search text to highlight in labels")
    p.add_argument("--precision", type=int, default=None, help="Decimal places for rendered values")
    p.add_argument("--width-basis", choices=WIDTH_BASES, default=None, help="Segment width convention")
    p.add_argument("--category", default=None, help="Category column (table input)")
    p.add_argument("--measure", action="append", default=[], help="Measure column, repeatable (table input)")
    p.add_argument("--series", default=None, help="Series column (table input)")
    p.add_argument("--sheet", default=None, help="Excel sheet name (table input)")
    p.add_argument("--output-dir", type=Path, default=None, help="Write <input stem>.json files here")
    p.add_argument("--indent", type=int, default=None, help="JSON indent")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_settings(args: argparse.Namespace) -> SlicerSettings:
    path = args.settings or default_settings_path()
    settings = load_settings(path) if path is not None else SlicerSettings()
    if args.precision is not None:
        settings = dataclasses.replace(
            settings, formatting=dataclasses.replace(settings.formatting, precision=args.precision)
        )
    if args.width_basis is not None:
        settings = dataclasses.replace(settings, width_basis=args.width_basis)
    return settings


def _load_data_view(path: Path, args: argparse.Namespace) -> dict[str, Any]:
    if not path.exists():
        raise DataViewReadError(f"input not found: {path}")
    if path.suffix.lower() in TABLE_SUFFIXES:
        if not args.category:
            raise DataViewReadError("--category is required for table input")
        df = read_table(path, sheet=args.sheet)
        return data_view_from_frame(df, args.category, args.measure, args.series)
    return read_data_view_file(path)


def _convert_file(path: Path, args: argparse.Namespace, options: ConversionOptions) -> FileStat:
    started = time.perf_counter()
    data_view = _load_data_view(path, args)
    result = convert(data_view, options)
    text = result.to_json(indent=args.indent)
    output_path = None
    if args.output_dir is not None:
        args.output_dir.mkdir(parents=True, exist_ok=True)
        out = args.output_dir / f"{path.stem}.json"
        out.write_text(text + "\n", encoding="utf-8")
        output_path = str(out)
    else:
        print(text)
    return FileStat(
        file_name=path.name,
        status="success",
        items=len(result.items),
        series=len(result.segment_info),
        elapsed_seconds=time.perf_counter() - started,
        output_path=output_path,
    )


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only -> read process args (an explicit [] must not pick up pytest's argv)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    try:
        settings = _resolve_settings(args)
    except ConfigError as e:
        logger.error(f"settings: {e}")
        return EXIT_FATAL
    options = ConversionOptions.from_settings(settings, search_text=args.search)

    start_time = datetime.now(UTC)
    stats: list[FileStat] = []
    with ProgressTracker(len(args.inputs)) as progress:
        for path in args.inputs:
            progress.start_file(path)
            try:
                stat = _convert_file(path, args, options)
            except (DataViewReadError, OSError) as e:
                logger.error(f"{path.name}: {e}")
                stat = FileStat(file_name=path.name, status="failed", error=str(e))
            else:
                logger.info(f"{path.name}: items={stat.items} series={stat.series}")
            stats.append(stat)
            progress.finish_file(success=stat.status == "success")
    result = RunResult.from_stats(stats, start_time, datetime.now(UTC))

    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
