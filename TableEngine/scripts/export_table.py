#!/usr/bin/env python3
"""Table export tool.

Reads a table description from JSON and saves it in the format given by the
output filename extension (.html/.htm, .tex/.rnw, .rtf, .png, .pdf).

How to use:
    python -m TableEngine.scripts.export_table table.json out.html
    python -m TableEngine.scripts.export_table table.json out.html --inline-css
    python -m TableEngine.scripts.export_table table.json table.png --path ./exports --zoom 3 --expand 10"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict

from loguru import logger

from TableEngine import Table, TableEngineError, save
from TableEngine.exporter import ExportFormat, resolve_format
from TableEngine.utils import config


def load_table(json_path: Path) -> Table:
    """Read `json_path` and rebuild the Table it describes"""
    with open(json_path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ValueError(f"{json_path} must contain a JSON object, got {type(payload).__name__}")
    return Table.from_dict(payload)


def build_options(args: argparse.Namespace, export_format: ExportFormat) -> Dict[str, Any]:
    """Only pass the options the chosen writer understands"""
    options: Dict[str, Any] = {}
    if export_format is ExportFormat.HTML:
        if args.inline_css:
            options["inline_css"] = True
        if args.background:
            options["background"] = args.background
    elif export_format is ExportFormat.IMAGE:
        if args.zoom is not None:
            options["zoom"] = args.zoom
        if args.expand is not None:
            options["expand"] = args.expand
    return options


def main(argv=None) -> int:
    """main function"""
    parser = argparse.ArgumentParser(
        description="Table export tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Example:
  %(prog)s table.json out.html
  %(prog)s table.json out.tex --path ./exports
  %(prog)s table.json out.png --zoom 3 --expand 10 --verbose
        """,
    )
    parser.add_argument("table", help="JSON file describing the table")
    parser.add_argument("filename", help="Output file name; its extension selects the format")
    parser.add_argument("-p", "--path", default=None, help="Directory the output file is written to")
    parser.add_argument("--inline-css", action="store_true", help="Inline the CSS (HTML only)")
    parser.add_argument("--background", default=None, help="Page background colour (HTML only)")
    parser.add_argument("--zoom", type=float, default=None, help="Zoom factor (PNG/PDF only)")
    parser.add_argument(
        "--expand",
        type=int,
        nargs="+",
        default=None,
        help="Whitespace around the table in pixels, one value or top right bottom left (PNG/PDF only)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logs")

    args = parser.parse_args(argv)

    # Configuration log
    logger.remove()
    if args.verbose:
        logger.add(sys.stderr, level="DEBUG")
    else:
        logger.add(sys.stderr, level=config.settings.LOG_LEVEL)

    json_path = Path(args.table)
    if not json_path.exists():
        logger.error(f"File does not exist: {json_path}")
        return 1

    if args.expand is not None and len(args.expand) == 1:
        args.expand = args.expand[0]

    try:
        export_format = resolve_format(args.filename)
        logger.info(f"Read table: {json_path}")
        table = load_table(json_path)
        written = save(table, args.filename, path=args.path, **build_options(args, export_format))
    except (TableEngineError, ValueError) as e:
        logger.error(f"✗ Export failed: {e}")
        return 1

    logger.success(f"✓ Table exported: {written}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
