"""Public export functions.

    save(table, "out.html")            extension -> ExportFormat -> renderer -> file
    render_html(table)                 inline-CSS <table> string
    render_latex(table)                LatexOutput
    render_rtf(table)                  RTF document string
    extract_summaries(table)           {group_id: [summary records]}

Every entry point checks that it received a Table before doing anything else."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from loguru import logger

from .errors import MissingExtension, NoSummaryDefined, UnsupportedExtension
from .ir import Table, build_data, stop_if_not_table
from .ir.builder import copy_summary_data
from .renderers import (
    HTMLRenderer,
    ImageRenderer,
    LaTeXRenderer,
    LatexOutput,
    RenderMode,
    RTFRenderer,
)
from .utils.paths import PathLike, file_extension, resolve_filename


class ExportFormat(str, Enum):
    HTML = "html"
    LATEX = "latex"
    RTF = "rtf"
    IMAGE = "image"


# `.ltx` is accepted but deliberately absent from SUPPORTED_EXTENSIONS_TEXT
EXTENSION_FORMATS: Dict[str, ExportFormat] = {
    "html": ExportFormat.HTML,
    "htm": ExportFormat.HTML,
    "tex": ExportFormat.LATEX,
    "ltx": ExportFormat.LATEX,
    "rnw": ExportFormat.LATEX,
    "rtf": ExportFormat.RTF,
    "png": ExportFormat.IMAGE,
    "pdf": ExportFormat.IMAGE,
}

SUPPORTED_EXTENSIONS_TEXT = (
    "We can use:\n"
    " * `.html`, `.htm` (HTML file)\n"
    " * `.png`          (PNG file)\n"
    " * `.pdf`          (PDF file)\n"
    " * `.tex`, `.rnw`  (LaTeX file)\n"
    " * `.rtf`          (RTF file)\n"
)

RENDERERS: Dict[ExportFormat, Type[Any]] = {
    ExportFormat.HTML: HTMLRenderer,
    ExportFormat.LATEX: LaTeXRenderer,
    ExportFormat.RTF: RTFRenderer,
    ExportFormat.IMAGE: ImageRenderer,
}


def resolve_format(filename: PathLike) -> ExportFormat:
    """Map `filename`'s extension (case-insensitive) to its ExportFormat."""
    extension = file_extension(filename)
    if not extension:
        raise MissingExtension(
            "A file extension is required in the provided filename.",
            hint=SUPPORTED_EXTENSIONS_TEXT,
        )
    try:
        return EXTENSION_FORMATS[extension]
    except KeyError:
        raise UnsupportedExtension(
            extension,
            f"The file extension used (`.{extension}`) doesn't have an associated saving function.",
            hint=SUPPORTED_EXTENSIONS_TEXT,
        ) from None


def save(table: Table, filename: PathLike, path: Optional[PathLike] = None, **options: Any) -> Path:
    """Save `table` to a file whose format follows from the filename extension.

    Parameters:
        table: the Table to export.
        filename: output file name; `.html/.htm`, `.tex/.ltx/.rnw`, `.rtf`,
            `.png` or `.pdf`.
        path: optional directory joined in front of `filename`.
        options: passed to the format writer, e.g. `inline_css`, `background`
            and `libdir` for HTML; `zoom`, `expand` and `screenshotter` for images.

    Return:
        Path: the absolute path that was written"""
    stop_if_not_table(table)
    export_format = resolve_format(filename)
    target = resolve_filename(filename, path)
    renderer = RENDERERS[export_format]()
    logger.debug(f"Saving table {table.table_id} as {export_format.value}: {target}")
    return renderer.save(table, target, **options)


def render_html(table: Table, inline_css: bool = True) -> str:
    """HTML for `table`: a bare inline-styled `<table>` or, with
    `inline_css=False`, a `<div>` carrying a scoped `<style>` block."""
    stop_if_not_table(table)
    return HTMLRenderer().render(table, inline_css=inline_css)


def render_latex(table: Table, dependency_tracker: Any = None) -> LatexOutput:
    stop_if_not_table(table)
    return LaTeXRenderer().render(table, dependency_tracker=dependency_tracker)


def render_rtf(table: Table, mode: RenderMode = RenderMode.STANDALONE) -> str:
    stop_if_not_table(table)
    return RTFRenderer().render(table, mode=mode)


def extract_summaries(table: Table) -> Dict[str, List[Dict[str, Any]]]:
    """Unformatted summary rows keyed by group id (`::GRAND_SUMMARY` for the
    grand summary). Each record holds `groupname`, `rowname` and one value per
    column."""
    stop_if_not_table(table)
    if not table.has_summary():
        raise NoSummaryDefined("There is no summary list to extract.")
    built = build_data(table, "html")
    return copy_summary_data(built)


__all__ = [
    "ExportFormat",
    "EXTENSION_FORMATS",
    "SUPPORTED_EXTENSIONS_TEXT",
    "RENDERERS",
    "resolve_format",
    "save",
    "render_html",
    "render_latex",
    "render_rtf",
    "extract_summaries",
]
