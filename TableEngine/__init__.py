"""Table Engine.

Export layer for presentation tables: renders a configured Table to HTML, LaTeX,
RTF or a PNG/PDF screenshot, picks the format from the output filename, and
exposes the computed summary rows."""

from .errors import (
    TableEngineError,
    InvalidTableObject,
    ExtensionError,
    MissingExtension,
    UnsupportedExtension,
    NoSummaryDefined,
    MissingOptionalDependency,
    TableBuildError,
    RenderError,
)
from .ir import Table, build_data, cells_title, cells_column_labels
from .renderers import LatexDependencyTracker, RenderMode
from .exporter import (
    ExportFormat,
    save,
    render_html,
    render_latex,
    render_rtf,
    extract_summaries,
)

__version__ = "1.0.0"
__author__ = "Table Engine Team"

__all__ = [
    "Table",
    "build_data",
    "cells_title",
    "cells_column_labels",
    "ExportFormat",
    "RenderMode",
    "LatexDependencyTracker",
    "save",
    "render_html",
    "render_latex",
    "render_rtf",
    "extract_summaries",
    "TableEngineError",
    "InvalidTableObject",
    "ExtensionError",
    "MissingExtension",
    "UnsupportedExtension",
    "NoSummaryDefined",
    "MissingOptionalDependency",
    "TableBuildError",
    "RenderError",
]
