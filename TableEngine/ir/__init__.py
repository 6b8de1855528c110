"""Table model, validation and the build pipeline shared by every renderer.

A Table records what the caller configured; build_data resolves it for one render
context into a BuiltTable that the renderers turn into document fragments."""

from .schema import (
    RENDER_CONTEXTS,
    GRAND_SUMMARY_ID,
    LATEX_PACKAGES,
    FRAGMENT_NAMES,
    DEFAULT_OPTIONS,
)
from .table import (
    Table,
    CellsTitle,
    CellsColumnLabels,
    cells_title,
    cells_column_labels,
    format_number,
)
from .validator import TableValidator, stop_if_not_table
from .builder import BuiltTable, build_data

__all__ = [
    "RENDER_CONTEXTS",
    "GRAND_SUMMARY_ID",
    "LATEX_PACKAGES",
    "FRAGMENT_NAMES",
    "DEFAULT_OPTIONS",
    "Table",
    "CellsTitle",
    "CellsColumnLabels",
    "cells_title",
    "cells_column_labels",
    "format_number",
    "TableValidator",
    "stop_if_not_table",
    "BuiltTable",
    "build_data",
]
