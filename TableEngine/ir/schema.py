"""Shared constants for the table model, the build step and the renderers."""

from __future__ import annotations

from typing import Any, Dict, Tuple

RENDER_CONTEXTS: Tuple[str, ...] = ("html", "latex", "rtf")

GRAND_SUMMARY_ID = "::GRAND_SUMMARY"

SUMMARY_GROUP_COLUMN = "groupname"
SUMMARY_ROW_COLUMN = "rowname"

DEFAULT_MISSING_TEXT = "NA"

COLUMN_ALIGNMENTS: Tuple[str, ...] = ("left", "center", "right")

# LaTeX packages the longtable output relies on
LATEX_PACKAGES: Tuple[str, ...] = ("amsmath", "booktabs", "caption", "longtable")

# Fragment names in the order they are created; each renderer decides the order
# in which they are stitched together.
FRAGMENT_NAMES: Tuple[str, ...] = (
    "table_start",
    "heading",
    "columns",
    "body",
    "footnotes",
    "source_notes",
    "table_end",
)

DEFAULT_OPTIONS: Dict[str, Any] = {
    "table_width": "auto",
    "table_font_size": "16px",
    "table_font_color": "#333333",
    "table_font_names": "-apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, Ubuntu, Cantarell, 'Helvetica Neue', 'Fira Sans', 'Droid Sans', Arial, sans-serif",
    "table_background_color": "#FFFFFF",
    "table_border_top_color": "#A8A8A8",
    "table_border_bottom_color": "#A8A8A8",
    "heading_align": "center",
    "heading_title_font_size": "125%",
    "heading_subtitle_font_size": "85%",
    "heading_border_bottom_color": "#D3D3D3",
    "column_labels_font_weight": "normal",
    "column_labels_border_bottom_color": "#D3D3D3",
    "row_group_background_color": "#FFFFFF",
    "row_group_font_weight": "initial",
    "data_row_padding": "8px",
    "summary_row_background_color": "#FFFFFF",
    "grand_summary_row_background_color": "#FFFFFF",
    "footnotes_font_size": "90%",
    "source_notes_font_size": "90%",
}

__all__ = [
    "RENDER_CONTEXTS",
    "GRAND_SUMMARY_ID",
    "SUMMARY_GROUP_COLUMN",
    "SUMMARY_ROW_COLUMN",
    "DEFAULT_MISSING_TEXT",
    "COLUMN_ALIGNMENTS",
    "LATEX_PACKAGES",
    "FRAGMENT_NAMES",
    "DEFAULT_OPTIONS",
]
