"""RTF renderer: BuiltTable -> Rich Text Format document.

The document is one brace group, so the closing `}` is the table_end fragment and
is stitched last:

    table_start, heading, columns, body, footnotes, source_notes, table_end

Text arrives RTF-escaped from the build step, which keeps the braces balanced."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Sequence

from ..ir import Table
from ..ir.builder import BuiltRow, BuiltTable
from .base import BaseRenderer

# Letter paper with 1" margins: 6.5in of text width
TABLE_WIDTH_TWIPS = 9360

_ALIGN_CONTROLS = {"left": "\\ql", "center": "\\qc", "right": "\\qr"}

RTF_HEADER = (
    "{\\rtf1\\ansi\\ansicpg1252\\deff0\\uc1\n"
    "{\\fonttbl{\\f0\\fswiss\\fcharset0 Helvetica;}}\n"
    "{\\colortbl;\\red0\\green0\\blue0;\\red211\\green211\\blue211;}\n"
    "\\f0\\fs20\n"
)


class RenderMode(str, Enum):
    """How the RTF result is returned.

    STANDALONE: a plain document string.
    EMBEDDED: a RawOutput, marked for hosts that paste it into a larger document
        without further processing."""

    STANDALONE = "standalone"
    EMBEDDED = "embedded"


class RawOutput(str):
    """Pre-formatted output that must be passed through untouched."""

    is_raw = True


class RTFRenderer(BaseRenderer):
    """BuiltTable -> RTF."""

    context = "rtf"
    fragment_order = (
        "table_start",
        "heading",
        "columns",
        "body",
        "footnotes",
        "source_notes",
        "table_end",
    )

    @property
    def format_name(self) -> str:
        return "rtf"

    def build_fragments(self, built: BuiltTable) -> Dict[str, str]:
        return {
            "table_start": RTF_HEADER,
            "heading": self._render_heading(built),
            "columns": self._render_columns(built),
            "body": self._render_body(built),
            "footnotes": self._render_footnotes(built),
            "source_notes": self._render_source_notes(built),
            "table_end": "}\n",
        }

    def render(self, table: Table, mode: RenderMode = RenderMode.STANDALONE, **options: Any) -> str:
        rtf = self.compose(self.build(table))
        if RenderMode(mode) is RenderMode.EMBEDDED:
            return RawOutput(rtf)
        return rtf

    def save(self, table: Table, target, **options: Any):
        return super().save(table, target, mode=RenderMode.STANDALONE)

    # ====== Fragments ======

    @staticmethod
    def _render_heading(built: BuiltTable) -> str:
        if not built.has_heading:
            return ""
        lines = [f"\\pard\\qc{{\\b\\fs28 {built.title}}}\\par\n"]
        if built.subtitle:
            lines.append(f"\\pard\\qc{{\\fs24 {built.subtitle}}}\\par\n")
        return "".join(lines)

    @staticmethod
    def _row_definition(n_cells: int, border: str = "") -> str:
        width = TABLE_WIDTH_TWIPS // max(n_cells, 1)
        edges = "".join(
            f"{border}\\cellx{TABLE_WIDTH_TWIPS if idx == n_cells else width * idx}"
            for idx in range(1, n_cells + 1)
        )
        return f"\\trowd\\trgaph108\\trleft0{edges}\n"

    @staticmethod
    def _cell(text: str, align: str, style: str = "") -> str:
        content = f"{{{style} {text}}}" if style else text
        return f"\\pard\\intbl{_ALIGN_CONTROLS[align]} {content}\\cell\n"

    def _render_columns(self, built: BuiltTable) -> str:
        cells: List[str] = []
        if built.has_stub:
            cells.append(self._cell(built.stubhead_label, "left", "\\b"))
        for column in built.columns:
            cells.append(self._cell(column.label, column.align, "\\b"))
        border = "\\clbrdrb\\brdrs\\brdrw15"
        return self._row_definition(built.n_columns, border) + "".join(cells) + "\\row\n"

    def _render_body(self, built: BuiltTable) -> str:
        aligns = [column.align for column in built.columns]
        parts: List[str] = []
        for group in built.groups:
            if group.label is not None:
                parts.append(self._row_definition(1) + self._cell(group.label, "left", "\\b") + "\\row\n")
            parts.extend(self._render_row(built, row, aligns) for row in group.rows)
            parts.extend(self._render_row(built, row, aligns, "\\i") for row in group.summary_rows)
        parts.extend(self._render_row(built, row, aligns, "\\b") for row in built.grand_summary_rows)
        return "".join(parts)

    def _render_row(self, built: BuiltTable, row: BuiltRow, aligns: Sequence[str], style: str = "") -> str:
        cells: List[str] = []
        if built.has_stub:
            cells.append(self._cell(row.stub, "left", style))
        for align, text in zip(aligns, row.cells):
            cells.append(self._cell(text, align, style))
        return self._row_definition(built.n_columns) + "".join(cells) + "\\row\n"

    @staticmethod
    def _render_footnotes(built: BuiltTable) -> str:
        return "".join(
            f"\\pard\\ql{{\\fs16 {built.footnote_mark([note.mark])}{note.text}}}\\par\n"
            for note in built.footnotes
        )

    @staticmethod
    def _render_source_notes(built: BuiltTable) -> str:
        return "".join(f"\\pard\\ql{{\\fs16 {note}}}\\par\n" for note in built.source_notes)


__all__ = ["RTFRenderer", "RenderMode", "RawOutput", "TABLE_WIDTH_TWIPS"]
