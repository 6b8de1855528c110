"""Build pipeline: Table + render context -> BuiltTable.

The render context decides how every piece of text is escaped and how footnote
marks are written, so each export builds its own model:

    build_data(table, "html")  ->  BuiltTable  ->  HTMLRenderer fragments
    build_data(table, "latex") ->  BuiltTable  ->  LaTeXRenderer fragments
    build_data(table, "rtf")   ->  BuiltTable  ->  RTFRenderer fragments

Built models are never cached or shared; the Table itself is only read."""

from __future__ import annotations

import copy
import html
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from loguru import logger

from ..errors import TableBuildError
from .schema import (
    DEFAULT_MISSING_TEXT,
    DEFAULT_OPTIONS,
    GRAND_SUMMARY_ID,
    RENDER_CONTEXTS,
    SUMMARY_ROW_COLUMN,
)
from .summary import directive_groups, summarize_rows
from .table import CellsColumnLabels, CellsTitle, Table, format_number
from .validator import TableValidator


# ====== Escaping ======

_LATEX_SPECIALS = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}
_LATEX_PATTERN = re.compile("|".join(re.escape(char) for char in _LATEX_SPECIALS))


def escape_html(text: str) -> str:
    return html.escape(text, quote=False)


def escape_latex(text: str) -> str:
    return _LATEX_PATTERN.sub(lambda match: _LATEX_SPECIALS[match.group(0)], text)


def escape_rtf(text: str) -> str:
    """Escape control characters and encode non-ASCII text as \\uN? units."""
    out: List[str] = []
    for char in text:
        if char in "\\{}":
            out.append("\\" + char)
        elif char == "\n":
            out.append("\\line ")
        elif ord(char) < 128:
            out.append(char)
        else:
            # RTF counts in signed 16-bit UTF-16 code units
            data = char.encode("utf-16-le")
            for idx in range(0, len(data), 2):
                unit = int.from_bytes(data[idx:idx + 2], "little")
                if unit > 32767:
                    unit -= 65536
                out.append(f"\\u{unit}?")
    return "".join(out)


ESCAPERS: Dict[str, Callable[[str], str]] = {
    "html": escape_html,
    "latex": escape_latex,
    "rtf": escape_rtf,
}

MARK_TEMPLATES: Dict[str, str] = {
    "html": '<sup class="gt_footnote_marks">{marks}</sup>',
    "latex": "\\textsuperscript{{{marks}}}",
    "rtf": "{{\\super {marks}}}",
}


# ====== Built model ======

@dataclass
class BuiltColumn:
    name: str
    label: str
    align: str


@dataclass
class BuiltRow:
    stub: str
    cells: List[str]
    row_type: str = "data"


@dataclass
class BuiltGroup:
    group_id: Optional[str]
    label: Optional[str]
    rows: List[BuiltRow] = field(default_factory=list)
    summary_rows: List[BuiltRow] = field(default_factory=list)


@dataclass
class BuiltFootnote:
    mark: str
    text: str


@dataclass
class BuiltTable:
    """Fully resolved, context-escaped table ready for fragment creation."""

    context: str
    table_id: str
    title: Optional[str] = None
    subtitle: Optional[str] = None
    stubhead_label: str = ""
    has_stub: bool = False
    columns: List[BuiltColumn] = field(default_factory=list)
    groups: List[BuiltGroup] = field(default_factory=list)
    grand_summary_rows: List[BuiltRow] = field(default_factory=list)
    footnotes: List[BuiltFootnote] = field(default_factory=list)
    source_notes: List[str] = field(default_factory=list)
    summary_data: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def n_columns(self) -> int:
        """Number of rendered columns, stub included."""
        return len(self.columns) + (1 if self.has_stub else 0)

    @property
    def has_heading(self) -> bool:
        return self.title is not None

    @property
    def has_row_groups(self) -> bool:
        return any(group.label is not None for group in self.groups)

    def footnote_mark(self, marks: Sequence[str]) -> str:
        if not marks:
            return ""
        return MARK_TEMPLATES[self.context].format(marks=",".join(marks))


# ====== Build step ======

def build_data(table: Table, context: str) -> BuiltTable:
    """Build `table` for one render context (`html`, `latex` or `rtf`)."""
    if context not in RENDER_CONTEXTS:
        raise TableBuildError(
            f"Unknown render context `{context}`; expected one of {', '.join(RENDER_CONTEXTS)}."
        )
    TableValidator().ensure_valid(table)
    built = _TableBuilder(table, context).build()
    logger.debug(
        f"Built table {built.table_id} for the {context} context: "
        f"{sum(len(g.rows) for g in built.groups)} rows, {len(built.columns)} columns"
    )
    return built


class _TableBuilder:
    """Resolves one Table for one context; discarded after `build()`."""

    def __init__(self, table: Table, context: str):
        self.table = table
        self.context = context
        self.escape = ESCAPERS[context]
        self.visible_columns = [
            column for column in table.columns
            if column not in (table.rowname_col, table.groupname_col)
        ]
        self._note_marks: Dict[str, str] = {}

    def build(self) -> BuiltTable:
        table = self.table
        location_marks = self._assign_footnote_marks()

        built = BuiltTable(
            context=self.context,
            table_id=table.table_id,
            has_stub=table.rowname_col is not None or table.has_summary(),
            stubhead_label=self.escape(table.stubhead_label or ""),
            options={**DEFAULT_OPTIONS, **table.options},
        )
        built.footnotes = self._footnote_list()

        if table.heading is not None:
            title = table.heading.get("title")
            subtitle = table.heading.get("subtitle")
            built.title = self.escape(title) + built.footnote_mark(location_marks.get(("title", None), []))
            if subtitle:
                built.subtitle = self.escape(subtitle) + built.footnote_mark(
                    location_marks.get(("subtitle", None), [])
                )

        for column in self.visible_columns:
            label = table.column_labels.get(column, column)
            built.columns.append(
                BuiltColumn(
                    name=column,
                    label=self.escape(str(label)) + built.footnote_mark(location_marks.get(("column", column), [])),
                    align=self._column_align(column),
                )
            )

        built.groups = self._build_groups()
        self._build_summaries(built)
        built.source_notes = [self.escape(note) for note in table.source_notes]
        return built

    # ------ Cells ------

    def _column_align(self, column: str) -> str:
        if column in self.table.column_alignments:
            return self.table.column_alignments[column]
        values = [row.get(column) for row in self.table.rows if row.get(column) is not None]
        if values and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
            return "right"
        return "left"

    def _format_cell(self, column: str, value: Any) -> str:
        if value is None or (isinstance(value, float) and value != value):
            return self.escape(self._missing_text(column))
        formatter = None
        for directive in self.table.formats:
            if column in directive.columns:
                formatter = directive.fn
        text = formatter(value) if formatter is not None else str(value)
        return self.escape(text)

    def _missing_text(self, column: str) -> str:
        text = DEFAULT_MISSING_TEXT
        for directive in self.table.missing:
            if directive.columns is None or column in directive.columns:
                text = directive.missing_text
        return text

    def _build_groups(self) -> List[BuiltGroup]:
        table = self.table
        groups: Dict[Optional[str], BuiltGroup] = {}
        for row in table.rows:
            group_id = table.group_id(row)
            if group_id not in groups:
                groups[group_id] = BuiltGroup(
                    group_id=group_id,
                    label=self.escape(group_id) if group_id is not None else None,
                )
            stub = ""
            if table.rowname_col is not None:
                stub_value = row.get(table.rowname_col)
                stub = self.escape(DEFAULT_MISSING_TEXT if stub_value is None else str(stub_value))
            groups[group_id].rows.append(
                BuiltRow(
                    stub=stub,
                    cells=[self._format_cell(column, row.get(column)) for column in self.visible_columns],
                )
            )
        return list(groups.values())

    # ------ Summaries ------

    def _build_summaries(self, built: BuiltTable) -> None:
        table = self.table
        group_ids = [group.group_id for group in built.groups if group.group_id is not None]
        by_id = {group.group_id: group for group in built.groups}

        for directive in table.summaries:
            for group_id in directive_groups(directive, group_ids):
                if group_id == GRAND_SUMMARY_ID:
                    rows = table.rows
                else:
                    rows = [row for row in table.rows if table.group_id(row) == group_id]
                records = summarize_rows(directive, group_id, rows, self.visible_columns)
                built.summary_data.setdefault(group_id, []).extend(records)

                display = [self._summary_row(directive, record) for record in records]
                if group_id == GRAND_SUMMARY_ID:
                    for row in display:
                        row.row_type = "grand_summary"
                    built.grand_summary_rows.extend(display)
                else:
                    by_id[group_id].summary_rows.extend(display)

    def _summary_row(self, directive, record: Dict[str, Any]) -> BuiltRow:
        formatter = directive.formatter or format_number
        cells = []
        for column in self.visible_columns:
            value = record.get(column)
            text = directive.missing_text if value is None else formatter(value)
            cells.append(self.escape(text))
        return BuiltRow(stub=self.escape(str(record[SUMMARY_ROW_COLUMN])), cells=cells, row_type="summary")

    # ------ Footnotes ------

    def _assign_footnote_marks(self) -> Dict[tuple, List[str]]:
        """Number footnotes in document order: title, subtitle, column labels.

        Returns a map from location key to the marks rendered at that location;
        identical footnote text reuses its first mark."""
        table = self.table
        attached: Dict[tuple, List[str]] = {}
        for directive in table.footnotes:
            for location in directive.locations:
                if isinstance(location, CellsTitle):
                    keys = [(location.groups, None)]
                elif isinstance(location, CellsColumnLabels):
                    keys = [("column", column) for column in location.columns]
                else:
                    keys = []
                for key in keys:
                    notes = attached.setdefault(key, [])
                    if directive.footnote not in notes:
                        notes.append(directive.footnote)

        order = [("title", None), ("subtitle", None)] + [("column", c) for c in self.visible_columns]
        location_marks: Dict[tuple, List[str]] = {}
        for key in order:
            for note in attached.get(key, []):
                if note not in self._note_marks:
                    self._note_marks[note] = str(len(self._note_marks) + 1)
                location_marks.setdefault(key, []).append(self._note_marks[note])

        dropped = [key for key in attached if key not in order]
        if dropped:
            logger.debug(f"Footnotes on hidden locations were dropped: {dropped}")
        return location_marks

    def _footnote_list(self) -> List[BuiltFootnote]:
        return [
            BuiltFootnote(mark=mark, text=self.escape(note))
            for note, mark in self._note_marks.items()
        ]


def copy_summary_data(built: BuiltTable) -> Dict[str, List[Dict[str, Any]]]:
    """Detached copy of the unformatted summary records."""
    return copy.deepcopy(built.summary_data)


__all__ = [
    "BuiltColumn",
    "BuiltRow",
    "BuiltGroup",
    "BuiltFootnote",
    "BuiltTable",
    "build_data",
    "copy_summary_data",
    "escape_html",
    "escape_latex",
    "escape_rtf",
]
