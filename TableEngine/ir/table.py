"""Table object: the caller-configured handle every export function receives.

A Table only records directives (labels, formats, footnotes, summaries, options).
Nothing is resolved here; `build_data` turns a Table into a BuiltTable for one
render context, so the same Table can be exported many times."""

from __future__ import annotations

import random
import re
import string
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .schema import DEFAULT_MISSING_TEXT, GRAND_SUMMARY_ID

Formatter = Callable[[Any], str]
SummaryFunction = Callable[[List[Any]], Any]
SummaryFunctions = Union[Mapping[str, Union[str, SummaryFunction]], Sequence[str]]


@dataclass(frozen=True)
class CellsTitle:
    """Footnote location: the table title or subtitle."""

    groups: str = "title"


@dataclass(frozen=True)
class CellsColumnLabels:
    """Footnote location: one or more column labels."""

    columns: Tuple[str, ...] = ()


Location = Union[CellsTitle, CellsColumnLabels]


def cells_title(groups: str = "title") -> CellsTitle:
    return CellsTitle(groups=groups)


def cells_column_labels(columns: Union[str, Iterable[str]]) -> CellsColumnLabels:
    return CellsColumnLabels(columns=_as_columns(columns))


@dataclass
class FormatDirective:
    columns: Tuple[str, ...]
    fn: Formatter


@dataclass
class MissingDirective:
    columns: Optional[Tuple[str, ...]]
    missing_text: str


@dataclass
class FootnoteDirective:
    footnote: str
    locations: Tuple[Location, ...]


@dataclass
class SummaryDirective:
    """One `summary_rows()` / `grand_summary_rows()` call.

    groups is True for every row group, a tuple of group ids for a subset, or
    (GRAND_SUMMARY_ID,) for a grand summary over all rows."""

    groups: Union[bool, Tuple[str, ...]]
    columns: Optional[Tuple[str, ...]]
    fns: Dict[str, Union[str, SummaryFunction]]
    formatter: Optional[Formatter] = None
    missing_text: str = "---"

    @property
    def is_grand(self) -> bool:
        return self.groups == (GRAND_SUMMARY_ID,)


def format_number(value: Any, decimals: int = 2, use_seps: bool = True) -> str:
    """Fixed-decimal formatting for numbers, str() for anything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    if use_seps:
        return f"{value:,.{decimals}f}"
    return f"{value:.{decimals}f}"


def _as_columns(columns: Union[str, Iterable[str], None]) -> Tuple[str, ...]:
    if columns is None:
        return ()
    if isinstance(columns, str):
        return (columns,)
    return tuple(columns)


_ID_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9_-]*")


def _random_id(length: int = 10) -> str:
    return "".join(random.choices(string.ascii_lowercase, k=length))


class Table:
    """A table of records plus presentation directives.

    Parameters:
        data: sequence of mappings, one per row.
        rowname_col: column whose values label each row (the stub).
        groupname_col: column whose values split rows into row groups.
        id: table id used to scope the CSS; random when omitted."""

    def __init__(
        self,
        data: Sequence[Mapping[str, Any]],
        rowname_col: Optional[str] = None,
        groupname_col: Optional[str] = None,
        id: Optional[str] = None,
    ):
        rows: List[Dict[str, Any]] = []
        columns: List[str] = []
        for idx, row in enumerate(data):
            if not isinstance(row, Mapping):
                raise TypeError(f"data[{idx}] must be a mapping, got {type(row).__name__}")
            rows.append(dict(row))
            for key in row:
                if key not in columns:
                    columns.append(key)

        self.rows = rows
        self.columns = columns
        self.rowname_col = rowname_col
        self.groupname_col = groupname_col
        if id is not None and not (isinstance(id, str) and _ID_PATTERN.fullmatch(id)):
            raise ValueError(
                f"Table id `{id}` must start with a letter and contain only letters, digits, `_` or `-`"
            )
        self.table_id = id or _random_id()

        self.heading: Optional[Dict[str, Optional[str]]] = None
        self.stubhead_label: Optional[str] = None
        self.column_labels: Dict[str, str] = {}
        self.column_alignments: Dict[str, str] = {}
        self.formats: List[FormatDirective] = []
        self.missing: List[MissingDirective] = []
        self.footnotes: List[FootnoteDirective] = []
        self.source_notes: List[str] = []
        self.summaries: List[SummaryDirective] = []
        self.options: Dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"Table(id={self.table_id!r}, rows={len(self.rows)}, columns={self.columns!r})"

    # ====== Heading and labels ======

    def tab_header(self, title: str, subtitle: Optional[str] = None) -> "Table":
        self.heading = {"title": title, "subtitle": subtitle}
        return self

    def tab_stubhead(self, label: str) -> "Table":
        self.stubhead_label = label
        return self

    def cols_label(self, **labels: str) -> "Table":
        self.column_labels.update(labels)
        return self

    def cols_align(self, align: str, columns: Union[str, Iterable[str]]) -> "Table":
        for column in _as_columns(columns):
            self.column_alignments[column] = align
        return self

    # ====== Cell formatting ======

    def fmt(self, columns: Union[str, Iterable[str]], fns: Formatter) -> "Table":
        self.formats.append(FormatDirective(columns=_as_columns(columns), fn=fns))
        return self

    def fmt_number(
        self,
        columns: Union[str, Iterable[str]],
        decimals: int = 2,
        use_seps: bool = True,
    ) -> "Table":
        return self.fmt(columns, lambda value: format_number(value, decimals, use_seps))

    def sub_missing(
        self,
        columns: Union[str, Iterable[str], None] = None,
        missing_text: str = "---",
    ) -> "Table":
        target = _as_columns(columns) if columns is not None else None
        self.missing.append(MissingDirective(columns=target, missing_text=missing_text))
        return self

    # ====== Notes ======

    def tab_footnote(
        self,
        footnote: str,
        locations: Union[Location, Iterable[Location]],
    ) -> "Table":
        if isinstance(locations, (CellsTitle, CellsColumnLabels)):
            locations = (locations,)
        self.footnotes.append(FootnoteDirective(footnote=footnote, locations=tuple(locations)))
        return self

    def tab_source_note(self, source_note: str) -> "Table":
        self.source_notes.append(source_note)
        return self

    # ====== Summary rows ======

    def summary_rows(
        self,
        groups: Union[bool, str, Iterable[str]] = True,
        columns: Union[str, Iterable[str], None] = None,
        fns: SummaryFunctions = ("mean",),
        formatter: Optional[Formatter] = None,
        missing_text: str = "---",
    ) -> "Table":
        if groups is not True:
            groups = _as_columns(groups)
        self.summaries.append(
            SummaryDirective(
                groups=groups,
                columns=_as_columns(columns) if columns is not None else None,
                fns=self._normalize_fns(fns),
                formatter=formatter,
                missing_text=missing_text,
            )
        )
        return self

    def grand_summary_rows(
        self,
        columns: Union[str, Iterable[str], None] = None,
        fns: SummaryFunctions = ("mean",),
        formatter: Optional[Formatter] = None,
        missing_text: str = "---",
    ) -> "Table":
        self.summaries.append(
            SummaryDirective(
                groups=(GRAND_SUMMARY_ID,),
                columns=_as_columns(columns) if columns is not None else None,
                fns=self._normalize_fns(fns),
                formatter=formatter,
                missing_text=missing_text,
            )
        )
        return self

    def has_summary(self) -> bool:
        return bool(self.summaries)

    def group_id(self, row: Mapping[str, Any]) -> Optional[str]:
        """Row group id of `row`; rows without a group value fall into "NA"."""
        if self.groupname_col is None:
            return None
        value = row.get(self.groupname_col)
        return DEFAULT_MISSING_TEXT if value is None else str(value)

    @staticmethod
    def _normalize_fns(fns: SummaryFunctions) -> Dict[str, Union[str, SummaryFunction]]:
        """Named aggregates may be passed as a list of names or a label -> function map."""
        if isinstance(fns, Mapping):
            return dict(fns)
        if isinstance(fns, str):
            return {fns: fns}
        return {name: name for name in fns}

    # ====== Options ======

    def tab_options(self, **options: Any) -> "Table":
        self.options.update(options)
        return self

    # ====== Serialization ======

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Table":
        """Rebuild a table from a JSON-compatible description.

        Supported keys: data, rowname_col, groupname_col, id, heading, stubhead,
        column_labels, column_align, number_formats, missing, footnotes,
        source_notes, summary_rows, grand_summary_rows, options."""
        table = cls(
            payload.get("data") or [],
            rowname_col=payload.get("rowname_col"),
            groupname_col=payload.get("groupname_col"),
            id=payload.get("id"),
        )

        heading = payload.get("heading")
        if isinstance(heading, Mapping) and heading.get("title"):
            table.tab_header(heading["title"], heading.get("subtitle"))
        elif isinstance(heading, str):
            table.tab_header(heading)

        if payload.get("stubhead"):
            table.tab_stubhead(payload["stubhead"])
        table.cols_label(**(payload.get("column_labels") or {}))
        for column, align in (payload.get("column_align") or {}).items():
            table.cols_align(align, column)

        for entry in payload.get("number_formats") or []:
            table.fmt_number(
                entry.get("columns") or [],
                decimals=entry.get("decimals", 2),
                use_seps=entry.get("use_seps", True),
            )
        for entry in payload.get("missing") or []:
            table.sub_missing(entry.get("columns"), entry.get("missing_text", "---"))

        for note in payload.get("footnotes") or []:
            locations: List[Location] = []
            if note.get("title"):
                locations.append(cells_title(note["title"]))
            if note.get("columns"):
                locations.append(cells_column_labels(note["columns"]))
            table.tab_footnote(note["footnote"], locations)

        for source_note in payload.get("source_notes") or []:
            table.tab_source_note(source_note)

        for entry in payload.get("summary_rows") or []:
            table.summary_rows(
                groups=entry.get("groups", True),
                columns=entry.get("columns"),
                fns=entry.get("fns") or ["mean"],
                formatter=cls._decimals_formatter(entry),
                missing_text=entry.get("missing_text", "---"),
            )
        for entry in payload.get("grand_summary_rows") or []:
            table.grand_summary_rows(
                columns=entry.get("columns"),
                fns=entry.get("fns") or ["mean"],
                formatter=cls._decimals_formatter(entry),
                missing_text=entry.get("missing_text", "---"),
            )

        table.tab_options(**(payload.get("options") or {}))
        return table

    @staticmethod
    def _decimals_formatter(entry: Mapping[str, Any]) -> Optional[Formatter]:
        if "decimals" not in entry and "use_seps" not in entry:
            return None
        decimals = entry.get("decimals", 2)
        use_seps = entry.get("use_seps", True)
        return lambda value: format_number(value, decimals, use_seps)


__all__ = [
    "Table",
    "CellsTitle",
    "CellsColumnLabels",
    "Location",
    "cells_title",
    "cells_column_labels",
    "FormatDirective",
    "MissingDirective",
    "FootnoteDirective",
    "SummaryDirective",
    "format_number",
]
