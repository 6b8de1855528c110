"""LaTeX renderer: BuiltTable -> longtable source.

The footnotes and source notes are set after `\\end{longtable}`, each in its own
full-width minipage, so the composition order is

    table_start, heading, columns, body, table_end, footnotes, source_notes

The rendered string carries the LaTeX packages it needs as `latex_dependencies`
when a dependency tracker is supplied."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from ..ir import LATEX_PACKAGES, Table
from ..ir.builder import BuiltRow, BuiltTable
from .base import BaseRenderer

_ALIGN_LETTERS = {"left": "l", "center": "c", "right": "r"}


@dataclass(frozen=True)
class LatexDependency:
    """One `\\usepackage` requirement."""

    name: str
    options: Tuple[str, ...] = ()

    def to_usepackage(self) -> str:
        if self.options:
            return f"\\usepackage[{','.join(self.options)}]{{{self.name}}}"
        return f"\\usepackage{{{self.name}}}"


class LatexDependencyTracker:
    """Produces dependency records for the packages a table needs.

    Parameters:
        package_options: optional `{package: [option, ...]}` passed to
            `\\usepackage`."""

    def __init__(self, package_options: Optional[Mapping[str, Sequence[str]]] = None):
        self.package_options = {name: tuple(opts) for name, opts in (package_options or {}).items()}

    def dependency(self, package: str) -> LatexDependency:
        return LatexDependency(name=package, options=self.package_options.get(package, ()))


class LatexOutput(str):
    """LaTeX source plus the packages it depends on."""

    latex_dependencies: List[Any]

    def __new__(cls, value: str, latex_dependencies: Optional[Sequence[Any]] = None):
        obj = super().__new__(cls, value)
        obj.latex_dependencies = list(latex_dependencies or [])
        return obj


def resolve_latex_dependencies(tracker: Any) -> List[Any]:
    """Ask `tracker` for one record per required package.

    A tracker that is missing or fails yields no records; the failure is only
    logged, the LaTeX itself is still usable."""
    if tracker is None:
        return []
    try:
        return [tracker.dependency(package) for package in LATEX_PACKAGES]
    except Exception as exc:
        logger.warning(f"LaTeX dependency tracking skipped: {exc}")
        return []


class LaTeXRenderer(BaseRenderer):
    """BuiltTable -> longtable LaTeX."""

    context = "latex"
    fragment_order = (
        "table_start",
        "heading",
        "columns",
        "body",
        "table_end",
        "footnotes",
        "source_notes",
    )

    @property
    def format_name(self) -> str:
        return "latex"

    def build_fragments(self, built: BuiltTable) -> Dict[str, str]:
        return {
            "table_start": self._render_table_start(built),
            "heading": self._render_heading(built),
            "columns": self._render_columns(built),
            "body": self._render_body(built),
            "footnotes": self._render_footnotes(built),
            "source_notes": self._render_source_notes(built),
            "table_end": "\\bottomrule\n\\end{longtable}\n",
        }

    def render(self, table: Table, dependency_tracker: Any = None, **options: Any) -> LatexOutput:
        latex = self.compose(self.build(table))
        return LatexOutput(latex, resolve_latex_dependencies(dependency_tracker))

    # ====== Fragments ======

    @staticmethod
    def _render_table_start(built: BuiltTable) -> str:
        aligns = "".join(_ALIGN_LETTERS[column.align] for column in built.columns)
        if built.has_stub:
            aligns = "l|" + aligns
        return (
            "\\captionsetup[table]{labelformat=empty,skip=1pt}\n"
            f"\\begin{{longtable}}{{{aligns}}}\n"
        )

    @staticmethod
    def _render_heading(built: BuiltTable) -> str:
        if not built.has_heading:
            return ""
        lines = [f"{{\\large {built.title}}}"]
        if built.subtitle:
            lines.append(f"{{\\small {built.subtitle}}}")
        return "\\caption*{\n" + " \\\\ \n".join(lines) + "\n} \\\\ \n"

    @staticmethod
    def _render_columns(built: BuiltTable) -> str:
        labels = [column.label for column in built.columns]
        if built.has_stub:
            labels.insert(0, built.stubhead_label)
        return "\\toprule\n" + " & ".join(labels) + " \\\\ \n\\midrule\n"

    def _render_body(self, built: BuiltTable) -> str:
        parts: List[str] = []
        for group in built.groups:
            if group.label is not None:
                parts.append(f"\\multicolumn{{{built.n_columns}}}{{l}}{{{group.label}}} \\\\ \n\\midrule\n")
            parts.extend(self._render_row(built, row) for row in group.rows)
            if group.summary_rows:
                parts.append("\\midrule\n")
                parts.extend(self._render_row(built, row) for row in group.summary_rows)
        if built.grand_summary_rows:
            parts.append("\\midrule \n\\midrule \n")
            parts.extend(self._render_row(built, row) for row in built.grand_summary_rows)
        return "".join(parts)

    @staticmethod
    def _render_row(built: BuiltTable, row: BuiltRow) -> str:
        cells = list(row.cells)
        if built.has_stub:
            cells.insert(0, row.stub)
        return " & ".join(cells) + " \\\\ \n"

    @staticmethod
    def _render_footnotes(built: BuiltTable) -> str:
        if not built.footnotes:
            return ""
        notes = "".join(
            f"{built.footnote_mark([note.mark])}{note.text} \\\\ \n" for note in built.footnotes
        )
        return "\\vspace{-5mm}\n\\begin{minipage}{\\linewidth}\n" + notes + "\\end{minipage}\n"

    @staticmethod
    def _render_source_notes(built: BuiltTable) -> str:
        if not built.source_notes:
            return ""
        notes = "".join(f"{note} \\\\ \n" for note in built.source_notes)
        return "\\begin{minipage}{\\linewidth}\n" + notes + "\\end{minipage}\n"


__all__ = [
    "LaTeXRenderer",
    "LatexOutput",
    "LatexDependency",
    "LatexDependencyTracker",
    "resolve_latex_dependencies",
]
