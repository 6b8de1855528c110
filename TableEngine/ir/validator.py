"""Table configuration validator.

Every public export function first checks that it was given a Table at all
(`stop_if_not_table`). The build step then runs TableValidator so that directives
pointing at unknown columns, groups or options fail before any rendering starts.
Error locations use path syntax (e.g. `formats[1].columns`) to make them easy to
trace back to the offending call."""

from __future__ import annotations

from typing import Any, Iterable, List, Tuple

from ..errors import InvalidTableObject, TableBuildError
from .schema import COLUMN_ALIGNMENTS, DEFAULT_OPTIONS
from .summary import AGGREGATES
from .table import CellsColumnLabels, CellsTitle, Table


def stop_if_not_table(data: Any) -> None:
    """Fail fast unless `data` is a Table."""
    if not isinstance(data, Table):
        raise InvalidTableObject(
            f"`data` must be a `Table` object, not `{type(data).__name__}`."
        )


class TableValidator:
    """Table directive validator.

    Description:
        - validate returns (whether passed, error list)
        - ensure_valid raises TableBuildError listing every problem at once"""

    # ======== External interface ========

    def validate(self, table: Table) -> Tuple[bool, List[str]]:
        errors: List[str] = []
        known = set(table.columns)

        # Column references can only be checked once there is data to read them from
        if known:
            for name in ("rowname_col", "groupname_col"):
                column = getattr(table, name)
                if column is not None and column not in known:
                    errors.append(f"{name} refers to unknown column `{column}`")

            self._check_columns(table.column_labels, known, "column_labels", errors)
            self._check_columns(table.column_alignments, known, "column_alignments", errors)
            for idx, directive in enumerate(table.formats):
                self._check_columns(directive.columns, known, f"formats[{idx}].columns", errors)
            for idx, directive in enumerate(table.missing):
                if directive.columns is not None:
                    self._check_columns(directive.columns, known, f"missing[{idx}].columns", errors)

        for column, align in table.column_alignments.items():
            if align not in COLUMN_ALIGNMENTS:
                errors.append(f"column_alignments.{column} must be one of {', '.join(COLUMN_ALIGNMENTS)}")

        for idx, directive in enumerate(table.footnotes):
            self._validate_footnote(table, directive.locations, f"footnotes[{idx}]", known, errors)

        for idx, directive in enumerate(table.summaries):
            self._validate_summary(table, directive, f"summaries[{idx}]", known, errors)

        for option in table.options:
            if option not in DEFAULT_OPTIONS:
                errors.append(f"options.{option} is not a known option")

        return len(errors) == 0, errors

    def ensure_valid(self, table: Table) -> None:
        is_valid, errors = self.validate(table)
        if not is_valid:
            raise TableBuildError(
                "The table could not be built:\n" + "\n".join(f"  * {error}" for error in errors)
            )

    # ======== Internal Tools ========

    @staticmethod
    def _check_columns(columns: Iterable[str], known: set, path: str, errors: List[str]) -> None:
        for column in columns:
            if column not in known:
                errors.append(f"{path} refers to unknown column `{column}`")

    def _validate_footnote(self, table: Table, locations, path: str, known: set, errors: List[str]) -> None:
        if not locations:
            errors.append(f"{path}.locations must not be empty")
        for l_idx, location in enumerate(locations):
            loc_path = f"{path}.locations[{l_idx}]"
            if isinstance(location, CellsTitle):
                if location.groups not in ("title", "subtitle"):
                    errors.append(f"{loc_path}.groups must be `title` or `subtitle`")
                elif table.heading is None or not table.heading.get(location.groups):
                    errors.append(f"{loc_path} targets a {location.groups} that was never set")
            elif isinstance(location, CellsColumnLabels):
                if not location.columns:
                    errors.append(f"{loc_path}.columns must not be empty")
                if known:
                    self._check_columns(location.columns, known, f"{loc_path}.columns", errors)
            else:
                errors.append(f"{loc_path} is not a supported footnote location")

    def _validate_summary(self, table: Table, directive, path: str, known: set, errors: List[str]) -> None:
        if not directive.fns:
            errors.append(f"{path}.fns must not be empty")
        for label, fn in directive.fns.items():
            if not callable(fn) and fn not in AGGREGATES:
                errors.append(f"{path}.fns.{label} is not a known aggregate (`{fn}`)")
        if directive.columns is not None and known:
            self._check_columns(directive.columns, known, f"{path}.columns", errors)
        if directive.is_grand:
            return
        if table.groupname_col is None:
            errors.append(f"{path} needs row groups; set `groupname_col` or use grand_summary_rows()")
        elif directive.groups is not True:
            present = {table.group_id(row) for row in table.rows}
            for group in directive.groups:
                if group not in present:
                    errors.append(f"{path}.groups refers to unknown row group `{group}`")


__all__ = ["TableValidator", "stop_if_not_table"]
