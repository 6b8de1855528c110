"""Summary-row aggregation.

Aggregates can be referenced by name (min/max/mean/...) or given as callables that
receive the non-missing values of one column within one group."""

from __future__ import annotations

import statistics
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .schema import GRAND_SUMMARY_ID, SUMMARY_GROUP_COLUMN, SUMMARY_ROW_COLUMN
from .table import SummaryDirective

AGGREGATES: Dict[str, Callable[[List[Any]], Any]] = {
    "min": min,
    "max": max,
    "sum": sum,
    "mean": statistics.fmean,
    "avg": statistics.fmean,
    "median": statistics.median,
    "sd": statistics.stdev,
    "count": len,
}


def resolve_aggregate(fn: Any) -> Callable[[List[Any]], Any]:
    """Map an aggregate name to its function; callables pass through."""
    if callable(fn):
        return fn
    return AGGREGATES[fn]


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and value != value)


def _is_numeric_column(rows: Sequence[Mapping[str, Any]], column: str) -> bool:
    """Whether every non-missing value of `column` is a number."""
    values = [row.get(column) for row in rows if not _is_missing(row.get(column))]
    return all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values)


def summarize_rows(
    directive: SummaryDirective,
    group_id: str,
    rows: Sequence[Mapping[str, Any]],
    columns: Sequence[str],
) -> List[Dict[str, Any]]:
    """Compute one record per aggregate for `rows`.

    Each record holds the group id, the aggregate label and one unformatted value
    per column. Without explicit columns only numeric columns are summarized;
    columns the directive does not cover get None."""
    if directive.columns is not None:
        target = set(directive.columns)
    else:
        target = {column for column in columns if _is_numeric_column(rows, column)}
    records: List[Dict[str, Any]] = []
    for label, fn in directive.fns.items():
        aggregate = resolve_aggregate(fn)
        record: Dict[str, Any] = {
            SUMMARY_GROUP_COLUMN: group_id,
            SUMMARY_ROW_COLUMN: label,
        }
        for column in columns:
            if column not in target:
                record[column] = None
                continue
            values = [row.get(column) for row in rows if not _is_missing(row.get(column))]
            record[column] = _apply(aggregate, values)
        records.append(record)
    return records


def _apply(aggregate: Callable[[List[Any]], Any], values: List[Any]) -> Optional[Any]:
    if not values:
        return None
    try:
        return aggregate(values)
    except statistics.StatisticsError:
        # stdev over a single value
        return None
    except TypeError:
        # non-numeric values, rendered with the missing text
        return None


def directive_groups(directive: SummaryDirective, group_ids: Sequence[str]) -> List[str]:
    """Group ids a directive applies to, in table order."""
    if directive.is_grand:
        return [GRAND_SUMMARY_ID]
    if directive.groups is True:
        return list(group_ids)
    wanted = set(directive.groups)
    return [group_id for group_id in group_ids if group_id in wanted]


__all__ = ["AGGREGATES", "resolve_aggregate", "summarize_rows", "directive_groups"]
