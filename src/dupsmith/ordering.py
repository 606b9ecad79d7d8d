"""
Result ordering for dupsmith.

Duplicates are emitted group by group: biggest group first, ties broken by
the value of a designated column in the group's first row. Repeats are
sorted by the text of the first compared column. Both lists are then copied,
header first, into a new table ready to be written as a sheet.
"""

from __future__ import annotations

from numbers import Real
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd
from pandas.api.types import is_scalar

from .classify import Classification, ClassifierConfig, UnknownRowError


def _is_null(value: Any) -> bool:
    return value is None or (is_scalar(value) and bool(pd.isna(value)))


def _cell(table: pd.DataFrame, row: int, column: int) -> Any:
    """1-indexed column lookup; a column past the table's width reads as null."""
    if column > table.shape[1]:
        return None
    return table.iat[row, column - 1]


def _cell_text(value: Any) -> str:
    return "" if _is_null(value) else str(value)


def _sort_key(value: Any) -> Tuple[int, Any]:
    # null < numbers < text, so mixed columns still compare
    if _is_null(value):
        return (0, 0)
    if isinstance(value, Real) and not isinstance(value, bool):
        return (1, value)
    return (2, str(value))


def _check_rows(table: pd.DataFrame, rows: Sequence[int]) -> None:
    last = len(table.index) - 1
    for row in rows:
        if not 1 <= row <= last:
            raise UnknownRowError(f"row {row} is not a data row (valid rows: 1..{last})")


def order_duplicates(
    table: pd.DataFrame,
    rows: Sequence[int],
    groups: Dict[str, List[int]],
    sort_column: int = 3,
) -> List[int]:
    """
    Order duplicate rows group by group.

    Args:
        table:
            Source table, header at position 0.
        rows:
            Duplicate row numbers to order.
        groups:
            Fingerprint groups as produced by RowClassifier.
        sort_column:
            1-indexed column whose value, taken from the first row of each
            group, breaks ties between groups of equal size.

    Returns:
        Row numbers with groups sorted by descending size, then ascending
        `sort_column` value. Equal keys keep their emission order and rows
        keep their order within a group.
    """
    _check_rows(table, rows)
    owner: Dict[int, str] = {}
    for key, members in groups.items():
        for row in members:
            owner[row] = key

    buckets: Dict[str, List[int]] = {}
    for row in rows:
        try:
            key = owner[row]
        except KeyError:
            raise UnknownRowError(f"row {row} does not belong to any fingerprint group") from None
        buckets.setdefault(key, []).append(row)

    ordered = sorted(
        buckets.items(),
        key=lambda item: (
            -len(groups[item[0]]),
            _sort_key(_cell(table, item[1][0], sort_column)),
        ),
    )
    return [row for _, members in ordered for row in members]


def order_repeats(
    table: pd.DataFrame,
    rows: Sequence[int],
    columns_to_skip: int = 3,
) -> List[int]:
    """Order rows by the text of column `columns_to_skip`, ascending."""
    _check_rows(table, rows)
    return sorted(rows, key=lambda row: _cell_text(_cell(table, row, columns_to_skip)))


def order_and_copy(
    table: pd.DataFrame,
    rows: Sequence[int],
    groups: Optional[Dict[str, List[int]]] = None,
    *,
    columns_to_skip: int = 3,
    sort_column: int = 3,
) -> pd.DataFrame:
    """
    Order `rows` and copy them, with the header, into a new table.

    When `groups` is given the rows are ordered as duplicates, otherwise as
    repeats. The result has the header at position 0 followed by the ordered
    rows, all columns copied in order, with a fresh RangeIndex.
    """
    table = table.reset_index(drop=True)
    if groups is not None:
        ordered = order_duplicates(table, rows, groups, sort_column=sort_column)
    else:
        ordered = order_repeats(table, rows, columns_to_skip=columns_to_skip)
    return table.iloc[[0, *ordered]].reset_index(drop=True)


def order_results(
    table: pd.DataFrame,
    result: Classification,
    config: Optional[ClassifierConfig] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Return the ``(duplicates, repeats)`` tables for a classification."""
    config = config or ClassifierConfig()
    duplicates = order_and_copy(
        table,
        result.duplicates,
        result.groups,
        sort_column=config.sort_column,
    )
    repeats = order_and_copy(
        table,
        result.repeats,
        columns_to_skip=config.columns_to_skip,
    )
    return duplicates, repeats
