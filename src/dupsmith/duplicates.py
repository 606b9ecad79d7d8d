"""
Fingerprint helpers for dupsmith.

Includes:
- compared_text: stringified compared range of every data row
- row_fingerprints: one fingerprint string per data row
- group_fingerprints: fingerprint -> row numbers, in insertion order
- count_repeated_values: per-row value counter with a threshold
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Tuple

import pandas as pd


def compared_text(table: pd.DataFrame, columns_to_skip: int) -> pd.DataFrame:
    """
    Return the compared range of every data row as strings.

    Args:
        table:
            Raw table read with ``header=None``. Position 0 is the header
            row and is left out.
        columns_to_skip:
            1-indexed first compared column. Columns before it are ignored.

    Returns:
        DataFrame indexed by data row number (1..R) holding only the
        compared columns. Null cells become ``""``.
    """
    part = table.iloc[1:, columns_to_skip - 1:]
    return part.astype("string").fillna("")


def row_fingerprints(text: pd.DataFrame) -> pd.Series:
    """
    Concatenate each row of `text` with no separator.

    No separator is used, so ``["ab", "c"]`` and ``["a", "bc"]`` share a
    fingerprint. Null and empty cells are indistinguishable as well.
    """
    if text.empty:
        return pd.Series([], index=text.index, dtype="string")
    return text.agg("".join, axis=1)


def group_fingerprints(fingerprints: pd.Series) -> Dict[str, List[int]]:
    """
    Map each fingerprint to the row numbers sharing it.

    Groups appear in order of first occurrence and rows keep their
    original order inside a group.
    """
    groups: Dict[str, List[int]] = {}
    for row, key in fingerprints.items():
        groups.setdefault(key, []).append(int(row))
    return groups


def count_repeated_values(
    values: Iterable[str],
    threshold: int = 3,
) -> List[Tuple[str, int]]:
    """
    Count the values of one row and return those seen at least
    `threshold` times, most frequent first.

    Empty and whitespace-only values are never counted. The classifier only
    checks whether the result is empty; the ordering is for reporting.
    """
    counter = Counter(v for v in values if v.strip())
    repeated = [(k, v) for k, v in counter.items() if v >= threshold]
    repeated.sort(key=lambda x: x[1], reverse=True)
    return repeated
