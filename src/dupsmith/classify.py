# src/dupsmith/classify.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pandas as pd

from .duplicates import (
    compared_text,
    count_repeated_values,
    group_fingerprints,
    row_fingerprints,
)


class DupsmithError(ValueError):
    """Base class for dupsmith errors."""


class ConfigurationError(DupsmithError):
    """A setting is out of range, or does not fit the table."""


class EmptyTableError(DupsmithError):
    """The table has no rows at all, not even a header."""


class UnknownRowError(DupsmithError):
    """A row number does not name a data row of the table."""


@dataclass(frozen=True)
class ClassifierConfig:
    """
    Settings for RowClassifier and the result ordering.

    columns_to_skip: 1-indexed first compared column
    min_repeats:     occurrences of one value needed to flag a row
    sort_column:     1-indexed column used to break ties between duplicate groups
    """
    columns_to_skip: int = 3
    min_repeats: int = 3
    sort_column: int = 3

    def __post_init__(self) -> None:
        for name in ("columns_to_skip", "min_repeats", "sort_column"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigurationError(f"{name} must be an integer >= 1, got {value!r}")


@dataclass(frozen=True)
class Classification:
    """
    Outcome of RowClassifier.classify.

    duplicates: rows of every group with more than one member, group by group
    repeats:    fingerprint-unique rows holding a repeated value, ascending
    groups:     fingerprint -> row numbers, for every data row
    """
    duplicates: list[int] = field(default_factory=list)
    repeats: list[int] = field(default_factory=list)
    groups: dict[str, list[int]] = field(default_factory=dict)

    @property
    def duplicate_groups(self) -> dict[str, list[int]]:
        return {k: v for k, v in self.groups.items() if len(v) > 1}


class RowClassifier:
    """
    Splits the data rows of a table into exact duplicates and rows with an
    internally repeated value.

    The table is a DataFrame read with ``header=None``: position 0 is the
    header, positions 1..R are the data rows, and a row's position is its
    row number.

    Duplicate status wins: a row that shares its fingerprint with another
    row is never reported as a repeat, whatever it contains.
    """

    def __init__(self, config: Optional[ClassifierConfig] = None) -> None:
        self.config = config or ClassifierConfig()

    def _check_table(self, table: pd.DataFrame) -> None:
        if len(table.index) == 0:
            raise EmptyTableError("table has no rows (a header row is required)")
        n_cols = table.shape[1]
        if self.config.columns_to_skip > n_cols:
            raise ConfigurationError(
                f"columns_to_skip={self.config.columns_to_skip} exceeds the "
                f"table's column count ({n_cols})"
            )

    def classify(self, table: pd.DataFrame) -> Classification:
        self._check_table(table)
        table = table.reset_index(drop=True)

        text = compared_text(table, self.config.columns_to_skip)
        if text.empty:
            return Classification()

        # Pass 1: fingerprint groups
        fingerprints = row_fingerprints(text)
        groups = group_fingerprints(fingerprints)

        # Pass 2: repeated values, fingerprint-unique rows only
        repeats: list[int] = []
        for row, values in text.iterrows():
            if len(groups[fingerprints[row]]) > 1:
                continue
            if count_repeated_values(values, threshold=self.config.min_repeats):
                repeats.append(int(row))

        duplicates = [row for rows in groups.values() if len(rows) > 1 for row in rows]
        return Classification(duplicates=duplicates, repeats=repeats, groups=groups)


def classify(
    table: pd.DataFrame,
    config: Optional[ClassifierConfig] = None,
) -> tuple[list[int], list[int]]:
    """Return ``(duplicate_rows, repeat_rows)`` for `table`."""
    result = RowClassifier(config).classify(table)
    return result.duplicates, result.repeats
