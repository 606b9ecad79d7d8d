"""
dupsmith: duplicate and repeated-value extraction for spreadsheet tables.

Current submodules:
- dupsmith.duplicates (fingerprint helpers)
- dupsmith.classify (RowClassifier)
- dupsmith.ordering (result ordering)
- dupsmith.workbook (file I/O)
- dupsmith.cli (CLI entrypoint)
"""

from .classify import (
    Classification,
    ClassifierConfig,
    ConfigurationError,
    DupsmithError,
    EmptyTableError,
    RowClassifier,
    UnknownRowError,
    classify,
)
from .ordering import (
    order_and_copy,
    order_duplicates,
    order_repeats,
    order_results,
)

__all__ = [
    "Classification",
    "ClassifierConfig",
    "ConfigurationError",
    "DupsmithError",
    "EmptyTableError",
    "RowClassifier",
    "UnknownRowError",
    "classify",
    "order_and_copy",
    "order_duplicates",
    "order_repeats",
    "order_results",
]
