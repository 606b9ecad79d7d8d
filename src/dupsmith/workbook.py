"""
Workbook I/O for dupsmith.

Reads spreadsheet files into raw tables, writes the "Duplicates" and
"Repeats" sheets, and runs the classifier over a whole folder. Each file is
processed on its own: a failure is reported and the next file still runs.
"""

from __future__ import annotations

import csv
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import pandas as pd

from .classify import ClassifierConfig, DupsmithError, EmptyTableError, RowClassifier
from .ordering import order_results

DUPLICATES_SHEET = "Duplicates"
REPEATS_SHEET = "Repeats"
EXCEL_SUFFIXES = (".xlsx", ".xlsm")
SUPPORTED_SUFFIXES = EXCEL_SUFFIXES + (".csv",)


class UnsupportedFileError(DupsmithError):
    """Raised for a file type dupsmith cannot read."""


@dataclass
class FileResult:
    name: str
    status: str  # "success" | "failed"
    duplicates: int = 0
    repeats: int = 0
    output: Optional[Path] = None
    error: Optional[str] = None


def _csv_width(path: Path, encoding: str) -> int:
    """Field count of the widest CSV record."""
    with path.open("r", encoding=encoding, newline="") as f:
        return max((len(row) for row in csv.reader(f)), default=0)


def read_table(path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """
    Read the first sheet of an Excel file, or a CSV file, as a raw table.

    No header is applied: the file's first row lands at position 0. Cells are
    kept as objects and only truly empty cells become null, so strings such
    as "NA" or "null" are compared verbatim. Ragged CSV records are padded
    with nulls up to the widest record.
    """
    suffix = path.suffix.lower()
    na_opts = {"keep_default_na": False, "na_values": [""]}
    if suffix in EXCEL_SUFFIXES:
        return pd.read_excel(path, sheet_name=0, header=None, dtype=object, **na_opts)
    if suffix == ".csv":
        width = _csv_width(path, encoding)
        if width == 0:
            raise EmptyTableError(f"{path.name} is empty")
        return pd.read_csv(
            path,
            header=None,
            names=list(range(width)),
            dtype=object,
            encoding=encoding,
            **na_opts,
        )
    raise UnsupportedFileError(
        f"unsupported file type '{path.suffix}' (expected one of {', '.join(SUPPORTED_SUFFIXES)})"
    )


def _keep_text(sheet) -> None:
    # openpyxl turns any str starting with "=" into a formula
    for row in sheet.iter_rows():
        for cell in row:
            if cell.data_type == "f" and isinstance(cell.value, str):
                cell.data_type = "s"


def write_results(path: Path, duplicates: pd.DataFrame, repeats: pd.DataFrame) -> Path:
    """
    Write both result tables into one workbook, header row included.

    Cells are copied as values: text starting with "=" stays text.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        duplicates.to_excel(writer, sheet_name=DUPLICATES_SHEET, header=False, index=False)
        repeats.to_excel(writer, sheet_name=REPEATS_SHEET, header=False, index=False)
        for name in (DUPLICATES_SHEET, REPEATS_SHEET):
            _keep_text(writer.sheets[name])
    return path


def process_file(
    input_path: Path,
    output_dir: Path,
    config: Optional[ClassifierConfig] = None,
) -> FileResult:
    """Classify one file and write ``<output_dir>/<stem>.xlsx``."""
    config = config or ClassifierConfig()
    table = read_table(input_path)
    result = RowClassifier(config).classify(table)
    duplicates, repeats = order_results(table, result, config)

    output_path = write_results(output_dir / f"{input_path.stem}.xlsx", duplicates, repeats)
    return FileResult(
        name=input_path.name,
        status="success",
        duplicates=len(result.duplicates),
        repeats=len(result.repeats),
        output=output_path,
    )


def discover_files(input_dir: Path) -> List[Path]:
    """Supported files directly inside `input_dir`, sorted by name. Excel lock files are skipped."""
    return sorted(
        p
        for p in input_dir.iterdir()
        if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES and not p.name.startswith("~$")
    )


def process_folder(
    input_dir: Path,
    output_dir: Path,
    config: Optional[ClassifierConfig] = None,
) -> List[FileResult]:
    """
    Process every supported file in `input_dir`.

    The output folder is created if needed. Any exception raised while
    processing a file is reported and recorded as a failed FileResult; the
    remaining files are still processed.
    """
    if not input_dir.is_dir():
        raise FileNotFoundError(f"input folder '{input_dir}' does not exist")
    output_dir.mkdir(parents=True, exist_ok=True)

    results: List[FileResult] = []
    for path in discover_files(input_dir):
        print(f"Processing '{path.name}'...")
        try:
            res = process_file(path, output_dir, config)
        except Exception as e:
            print(f"An error occurred while processing '{path.name}': {e}", file=sys.stderr)
            res = FileResult(name=path.name, status="failed", error=str(e))
        else:
            print(
                f"Wrote: {res.output} "
                f"({res.duplicates} duplicate rows, {res.repeats} repeat rows)"
            )
        results.append(res)
    return results
