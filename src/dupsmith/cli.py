#!/usr/bin/env python3
"""
dupsmith CLI

Duplicate and repeated-value extraction for spreadsheet files.

Subcommands:
  - extract: classify every file of an input folder into an output folder
  - scan: classify a single file
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .classify import ClassifierConfig, ConfigurationError, DupsmithError, RowClassifier
from .ordering import order_results
from .workbook import discover_files, process_folder, read_table, write_results


def _config_from_args(args: argparse.Namespace) -> ClassifierConfig:
    return ClassifierConfig(
        columns_to_skip=args.columns_to_skip,
        min_repeats=args.min_repeats,
        sort_column=args.sort_column,
    )


def cmd_extract(args: argparse.Namespace) -> int:
    input_dir = Path(args.input_dir)
    output_dir = Path(args.output_dir)
    if not input_dir.is_dir():
        print(f"Error: input folder '{input_dir}' does not exist.", file=sys.stderr)
        return 1

    try:
        config = _config_from_args(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if not discover_files(input_dir):
        output_dir.mkdir(parents=True, exist_ok=True)
        print(f"No input files found in '{input_dir}'.")
        return 0

    results = process_folder(input_dir, output_dir, config)
    failed = [r for r in results if r.status == "failed"]
    print(f"\nProcessed {len(results) - len(failed)} file(s), {len(failed)} failed.")
    return 1 if failed else 0


def cmd_scan(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    if not input_path.is_file():
        print(f"Error: input file not found: {input_path}", file=sys.stderr)
        return 1

    try:
        config = _config_from_args(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        table = read_table(input_path)
        result = RowClassifier(config).classify(table)
        duplicates, repeats = order_results(table, result, config)
        if args.output:
            output_path = write_results(Path(args.output), duplicates, repeats)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except (DupsmithError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        print(f"Wrote duplicates and repeats to: {output_path}")
    else:
        print("# Duplicates")
        duplicates.to_csv(sys.stdout, header=False, index=False)
        print("# Repeats")
        repeats.to_csv(sys.stdout, header=False, index=False)

    return 0


def _add_classifier_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--columns-to-skip",
        type=int,
        default=3,
        help="1-indexed first column compared between rows; earlier columns "
             "are ignored. Default: 3.",
    )
    parser.add_argument(
        "--min-repeats",
        type=int,
        default=3,
        help="How often one value must occur within a row to report it as a "
             "repeat. Default: 3.",
    )
    parser.add_argument(
        "--sort-column",
        type=int,
        default=3,
        help="1-indexed column used to order duplicate groups of equal size. "
             "Default: 3.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dupsmith",
        description="Extract duplicate rows and rows with repeated values from spreadsheets.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # extract
    p_extract = subparsers.add_parser(
        "extract",
        help="Process every .xlsx/.csv file in a folder.",
    )
    p_extract.add_argument(
        "input_dir",
        nargs="?",
        default="Input",
        help='Folder holding the input files. Default: "Input".',
    )
    p_extract.add_argument(
        "output_dir",
        nargs="?",
        default="Output",
        help='Folder receiving one workbook per input file. Default: "Output".',
    )
    _add_classifier_options(p_extract)
    p_extract.set_defaults(func=cmd_extract)

    # scan
    p_scan = subparsers.add_parser(
        "scan",
        help="Process a single file.",
    )
    p_scan.add_argument("input", help="Input .xlsx or .csv file.")
    p_scan.add_argument(
        "-o",
        "--output",
        help="Output workbook (.xlsx). If omitted, both result tables are "
             "written to stdout as CSV.",
    )
    _add_classifier_options(p_scan)
    p_scan.set_defaults(func=cmd_scan)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        func = args.func
    except AttributeError:
        parser.print_help()
        return 1

    return func(args)


if __name__ == "__main__":
    raise SystemExit(main())
