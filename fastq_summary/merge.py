#!/usr/bin/env python3
"""
merge-fastq-summaries: combine summary tables written by separate
summarize-fastq runs, e.g. one run per file started by GNU parallel.

Header lines are dropped wherever they occur, identical rows are kept once
and the result is sorted by dataset.
"""

import argparse
import csv
import logging
import sys
from typing import Iterable, List, Optional, TextIO

import pandas as pd

from fastq_summary.errors import FastqSummaryError, UsageError
from fastq_summary.inputs import expand_inputs, is_readable
from fastq_summary.logs import STAT, setup_logging
from fastq_summary.output import open_output, remove_if_empty
from fastq_summary.summarize import COLUMNS

logger = logging.getLogger("fastq_summary.merge")

PROG = "merge-fastq-summaries"

INT_COLUMNS = ["Reads", "Bases", "MinLen", "MaxLen"]
DECIMAL_COLUMNS = ["AvgLen", "AvgQ", "AvgA", "AvgC", "AvgG", "AvgT", "AvgN"]


def empty_summary() -> pd.DataFrame:
    return pd.DataFrame(columns=COLUMNS, dtype=str)


def read_summary(path: str, numeric: bool = False) -> pd.DataFrame:
    """
    Read a summarize-fastq table, with or without its header line.

    Values are kept as text by default so that writing the table back out
    reproduces them exactly. With numeric=True count columns become nullable
    integers and the averages floats; empty cells become missing values.
    """
    try:
        raw = pd.read_csv(path, sep="\t", header=None, dtype=str, keep_default_na=False, quoting=csv.QUOTE_NONE)
    except pd.errors.EmptyDataError:
        return empty_summary()

    if raw.shape[1] < len(COLUMNS):
        raise ValueError(f"Expected {len(COLUMNS)} tab-separated columns in {path}, found {raw.shape[1]}")

    df = raw.iloc[:, :len(COLUMNS)].copy()
    df.columns = COLUMNS
    df = df[~df["Dataset"].str.startswith("#")].reset_index(drop=True)

    if numeric:
        df = to_numeric(df)
    return df


def to_numeric(df: pd.DataFrame) -> pd.DataFrame:
    """Convert the statistics columns of a text summary to numbers."""
    df = df.copy()
    for col in INT_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype("Int64")
    for col in DECIMAL_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)
    return df


def merge_summaries(paths: Iterable[str]) -> pd.DataFrame:
    """Concatenate summaries, drop repeated rows and sort by dataset."""
    frames = [read_summary(path) for path in paths]
    if not frames:
        return empty_summary()
    merged = pd.concat(frames, ignore_index=True)
    merged = merged.drop_duplicates()
    merged = merged.sort_values(COLUMNS, kind="mergesort")
    return merged.reset_index(drop=True)


def write_summary(df: pd.DataFrame, stream: TextIO, header: bool = True) -> None:
    """Write a summary table in the summarize-fastq layout, trailing tab included."""
    out = df[COLUMNS].copy()
    # empty last column reproduces the tab after the last value
    out[""] = ""
    out.to_csv(
        stream,
        sep="\t",
        index=False,
        header=[f"#{col}" for col in COLUMNS] + [""] if header else False,
        na_rep="",
        lineterminator="\n",
    )


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def get_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Get command line arguments
    """
    parser = ArgumentParser(
        prog=PROG,
        description="Merge summary tables written by summarize-fastq into one table.\n"
                    "Header lines are dropped, identical rows kept once, rows sorted by dataset.\n"
                    "Exit codes: 0 successful, 1 need arguments, 3 overwrite permission.",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument("inputs", metavar="<summary file|pattern>", nargs="+",
                        help="summary tables and/or patterns matching them")
    parser.add_argument("-o", "--outFile", type=str, metavar="<output file>", dest="out_file",
                        help="send output to a file, STDOUT otherwise")
    parser.add_argument("-f", "--force", action="store_true",
                        help="force overwrite outFile if it exists")
    parser.add_argument("-n", "--noHeader", action="store_true", dest="no_header",
                        help="do not include header line in the output")
    parser.add_argument("-v", "--verbose", action="count", default=1,
                        help="use multiple times to increase verbosity")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="only show fatal errors")
    return parser.parse_intermixed_args(sys.argv[1:] if argv is None else argv)


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    try:
        args = get_args(argv)
    except UsageError as err:
        logger.error("%s", err)
        return err.exit_code

    verbosity = 0 if args.quiet else args.verbose
    setup_logging(verbosity)

    tables = []
    for path in expand_inputs(args.inputs):
        if not is_readable(path):
            logger.warning("Skipping summary; not found/readable: %s", path)
            continue
        tables.append(path)
    logger.log(STAT, "Found %d summary file(s) to merge", len(tables))

    # read everything before the output is opened, it may be one of the inputs
    try:
        merged = merge_summaries(tables)
    except ValueError as err:
        logger.error("%s", err)
        return 1

    try:
        with open_output(args.out_file, args.force) as sink:
            write_summary(merged, sink, header=not args.no_header)
    except FastqSummaryError as err:
        logger.error("%s", err)
        return err.exit_code

    remove_if_empty(args.out_file, len(merged), verbosity)
    logger.log(STAT, "Merged %d row(s) from %d file(s)", len(merged), len(tables))
    return 0


if __name__ == "__main__":
    sys.exit(main())
