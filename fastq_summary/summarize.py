"""
Turn `seqtk fqchk` reports into one summary row per fastq file.

The report is scraped by line position. For a typical file the first four
lines look like:

    min_len: 35; max_len: 301; avg_len: 298.40; 37 distinct quality values
    POS     #bases  %A      %C      %G      %T      %N      avgQ    errQ    %low    %high
    ALL     15000   24.1    26.3    26.0    23.9    0.1     34.2    25.3    5.0     95.0
    1       500     ...

Line 1 (0-based) is the column header and is not used.
"""

import logging
import re
import time
from dataclasses import astuple, dataclass
from decimal import Decimal, InvalidOperation
from typing import Callable, Iterable, Iterator, List, Optional, TextIO, Tuple

from fastq_summary.errors import MalformedToolOutput, SkipFile, UnreadableInput
from fastq_summary.inputs import is_readable
from fastq_summary.logs import STAT, pretty_duration

logger = logging.getLogger(__name__)

COLUMNS = [
    "Dataset", "Reads", "Bases", "MinLen", "MaxLen", "AvgLen",
    "AvgQ", "AvgA", "AvgC", "AvgG", "AvgT", "AvgN"
]

_INT = r"(\d*)"
_DEC = r"(\d*\.?\d*)"
_SEP = r"[ \t]+"
_END = r"(?=[ \t]|$)"

LENGTHS_RE = re.compile(
    rf"^min_len:{_SEP}{_INT};{_SEP}max_len:{_SEP}{_INT};{_SEP}avg_len:{_SEP}{_DEC};"
)
# bases, %A, %C, %G, %T, %N, avgQ
TOTALS_RE = re.compile(rf"^ALL{_SEP}{_INT}" + rf"{_SEP}{_DEC}" * 6 + _END)
FIRST_POSITION_RE = re.compile(rf"^1{_SEP}{_INT}{_END}")

StatsRunner = Callable[[str], List[str]]


@dataclass(frozen=True)
class SummaryRecord:
    """Statistics of one fastq file. Fields follow the output column order."""
    Dataset: str
    Reads: Optional[int] = None
    Bases: Optional[int] = None
    MinLen: Optional[int] = None
    MaxLen: Optional[int] = None
    AvgLen: Optional[Decimal] = None
    AvgQ: Optional[Decimal] = None
    AvgA: Optional[Decimal] = None
    AvgC: Optional[Decimal] = None
    AvgG: Optional[Decimal] = None
    AvgT: Optional[Decimal] = None
    AvgN: Optional[Decimal] = None


def _to_int(text: Optional[str]) -> Optional[int]:
    return int(text) if text else None


def _to_decimal(text: Optional[str]) -> Optional[Decimal]:
    if not text:
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def parse_fqchk(dataset: str, lines: List[str]) -> SummaryRecord:
    """
    Build a SummaryRecord from the first four lines of a `seqtk fqchk` report.

    Raises MalformedToolOutput if the report has fewer than four lines or an
    empty fourth line. Otherwise fields that do not match their pattern are
    left as None.
    """
    if len(lines) < 4 or not lines[3].strip():
        raise MalformedToolOutput(dataset)

    values = dict.fromkeys(COLUMNS[1:])

    match = LENGTHS_RE.match(lines[0])
    if match:
        values["MinLen"] = _to_int(match.group(1))
        values["MaxLen"] = _to_int(match.group(2))
        values["AvgLen"] = _to_decimal(match.group(3))

    match = TOTALS_RE.match(lines[2])
    if match:
        values["Bases"] = _to_int(match.group(1))
        for column, text in zip(["AvgA", "AvgC", "AvgG", "AvgT", "AvgN", "AvgQ"], match.groups()[1:]):
            values[column] = _to_decimal(text)

    match = FIRST_POSITION_RE.match(lines[3])
    if match:
        values["Reads"] = _to_int(match.group(1))

    return SummaryRecord(Dataset=dataset, **values)


def header_row(columns: Iterable[str] = COLUMNS) -> str:
    """Header line: every column name prefixed with '#' and followed by a tab."""
    return "".join(f"#{name}\t" for name in columns) + "\n"


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def format_row(record: SummaryRecord) -> str:
    """Data line: every value followed by a tab, unset values left empty."""
    return "".join(f"{_cell(value)}\t" for value in astuple(record)) + "\n"


def summarize_file(path: str, runner: StatsRunner) -> SummaryRecord:
    """
    Summarize one fastq file.

    Raises UnreadableInput if the file cannot be read and
    MalformedToolOutput if seqtk did not produce a usable report.
    """
    if not is_readable(path):
        raise UnreadableInput(path)
    return parse_fqchk(path, runner(path))


def iter_summaries(paths: Iterable[str], runner: StatsRunner
                   ) -> Iterator[Tuple[str, Optional[SummaryRecord], Optional[SkipFile]]]:
    """
    Summarize files one after another.

    Yields (path, record, None) for every summarized file and
    (path, None, error) for every skipped one, in input order.
    """
    for path in paths:
        try:
            record = summarize_file(path, runner)
        except SkipFile as err:
            yield path, None, err
        else:
            yield path, record, None


def write_summaries(paths: Iterable[str], sink: TextIO, runner: StatsRunner, header: bool = True) -> int:
    """
    Write the header and one row per summarized file to sink.

    Skipped files are logged as warnings. Returns the number of rows written.
    """
    if header:
        logger.debug("The header line has %d columns.", len(COLUMNS))
        sink.write(header_row())

    processed = 0
    started = time.time()
    for path, record, error in iter_summaries(paths, runner):
        if error is not None:
            logger.warning("%s", error)
            if not isinstance(error, UnreadableInput):
                logger.warning("Consider checking the fastq file or run with --debug to investigate.")
        else:
            sink.write(format_row(record))
            processed += 1
            # per-file timings are only wanted from -v -v on
            if logger.isEnabledFor(logging.INFO):
                logger.log(STAT, "Spent %s for %s", pretty_duration(time.time() - started), path)
        started = time.time()
    return processed
