"""
Command line options for summarize-fastq and the resolved run configuration.
"""

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional, Tuple

from fastq_summary.errors import UsageError
from fastq_summary.logs import MAX_VERBOSITY

logger = logging.getLogger(__name__)

DESCRIPTION = """\
Summarize fastq[.gz] file(s) with basic statistics obtained via seqtk.

Input:
 - .fastq or .fastq.gz filename(s) as positional argument(s) or/and
 - pattern(s) that match all .fastq[.gz] files in a path.

Output:
 A tab delimited file (or on STDOUT) with the fields: #Dataset, #Reads,
 #Bases, #MinLen, #MaxLen, #AvgLen, #AvgQ, #AvgA, #AvgC, #AvgG, #AvgT, #AvgN

Dependencies: seqtk >= 1.2-r94
"""

EXAMPLES = """\
Examples:

### Find all .fastq.gz in PWD and summarize them.
%(prog)s *.fastq.gz

### Summarize a list of .fastq[.gz] file names stored in fastqFiles.txt.
cat fastqFiles.txt | xargs %(prog)s > summary.txt

### Summarize Path/To/Fastq/*.fastq.gz and *.fastq together in summary.txt.
%(prog)s -v -v -o summary.txt 'Path/To/Fastq/*.fastq.gz' '*.fastq'

### Summarize in parallel on 6 threads with GNU parallel, then merge.
parallel -j 6 %(prog)s -q -o {/.}.tsv {} ::: Path/to/Fastq/*.fastq.gz
merge-fastq-summaries -o summary.txt *.tsv

Status message categories:
 - ERR: Fatal errors!
 - INFO: Information about status of the program or time step.
 - STAT: Statistics about time or other parameters.
 - WARN: Non-fatal warnings!

Exit codes:
 0  Successful
 1  Unsuccessful or need arguments
 2  Problem with a dependency
 3  Overwrite permission
"""


@dataclass(frozen=True)
class Configuration:
    """Options of a single summarize-fastq run, resolved once from argv."""
    show_help: bool = False
    show_column_names_only: bool = False
    force_overwrite: bool = False
    omit_header: bool = False
    output_path: Optional[str] = None
    threads: int = 1
    verbosity: int = 1
    quiet: bool = False
    debug: bool = False
    input_patterns: Tuple[str, ...] = ()
    seqtk: str = "seqtk"
    timeout: Optional[float] = None


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that reports bad options as UsageError instead of exiting with 2."""

    def error(self, message):
        raise UsageError(message)


def build_parser(prog: Optional[str] = None, extended: bool = True) -> ArgumentParser:
    """
    Get the command line parser.

    With extended=False the examples, status categories and exit codes are
    left out; that shorter text is what gets printed on usage errors.
    """
    parser = ArgumentParser(
        prog=prog,
        description=DESCRIPTION,
        epilog=EXAMPLES if extended else None,
        formatter_class=argparse.RawTextHelpFormatter,
        add_help=False,
    )
    parser.add_argument("inputs", metavar="<*.fastq[.gz]|fastqFile1..n>", nargs="*",
                        help="fastq files and/or patterns matching them (at least one is required)")
    parser.add_argument("-c", "--colNames", action="store_true", dest="col_names",
                        help="only show column names and exit 0")
    parser.add_argument("-f", "--force", action="store_true",
                        help="force overwrite outFile if it exists; depends on -o|--outFile")
    parser.add_argument("-n", "--noHeader", action="store_true", dest="no_header",
                        help="do not include header line in the output")
    parser.add_argument("-o", "--outFile", type=str, metavar="<output file>", dest="out_file",
                        help="send output to a file, STDOUT otherwise")
    parser.add_argument("-t", "--threads", type=int, metavar="<number of threads>", default=1,
                        help="accepted for compatibility; files are always processed one by one")
    parser.add_argument("-h", "--help", action="store_true",
                        help="show more help and exit 0")
    parser.add_argument("-v", "--verbose", action="count", default=1,
                        help="use multiple times to increase verbosity")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="silent execution except for fatal errors (ERR);\n"
                             "no warnings (WARN), statistics (STAT) or information (INFO)")
    parser.add_argument("--debug", action="store_true",
                        help="set max verbosity for debugging; keeps outFile even if empty")
    parser.add_argument("--seqtk", type=str, metavar="<path>",
                        default=os.environ.get("SEQTK", "seqtk"),
                        help="seqtk executable to use (default: $SEQTK or 'seqtk' on PATH)")
    parser.add_argument("--timeout", type=float, metavar="<seconds>",
                        help="give up on a file if seqtk runs longer than this (default: no limit)")
    return parser


def resolve_config(argv=None, prog: Optional[str] = None) -> Configuration:
    """
    Parse argv into a Configuration.

    Raises UsageError for unknown options, bad option values and missing
    input arguments. -h and -c skip the input check.
    """
    args = build_parser(prog).parse_intermixed_args(sys.argv[1:] if argv is None else argv)

    if args.help:
        return Configuration(show_help=True)
    if args.col_names:
        return Configuration(show_column_names_only=True)
    if not args.inputs:
        raise UsageError("Need arguments.")
    if args.timeout is not None and args.timeout <= 0:
        raise UsageError(f"argument --timeout: must be positive, got {args.timeout:g}")

    verbosity = args.verbose
    if args.quiet:
        verbosity = 0
    if args.debug:
        verbosity = MAX_VERBOSITY

    return Configuration(
        force_overwrite=args.force,
        omit_header=args.no_header,
        output_path=args.out_file,
        threads=args.threads,
        verbosity=verbosity,
        quiet=args.quiet,
        debug=args.debug,
        input_patterns=tuple(args.inputs),
        seqtk=args.seqtk,
        timeout=args.timeout,
    )


def check_options(config: Configuration) -> None:
    """Log notes about option combinations that are allowed but have no effect."""
    if config.debug:
        logger.info("Debug mode enabled. Setting verbosity to max.")
    if config.force_overwrite and not config.output_path:
        logger.warning("Unnecessary use of force. Can't see option -o|--outFile specified.")
    if config.threads != 1:
        logger.debug("Ignoring -t|--threads %d; files are summarized one at a time.", config.threads)
