#!/usr/bin/env python3
"""
summarize-fastq: summarize fastq[.gz] files with basic statistics from seqtk.

One tab-delimited row per file with read and base counts, read lengths,
average quality and base composition. Run with -h for examples.
"""

import functools
import logging
import sys
import time

from fastq_summary.config import Configuration, build_parser, check_options, resolve_config
from fastq_summary.errors import DependencyMissing, FastqSummaryError, UsageError
from fastq_summary.inputs import expand_inputs
from fastq_summary.logs import STAT, pretty_duration, setup_logging
from fastq_summary.output import open_output, remove_if_empty
from fastq_summary.seqtk import MIN_SEQTK_VERSION, ToolStatus, check_tool, run_stats_tool
from fastq_summary.summarize import header_row, write_summaries

logger = logging.getLogger("fastq_summary.cli")

PROG = "summarize-fastq"


def run(config: Configuration) -> int:
    """
    Summarize the inputs of a resolved configuration.

    Returns the number of files summarized. Raises DependencyMissing or
    OutputConflict before any file is touched.
    """
    started = time.time()
    check_options(config)

    if check_tool(MIN_SEQTK_VERSION, config.seqtk) is ToolStatus.NOT_FOUND:
        raise DependencyMissing("Exiting")

    runner = functools.partial(run_stats_tool, seqtk=config.seqtk, timeout=config.timeout)
    with open_output(config.output_path, config.force_overwrite) as sink:
        fastq_files = expand_inputs(config.input_patterns)
        logger.log(STAT, "Found %d file(s) to summarize", len(fastq_files))
        if fastq_files:
            logger.info("List of files:\n%s", "\n".join(fastq_files))
        processed = write_summaries(fastq_files, sink, runner, header=not config.omit_header)

    remove_if_empty(config.output_path, processed, config.verbosity)
    logger.log(STAT, "Finished summarizing %d file(s) in %s", processed, pretty_duration(time.time() - started))
    return processed


def main(argv=None) -> int:
    """Command line entry point; returns the exit code."""
    setup_logging()
    try:
        config = resolve_config(argv, prog=PROG)
    except UsageError as err:
        logger.error("%s", err)
        sys.stderr.write(build_parser(PROG, extended=False).format_help())
        return err.exit_code

    if config.show_help:
        sys.stdout.write(build_parser(PROG).format_help())
        return 0
    if config.show_column_names_only:
        sys.stdout.write(header_row())
        return 0

    setup_logging(config.verbosity)
    try:
        run(config)
    except FastqSummaryError as err:
        logger.error("%s", err)
        return err.exit_code
    return 0


if __name__ == "__main__":
    sys.exit(main())
