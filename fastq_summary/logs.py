"""
Logging setup shared by the command line tools.

Messages use the legacy status categories (ERR, WARN, STAT, INFO) and go to
stderr so that stdout only ever carries summary rows.
"""

import logging
import sys
import time

# Statistics about run time or counts; shown at the default verbosity
STAT = 25
logging.addLevelName(STAT, "STAT")

MAX_VERBOSITY = 100

LEVEL_TAGS = {
    logging.DEBUG: "INFO",
    logging.INFO: "INFO",
    STAT: "STAT",
    logging.WARNING: "WARN",
    logging.ERROR: "ERR",
    logging.CRITICAL: "ERR",
}


def verbosity_to_level(verbosity: int) -> int:
    """Map the -v/-q/--debug verbosity count to a logging threshold."""
    if verbosity <= 0:
        return logging.ERROR
    if verbosity == 1:
        return STAT
    if verbosity == 2:
        return logging.INFO
    return logging.DEBUG


class StatusFormatter(logging.Formatter):
    """Formats records as '[20240131 13:45:02.123] WARN: message'."""

    def __init__(self, verbosity: int = 1):
        super().__init__("[%(asctime)s] %(status)s: %(message)s")
        self.verbosity = verbosity

    def formatTime(self, record, datefmt=None):
        stamp = time.strftime("%Y%m%d %H:%M:%S", time.localtime(record.created))
        fraction = record.created - int(record.created)
        if self.verbosity >= 3:
            stamp += ".%06d" % int(fraction * 1000000)
        elif self.verbosity >= 2:
            stamp += ".%03d" % int(fraction * 1000)
        return stamp

    def format(self, record):
        record.status = LEVEL_TAGS.get(record.levelno, record.levelname)
        return super().format(record)


def setup_logging(verbosity: int = 1, stream=None) -> logging.Logger:
    """
    Configure the package logger for a command line run.

    Any handler left over from a previous run in the same interpreter is
    replaced, so calling this more than once does not duplicate messages.
    """
    logger = logging.getLogger("fastq_summary")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(StatusFormatter(verbosity))
    logger.addHandler(handler)
    logger.setLevel(verbosity_to_level(verbosity))
    return logger


def pretty_duration(seconds: float) -> str:
    """
    Render an elapsed time rounded to whole seconds.

    Examples: '0 seconds', '1 second', '2 minutes, 5 seconds',
    '1 hour, 0 minutes, 3 seconds'.
    """
    total = int(seconds + 0.5)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)

    def unit(value, name):
        return f"{value} {name}" if value == 1 else f"{value} {name}s"

    parts = []
    if hours:
        parts.append(unit(hours, "hour"))
    if hours or minutes:
        parts.append(unit(minutes, "minute"))
    parts.append(unit(secs, "second"))
    return ", ".join(parts)
