"""Where summary rows are written: stdout or an output file owned by this run."""

import contextlib
import logging
import os
import sys
from typing import Iterator, Optional, TextIO

from fastq_summary.errors import OutputConflict, OutputUnwritable
from fastq_summary.logs import MAX_VERBOSITY

logger = logging.getLogger(__name__)


def check_overwrite(output_path: str, force: bool = False) -> None:
    """
    Refuse to touch an existing output file unless force is set.

    Two runs started at the same time on the same path can both pass this
    check; only one writer per output file is supported.
    """
    if not os.path.exists(output_path):
        return
    logger.warning("Output file exists: %s", output_path)
    if not force:
        raise OutputConflict(f"Need elevation to overwrite {output_path}. Use -f|--force")
    logger.warning("Overwriting with -f|--force")


@contextlib.contextmanager
def open_output(output_path: Optional[str] = None, force: bool = False) -> Iterator[TextIO]:
    """
    Yield the stream summary rows go to.

    Without output_path this is sys.stdout, which is left open. Otherwise the
    file is checked with check_overwrite, opened for writing and closed when
    the block exits. Raises OutputUnwritable if the file cannot be created.
    """
    if output_path is None:
        yield sys.stdout
        return

    check_overwrite(output_path, force)
    try:
        out = open(output_path, "w")
    except OSError as err:
        raise OutputUnwritable(f"Cannot write output file {output_path}: {err.strerror or err}") from err
    with out:
        logger.info("Output will be written to: %s", output_path)
        yield out


def remove_if_empty(output_path: Optional[str], processed: int, verbosity: int) -> bool:
    """
    Delete an output file that ended up without a single summary row.

    The file is kept when verbosity is at the debug maximum. Returns True if
    the file was deleted.
    """
    if not output_path or processed > 0 or verbosity >= MAX_VERBOSITY:
        return False
    logger.warning("Seems no records to write, will delete %s.", output_path)
    with contextlib.suppress(FileNotFoundError):
        os.remove(output_path)
    return True
