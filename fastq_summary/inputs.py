"""Expand command line arguments into the list of fastq files to summarize."""

import glob
import logging
import os
from typing import Iterable, List

logger = logging.getLogger(__name__)


def expand_pattern(pattern: str) -> List[str]:
    """
    Expand a single argument against the filesystem.

    Matches are returned in sorted order, like a shell would. An argument
    without wildcards is returned as-is even if no such file exists, so
    that the missing file is reported later instead of silently dropped.
    """
    expanded = os.path.expanduser(pattern)
    if not glob.has_magic(expanded):
        return [expanded]
    return sorted(glob.glob(expanded))


def expand_inputs(patterns: Iterable[str]) -> List[str]:
    """
    Expand all arguments, in argument order.

    A file named twice or matched by two patterns appears twice.
    """
    files = []
    for pattern in patterns:
        matches = expand_pattern(pattern)
        if not matches:
            logger.debug("No files match pattern: %s", pattern)
        files.extend(matches)
    return files


def is_readable(path: str) -> bool:
    """True if path is an existing regular file this process may read."""
    return os.path.isfile(path) and os.access(path, os.R_OK)
