"""
Everything that talks to the seqtk executable: the version gate run once at
start-up and the per-file `seqtk fqchk` call.
"""

import enum
import logging
import subprocess
from typing import List, Optional, Sequence

from fastq_summary.errors import ToolTimeout

logger = logging.getLogger(__name__)

MIN_SEQTK_VERSION = "1.2-r94"

# seqtk prints at most this many report lines that the summary needs
FQCHK_LINES = 4


class ToolStatus(enum.Enum):
    NOT_FOUND = 0
    OK = 1
    TOO_OLD = -1


def tool_banner(seqtk: str = "seqtk") -> List[str]:
    """
    Run seqtk without arguments and return its usage banner as lines.

    seqtk prints the banner on stderr, so both streams are captured together.
    An executable that is missing or cannot be run gives an empty list.
    """
    logger.debug("Running seqtk command: `%s 2>&1`", seqtk)
    try:
        proc = subprocess.run([seqtk], stdout=subprocess.PIPE, stderr=subprocess.STDOUT,
                              text=True, check=False)
    except OSError as err:
        logger.debug("Could not run %s: %s", seqtk, err)
        return []
    logger.debug("Finished seqtk command:\n%s", proc.stdout)
    return proc.stdout.splitlines()


def tool_version(banner: Sequence[str]) -> str:
    """
    Extract the version token from a seqtk banner.

    The version is the last word of the third line ('Version: 1.3-r106').
    A banner too short to have that line gives an empty string.
    """
    if len(banner) < 3:
        return ""
    words = banner[2].split()
    return words[-1] if words else ""


def compare_version(found: str, needed: str = MIN_SEQTK_VERSION) -> ToolStatus:
    """
    Compare two seqtk versions as plain strings.

    This is a lexicographic comparison, so '1.10' sorts below '1.9'.
    """
    if found >= needed:
        return ToolStatus.OK
    return ToolStatus.TOO_OLD


def check_tool(min_version: str = MIN_SEQTK_VERSION, seqtk: str = "seqtk") -> ToolStatus:
    """Check that seqtk is available and at least min_version."""
    logger.debug("Checking for %s >= %s", seqtk, min_version)
    banner = tool_banner(seqtk)
    if not banner:
        logger.error("seqtk not found in PATH")
        logger.error("Please install seqtk via `conda install seqtk` or `sudo apt install seqtk`")
        logger.error("Or please check out https://github.com/lh3/seqtk")
        return ToolStatus.NOT_FOUND

    version = tool_version(banner)
    logger.debug("Found seqtk version: %s!", version)
    status = compare_version(version, min_version)
    if status is ToolStatus.OK:
        logger.debug("seqtk %s found is same/higher than %s needed. Good to go!", version, min_version)
    else:
        logger.warning("seqtk %s found is lower than %s.", version, min_version)
        logger.warning("Program may not work as intended.")
    return status


def run_stats_tool(path: str, seqtk: str = "seqtk", timeout: Optional[float] = None) -> List[str]:
    """
    Run `seqtk fqchk` on one fastq file and return the first report lines.

    Only the first FQCHK_LINES lines are kept, the rest of the report is
    per-position detail. A failing run returns whatever it printed, which
    is usually nothing; deciding whether that is usable is up to the parser.
    Raises ToolTimeout if seqtk runs longer than timeout seconds.
    """
    cmd = [seqtk, "fqchk", path]
    logger.debug("Running seqtk command: `%s | head -%d`", " ".join(cmd), FQCHK_LINES)
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=False, timeout=timeout)
    except subprocess.TimeoutExpired:
        raise ToolTimeout(path, timeout)
    except OSError as err:
        logger.debug("Could not run %s: %s", seqtk, err)
        return []

    lines = proc.stdout.splitlines()[:FQCHK_LINES]
    logger.debug("Finished seqtk command:\n%s", "\n".join(lines))
    if proc.returncode != 0:
        logger.debug("seqtk exited with %d: %s", proc.returncode, proc.stderr.strip())
    return lines
