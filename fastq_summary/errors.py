"""
Exceptions raised while summarizing fastq files.

Run-level errors carry the exit code the command line should return.
SkipFile and its subclasses are per-file conditions: the file is skipped
and the batch carries on.
"""


class FastqSummaryError(Exception):
    """Base class for all errors raised by fastq_summary."""
    exit_code = 1


class UsageError(FastqSummaryError):
    """Missing or invalid command line arguments."""
    exit_code = 1


class DependencyMissing(FastqSummaryError):
    """The external statistics tool could not be found."""
    exit_code = 2


class OutputConflict(FastqSummaryError):
    """The output file exists and overwriting it was not allowed."""
    exit_code = 3


class OutputUnwritable(FastqSummaryError):
    """The output file could not be opened for writing."""
    exit_code = 1


class SkipFile(FastqSummaryError):
    """A single input file could not be summarized."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


class UnreadableInput(SkipFile):
    def __init__(self, path: str):
        super().__init__(path, "Skipping fastq; not found/readable")


class MalformedToolOutput(SkipFile):
    def __init__(self, path: str):
        super().__init__(path, "Sequences are not in fastq format; will skip processing")


class ToolTimeout(SkipFile):
    def __init__(self, path: str, timeout: float):
        super().__init__(path, f"seqtk did not finish within {timeout:g} seconds; will skip processing")
        self.timeout = timeout
