import pytest
import os
import sys

# Add repository root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from fastq_summary import config
from fastq_summary.errors import UsageError
from fastq_summary.logs import MAX_VERBOSITY


def test_defaults(monkeypatch):
    monkeypatch.delenv("SEQTK", raising=False)
    cfg = config.resolve_config(["reads.fastq"])

    assert cfg.input_patterns == ("reads.fastq",)
    assert cfg.verbosity == 1
    assert cfg.output_path is None
    assert cfg.threads == 1
    assert cfg.seqtk == "seqtk"
    assert cfg.timeout is None
    assert not (cfg.force_overwrite or cfg.omit_header or cfg.quiet or cfg.debug)


def test_all_options():
    cfg = config.resolve_config(["-f", "-n", "-o", "out.tsv", "-t", "4", "--timeout", "60",
                                 "--seqtk", "/opt/seqtk", "a.fastq", "*.fastq.gz"])

    assert cfg.force_overwrite
    assert cfg.omit_header
    assert cfg.output_path == "out.tsv"
    assert cfg.threads == 4
    assert cfg.timeout == 60.0
    assert cfg.seqtk == "/opt/seqtk"
    assert cfg.input_patterns == ("a.fastq", "*.fastq.gz")


def test_long_options():
    cfg = config.resolve_config(["--force", "--noHeader", "--outFile", "out.tsv", "--threads", "2", "x.fq"])

    assert cfg.force_overwrite and cfg.omit_header
    assert cfg.output_path == "out.tsv"
    assert cfg.threads == 2


def test_options_after_inputs():
    """Options may follow the input patterns, as GNU getopt allows."""
    cfg = config.resolve_config(["a.fastq", "-v", "b.fastq", "-o", "out.tsv"])

    assert cfg.input_patterns == ("a.fastq", "b.fastq")
    assert cfg.verbosity == 2
    assert cfg.output_path == "out.tsv"


def test_threads_accepts_any_integer():
    """-t is advisory, so values the engine would never use are still accepted."""
    assert config.resolve_config(["-t", "0", "a.fq"]).threads == 0
    assert config.resolve_config(["--threads", "-2", "a.fq"]).threads == -2


def test_seqtk_from_environment(monkeypatch):
    monkeypatch.setenv("SEQTK", "/usr/local/bin/seqtk")
    assert config.resolve_config(["a.fastq"]).seqtk == "/usr/local/bin/seqtk"


@pytest.mark.parametrize("argv, expected", [
    (["a.fq"], 1),
    (["-v", "a.fq"], 2),
    (["-v", "-v", "-v", "a.fq"], 4),
    (["-vvv", "a.fq"], 4),
    (["-v", "-v", "-q", "a.fq"], 0),
    (["-q", "-v", "a.fq"], 0),
    (["--debug", "a.fq"], MAX_VERBOSITY),
    (["-q", "--debug", "a.fq"], MAX_VERBOSITY),
])
def test_verbosity(argv, expected):
    assert config.resolve_config(argv).verbosity == expected


def test_need_arguments():
    with pytest.raises(UsageError, match="Need arguments"):
        config.resolve_config([])


def test_need_arguments_with_options():
    with pytest.raises(UsageError):
        config.resolve_config(["-o", "out.tsv", "-f"])


@pytest.mark.parametrize("argv", [
    ["--bogus", "a.fq"],
    ["-t", "many", "a.fq"],
    ["--timeout", "-1", "a.fq"],
    ["a.fq", "-o"],
])
def test_bad_options(argv):
    with pytest.raises(UsageError) as err:
        config.resolve_config(argv)
    assert err.value.exit_code == 1


def test_col_names_without_inputs():
    cfg = config.resolve_config(["-c", "-n", "-o", "out.tsv"])

    assert cfg.show_column_names_only
    assert cfg.input_patterns == ()
    assert cfg.output_path is None


def test_help_wins():
    """-h takes precedence over -c."""
    cfg = config.resolve_config(["-c", "-h"])
    assert cfg.show_help


def test_extended_help_text():
    text = config.build_parser("summarize-fastq").format_help()
    short = config.build_parser("summarize-fastq", extended=False).format_help()

    assert "--colNames" in text and "--debug" in text
    assert "summarize-fastq *.fastq.gz" in text
    assert "Exit codes:" in text
    assert "Exit codes:" not in short
    assert "--outFile" in short


def test_configuration_is_frozen():
    cfg = config.resolve_config(["a.fq"])
    with pytest.raises(Exception):
        cfg.verbosity = 3


def test_check_options_force_without_output(caplog):
    """-f does nothing without -o, which is worth a warning."""
    cfg = config.resolve_config(["-f", "a.fq"])

    with caplog.at_level("WARNING", logger="fastq_summary"):
        config.check_options(cfg)

    assert "Unnecessary use of force" in caplog.text


def test_check_options_quiet_about_force_with_output(caplog):
    cfg = config.resolve_config(["-f", "-o", "out.tsv", "a.fq"])

    with caplog.at_level("WARNING", logger="fastq_summary"):
        config.check_options(cfg)

    assert "Unnecessary use of force" not in caplog.text
