import pytest

from tsu.app import log_level, main, parse_args


@pytest.mark.parametrize(
    ("verbose", "expected"),
    [(0, "warn"), (1, "info"), (2, "debug"), (3, "trace"), (9, "trace")],
)
def test_log_level_matches_verbosity(verbose, expected):
    assert log_level(verbose) == expected


def test_log_level_rejects_negative():
    with pytest.raises(ValueError):
        log_level(-1)


def test_parse_args_reads_file_and_defaults_to_quiet():
    args = parse_args(["notes.txt"])
    assert args.file == "notes.txt"
    assert log_level(args.verbose) == "warn"


def test_parse_args_counts_repeated_flags():
    combined = parse_args(["-vv", "notes.txt"])
    separate = parse_args(["-v", "-v", "notes.txt"])
    assert combined.verbose == separate.verbose
    assert log_level(combined.verbose) == "debug"


def test_parse_args_many_flags_is_trace():
    args = parse_args(["-vvvv", "notes.txt"])
    assert log_level(args.verbose) == "trace"


def test_parse_args_requires_file():
    with pytest.raises(SystemExit) as info:
        parse_args([])
    assert info.value.code == 2


def test_parse_args_version_exits_cleanly(capsys):
    with pytest.raises(SystemExit) as info:
        parse_args(["--version"])
    assert info.value.code == 0
    assert "tsu" in capsys.readouterr().out


def test_main_without_file_exits_with_usage_error():
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 2