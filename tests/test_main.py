import sys
from unittest.mock import patch

import pytest

from lisplet.config.settings import InterpreterSettings
from lisplet.main import build_arg_parser, main, run_source
from sample_programs import REAL_CODE


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keeps main() from reconfiguring the root logger during tests."""
    with patch("lisplet.main.setup_logging") as mock_setup:
        for name in ("LISPLET_LOG_LEVEL", "LISPLET_LOG_FILE", "LISPLET_RECURSION_LIMIT", "LISPLET_VERBOSE"):
            monkeypatch.delenv(name, raising=False)
        yield mock_setup


# --- Argument parsing ---

def test_arg_parser_defaults():
    args = build_arg_parser().parse_args([])
    assert args.file is None
    assert args.expression is None
    assert args.log_level is None
    assert args.verbose is None

def test_arg_parser_log_level_is_case_insensitive():
    assert build_arg_parser().parse_args(["--log-level", "debug"]).log_level == "DEBUG"

def test_arg_parser_file_and_eval_are_exclusive(capsys):
    with pytest.raises(SystemExit):
        build_arg_parser().parse_args(["prog.lsp", "-e", "1"])


# --- run_source ---

def test_run_source_prints_last_value(capsys):
    assert run_source("(= a 2) (add a 3)", InterpreterSettings()) == 0
    assert capsys.readouterr().out == "5\n"

def test_run_source_verbose_prints_every_value(capsys):
    assert run_source("(= a 2) a", InterpreterSettings(verbose=True)) == 0
    assert capsys.readouterr().out == "#void\n2\n"

def test_run_source_syntax_error(capsys):
    assert run_source("(add 1", InterpreterSettings()) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Syntax error: Unexpected end of input")

def test_run_source_evaluation_error(capsys):
    assert run_source("(nope)", InterpreterSettings()) == 1
    assert capsys.readouterr().err.startswith("Error: Variable does not exist: nope")


# --- main ---

def test_main_eval(capsys):
    assert main(["-e", r"((\(a) a) 7)"]) == 0
    assert capsys.readouterr().out == "7\n"

def test_main_eval_error_exit_code(capsys):
    assert main(["-e", "(5)"]) == 1
    assert "Attempted to call a non-function" in capsys.readouterr().err

def test_main_runs_file(tmp_path, capsys):
    program = tmp_path / "real.lsp"
    program.write_text(REAL_CODE, encoding="utf-8")
    assert main([str(program)]) == 0
    assert capsys.readouterr().out == "3\n"

def test_main_runs_file_verbose(tmp_path, capsys):
    program = tmp_path / "prog.lsp"
    program.write_text("(= x 1)\nx\n", encoding="utf-8")
    assert main([str(program), "--verbose"]) == 0
    assert capsys.readouterr().out == "#void\n1\n"

def test_main_missing_file(tmp_path, capsys):
    missing = tmp_path / "absent.lsp"
    assert main([str(missing)]) == 1
    assert capsys.readouterr().err.startswith(f"Error: cannot read {missing}")

def test_main_configures_logging_from_flags(quiet_logging, tmp_path):
    log_file = str(tmp_path / "run.log")
    main(["-e", "1", "--log-level", "info", "--log-file", log_file])
    quiet_logging.assert_called_once_with("INFO", log_file)

def test_main_reads_settings_from_environment(quiet_logging, monkeypatch, capsys):
    monkeypatch.setenv("LISPLET_LOG_LEVEL", "error")
    monkeypatch.setenv("LISPLET_VERBOSE", "1")
    assert main(["-e", "1 2"]) == 0
    quiet_logging.assert_called_once_with("ERROR", None)
    assert capsys.readouterr().out == "1\n2\n"

def test_main_flags_override_environment(quiet_logging, monkeypatch):
    monkeypatch.setenv("LISPLET_LOG_LEVEL", "error")
    main(["-e", "1", "--log-level", "DEBUG"])
    quiet_logging.assert_called_once_with("DEBUG", None)

def test_main_raises_recursion_limit(monkeypatch):
    monkeypatch.setenv("LISPLET_RECURSION_LIMIT", "4321")
    original = sys.getrecursionlimit()
    try:
        sys.setrecursionlimit(1000)
        main(["-e", "1"])
        assert sys.getrecursionlimit() == 4321
    finally:
        sys.setrecursionlimit(original)

def test_main_starts_repl_without_arguments():
    with patch("lisplet.main.Repl") as mock_repl:
        assert main([]) == 0
    mock_repl.assert_called_once_with(verbose=False)
    mock_repl.return_value.start.assert_called_once_with()

@pytest.mark.parametrize("name, raw", [("LISPLET_RECURSION_LIMIT", "lots"), ("LISPLET_LOG_LEVEL", "chatty")])
def test_main_rejects_malformed_environment(quiet_logging, monkeypatch, capsys, name, raw):
    monkeypatch.setenv(name, raw)
    assert main(["-e", "1"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Error: invalid settings in environment")
    quiet_logging.assert_not_called()
