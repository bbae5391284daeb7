import sys

import pytest

import run_tests


def test_build_command_for_contract_suite():
    runner = run_tests.TestRunner(suite="contract", tags=["P0", "smoke"], parallel=4)

    cmd = runner._build_pytest_command()

    assert cmd[:4] == [sys.executable, "-m", "pytest", "testsuites/contract_testing/tests"]
    assert cmd[cmd.index("-m", 3) + 1] == "P0 or smoke"
    assert cmd[cmd.index("-n") + 1] == "4"
    assert "--alluredir" in cmd
    assert cmd[-1] == "-q"


def test_build_command_without_allure():
    runner = run_tests.TestRunner(suite="unit", allure_report=False, verbose=True)

    cmd = runner._build_pytest_command()

    assert "testsuites/unit" in cmd
    assert "--alluredir" not in cmd
    assert "-n" not in cmd
    assert cmd[-1] == "-v"


def test_unknown_suite_is_rejected():
    with pytest.raises(ValueError, match="Unknown suite"):
        run_tests.TestRunner(suite="ui")


def test_parser_defaults():
    args = run_tests.build_parser().parse_args([])

    assert args.suite == "all"
    assert args.tags == []
    assert args.parallel == 1
    assert not args.no_allure


def test_main_runs_pytest_and_returns_exit_code(monkeypatch, tmp_path):
    calls = []

    class Completed:
        returncode = 3

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return Completed()

    monkeypatch.setattr(run_tests.subprocess, "run", fake_run)
    monkeypatch.setattr(run_tests, "init_logger", lambda level=None: None)
    monkeypatch.setattr(
        run_tests.TestRunner, "_prepare_environment", lambda self: None
    )

    exit_code = run_tests.main(["--suite", "unit", "--no-allure"])

    assert exit_code == 3
    assert calls[0][3] == "testsuites/unit"
