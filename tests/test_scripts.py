"""Tests for the check dev task."""

import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest

from tablestack import _scripts


def _done(returncode: int) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode)


@patch("tablestack._scripts.subprocess.run")
def test_run_steps_all_pass(mock_run: MagicMock) -> None:
    """Every step runs as a module of the current interpreter."""
    mock_run.return_value = _done(0)

    assert _scripts.run_steps(_scripts.CHECK_STEPS) == 0

    commands = [c[0][0] for c in mock_run.call_args_list]
    assert [cmd[:3] for cmd in commands] == [
        [sys.executable, "-m", "ruff"],
        [sys.executable, "-m", "ruff"],
        [sys.executable, "-m", "pyright"],
        [sys.executable, "-m", "pytest"],
    ]
    assert "--check" in commands[1]


@patch("tablestack._scripts.subprocess.run")
def test_run_steps_stops_at_first_failure(mock_run: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
    """A failing lint step skips the rest and returns its exit code."""
    mock_run.side_effect = [_done(3)]

    assert _scripts.run_steps(_scripts.CHECK_STEPS) == 3

    assert mock_run.call_count == 1
    assert "lint failed (exit code 3)" in capsys.readouterr().err


@patch("tablestack._scripts.run_steps", return_value=5)
def test_check_exits_with_step_code(mock_steps: MagicMock) -> None:
    with pytest.raises(SystemExit) as exc_info:
        _scripts.check()
    assert exc_info.value.code == 5
    mock_steps.assert_called_once_with(_scripts.CHECK_STEPS)
