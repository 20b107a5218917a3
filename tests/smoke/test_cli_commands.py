"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work end to end
against a temporary question file and state database.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture
def quiz_env(tmp_path, example_records):
    """Environment pointing the CLI at a temporary question file and database."""
    questions = tmp_path / "questions.json"
    questions.write_text(json.dumps(example_records), encoding="utf-8")

    env = dict(os.environ)
    env.update({
        "QUIZ_QUESTION_SOURCE": str(questions),
        "QUIZ_STATE_DB_PATH": str(tmp_path / "state.db"),
        "QUIZ_LOG_LEVEL": "WARNING",
        "PYTHONIOENCODING": "utf-8",
        "COLUMNS": "120",
    })
    return env


def run_cli_command(
    args: list[str],
    env: dict,
    stdin: str = "",
    timeout: int = 30,
) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        args: Arguments after 'python -m quizrunner'
        env: Process environment
        stdin: Text fed to interactive prompts
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    result = subprocess.run(
        [sys.executable, "-m", "quizrunner", *args],
        cwd=PROJECT_ROOT,
        env=env,
        input=stdin,
        capture_output=True,
        text=True,
        encoding="utf-8",
        timeout=timeout,
    )

    return result.returncode, result.stdout, result.stderr


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self, quiz_env):
        code, stdout, stderr = run_cli_command(["--help"], quiz_env)

        assert code == 0, f"Help failed: {stderr}"
        assert "play" in stdout
        assert "reset" in stdout

    @pytest.mark.parametrize("command", ["play", "categories", "stats", "reset", "validate"])
    def test_command_help(self, quiz_env, command):
        code, stdout, stderr = run_cli_command([command, "--help"], quiz_env)

        assert code == 0, f"{command} help failed: {stderr}"


class TestCLIValidate:

    def test_valid_file(self, quiz_env):
        code, stdout, stderr = run_cli_command(["validate"], quiz_env)

        assert code == 0, stderr
        assert "2 questions in 2 categories" in stdout

    def test_broken_file_exits_nonzero(self, quiz_env, tmp_path):
        broken = tmp_path / "broken.json"
        broken.write_text('{"not": "a list"}', encoding="utf-8")

        code, stdout, stderr = run_cli_command(["validate", "--source", str(broken)], quiz_env)

        assert code == 1
        assert "Failed to load" in stdout


class TestCLISession:

    def test_play_quits(self, quiz_env):
        code, stdout, stderr = run_cli_command(["play"], quiz_env, stdin="q\n")

        assert code == 0, stderr
        assert "Score: 0 / 2" in stdout

    def test_play_missing_source_is_unavailable(self, quiz_env, tmp_path):
        code, stdout, stderr = run_cli_command(
            ["play", "--source", str(tmp_path / "missing.json")], quiz_env, stdin="q\n"
        )

        assert code == 1
        assert "Unavailable" in stdout

    def test_answer_is_remembered(self, quiz_env):
        code, _, stderr = run_cli_command(
            ["categories", "--exclude", "Monitoring"], quiz_env
        )
        assert code == 0, stderr

        code, stdout, stderr = run_cli_command(["play"], quiz_env, stdin="b\nq\n")
        assert code == 0, stderr
        assert "Correct!" in stdout
        assert "All correct" in stdout

        code, stdout, stderr = run_cli_command(["stats"], quiz_env)
        assert code == 0, stderr
        assert "Current selection: 1 / 1 correct" in stdout

    def test_end_of_input_ends_session(self, quiz_env):
        code, stdout, stderr = run_cli_command(["play"], quiz_env, stdin="n\n")

        assert code == 0, stderr
        assert "Session ended" in stdout


class TestCLICategories:

    def test_lists_categories(self, quiz_env):
        code, stdout, stderr = run_cli_command(["categories"], quiz_env)

        assert code == 0, stderr
        assert "Build" in stdout
        assert "Monitoring" in stdout
        assert "2 questions in 2 selected categories" in stdout

    def test_exclude_persists(self, quiz_env):
        run_cli_command(["categories", "--exclude", "Build"], quiz_env)

        code, stdout, stderr = run_cli_command(["categories"], quiz_env)

        assert code == 0, stderr
        assert "1 questions in 1 selected categories" in stdout

    def test_select_all(self, quiz_env):
        run_cli_command(["categories", "--exclude", "Build", "--exclude", "Monitoring"], quiz_env)

        code, stdout, stderr = run_cli_command(["categories", "--all"], quiz_env)

        assert code == 0, stderr
        assert "2 questions in 2 selected categories" in stdout


class TestCLIReset:

    def test_reset_with_yes(self, quiz_env):
        run_cli_command(["categories", "--exclude", "Monitoring"], quiz_env)
        run_cli_command(["play"], quiz_env, stdin="B\nq\n")

        code, stdout, stderr = run_cli_command(["reset", "--yes"], quiz_env)

        assert code == 0, stderr
        assert "1 answers removed" in stdout

        code, stdout, _ = run_cli_command(["stats"], quiz_env)
        assert "Current selection: 0 / 1 correct" in stdout

    def test_reset_declined(self, quiz_env):
        code, stdout, stderr = run_cli_command(["reset"], quiz_env, stdin="n\n")

        assert code == 0, stderr
        assert "Reset cancelled" in stdout
