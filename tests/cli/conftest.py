# topmark:header:start
#
#   project      : DiagMerge
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI test helpers for running DiagMerge in a controlled working directory.

`run_cli_in()` changes the process working directory to the given `tmp_path`
before invoking the Click CLI, so that config discovery (``diagmerge.toml`` /
``pyproject.toml`` in the CWD) only sees files created by the test.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import IO, TYPE_CHECKING, Any

from click.testing import CliRunner, Result

from diagmerge.cli.exit_codes import ExitCode
from diagmerge.cli.main import cli

if TYPE_CHECKING:
    from pathlib import Path


def run_cli_in(
    tmp_path: Path,
    argv: str | Sequence[str] | None,
    *,
    input_text: str | bytes | IO[Any] | None = None,
) -> Result:
    """Invoke the CLI with `tmp_path` as the working directory.

    Args:
        tmp_path (Path): Pytest-provided temporary directory used as the CWD for the
            command invocation.
        argv (str | Sequence[str] | None): CLI argument vector, e.g. ``["parse", "build.log"]``.
        input_text (str | bytes | IO[Any] | None): Optional standard input (the
            compiler log when ``LOG`` is ``-``).

    Returns:
        Result: The `click.testing.Result` produced by
            `click.testing.CliRunner.invoke`.

    Example:
        ```python
        res = run_cli_in(tmp_path, ["parse", "build.log"])
        assert res.exit_code == ExitCode.SUCCESS
        ```
    """
    runner = CliRunner()
    cwd: str = os.getcwd()
    try:
        os.chdir(tmp_path)
        return runner.invoke(cli, argv, input=input_text)
    finally:
        os.chdir(cwd)


def run_cli(
    argv: str | Sequence[str] | None,
    *,
    input_text: str | bytes | IO[Any] | None = None,
) -> Result:
    """Invoke the CLI without changing the working directory.

    Use this helper when the test does **not** depend on config files in the
    working directory (e.g., ``--help`` / ``version``). Otherwise prefer
    `run_cli_in`.

    Args:
        argv (str | Sequence[str] | None): CLI argument vector, e.g. ``["--help"]``.
        input_text (str | bytes | IO[Any] | None): Optional standard input.

    Returns:
        Result: The `click.testing.Result` produced by
            `click.testing.CliRunner.invoke`.
    """
    runner = CliRunner()
    return runner.invoke(cli, argv, input=input_text)


def assert_SUCCESS(result: Result) -> None:
    """Assert that the command exited successfully (code 0).

    Args:
        result (Result): The Result object returned by `run_cli` or `run_cli_in`.
    """
    assert result.exit_code == ExitCode.SUCCESS, result.output


def assert_DIAGNOSTICS_ERROR(result: Result) -> None:
    """Assert that the command exited with DIAGNOSTICS_ERROR (code 1).

    Args:
        result (Result): The Result object returned by `run_cli` or `run_cli_in`.
    """
    # Published errors are a *normal* outcome; do not assert on exception.
    assert result.exit_code == ExitCode.DIAGNOSTICS_ERROR, result.output


def assert_USAGE_ERROR(result: Result) -> None:
    """Assert that the command exited with Click's usage error code.

    Args:
        result (Result): The Result object returned by `run_cli` or `run_cli_in`.
    """
    # Click reports invalid options/arguments with exit code 2
    assert result.exit_code == 2, result.output
