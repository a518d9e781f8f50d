# topmark:header:start
#
#   project      : DiagMerge
#   file         : errors.py
#   file_relpath : src/diagmerge/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the DiagMerge CLI.

Usage:
    Raise these exceptions in CLI commands to signal errors with standardized
    messages and exit codes.

Styling:
    Exceptions prefer the project console if available (see `show()`); if no console
    is present in the Click context, they fall back to Click's default styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from diagmerge.cli.exit_codes import ExitCode


class DiagmergeError(click.ClickException):
    """Base class for all DiagMerge CLI errors."""

    exit_code = ExitCode.UNEXPECTED_ERROR

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text (colorized in `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available.

        Falls back to Click's default error display when no console is present.
        """
        ctx = click.get_current_context(silent=True)
        if ctx is not None and isinstance(getattr(ctx, "obj", None), dict):
            console = ctx.obj.get("console")
            if console is not None:
                console.error(console.styled(f"Error: {self.format_message()}", fg="bright_red"))
                return
        super().show(file)


class DiagmergeUsageError(DiagmergeError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class DiagmergeDataError(DiagmergeError):
    """Error for malformed input data (e.g. structured diagnostics JSON)."""

    exit_code = ExitCode.DATA_ERROR


class DiagmergeFileNotFoundError(DiagmergeError):
    """Error when an input path does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class DiagmergeIOError(DiagmergeError):
    """Error for I/O errors reading input files."""

    exit_code = ExitCode.IO_ERROR
