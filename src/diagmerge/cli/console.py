# topmark:header:start
#
#   project      : DiagMerge
#   file         : console.py
#   file_relpath : src/diagmerge/cli/console.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Console used by the CLI commands for user-facing output.

Published diagnostics and summaries go to stdout; warnings about the
configuration and error messages go to stderr. Internal tracing uses
`diagmerge.config.logging` instead.
"""

from __future__ import annotations

import sys
from typing import Any, Protocol, TextIO

import click


class ConsoleLike(Protocol):
    """What the CLI commands need from a console."""

    def print(self, text: str = "", *, nl: bool = True) -> None: ...

    def warn(self, text: str, *, nl: bool = True) -> None: ...

    def error(self, text: str, *, nl: bool = True) -> None: ...

    def styled(self, text: str, **style_kwargs: Any) -> str: ...


class ClickConsole:
    """`ConsoleLike` writing through `click.echo`.

    Args:
        enable_color (bool): Emit ANSI styling. When False, `styled` returns
            text unchanged and click strips any styling already present.
        out (TextIO | None): Stream for program output (default `sys.stdout`).
        err (TextIO | None): Stream for warnings and errors (default `sys.stderr`).
    """

    def __init__(
        self,
        *,
        enable_color: bool = True,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.enable_color: bool = enable_color
        self.out: TextIO = out or sys.stdout
        self.err: TextIO = err or sys.stderr

    def _echo(self, text: str, stream: TextIO, nl: bool, fg: str | None = None) -> None:
        if fg is not None:
            text = self.styled(text, fg=fg)
        click.echo(text, nl=nl, file=stream, color=self.enable_color)

    def print(self, text: str = "", *, nl: bool = True) -> None:
        """Write program output (diagnostics, config dumps) to stdout."""
        self._echo(text, self.out, nl)

    def warn(self, text: str, *, nl: bool = True) -> None:
        """Write a yellow warning to stderr."""
        self._echo(text, self.err, nl, fg="yellow")

    def error(self, text: str, *, nl: bool = True) -> None:
        """Write a red error to stderr."""
        self._echo(text, self.err, nl, fg="bright_red")

    def styled(self, text: str, **style_kwargs: Any) -> str:
        """Return ``text`` wrapped in `click.style` when color is enabled."""
        if not self.enable_color:
            return text
        return click.style(text, **style_kwargs)
