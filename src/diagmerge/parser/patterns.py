# topmark:header:start
#
#   project      : DiagMerge
#   file         : patterns.py
#   file_relpath : src/diagmerge/parser/patterns.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Line grammar of compiler output.

A diagnostic line looks like::

    /path/to/File.swift:10:5: error: cannot find 'x' in scope

Context lines emitted around a diagnostic may be decorated with backticks,
dashes and indentation before the path; the decoration is ignored. The column
is optional.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

import click

from diagmerge.config.logging import get_logger
from diagmerge.constants import DEFAULT_COMPLETION_PATTERNS
from diagmerge.diagnostic.model import Position, Range, Severity

if TYPE_CHECKING:
    from collections.abc import Iterable

    from diagmerge.config.logging import DiagmergeLogger

logger: DiagmergeLogger = get_logger(__name__)

DIAGNOSTIC_LINE_RE: re.Pattern[str] = re.compile(
    r"^(?:[`\-\s]*)(.*?):(\d+)(?::(\d+))?:\s+(warning|error|note):\s+(.*)$"
)

LINE_BREAK_RE: re.Pattern[str] = re.compile(r"\r\n|\n|\r")

# Operating system commands (hyperlinks, window titles), terminated by BEL or ST
OSC_SEQUENCE_RE: re.Pattern[str] = re.compile(r"\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)")


@dataclass(frozen=True, slots=True)
class DiagnosticLine:
    """One matched diagnostic line, before it is turned into a record.

    Attributes:
        file: Normalized path of the reported file.
        range: Zero-width, zero-based range of the reported position.
        severity: Parsed severity.
        message: Raw message text (not normalized).
    """

    file: str
    range: Range
    severity: Severity
    message: str

    @property
    def is_note(self) -> bool:
        """True if this line is related information rather than a primary diagnostic."""
        return self.severity is Severity.INFORMATION


def match_diagnostic_line(line: str) -> DiagnosticLine | None:
    """Match ``line`` against the diagnostic grammar.

    Args:
        line: One complete line of compiler output (without line terminator).

    Returns:
        The matched `DiagnosticLine`, or ``None`` when the line carries no diagnostic.
    """
    match: re.Match[str] | None = DIAGNOSTIC_LINE_RE.match(line)
    if match is None:
        return None
    path, line_no, column, severity, message = match.groups()
    if not path:
        return None
    # A missing column points at the start of the line
    position: Position = Position.from_compiler(int(line_no), int(column) if column else 1)
    return DiagnosticLine(
        file=os.path.normpath(path),
        range=Range.at(position),
        severity=Severity.from_compiler(severity),
        message=message,
    )


def compile_completion_patterns(
    patterns: Iterable[str] = DEFAULT_COMPLETION_PATTERNS,
) -> tuple[re.Pattern[str], ...]:
    """Compile build-completion marker regexes.

    Invalid regexes are logged and skipped.
    """
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            logger.warning("Ignoring invalid completion pattern %r: %s", pattern, exc)
    return tuple(compiled)


def is_build_complete(line: str, patterns: Iterable[re.Pattern[str]]) -> bool:
    """Return True if ``line`` is a build-completion marker."""
    return any(p.search(line) for p in patterns)


def strip_ansi(line: str) -> str:
    """Remove terminal escape sequences from one line of output.

    Stripping repeats until nothing changes: removing one sequence can join
    its neighbors into another.
    """
    while True:
        stripped: str = click.unstyle(OSC_SEQUENCE_RE.sub("", line))
        if stripped == line:
            return line
        line = stripped


def split_lines(text: str) -> list[str]:
    """Split ``text`` on ``\\r\\n``, ``\\n`` or ``\\r``.

    The last element is the unterminated remainder (empty when ``text`` ends
    with a line break).
    """
    return LINE_BREAK_RE.split(text)
