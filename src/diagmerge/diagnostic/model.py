# topmark:header:start
#
#   project      : DiagMerge
#   file         : model.py
#   file_relpath : src/diagmerge/diagnostic/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Core diagnostic types and equality helpers for DiagMerge.

This module defines the normalized representation of one diagnostic reported
by either producer, together with the positional types it is built from.

Sections:
    * Source: the producer a diagnostic came from (textual or structured).
    * Severity: severity levels with associated terminal colors.
    * Position / Range / Location: zero-based source coordinates.
    * RelatedInformation: a secondary note attached to a primary diagnostic.
    * DiagnosticCode: optional code, possibly carrying a documentation link.
    * DiagnosticRecord: immutable diagnostic payload.
    * same_diagnostic / same_reported / same_related: equality keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, cast

from yachalk import chalk

from diagmerge.constants import STRUCTURED_SOURCE_TAG, TEXTUAL_SOURCE_TAG

if TYPE_CHECKING:
    from collections.abc import Callable


class Source(Enum):
    """Producer that created a diagnostic.

    The value is the wire tag carried on published diagnostics.
    """

    TEXTUAL = TEXTUAL_SOURCE_TAG
    STRUCTURED = STRUCTURED_SOURCE_TAG

    @classmethod
    def from_tag(cls, tag: str | None) -> Source:
        """Return the producer for a source tag.

        Only the compiler tag identifies the textual producer; any other tag
        (including a missing one) belongs to the structured producer.
        """
        if tag == TEXTUAL_SOURCE_TAG:
            return cls.TEXTUAL
        return cls.STRUCTURED

    @property
    def tag(self) -> str:
        """Wire tag of this producer."""
        return str(self.value)


class Severity(Enum):
    """Severity levels of a diagnostic, ordered from most to least important."""

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"

    @classmethod
    def from_compiler(cls, raw: str) -> Severity:
        """Map a compiler severity token to a `Severity`.

        ``warning`` maps to WARNING, ``note`` maps to INFORMATION and anything
        else (``error`` included) maps to ERROR.
        """
        if raw == "warning":
            return cls.WARNING
        if raw == "note":
            return cls.INFORMATION
        return cls.ERROR

    @property
    def color(self) -> Callable[[str], str]:
        """Return the `yachalk` color function associated with this severity.

        Intended for human-readable output only; machine formats should not use colors.
        """
        return cast(
            "Callable[[str], str]",
            {
                Severity.ERROR: chalk.red_bright,
                Severity.WARNING: chalk.yellow,
                Severity.INFORMATION: chalk.blue,
                Severity.HINT: chalk.gray,
            }[self],
        )


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """Zero-based line/character position."""

    line: int
    character: int

    @classmethod
    def from_compiler(cls, line: int, column: int) -> Position:
        """Convert a one-based compiler ``line:column`` pair to a zero-based position."""
        return cls(line=max(line - 1, 0), character=max(column - 1, 0))


@dataclass(frozen=True, slots=True, order=True)
class Range:
    """Zero-based range; ``start == end`` denotes a zero-width position."""

    start: Position
    end: Position

    @classmethod
    def at(cls, position: Position) -> Range:
        """Return the zero-width range at ``position``."""
        return cls(start=position, end=position)


@dataclass(frozen=True, slots=True)
class Location:
    """A range inside a file."""

    file: str
    range: Range


@dataclass(frozen=True, slots=True)
class RelatedInformation:
    """Secondary note attached to a primary diagnostic."""

    location: Location
    message: str


@dataclass(frozen=True, slots=True)
class DiagnosticCode:
    """Diagnostic code value, optionally pointing at documentation.

    Attributes:
        value: Opaque code value (e.g. a group name or ``"More Information..."``).
        target: Optional link or path to documentation for this code.
        actionable: True when ``target`` is a well-formed documentation link that
            a presentation layer may offer to open.
    """

    value: str
    target: str | None = None
    actionable: bool = False


@dataclass(frozen=True, slots=True)
class DiagnosticRecord:
    """Immutable, normalized diagnostic reported by one producer.

    Attributes:
        file: Canonical file identity (normalized path).
        range: Zero-based range of the diagnostic.
        severity: Diagnostic severity.
        message: Diagnostic message.
        source: Producer that created this diagnostic.
        related_information: Ordered notes attached to this diagnostic.
        code: Optional diagnostic code.
    """

    file: str
    range: Range
    severity: Severity
    message: str
    source: Source
    related_information: tuple[RelatedInformation, ...] = field(default_factory=tuple)
    code: DiagnosticCode | None = None

    @property
    def location(self) -> Location:
        """Location of this diagnostic."""
        return Location(file=self.file, range=self.range)

    def with_source(self, source: Source) -> DiagnosticRecord:
        """Return a copy of this record tagged with ``source``."""
        if source is self.source:
            return self
        return replace(self, source=source)

    def with_file(self, file: str) -> DiagnosticRecord:
        """Return a copy of this record relocated to ``file``."""
        if file == self.file:
            return self
        return replace(self, file=file)


def same_diagnostic(a: DiagnosticRecord, b: DiagnosticRecord) -> bool:
    """Return True if ``a`` and ``b`` share the dedup key ``(range.start, message)``."""
    return a.range.start == b.range.start and a.message == b.message


def same_reported(a: DiagnosticRecord, b: DiagnosticRecord) -> bool:
    """Return True if ``a`` and ``b`` have the same full range and message."""
    return a.range == b.range and a.message == b.message


def same_related(a: RelatedInformation, b: RelatedInformation) -> bool:
    """Return True if two notes have the same message, file and range."""
    return a.message == b.message and a.location == b.location
