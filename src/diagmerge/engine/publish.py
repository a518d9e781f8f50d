# topmark:header:start
#
#   project      : DiagMerge
#   file         : publish.py
#   file_relpath : src/diagmerge/engine/publish.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Publication boundary.

A publisher receives the final diagnostic set of a file and replaces whatever
was previously published for it. `DiagnosticCollection` is the in-memory
publisher used by the CLI and the tests; presentation layers provide their own
implementation of `DiagnosticPublisher`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from diagmerge.diagnostic.model import DiagnosticRecord


class DiagnosticPublisher(Protocol):
    """Receiver of published per-file diagnostic sets."""

    def set(self, file: str, diagnostics: Sequence[DiagnosticRecord]) -> None:
        """Replace the published diagnostics of ``file``."""
        ...

    def delete(self, file: str) -> None:
        """Remove ``file`` from the published view."""
        ...

    def clear(self) -> None:
        """Remove every file from the published view."""
        ...


class DiagnosticCollection:
    """In-memory `DiagnosticPublisher`."""

    def __init__(self) -> None:
        self._published: dict[str, tuple[DiagnosticRecord, ...]] = {}

    def set(self, file: str, diagnostics: Sequence[DiagnosticRecord]) -> None:
        """Replace the published diagnostics of ``file``."""
        self._published[file] = tuple(diagnostics)

    def delete(self, file: str) -> None:
        """Remove ``file`` from the published view."""
        self._published.pop(file, None)

    def clear(self) -> None:
        """Remove every file from the published view."""
        self._published.clear()

    def get(self, file: str) -> tuple[DiagnosticRecord, ...]:
        """Return the published diagnostics of ``file`` (empty if none)."""
        return self._published.get(file, ())

    def files(self) -> list[str]:
        """Return the published files in publication order."""
        return list(self._published)

    def items(self) -> Iterator[tuple[str, tuple[DiagnosticRecord, ...]]]:
        """Iterate over ``(file, diagnostics)`` pairs."""
        return iter(list(self._published.items()))

    def __contains__(self, file: object) -> bool:
        return file in self._published

    def __len__(self) -> int:
        return len(self._published)
