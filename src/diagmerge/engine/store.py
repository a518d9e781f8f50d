# topmark:header:start
#
#   project      : DiagMerge
#   file         : store.py
#   file_relpath : src/diagmerge/engine/store.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Authoritative per-file diagnostic store.

The store maps a file identity to the ordered diagnostics currently reported
for it by both producers. Each ingestion replaces the previous generation of one
producer for one file.

Healing across producers:
    When the structured producer re-reports a file, the diagnostics it no longer
    reports are "healed". A textual diagnostic equal to a healed one is purged
    as well, so a compiler diagnostic from an older build does not keep a fixed
    problem visible.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from diagmerge.config.logging import get_logger
from diagmerge.constants import DEFAULT_DOCUMENTATION_HOSTS, DEFAULT_DOCUMENTATION_SUFFIXES
from diagmerge.diagnostic.model import Source, same_diagnostic
from diagmerge.diagnostic.normalize import normalize_record

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from diagmerge.config.logging import DiagmergeLogger
    from diagmerge.diagnostic.model import DiagnosticRecord

logger: DiagmergeLogger = get_logger(__name__)


class DiagnosticStore:
    """Mapping of file → diagnostics from all producers.

    Args:
        repair_links: Apply documentation-link repair on ingestion.
        documentation_hosts: Hosts recognized by the link repair.
        documentation_suffixes: Documentation suffixes recognized by the link repair.
    """

    def __init__(
        self,
        *,
        repair_links: bool = True,
        documentation_hosts: Iterable[str] = DEFAULT_DOCUMENTATION_HOSTS,
        documentation_suffixes: Iterable[str] = DEFAULT_DOCUMENTATION_SUFFIXES,
    ) -> None:
        self.repair_links: bool = repair_links
        self.documentation_hosts: tuple[str, ...] = tuple(documentation_hosts)
        self.documentation_suffixes: tuple[str, ...] = tuple(documentation_suffixes)
        self._entries: dict[str, list[DiagnosticRecord]] = {}

    def __contains__(self, file: object) -> bool:
        return file in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def files(self) -> list[str]:
        """Return the stored file identities in insertion order."""
        return list(self._entries)

    def get(self, file: str) -> tuple[DiagnosticRecord, ...]:
        """Return the stored diagnostics for ``file`` (empty if unknown)."""
        return tuple(self._entries.get(file, ()))

    def _normalize(self, record: DiagnosticRecord, file: str, source: Source) -> DiagnosticRecord:
        record = normalize_record(
            record,
            repair_links=self.repair_links,
            documentation_hosts=self.documentation_hosts,
            documentation_suffixes=self.documentation_suffixes,
        )
        return record.with_file(file).with_source(source)

    def ingest(
        self,
        file: str,
        source: Source,
        records: Iterable[DiagnosticRecord],
    ) -> list[DiagnosticRecord]:
        """Replace the diagnostics ``source`` reports for ``file``.

        Steps:
            1. Normalize the incoming records and tag them with ``source``.
            2. Remove the stored records of ``source`` for ``file``.
            3. For the structured producer: removed records still reported are
               kept out of the healed set, and textual records equal to a
               healed record are purged.
            4. Append the incoming records.

        Args:
            file: File identity the records belong to.
            source: Producer asserting the new generation.
            records: The new generation; empty clears the producer's records.

        Returns:
            The healed records: removed by this call and not reported again.
        """
        incoming: list[DiagnosticRecord] = [self._normalize(r, file, source) for r in records]
        current: list[DiagnosticRecord] = self._entries.get(file, [])

        kept: list[DiagnosticRecord] = [r for r in current if r.source is not source]
        removed: list[DiagnosticRecord] = [r for r in current if r.source is source]

        if source is Source.STRUCTURED:
            removed = [r for r in removed if not any(same_diagnostic(r, n) for n in incoming)]
            purged: int = len(kept)
            kept = [
                r
                for r in kept
                if not (
                    r.source is Source.TEXTUAL
                    and any(same_diagnostic(r, h) for h in removed)
                )
            ]
            purged -= len(kept)
            if purged:
                logger.debug("Purged %d healed compiler diagnostic(s) in %s", purged, file)

        self._entries[file] = kept + incoming
        logger.debug(
            "Ingested %d %s diagnostic(s) for %s (%d healed)",
            len(incoming),
            source.tag,
            file,
            len(removed),
        )
        return removed

    def remove(self, file: str) -> bool:
        """Drop the entry for ``file``; return True if it existed."""
        return self._entries.pop(file, None) is not None

    def remove_source(self, source: Source) -> list[str]:
        """Drop every record of ``source`` across all files.

        Returns:
            Every stored file identity, in insertion order; each may need to be
            republished.
        """
        for file, records in self._entries.items():
            remaining: list[DiagnosticRecord] = [r for r in records if r.source is not source]
            if len(remaining) != len(records):
                self._entries[file] = remaining
        return list(self._entries)

    def clear(self) -> None:
        """Drop all entries."""
        self._entries.clear()
