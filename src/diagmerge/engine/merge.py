# topmark:header:start
#
#   project      : DiagMerge
#   file         : merge.py
#   file_relpath : src/diagmerge/engine/merge.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Precedence merge of textual and structured diagnostics.

Two diagnostics are the same problem when they start at the same position and
carry the same (normalized) message. When both producers report the same
problem, the collection policy decides which report is published.

The result never contains two diagnostics with the same key and does not depend
on the order of the input records: among same-key reports of one producer, the
canonical one (see `_canonical_key`) is kept. Published sets are sorted by
range, then message.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from diagmerge.config.policy import CollectionPolicy
from diagmerge.diagnostic.model import Severity, Source, same_diagnostic

if TYPE_CHECKING:
    from collections.abc import Iterable

    from diagmerge.diagnostic.model import DiagnosticRecord

_SEVERITY_RANK: dict[Severity, int] = {severity: idx for idx, severity in enumerate(Severity)}


def _canonical_key(record: DiagnosticRecord) -> tuple[Any, ...]:
    code: tuple[str, str, bool] = (
        ("", "", False)
        if record.code is None
        else (record.code.value, record.code.target or "", record.code.actionable)
    )
    related: tuple[tuple[str, Any, str], ...] = tuple(
        (info.location.file, info.location.range, info.message)
        for info in record.related_information
    )
    return (
        _SEVERITY_RANK[record.severity],
        record.range,
        record.file,
        code,
        related,
        record.source.tag,
    )


def _sort_key(record: DiagnosticRecord) -> tuple[Any, ...]:
    return (record.range.start, record.message, _canonical_key(record))


def dedupe(records: Iterable[DiagnosticRecord]) -> list[DiagnosticRecord]:
    """Keep one canonical record per ``(range.start, message)`` key."""
    best: dict[tuple[Any, str], DiagnosticRecord] = {}
    for record in records:
        key: tuple[Any, str] = (record.range.start, record.message)
        existing: DiagnosticRecord | None = best.get(key)
        if existing is None or _canonical_key(record) < _canonical_key(existing):
            best[key] = record
    return sorted(best.values(), key=_sort_key)


def merge_with_precedence(
    base: Iterable[DiagnosticRecord],
    incoming: Iterable[DiagnosticRecord],
) -> list[DiagnosticRecord]:
    """Merge ``incoming`` into ``base``; ``incoming`` wins ties.

    For each incoming diagnostic, an equal diagnostic already in the merged set
    is replaced. Base diagnostics never matched survive unchanged.

    Args:
        base: Diagnostics of the base producer.
        incoming: Diagnostics of the producer with precedence.

    Returns:
        The merged, deduplicated and sorted diagnostics.
    """
    merged: list[DiagnosticRecord] = dedupe(base)
    for record in dedupe(incoming):
        merged = [m for m in merged if not same_diagnostic(m, record)]
        merged.append(record)
    return sorted(merged, key=_sort_key)


def merge_diagnostics(
    records: Iterable[DiagnosticRecord],
    policy: CollectionPolicy,
) -> list[DiagnosticRecord]:
    """Compute the published diagnostics of one file.

    Args:
        records: All stored diagnostics of the file (both producers).
        policy: Collection policy.

    Returns:
        The diagnostics to publish.
    """
    textual: list[DiagnosticRecord] = []
    structured: list[DiagnosticRecord] = []
    for record in records:
        (textual if record.source is Source.TEXTUAL else structured).append(record)

    if policy is CollectionPolicy.STRUCTURED_BASE:
        return merge_with_precedence(structured, textual)
    if policy is CollectionPolicy.TEXTUAL_BASE:
        return merge_with_precedence(textual, structured)
    if policy is CollectionPolicy.STRUCTURED_ONLY:
        return dedupe(structured)
    if policy is CollectionPolicy.TEXTUAL_ONLY:
        return dedupe(textual)
    # UNION_ALL: both sets; a problem reported by both producers is published once
    return dedupe([*structured, *textual])
