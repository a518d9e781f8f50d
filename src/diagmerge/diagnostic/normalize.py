# topmark:header:start
#
#   project      : DiagMerge
#   file         : normalize.py
#   file_relpath : src/diagmerge/diagnostic/normalize.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Message normalization and documentation-link repair.

Both producers report the same problems with slightly different wording: the
compiler appends bracketed flag annotations (``[-Wdeprecated]``,
``[#ExistentialAny]``) and the language service adds ``(fix available)``
markers; either may or may not capitalize the first letter. Messages are
normalized so the two producers can be compared by message text.

Normalization is idempotent: `normalize_message` applies its steps until the
text no longer changes.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import TYPE_CHECKING

from diagmerge.config.logging import get_logger
from diagmerge.constants import (
    DEFAULT_DOCUMENTATION_HOSTS,
    DEFAULT_DOCUMENTATION_SUFFIXES,
    MORE_INFORMATION_LABEL,
)
from diagmerge.diagnostic.model import DiagnosticCode, same_related

if TYPE_CHECKING:
    from collections.abc import Iterable

    from diagmerge.config.logging import DiagmergeLogger
    from diagmerge.diagnostic.model import DiagnosticRecord, RelatedInformation

logger: DiagmergeLogger = get_logger(__name__)

# Bracketed compiler flag / diagnostic group annotations, e.g. "[-Wunused]" or "[#Foo]".
NOISE_ANNOTATION_RE: re.Pattern[str] = re.compile(r"\[(-W|#).*?\]")
FIX_AVAILABLE_MARKER: str = "(fix available)"


def capitalize(text: str) -> str:
    """Upper-case the first character of ``text`` and leave the rest untouched."""
    return text[:1].upper() + text[1:]


def clean_message(text: str) -> str:
    """Strip producer noise tokens and surrounding whitespace from ``text``."""
    text = NOISE_ANNOTATION_RE.sub("", text)
    text = text.replace(FIX_AVAILABLE_MARKER, "")
    return text.strip()


def normalize_message(text: str) -> str:
    """Return the normalized form of a diagnostic message.

    Cleaning can expose a new first character (or a new noise token), so the
    steps are repeated until a fixed point is reached.

    Args:
        text: Raw message text.

    Returns:
        The cleaned, capitalized message.
    """
    current: str = text
    while True:
        updated: str = capitalize(clean_message(current))
        if updated == current:
            return updated
        current = updated


def repair_documentation_target(
    target: str,
    *,
    hosts: Iterable[str] = DEFAULT_DOCUMENTATION_HOSTS,
    suffixes: Iterable[str] = DEFAULT_DOCUMENTATION_SUFFIXES,
) -> str | None:
    """Return a usable documentation link for ``target`` or ``None``.

    Some language-service builds report documentation URLs resolved as local
    paths, e.g. ``/pkg/https:/docs.swift.org/compiler/diagnostics/nominal-types``.
    Such a target is turned back into
    ``https://docs.swift.org/compiler/diagnostics/nominal-types/``.
    A target ending in a documentation suffix (``.md``) is returned unchanged.

    Args:
        target: The code target as reported by the producer.
        hosts: Documentation hosts whose URLs may be embedded in a path.
        suffixes: File suffixes that identify documentation files.

    Returns:
        The repaired or accepted link, or ``None`` when ``target`` is not a
        documentation link.
    """
    for host in hosts:
        for sep in ("/", "\\"):
            needle: str = f"https:{sep}{host}{sep}"
            if needle in target:
                rest: str = target.split(needle)[-1]
                return f"https://{host}/{rest}/".replace("\\", "/")
    if any(target.endswith(suffix) for suffix in suffixes):
        return target
    return None


def repair_code(
    code: DiagnosticCode | None,
    *,
    hosts: Iterable[str] = DEFAULT_DOCUMENTATION_HOSTS,
    suffixes: Iterable[str] = DEFAULT_DOCUMENTATION_SUFFIXES,
) -> DiagnosticCode | None:
    """Return ``code`` with its documentation link repaired when applicable."""
    if code is None or code.target is None or code.actionable:
        return code
    link: str | None = repair_documentation_target(code.target, hosts=hosts, suffixes=suffixes)
    if link is None:
        return code
    logger.trace("Repaired documentation link %r -> %r", code.target, link)
    return DiagnosticCode(value=MORE_INFORMATION_LABEL, target=link, actionable=True)


def unique_related(
    related: tuple[RelatedInformation, ...],
) -> tuple[RelatedInformation, ...]:
    """Drop repeated related entries (same message, file and range), keeping the first."""
    kept: list[RelatedInformation] = []
    for info in related:
        if not any(same_related(info, k) for k in kept):
            kept.append(info)
    if len(kept) == len(related):
        return related
    logger.trace("Dropped %d repeated related note(s)", len(related) - len(kept))
    return tuple(kept)


def normalize_record(
    record: DiagnosticRecord,
    *,
    repair_links: bool = True,
    documentation_hosts: Iterable[str] = DEFAULT_DOCUMENTATION_HOSTS,
    documentation_suffixes: Iterable[str] = DEFAULT_DOCUMENTATION_SUFFIXES,
) -> DiagnosticRecord:
    """Normalize the message of ``record`` and optionally repair its code link.

    Repeated related-information entries are dropped.

    Args:
        record: Diagnostic to normalize.
        repair_links: Apply the documentation-link repair to ``record.code``.
        documentation_hosts: Hosts recognized by the link repair.
        documentation_suffixes: Documentation file suffixes recognized by the link repair.

    Returns:
        The normalized record (``record`` itself when nothing changed).
    """
    message: str = normalize_message(record.message)
    code: DiagnosticCode | None = record.code
    if repair_links:
        code = repair_code(code, hosts=documentation_hosts, suffixes=documentation_suffixes)
    related: tuple[RelatedInformation, ...] = unique_related(record.related_information)
    if message == record.message and code is record.code and related is record.related_information:
        return record
    return replace(record, message=message, code=code, related_information=related)
