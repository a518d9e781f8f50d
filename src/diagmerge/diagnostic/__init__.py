# topmark:header:start
#
#   project      : DiagMerge
#   file         : __init__.py
#   file_relpath : src/diagmerge/diagnostic/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diagnostic records, normalization and JSON payloads.

Layers:

- **model**: immutable diagnostic types and equality keys.
- **normalize**: message normalization and documentation-link repair.
- **machine**: conversion to and from JSON-friendly dicts.
"""

from __future__ import annotations

from diagmerge.diagnostic.model import (
    DiagnosticCode,
    DiagnosticRecord,
    Location,
    Position,
    Range,
    RelatedInformation,
    Severity,
    Source,
    same_diagnostic,
    same_related,
    same_reported,
)
from diagmerge.diagnostic.normalize import normalize_message, normalize_record

__all__ = [
    "DiagnosticCode",
    "DiagnosticRecord",
    "Location",
    "Position",
    "Range",
    "RelatedInformation",
    "Severity",
    "Source",
    "normalize_message",
    "normalize_record",
    "same_diagnostic",
    "same_related",
    "same_reported",
]
