# topmark:header:start
#
#   project      : DiagMerge
#   file         : __init__.py
#   file_relpath : src/diagmerge/engine/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diagnostic reconciliation engine.

- **store**: authoritative per-file diagnostics of both producers.
- **merge**: precedence merge under a `CollectionPolicy`.
- **publish**: publication boundary and the in-memory collection.
- **manager**: event-driven orchestration.
"""

from __future__ import annotations

from diagmerge.engine.manager import DiagnosticsManager
from diagmerge.engine.merge import merge_diagnostics, merge_with_precedence
from diagmerge.engine.publish import DiagnosticCollection, DiagnosticPublisher
from diagmerge.engine.store import DiagnosticStore

__all__ = [
    "DiagnosticCollection",
    "DiagnosticPublisher",
    "DiagnosticStore",
    "DiagnosticsManager",
    "merge_diagnostics",
    "merge_with_precedence",
]
