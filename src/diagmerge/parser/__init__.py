# topmark:header:start
#
#   project      : DiagMerge
#   file         : __init__.py
#   file_relpath : src/diagmerge/parser/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Compiler output parsing.

- **patterns**: diagnostic line grammar and build-completion markers.
- **stream**: `StreamParser`, the resumable per-run parser.
"""

from __future__ import annotations

from diagmerge.parser.stream import RunResult, StreamParser, parse_lines, parse_text

__all__ = [
    "RunResult",
    "StreamParser",
    "parse_lines",
    "parse_text",
]
