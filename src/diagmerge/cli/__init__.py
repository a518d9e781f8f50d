# topmark:header:start
#
#   project      : DiagMerge
#   file         : __init__.py
#   file_relpath : src/diagmerge/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click-based command-line interface for DiagMerge."""

from __future__ import annotations
