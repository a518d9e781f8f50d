# topmark:header:start
#
#   project      : DiagMerge
#   file         : __init__.py
#   file_relpath : src/diagmerge/core/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Core, UI-agnostic helpers shared across DiagMerge."""

from __future__ import annotations
