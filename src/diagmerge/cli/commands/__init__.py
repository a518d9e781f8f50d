# topmark:header:start
#
#   project      : DiagMerge
#   file         : __init__.py
#   file_relpath : src/diagmerge/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagMerge CLI subcommands (one module per command)."""

from __future__ import annotations
