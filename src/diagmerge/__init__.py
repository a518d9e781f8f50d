# topmark:header:start
#
#   project      : DiagMerge
#   file         : __init__.py
#   file_relpath : src/diagmerge/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagMerge package.

DiagMerge turns a chunked compiler output stream into structured diagnostics
and reconciles them with diagnostics reported by a structured producer (for
example a language server) into one deduplicated set per file.
"""

from __future__ import annotations
