# topmark:header:start
#
#   project      : DiagMerge
#   file         : keys.py
#   file_relpath : src/diagmerge/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML section and key names for DiagMerge configuration.

This module defines the authoritative string constants used when reading and
writing DiagMerge configuration from TOML sources (``diagmerge.toml`` and
``[tool.diagmerge]`` in ``pyproject.toml``).

Design notes:
    - Keys defined here represent *external configuration API*.
    - Renaming or removing keys is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML section names and keys used by DiagMerge configuration.

    The ordering of constants mirrors the rendered default configuration
    (``diagmerge dump-config``).
    """

    # [diagnostics]
    SECTION_DIAGNOSTICS: Final[str] = "diagnostics"

    KEY_COLLECTION: Final[str] = "collection"
    KEY_REPAIR_LINKS: Final[str] = "repair_documentation_links"
    KEY_DEDUPE_DUPLICATES: Final[str] = "dedupe_compiler_duplicates"

    # [parser]
    SECTION_PARSER: Final[str] = "parser"

    KEY_COMPLETION_PATTERNS: Final[str] = "completion_patterns"

    # [workspace]
    SECTION_WORKSPACE: Final[str] = "workspace"

    KEY_SOURCE_EXTENSIONS: Final[str] = "source_extensions"

    # [links]
    SECTION_LINKS: Final[str] = "links"

    KEY_DOCUMENTATION_HOSTS: Final[str] = "documentation_hosts"
    KEY_DOCUMENTATION_SUFFIXES: Final[str] = "documentation_suffixes"
