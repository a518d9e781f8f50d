# topmark:header:start
#
#   project      : DiagMerge
#   file         : policy.py
#   file_relpath : src/diagmerge/config/policy.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Collection policy for DiagMerge.

The collection policy selects how diagnostics from the textual producer
(compiler output) and the structured producer (language service) are combined
into the set published for a file.

TOML mapping:

    [diagnostics]
    collection = "structured-base"
"""

from __future__ import annotations

from diagmerge.core.enum_mixins import KeyedStrEnum


class CollectionPolicy(KeyedStrEnum):
    """Precedence policy used when publishing a file's diagnostics.

    Members:
        STRUCTURED_BASE: Start from the structured diagnostics and merge the
            textual ones in; the textual diagnostic wins a tie.
        TEXTUAL_BASE: Start from the textual diagnostics and merge the
            structured ones in; the structured diagnostic wins a tie.
        STRUCTURED_ONLY: Publish structured diagnostics only. Compiler output
            is not collected at all under this policy.
        TEXTUAL_ONLY: Publish textual diagnostics only.
        UNION_ALL: Publish both sets.
    """

    STRUCTURED_BASE = (
        "structured-base",
        "Merge compiler diagnostics into language-service diagnostics",
        ("keep-structured-as-base",),
    )
    TEXTUAL_BASE = (
        "textual-base",
        "Merge language-service diagnostics into compiler diagnostics",
        ("keep-textual-as-base",),
    )
    STRUCTURED_ONLY = (
        "structured-only",
        "Only language-service diagnostics",
    )
    TEXTUAL_ONLY = (
        "textual-only",
        "Only compiler diagnostics",
    )
    UNION_ALL = (
        "union-all",
        "Keep all diagnostics from both producers",
        ("keep-all",),
    )

    @property
    def collects_textual(self) -> bool:
        """Return True if compiler output should be parsed under this policy."""
        return self is not CollectionPolicy.STRUCTURED_ONLY


DEFAULT_COLLECTION_POLICY: CollectionPolicy = CollectionPolicy.STRUCTURED_BASE
