# topmark:header:start
#
#   project      : DiagMerge
#   file         : enum_mixins.py
#   file_relpath : src/diagmerge/core/enum_mixins.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""String enums keyed by the token users type.

`KeyedStrEnum` backs the enums that appear in configuration files and on the
command line, such as `diagmerge.config.policy.CollectionPolicy`. Each member
is declared as ``(key, label[, aliases])``::

    class CollectionPolicy(KeyedStrEnum):
        STRUCTURED_BASE = (
            "structured-base",
            "Merge compiler diagnostics into language-service diagnostics",
            ("keep-structured-as-base",),
        )

The key is the member's ``.value`` and its ``str()``; it is what gets written
back to TOML. Aliases keep older setting values working.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

_KS = TypeVar("_KS", bound="KeyedStrEnum")


def _fold(token: str) -> str:
    # "Keep all", "keep-all" and "KEEP_ALL" compare equal
    return "_".join(token.strip().lower().replace("-", " ").split())


class KeyedStrEnum(str, Enum):
    """``str`` enum whose value is a stable key, with a label and parse aliases.

    Attributes:
        label (str): Short description shown to users.
        aliases (tuple[str, ...]): Extra tokens accepted by `parse`.
    """

    label: str
    aliases: tuple[str, ...]

    def __new__(
        cls: type[_KS],
        key: str,
        label: str,
        aliases: Iterable[str] = (),
    ) -> _KS:
        member: _KS = str.__new__(cls, key)
        member._value_ = key
        member.label = label
        member.aliases = tuple(aliases)
        return member

    def __str__(self) -> str:
        return self.key

    @property
    def key(self) -> str:
        """Stable key, as stored in TOML."""
        return str(self.value)

    @classmethod
    def keys(cls) -> list[str]:
        """Keys of all members, in declaration order."""
        return [member.key for member in cls]

    def tokens(self) -> Iterator[str]:
        """Yield every spelling `parse` accepts for this member, folded."""
        yield _fold(self.key)
        yield _fold(self.name)
        for alias in self.aliases:
            yield _fold(alias)

    @classmethod
    def parse(cls: type[_KS], raw: str | None) -> _KS | None:
        """Return the member matching ``raw`` by key, name or alias, else ``None``.

        Case, surrounding whitespace and the choice between ``-``, ``_`` and
        spaces do not matter.
        """
        if raw is None:
            return None
        folded: str = _fold(raw)
        return next((member for member in cls if folded in member.tokens()), None)
