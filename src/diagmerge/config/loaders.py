# topmark:header:start
#
#   project      : DiagMerge
#   file         : loaders.py
#   file_relpath : src/diagmerge/config/loaders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load and render TOML configuration sources.

This module provides I/O helpers for reading DiagMerge configuration from
on-disk TOML files (``diagmerge.toml`` / ``pyproject.toml``), the runtime
default table, and small typed getters used while building a config draft.

Parsing is done with `tomlkit` and returned as plain `dict` structures.
TOML has no `null` value, so `None` entries are stripped during rendering.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from diagmerge.config.keys import Toml
from diagmerge.config.logging import get_logger
from diagmerge.config.policy import DEFAULT_COLLECTION_POLICY
from diagmerge.constants import (
    DEFAULT_COMPLETION_PATTERNS,
    DEFAULT_DOCUMENTATION_HOSTS,
    DEFAULT_DOCUMENTATION_SUFFIXES,
    DEFAULT_SOURCE_EXTENSIONS,
    PYPROJECT_FILENAME,
    PYPROJECT_SECTION,
)

if TYPE_CHECKING:
    from pathlib import Path

    from diagmerge.config.logging import DiagmergeLogger

TomlTable = dict[str, Any]

logger: DiagmergeLogger = get_logger(__name__)


def load_defaults_dict() -> TomlTable:
    """Return DiagMerge's **runtime defaults** as a Python dict.

    This function intentionally performs **no I/O**. Sections/keys align with
    `diagmerge.config.keys.Toml`.

    Returns:
        A TOML-table-compatible dict containing the runtime defaults.
        The returned value is a new dict so callers can mutate it safely.
    """
    return {
        Toml.SECTION_DIAGNOSTICS: {
            Toml.KEY_COLLECTION: DEFAULT_COLLECTION_POLICY.key,
            Toml.KEY_REPAIR_LINKS: True,
            Toml.KEY_DEDUPE_DUPLICATES: True,
        },
        Toml.SECTION_PARSER: {
            Toml.KEY_COMPLETION_PATTERNS: list(DEFAULT_COMPLETION_PATTERNS),
        },
        Toml.SECTION_WORKSPACE: {
            Toml.KEY_SOURCE_EXTENSIONS: list(DEFAULT_SOURCE_EXTENSIONS),
        },
        Toml.SECTION_LINKS: {
            Toml.KEY_DOCUMENTATION_HOSTS: list(DEFAULT_DOCUMENTATION_HOSTS),
            Toml.KEY_DOCUMENTATION_SUFFIXES: list(DEFAULT_DOCUMENTATION_SUFFIXES),
        },
    }


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    For ``pyproject.toml`` only the ``[tool.diagmerge]`` table is returned.

    Args:
        path: Path to a TOML document (e.g., ``diagmerge.toml`` or ``pyproject.toml``).

    Returns:
        The parsed TOML content.

    Notes:
        - Errors are logged and an empty dict is returned on failure.
        - Encoding is assumed to be UTF-8.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
        data_any: Any = doc.unwrap()
    except OSError as e:
        logger.error("Error loading TOML from %s: %s", path, e)
        return {}
    except TomlkitParseError as e:
        logger.error("Error decoding TOML from %s: %s", path, e)
        return {}

    data: TomlTable = cast("TomlTable", data_any) if isinstance(data_any, dict) else {}
    if path.name == PYPROJECT_FILENAME:
        for part in PYPROJECT_SECTION.split("."):
            data = get_table_value(data, part)
    return data


def get_table_value(table: Mapping[str, Any], key: str) -> TomlTable:
    """Return the sub-table ``table[key]`` or an empty dict if missing or not a table."""
    value: Any = table.get(key)
    if isinstance(value, Mapping):
        return dict(cast("Mapping[str, Any]", value))
    if value is not None:
        logger.warning("Expected a table for '%s', got %s; ignoring", key, type(value).__name__)
    return {}


def get_bool_value_or_none(table: Mapping[str, Any], key: str) -> bool | None:
    """Return ``table[key]`` if it is a bool, otherwise ``None`` (warning when mistyped)."""
    value: Any = table.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    logger.warning("Expected a boolean for '%s', got %r; ignoring", key, value)
    return None


def get_string_value_or_none(table: Mapping[str, Any], key: str) -> str | None:
    """Return ``table[key]`` if it is a string, otherwise ``None`` (warning when mistyped)."""
    value: Any = table.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    logger.warning("Expected a string for '%s', got %r; ignoring", key, value)
    return None


def get_string_list_or_none(table: Mapping[str, Any], key: str) -> list[str] | None:
    """Return ``table[key]`` as a list of strings, or ``None`` if absent.

    Non-string items are dropped with a warning; a non-list value is ignored.
    """
    value: Any = table.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        logger.warning("Expected a list for '%s', got %r; ignoring", key, value)
        return None
    out: list[str] = []
    for item in cast("list[Any]", value):
        if isinstance(item, str):
            out.append(item)
        else:
            logger.warning("Ignoring non-string entry %r in '%s'", item, key)
    return out


def _strip_none_for_toml(value: object) -> object:
    """Remove TOML-incompatible `None` from mappings/lists."""
    if isinstance(value, Mapping):
        out: dict[str, object] = {}
        m: Mapping[object, object] = cast("Mapping[object, object]", value)
        for k_any, v_any in m.items():
            if v_any is None:
                logger.debug("Ignoring `None` entry in Mapping for key %s", k_any)
                continue
            out[str(k_any)] = _strip_none_for_toml(v_any)
        return out

    if isinstance(value, (list, tuple)):
        seq: list[object] = list(cast("list[object]", value))
        return [_strip_none_for_toml(v) for v in seq if v is not None]

    return value


def to_toml(toml_dict: TomlTable) -> str:
    """Serialize a TOML mapping to a string.

    Args:
        toml_dict: The table to render.

    Returns:
        The TOML document text.
    """
    cleaned: Any = _strip_none_for_toml(toml_dict)
    return cast("str", cast("Any", tomlkit).dumps(cast("Mapping[str, Any]", cleaned)))
