# topmark:header:start
#
#   project      : DiagMerge
#   file         : __init__.py
#   file_relpath : src/diagmerge/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration handling for DiagMerge.

This package defines the `Config` / `MutableConfig` pair, the collection policy
enum, TOML loading helpers (backed by `tomlkit`) and the DiagMerge logger.

Configuration is read from ``diagmerge.toml`` or the ``[tool.diagmerge]`` table
of ``pyproject.toml``; explicit ``--config`` files are merged last.
"""

from __future__ import annotations

from diagmerge.config.model import Config, MutableConfig
from diagmerge.config.policy import DEFAULT_COLLECTION_POLICY, CollectionPolicy

__all__ = [
    "DEFAULT_COLLECTION_POLICY",
    "CollectionPolicy",
    "Config",
    "MutableConfig",
]
