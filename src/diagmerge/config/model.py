# topmark:header:start
#
#   project      : DiagMerge
#   file         : model.py
#   file_relpath : src/diagmerge/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration model and merge policy.

This module defines:
    - `Config`: an immutable, runtime snapshot used by the parser, the store and
      the diagnostics manager.
    - `MutableConfig`: a mutable builder used during discovery/merge; it
      can be frozen into `Config` and thawed back for edits.

Immutability:
    - `Config` stores tuples and is ``frozen=True`` to prevent accidental
      mutation at runtime. Use `Config.thaw` → edit → `MutableConfig.freeze`
      for safe updates.

Merge semantics:
    - Every field of `MutableConfig` is tri-state: ``None`` means "inherit".
    - `MutableConfig.merge_with` applies another draft over this one
      (last-wins), skipping ``None`` values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

from diagmerge.config.keys import Toml
from diagmerge.config.loaders import (
    get_bool_value_or_none,
    get_string_list_or_none,
    get_string_value_or_none,
    get_table_value,
    load_defaults_dict,
    load_toml_dict,
)
from diagmerge.config.logging import get_logger
from diagmerge.config.policy import DEFAULT_COLLECTION_POLICY, CollectionPolicy
from diagmerge.constants import (
    DEFAULT_COMPLETION_PATTERNS,
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_DOCUMENTATION_HOSTS,
    DEFAULT_DOCUMENTATION_SUFFIXES,
    DEFAULT_SOURCE_EXTENSIONS,
    PYPROJECT_FILENAME,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from diagmerge.config.loaders import TomlTable
    from diagmerge.config.logging import DiagmergeLogger

logger: DiagmergeLogger = get_logger(__name__)


# ------------------ Immutable runtime config ------------------


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable runtime configuration for DiagMerge.

    Attributes:
        collection_policy (CollectionPolicy): How textual and structured diagnostics
            are combined before publication.
        repair_documentation_links (bool): Rewrite malformed documentation URLs in
            diagnostic codes into actionable links.
        dedupe_compiler_duplicates (bool): Drop diagnostics and notes the compiler
            repeats within one run.
        completion_patterns (tuple[str, ...]): Regexes matching build-completion lines.
        source_extensions (tuple[str, ...]): File extensions (without dot) whose
            deletion drops stored diagnostics.
        documentation_hosts (tuple[str, ...]): Hosts recognized when repairing
            documentation links.
        documentation_suffixes (tuple[str, ...]): File suffixes that mark a code
            target as documentation.
        config_files (tuple[Path | str, ...]): Config sources merged into this snapshot.
        warnings (tuple[str, ...]): Problems found while loading or merging config.
    """

    collection_policy: CollectionPolicy = DEFAULT_COLLECTION_POLICY
    repair_documentation_links: bool = True
    dedupe_compiler_duplicates: bool = True
    completion_patterns: tuple[str, ...] = DEFAULT_COMPLETION_PATTERNS
    source_extensions: tuple[str, ...] = DEFAULT_SOURCE_EXTENSIONS
    documentation_hosts: tuple[str, ...] = DEFAULT_DOCUMENTATION_HOSTS
    documentation_suffixes: tuple[str, ...] = DEFAULT_DOCUMENTATION_SUFFIXES
    config_files: tuple[Path | str, ...] = ()
    warnings: tuple[str, ...] = ()

    @classmethod
    def from_defaults(cls) -> Config:
        """Return the frozen runtime defaults."""
        return MutableConfig.from_defaults().freeze()

    def with_policy(self, policy: CollectionPolicy) -> Config:
        """Return a copy of this config using ``policy``."""
        return replace(self, collection_policy=policy)

    def thaw(self) -> MutableConfig:
        """Return a mutable copy of this frozen config.

        Returns:
            MutableConfig: A mutable builder initialized from this snapshot.
        """
        return MutableConfig(
            collection_policy=self.collection_policy,
            repair_documentation_links=self.repair_documentation_links,
            dedupe_compiler_duplicates=self.dedupe_compiler_duplicates,
            completion_patterns=list(self.completion_patterns),
            source_extensions=list(self.source_extensions),
            documentation_hosts=list(self.documentation_hosts),
            documentation_suffixes=list(self.documentation_suffixes),
            config_files=list(self.config_files),
            warnings=list(self.warnings),
        )

    def to_toml_dict(self) -> TomlTable:
        """Convert this immutable Config into a TOML-serializable dict."""
        return self.thaw().to_toml_dict()


# ------------------ Mutable builder ------------------


@dataclass
class MutableConfig:
    """Mutable configuration draft used during discovery and merging.

    Each field mirrors `Config`; ``None`` means "not set by this layer".
    """

    collection_policy: CollectionPolicy | None = None
    repair_documentation_links: bool | None = None
    dedupe_compiler_duplicates: bool | None = None
    completion_patterns: list[str] | None = None
    source_extensions: list[str] | None = None
    documentation_hosts: list[str] | None = None
    documentation_suffixes: list[str] | None = None
    config_files: list[Path | str] = field(default_factory=lambda: [])
    warnings: list[str] = field(default_factory=lambda: [])

    # ------------------ Construction ------------------

    @classmethod
    def from_defaults(cls) -> MutableConfig:
        """Build a draft from DiagMerge's runtime defaults (no I/O)."""
        return cls.from_toml_dict(load_defaults_dict())

    @classmethod
    def from_toml_dict(cls, data: TomlTable, config_file: Path | None = None) -> MutableConfig:
        """Create a draft config from a parsed TOML dict.

        Unknown policy values are recorded in ``warnings`` and left unset, so a
        later freeze falls back to the inherited value. Completion patterns
        that are not valid regexes are recorded in ``warnings`` and dropped.

        Args:
            data (TomlTable): The parsed TOML data as a dictionary.
            config_file (Path | None): Optional path to the source TOML file.

        Returns:
            MutableConfig: The resulting MutableConfig instance.
        """
        diagnostics_tbl: TomlTable = get_table_value(data, Toml.SECTION_DIAGNOSTICS)
        logger.trace("TOML [diagnostics]: %s", diagnostics_tbl)
        parser_tbl: TomlTable = get_table_value(data, Toml.SECTION_PARSER)
        logger.trace("TOML [parser]: %s", parser_tbl)
        workspace_tbl: TomlTable = get_table_value(data, Toml.SECTION_WORKSPACE)
        logger.trace("TOML [workspace]: %s", workspace_tbl)
        links_tbl: TomlTable = get_table_value(data, Toml.SECTION_LINKS)
        logger.trace("TOML [links]: %s", links_tbl)

        draft = cls()
        if config_file is not None:
            draft.config_files.append(config_file)

        raw_policy: str | None = get_string_value_or_none(diagnostics_tbl, Toml.KEY_COLLECTION)
        if raw_policy is not None:
            policy: CollectionPolicy | None = CollectionPolicy.parse(raw_policy)
            if policy is None:
                msg = (
                    f"Unknown {Toml.SECTION_DIAGNOSTICS}.{Toml.KEY_COLLECTION} value "
                    f"'{raw_policy}' (expected one of: {', '.join(CollectionPolicy.keys())})"
                )
                logger.warning("%s", msg)
                draft.warnings.append(msg)
            draft.collection_policy = policy

        draft.repair_documentation_links = get_bool_value_or_none(
            diagnostics_tbl, Toml.KEY_REPAIR_LINKS
        )
        draft.dedupe_compiler_duplicates = get_bool_value_or_none(
            diagnostics_tbl, Toml.KEY_DEDUPE_DUPLICATES
        )
        patterns: list[str] | None = get_string_list_or_none(
            parser_tbl, Toml.KEY_COMPLETION_PATTERNS
        )
        if patterns is not None:
            valid: list[str] = []
            for pattern in patterns:
                try:
                    re.compile(pattern)
                except re.error as exc:
                    msg = (
                        f"Invalid {Toml.SECTION_PARSER}.{Toml.KEY_COMPLETION_PATTERNS} "
                        f"regex '{pattern}' ignored: {exc}"
                    )
                    logger.warning("%s", msg)
                    draft.warnings.append(msg)
                    continue
                valid.append(pattern)
            # Nothing usable left: inherit rather than disable completion markers
            patterns = valid if valid or not patterns else None
        draft.completion_patterns = patterns
        extensions: list[str] | None = get_string_list_or_none(
            workspace_tbl, Toml.KEY_SOURCE_EXTENSIONS
        )
        if extensions is not None:
            extensions = [ext.lstrip(".").lower() for ext in extensions if ext.strip(".")]
        draft.source_extensions = extensions
        draft.documentation_hosts = get_string_list_or_none(
            links_tbl, Toml.KEY_DOCUMENTATION_HOSTS
        )
        draft.documentation_suffixes = get_string_list_or_none(
            links_tbl, Toml.KEY_DOCUMENTATION_SUFFIXES
        )
        return draft

    @classmethod
    def from_toml_file(cls, path: Path) -> MutableConfig:
        """Load a draft from a single TOML file (``diagmerge.toml`` or ``pyproject.toml``)."""
        data: TomlTable = load_toml_dict(path)
        logger.debug("Loaded config from %s: %s", path, data)
        return cls.from_toml_dict(data, config_file=path)

    @classmethod
    def discover_local_config_files(cls, start: Path) -> list[Path]:
        """Return config files found in ``start`` (a directory or a file in it).

        ``pyproject.toml`` comes first and ``diagmerge.toml`` second so that a
        later merge gives precedence to the tool file.
        """
        directory: Path = start.parent if start.is_file() else start
        found: list[Path] = []
        for name in (PYPROJECT_FILENAME, DEFAULT_CONFIG_FILENAME):
            candidate: Path = directory / name
            if candidate.is_file():
                found.append(candidate)
        return found

    @classmethod
    def load_merged(
        cls,
        *,
        start: Path | None = None,
        extra_config_files: Iterable[Path] | None = None,
        no_config: bool = False,
    ) -> MutableConfig:
        """Discover and merge configuration layers into a draft `MutableConfig`.

        Merge order (lowest → highest precedence):
            1) Built-in defaults
            2) Local configs in ``start`` (or the CWD): ``pyproject.toml`` then
               ``diagmerge.toml``
            3) Extra config files passed explicitly via ``--config``

        Args:
            start (Path | None): Discovery anchor; defaults to the CWD.
            extra_config_files (Iterable[Path] | None): Explicit files merged last.
            no_config (bool): If True, skip local discovery.

        Returns:
            MutableConfig: A mutable configuration draft ready to be frozen.
        """
        draft: MutableConfig = cls.from_defaults()
        if not no_config:
            for path in cls.discover_local_config_files(start or Path.cwd()):
                draft = draft.merge_with(cls.from_toml_file(path))
        for path in extra_config_files or ():
            draft = draft.merge_with(cls.from_toml_file(path))
        return draft

    # ------------------ Merge / freeze ------------------

    def merge_with(self, other: MutableConfig) -> MutableConfig:
        """Return a new draft where set values from ``other`` override this draft.

        Args:
            other (MutableConfig): The draft whose values override current ones.

        Returns:
            MutableConfig: Merged draft.
        """

        def pick(current: Any, override: Any) -> Any:
            return override if override is not None else current

        return MutableConfig(
            collection_policy=pick(self.collection_policy, other.collection_policy),
            repair_documentation_links=pick(
                self.repair_documentation_links, other.repair_documentation_links
            ),
            dedupe_compiler_duplicates=pick(
                self.dedupe_compiler_duplicates, other.dedupe_compiler_duplicates
            ),
            completion_patterns=pick(self.completion_patterns, other.completion_patterns),
            source_extensions=pick(self.source_extensions, other.source_extensions),
            documentation_hosts=pick(self.documentation_hosts, other.documentation_hosts),
            documentation_suffixes=pick(self.documentation_suffixes, other.documentation_suffixes),
            config_files=[*self.config_files, *other.config_files],
            warnings=[*self.warnings, *other.warnings],
        )

    def freeze(self) -> Config:
        """Freeze this mutable builder into an immutable Config.

        Unset fields take the runtime defaults.
        """
        base = Config()
        return Config(
            collection_policy=(
                base.collection_policy
                if self.collection_policy is None
                else self.collection_policy
            ),
            repair_documentation_links=(
                base.repair_documentation_links
                if self.repair_documentation_links is None
                else self.repair_documentation_links
            ),
            dedupe_compiler_duplicates=(
                base.dedupe_compiler_duplicates
                if self.dedupe_compiler_duplicates is None
                else self.dedupe_compiler_duplicates
            ),
            completion_patterns=(
                base.completion_patterns
                if self.completion_patterns is None
                else tuple(self.completion_patterns)
            ),
            source_extensions=(
                base.source_extensions
                if self.source_extensions is None
                else tuple(self.source_extensions)
            ),
            documentation_hosts=(
                base.documentation_hosts
                if self.documentation_hosts is None
                else tuple(self.documentation_hosts)
            ),
            documentation_suffixes=(
                base.documentation_suffixes
                if self.documentation_suffixes is None
                else tuple(self.documentation_suffixes)
            ),
            config_files=tuple(self.config_files),
            warnings=tuple(self.warnings),
        )

    def to_toml_dict(self) -> TomlTable:
        """Serialize explicitly set values to a TOML-friendly dict.

        Returns:
            TomlTable: Table with primitive types only; unset keys are ``None``
            and dropped when rendered.
        """
        return {
            Toml.SECTION_DIAGNOSTICS: {
                Toml.KEY_COLLECTION: (
                    self.collection_policy.key if self.collection_policy is not None else None
                ),
                Toml.KEY_REPAIR_LINKS: self.repair_documentation_links,
                Toml.KEY_DEDUPE_DUPLICATES: self.dedupe_compiler_duplicates,
            },
            Toml.SECTION_PARSER: {
                Toml.KEY_COMPLETION_PATTERNS: self.completion_patterns,
            },
            Toml.SECTION_WORKSPACE: {
                Toml.KEY_SOURCE_EXTENSIONS: self.source_extensions,
            },
            Toml.SECTION_LINKS: {
                Toml.KEY_DOCUMENTATION_HOSTS: self.documentation_hosts,
                Toml.KEY_DOCUMENTATION_SUFFIXES: self.documentation_suffixes,
            },
        }
