# topmark:header:start
#
#   project      : DiagMerge
#   file         : cmd_common.py
#   file_relpath : src/diagmerge/cli/cmd_common.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared helpers for DiagMerge CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from diagmerge.config.logging import get_logger
from diagmerge.config.model import MutableConfig

if TYPE_CHECKING:
    from collections.abc import Iterable

    import click

    from diagmerge.cli.console import ConsoleLike
    from diagmerge.config.logging import DiagmergeLogger
    from diagmerge.config.model import Config
    from diagmerge.config.policy import CollectionPolicy

logger: DiagmergeLogger = get_logger(__name__)


def build_config(
    ctx: click.Context,
    *,
    config_paths: Iterable[str] = (),
    no_config: bool = False,
    policy: CollectionPolicy | None = None,
) -> Config:
    """Build the effective configuration for a command.

    Layers defaults, discovered config files in the working directory, explicit
    ``--config`` files and finally CLI overrides. Config warnings are shown on
    the console.

    Args:
        ctx: Current Click context (``ctx.obj["console"]`` must be set).
        config_paths: Explicit config files, merged last.
        no_config: Skip discovery of local config files.
        policy: Collection policy override from the command line.

    Returns:
        The frozen configuration.
    """
    console: ConsoleLike = ctx.obj["console"]
    draft: MutableConfig = MutableConfig.load_merged(
        extra_config_files=[Path(p) for p in config_paths],
        no_config=no_config,
    )
    if policy is not None:
        draft.collection_policy = policy
    for warning in draft.warnings:
        console.warn(f"Warning: {warning}")
    config: Config = draft.freeze()
    logger.debug("Effective collection policy: %s", config.collection_policy)
    return config
