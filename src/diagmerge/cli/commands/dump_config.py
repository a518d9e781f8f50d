# topmark:header:start
#
#   project      : DiagMerge
#   file         : dump_config.py
#   file_relpath : src/diagmerge/cli/commands/dump_config.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagMerge `dump-config` command.

Emits the effective DiagMerge configuration as TOML after applying defaults,
discovered config files and explicit ``--config`` files. The output is wrapped
between `# === BEGIN ===` and `# === END ===` markers for easy parsing in
tests or tooling.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from diagmerge.cli.cmd_common import build_config
from diagmerge.cli.options import common_config_options
from diagmerge.config.loaders import to_toml
from diagmerge.config.logging import get_logger

if TYPE_CHECKING:
    from diagmerge.cli.console import ConsoleLike
    from diagmerge.config.logging import DiagmergeLogger
    from diagmerge.config.model import Config

logger: DiagmergeLogger = get_logger(__name__)


@click.command(
    name="dump-config",
    help="Dump the final merged DiagMerge configuration as TOML.",
    epilog="Output is wrapped between '# === BEGIN ===' and '# === END ===' markers.",
)
@common_config_options
def dump_config_command(*, no_config: bool, config_paths: tuple[str, ...]) -> None:
    """Dump the final merged configuration as TOML.

    Args:
        no_config: If True, skip discovery of local config files.
        config_paths: Additional TOML config files to merge into the effective config.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    config: Config = build_config(ctx, config_paths=config_paths, no_config=no_config)
    logger.debug("Effective config sources: %s", config.config_files)

    console.print("# === BEGIN ===")
    console.print(to_toml(config.to_toml_dict()).rstrip("\n"))
    console.print("# === END ===")
