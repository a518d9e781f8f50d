# topmark:header:start
#
#   project      : DiagMerge
#   file         : main.py
#   file_relpath : src/diagmerge/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""``diagmerge`` command group.

The group resolves verbosity and color once and stores them in ``ctx.obj``
together with the console; ``parse``, ``dump-config`` and ``version`` read
them from there.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from diagmerge.cli.commands.dump_config import dump_config_command
from diagmerge.cli.commands.parse import parse_command
from diagmerge.cli.commands.version import version_command
from diagmerge.cli.console import ClickConsole
from diagmerge.cli.options import (
    ColorMode,
    common_color_options,
    common_verbose_options,
    resolve_color_mode,
    resolve_verbosity,
)
from diagmerge.config.logging import setup_logging

if TYPE_CHECKING:
    from diagmerge.cli.console import ConsoleLike


def _init_context(
    ctx: click.Context,
    *,
    verbosity: int,
    color_mode: ColorMode,
) -> ConsoleLike:
    # Internal logging is driven by DIAGMERGE_LOG_LEVEL, not by -v/-q
    setup_logging()
    color: bool = resolve_color_mode(cli_mode=color_mode, output_format=None)
    console = ClickConsole(enable_color=color)
    ctx.color = color
    ctx.obj = {**(ctx.obj or {}), "verbosity_level": verbosity, "console": console}
    return console


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="DiagMerge: reconcile compiler and language-service diagnostics.",
)
@common_verbose_options
@common_color_options
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Entry point for the DiagMerge CLI."""
    console: ConsoleLike = _init_context(
        ctx,
        verbosity=resolve_verbosity(verbose, quiet),
        color_mode=ColorMode.NEVER if no_color else (color_mode or ColorMode.AUTO),
    )
    if ctx.invoked_subcommand is None:
        console.print("Hint: use 'diagmerge parse LOG' to reconcile a compiler log.")
        console.print()
        console.print(ctx.get_help())


for _command in (parse_command, dump_config_command, version_command):
    cli.add_command(_command)

if __name__ == "__main__":
    cli()
