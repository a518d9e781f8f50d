# topmark:header:start
#
#   project      : DiagMerge
#   file         : version.py
#   file_relpath : src/diagmerge/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagMerge `version` command.

Prints the current DiagMerge version as installed in the active Python environment.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from diagmerge.cli.cli_types import EnumChoiceParam
from diagmerge.cli.options import OutputFormat, get_effective_verbosity
from diagmerge.constants import DIAGMERGE_VERSION

if TYPE_CHECKING:
    from diagmerge.cli.console import ConsoleLike


@click.command(
    name="version",
    help="Show the current version of DiagMerge.",
)
@click.option(
    "--format",
    "output_format",
    type=EnumChoiceParam(OutputFormat),
    default=None,
    help=f"Output format ({', '.join(v.value for v in OutputFormat)}).",
)
def version_command(*, output_format: OutputFormat | None = None) -> None:
    """Show the current version of DiagMerge.

    Args:
        output_format (OutputFormat | None): Optional output format (plain text or JSON).
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]

    fmt: OutputFormat = output_format or OutputFormat.TEXT
    if fmt.is_machine:
        console.print(json.dumps({"version": DIAGMERGE_VERSION}))
    elif get_effective_verbosity(ctx) > 0:
        console.print(console.styled("DiagMerge version:\n", bold=True, underline=True))
        console.print(f"    {console.styled(DIAGMERGE_VERSION, bold=True)}")
    else:
        console.print(console.styled(DIAGMERGE_VERSION, bold=True))
