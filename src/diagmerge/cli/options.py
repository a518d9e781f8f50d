# topmark:header:start
#
#   project      : DiagMerge
#   file         : options.py
#   file_relpath : src/diagmerge/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common CLI option utilities for DiagMerge.

This module centralizes reusable options (verbosity, color, config files,
output format) and their resolution logic, so commands and groups can stay
thin. The helpers here are Click-aware.
"""

from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from typing import Callable, ParamSpec, TypeVar

import click

from diagmerge.cli.cli_types import EnumChoiceParam
from diagmerge.cli.errors import DiagmergeUsageError
from diagmerge.config.logging import TRACE_LEVEL

P = ParamSpec("P")
R = TypeVar("R")

# Verbosity levels, mapped to standard logging levels
LOG_LEVELS = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class OutputFormat(str, Enum):
    """Output format for CLI rendering.

    Members:
      TEXT: Human-friendly text output; may include ANSI color if enabled.
      JSON: A single JSON object mapping files to diagnostics (machine-readable).
      NDJSON: One JSON object per diagnostic (newline-delimited JSON).

    Notes:
      - Machine formats (``JSON`` and ``NDJSON``) never include ANSI color.
    """

    TEXT = "text"
    JSON = "json"
    NDJSON = "ndjson"

    @property
    def is_machine(self) -> bool:
        """True for JSON and NDJSON."""
        return self in (OutputFormat.JSON, OutputFormat.NDJSON)


class ColorMode(Enum):
    """User intent for colorized terminal output.

    Members:
      AUTO: Enable color only when appropriate (typically when stdout is a TTY).
      ALWAYS: Force-enable color regardless of TTY status.
      NEVER: Disable color entirely.
    """

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def resolve_color_mode(
    *,
    cli_mode: ColorMode | None,
    output_format: OutputFormat | None,
    stdout_isatty: bool | None = None,
) -> bool:
    """Determine whether color output should be enabled.

    Decision precedence:
      1. **Machine formats**: JSON / NDJSON never use color.
      2. **CLI override**: ``ALWAYS`` → True; ``NEVER`` → False.
      3. **Environment**: ``FORCE_COLOR`` (set and not ``"0"``) → True;
         ``NO_COLOR`` (set) → False.
      4. **Auto**: ``stdout.isatty()``.

    Args:
      cli_mode: Parsed `ColorMode` from ``--color``; ``None`` means "not provided".
      output_format: Selected output format, if known.
      stdout_isatty: Optional override for TTY detection.

    Returns:
      True if ANSI color should be enabled; False otherwise.
    """
    if output_format is not None and output_format.is_machine:
        return False

    if cli_mode == ColorMode.ALWAYS:
        return True
    if cli_mode == ColorMode.NEVER:
        return False

    force_color = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        return True
    if os.getenv("NO_COLOR") is not None:
        return False

    if stdout_isatty is None:
        try:
            stdout_isatty = sys.stdout.isatty()
        except (AttributeError, ValueError):
            stdout_isatty = False
    return bool(stdout_isatty)


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve the program-output level based on verbose and quiet counts.

    Args:
        verbose_count: Number of times the verbose flag (-v) is passed.
        quiet_count: Number of times the quiet flag (-q) is passed.

    Returns:
        The level as a logging-level integer.

    Raises:
        DiagmergeUsageError: If both verbose and quiet flags are used simultaneously.

    Behavior:
        Three or more -v flags set TRACE level, two set DEBUG, one sets INFO.
        One or more -q flags set ERROR level. Default level is WARNING.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise DiagmergeUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")

    if verbose_count >= 3:  # -vvv
        return LOG_LEVELS["TRACE"]
    if verbose_count == 2:  # -vv
        return LOG_LEVELS["DEBUG"]
    if verbose_count == 1:  # -v
        return LOG_LEVELS["INFO"]

    if quiet_count >= 1:  # -q
        return LOG_LEVELS["ERROR"]

    return LOG_LEVELS["WARNING"]


def get_effective_verbosity(ctx: click.Context) -> int:
    """Return program-output verbosity: 0 (terse) or more (verbose).

    Maps the level stored in ``ctx.obj["verbosity_level"]`` by the group: INFO
    and below counts as verbose.
    """
    obj = ctx.find_root().obj or {}
    level = int(obj.get("verbosity_level", LOG_LEVELS["WARNING"]))
    if level <= LOG_LEVELS["DEBUG"]:
        return 2
    if level <= LOG_LEVELS["INFO"]:
        return 1
    return 0


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Adds --verbose and --quiet options to a command.

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function with verbosity options added.
    """
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity. Specify up to three times for more detail.",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Suppress non-essential output.",
    )(f)
    return f


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Adds --color and --no-color options to a command.

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function with color options added.
    """
    f = click.option(
        "--color",
        "color_mode",
        type=EnumChoiceParam(ColorMode),
        default=None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f


def common_config_options(f: Callable[P, R]) -> Callable[P, R]:
    """Apply common configuration options to a Click command.

    Adds ``--no-config`` and ``--config``.

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function.
    """
    f = click.option(
        "--no-config",
        "no_config",
        is_flag=True,
        help="Ignore diagmerge.toml / pyproject.toml in the working directory.",
    )(f)
    f = click.option(
        "--config",
        "config_paths",
        multiple=True,
        metavar="FILE",
        type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True),
        help="Additional config file(s) to load and merge.",
    )(f)
    return f
