# topmark:header:start
#
#   project      : DiagMerge
#   file         : logging.py
#   file_relpath : src/diagmerge/config/logging.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Internal logging for DiagMerge.

Logging reports what DiagMerge itself is doing; user-facing output goes
through `diagmerge.cli.console`. Records go to stderr so that JSON written to
stdout by ``diagmerge parse`` stays parseable.

Levels used across the package:
    * TRACE: stream input that was discarded (noise lines, orphaned notes,
      repeated diagnostics) and documentation-link repairs.
    * DEBUG: run lifecycle (completion markers, rescued diagnostics, run size).
    * WARNING / ERROR: unusable configuration and failures while applying a run.

Set ``DIAGMERGE_LOG_LEVEL=TRACE`` to see why a compiler line did not become a
diagnostic.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Final, cast

from yachalk import chalk

if TYPE_CHECKING:
    from collections.abc import Mapping

TRACE_LEVEL: Final[int] = logging.DEBUG - 5

LOG_LEVEL_ENV_VAR: Final[str] = "DIAGMERGE_LOG_LEVEL"

LOG_FORMAT: Final[str] = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT: Final[str] = "[%(levelname)s] [%(name)s:%(lineno)d] %(message)s"


class DiagmergeLogger(logging.Logger):
    """Logger with a `trace` method for the TRACE level below DEBUG."""

    def trace(
        self,
        msg: object,
        *args: object,
        extra: Mapping[str, object] | None = None,
    ) -> None:
        """Log ``msg % args`` at TRACE level."""
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, msg, args, extra=extra, stacklevel=2)


if not hasattr(logging, "TRACE"):
    logging.addLevelName(TRACE_LEVEL, "TRACE")
    logging.TRACE = TRACE_LEVEL  # type: ignore

logging.setLoggerClass(DiagmergeLogger)


# Highest threshold first; a record takes the first style it reaches
_LEVEL_STYLES: tuple[tuple[int, str], ...] = (
    (logging.CRITICAL, "red_bright"),
    (logging.ERROR, "red"),
    (logging.WARNING, "yellow"),
    (logging.INFO, "green"),
    (logging.DEBUG, "gray"),
    (TRACE_LEVEL, "blue"),
)


class ChalkFormatter(logging.Formatter):
    """Formatter coloring each record by its level with yachalk."""

    def format(self, record: logging.LogRecord) -> str:
        message: str = super().format(record)
        for threshold, style in _LEVEL_STYLES:
            if record.levelno >= threshold:
                return getattr(chalk, style)(message)
        return chalk.dim(message)


def resolve_env_log_level() -> int | None:
    """Return the level named by ``DIAGMERGE_LOG_LEVEL``, or ``None``.

    Accepts level names (``TRACE``, ``debug``, ``WARN``, ...) and numbers.
    Unknown names are ignored.
    """
    raw: str = os.environ.get(LOG_LEVEL_ENV_VAR, "").strip().upper()
    if not raw:
        return None
    if raw.isdigit():
        return int(raw)
    aliases: dict[str, int] = {"WARN": logging.WARNING, "FATAL": logging.CRITICAL}
    if raw in aliases:
        return aliases[raw]
    level: object = logging.getLevelName(raw)
    return level if isinstance(level, int) else None


def setup_logging(level: int | None = None) -> None:
    """Install a single colored stderr handler on the root logger.

    Args:
        level: Root level. When ``None``, ``DIAGMERGE_LOG_LEVEL`` decides and
            CRITICAL is used if it is unset, so a plain CLI run stays quiet.
    """
    if level is None:
        level = resolve_env_log_level() or logging.CRITICAL

    root: logging.Logger = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ChalkFormatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT))
    root.addHandler(handler)


def get_logger(name: str) -> DiagmergeLogger:
    """Return the `DiagmergeLogger` for module ``name``."""
    return cast("DiagmergeLogger", logging.getLogger(name))
