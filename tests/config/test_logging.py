# topmark:header:start
#
#   project      : DiagMerge
#   file         : test_logging.py
#   file_relpath : tests/config/test_logging.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for ``DIAGMERGE_LOG_LEVEL`` resolution and the TRACE level."""

from __future__ import annotations

import logging

import pytest

from diagmerge.config.logging import (
    LOG_LEVEL_ENV_VAR,
    TRACE_LEVEL,
    get_logger,
    resolve_env_log_level,
)
from tests.conftest import parametrize


@parametrize(
    "raw, expected",
    [
        ("TRACE", TRACE_LEVEL),
        ("debug", logging.DEBUG),
        (" warn ", logging.WARNING),
        ("fatal", logging.CRITICAL),
        ("15", 15),
        ("chatty", None),
        ("", None),
    ],
)
def test_resolve_env_log_level(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: int | None
) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV_VAR, raw)
    assert resolve_env_log_level() == expected


def test_trace_records_reach_handlers(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(TRACE_LEVEL)
    get_logger("diagmerge.tests").trace("dropped %d line(s)", 3)
    records = [(r.levelname, r.getMessage()) for r in caplog.records]
    assert records == [("TRACE", "dropped 3 line(s)")]
