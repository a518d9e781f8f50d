# topmark:header:start
#
#   project      : DiagMerge
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the DiagMerge test suite.

This file sets up global fixtures and customizes the logging configuration for test runs,
and provides small builders for diagnostics and configuration.

Notes:
    Tests should respect the immutable/mutable configuration split: build
    configs using `diagmerge.config.MutableConfig`, then `freeze()` into a
    `diagmerge.config.Config`. Do **not** mutate a frozen `Config`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from diagmerge.config import MutableConfig, logging
from diagmerge.diagnostic.model import (
    DiagnosticCode,
    DiagnosticRecord,
    Location,
    Position,
    Range,
    RelatedInformation,
    Severity,
    Source,
)

if TYPE_CHECKING:
    from pathlib import Path

    from diagmerge.config import Config

F = TypeVar("F", bound=Callable[..., object])

DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type."""

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`."""
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`."""
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_diagmerge_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure DiagMerge's runtime log level is not forced via env during tests.

    Args:
        monkeypatch (pytest.MonkeyPatch): Used to remove ``DIAGMERGE_LOG_LEVEL``.
    """
    monkeypatch.delenv(logging.LOG_LEVEL_ENV_VAR, raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Log at TRACE level for all tests so discarded stream input shows up in reports."""
    logging.setup_logging(level=logging.TRACE_LEVEL)


def make_config(**overrides: Any) -> Config:
    """Return a frozen `Config` built from defaults and overrides.

    Args:
        **overrides (Any): Attributes set on the mutable builder before freezing.

    Returns:
        Config: An immutable configuration snapshot.
    """
    m: MutableConfig = MutableConfig.from_defaults()
    for key, value in overrides.items():
        if not hasattr(m, key):
            raise AttributeError(f"MutableConfig has no field {key!r}")
        setattr(m, key, value)
    return m.freeze()


def make_record(
    message: str = "Cannot find 'x' in scope",
    *,
    file: str = "/src/a.swift",
    line: int = 0,
    character: int = 0,
    end: tuple[int, int] | None = None,
    severity: Severity = Severity.ERROR,
    source: Source = Source.STRUCTURED,
    related: tuple[RelatedInformation, ...] = (),
    code: DiagnosticCode | None = None,
) -> DiagnosticRecord:
    """Build a diagnostic record with zero-based coordinates."""
    start = Position(line, character)
    stop = start if end is None else Position(*end)
    return DiagnosticRecord(
        file=file,
        range=Range(start, stop),
        severity=severity,
        message=message,
        source=source,
        related_information=related,
        code=code,
    )


def make_note(message: str, *, file: str, line: int, character: int = 0) -> RelatedInformation:
    """Build a related-information note at a zero-width position."""
    return RelatedInformation(
        location=Location(file=file, range=Range.at(Position(line, character))),
        message=message,
    )


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """Create a small source tree with two Swift files.

    Returns:
        Path: Directory containing ``a.swift`` and ``b.swift``.
    """
    root: Path = tmp_path / "Sources"
    root.mkdir()
    (root / "a.swift").write_text("let a = x\n", encoding="utf-8")
    (root / "b.swift").write_text("let b = y\n", encoding="utf-8")
    return root
