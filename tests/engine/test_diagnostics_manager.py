# topmark:header:start
#
#   project      : DiagMerge
#   file         : test_diagnostics_manager.py
#   file_relpath : tests/engine/test_diagnostics_manager.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Event-level tests for `DiagnosticsManager`."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from diagmerge.config.policy import CollectionPolicy
from diagmerge.diagnostic.model import Severity, Source
from diagmerge.engine.manager import DiagnosticsManager
from diagmerge.engine.publish import DiagnosticCollection
from tests.conftest import make_config, make_note, make_record

if TYPE_CHECKING:
    from collections.abc import Sequence

    from diagmerge.diagnostic.model import DiagnosticRecord

A = "/src/a.swift"
B = "/src/b.swift"


def exists(path: str) -> bool:
    return path in (A, B)


def make_manager(**overrides: object) -> DiagnosticsManager:
    return DiagnosticsManager(make_config(**overrides), path_exists=exists)


def run_build(manager: DiagnosticsManager, *lines: str) -> None:
    parser = manager.begin_run()
    assert parser is not None
    parser.feed("".join(f"{line}\n" for line in lines))
    parser.feed("Build complete!\n")


def messages(records: Sequence[DiagnosticRecord]) -> list[tuple[str, Source]]:
    return [(r.message, r.source) for r in records]


def test_compiler_run_publishes_on_completion() -> None:
    manager = make_manager()
    parser = manager.begin_run()
    assert parser is not None
    parser.feed(f"{A}:3:7: error: cannot find 'x' in scope\n")
    assert manager.published(A) == ()
    parser.feed("Build complete!\n")
    assert messages(manager.published(A)) == [("Cannot find 'x' in scope", Source.TEXTUAL)]
    assert manager.published(A)[0].range.start.line == 2


def test_structured_fix_heals_compiler_diagnostic() -> None:
    manager = make_manager()
    run_build(manager, f"{A}:1:1: error: cannot find 'x' in scope")
    manager.submit(A, "sourcekit", [make_record("Cannot find 'x' in scope")])
    # Textual wins the tie under the default policy
    assert messages(manager.published(A)) == [("Cannot find 'x' in scope", Source.TEXTUAL)]

    manager.submit(A, Source.STRUCTURED, [])
    assert manager.published(A) == ()
    assert manager.stored(A) == ()


def test_structured_submission_uses_canonical_file_identity() -> None:
    manager = make_manager()
    manager.submit("/src/x/../a.swift", Source.STRUCTURED, [make_record("Boom", file="/other")])
    assert messages(manager.published(A)) == [("Boom", Source.STRUCTURED)]
    assert manager.published_files() == [A]


def test_published_related_notes_are_unique() -> None:
    manager = make_manager()
    note = make_note("Declared here", file=B, line=2)
    manager.submit(A, Source.STRUCTURED, [make_record("Ambiguous use", related=(note, note))])
    (record,) = manager.published(A)
    assert record.related_information == (note,)


def test_new_run_replaces_previous_compiler_diagnostics() -> None:
    manager = make_manager()
    run_build(manager, f"{A}:1:1: error: old problem")
    manager.submit(A, Source.STRUCTURED, [make_record("Live problem", line=5)])

    run_build(manager, f"{B}:2:1: warning: new problem")

    assert messages(manager.published(A)) == [("Live problem", Source.STRUCTURED)]
    assert messages(manager.published(B)) == [("New problem", Source.TEXTUAL)]
    assert manager.published(B)[0].severity is Severity.WARNING


def test_unfinished_run_does_not_touch_published_state() -> None:
    manager = make_manager()
    run_build(manager, f"{A}:1:1: error: kept")
    parser = manager.begin_run()
    assert parser is not None
    parser.feed(f"{A}:2:1: error: pending\n")
    assert messages(manager.published(A)) == [("Kept", Source.TEXTUAL)]


def test_structured_only_policy_ignores_compiler_runs() -> None:
    manager = make_manager(collection_policy=CollectionPolicy.STRUCTURED_ONLY)
    assert manager.begin_run() is None


def test_set_policy_republishes_with_new_precedence() -> None:
    publisher = DiagnosticCollection()
    manager = DiagnosticsManager(make_config(), publisher=publisher, path_exists=exists)
    run_build(manager, f"{A}:1:1: error: boom")
    manager.submit(A, Source.STRUCTURED, [make_record("Boom", end=(0, 4))])
    assert [r.source for r in publisher.get(A)] == [Source.TEXTUAL]

    manager.set_policy(CollectionPolicy.TEXTUAL_BASE)
    assert manager.config.collection_policy is CollectionPolicy.TEXTUAL_BASE
    assert [r.source for r in publisher.get(A)] == [Source.STRUCTURED]

    manager.set_policy(CollectionPolicy.TEXTUAL_ONLY)
    assert [r.source for r in publisher.get(A)] == [Source.TEXTUAL]


def test_deleting_a_source_file_drops_its_diagnostics() -> None:
    publisher = DiagnosticCollection()
    manager = DiagnosticsManager(make_config(), publisher=publisher, path_exists=exists)
    manager.submit(A, Source.STRUCTURED, [make_record()])
    manager.submit(B, Source.STRUCTURED, [make_record(file=B)])

    assert manager.on_file_deleted(A)
    assert A not in publisher
    assert manager.published_files() == [B]
    assert not manager.on_file_deleted(A)


@pytest.mark.parametrize("path", ["/src/README.md", "/src/Package.resolved", "/src/a"])
def test_deleting_a_non_source_file_is_ignored(path: str) -> None:
    manager = make_manager()
    manager.submit(path, Source.STRUCTURED, [make_record(file=path)])
    assert not manager.on_file_deleted(path)
    assert len(manager.stored(path)) == 1


def test_source_extensions_are_configurable() -> None:
    manager = make_manager(source_extensions=["rs"])
    manager.submit("/src/lib.rs", Source.STRUCTURED, [make_record(file="/src/lib.rs")])
    manager.submit(A, Source.STRUCTURED, [make_record()])
    assert manager.on_file_deleted("/src/lib.rs")
    assert not manager.on_file_deleted(A)


def test_update_config_applies_link_settings() -> None:
    manager = make_manager(repair_documentation_links=False)
    manager.update_config(make_config(repair_documentation_links=True))
    assert manager.config.repair_documentation_links


def test_dispose_abandons_active_runs_and_state() -> None:
    publisher = DiagnosticCollection()
    manager = DiagnosticsManager(make_config(), publisher=publisher, path_exists=exists)
    manager.submit(A, Source.STRUCTURED, [make_record()])
    parser = manager.begin_run()
    assert parser is not None

    manager.dispose()

    assert manager.disposed
    assert parser.disposed
    assert len(publisher) == 0
    assert manager.begin_run() is None
    manager.submit(A, Source.STRUCTURED, [make_record()])
    assert manager.published(A) == ()
    assert not manager.on_file_deleted(A)


def test_context_manager_disposes() -> None:
    with make_manager() as manager:
        manager.submit(A, Source.STRUCTURED, [make_record()])
    assert manager.disposed
    assert manager.published_files() == []


def test_clear_drops_everything_but_keeps_listening() -> None:
    manager = make_manager()
    manager.submit(A, Source.STRUCTURED, [make_record()])
    manager.clear()
    assert manager.published_files() == []
    manager.submit(A, Source.STRUCTURED, [make_record()])
    assert len(manager.published(A)) == 1


class _FailingPublisher(DiagnosticCollection):
    def set(self, file: str, diagnostics: Sequence[DiagnosticRecord]) -> None:
        raise RuntimeError("publisher is gone")


def test_failure_while_applying_a_run_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR)
    manager = DiagnosticsManager(make_config(), publisher=_FailingPublisher(), path_exists=exists)
    run_build(manager, f"{A}:1:1: error: boom")
    assert "Failed to apply compiler diagnostics" in caplog.text
