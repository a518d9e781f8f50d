# topmark:header:start
#
#   project      : DiagMerge
#   file         : test_diagnostic_store.py
#   file_relpath : tests/engine/test_diagnostic_store.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the per-file diagnostic store and cross-producer healing."""

from __future__ import annotations

from diagmerge.constants import MORE_INFORMATION_LABEL
from diagmerge.diagnostic.model import DiagnosticCode, Source
from diagmerge.engine.store import DiagnosticStore
from tests.conftest import make_note, make_record

A = "/src/a.swift"
B = "/src/b.swift"


def test_ingest_normalizes_and_tags_records() -> None:
    store = DiagnosticStore()
    store.ingest(A, Source.TEXTUAL, [make_record("cannot find 'x' [-Wx]", file="/elsewhere")])
    (record,) = store.get(A)
    assert record.message == "Cannot find 'x'"
    assert record.file == A
    assert record.source is Source.TEXTUAL


def test_ingest_replaces_only_the_submitting_producer() -> None:
    store = DiagnosticStore()
    store.ingest(A, Source.STRUCTURED, [make_record("S1")])
    store.ingest(A, Source.TEXTUAL, [make_record("T1", line=1)])
    store.ingest(A, Source.TEXTUAL, [make_record("T2", line=2)])
    assert [r.message for r in store.get(A)] == ["S1", "T2"]


def test_structured_healing_purges_matching_compiler_diagnostics() -> None:
    store = DiagnosticStore()
    store.ingest(A, Source.STRUCTURED, [make_record("Fixed"), make_record("Still broken", line=3)])
    store.ingest(A, Source.TEXTUAL, [make_record("Fixed"), make_record("Other", line=5)])

    healed = store.ingest(A, Source.STRUCTURED, [make_record("Still broken", line=3)])

    assert [r.message for r in healed] == ["Fixed"]
    assert [(r.message, r.source) for r in store.get(A)] == [
        ("Other", Source.TEXTUAL),
        ("Still broken", Source.STRUCTURED),
    ]


def test_rereported_diagnostic_does_not_heal() -> None:
    store = DiagnosticStore()
    store.ingest(A, Source.STRUCTURED, [make_record("Broken", end=(0, 4))])
    store.ingest(A, Source.TEXTUAL, [make_record("Broken")])
    # Same key, different end: still the same problem
    healed = store.ingest(A, Source.STRUCTURED, [make_record("Broken", end=(0, 6))])
    assert healed == []
    assert {r.source for r in store.get(A)} == {Source.STRUCTURED, Source.TEXTUAL}


def test_textual_ingest_never_purges_structured_records() -> None:
    store = DiagnosticStore()
    store.ingest(A, Source.STRUCTURED, [make_record("Broken")])
    store.ingest(A, Source.TEXTUAL, [make_record("Broken")])
    store.ingest(A, Source.TEXTUAL, [])
    assert [r.source for r in store.get(A)] == [Source.STRUCTURED]


def test_empty_submission_keeps_the_file_entry() -> None:
    store = DiagnosticStore()
    store.ingest(A, Source.STRUCTURED, [make_record()])
    store.ingest(A, Source.STRUCTURED, [])
    assert A in store
    assert store.get(A) == ()


def test_documentation_link_repair_on_ingest() -> None:
    target = "/pkg/https:/docs.swift.org/compiler/documentation/diagnostics/sendable"
    record = make_record(code=DiagnosticCode("sendable", target))

    store = DiagnosticStore()
    store.ingest(A, Source.STRUCTURED, [record])
    code = store.get(A)[0].code
    assert code is not None
    assert code.value == MORE_INFORMATION_LABEL
    assert code.actionable

    raw = DiagnosticStore(repair_links=False)
    raw.ingest(A, Source.STRUCTURED, [record])
    assert raw.get(A)[0].code == record.code


def test_repeated_related_notes_are_stored_once() -> None:
    note = make_note("Declared here", file=B, line=4)
    other = make_note("Declared here", file=B, line=5)
    store = DiagnosticStore()
    store.ingest(A, Source.STRUCTURED, [make_record("Ambiguous use", related=(note, note, other))])
    (record,) = store.get(A)
    assert record.related_information == (note, other)


def test_remove_source_returns_every_file() -> None:
    store = DiagnosticStore()
    store.ingest(A, Source.TEXTUAL, [make_record()])
    store.ingest(B, Source.STRUCTURED, [make_record(file=B)])
    assert store.remove_source(Source.TEXTUAL) == [A, B]
    assert store.get(A) == ()
    assert len(store.get(B)) == 1


def test_remove_and_clear() -> None:
    store = DiagnosticStore()
    store.ingest(A, Source.TEXTUAL, [make_record()])
    store.ingest(B, Source.TEXTUAL, [make_record(file=B)])
    assert store.files() == [A, B]
    assert store.remove(A)
    assert not store.remove(A)
    assert list(store) == [B]
    store.clear()
    assert len(store) == 0
