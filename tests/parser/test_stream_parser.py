# topmark:header:start
#
#   project      : DiagMerge
#   file         : test_stream_parser.py
#   file_relpath : tests/parser/test_stream_parser.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Behavioral tests for the incremental compiler-output parser."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

import pytest

from diagmerge.diagnostic.model import Severity, Source
from diagmerge.parser import RunResult, StreamParser, parse_lines, parse_text
from diagmerge.parser.patterns import match_diagnostic_line
from tests.conftest import make_note, make_record, parametrize

if TYPE_CHECKING:
    from pathlib import Path

    from diagmerge.diagnostic.model import DiagnosticRecord

A = "/src/a.swift"
B = "/src/b.swift"
MACRO = "/tmp/@__swiftmacro_4main3FooV.swift"


def exists(path: str) -> bool:
    return path in (A, B)


def parse(text: str, **kwargs: bool) -> RunResult:
    return parse_text(text, path_exists=exists, **kwargs)


def textual(message: str, **kwargs: Any) -> DiagnosticRecord:
    return make_record(message, source=Source.TEXTUAL, **kwargs)


def test_single_error_is_converted_to_zero_based_range() -> None:
    result = parse(f"{A}:10:5: error: cannot find 'x' in scope\n")
    assert result == {A: [textual("Cannot find 'x' in scope", line=9, character=4)]}


def test_missing_column_points_at_line_start() -> None:
    result = parse(f"{A}:4: warning: unused value\n")
    assert result == {
        A: [textual("Unused value", line=3, character=0, severity=Severity.WARNING)]
    }


@parametrize("prefix", ["  ", "`- ", "    `- ", "-- "])
def test_decoration_before_path_is_ignored(prefix: str) -> None:
    result = parse(f"{prefix}{A}:2:3: error: boom\n")
    assert result == {A: [textual("Boom", line=1, character=2)]}


def test_path_is_normalized() -> None:
    result = parse_text("/src/x/../a.swift:1:1: error: boom\n", path_exists=lambda _p: True)
    assert list(result) == [A]


def test_notes_attach_to_preceding_primary() -> None:
    result = parse(
        f"{A}:3:1: error: cannot find 'x' in scope\n"
        f"{B}:7:2: note: did you mean 'y'?\n"
        f"{A}:9:1: warning: never used\n"
    )
    assert result == {
        A: [
            textual(
                "Cannot find 'x' in scope",
                line=2,
                related=(make_note("Did you mean 'y'?", file=B, line=6, character=1),),
            ),
            textual("Never used", line=8, severity=Severity.WARNING),
        ]
    }


def test_orphan_note_is_discarded() -> None:
    assert parse(f"{A}:1:1: note: nothing before me\n") == {}


def test_unresolved_diagnostic_is_rescued_by_following_note() -> None:
    result = parse(
        f"{MACRO}:1:1: error: expansion failed\n"
        f"{A}:12:5: note: in expansion of macro 'Foo' here\n"
    )
    note = make_note("In expansion of macro 'Foo' here", file=A, line=11, character=4)
    assert result == {
        A: [textual("Expansion failed", line=11, character=4, related=(note,))]
    }


def test_unrescued_diagnostic_is_dropped() -> None:
    assert parse(f"{MACRO}:1:1: error: expansion failed\n") == {}


def test_new_primary_clears_pending_rescue() -> None:
    result = parse(
        f"{MACRO}:1:1: error: lost\n"
        f"{A}:2:1: error: kept\n"
        f"{B}:5:1: note: see here\n"
    )
    # The note attaches to "kept" and does not relocate it
    assert result == {
        A: [textual("Kept", line=1, related=(make_note("See here", file=B, line=4),))]
    }


def test_only_first_note_rescues() -> None:
    result = parse(
        f"{MACRO}:1:1: error: expansion failed\n"
        f"{A}:3:1: note: first\n"
        f"{B}:4:1: note: second\n"
    )
    assert list(result) == [A]
    (record,) = result[A]
    assert [n.message for n in record.related_information] == ["First", "Second"]


def test_repeated_diagnostic_is_reported_once_and_loses_following_notes() -> None:
    result = parse(
        f"{A}:1:1: error: boom\n"
        f"{A}:2:1: note: first\n"
        f"{A}:1:1: error: boom\n"
        f"{A}:3:1: note: attached to nothing\n"
    )
    assert result == {A: [textual("Boom", related=(make_note("First", file=A, line=1),))]}


def test_repeated_note_is_attached_once() -> None:
    result = parse(f"{A}:1:1: error: boom\n{A}:2:1: note: see\n{A}:2:1: note: see\n")
    (record,) = result[A]
    assert len(record.related_information) == 1


def test_repeats_are_kept_when_deduplication_is_off() -> None:
    text = f"{A}:1:1: error: boom\n{A}:2:1: note: see\n{A}:2:1: note: see\n{A}:1:1: error: boom\n"
    result = parse(text, dedupe_duplicates=False)
    assert len(result[A]) == 2
    assert len(result[A][0].related_information) == 2


def test_messages_differing_only_by_noise_are_duplicates() -> None:
    result = parse(f"{A}:1:1: warning: unused [-Wunused]\n{A}:1:1: warning: Unused\n")
    assert len(result[A]) == 1


def test_terminal_styling_is_removed() -> None:
    result = parse(f"\x1b[1m{A}:1:2: \x1b[31merror: \x1b[0mcannot find 'x' in scope\x1b[0m\n")
    assert result == {A: [textual("Cannot find 'x' in scope", line=0, character=1)]}


def test_escape_sequence_split_across_chunks() -> None:
    chunks = ["\x1b[3", f"1m{A}:1:1: error: boom\x1b", "[0m\n"]
    assert parse_lines(chunks, path_exists=exists) == parse(f"{A}:1:1: error: boom\n")


def test_escape_sequence_exposed_by_stripping_is_removed_for_any_split() -> None:
    text = f"{A}:1:1: error: \x1b[\x1b[31mmboom\n"
    cut = text.index("31m") + len("31m")
    whole = parse(text)
    assert whole == {A: [textual("Boom")]}
    assert parse_lines([text[:cut], text[cut:]], path_exists=exists) == whole


@parametrize("terminator", ["\x07", "\x1b\\"])
def test_hyperlinked_path_is_unwrapped(terminator: str) -> None:
    link = f"\x1b]8;;file://{A}{terminator}{A}\x1b]8;;{terminator}"
    assert parse(f"{link}:3:2: error: boom\n") == {A: [textual("Boom", line=2, character=1)]}


def test_invalid_completion_pattern_is_skipped(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)
    parser = StreamParser(path_exists=exists, completion_patterns=["Build (complete", "^DONE$"])
    parser.feed("DONE\n")
    assert parser.finished
    assert "Build (complete" in caplog.text


@parametrize("ending", ["\n", "\r\n", "\r"])
def test_line_endings(ending: str) -> None:
    text = f"{A}:1:1: error: one{ending}{A}:2:1: error: two{ending}"
    assert [r.message for r in parse(text)[A]] == ["One", "Two"]


def test_crlf_split_between_chunks() -> None:
    chunks = [f"{A}:1:1: error: one\r", f"\n{A}:2:1: error: two\r\n"]
    assert [r.message for r in parse_lines(chunks, path_exists=exists)[A]] == ["One", "Two"]


def test_line_split_across_chunks_is_parsed_once_terminated() -> None:
    parser = StreamParser(path_exists=exists)
    parser.feed(f"{A}:1:1: err")
    parser.feed("or: boom")
    assert parser.result() is None
    parser.feed("\n")
    parser.close()
    assert parser.result() == {A: [textual("Boom")]}


def test_unterminated_fragment_is_dropped_on_close() -> None:
    parser = StreamParser(path_exists=exists)
    parser.feed(f"{A}:1:1: error: boom\n{A}:2:1: error: never terminated")
    parser.close()
    assert parser.result() == {A: [textual("Boom")]}


def test_completion_marker_completes_once_and_stops() -> None:
    results: list[RunResult] = []
    parser = StreamParser(on_complete=results.append, path_exists=exists)
    parser.feed(f"{A}:1:1: error: before\nBuild complete!\n{A}:2:1: error: after\n")
    assert parser.finished
    assert results == [{A: [textual("Before")]}]

    parser.feed(f"{A}:3:1: error: later\n")
    parser.close()
    assert len(results) == 1
    assert parser.result() == results[0]


@parametrize(
    "marker",
    [
        "Build complete! (3.21s)",
        "Build of product 'App' complete! (1.02s)",
        "Build of target 'Core' complete!",
    ],
)
def test_completion_marker_variants(marker: str) -> None:
    parser = StreamParser(path_exists=exists)
    parser.feed(f"{marker}\n")
    assert parser.finished
    assert parser.result() == {}


def test_custom_completion_patterns() -> None:
    parser = StreamParser(path_exists=exists, completion_patterns=[r"^\*\* BUILD SUCCEEDED"])
    parser.feed("Build complete!\n")
    assert not parser.finished
    parser.feed("** BUILD SUCCEEDED **\n")
    assert parser.finished


def test_dispose_never_signals_completion() -> None:
    results: list[RunResult] = []
    parser = StreamParser(on_complete=results.append, path_exists=exists)
    parser.feed(f"{A}:1:1: error: boom\n")
    parser.dispose()
    parser.close()
    parser.feed("Build complete!\n")
    assert parser.disposed
    assert parser.finished
    assert parser.result() is None
    assert results == []


def test_close_signals_completion_with_empty_run() -> None:
    results: list[RunResult] = []
    parser = StreamParser(on_complete=results.append, path_exists=exists)
    parser.close()
    assert results == [{}]
    assert not parser.disposed


def test_non_diagnostic_lines_are_ignored() -> None:
    text = (
        "Compiling Foo a.swift\n"
        "[3/7] Emitting module Foo\n"
        "   1 | let a = x\n"
        "  |     `- error: cannot find 'x' in scope\n"
        "\n"
    )
    assert parse(text) == {}


def test_default_path_predicate_checks_the_filesystem(source_tree: Path) -> None:
    present = os.path.join(str(source_tree), "a.swift")
    missing = os.path.join(str(source_tree), "gone.swift")
    result = parse_lines(
        [f"{present}:1:9: error: cannot find 'x' in scope\n{missing}:1:1: error: lost\n"]
    )
    assert list(result) == [present]


def test_match_diagnostic_line_rejects_empty_path() -> None:
    assert match_diagnostic_line(":1:1: error: no path") is None
    parsed = match_diagnostic_line(f"{A}:1:1: note: hi")
    assert parsed is not None and parsed.is_note
