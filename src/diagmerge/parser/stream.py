# topmark:header:start
#
#   project      : DiagMerge
#   file         : stream.py
#   file_relpath : src/diagmerge/parser/stream.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Incremental parser for chunked compiler output.

One `StreamParser` instance parses the output of exactly one compiler run. Text
arrives in arbitrary chunks (`StreamParser.feed`); a line is only parsed once
its terminator has been seen, so the result does not depend on how the stream
was split.

State carried between chunks:
    * the unterminated remainder of the previous chunk;
    * the most recent primary diagnostic, which receives following notes;
    * whether that diagnostic is still waiting for a resolvable location.

A primary diagnostic reported at a location that does not exist on disk (for
example inside a macro expansion buffer) is held back. The first note that
follows it supplies the real location, and the diagnostic is committed there.
A held-back diagnostic that is never rescued is dropped when the run ends.

The run ends on a build-completion marker line or on `StreamParser.close`.
Completion is signaled once through the ``on_complete`` callback with a
mapping of file → diagnostics observed in this run.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from diagmerge.config.logging import get_logger
from diagmerge.constants import DEFAULT_COMPLETION_PATTERNS
from diagmerge.diagnostic.model import (
    DiagnosticRecord,
    Location,
    RelatedInformation,
    Source,
    same_related,
)
from diagmerge.diagnostic.normalize import normalize_message
from diagmerge.parser.patterns import (
    compile_completion_patterns,
    is_build_complete,
    match_diagnostic_line,
    split_lines,
    strip_ansi,
)

if TYPE_CHECKING:
    import re
    from collections.abc import Callable, Iterable

    from diagmerge.config.logging import DiagmergeLogger
    from diagmerge.diagnostic.model import Range, Severity
    from diagmerge.parser.patterns import DiagnosticLine

logger: DiagmergeLogger = get_logger(__name__)

RunResult = dict[str, list[DiagnosticRecord]]


@dataclass
class _DiagnosticDraft:
    """Mutable diagnostic under construction.

    Notes keep arriving after a diagnostic has been committed, so the run output
    holds drafts and freezes them when the run completes.
    """

    file: str
    range: Range
    severity: Severity
    message: str
    related_information: list[RelatedInformation] = field(default_factory=lambda: [])

    def has_related(self, info: RelatedInformation) -> bool:
        return any(same_related(existing, info) for existing in self.related_information)

    def freeze(self) -> DiagnosticRecord:
        return DiagnosticRecord(
            file=self.file,
            range=self.range,
            severity=self.severity,
            message=self.message,
            source=Source.TEXTUAL,
            related_information=tuple(self.related_information),
        )


class StreamParser:
    """Resumable parser for the output of one compiler run.

    Args:
        on_complete: Called once with the run result when the run completes.
        path_exists: Predicate deciding whether a reported file can be published
            directly. Defaults to `os.path.exists`.
        completion_patterns: Regexes matching build-completion marker lines.
        dedupe_duplicates: Drop diagnostics and notes the compiler repeats
            within this run.
    """

    def __init__(
        self,
        *,
        on_complete: Callable[[RunResult], None] | None = None,
        path_exists: Callable[[str], bool] = os.path.exists,
        completion_patterns: Iterable[str] = DEFAULT_COMPLETION_PATTERNS,
        dedupe_duplicates: bool = True,
    ) -> None:
        self._on_complete: Callable[[RunResult], None] | None = on_complete
        self._path_exists: Callable[[str], bool] = path_exists
        self._completion_patterns: tuple[re.Pattern[str], ...] = compile_completion_patterns(
            completion_patterns
        )
        self._dedupe: bool = dedupe_duplicates

        self._remaining: str = ""
        self._last: _DiagnosticDraft | None = None
        self._last_needs_saving: bool = False
        self._output: dict[str, list[_DiagnosticDraft]] = {}
        self._result: RunResult | None = None
        self._finished: bool = False
        self._disposed: bool = False

    # ------------------ Lifecycle ------------------

    @property
    def finished(self) -> bool:
        """True once the run completed or was disposed."""
        return self._finished

    @property
    def disposed(self) -> bool:
        """True if the run was disposed before completing."""
        return self._disposed

    def result(self) -> RunResult | None:
        """Return the completed run result, or ``None`` while the run is active or disposed."""
        return self._result

    def feed(self, chunk: str) -> None:
        """Consume one chunk of compiler output.

        Args:
            chunk: Text in arrival order; may end in the middle of a line or of
                a terminal escape sequence.
        """
        if self._finished:
            logger.trace("Ignoring %d chars fed after run end", len(chunk))
            return
        # The remainder stays raw; escape sequences never span a line break
        lines: list[str] = split_lines(self._remaining + chunk)
        self._remaining = lines.pop()
        for raw_line in lines:
            line: str = strip_ansi(raw_line)
            if is_build_complete(line, self._completion_patterns):
                logger.debug("Build completion marker: %r", line)
                self._complete()
                return
            self._parse_line(line)

    def close(self) -> None:
        """Signal the end of the stream.

        Completes the run with what has been accumulated. An unterminated
        trailing fragment is not parsed.
        """
        if self._finished:
            return
        if self._remaining:
            logger.trace("Dropping unterminated fragment at close: %r", self._remaining)
        self._complete()

    def dispose(self) -> None:
        """Abandon the run without signaling completion."""
        if self._finished:
            return
        logger.debug("Disposing stream parser before completion")
        self._disposed = True
        self._finished = True
        self._reset_state()
        self._output.clear()

    def _complete(self) -> None:
        if self._last is not None and self._last_needs_saving:
            logger.debug(
                "Discarding unresolved diagnostic %r at %s", self._last.message, self._last.file
            )
        self._finished = True
        self._reset_state()
        result: RunResult = {
            file: [draft.freeze() for draft in drafts] for file, drafts in self._output.items()
        }
        self._output.clear()
        self._result = result
        logger.debug(
            "Run complete: %d diagnostic(s) in %d file(s)",
            sum(len(v) for v in result.values()),
            len(result),
        )
        if self._on_complete is not None:
            self._on_complete(result)

    def _reset_state(self) -> None:
        self._remaining = ""
        self._last = None
        self._last_needs_saving = False

    # ------------------ Line handling ------------------

    def _parse_line(self, line: str) -> None:
        if not line:
            return
        parsed: DiagnosticLine | None = match_diagnostic_line(line)
        if parsed is None:
            logger.trace("Ignoring non-diagnostic line: %r", line)
            return
        if parsed.is_note:
            self._handle_note(parsed)
        else:
            self._handle_primary(parsed)

    def _handle_note(self, parsed: DiagnosticLine) -> None:
        last: _DiagnosticDraft | None = self._last
        if last is None:
            logger.trace("Discarding orphaned note: %r", parsed.message)
            return
        info = RelatedInformation(
            location=Location(file=parsed.file, range=parsed.range),
            message=normalize_message(parsed.message),
        )
        if self._dedupe and last.has_related(info):
            logger.trace("Discarding duplicate note: %r", info.message)
            return
        last.related_information.append(info)

        if self._last_needs_saving:
            # The note carries the real location of the held-back diagnostic
            last.file = parsed.file
            last.range = parsed.range
            self._output.setdefault(parsed.file, []).append(last)
            self._last_needs_saving = False
            logger.debug("Rescued diagnostic %r at %s", last.message, parsed.file)

    def _handle_primary(self, parsed: DiagnosticLine) -> None:
        draft = _DiagnosticDraft(
            file=parsed.file,
            range=parsed.range,
            severity=parsed.severity,
            message=normalize_message(parsed.message),
        )
        committed: list[_DiagnosticDraft] = self._output.get(parsed.file, [])
        if self._dedupe and any(
            d.message == draft.message and d.range == draft.range for d in committed
        ):
            logger.trace("Discarding duplicate diagnostic: %r", draft.message)
            self._last = None
            self._last_needs_saving = False
            return

        self._last = draft
        if self._path_exists(parsed.file):
            self._output.setdefault(parsed.file, []).append(draft)
            self._last_needs_saving = False
        else:
            logger.trace("Holding diagnostic at unresolved location %s", parsed.file)
            self._last_needs_saving = True


def parse_lines(
    chunks: Iterable[str],
    *,
    path_exists: Callable[[str], bool] = os.path.exists,
    completion_patterns: Iterable[str] = DEFAULT_COMPLETION_PATTERNS,
    dedupe_duplicates: bool = True,
) -> RunResult:
    """Run one parser over ``chunks`` and return the completed result.

    Args:
        chunks: Compiler output in arrival order.
        path_exists: Predicate deciding whether a reported file exists.
        completion_patterns: Build-completion marker regexes.
        dedupe_duplicates: Drop diagnostics and notes repeated within the run.

    Returns:
        Mapping of file → diagnostics observed in the run.
    """
    parser = StreamParser(
        path_exists=path_exists,
        completion_patterns=completion_patterns,
        dedupe_duplicates=dedupe_duplicates,
    )
    for chunk in chunks:
        if parser.finished:
            break
        parser.feed(chunk)
    parser.close()
    return parser.result() or {}


def parse_text(
    text: str,
    *,
    path_exists: Callable[[str], bool] = os.path.exists,
    dedupe_duplicates: bool = True,
) -> RunResult:
    """Parse a complete compiler log given as one string."""
    return parse_lines([text], path_exists=path_exists, dedupe_duplicates=dedupe_duplicates)
