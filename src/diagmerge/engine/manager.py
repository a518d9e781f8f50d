# topmark:header:start
#
#   project      : DiagMerge
#   file         : manager.py
#   file_relpath : src/diagmerge/engine/manager.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Diagnostics manager: the event-driven orchestration layer.

The manager owns the `DiagnosticStore` and a `DiagnosticPublisher` and reacts to
discrete events:

    * `DiagnosticsManager.submit`: a producer asserts the diagnostics of a file;
    * `DiagnosticsManager.begin_run`: a compiler run starts; the returned
      `StreamParser` is fed the run output and applies its result on completion;
    * `DiagnosticsManager.on_file_deleted`: a tracked source file was deleted;
    * `DiagnosticsManager.update_config` / `DiagnosticsManager.set_policy`:
      configuration changed.

Every event fully updates the store and republishes the affected files before
returning. The manager is not thread-safe; all events must be delivered from
one thread.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from diagmerge.config.logging import get_logger
from diagmerge.diagnostic.model import Source
from diagmerge.engine.merge import merge_diagnostics
from diagmerge.engine.publish import DiagnosticCollection
from diagmerge.engine.store import DiagnosticStore
from diagmerge.parser.stream import StreamParser

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from types import TracebackType

    from diagmerge.config.logging import DiagmergeLogger
    from diagmerge.config.model import Config
    from diagmerge.config.policy import CollectionPolicy
    from diagmerge.diagnostic.model import DiagnosticRecord
    from diagmerge.engine.publish import DiagnosticPublisher
    from diagmerge.parser.stream import RunResult

logger: DiagmergeLogger = get_logger(__name__)


def canonical_file(path: str) -> str:
    """Return the file identity used as store key for ``path``."""
    return os.path.normpath(path)


class DiagnosticsManager:
    """Reconciles textual and structured diagnostics into published per-file sets.

    Args:
        config: Frozen runtime configuration.
        publisher: Receiver of published sets; an in-memory
            `DiagnosticCollection` when omitted.
        path_exists: Predicate used by stream parsers to decide whether a
            reported file is resolvable. Defaults to `os.path.exists`.
    """

    def __init__(
        self,
        config: Config,
        publisher: DiagnosticPublisher | None = None,
        path_exists: Callable[[str], bool] | None = None,
    ) -> None:
        self._config: Config = config
        self._publisher: DiagnosticPublisher = (
            publisher if publisher is not None else DiagnosticCollection()
        )
        self._path_exists: Callable[[str], bool] = path_exists or os.path.exists
        self._store: DiagnosticStore = DiagnosticStore(
            repair_links=config.repair_documentation_links,
            documentation_hosts=config.documentation_hosts,
            documentation_suffixes=config.documentation_suffixes,
        )
        self._published: dict[str, tuple[DiagnosticRecord, ...]] = {}
        self._runs: list[StreamParser] = []
        self._disposed: bool = False

    # ------------------ Queries ------------------

    @property
    def config(self) -> Config:
        """Current runtime configuration."""
        return self._config

    @property
    def publisher(self) -> DiagnosticPublisher:
        """Publisher receiving the per-file sets."""
        return self._publisher

    @property
    def disposed(self) -> bool:
        """True once `dispose` was called."""
        return self._disposed

    def published(self, file: str) -> tuple[DiagnosticRecord, ...]:
        """Return the diagnostics last published for ``file``."""
        return self._published.get(canonical_file(file), ())

    def published_files(self) -> list[str]:
        """Return every file with a published set."""
        return list(self._published)

    def stored(self, file: str) -> tuple[DiagnosticRecord, ...]:
        """Return the stored diagnostics of ``file`` from both producers."""
        return self._store.get(canonical_file(file))

    # ------------------ Events ------------------

    def submit(
        self,
        file: str,
        source: Source | str,
        diagnostics: Iterable[DiagnosticRecord],
    ) -> None:
        """Replace the diagnostics ``source`` reports for ``file`` and republish it.

        Args:
            file: File the diagnostics belong to.
            source: Producer (or its wire tag) asserting the new generation.
            diagnostics: The new generation; empty clears the producer's
                previous diagnostics for ``file``.
        """
        if self._disposed:
            return
        producer: Source = source if isinstance(source, Source) else Source.from_tag(source)
        key: str = canonical_file(file)
        self._store.ingest(key, producer, diagnostics)
        self._publish(key)

    def begin_run(self) -> StreamParser | None:
        """Start collecting the output of one compiler run.

        Returns:
            A fresh parser to feed the run output into, or ``None`` when compiler
            output is not collected (disposed manager or ``structured-only`` policy).
        """
        if self._disposed:
            return None
        if not self._config.collection_policy.collects_textual:
            logger.debug("Policy %s ignores compiler output", self._config.collection_policy)
            return None
        parser = StreamParser(
            on_complete=self._apply_run,
            path_exists=self._path_exists,
            completion_patterns=self._config.completion_patterns,
            dedupe_duplicates=self._config.dedupe_compiler_duplicates,
        )
        self._runs = [run for run in self._runs if not run.finished]
        self._runs.append(parser)
        logger.debug("Compiler run started (%d active)", len(self._runs))
        return parser

    def on_file_deleted(self, path: str) -> bool:
        """Forget a deleted source file.

        Args:
            path: Path of the deleted file.

        Returns:
            True if stored diagnostics were dropped.
        """
        if self._disposed:
            return False
        extension: str = os.path.splitext(path)[1].lstrip(".").lower()
        if extension not in self._config.source_extensions:
            logger.trace("Ignoring deletion of non-source file %s", path)
            return False
        key: str = canonical_file(path)
        if not self._store.remove(key):
            return False
        self._published.pop(key, None)
        self._publisher.delete(key)
        logger.debug("Dropped diagnostics of deleted file %s", key)
        return True

    def set_policy(self, policy: CollectionPolicy) -> None:
        """Switch the collection policy and republish every stored file."""
        self.update_config(self._config.with_policy(policy))

    def update_config(self, config: Config) -> None:
        """Apply a new configuration and republish every stored file."""
        if self._disposed:
            return
        self._config = config
        self._store.repair_links = config.repair_documentation_links
        self._store.documentation_hosts = tuple(config.documentation_hosts)
        self._store.documentation_suffixes = tuple(config.documentation_suffixes)
        self._publisher.clear()
        self._published.clear()
        for file in self._store.files():
            self._publish(file)
        logger.debug("Configuration updated; policy=%s", config.collection_policy)

    def clear(self) -> None:
        """Drop all stored and published diagnostics."""
        self._publisher.clear()
        self._published.clear()
        self._store.clear()

    def dispose(self) -> None:
        """Stop reacting to events and drop all state."""
        if self._disposed:
            return
        for run in self._runs:
            run.dispose()
        self._runs.clear()
        self.clear()
        self._disposed = True
        logger.debug("Diagnostics manager disposed")

    def __enter__(self) -> DiagnosticsManager:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()

    # ------------------ Internals ------------------

    def _publish(self, file: str) -> None:
        diagnostics: tuple[DiagnosticRecord, ...] = tuple(
            merge_diagnostics(self._store.get(file), self._config.collection_policy)
        )
        self._published[file] = diagnostics
        self._publisher.set(file, diagnostics)
        logger.trace("Published %d diagnostic(s) for %s", len(diagnostics), file)

    def _apply_run(self, result: RunResult) -> None:
        if self._disposed:
            return
        try:
            # Files absent from this run heal: drop every compiler diagnostic first
            for file in self._store.remove_source(Source.TEXTUAL):
                self._publish(file)
            for file, records in result.items():
                self.submit(file, Source.TEXTUAL, records)
        except Exception:
            logger.exception("Failed to apply compiler diagnostics")
