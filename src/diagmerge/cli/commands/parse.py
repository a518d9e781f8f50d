# topmark:header:start
#
#   project      : DiagMerge
#   file         : parse.py
#   file_relpath : src/diagmerge/cli/commands/parse.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagMerge `parse` command.

Streams a compiler log through one diagnostics-manager run and prints the
published per-file diagnostic sets.

Input modes:
  * ``LOG`` is a file path; ``-`` (the default) reads the log from STDIN.
  * ``--structured FILE`` submits language-service diagnostics read from a JSON
    object mapping each file to a list of diagnostic payloads. They are
    submitted before the compiler run is applied.

Exit status is 1 when any published diagnostic is an error.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import click

from diagmerge.cli.cli_types import EnumChoiceParam
from diagmerge.cli.cmd_common import build_config
from diagmerge.cli.errors import (
    DiagmergeDataError,
    DiagmergeFileNotFoundError,
    DiagmergeIOError,
)
from diagmerge.cli.exit_codes import ExitCode
from diagmerge.cli.options import OutputFormat, common_config_options, get_effective_verbosity
from diagmerge.config.logging import get_logger
from diagmerge.config.policy import CollectionPolicy
from diagmerge.diagnostic.machine import (
    DiagnosticPayloadError,
    iter_record_dicts,
    record_from_dict,
)
from diagmerge.diagnostic.model import Severity, Source
from diagmerge.engine.manager import DiagnosticsManager

if TYPE_CHECKING:
    from diagmerge.cli.console import ConsoleLike
    from diagmerge.config.logging import DiagmergeLogger
    from diagmerge.config.model import Config
    from diagmerge.diagnostic.model import DiagnosticRecord
    from diagmerge.parser.stream import StreamParser

logger: DiagmergeLogger = get_logger(__name__)

DEFAULT_CHUNK_SIZE: int = 4096


def load_structured_file(path: Path) -> dict[str, list[DiagnosticRecord]]:
    """Read structured-producer diagnostics from a JSON file.

    Args:
        path: JSON file holding ``{"<file>": [<diagnostic payload>, ...], ...}``.

    Returns:
        Mapping of file → decoded diagnostics.

    Raises:
        DiagmergeIOError: If the file cannot be read.
        DiagmergeDataError: If the file is not valid JSON or a payload is malformed.
    """
    try:
        raw: Any = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise DiagmergeIOError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise DiagmergeDataError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise DiagmergeDataError(f"{path}: expected an object mapping files to diagnostics")

    out: dict[str, list[DiagnosticRecord]] = {}
    for file, payloads in cast("dict[str, Any]", raw).items():
        if not isinstance(payloads, list):
            raise DiagmergeDataError(f"{path}: diagnostics of '{file}' must be a list")
        try:
            out[file] = [
                record_from_dict(p, file=file, default_source=Source.STRUCTURED)
                for p in cast("list[Any]", payloads)
            ]
        except DiagnosticPayloadError as exc:
            raise DiagmergeDataError(f"{path}: {file}: {exc}") from exc
    return out


def _feed_log(parser: StreamParser, log: str, chunk_size: int) -> None:
    try:
        with click.open_file(log, "r", encoding="utf-8", errors="replace") as stream:
            while not parser.finished:
                chunk: str = stream.read(chunk_size)
                if not chunk:
                    break
                parser.feed(chunk)
    except FileNotFoundError as exc:
        parser.dispose()
        raise DiagmergeFileNotFoundError(f"No such file: {log}") from exc
    except OSError as exc:
        parser.dispose()
        raise DiagmergeIOError(f"Cannot read {log}: {exc}") from exc
    parser.close()


_STYLE: dict[Severity, str] = {
    Severity.ERROR: "bright_red",
    Severity.WARNING: "yellow",
    Severity.INFORMATION: "blue",
    Severity.HINT: "white",
}


def _render_text(
    console: ConsoleLike,
    published: list[tuple[str, tuple[DiagnosticRecord, ...]]],
    verbosity: int,
) -> None:
    for file, diagnostics in published:
        for d in diagnostics:
            severity: str = console.styled(d.severity.value, fg=_STYLE[d.severity], bold=True)
            console.print(
                f"{file}:{d.range.start.line + 1}:{d.range.start.character + 1}: "
                f"{severity}: {d.message} [{d.source.tag}]"
            )
            for info in d.related_information:
                loc = info.location
                console.print(
                    f"    note: {loc.file}:{loc.range.start.line + 1}:"
                    f"{loc.range.start.character + 1}: {info.message}"
                )
            if verbosity > 1 and d.code is not None and d.code.target:
                console.print(f"    {d.code.value}: {d.code.target}")
    if verbosity > 0:
        counts: dict[Severity, int] = {s: 0 for s in Severity}
        for _, diagnostics in published:
            for d in diagnostics:
                counts[d.severity] += 1
        n_files: int = sum(1 for _, diagnostics in published if diagnostics)
        console.print(
            console.styled(
                f"{counts[Severity.ERROR]} error(s), {counts[Severity.WARNING]} warning(s), "
                f"{counts[Severity.INFORMATION] + counts[Severity.HINT]} other "
                f"in {n_files} file(s)",
                bold=True,
            )
        )


@click.command(
    name="parse",
    help="Parse a compiler log and print the reconciled diagnostics per file.",
    epilog="Use '-' (the default) to read the log from STDIN.",
)
@click.argument("log", type=click.Path(dir_okay=False, allow_dash=True), default="-")
@click.option(
    "--structured",
    "structured_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with language-service diagnostics ({file: [diagnostic, ...]}).",
)
@click.option(
    "--policy",
    "policy",
    type=EnumChoiceParam(CollectionPolicy),
    default=None,
    help=f"Collection policy ({', '.join(CollectionPolicy.keys())}).",
)
@click.option(
    "--format",
    "output_format",
    type=EnumChoiceParam(OutputFormat),
    default=None,
    help=f"Output format ({', '.join(v.value for v in OutputFormat)}).",
)
@click.option(
    "--chunk-size",
    "chunk_size",
    type=click.IntRange(min=1),
    default=DEFAULT_CHUNK_SIZE,
    show_default=True,
    help="Number of characters fed to the parser per chunk.",
)
@common_config_options
def parse_command(
    *,
    log: str,
    structured_path: Path | None,
    policy: CollectionPolicy | None,
    output_format: OutputFormat | None,
    chunk_size: int,
    no_config: bool,
    config_paths: tuple[str, ...],
) -> None:
    """Parse a compiler log and print the published diagnostics.

    Args:
        log: Compiler log path, or ``-`` for STDIN.
        structured_path: Optional JSON file with structured diagnostics.
        policy: Collection policy override.
        output_format: Output format (text, json, ndjson).
        chunk_size: Characters per parser chunk.
        no_config: Skip discovery of local config files.
        config_paths: Extra config files merged last.
    """
    ctx = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    verbosity: int = get_effective_verbosity(ctx)
    fmt: OutputFormat = output_format or OutputFormat.TEXT

    config: Config = build_config(
        ctx, config_paths=config_paths, no_config=no_config, policy=policy
    )
    structured: dict[str, list[DiagnosticRecord]] = (
        load_structured_file(structured_path) if structured_path is not None else {}
    )

    with DiagnosticsManager(config) as manager:
        for file, records in structured.items():
            manager.submit(file, Source.STRUCTURED, records)

        parser: StreamParser | None = manager.begin_run()
        if parser is None:
            logger.info("Policy %s ignores compiler output", config.collection_policy)
        else:
            _feed_log(parser, log, chunk_size)

        published: list[tuple[str, tuple[DiagnosticRecord, ...]]] = [
            (file, manager.published(file))
            for file in sorted(manager.published_files())
            if manager.published(file)
        ]

    if fmt is OutputFormat.JSON:
        payload: dict[str, Any] = {
            "policy": config.collection_policy.key,
            "diagnostics": {file: list(iter_record_dicts(ds)) for file, ds in published},
        }
        console.print(json.dumps(payload, indent=2))
    elif fmt is OutputFormat.NDJSON:
        for _, diagnostics in published:
            for record in iter_record_dicts(diagnostics):
                console.print(json.dumps(record))
    else:
        _render_text(console, published, verbosity)

    has_error: bool = any(
        d.severity is Severity.ERROR for _, diagnostics in published for d in diagnostics
    )
    if has_error:
        ctx.exit(ExitCode.DIAGNOSTICS_ERROR)
