# topmark:header:start
#
#   project      : DiagMerge
#   file         : machine.py
#   file_relpath : src/diagmerge/diagnostic/machine.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""JSON-friendly payloads for diagnostics.

This module converts `DiagnosticRecord` instances to and from plain dicts. The
CLI uses it to read structured-producer diagnostics from JSON files and to emit
JSON / NDJSON output.

Payload shape (ranges are zero-based):

    {
      "file": "/abs/path.swift",
      "range": {"start": {"line": 0, "character": 4}, "end": {...}},
      "severity": "error",
      "message": "Cannot find 'x' in scope",
      "source": "swiftc",
      "related_information": [{"file": ..., "range": ..., "message": ...}],
      "code": {"value": ..., "target": ..., "actionable": false}
    }

``source``, ``related_information`` and ``code`` are optional when decoding.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

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
    from collections.abc import Iterable, Iterator


class DiagnosticPayloadError(ValueError):
    """Raised when a diagnostic payload cannot be decoded."""


def _position_to_dict(position: Position) -> dict[str, int]:
    return {"line": position.line, "character": position.character}


def range_to_dict(rng: Range) -> dict[str, dict[str, int]]:
    """Return a JSON-friendly dict for ``rng``."""
    return {"start": _position_to_dict(rng.start), "end": _position_to_dict(rng.end)}


def record_to_dict(record: DiagnosticRecord) -> dict[str, Any]:
    """Return a JSON-friendly dict for ``record``."""
    payload: dict[str, Any] = {
        "file": record.file,
        "range": range_to_dict(record.range),
        "severity": record.severity.value,
        "message": record.message,
        "source": record.source.tag,
        "related_information": [
            {
                "file": info.location.file,
                "range": range_to_dict(info.location.range),
                "message": info.message,
            }
            for info in record.related_information
        ],
    }
    if record.code is not None:
        payload["code"] = {
            "value": record.code.value,
            "target": record.code.target,
            "actionable": record.code.actionable,
        }
    return payload


def iter_record_dicts(records: Iterable[DiagnosticRecord]) -> Iterator[dict[str, Any]]:
    """Yield one payload dict per record (one NDJSON line each)."""
    for record in records:
        yield record_to_dict(record)


# ------------------ Decoding ------------------


def _require(mapping: Mapping[str, Any], key: str, kind: type, where: str) -> Any:
    value: Any = mapping.get(key)
    # bool is an int subclass; positions must be real integers
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise DiagnosticPayloadError(
            f"{where}: expected '{key}' to be {kind.__name__}, got {value!r}"
        )
    return value


def _as_mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DiagnosticPayloadError(f"{where}: expected an object, got {value!r}")
    return cast("Mapping[str, Any]", value)


def _position_from_dict(value: Any, where: str) -> Position:
    data: Mapping[str, Any] = _as_mapping(value, where)
    return Position(
        line=_require(data, "line", int, where),
        character=_require(data, "character", int, where),
    )


def range_from_dict(value: Any, where: str = "range") -> Range:
    """Decode a range payload.

    Raises:
        DiagnosticPayloadError: If the payload is malformed.
    """
    data: Mapping[str, Any] = _as_mapping(value, where)
    start: Position = _position_from_dict(data.get("start"), f"{where}.start")
    end_raw: Any = data.get("end")
    end: Position = start if end_raw is None else _position_from_dict(end_raw, f"{where}.end")
    return Range(start=start, end=end)


def record_from_dict(
    value: Any,
    *,
    file: str | None = None,
    default_source: Source = Source.STRUCTURED,
) -> DiagnosticRecord:
    """Decode a diagnostic payload.

    Args:
        value: Parsed JSON object.
        file: File identity to use when the payload has no ``file`` key.
        default_source: Producer to use when the payload has no ``source`` key.

    Returns:
        The decoded record (not normalized).

    Raises:
        DiagnosticPayloadError: If the payload is malformed.
    """
    data: Mapping[str, Any] = _as_mapping(value, "diagnostic")
    record_file: Any = data.get("file", file)
    if not isinstance(record_file, str) or not record_file:
        raise DiagnosticPayloadError(f"diagnostic: missing 'file' (got {record_file!r})")
    message: str = _require(data, "message", str, "diagnostic")

    raw_severity: Any = data.get("severity", Severity.ERROR.value)
    try:
        severity = Severity(raw_severity)
    except ValueError as exc:
        raise DiagnosticPayloadError(f"diagnostic: unknown severity {raw_severity!r}") from exc

    raw_source: Any = data.get("source")
    source: Source = (
        default_source if raw_source is None else Source.from_tag(str(raw_source))
    )

    related: list[RelatedInformation] = []
    raw_related: Any = data.get("related_information", [])
    if not isinstance(raw_related, list):
        raise DiagnosticPayloadError("diagnostic: 'related_information' must be a list")
    for idx, item in enumerate(cast("list[Any]", raw_related)):
        where: str = f"related_information[{idx}]"
        info: Mapping[str, Any] = _as_mapping(item, where)
        related.append(
            RelatedInformation(
                location=Location(
                    file=_require(info, "file", str, where),
                    range=range_from_dict(info.get("range"), f"{where}.range"),
                ),
                message=_require(info, "message", str, where),
            )
        )

    code: DiagnosticCode | None = None
    raw_code: Any = data.get("code")
    if raw_code is not None:
        if isinstance(raw_code, (str, int)) and not isinstance(raw_code, bool):
            code = DiagnosticCode(value=str(raw_code))
        else:
            code_data: Mapping[str, Any] = _as_mapping(raw_code, "code")
            target: Any = code_data.get("target")
            if target is not None and not isinstance(target, str):
                raise DiagnosticPayloadError(f"code: expected 'target' to be str, got {target!r}")
            code = DiagnosticCode(
                value=str(code_data.get("value", "")),
                target=target,
                actionable=bool(code_data.get("actionable", False)),
            )

    return DiagnosticRecord(
        file=record_file,
        range=range_from_dict(data.get("range"), "diagnostic.range"),
        severity=severity,
        message=message,
        source=source,
        related_information=tuple(related),
        code=code,
    )
