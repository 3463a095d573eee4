"""Typed node results for the Norn SDK.

Query and execution responses share one JSON shape; callers get an explicit
success/failure variant tagged with the kind of call instead of probing
optional fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Union

from .crypto.utils import from_hex


class ResultKind(str, Enum):
    """Which node call produced a loom result."""

    QUERY = "query"
    EXECUTION = "execution"


@dataclass
class LoomEvent:
    """Event emitted by a loom contract.

    Attributes:
        type: Event type name.
        attributes: Key/value attributes in emission order.
    """

    type: str
    attributes: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class LoomSuccess:
    """Successful loom query or execution.

    Attributes:
        kind: Query or execution.
        output: Raw contract output bytes.
        gas_used: Gas consumed.
        logs: Contract log lines.
        events: Emitted events.
    """

    kind: ResultKind
    output: bytes
    gas_used: int
    logs: list[str] = field(default_factory=list)
    events: list[LoomEvent] = field(default_factory=list)
    ok: Literal[True] = True


@dataclass
class LoomFailure:
    """Failed loom query or execution.

    Attributes:
        kind: Query or execution.
        reason: Failure reason reported by the node.
        gas_used: Gas consumed before failing.
        logs: Contract log lines.
    """

    kind: ResultKind
    reason: str
    gas_used: int = 0
    logs: list[str] = field(default_factory=list)
    ok: Literal[False] = False


LoomResult = Union[LoomSuccess, LoomFailure]


@dataclass
class SubmitAccepted:
    """Transaction accepted by the node."""

    ok: Literal[True] = True


@dataclass
class SubmitRejected:
    """Transaction rejected by the node."""

    reason: str
    ok: Literal[False] = False


SubmitResult = Union[SubmitAccepted, SubmitRejected]


def _parse_events(data: list[dict[str, Any]] | None) -> list[LoomEvent]:
    events = []
    for item in data or []:
        attributes = [(a["key"], a["value"]) for a in item.get("attributes", [])]
        events.append(LoomEvent(type=item["type"], attributes=attributes))
    return events


def parse_loom_result(data: dict[str, Any], kind: ResultKind) -> LoomResult:
    """Parse a ``norn_queryLoom`` / ``norn_executeLoom`` response.

    Args:
        data: The decoded JSON result.
        kind: Which call produced it.

    Returns:
        LoomSuccess or LoomFailure.

    Raises:
        KeyError: If ``success`` is missing.
        InvalidHexError: If ``output_hex`` is malformed.
    """
    gas_used = int(data.get("gas_used", 0))
    logs = list(data.get("logs") or [])
    if not data["success"]:
        return LoomFailure(
            kind=kind,
            reason=data.get("reason") or "unknown error",
            gas_used=gas_used,
            logs=logs,
        )
    output_hex = data.get("output_hex")
    return LoomSuccess(
        kind=kind,
        output=from_hex(output_hex) if output_hex else b"",
        gas_used=gas_used,
        logs=logs,
        events=_parse_events(data.get("events")),
    )


def parse_submit_result(data: dict[str, Any]) -> SubmitResult:
    """Parse a submission response (``success`` plus optional ``reason``)."""
    if data.get("success"):
        return SubmitAccepted()
    return SubmitRejected(reason=data.get("reason") or "unknown error")
