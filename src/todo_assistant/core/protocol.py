# src/todo_assistant/core/protocol.py

"""
Line-delimited JSON directive protocol spoken by the model.

Wire shapes (one object per line):
    {"type": "plan", "plan": "..."}
    {"type": "action", "function": "<toolName>", "input": "..."}
    {"type": "observation", "observation": <any JSON>}
    {"type": "output", "output": "..."}

The model is an unreliable producer of structured text, so decoding is done
line by line: each line yields either a directive or a ParseError value, and a
bad line never stops the lines after it.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from ..errors import ParseError

logger = logging.getLogger(__name__)

START_MARKER = "START"


@dataclass(frozen=True, slots=True)
class PlanDirective:
    plan: str


@dataclass(frozen=True, slots=True)
class ActionDirective:
    function: str
    input: str


@dataclass(frozen=True, slots=True)
class ObservationDirective:
    observation: Any


@dataclass(frozen=True, slots=True)
class OutputDirective:
    output: str


Directive = PlanDirective | ActionDirective | ObservationDirective | OutputDirective
ParsedLine = Directive | ParseError


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _decode_object(obj: dict[str, Any], *, line: str, lineno: int) -> Directive | ParseError | None:
    """Map one decoded JSON object onto a directive. None means "unknown tag, skip"."""
    tag = obj.get("type")
    if not isinstance(tag, str) or not tag.strip():
        return ParseError("missing type", line=line, lineno=lineno)

    tag = tag.strip().lower()

    if tag == "plan":
        return PlanDirective(plan=_as_text(obj.get("plan")))

    if tag == "action":
        fn = obj.get("function")
        if not isinstance(fn, str) or not fn.strip():
            return ParseError("action without a function name", line=line, lineno=lineno)
        return ActionDirective(function=fn.strip(), input=_as_text(obj.get("input")))

    if tag == "observation":
        return ObservationDirective(observation=obj.get("observation"))

    if tag == "output":
        if "output" not in obj:
            return ParseError("output without an output field", line=line, lineno=lineno)
        return OutputDirective(output=_as_text(obj.get("output")))

    logger.debug("Unrecognized directive type=%r at line %d, skipping", tag, lineno)
    return None


def parse_line(line: str, *, lineno: int = 0) -> Directive | ParseError | None:
    """
    Decode a single protocol line.

    Returns None for lines that carry nothing to act on
    (blank, the START marker, unknown directive types).
    """
    s = line.strip()
    if not s or s == START_MARKER:
        return None

    try:
        obj = json.loads(s)
    except json.JSONDecodeError as e:
        return ParseError(f"invalid JSON ({e.msg})", line=s, lineno=lineno)

    if not isinstance(obj, dict):
        return ParseError("not a JSON object", line=s, lineno=lineno)

    return _decode_object(obj, line=s, lineno=lineno)


def parse_directives(text: str) -> Iterator[ParsedLine]:
    """Lazily decode a multi-line model response into directives / per-line errors."""
    for lineno, line in enumerate((text or "").splitlines(), start=1):
        item = parse_line(line, lineno=lineno)
        if item is not None:
            yield item


def encode_observation(value: Any) -> str:
    """Serialize a tool result as the observation line sent back to the model."""
    return json.dumps(
        {"type": "observation", "observation": value},
        ensure_ascii=False,
        separators=(",", ":"),
        default=str,
    )
