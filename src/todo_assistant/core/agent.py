# src/todo_assistant/core/agent.py

"""
One conversation turn: user query -> model -> directives -> tools -> model.

This module is console-agnostic. run_query() yields TurnEvents and the
connector decides how to render them.

Failure containment:
- ParseError: one line, reported, next line continues.
- UnknownToolError / ToolInputError: one action, reported, next line continues.
- StoreError: reported, the rest of this query is abandoned.
- TransportError: not caught here; it ends the process.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from ..errors import ParseError, StoreError, ToolInputError, UnknownToolError
from ..todos.todo_tools import ToolRegistry
from .protocol import ActionDirective, OutputDirective, encode_observation, parse_directives
from .session import ChatSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ModelReply:
    """Raw model text (debug display only)."""

    text: str
    follow_up: bool = False


@dataclass(frozen=True, slots=True)
class ToolObservation:
    """Observation line sent back to the model (debug display only)."""

    line: str


@dataclass(frozen=True, slots=True)
class AssistantOutput:
    text: str


@dataclass(frozen=True, slots=True)
class Diagnostic:
    text: str


TurnEvent = ModelReply | ToolObservation | AssistantOutput | Diagnostic


class _AbortTurn(Exception):
    """Internal: stop processing the current query."""


def _follow_up_outputs(reply: str) -> Iterator[TurnEvent]:
    """Only output directives are honoured in a follow-up; no nested tool calls."""
    for item in parse_directives(reply):
        if isinstance(item, ParseError):
            logger.info("Follow-up parse error: %s", item)
            yield Diagnostic(f"Error parsing follow-up line: {item}")
        elif isinstance(item, OutputDirective):
            yield AssistantOutput(item.output)
        elif isinstance(item, ActionDirective):
            logger.info("Ignoring nested action %s in follow-up", item.function)


def _run_action(session: ChatSession, tools: ToolRegistry, action: ActionDirective) -> Iterator[TurnEvent]:
    try:
        result = tools.invoke(action.function, action.input)
    except UnknownToolError as e:
        logger.warning("Model requested unknown tool %r", e.name)
        yield Diagnostic(str(e))
        return
    except ToolInputError as e:
        logger.warning("Bad tool input for %s: %s", action.function, e)
        yield Diagnostic(f"Tool {action.function} rejected its input: {e}")
        return
    except StoreError as e:
        logger.error("Store error during %s: %s", action.function, e)
        yield Diagnostic(f"Store error during {action.function}: {e}")
        raise _AbortTurn from e

    obs_line = encode_observation(result)
    yield ToolObservation(obs_line)

    follow_up = session.send(obs_line)
    yield ModelReply(follow_up, follow_up=True)
    yield from _follow_up_outputs(follow_up)


def run_query(session: ChatSession, tools: ToolRegistry, query: str) -> Iterator[TurnEvent]:
    """
    Drive one user query to completion.

    Events are yielded as soon as they are known, so outputs appear on the
    console before a later action's round trip starts.
    """
    reply = session.send(query)
    yield ModelReply(reply)

    try:
        for item in parse_directives(reply):
            if isinstance(item, ParseError):
                logger.info("Parse error: %s", item)
                yield Diagnostic(f"Invalid response line: {item}")
            elif isinstance(item, ActionDirective):
                yield from _run_action(session, tools, item)
            elif isinstance(item, OutputDirective):
                yield AssistantOutput(item.output)
            # plan / observation lines are informational only
    except _AbortTurn:
        logger.info("Query aborted after store error.")
