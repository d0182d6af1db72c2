# src/todo_assistant/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import TextIO

from ..cli.commands import registry as command_registry
from ..core.agent import AssistantOutput, Diagnostic, ModelReply, ToolObservation, run_query
from ..core.session import ChatSession
from ..core.state import AppState
from ..errors import TransportError

logger = logging.getLogger(__name__)

PROMPT = ">> "
ASSISTANT_PREFIX = "🤖: "
DIAGNOSTIC_PREFIX = "[!] "


def run_console_loop(
    state: AppState,
    session: ChatSession,
    *,
    input_fn: Callable[[str], str] = input,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """
    Blocking REPL. Returns the process exit code.

    One query is driven to completion before the next prompt. A TransportError
    ends the loop with exit code 1; EOF, Ctrl+C and /exit end it with 0.
    """
    out = out or sys.stdout
    err = err or sys.stderr

    def say(text: str) -> None:
        print(text, file=out, flush=True)

    def warn(text: str) -> None:
        print(f"{DIAGNOSTIC_PREFIX}{text}", file=err, flush=True)

    logger.info("Console connector started.")
    say("Type your request. Use /help for commands, /exit to quit.")

    while True:
        try:
            user_input = input_fn(PROMPT).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            say("")
            return 0
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            say("")
            return 0

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            return 0

        cmd_response = command_registry.handle(state, session, user_input)
        if cmd_response is not None:
            say(cmd_response)
            continue

        answered = False
        try:
            for event in run_query(session, state.tools, user_input):
                if isinstance(event, AssistantOutput):
                    say(f"{ASSISTANT_PREFIX}{event.text}")
                    answered = True
                elif isinstance(event, Diagnostic):
                    warn(event.text)
                elif isinstance(event, ModelReply):
                    if state.debug:
                        label = "AI Follow-up" if event.follow_up else "AI Response"
                        say(f"\n{label}:\n{event.text}")
                elif isinstance(event, ToolObservation):
                    if state.debug:
                        say(f"Tool observation: {event.line}")
        except TransportError as e:
            logger.error("Model transport failed: %s", e)
            warn(f"Fatal: {e}")
            return 1

        if not answered:
            warn("No output from the model for this request.")
