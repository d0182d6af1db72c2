# src/todo_assistant/core/session.py

"""
Stateful multi-turn exchange with the model.

One ChatSession is created at startup, passed explicitly into every REPL
iteration, and closed on exit. The instruction preamble is sent as the system
prompt with every request; the rest of the conversation is kept in `history`.

History is updated only after a complete reply, so a failed request never
leaves a dangling user turn behind.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..errors import TransportError
from .ports import ChatMessage, LLMClient

logger = logging.getLogger(__name__)

SystemPrompt = str | Callable[[], str]


class ChatSession:
    def __init__(
        self,
        llm: LLMClient,
        system_prompt: SystemPrompt,
        *,
        max_history_messages: int = 80,
    ) -> None:
        self._llm = llm
        self._system_prompt = system_prompt
        self._max_history = max(2, int(max_history_messages))
        self.history: list[ChatMessage] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def system_prompt(self) -> str:
        sp = self._system_prompt
        return sp() if callable(sp) else sp

    def send(self, text: str) -> str:
        """Send one user turn and return the full model reply."""
        if self._closed:
            raise TransportError("Chat session is closed.")

        user_msg: ChatMessage = {"role": "user", "content": text}
        messages = [*self.history, user_msg]

        try:
            pieces = self._llm.stream_chat(messages, self.system_prompt())
            reply = "".join(p for p in pieces if p)
        except TransportError:
            raise
        except Exception as e:
            # Anything escaping the client is a broken transport as far as the loop is concerned.
            raise TransportError(f"LLM request failed: {e}") from e

        self.history.append(user_msg)
        self.history.append({"role": "assistant", "content": reply})
        self._trim()
        logger.debug("Session turn done (history=%d messages, reply=%d chars)", len(self.history), len(reply))
        return reply

    def _trim(self) -> None:
        overflow = len(self.history) - self._max_history
        if overflow > 0:
            # Drop whole user/assistant pairs from the front.
            overflow += overflow % 2
            del self.history[:overflow]

    def reset(self) -> None:
        self.history.clear()
        logger.info("Session history cleared.")

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self.history.clear()
            logger.debug("Session closed.")
