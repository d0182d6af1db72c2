# tests/fakes.py

from __future__ import annotations

from collections.abc import Iterable

from todo_assistant.core.ports import ChatMessage
from todo_assistant.errors import TransportError


class FakeLLMClient:
    """
    Deterministic LLM client for unit tests.

    - Captures calls for assertions (a copy of the messages + the system prompt)
    - Replies with the scripted texts in order, then with ""
    - Yields each reply in two chunks to exercise chunk joining
    """

    def __init__(self, *replies: str) -> None:
        self.replies = list(replies)
        self.calls: list[tuple[list[ChatMessage], str]] = []

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        self.calls.append((list(messages), system_prompt))
        text = self.replies.pop(0) if self.replies else ""
        mid = len(text) // 2
        yield text[:mid]
        yield text[mid:]

    @property
    def sent_texts(self) -> list[str]:
        """Last user message of every call, i.e. what the session sent."""
        return [msgs[-1]["content"] for msgs, _ in self.calls]


class BrokenLLMClient:
    """LLM client whose transport is down."""

    def __init__(self, message: str = "LLM network/timeout error.") -> None:
        self.message = message
        self.calls = 0

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        self.calls += 1
        raise TransportError(self.message)


class ScriptedInput:
    """Stand-in for input(): returns lines in order, then raises EOFError."""

    def __init__(self, *lines: str) -> None:
        self.lines = list(lines)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)
