# src/todo_assistant/core/ports.py

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the LLM provider and storage swappable and makes testing easier.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class LLMClient(Protocol):
    """Streaming chat completion client (OpenAI/OpenRouter-compatible)."""

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]: ...


class TodoRepo(Protocol):
    def list_all(self) -> list[Any]: ...
    def create(self, text: str) -> int: ...
    def delete(self, task_id: int) -> bool: ...
    def search(self, substring: str) -> list[Any]: ...
    def count(self) -> int: ...
