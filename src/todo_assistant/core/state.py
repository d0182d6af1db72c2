# src/todo_assistant/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..todos.todo_tools import ToolRegistry
from .ports import LLMClient, TodoRepo


@dataclass
class AppState:
    """
    Long-lived collaborators wired at startup.

    The chat session is deliberately not stored here: it is created by main()
    and passed explicitly into the REPL.
    """

    settings: Any
    llm: LLMClient
    todo_store: TodoRepo
    tools: ToolRegistry
    debug: bool = False
