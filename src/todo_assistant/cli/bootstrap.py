# src/todo_assistant/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- validates settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (LLM, store, tools),
- creates the chat session handle owned by the REPL.
"""

from __future__ import annotations

import logging

from ..config import Settings, get_settings
from ..core.ports import LLMClient
from ..core.prompt import build_system_prompt
from ..core.session import ChatSession
from ..core.state import AppState
from ..llm.client import OpenRouterLLMClient
from ..todos.todo_store import TodoStore
from ..todos.todo_tools import build_todo_tools

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, llm: LLMClient | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the LLM client) injectable makes the app easier to test
    and avoids hidden global config reads. Raises ConfigError / StoreError when
    the app cannot start.
    """
    if settings is None:
        settings = get_settings()

    if llm is None:
        settings.validate()
        llm = OpenRouterLLMClient(settings)

    _ensure_local_dirs(settings)

    store = TodoStore(settings.db_path)
    tools = build_todo_tools(store)
    tools.validate()
    logger.info("Tools ready: %s", ", ".join(tools.names()))

    return AppState(
        settings=settings,
        llm=llm,
        todo_store=store,
        tools=tools,
        debug=bool(getattr(settings, "debug", False)),
    )


def create_session(state: AppState) -> ChatSession:
    tools_description = state.tools.describe()
    return ChatSession(
        state.llm,
        lambda: build_system_prompt(tools_description),
        max_history_messages=int(getattr(state.settings, "max_history_messages", 80)),
    )
