# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_assistant.core.prompt import build_system_prompt
from todo_assistant.core.session import ChatSession
from todo_assistant.core.state import AppState
from todo_assistant.todos.todo_store import TodoStore
from todo_assistant.todos.todo_tools import ToolRegistry, build_todo_tools

from .fakes import FakeLLMClient


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        data_dir=tmp_path,
        db_path=tmp_path / "todos.sqlite3",
        llm_model="fake/model",
        max_history_messages=80,
        debug=False,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TodoStore:
    return TodoStore(settings.db_path)


@pytest.fixture()
def tools(store: TodoStore) -> ToolRegistry:
    return build_todo_tools(store)


@pytest.fixture()
def llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture()
def state(settings: SimpleNamespace, store: TodoStore, tools: ToolRegistry, llm: FakeLLMClient) -> AppState:
    """
    AppState wired with a fake LLM.

    NOTE: We keep the real SQLite TodoStore here because its correctness
    is part of what we want to test.
    """
    return AppState(settings=settings, llm=llm, todo_store=store, tools=tools)


@pytest.fixture()
def session(llm: FakeLLMClient, tools: ToolRegistry) -> ChatSession:
    return ChatSession(llm, build_system_prompt(tools.describe()))
