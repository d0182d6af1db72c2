# src/todo_assistant/todos/todo_tools.py

"""
Tools the model may call, keyed by a closed enumeration of wire names.

Every tool takes one string (the "input" field of an action directive) and
returns a JSON-serialisable value that becomes the observation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..core.ports import TodoRepo
from ..errors import ConfigError, ToolInputError, UnknownToolError

logger = logging.getLogger(__name__)

ToolFn = Callable[[str], Any]

# SQLite INTEGER is a signed 64-bit value.
_MAX_TASK_ID = 2**63 - 1


class ToolName(StrEnum):
    """Wire names the model uses in {"type": "action", "function": ...}."""

    GET_ALL_TODOS = "getAllTodos"
    CREATE_TODO = "createTodo"
    DELETE_TODO = "deleteTodo"
    SEARCH_TODO = "searchTodo"

    @classmethod
    def parse(cls, raw: str) -> ToolName:
        try:
            return cls(raw)
        except ValueError:
            raise UnknownToolError(raw) from None


@dataclass(frozen=True, slots=True)
class ToolSpec:
    name: ToolName
    fn: ToolFn
    signature: str
    help_text: str


class ToolRegistry:
    """Explicit ToolName -> callable mapping (plus the text the preamble shows the model)."""

    def __init__(self) -> None:
        self._tools: dict[ToolName, ToolSpec] = {}

    def register(self, name: ToolName, fn: ToolFn, *, signature: str, help_text: str) -> None:
        self._tools[name] = ToolSpec(name=name, fn=fn, signature=signature, help_text=help_text)

    def validate(self) -> None:
        """Every ToolName must have a callable; checked once at startup."""
        missing = [n.value for n in ToolName if n not in self._tools]
        if missing:
            raise ConfigError(f"Tool registry is incomplete, missing: {', '.join(missing)}")
        for spec in self._tools.values():
            if not callable(spec.fn):
                raise ConfigError(f"Tool {spec.name.value} is not callable")

    def get(self, name: str) -> ToolSpec:
        tool = ToolName.parse(name)
        spec = self._tools.get(tool)
        if spec is None:
            raise UnknownToolError(name)
        return spec

    def invoke(self, name: str, raw_input: str) -> Any:
        spec = self.get(name)
        logger.info("Tool call %s input=%r", spec.name.value, raw_input[:200])
        result = spec.fn(raw_input)
        logger.debug("Tool result %s -> %r", spec.name.value, result)
        return result

    def names(self) -> list[str]:
        return [n.value for n in ToolName if n in self._tools]

    def describe(self) -> str:
        """Tool list for the instruction preamble."""
        return "\n".join(
            f"- {spec.signature}: {spec.help_text}"
            for n in ToolName
            if (spec := self._tools.get(n)) is not None
        )


def _parse_task_id(raw: str) -> int:
    s = (raw or "").strip().strip("\"'")
    if s.startswith("#"):
        s = s[1:]
    try:
        task_id = int(s)
    except ValueError:
        raise ToolInputError(f"deleteTodo expects a numeric id, got {raw!r}") from None
    if task_id <= 0 or task_id > _MAX_TASK_ID:
        raise ToolInputError(f"deleteTodo expects a positive 64-bit id, got {raw!r}")
    return task_id


def _clean_text(tool: ToolName, raw: str) -> str:
    text = (raw or "").strip()
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        raise ToolInputError(f"{tool.value} got text that is not valid UTF-8") from None
    return text


def build_todo_tools(store: TodoRepo) -> ToolRegistry:
    """Wire the four to-do tools onto `store`."""

    def get_all_todos(_raw: str) -> list[dict[str, Any]]:
        return [t.to_dict() for t in store.list_all()]

    def create_todo(raw: str) -> int:
        text = _clean_text(ToolName.CREATE_TODO, raw)
        if not text:
            raise ToolInputError("createTodo expects a non-empty todo text")
        return store.create(text)

    def delete_todo(raw: str) -> dict[str, Any]:
        task_id = _parse_task_id(raw)
        return {"id": task_id, "deleted": store.delete(task_id)}

    def search_todo(raw: str) -> list[dict[str, Any]]:
        return [t.to_dict() for t in store.search(_clean_text(ToolName.SEARCH_TODO, raw))]

    registry = ToolRegistry()
    registry.register(
        ToolName.GET_ALL_TODOS,
        get_all_todos,
        signature="getAllTodos()",
        help_text="Return all the Todos from Database",
    )
    registry.register(
        ToolName.CREATE_TODO,
        create_todo,
        signature="createTodo(todo: string)",
        help_text="Create a new Todo in the Database and return the ID of the created todo",
    )
    registry.register(
        ToolName.DELETE_TODO,
        delete_todo,
        signature="deleteTodo(id: string)",
        help_text="Delete the todo with the given ID from the Database",
    )
    registry.register(
        ToolName.SEARCH_TODO,
        search_todo,
        signature="searchTodo(query: string)",
        help_text="Search for all todos whose text contains the query (case-insensitive)",
    )
    return registry
