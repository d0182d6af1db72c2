# src/todo_assistant/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..core.session import ChatSession
from ..core.state import AppState
from ..errors import StoreError

CommandHandler = Callable[[AppState, ChatSession, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /todos, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, session: ChatSession, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, session, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit (also /quit, Ctrl+D).")
        return "\n".join(lines)


registry = CommandRegistry()


def _fmt_local(ts: float) -> str:
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M")


def cmd_help(state: AppState, session: ChatSession, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, session: ChatSession, args: list[str]) -> str:
    model = str(getattr(state.settings, "llm_model", "?"))
    db_path = str(getattr(state.settings, "db_path", "?"))
    try:
        total: int | str = state.todo_store.count()
    except StoreError as e:
        logger.warning("count() failed in /status: %s", e)
        total = "unavailable"
    return (
        "Status:\n"
        f"  Model: {model}\n"
        f"  Database: {db_path}\n"
        f"  Todos: {total}\n"
        f"  Conversation: {len(session.history)} messages\n"
        f"  Debug: {'ON' if state.debug else 'OFF'}"
    )


def cmd_todos(state: AppState, session: ChatSession, args: list[str]) -> str:
    """
    /todos          -> list every todo
    /todos <text>   -> list todos containing <text>
    """
    term = " ".join(args).strip()
    try:
        todos = state.todo_store.search(term) if term else state.todo_store.list_all()
    except StoreError as e:
        return f"Store error: {e}"

    if not todos:
        return f"No todos matching {term!r}." if term else "No todos yet."

    lines = [f"Todos matching {term!r}:" if term else "Todos:"]
    for t in todos:
        lines.append(f"  #{t.id} {t.text}  ({_fmt_local(t.created_at)})")
    return "\n".join(lines)


def cmd_reset(state: AppState, session: ChatSession, args: list[str]) -> str:
    session.reset()
    return "Conversation history cleared."


def cmd_debug(state: AppState, session: ChatSession, args: list[str]) -> str:
    """
    /debug        -> show status
    /debug on     -> print raw model replies and observations
    /debug off    -> hide them
    """
    if not args:
        return f"Debug is currently {'ON' if state.debug else 'OFF'}. Use /debug on or /debug off."

    arg = args[0].lower()
    if arg in ("on", "1", "true", "yes"):
        state.debug = True
        return "Debug ON. Raw model replies will be shown."
    if arg in ("off", "0", "false", "no"):
        state.debug = False
        return "Debug OFF."
    return "Usage: /debug on or /debug off."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show model, database and conversation size.")
registry.register("todos", cmd_todos, help_text="List todos without asking the model: /todos [text].")
registry.register("reset", cmd_reset, help_text="Forget the conversation so far.")
registry.register("debug", cmd_debug, help_text="Show raw model replies: /debug on | /debug off.")
