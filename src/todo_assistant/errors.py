# src/todo_assistant/errors.py

"""
Error taxonomy.

Recoverable errors (StoreError, ParseError, UnknownToolError, ToolInputError) are
contained at the smallest scope (one line, one action, one query).
TransportError is the only one allowed to end the process.
"""

from __future__ import annotations


class TodoAssistantError(Exception):
    """Base class for all app errors."""


class ConfigError(TodoAssistantError):
    """Invalid or incomplete startup configuration."""


class StoreError(TodoAssistantError):
    """The task store is unreachable or rejected an operation."""


class ParseError(TodoAssistantError):
    """
    One protocol line could not be decoded into a directive.

    The parser yields instances of this class as values; it never raises them
    out of a batch.
    """

    def __init__(self, reason: str, *, line: str = "", lineno: int = 0) -> None:
        super().__init__(reason)
        self.reason = reason
        self.line = line
        self.lineno = lineno

    def __str__(self) -> str:
        if self.line:
            return f"{self.reason} (line {self.lineno}: {self.line[:200]})"
        return self.reason


class UnknownToolError(TodoAssistantError):
    """An action named a tool that is not in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ToolInputError(TodoAssistantError):
    """A tool received input it cannot act on (e.g. a non-numeric id)."""


class TransportError(TodoAssistantError):
    """Talking to the model failed. Fatal for the whole process."""
