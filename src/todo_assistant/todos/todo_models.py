# src/todo_assistant/todos/todo_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any


def _iso_utc(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=UTC).replace(microsecond=0).isoformat()


@dataclass(slots=True)
class Task:
    """A single to-do item. `id` is assigned by the store and never changes."""

    id: int
    text: str
    created_at: float
    updated_at: float

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly shape shown to the model (column names, ISO timestamps)."""
        return {
            "id": self.id,
            "todo": self.text,
            "created_at": _iso_utc(self.created_at),
            "updated_at": _iso_utc(self.updated_at),
        }
