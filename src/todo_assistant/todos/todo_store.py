# src/todo_assistant/todos/todo_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from collections.abc import Iterator
from pathlib import Path

from ..errors import StoreError
from .todo_models import Task

logger = logging.getLogger(__name__)

_LIKE_ESCAPE = "\\"


def _casefold(value: object) -> object:
    return value.casefold() if isinstance(value, str) else value


def _like_pattern(term: str) -> str:
    """Wrap `term` into a %term% LIKE pattern, matching %, _ and \\ literally."""
    escaped = (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


class TodoStore:
    """
    SQLite to-do store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Each method opens its own SQLite connection, so every call is an
    independent, atomic operation. sqlite3 errors surface as StoreError.
    """

    def __init__(self, db_path: str | Path = "todos.sqlite3") -> None:
        self._db_path = Path(db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create database directory for {self._db_path}: {e}") from e
        self._ensure_schema()
        logger.info("TodoStore ready db=%s total=%s", self._db_path, self.count())

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        # SQLite lower() only folds ASCII; search uses Python casefold on both sides.
        conn.create_function("casefold", 1, _casefold, deterministic=True)
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    @contextlib.contextmanager
    def _connect(self, op: str) -> Iterator[sqlite3.Connection]:
        """Open a connection for one operation; translate sqlite errors into StoreError."""
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise StoreError(f"{op}: cannot open database {self._db_path}: {e}") from e
        try:
            yield conn
            conn.commit()
        except (sqlite3.Error, OverflowError, UnicodeError, ValueError) as e:
            # Binding a value SQLite cannot store raises a Python error, not sqlite3.Error.
            logger.warning("TodoStore %s failed: %s", op, e)
            raise StoreError(f"{op} failed: {e}") from e
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._connect("ensure_schema") as conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS todos (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    todo TEXT NOT NULL,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(todos)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE todos ADD COLUMN {name} {decl}")
                logger.info("TodoStore migration: added column %s", name)

            add_col("created_at", "REAL NOT NULL DEFAULT 0")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            text=str(row["todo"] or ""),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    # ---- public API ----

    def count(self) -> int:
        with self._connect("count") as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM todos").fetchone()
            return int(n)

    def list_all(self) -> list[Task]:
        with self._connect("list_all") as conn:
            rows = conn.execute("SELECT * FROM todos ORDER BY id ASC").fetchall()
            return [self._row_to_task(r) for r in rows]

    def create(self, text: str) -> int:
        if not text or not text.strip():
            raise ValueError("todo text is required")

        now = time.time()
        with self._connect("create") as conn:
            cur = conn.execute(
                "INSERT INTO todos(todo, created_at, updated_at) VALUES (?, ?, ?)",
                (text.strip(), now, now),
            )
            rowid = cur.lastrowid
            if rowid is None:
                raise StoreError("SQLite did not return lastrowid for todos insert")
            task_id = int(rowid)
        logger.debug("Todo created id=%s", task_id)
        return task_id

    def delete(self, task_id: int) -> bool:
        """
        Delete a task by id. Returns whether a row was removed.

        Deleting an id that does not exist is a no-op, not an error.
        """
        with self._connect("delete") as conn:
            cur = conn.execute("DELETE FROM todos WHERE id = ?", (int(task_id),))
            removed = cur.rowcount == 1
        logger.debug("Todo delete id=%s removed=%s", task_id, removed)
        return removed

    def search(self, substring: str) -> list[Task]:
        """Tasks whose text contains `substring`, case-insensitively."""
        pattern = _like_pattern(substring.casefold())
        with self._connect("search") as conn:
            rows = conn.execute(
                f"SELECT * FROM todos WHERE casefold(todo) LIKE ? ESCAPE '{_LIKE_ESCAPE}' ORDER BY id ASC",
                (pattern,),
            ).fetchall()
            return [self._row_to_task(r) for r in rows]
