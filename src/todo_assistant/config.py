# src/todo_assistant/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time; they are checked by Settings.validate() at startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigError

ENV_PREFIX = "TODO"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _is_sqlite_url(url: str) -> bool:
    raw = url.strip()
    return "://" not in raw or raw.lower().startswith("sqlite://")


def db_path_from_url(url: str) -> Path:
    """
    Resolve a DATABASE_URL into a SQLite file path.

    Accepted forms:
    - sqlite:///relative/path.sqlite3
    - sqlite:////absolute/path.sqlite3
    - a bare filesystem path
    """
    raw = url.strip()
    if "://" not in raw:
        return Path(raw).expanduser()

    scheme, _, rest = raw.partition("://")
    if scheme.lower() != "sqlite":
        raise ConfigError(
            f"Unsupported DATABASE_URL scheme {scheme!r}. Only sqlite:/// URLs are supported."
        )
    # sqlite:///foo.db -> rest == "/foo.db" (relative), sqlite:////tmp/foo.db -> "//tmp/foo.db"
    path = rest[1:] if rest.startswith("/") else rest
    if not path:
        raise ConfigError("DATABASE_URL has no database path.")
    return Path(path).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    debug: bool

    # ---- LLM / OpenRouter ----
    openrouter_api_key: str | None
    openrouter_base_url: str
    llm_model: str
    extra_headers: dict[str, str]
    llm_connect_timeout: float
    llm_read_timeout: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    database_url: str | None

    # ---- Conversation tuning ----
    max_history_messages: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo-assistant") or "todo-assistant"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")
        debug = _env_bool(_k("DEBUG"), False)

        openrouter_api_key = _first_env(
            _k("OPENROUTER_API_KEY"), "OPENROUTER_API_KEY", "OPENAI_API_KEY", default=None
        )
        openrouter_base_url = _env(_k("OPENROUTER_BASE_URL"), "https://openrouter.ai/api/v1")
        llm_model = _env(_k("LLM_MODEL"), "google/gemini-2.0-flash-001").strip()

        http_referer = _env(_k("HTTP_REFERER"), "https://example.com")
        title = _env(_k("APP_TITLE"), app_name)
        extra_headers = {
            "HTTP-Referer": http_referer,
            "X-Title": title,
        }

        connect_timeout = _env_float(_k("LLM_CONNECT_TIMEOUT_SECONDS"), 5.0)
        read_timeout = _env_float(_k("LLM_READ_TIMEOUT_SECONDS"), 60.0)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "todos.sqlite3")
        # Unsupported URLs are kept as-is and rejected by validate(), not at import time.
        database_url = _first_env("DATABASE_URL", default=None)
        if database_url and _is_sqlite_url(database_url):
            try:
                db_path = db_path_from_url(database_url)
            except ConfigError:
                pass

        max_history_messages = _env_int(_k("MAX_HISTORY_MESSAGES"), 80)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            debug=debug,
            openrouter_api_key=openrouter_api_key,
            openrouter_base_url=openrouter_base_url,
            llm_model=llm_model,
            extra_headers=extra_headers,
            llm_connect_timeout=connect_timeout,
            llm_read_timeout=read_timeout,
            data_dir=data_dir,
            db_path=db_path,
            database_url=database_url,
            max_history_messages=max_history_messages,
        )

    def validate(self) -> None:
        """Fail fast on configuration the app cannot run without."""
        if not self.openrouter_api_key or not self.openrouter_api_key.strip():
            raise ConfigError(
                "LLM API key is not set. Set TODO_OPENROUTER_API_KEY in your .env."
            )
        if not self.openrouter_base_url.strip():
            raise ConfigError("LLM base URL is not set. Set TODO_OPENROUTER_BASE_URL in your .env.")
        if not self.llm_model:
            raise ConfigError("LLM model is not set. Set TODO_LLM_MODEL in your .env.")
        if self.database_url:
            db_path_from_url(self.database_url)


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
