# tests/test_llm_client.py

from __future__ import annotations

import dataclasses
from pathlib import Path
from types import SimpleNamespace

import httpx
import openai
import pytest

from todo_assistant.config import Settings
from todo_assistant.errors import ConfigError, TransportError
from todo_assistant.llm.client import OpenRouterLLMClient, friendly_llm_error_message

_REQUEST = httpx.Request("POST", "https://llm.invalid/v1/chat/completions")


def _settings(**overrides) -> Settings:
    base = Settings(
        app_name="todo-test",
        log_level="WARNING",
        debug=False,
        openrouter_api_key="sk-test",
        openrouter_base_url="https://llm.invalid/v1",
        llm_model="fake/model",
        extra_headers={"X-Title": "todo-test"},
        llm_connect_timeout=1.0,
        llm_read_timeout=1.0,
        data_dir=Path("."),
        db_path=Path("todos.sqlite3"),
        database_url=None,
        max_history_messages=80,
    )
    return dataclasses.replace(base, **overrides)


def _chunk(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


class _FakeStream:
    def __init__(self, chunks: list[SimpleNamespace]) -> None:
        self._chunks = chunks
        self.closed = False

    def __iter__(self):
        return iter(self._chunks)

    def close(self) -> None:
        self.closed = True


class _FakeCompletions:
    def __init__(self, result) -> None:
        self.result = result
        self.kwargs: dict | None = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def _fake_openai(result) -> tuple[SimpleNamespace, _FakeCompletions]:
    completions = _FakeCompletions(result)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def test_stream_chat_yields_content_and_sends_system_prompt_first() -> None:
    stream = _FakeStream([_chunk("Hel"), _chunk(None), SimpleNamespace(choices=[]), _chunk("lo")])
    fake, completions = _fake_openai(stream)
    client = OpenRouterLLMClient(_settings(), client=fake)

    text = "".join(client.stream_chat([{"role": "user", "content": "hi"}], "PREAMBLE"))

    assert text == "Hello"
    assert stream.closed
    assert completions.kwargs is not None
    assert completions.kwargs["model"] == "fake/model"
    assert completions.kwargs["stream"] is True
    assert completions.kwargs["messages"] == [
        {"role": "system", "content": "PREAMBLE"},
        {"role": "user", "content": "hi"},
    ]
    assert completions.kwargs["extra_headers"] == {"X-Title": "todo-test"}


def test_connection_errors_become_transport_errors() -> None:
    fake, _ = _fake_openai(openai.APIConnectionError(request=_REQUEST))
    client = OpenRouterLLMClient(_settings(), client=fake)

    with pytest.raises(TransportError, match="network/timeout"):
        list(client.stream_chat([], "P"))


def test_auth_errors_become_transport_errors() -> None:
    err = openai.AuthenticationError(
        "bad key", response=httpx.Response(401, request=_REQUEST), body=None
    )
    fake, _ = _fake_openai(err)
    client = OpenRouterLLMClient(_settings(), client=fake)

    with pytest.raises(TransportError, match="authentication failed"):
        list(client.stream_chat([], "P"))


def test_missing_key_is_a_config_error() -> None:
    with pytest.raises(ConfigError):
        OpenRouterLLMClient(_settings(openrouter_api_key=""))


def test_friendly_messages() -> None:
    rate = openai.RateLimitError("slow down", response=httpx.Response(429, request=_REQUEST), body=None)
    missing = openai.NotFoundError("no model", response=httpx.Response(404, request=_REQUEST), body=None)
    assert "rate-limited" in friendly_llm_error_message(rate)
    assert "TODO_LLM_MODEL" in friendly_llm_error_message(missing)
    assert friendly_llm_error_message(ValueError("")) == "LLM error (ValueError)."
