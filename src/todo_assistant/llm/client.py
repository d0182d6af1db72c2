# src/todo_assistant/llm/client.py

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import Any

import httpx
import openai
from openai import OpenAI

from ..config import Settings
from ..core.ports import ChatMessage
from ..errors import ConfigError, TransportError

logger = logging.getLogger(__name__)


def _is_auth_error(exc: Exception) -> bool:
    return isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError))


def _is_rate_limit_error(exc: Exception) -> bool:
    return isinstance(exc, openai.RateLimitError)


def _is_connection_error(exc: Exception) -> bool:
    # APITimeoutError is a subclass of APIConnectionError.
    return isinstance(exc, (openai.APIConnectionError, httpx.TimeoutException, httpx.NetworkError))


def _is_not_found_error(exc: Exception) -> bool:
    return isinstance(exc, openai.NotFoundError)


def friendly_llm_error_message(err: Exception) -> str:
    """Map an SDK error onto a short message for the console."""
    if _is_auth_error(err):
        return "LLM authentication failed. Check your API key (TODO_OPENROUTER_API_KEY)."
    if _is_rate_limit_error(err):
        return "LLM is rate-limited. Try again later."
    if _is_not_found_error(err):
        return "LLM model not found. Check TODO_LLM_MODEL."
    if _is_connection_error(err):
        return "LLM network/timeout error. Check your connection or TODO_OPENROUTER_BASE_URL."
    msg = str(err).strip()
    return msg or f"LLM error ({err.__class__.__name__})."


def _close_stream(stream: Any) -> None:
    """Close a streaming response; not every SDK stream object exposes close()."""
    close = getattr(stream, "close", None)
    if callable(close):
        close()


class OpenRouterLLMClient:
    """
    OpenAI-compatible streaming chat client (OpenRouter by default).

    - No secrets are read at import time; the constructor raises ConfigError
      when the key is missing.
    - One model, one request per call: automatic SDK retries are disabled.
    - Every SDK failure is re-raised as TransportError.
    """

    def __init__(self, settings: Settings, *, client: OpenAI | None = None) -> None:
        api_key = (settings.openrouter_api_key or "").strip()
        base_url = (settings.openrouter_base_url or "").strip()
        if not api_key:
            raise ConfigError("LLM API key is not set. Set TODO_OPENROUTER_API_KEY in your .env.")
        if not base_url:
            raise ConfigError("LLM base URL is not set. Set TODO_OPENROUTER_BASE_URL in your .env.")

        self.model = settings.llm_model
        self._headers = dict(settings.extra_headers or {})
        self._client = client or OpenAI(
            base_url=base_url,
            api_key=api_key,
            timeout=httpx.Timeout(
                connect=settings.llm_connect_timeout,
                read=settings.llm_read_timeout,
                write=10.0,
                pool=settings.llm_connect_timeout,
            ),
            max_retries=0,
        )

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        """Stream the reply as text chunks. Raises TransportError on any SDK failure."""
        logger.info("LLM: request model=%s messages=%d", self.model, len(messages) + 1)
        t0 = time.monotonic()
        stream = None
        used_any = False

        try:
            stream = self._client.chat.completions.create(
                model=self.model,
                stream=True,
                extra_headers=self._headers or None,
                messages=[{"role": "system", "content": system_prompt}, *messages],
            )

            for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta
                content = getattr(delta, "content", None) if delta is not None else None
                if content:
                    if not used_any:
                        logger.info("LLM: first token from model=%s (%.2fs)", self.model, time.monotonic() - t0)
                    used_any = True
                    yield content

        except openai.OpenAIError as e:
            logger.warning("LLM: %s on model=%s", e.__class__.__name__, self.model)
            raise TransportError(friendly_llm_error_message(e)) from e
        except httpx.HTTPError as e:
            logger.warning("LLM: transport error %s on model=%s", e.__class__.__name__, self.model)
            raise TransportError(friendly_llm_error_message(e)) from e
        finally:
            if stream is not None:
                _close_stream(stream)

        if not used_any:
            logger.info("LLM: model=%s returned no content", self.model)
        logger.debug("LLM: completed model=%s in %.2fs", self.model, time.monotonic() - t0)
