"""Thin async wrapper around litellm.acompletion()."""

from __future__ import annotations

import time
from typing import Any, Protocol

import litellm
import structlog

from retrospect.engines.summarizer.prompts import RETROSPECT_SYSTEM_PROMPT
from retrospect.exceptions import ServiceError

log = structlog.get_logger("retrospect.engine")

DEFAULT_MODEL = "gemini/gemini-3-flash-preview"
_GENERATION_TIMEOUT = 120.0  # seconds


class TextGenerator(Protocol):
    """Text in, text out. Fails with :class:`ServiceError`."""

    async def generate(self, prompt: str) -> str: ...


class LLMClient:
    """Async-only wrapper around ``litellm.acompletion()``.

    The system instruction is fixed for the lifetime of the client and
    sent ahead of every prompt.

    Usage::

        client = LLMClient(api_key="...")
        text = await client.generate("다음은 3월의 Github 활동 내역입니다. ...")
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        system: str = RETROSPECT_SYSTEM_PROMPT,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        timeout: float = _GENERATION_TIMEOUT,
    ) -> None:
        self.model = model
        self._api_key = api_key
        self._system = system
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout

    async def generate(self, prompt: str) -> str:
        """Send *prompt* as the user message and return the reply text."""
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self._system},
                {"role": "user", "content": prompt},
            ],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
            "timeout": self._timeout,
            "api_key": self._api_key,
        }

        t0 = time.monotonic()
        try:
            raw = await litellm.acompletion(**kwargs)
        except Exception as exc:
            raise ServiceError(f"{type(exc).__name__}: {exc}", model=self.model) from exc
        latency_ms = int((time.monotonic() - t0) * 1000)

        content = raw.choices[0].message.content if raw.choices else None
        if not content:
            raise ServiceError("empty completion", model=self.model)

        usage = raw.usage or litellm.Usage()
        log.debug(
            "llm.completion",
            model=self.model,
            latency_ms=latency_ms,
            input_tokens=usage.prompt_tokens or 0,
            output_tokens=usage.completion_tokens or 0,
        )
        return content
