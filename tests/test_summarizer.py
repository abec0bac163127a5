"""Tests for the Summarizer, prompt building and the litellm client."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from retrospect.engines.activity_collector.models import Activity
from retrospect.engines.summarizer.llm_client import LLMClient
from retrospect.engines.summarizer.prompts import (
    RETROSPECT_SYSTEM_PROMPT,
    build_monthly_prompt,
    format_activity_line,
)
from retrospect.engines.summarizer.summarizer import (
    NO_ACTIVITY_SUMMARY,
    SUMMARY_ERROR_MESSAGE,
    Summarizer,
)
from retrospect.exceptions import ServiceError


def _activity(kind="commit", title="fix bug", repo="widget") -> Activity:
    return Activity(
        id="abc",
        kind=kind,
        timestamp=datetime(2024, 3, 4, tzinfo=timezone.utc),
        title=title,
        url=f"https://github.com/octo/{repo}/commit/abc",
        repository=repo,
    )


class FakeGenerator:
    def __init__(self, reply="요약", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


# ── prompts ───────────────────────────────────────────────────────────────


class TestPrompts:
    def test_commit_line(self):
        assert format_activity_line(_activity()) == "- [COMMIT] fix bug (Repo: widget)"

    def test_kind_labels_upper_cased(self):
        assert format_activity_line(_activity("pr", "Add cache")).startswith("- [PR] Add cache")
        assert format_activity_line(_activity("issue", "Crash")).startswith("- [ISSUE] Crash")

    def test_monthly_prompt_lists_every_activity(self):
        prompt = build_monthly_prompt(
            3, [_activity(), _activity("issue", "Crash on start", "gizmo")]
        )
        assert "3월" in prompt
        assert "[COMMIT] fix bug (Repo: widget)" in prompt
        assert "- [ISSUE] Crash on start (Repo: gizmo)" in prompt
        assert prompt.count("\n- [") == 2


# ── Summarizer ────────────────────────────────────────────────────────────


class TestSummarizer:
    @pytest.mark.anyio
    async def test_single_commit_prompt(self):
        generator = FakeGenerator("3월 요약")
        summary = await Summarizer(generator).summarize(3, [_activity()])

        assert summary == "3월 요약"
        assert len(generator.prompts) == 1
        assert "[COMMIT] fix bug (Repo: widget)" in generator.prompts[0]

    @pytest.mark.anyio
    async def test_empty_month_never_calls_generator(self):
        generator = FakeGenerator()
        summary = await Summarizer(generator).summarize(5, [])

        assert summary == NO_ACTIVITY_SUMMARY
        assert generator.prompts == []

    @pytest.mark.anyio
    async def test_generator_failure_becomes_placeholder(self):
        generator = FakeGenerator(error=ServiceError("quota exceeded"))
        summary = await Summarizer(generator).summarize(3, [_activity()])

        assert summary == SUMMARY_ERROR_MESSAGE

    @pytest.mark.anyio
    async def test_unexpected_error_becomes_placeholder(self):
        generator = FakeGenerator(error=RuntimeError("socket closed"))
        assert await Summarizer(generator).summarize(3, [_activity()]) == SUMMARY_ERROR_MESSAGE


# ── LLMClient ─────────────────────────────────────────────────────────────


def _completion(content):
    raw = MagicMock()
    raw.choices = [MagicMock()]
    raw.choices[0].message.content = content
    raw.usage.prompt_tokens = 12
    raw.usage.completion_tokens = 34
    return raw


class TestLLMClient:
    @pytest.mark.anyio
    async def test_sends_system_instruction_and_prompt(self):
        client = LLMClient("key-123", model="gemini/test-model")

        with patch(
            "retrospect.engines.summarizer.llm_client.litellm.acompletion",
            new_callable=AsyncMock,
            return_value=_completion("요약 결과"),
        ) as mock_completion:
            text = await client.generate("활동 내역")

        assert text == "요약 결과"
        kwargs = mock_completion.call_args.kwargs
        assert kwargs["model"] == "gemini/test-model"
        assert kwargs["api_key"] == "key-123"
        assert kwargs["timeout"] == 120.0
        assert kwargs["messages"] == [
            {"role": "system", "content": RETROSPECT_SYSTEM_PROMPT},
            {"role": "user", "content": "활동 내역"},
        ]

    @pytest.mark.anyio
    async def test_provider_error_wrapped(self):
        client = LLMClient("key")

        with patch(
            "retrospect.engines.summarizer.llm_client.litellm.acompletion",
            new_callable=AsyncMock,
            side_effect=RuntimeError("503 from provider"),
        ):
            with pytest.raises(ServiceError, match="503 from provider"):
                await client.generate("prompt")

    @pytest.mark.anyio
    async def test_empty_completion_is_an_error(self):
        client = LLMClient("key")

        with patch(
            "retrospect.engines.summarizer.llm_client.litellm.acompletion",
            new_callable=AsyncMock,
            return_value=_completion(None),
        ):
            with pytest.raises(ServiceError):
                await client.generate("prompt")
