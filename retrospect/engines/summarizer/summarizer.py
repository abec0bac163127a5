"""Summarizer engine — one month of activity in, retrospective text out."""

from __future__ import annotations

import structlog

from retrospect.engines.activity_collector.models import Activity
from retrospect.engines.summarizer.llm_client import TextGenerator
from retrospect.engines.summarizer.prompts import build_monthly_prompt

log = structlog.get_logger("retrospect.engine")

NO_ACTIVITY_SUMMARY = "활동 내역이 없습니다."
SUMMARY_ERROR_MESSAGE = "요약 생성 중 오류가 발생했습니다. (API Error)"


class Summarizer:
    """Turns a month's activities into prose via a :class:`TextGenerator`.

    Never raises: an empty month gets :data:`NO_ACTIVITY_SUMMARY` without
    touching the generator, and a failed generation gets
    :data:`SUMMARY_ERROR_MESSAGE`.
    """

    def __init__(self, generator: TextGenerator) -> None:
        self._generator = generator

    async def summarize(self, month: int, activities: list[Activity]) -> str:
        if not activities:
            return NO_ACTIVITY_SUMMARY

        prompt = build_monthly_prompt(month, activities)
        try:
            return await self._generator.generate(prompt)
        except Exception as exc:
            log.error(
                "summarizer.failed",
                month=month,
                activities=len(activities),
                error=f"{type(exc).__name__}: {exc}",
            )
            return SUMMARY_ERROR_MESSAGE
