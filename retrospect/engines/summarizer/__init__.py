"""Summarizer engine — monthly retrospective generation."""

from retrospect.engines.summarizer.llm_client import DEFAULT_MODEL, LLMClient, TextGenerator
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

__all__ = [
    "DEFAULT_MODEL",
    "LLMClient",
    "NO_ACTIVITY_SUMMARY",
    "RETROSPECT_SYSTEM_PROMPT",
    "SUMMARY_ERROR_MESSAGE",
    "Summarizer",
    "TextGenerator",
    "build_monthly_prompt",
    "format_activity_line",
]
