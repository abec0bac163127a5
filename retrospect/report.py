"""Markdown rendering for the yearly retrospective."""

from __future__ import annotations

from pathlib import Path

from retrospect.engines.activity_collector.models import MonthResult


def render_report(year: int, username: str, results: list[MonthResult]) -> str:
    """Return the full markdown document; months without a summary are skipped."""
    parts = [f"# {year}년 {username} 회고록\n\n"]
    for result in sorted(results, key=lambda r: r.month):
        if result.summary is None:
            continue
        parts.append(f"## {year}년 {result.month}월\n{result.summary}\n\n")
    return "".join(parts)


def default_output_path(year: int, username: str) -> str:
    return f"summary-{year}-{username}.md"


def write_report(path: str | Path, content: str) -> Path:
    target = Path(path)
    target.write_text(content, encoding="utf-8")
    return target
