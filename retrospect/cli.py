"""CLI entry point: github-retrospect.

Usage:
    github-retrospect -u octocat -y 2024            # writes summary-2024-octocat.md
    github-retrospect -y 2024 -o recap.md -w 4      # four months at a time
    github-retrospect --no-input                    # fail instead of prompting
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from retrospect.config import AppConfig, ConfigManager, load_config
from retrospect.core.logging import setup_logging
from retrospect.display import MonthProgressDisplay
from retrospect.engines.activity_collector.github_client import GitHubClient
from retrospect.engines.activity_collector.models import MonthResult
from retrospect.engines.activity_collector.source import PaginatedSource
from retrospect.engines.summarizer.llm_client import LLMClient
from retrospect.engines.summarizer.summarizer import Summarizer
from retrospect.exceptions import ConfigError
from retrospect.pipeline import MONTHS, MonthlyPipeline
from retrospect.progress import ProgressCallback
from retrospect.report import default_output_path, render_report, write_report
from retrospect.scheduler import BatchScheduler

_VERBOSITY = {0: None, 1: "INFO"}


async def _generate(
    config: AppConfig,
    *,
    refill: bool = False,
    on_progress: ProgressCallback | None = None,
) -> list[MonthResult]:
    """Run the twelve monthly units against the real GitHub and LLM services."""
    async with GitHubClient(config.github_token) as client:
        pipeline = MonthlyPipeline(
            PaginatedSource(client),
            Summarizer(LLMClient(config.ai_api_key, model=config.model)),
        )
        scheduler = BatchScheduler(config.worker_size, refill=refill)
        return await pipeline.run_year(config.username, config.year, scheduler, on_progress)


def _resolve_config(
    *,
    interactive: bool,
    username: str | None,
    year: int | None,
    workers: int | None,
    model: str | None,
) -> AppConfig:
    if interactive:
        return ConfigManager().load_or_prompt(
            username=username, year=year, worker_size=workers, model=model
        )
    load_dotenv(Path.cwd() / ".env")
    return load_config(username=username, year=year, worker_size=workers, model=model)


@click.command()
@click.option("-u", "--username", default=None, help="GitHub 사용자 이름")
@click.option("-y", "--year", type=int, default=None, help="요약할 연도")
@click.option("-o", "--output", default=None, help="출력 파일 경로")
@click.option("-w", "--workers", type=click.IntRange(min=1), default=None, help="동시 작업 수 (기본값: 6)")
@click.option("--model", default=None, help="litellm 모델 ID")
@click.option(
    "--refill/--no-refill",
    default=False,
    help="한 달 작업이 끝나는 즉시 다음 달 작업을 시작 (기본: 묶음 단위로 대기)",
)
@click.option("--no-input", is_flag=True, help="입력 프롬프트 없이 환경변수만 사용")
@click.option("-v", "--verbose", count=True, help="로그 출력 (-vv: 디버그)")
def main(
    username: str | None,
    year: int | None,
    output: str | None,
    workers: int | None,
    model: str | None,
    refill: bool,
    no_input: bool,
    verbose: int,
) -> None:
    """GitHub 활동 내역을 기반으로 월별 요약 생성."""
    setup_logging(_VERBOSITY.get(verbose, "DEBUG"))

    interactive = not no_input and sys.stdin.isatty()
    try:
        config = _resolve_config(
            interactive=interactive, username=username, year=year, workers=workers, model=model
        )
    except ConfigError as e:
        click.echo(f"오류: {e}", err=True)
        sys.exit(1)

    click.echo(
        f"{config.year}년 {config.username}님에 대한 비동기 요약 생성을 시작합니다... "
        f"(동시 작업 수: {config.worker_size})"
    )

    try:
        with MonthProgressDisplay(MONTHS) as display:
            results = asyncio.run(_generate(config, refill=refill, on_progress=display.on_progress))
        document = render_report(config.year, config.username, results)
        path = write_report(output or default_output_path(config.year, config.username), document)
    except Exception as e:
        click.echo(f"오류 발생: {e}", err=True)
        sys.exit(1)

    click.echo(f"\n✅ 완료! 요약 파일이 생성되었습니다: {path}")
