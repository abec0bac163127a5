"""Run configuration — environment, ``.env`` file and interactive prompts."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from pathlib import Path

import click
import structlog
from dotenv import load_dotenv, set_key

from retrospect.engines.summarizer.llm_client import DEFAULT_MODEL
from retrospect.exceptions import ConfigError

log = structlog.get_logger(__name__)

ENV_USERNAME = "GITHUB_USERNAME"
ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
ENV_AI_API_KEY = "GEMINI_API_KEY"
ENV_YEAR = "YEAR"
ENV_WORKER_SIZE = "WORKER_SIZE"
ENV_MODEL = "RETROSPECT_MODEL"

DEFAULT_WORKER_SIZE = 6

# Text fragment highlights the "API 키 만들기" button on the page.
AI_KEY_URL = (
    "https://aistudio.google.com/app/apikey"
    "#:~:text=API%20%ED%82%A4%20%EB%A7%8C%EB%93%A4%EA%B8%B0"
)

_GH_TIMEOUT = 10  # seconds


@dataclass(frozen=True)
class AppConfig:
    username: str
    year: int
    github_token: str
    ai_api_key: str
    worker_size: int = DEFAULT_WORKER_SIZE
    model: str = DEFAULT_MODEL


def load_config(
    environ: Mapping[str, str] | None = None,
    *,
    username: str | None = None,
    year: int | str | None = None,
    worker_size: int | str | None = None,
    model: str | None = None,
) -> AppConfig:
    """Build an :class:`AppConfig` from explicit values and the environment.

    Explicit arguments win over *environ* (``os.environ`` by default).
    Raises :class:`ConfigError` for anything missing or malformed.
    """
    env = os.environ if environ is None else environ

    username = username or env.get(ENV_USERNAME)
    if not username:
        raise ConfigError(
            "GitHub 사용자 이름을 찾을 수 없습니다. "
            f"CLI 옵션(-u, --username) 또는 .env 파일의 {ENV_USERNAME} 환경변수를 설정해주세요."
        )

    raw_year = year if year is not None else env.get(ENV_YEAR)
    if raw_year is None or raw_year == "":
        raise ConfigError(f"--year 옵션은 필수입니다. (또는 .env 파일에 {ENV_YEAR}를 설정하세요)")

    github_token = env.get(ENV_GITHUB_TOKEN)
    ai_api_key = env.get(ENV_AI_API_KEY)
    if not github_token or not ai_api_key:
        raise ConfigError(
            f".env 파일에 {ENV_GITHUB_TOKEN} 및 {ENV_AI_API_KEY}가 설정되어 있어야 합니다."
        )

    raw_workers = worker_size if worker_size is not None else env.get(ENV_WORKER_SIZE)
    return AppConfig(
        username=username,
        year=parse_year(raw_year),
        github_token=github_token,
        ai_api_key=ai_api_key,
        worker_size=parse_worker_size(raw_workers),
        model=model or env.get(ENV_MODEL) or DEFAULT_MODEL,
    )


def parse_year(value: int | str) -> int:
    text = str(value).strip()
    if len(text) != 4 or not text.isdigit():
        raise ConfigError(f"연도는 4자리 숫자여야 합니다: {value!r}")
    return int(text)


def parse_worker_size(value: int | str | None) -> int:
    if value is None or value == "":
        return DEFAULT_WORKER_SIZE
    try:
        size = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{ENV_WORKER_SIZE}는 양의 정수여야 합니다: {value!r}") from None
    if size < 1:
        raise ConfigError(f"{ENV_WORKER_SIZE}는 양의 정수여야 합니다: {value!r}")
    return size


class ConfigManager:
    """Interactive configuration: detect, prompt, then persist to ``.env``.

    Values are looked up in this order: explicit argument, environment
    (``.env`` already loaded), the GitHub CLI (``gh``), an interactive
    prompt. Anything typed in or passed on the command line for the year
    is written back to ``.env`` so the next run needs no input.
    """

    def __init__(self, env_path: str | Path | None = None) -> None:
        self.env_path = Path(env_path) if env_path is not None else Path.cwd() / ".env"
        load_dotenv(self.env_path)

    def load_or_prompt(
        self,
        *,
        username: str | None = None,
        year: int | None = None,
        worker_size: int | None = None,
        model: str | None = None,
    ) -> AppConfig:
        collected: dict[str, str] = {}

        # 1. GitHub username
        username = username or os.environ.get(ENV_USERNAME) or self.detect_gh_username()
        if not username:
            username = click.prompt("GitHub 사용자 이름을 입력하세요", value_proc=_required)
            collected[ENV_USERNAME] = username

        # 2. GitHub token
        github_token = os.environ.get(ENV_GITHUB_TOKEN)
        if not github_token:
            github_token = self.detect_gh_token()
            if github_token:
                click.echo("ℹ️  GitHub CLI(gh)에서 인증 정보를 자동으로 가져왔습니다.")
        if not github_token:
            github_token = click.prompt(
                "GitHub Personal Access Token을 입력하세요 (repo 권한 필요)",
                hide_input=True,
                value_proc=_required,
            )
            collected[ENV_GITHUB_TOKEN] = github_token

        # 3. Gemini API key
        ai_api_key = os.environ.get(ENV_AI_API_KEY)
        if not ai_api_key:
            click.echo("\nℹ️  Google Gemini API Key가 필요합니다.")
            click.echo(f"   (무료로 발급받을 수 있습니다: {AI_KEY_URL})\n")
            if click.confirm("   발급 페이지를 브라우저에서 여시겠습니까?", default=True):
                self.open_url(AI_KEY_URL)
            ai_api_key = click.prompt(
                "Google Gemini API Key를 입력하세요", hide_input=True, value_proc=_required
            )
            collected[ENV_AI_API_KEY] = ai_api_key

        # 4. Year
        resolved_year: int | str | None = os.environ.get(ENV_YEAR)
        if not resolved_year:
            if year is not None:
                resolved_year = year
            else:
                resolved_year = click.prompt(
                    "요약할 연도를 입력하세요",
                    default=str(date.today().year),
                    value_proc=_four_digit_year,
                )
            collected[ENV_YEAR] = str(resolved_year)
        elif year is not None:
            resolved_year = year

        if collected:
            self.save(collected)

        env = {ENV_GITHUB_TOKEN: github_token, ENV_AI_API_KEY: ai_api_key}
        if os.environ.get(ENV_WORKER_SIZE):
            env[ENV_WORKER_SIZE] = os.environ[ENV_WORKER_SIZE]
        if os.environ.get(ENV_MODEL):
            env[ENV_MODEL] = os.environ[ENV_MODEL]
        return load_config(
            env,
            username=username,
            year=resolved_year,
            worker_size=worker_size,
            model=model,
        )

    def save(self, values: Mapping[str, str]) -> None:
        """Update or append *values* in the ``.env`` file."""
        self.env_path.touch(exist_ok=True)
        for key, value in values.items():
            set_key(str(self.env_path), key, value, quote_mode="never")
        log.info("config.saved", path=str(self.env_path), keys=sorted(values))
        click.echo("✅ .env 파일이 업데이트되었습니다.")

    # ── detection ──────────────────────────────────────────────────────────

    def detect_gh_username(self) -> str | None:
        return _run_gh("api", "user", "--jq", ".login")

    def detect_gh_token(self) -> str | None:
        return _run_gh("auth", "token")

    @staticmethod
    def open_url(url: str) -> None:
        if click.launch(url) != 0:
            click.echo(f"⚠️  브라우저를 열지 못했습니다. 링크를 직접 열어주세요: {url}", err=True)


def _run_gh(*args: str) -> str | None:
    """Run a ``gh`` subcommand and return its trimmed stdout, or None."""
    try:
        proc = subprocess.run(
            ["gh", *args],
            check=True,
            capture_output=True,
            text=True,
            timeout=_GH_TIMEOUT,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    return proc.stdout.strip() or None


def _required(value: str) -> str:
    value = value.strip()
    if not value:
        raise click.BadParameter("값을 입력해주세요.")
    return value


def _four_digit_year(value: str) -> str:
    value = value.strip()
    if len(value) != 4 or not value.isdigit():
        raise click.BadParameter("4자리 연도를 입력해주세요.")
    return value
