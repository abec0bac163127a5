"""Activity collector engine — GitHub search collection per month."""

from retrospect.engines.activity_collector.collector import collect_month, count_by_kind
from retrospect.engines.activity_collector.github_client import (
    ActivitySource,
    GitHubClient,
    RateLimitError,
)
from retrospect.engines.activity_collector.models import (
    ACTIVITY_KINDS,
    Activity,
    ActivityKind,
    MonthResult,
    MonthWindow,
)
from retrospect.engines.activity_collector.source import (
    BackoffPolicy,
    ConstantBackoff,
    ExponentialBackoff,
    PaginatedSource,
    build_query,
    repo_from_url,
)

__all__ = [
    "ACTIVITY_KINDS",
    "Activity",
    "ActivityKind",
    "ActivitySource",
    "BackoffPolicy",
    "ConstantBackoff",
    "ExponentialBackoff",
    "GitHubClient",
    "MonthResult",
    "MonthWindow",
    "PaginatedSource",
    "RateLimitError",
    "build_query",
    "collect_month",
    "count_by_kind",
    "repo_from_url",
]
