from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import List, Optional, Tuple

from .queries import RETAIL_QUERY, TREND_KEYWORDS


class MissingCredentialsError(RuntimeError):
    """Raised when an external API key is not configured."""

    def __init__(self, missing: List[str]) -> None:
        super().__init__(f"Missing required configuration: {', '.join(missing)}")
        self.missing = missing


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True, slots=True)
class ScoringConfig:
    """Weights and thresholds of the trending score."""

    recency_half_life_hours: float = 12.0
    keyword_weight: float = 0.15
    keyword_cap: int = 6
    cross_source_weight: float = 0.6
    length_tiers: Tuple[Tuple[int, float], ...] = ((300, 0.25), (120, 0.15), (60, 0.05))
    short_title_length: int = 25
    short_title_penalty: float = 0.1
    keywords: Tuple[str, ...] = TREND_KEYWORDS


@dataclass(slots=True)
class TrendConfig:
    """Runtime configuration for the trend pipeline.

    ``cluster_limit`` and ``scored_limit`` cap the ranked list after selection,
    which already holds at most one request's ``pageSize`` (100 at most), so
    the default ``scored_limit`` of 200 only binds when it is configured lower.
    """

    newsapi_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    provider: str = "newsapi"
    default_query: str = RETAIL_QUERY
    language: str = "en"
    output_language: str = "English"
    diversity_selection: bool = False
    cluster_limit: int = 100
    scored_limit: int = 200
    max_topics: int = 8
    fetch_workers: int = 10
    search_timeout: float = 10.0
    cluster_timeout: float = 120.0
    cluster_temperature: float = 0.2
    summary_temperature: float = 0.3
    scoring: ScoringConfig = field(default_factory=ScoringConfig)

    @classmethod
    def from_env(cls) -> "TrendConfig":
        keywords = _split_csv(os.getenv("NEWS_TRENDS_KEYWORDS"))
        scoring = ScoringConfig(keywords=tuple(keywords)) if keywords else ScoringConfig()
        return cls(
            newsapi_key=os.getenv("NEWSAPI_API_KEY"),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_model=os.getenv("NEWS_TRENDS_OPENAI_MODEL", "gpt-4o-mini"),
            provider=os.getenv("NEWS_TRENDS_PROVIDER", "newsapi").strip().lower(),
            language=os.getenv("NEWS_TRENDS_LANGUAGE", "en"),
            output_language=os.getenv("NEWS_TRENDS_OUTPUT_LANGUAGE", "English"),
            diversity_selection=_parse_bool(os.getenv("NEWS_TRENDS_DIVERSITY"), default=False),
            cluster_limit=_parse_int("NEWS_TRENDS_CLUSTER_LIMIT", 100),
            scored_limit=_parse_int("NEWS_TRENDS_SCORED_LIMIT", 200),
            max_topics=_parse_int("NEWS_TRENDS_MAX_TOPICS", 8),
            fetch_workers=_parse_int("NEWS_TRENDS_FETCH_WORKERS", 10),
            search_timeout=_parse_float("NEWS_TRENDS_SEARCH_TIMEOUT", 10.0),
            cluster_timeout=_parse_float("NEWS_TRENDS_CLUSTER_TIMEOUT", 120.0),
            scoring=scoring,
        )

    def missing_credentials(self) -> List[str]:
        missing: List[str] = []
        if not self.newsapi_key and self.provider != "mock":
            missing.append("NEWSAPI_API_KEY")
        if not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        return missing

    def require_credentials(self) -> None:
        missing = self.missing_credentials()
        if missing:
            raise MissingCredentialsError(missing)


def _parse_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        parsed = int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer if set") from None
    if parsed <= 0:
        raise ValueError(f"{name} must be positive")
    return parsed


def _parse_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number if set") from None


def _parse_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}
