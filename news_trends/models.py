from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
import math
from typing import Any, Dict, List, Mapping, Optional, Tuple

# Untrusted record as returned by the search API.
RawArticle = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class Article:
    """Canonical article shape; every field is a string, never ``None``."""

    title: str
    description: str
    url: str
    source: str
    published_at: str

    @property
    def identity_key(self) -> str:
        return (self.title.strip() or self.url.strip()).lower()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "source": self.source,
            "publishedAt": self.published_at,
        }


@dataclass(frozen=True, slots=True)
class ScoredArticle(Article):
    """Article annotated with its trending score and clustering index."""

    score: float = 0.0
    index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = Article.to_dict(self)
        data["score"] = self.score
        if self.index:
            data["index"] = self.index
        return data


@dataclass(frozen=True, slots=True)
class TrendingTopic:
    """A topic cluster, either proposed by the model or synthesised locally."""

    topic: str
    reason: str
    articles: Tuple[int, ...]
    message: str
    support: Tuple[str, ...] = ()
    significance: str = ""
    citations: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topic": self.topic,
            "reason": self.reason,
            "articles": list(self.articles),
            "message": self.message,
            "support": list(self.support),
            "significance": self.significance,
            "citations": list(self.citations),
        }


class ClusterKind(str, Enum):
    PARSED = "parsed"
    FALLBACK = "fallback"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class ClusterResult:
    """Outcome of the clustering stage, tagged with how the topics were obtained."""

    kind: ClusterKind
    topics: Tuple[TrendingTopic, ...] = ()

    @property
    def degraded(self) -> bool:
        return self.kind in (ClusterKind.FALLBACK, ClusterKind.FAILED)


class SortOrder(str, Enum):
    RECENCY = "recency"
    POPULARITY = "popularity"


class DetailLevel(str, Enum):
    OVERALL = "overall"
    PER_ARTICLE = "perArticle"
    CLUSTERED = "clustered"


@dataclass(frozen=True, slots=True)
class PipelineOptions:
    """Optional stages of a pipeline run."""

    diversity_selection: bool = False
    detail_level: DetailLevel = DetailLevel.CLUSTERED
    sort_orders: Tuple[SortOrder, ...] = (SortOrder.RECENCY, SortOrder.POPULARITY)


def clamp_int(value: object, default: int, lower: int, upper: int) -> int:
    """Coerce ``value`` to an int within ``[lower, upper]``.

    Missing or non-numeric values take ``default``; booleans are not numbers.
    """
    number: Optional[float] = None
    if isinstance(value, bool):
        number = None
    elif isinstance(value, int):
        # Arbitrarily large JSON integers do not fit in a float.
        return min(max(value, lower), upper)
    elif isinstance(value, float):
        number = value
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value)
        except ValueError:
            number = None
    if number is None or math.isnan(number):
        number = float(default)
    return int(min(max(number, lower), upper))


@dataclass(frozen=True, slots=True)
class TrendRequest:
    days: int = 3
    pages: int = 2
    page_size: int = 50
    query: Optional[str] = None
    industry: Optional[str] = None
    language: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TrendRequest":
        return cls(
            days=clamp_int(payload.get("days"), 3, 1, 30),
            pages=clamp_int(payload.get("pages"), 2, 1, 5),
            page_size=clamp_int(payload.get("pageSize"), 50, 1, 100),
            query=_optional_text(payload.get("query")),
            industry=_optional_text(payload.get("industry")),
            language=_optional_text(payload.get("language")),
        )


def _optional_text(value: object) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


@dataclass(slots=True)
class ArticleDigest:
    index: int
    title: str
    url: str
    summary: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "title": self.title, "url": self.url, "summary": self.summary}


@dataclass(slots=True)
class TrendReport:
    """Response payload of a single pipeline run."""

    generated_at: datetime
    total_fetched: int
    articles_used_for_clustering: int
    trending_topics: List[TrendingTopic] = field(default_factory=list)
    scored_articles: List[ScoredArticle] = field(default_factory=list)
    clustered_articles: List[ScoredArticle] = field(default_factory=list)
    cluster_status: ClusterKind = ClusterKind.SKIPPED
    summary: Optional[str] = None
    article_summaries: Optional[List[ArticleDigest]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "generatedAt": self.generated_at.isoformat(),
            "totalFetched": self.total_fetched,
            "articlesUsedForClustering": self.articles_used_for_clustering,
            "trendingTopics": [topic.to_dict() for topic in self.trending_topics],
            "scoredArticles": [article.to_dict() for article in self.scored_articles],
            "clusteredArticles": [_clustered_dict(article) for article in self.clustered_articles],
            "clusterStatus": self.cluster_status.value,
        }
        if self.summary is not None:
            data["summary"] = self.summary
        if self.article_summaries is not None:
            data["articleSummaries"] = [digest.to_dict() for digest in self.article_summaries]
        return data


def _clustered_dict(article: ScoredArticle) -> Dict[str, Any]:
    data = Article.to_dict(article)
    data["index"] = article.index
    return data
