from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, replace
from datetime import datetime, timezone
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import ScoringConfig
from .models import Article, ScoredArticle

UNKNOWN_SOURCE = "unknown"


@dataclass(frozen=True, slots=True)
class ScoreSummary:
    count: int
    minimum: float
    maximum: float
    mean: float


def score_articles(
    articles: Sequence[Article],
    now: Optional[datetime] = None,
    config: Optional[ScoringConfig] = None,
) -> List[ScoredArticle]:
    """Annotate each article with its trending score.

    The score combines recency, keyword hits, how often the article's source
    appears in the batch and description length, minus a penalty for short
    titles. Output order matches input order.
    """
    config = config or ScoringConfig()
    now = now or datetime.now(timezone.utc)
    source_counts = Counter(_source_key(article) for article in articles)
    max_source_count = max(source_counts.values(), default=1)
    patterns = _keyword_patterns(config.keywords)

    scored: List[ScoredArticle] = []
    for article in articles:
        recency = 1 / (1 + _age_hours(article.published_at, now) / config.recency_half_life_hours)
        hits = _keyword_hits(f"{article.title} {article.description}", patterns)
        keyword_boost = min(hits, config.keyword_cap) * config.keyword_weight
        cross_source = (source_counts[_source_key(article)] / max_source_count) * config.cross_source_weight
        length_quality = _length_quality(len(article.description), config.length_tiers)
        penalty = config.short_title_penalty if len(article.title) < config.short_title_length else 0.0
        score = round(recency + keyword_boost + cross_source + length_quality - penalty, 4)
        scored.append(
            ScoredArticle(
                title=article.title,
                description=article.description,
                url=article.url,
                source=article.source,
                published_at=article.published_at,
                score=score,
            )
        )
    return scored


def rank_articles(scored: Iterable[ScoredArticle], limit: Optional[int] = None) -> List[ScoredArticle]:
    """Sort by score (stable, descending) and assign 1-based indices."""
    ranked = sorted(scored, key=lambda article: article.score, reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return [replace(article, index=position) for position, article in enumerate(ranked, start=1)]


def score_summary(scored: Sequence[ScoredArticle]) -> ScoreSummary:
    if not scored:
        return ScoreSummary(count=0, minimum=0.0, maximum=0.0, mean=0.0)
    scores = [article.score for article in scored]
    return ScoreSummary(
        count=len(scores),
        minimum=min(scores),
        maximum=max(scores),
        mean=round(sum(scores) / len(scores), 4),
    )


def parse_published(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _age_hours(published_at: str, now: datetime) -> float:
    # Unparseable dates count as brand new.
    published = parse_published(published_at)
    if published is None:
        return 0.0
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return max((now - published).total_seconds() / 3600, 0.0)


def _source_key(article: Article) -> str:
    return article.source or UNKNOWN_SOURCE


def _keyword_patterns(keywords: Iterable[str]) -> List[re.Pattern[str]]:
    return [re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE) for keyword in keywords if keyword]


def _keyword_hits(text: str, patterns: Sequence[re.Pattern[str]]) -> int:
    return sum(1 for pattern in patterns if pattern.search(text))


def _length_quality(length: int, tiers: Tuple[Tuple[int, float], ...]) -> float:
    for threshold, bonus in tiers:
        if length > threshold:
            return bonus
    return 0.0
