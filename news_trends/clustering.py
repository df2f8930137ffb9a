from __future__ import annotations

from collections import Counter
import json
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .models import ClusterKind, ClusterResult, ScoredArticle, TrendingTopic

logger = logging.getLogger(__name__)

MAX_EVIDENCE = 3
FALLBACK_TERMS = 3
FALLBACK_ARTICLES = 5
FALLBACK_CITATIONS = 2

_TITLE_SPLIT_RE = re.compile(r"[^A-Za-z0-9一-龠ぁ-んァ-ン]+")
_DECODER = json.JSONDecoder()


def extract_json_object(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """Decode the first complete ``{...}`` object in ``text``, ignoring surrounding prose."""
    if not text:
        return None
    start = text.find("{")
    while start != -1:
        try:
            parsed, _ = _DECODER.raw_decode(text, start)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            return parsed
        start = text.find("{", start + 1)
    return None


def parse_cluster_response(text: Optional[str], article_count: int, max_topics: int = 8) -> List[TrendingTopic]:
    """Validate the model's clusters; returns an empty list when nothing usable remains."""
    payload = extract_json_object(text)
    if payload is None:
        return []
    candidates = payload.get("trendingTopics")
    if not isinstance(candidates, list):
        return []
    topics: List[TrendingTopic] = []
    for candidate in candidates:
        topic = _parse_topic(candidate, article_count)
        if topic is None:
            continue
        topics.append(topic)
        if len(topics) >= max_topics:
            break
    return topics


def fallback_clusters(articles: Sequence[ScoredArticle]) -> List[TrendingTopic]:
    """Build provisional topics from the most frequent title words."""
    if not articles:
        return []
    frequency: Counter[str] = Counter()
    for article in articles:
        for word in _TITLE_SPLIT_RE.split(article.title):
            if word:
                frequency[word.lower()] += 1
    # Counter.most_common keeps first-seen order among equal counts.
    terms = [word for word, _ in frequency.most_common() if len(word) > 2][:FALLBACK_TERMS]

    topics: List[TrendingTopic] = []
    for word in terms:
        matches = [article for article in articles if word in article.title.lower()]
        if not matches:
            continue
        topics.append(
            TrendingTopic(
                topic=f"Frequent term: {word}",
                reason="Provisional topic based on title term frequency",
                articles=tuple(article.index for article in matches[:FALLBACK_ARTICLES]),
                message=f"Coverage is concentrating on {word}",
                support=("Term-frequency fallback",),
                significance="Provisional signal",
                citations=tuple(format_citation(article) for article in matches[:FALLBACK_CITATIONS]),
            )
        )
    if not topics:
        leading = list(articles[:FALLBACK_ARTICLES])
        topics.append(
            TrendingTopic(
                topic="Latest coverage",
                reason="Provisional topic; no recurring title terms were found",
                articles=tuple(article.index for article in leading),
                message="Highest scoring articles in this batch",
                support=("Term-frequency fallback",),
                significance="Provisional signal",
                citations=tuple(format_citation(article) for article in leading[:FALLBACK_CITATIONS]),
            )
        )
    return topics


def resolve_clusters(text: Optional[str], articles: Sequence[ScoredArticle], max_topics: int = 8) -> ClusterResult:
    topics = parse_cluster_response(text, len(articles), max_topics=max_topics)
    if topics:
        return ClusterResult(kind=ClusterKind.PARSED, topics=tuple(topics))
    logger.info("Model response had no usable clusters; using term-frequency fallback")
    return ClusterResult(kind=ClusterKind.FALLBACK, topics=tuple(fallback_clusters(articles)))


def format_citation(article: ScoredArticle) -> str:
    return f"{article.title}. {article.source}. {article.published_at[:10]}. {article.url}"


def _parse_topic(candidate: object, article_count: int) -> Optional[TrendingTopic]:
    if not isinstance(candidate, Mapping):
        return None
    name = _string(candidate.get("topic"))
    if not name:
        return None
    indices = _valid_indices(candidate.get("articles"), article_count)
    if not indices:
        return None
    return TrendingTopic(
        topic=name,
        reason=_string(candidate.get("reason")),
        articles=indices,
        message=_string(candidate.get("message")),
        support=_strings(candidate.get("support")),
        significance=_string(candidate.get("significance")),
        citations=_strings(candidate.get("citations")),
    )


def _valid_indices(value: object, article_count: int) -> Tuple[int, ...]:
    if not isinstance(value, list):
        return ()
    indices: List[int] = []
    for item in value:
        index = _as_index(item)
        if index is None or not 1 <= index <= article_count or index in indices:
            continue
        indices.append(index)
    return tuple(indices)


def _as_index(value: object) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return None


def _string(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""


def _strings(value: object) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item.strip() for item in value if isinstance(item, str) and item.strip())[:MAX_EVIDENCE]
