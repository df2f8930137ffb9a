from __future__ import annotations

from typing import Iterable, List, Mapping, Set

from .models import Article, RawArticle


def normalize_articles(raw_articles: Iterable[RawArticle]) -> List[Article]:
    """Map raw search records 1:1 onto ``Article``; never raises."""
    return [_normalize(raw) for raw in raw_articles]


def deduplicate(articles: Iterable[Article]) -> List[Article]:
    """Keep the first article per identity key, dropping keyless ones."""
    seen: Set[str] = set()
    results: List[Article] = []
    for article in articles:
        key = article.identity_key
        if not key or key in seen:
            continue
        seen.add(key)
        results.append(article)
    return results


def _normalize(raw: object) -> Article:
    if not isinstance(raw, Mapping):
        raw = {}
    return Article(
        title=_text(raw.get("title")),
        description=_text(raw.get("description")),
        url=_text(raw.get("url")),
        source=_source_name(raw.get("source")),
        published_at=_text(raw.get("publishedAt")),
    )


def _source_name(value: object) -> str:
    if isinstance(value, Mapping):
        return _text(value.get("name"))
    return _text(value)


def _text(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""
