from __future__ import annotations

from typing import List, Sequence, Set

from .models import Article


def select_articles(articles: Sequence[Article], target: int, diversity: bool = True) -> List[Article]:
    """Pick up to ``target`` articles, optionally spreading them across sources.

    With ``diversity`` enabled the first article of each distinct source is
    taken until ``target`` sources are represented; remaining slots are
    backfilled with the next un-picked articles. The result keeps input order
    and always holds ``min(target, len(articles))`` items.
    """
    if target <= 0:
        return []
    if not diversity:
        return list(articles[:target])

    picked: Set[int] = set()
    seen_sources: Set[str] = set()
    for position, article in enumerate(articles):
        if len(seen_sources) >= target:
            break
        if article.source in seen_sources:
            continue
        seen_sources.add(article.source)
        picked.add(position)

    for position in range(len(articles)):
        if len(picked) >= target:
            break
        picked.add(position)

    return [article for position, article in enumerate(articles) if position in picked]
