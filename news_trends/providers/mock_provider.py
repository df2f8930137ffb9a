from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Dict, List

from ..models import SortOrder
from .base import SearchPage, SearchProvider


class MockProvider(SearchProvider):
    """Returns hard-coded retail articles for offline development."""

    def search(
        self,
        query: str,
        sort_order: SortOrder,
        page: int,
        page_size: int,
        from_date: date,
        language: str = "en",
    ) -> SearchPage:
        if page > 1:
            return SearchPage(articles=[], total_results=len(_SAMPLE))
        now = datetime.now(timezone.utc)
        articles: List[Dict[str, object]] = []
        for hours_ago, source, title, description in _SAMPLE:
            articles.append(
                {
                    "source": {"id": None, "name": source},
                    "title": title,
                    "description": description,
                    "url": f"https://example.com/{source.lower().replace(' ', '-')}/{len(articles) + 1}",
                    "publishedAt": (now - timedelta(hours=hours_ago)).strftime("%Y-%m-%dT%H:%M:%SZ"),
                }
            )
        if sort_order is SortOrder.POPULARITY:
            articles.reverse()
        return SearchPage(articles=articles[:page_size], total_results=len(_SAMPLE))


_SAMPLE = [
    (
        2,
        "Retail Dive",
        "Walmart expands drone delivery to five more states",
        "Walmart said its drone delivery program will reach millions more households as the retailer "
        "leans on logistics partners to shorten delivery windows ahead of the holiday season.",
    ),
    (
        5,
        "Reuters",
        "Amazon workers strike at two fulfillment centers over holiday pay",
        "Workers walked out at two Amazon fulfillment centers, the latest labor action to hit the "
        "e-commerce giant before its busiest sales period.",
    ),
    (
        9,
        "CNBC",
        "Shopify earnings beat as merchants lean into AI tools",
        "Shopify reported revenue above expectations and said merchant adoption of its AI assistant "
        "helped lift subscription revenue.",
    ),
    (
        20,
        "Reuters",
        "Costco membership fee hike lifts quarterly earnings",
        "Costco's first membership fee increase in seven years boosted profit, while comparable "
        "sales growth slowed amid price pressure.",
    ),
    (
        30,
        "Bloomberg",
        "Target cuts prices on thousands of items as inflation cools",
        "Target is lowering prices on everyday essentials, betting that cheaper baskets will win "
        "back shoppers who traded down during the inflation spike.",
    ),
]
