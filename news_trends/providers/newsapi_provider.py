from __future__ import annotations

from datetime import date
from typing import Dict

import requests

from ..models import SortOrder
from .base import SearchPage, SearchProvider

_SORT_BY: Dict[SortOrder, str] = {
    SortOrder.RECENCY: "publishedAt",
    SortOrder.POPULARITY: "popularity",
}


class NewsAPIProvider(SearchProvider):
    """Searches newsapi.org's ``everything`` endpoint."""

    BASE_URL = "https://newsapi.org/v2/everything"

    def __init__(self, api_key: str, timeout: float = 10.0) -> None:
        if not api_key:
            raise ValueError("NewsAPIProvider requires an API key")
        self._api_key = api_key
        self._timeout = timeout

    def search(
        self,
        query: str,
        sort_order: SortOrder,
        page: int,
        page_size: int,
        from_date: date,
        language: str = "en",
    ) -> SearchPage:
        params = {
            "q": query,
            "sortBy": _SORT_BY[sort_order],
            "from": from_date.isoformat(),
            "language": language,
            "page": page,
            "pageSize": page_size,
        }
        response = requests.get(
            self.BASE_URL,
            params=params,
            headers={"X-Api-Key": self._api_key},
            timeout=self._timeout,
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            return SearchPage()
        articles = payload.get("articles")
        total = payload.get("totalResults")
        return SearchPage(
            articles=list(articles) if isinstance(articles, list) else [],
            total_results=total if isinstance(total, int) else 0,
        )
