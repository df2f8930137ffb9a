from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest

from news_trends.config import TrendConfig
from news_trends.llm import CompletionClient
from news_trends.pipeline import TrendPipeline
from news_trends.providers.base import SearchPage, SearchProvider
from news_trends.telemetry import RecordingObserver

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeProvider(SearchProvider):
    """Serves canned pages keyed by (sort order, page)."""

    def __init__(self, pages: Optional[Dict[tuple, object]] = None, default: Optional[list] = None) -> None:
        self.pages = pages or {}
        self.default = default if default is not None else []
        self.calls: List[tuple] = []

    def search(self, query, sort_order, page, page_size, from_date, language="en") -> SearchPage:
        self.calls.append((query, sort_order, page, page_size, from_date, language))
        result = self.pages.get((sort_order, page), self.default)
        if isinstance(result, Exception):
            raise result
        return SearchPage(articles=list(result), total_results=len(result))


class FakeCompletion(CompletionClient):
    def __init__(self, text: str = "", error: Optional[Exception] = None) -> None:
        self.text = text
        self.error = error
        self.prompts: List[str] = []

    def complete(self, prompt: str, temperature: float) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


def raw_article(
    title: str,
    url: str = "",
    source: str = "Reuters",
    description: str = "",
    published_at: str = "2024-06-01T10:00:00Z",
) -> dict:
    return {
        "source": {"id": None, "name": source},
        "title": title,
        "description": description,
        "url": url or "https://example.com/" + "-".join(title.lower().split()),
        "publishedAt": published_at,
    }


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def config() -> TrendConfig:
    return TrendConfig(newsapi_key="news-key", openai_api_key="openai-key")


@pytest.fixture
def make_pipeline(config, observer):
    def _make(provider: SearchProvider, completion: CompletionClient) -> TrendPipeline:
        return TrendPipeline(provider, completion, config=config, observer=observer, clock=lambda: NOW)

    return _make

