"""Tests for news_trends.providers and news_trends.llm."""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import requests

from news_trends.llm import OpenAICompletionClient, extract_output_text
from news_trends.models import SortOrder
from news_trends.providers.mock_provider import MockProvider
from news_trends.providers.newsapi_provider import NewsAPIProvider


def _response(payload, status: int = 200) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return response


@patch("news_trends.providers.newsapi_provider.requests.get")
class TestNewsAPIProvider:
    def test_sends_query_parameters(self, mock_get) -> None:
        mock_get.return_value = _response({"articles": [{"title": "t"}], "totalResults": 40})
        provider = NewsAPIProvider("secret", timeout=5)

        page = provider.search("(retail)", SortOrder.POPULARITY, 2, 50, date(2024, 5, 29), language="en")

        assert page.articles == [{"title": "t"}]
        assert page.total_results == 40
        _, kwargs = mock_get.call_args
        assert kwargs["params"] == {
            "q": "(retail)",
            "sortBy": "popularity",
            "from": "2024-05-29",
            "language": "en",
            "page": 2,
            "pageSize": 50,
        }
        assert kwargs["headers"] == {"X-Api-Key": "secret"}
        assert kwargs["timeout"] == 5

    def test_recency_maps_to_published_at(self, mock_get) -> None:
        mock_get.return_value = _response({"articles": []})

        NewsAPIProvider("secret").search("q", SortOrder.RECENCY, 1, 10, date(2024, 6, 1))

        assert mock_get.call_args.kwargs["params"]["sortBy"] == "publishedAt"

    def test_non_2xx_is_a_failure(self, mock_get) -> None:
        mock_get.return_value = _response({"status": "error"}, status=429)

        with pytest.raises(requests.HTTPError):
            NewsAPIProvider("secret").search("q", SortOrder.RECENCY, 1, 10, date(2024, 6, 1))

    def test_tolerates_odd_payloads(self, mock_get) -> None:
        mock_get.return_value = _response({"articles": "nope", "totalResults": "many"})

        page = NewsAPIProvider("secret").search("q", SortOrder.RECENCY, 1, 10, date(2024, 6, 1))

        assert page.articles == []
        assert page.total_results == 0

    def test_requires_api_key(self, mock_get) -> None:
        with pytest.raises(ValueError):
            NewsAPIProvider("")


class TestMockProvider:
    def test_first_page_has_articles(self) -> None:
        page = MockProvider().search("q", SortOrder.RECENCY, 1, 3, date(2024, 6, 1))

        assert len(page.articles) == 3
        assert page.articles[0]["source"]["name"] == "Retail Dive"

    def test_later_pages_are_empty(self) -> None:
        assert MockProvider().search("q", SortOrder.RECENCY, 2, 3, date(2024, 6, 1)).articles == []


class TestCompletionClient:
    def test_extracts_output_text(self) -> None:
        assert extract_output_text(SimpleNamespace(output_text='{"a": 1}')) == '{"a": 1}'

    def test_joins_output_parts(self) -> None:
        response = SimpleNamespace(
            output_text=None,
            output=[
                SimpleNamespace(content=[SimpleNamespace(type="output_text", text="one")]),
                SimpleNamespace(content=[SimpleNamespace(type="refusal", text="no"), SimpleNamespace(type="output_text", text="two")]),
            ],
        )

        assert extract_output_text(response) == "one\ntwo"

    def test_empty_response(self) -> None:
        assert extract_output_text(SimpleNamespace()) == ""

    @patch("news_trends.llm.OpenAI")
    def test_single_attempt_call(self, mock_openai) -> None:
        mock_openai.return_value.responses.create.return_value = SimpleNamespace(output_text="ok")

        client = OpenAICompletionClient("key", model="gpt-4o-mini", timeout=60)
        text = client.complete("prompt", temperature=0.2)

        assert text == "ok"
        mock_openai.assert_called_once_with(api_key="key", timeout=60, max_retries=0)
        mock_openai.return_value.responses.create.assert_called_once_with(
            model="gpt-4o-mini", input="prompt", temperature=0.2
        )

    def test_requires_api_key(self) -> None:
        with pytest.raises(ValueError):
            OpenAICompletionClient("")
