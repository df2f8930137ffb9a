"""Tests for news_trends.config and request parsing in news_trends.models."""

from __future__ import annotations

import pytest

from news_trends.config import MissingCredentialsError, TrendConfig
from news_trends.models import TrendRequest, clamp_int
from news_trends.queries import RETAIL_QUERY, TREND_KEYWORDS, build_or_query


class TestTrendConfig:
    def test_from_env_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("NEWSAPI_API_KEY", "OPENAI_API_KEY", "NEWS_TRENDS_KEYWORDS", "NEWS_TRENDS_CLUSTER_LIMIT"):
            monkeypatch.delenv(name, raising=False)

        config = TrendConfig.from_env()

        assert config.newsapi_key is None
        assert config.cluster_limit == 100
        assert config.default_query == RETAIL_QUERY
        assert config.scoring.keywords == TREND_KEYWORDS

    def test_from_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NEWSAPI_API_KEY", "n")
        monkeypatch.setenv("OPENAI_API_KEY", "o")
        monkeypatch.setenv("NEWS_TRENDS_CLUSTER_LIMIT", "40")
        monkeypatch.setenv("NEWS_TRENDS_DIVERSITY", "true")
        monkeypatch.setenv("NEWS_TRENDS_KEYWORDS", "tariff, layoffs ,")

        config = TrendConfig.from_env()

        assert config.cluster_limit == 40
        assert config.diversity_selection is True
        assert config.scoring.keywords == ("tariff", "layoffs")
        assert config.missing_credentials() == []

    def test_invalid_integer_names_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NEWS_TRENDS_MAX_TOPICS", "many")

        with pytest.raises(ValueError, match="NEWS_TRENDS_MAX_TOPICS"):
            TrendConfig.from_env()

    def test_require_credentials_lists_everything_missing(self) -> None:
        with pytest.raises(MissingCredentialsError) as excinfo:
            TrendConfig().require_credentials()

        assert excinfo.value.missing == ["NEWSAPI_API_KEY", "OPENAI_API_KEY"]


class TestTrendRequest:
    def test_defaults(self) -> None:
        request = TrendRequest.from_payload({})

        assert (request.days, request.pages, request.page_size) == (3, 2, 50)
        assert request.query is None

    def test_clamps_into_range(self) -> None:
        request = TrendRequest.from_payload({"days": 90, "pages": 0, "pageSize": 1000})

        assert (request.days, request.pages, request.page_size) == (30, 1, 100)

    def test_invalid_values_take_defaults(self) -> None:
        request = TrendRequest.from_payload({"days": "soon", "pages": None, "pageSize": True})

        assert (request.days, request.pages, request.page_size) == (3, 2, 50)

    def test_numeric_strings_and_floats(self) -> None:
        request = TrendRequest.from_payload({"days": "7", "pages": 2.9, "pageSize": "-4"})

        assert (request.days, request.pages, request.page_size) == (7, 2, 1)

    def test_huge_integers_clamp_to_bounds(self) -> None:
        request = TrendRequest.from_payload({"days": 10**400, "pages": -(10**400), "pageSize": "9" * 400})

        assert (request.days, request.pages, request.page_size) == (30, 1, 100)

    def test_optional_text_fields(self) -> None:
        request = TrendRequest.from_payload({"query": "  tariffs ", "industry": "", "language": 3})

        assert request.query == "tariffs"
        assert request.industry is None
        assert request.language is None

    def test_clamp_int_handles_nan(self) -> None:
        assert clamp_int(float("nan"), 5, 1, 10) == 5


class TestBuildOrQuery:
    def test_quotes_phrases(self) -> None:
        assert build_or_query(["retail", "supply chain", " "]) == '(retail OR "supply chain")'

    def test_empty_terms(self) -> None:
        assert build_or_query(["", "  "]) is None
