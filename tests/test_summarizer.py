"""Tests for news_trends.summarizer and news_trends.telemetry."""

from __future__ import annotations

import logging

import pytest

from news_trends.models import ClusterKind, ScoredArticle, SortOrder
from news_trends.scoring import ScoreSummary
from news_trends.summarizer import digest_articles, summarize
from news_trends.telemetry import LoggingObserver


def _scored(index: int, title: str, description: str) -> ScoredArticle:
    return ScoredArticle(
        title=title, description=description, url=f"https://x/{index}", source="S", published_at="", score=1.0, index=index
    )


class TestSummarize:
    def test_short_text_is_returned_whole(self) -> None:
        assert summarize("One sentence. Two sentences.") == "One sentence. Two sentences."

    def test_empty_text(self) -> None:
        assert summarize(None) is None
        assert summarize("   ") is None

    def test_keeps_original_sentence_order(self) -> None:
        text = "Tariffs rise. Weather was mild. Tariffs hit tariffs again. Nothing else."

        result = summarize(text, max_sentences=2)

        assert result == "Tariffs rise. Tariffs hit tariffs again."

    def test_does_not_split_decimals(self) -> None:
        assert summarize("Sales rose 3.5 percent. Margins held.") == "Sales rose 3.5 percent. Margins held."

    def test_splits_japanese_sentences(self) -> None:
        assert summarize("値上げが続く。在庫が減る。物流が混乱。", max_sentences=3) == "値上げが続く。 在庫が減る。 物流が混乱。"


class TestDigestArticles:
    def test_prefers_sentences_with_batch_terms(self) -> None:
        articles = [
            _scored(1, "Walmart drones", "Walmart drones expand. The weather is nice. Lunch was good."),
            _scored(2, "Walmart drones again", "Walmart drones fly further."),
        ]

        digests = digest_articles(articles, max_sentences=1)

        assert digests[0].summary == "Walmart drones expand."
        assert [d.index for d in digests] == [1, 2]
        assert digests[1].summary == "Walmart drones fly further."

    def test_missing_description(self) -> None:
        assert digest_articles([_scored(1, "t", "")])[0].summary is None


class TestLoggingObserver:
    def test_logs_each_stage(self, caplog: pytest.LogCaptureFixture) -> None:
        observer = LoggingObserver()

        with caplog.at_level(logging.INFO, logger="news_trends.telemetry"):
            observer.fetch_completed(SortOrder.RECENCY, 1, 10)
            observer.fetch_completed(SortOrder.POPULARITY, 2, 0, error=RuntimeError("down"))
            observer.deduplicated(10, 8)
            observer.selected(8, True)
            observer.scored(ScoreSummary(count=8, minimum=0.5, maximum=2.0, mean=1.1))
            observer.clustered(ClusterKind.FALLBACK, 3)

        messages = [record.getMessage() for record in caplog.records]
        assert "Search fetch ok (sort=recency page=1): 10 articles" in messages
        assert "Search fetch failed (sort=popularity page=2): down" in messages
        assert "Deduplicated 10 -> 8 articles" in messages
        assert "Clustering outcome fallback with 3 topics" in messages
        assert any(record.levelno == logging.WARNING for record in caplog.records)
