from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import List, Optional

from .models import ClusterKind, SortOrder
from .scoring import ScoreSummary

logger = logging.getLogger(__name__)


class PipelineObserver:
    """Receives pipeline telemetry; every hook is a no-op by default."""

    def fetch_completed(self, sort_order: SortOrder, page: int, count: int, error: Optional[BaseException] = None) -> None:
        pass

    def deduplicated(self, before: int, after: int) -> None:
        pass

    def selected(self, count: int, diversity: bool) -> None:
        pass

    def scored(self, summary: ScoreSummary) -> None:
        pass

    def clustered(self, kind: ClusterKind, topic_count: int) -> None:
        pass


class LoggingObserver(PipelineObserver):
    """Writes telemetry to the module logger."""

    def fetch_completed(self, sort_order: SortOrder, page: int, count: int, error: Optional[BaseException] = None) -> None:
        if error is not None:
            logger.warning("Search fetch failed (sort=%s page=%d): %s", sort_order.value, page, error)
        else:
            logger.info("Search fetch ok (sort=%s page=%d): %d articles", sort_order.value, page, count)

    def deduplicated(self, before: int, after: int) -> None:
        logger.info("Deduplicated %d -> %d articles", before, after)

    def selected(self, count: int, diversity: bool) -> None:
        logger.info("Selected %d articles (diversity=%s)", count, diversity)

    def scored(self, summary: ScoreSummary) -> None:
        logger.info(
            "Scored %d articles (min=%.4f max=%.4f mean=%.4f)",
            summary.count,
            summary.minimum,
            summary.maximum,
            summary.mean,
        )

    def clustered(self, kind: ClusterKind, topic_count: int) -> None:
        logger.info("Clustering outcome %s with %d topics", kind.value, topic_count)


@dataclass
class FetchRecord:
    sort_order: SortOrder
    page: int
    count: int
    failed: bool


@dataclass
class RecordingObserver(PipelineObserver):
    """Keeps telemetry in memory so callers can inspect a run afterwards."""

    fetches: List[FetchRecord] = field(default_factory=list)
    dedup_counts: Optional[tuple] = None
    selected_count: Optional[int] = None
    score_summary: Optional[ScoreSummary] = None
    cluster_kind: Optional[ClusterKind] = None
    topic_count: Optional[int] = None

    def fetch_completed(self, sort_order: SortOrder, page: int, count: int, error: Optional[BaseException] = None) -> None:
        self.fetches.append(FetchRecord(sort_order, page, count, error is not None))

    def deduplicated(self, before: int, after: int) -> None:
        self.dedup_counts = (before, after)

    def selected(self, count: int, diversity: bool) -> None:
        self.selected_count = count

    def scored(self, summary: ScoreSummary) -> None:
        self.score_summary = summary

    def clustered(self, kind: ClusterKind, topic_count: int) -> None:
        self.cluster_kind = kind
        self.topic_count = topic_count
