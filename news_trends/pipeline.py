from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta, timezone
from itertools import chain
import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .clustering import resolve_clusters
from .config import TrendConfig
from .llm import CompletionClient, OpenAICompletionClient
from .models import (
    ClusterKind,
    ClusterResult,
    DetailLevel,
    PipelineOptions,
    RawArticle,
    ScoredArticle,
    SortOrder,
    TrendReport,
    TrendRequest,
)
from .normalize import deduplicate, normalize_articles
from .prompts import build_cluster_prompt, build_summary_prompt
from .providers.base import SearchProvider
from .providers.mock_provider import MockProvider
from .providers.newsapi_provider import NewsAPIProvider
from .queries import build_industry_query
from .scoring import rank_articles, score_articles, score_summary
from .selection import select_articles
from .summarizer import digest_articles
from .telemetry import LoggingObserver, PipelineObserver

logger = logging.getLogger(__name__)

NO_ARTICLES_SUMMARY = "No matching articles found."


class TrendPipeline:
    """Fetches, ranks and clusters news articles into trending topics."""

    def __init__(
        self,
        provider: SearchProvider,
        completion_client: CompletionClient,
        config: Optional[TrendConfig] = None,
        observer: Optional[PipelineObserver] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.config = config or TrendConfig()
        self.provider = provider
        self.completion_client = completion_client
        self.observer = observer or LoggingObserver()
        self._clock = clock

    @classmethod
    def from_config(cls, config: TrendConfig, observer: Optional[PipelineObserver] = None) -> "TrendPipeline":
        config.require_credentials()
        provider: SearchProvider
        if config.provider == "mock":
            provider = MockProvider()
        else:
            provider = NewsAPIProvider(config.newsapi_key or "", timeout=config.search_timeout)
        client = OpenAICompletionClient(
            config.openai_api_key or "",
            model=config.openai_model,
            timeout=config.cluster_timeout,
        )
        return cls(provider, client, config=config, observer=observer)

    def resolve_query(self, request: TrendRequest) -> str:
        if request.query:
            return request.query
        if request.industry:
            query = build_industry_query(request.industry)
            if query is None:
                raise ValueError(f"Unknown industry: {request.industry}")
            return query
        return self.config.default_query

    def run(self, request: TrendRequest, options: Optional[PipelineOptions] = None) -> TrendReport:
        options = options or PipelineOptions(diversity_selection=self.config.diversity_selection)
        query = self.resolve_query(request)
        now = self._clock()

        raw = self.fetch_all(query, request, options.sort_orders, now)
        deduped = deduplicate(normalize_articles(raw))
        self.observer.deduplicated(len(raw), len(deduped))

        selected = select_articles(deduped, request.page_size, diversity=options.diversity_selection)
        self.observer.selected(len(selected), options.diversity_selection)

        scored = score_articles(selected, now=now, config=self.config.scoring)
        self.observer.scored(score_summary(scored))
        ranked = rank_articles(scored, limit=max(self.config.cluster_limit, self.config.scored_limit))
        clustered = ranked[: self.config.cluster_limit]

        report = TrendReport(
            generated_at=now,
            total_fetched=len(raw),
            articles_used_for_clustering=len(clustered),
            scored_articles=[_without_index(article) for article in ranked[: self.config.scored_limit]],
            clustered_articles=clustered,
        )
        if options.detail_level is DetailLevel.CLUSTERED:
            result = self.cluster(clustered)
            report.trending_topics = list(result.topics)
            report.cluster_status = result.kind
        elif options.detail_level is DetailLevel.OVERALL:
            report.summary = self.summarize(clustered, query, request.days)
        else:
            report.article_summaries = digest_articles(clustered)
        return report

    def fetch_all(
        self,
        query: str,
        request: TrendRequest,
        sort_orders: Sequence[SortOrder],
        now: datetime,
    ) -> List[RawArticle]:
        from_date = (now - timedelta(days=request.days)).date()
        language = request.language or self.config.language
        jobs: List[Tuple[SortOrder, int]] = [
            (sort_order, page) for sort_order in sort_orders for page in range(1, request.pages + 1)
        ]
        if not jobs:
            return []

        def fetch(job: Tuple[SortOrder, int]) -> List[RawArticle]:
            sort_order, page = job
            return self._fetch_page(query, sort_order, page, request.page_size, from_date, language)

        workers = max(1, min(self.config.fetch_workers, len(jobs)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            pages = list(executor.map(fetch, jobs))
        return list(chain.from_iterable(pages))

    def _fetch_page(
        self,
        query: str,
        sort_order: SortOrder,
        page: int,
        page_size: int,
        from_date: date,
        language: str,
    ) -> List[RawArticle]:
        try:
            result = self.provider.search(
                query=query,
                sort_order=sort_order,
                page=page,
                page_size=page_size,
                from_date=from_date,
                language=language,
            )
        except Exception as exc:
            self.observer.fetch_completed(sort_order, page, 0, error=exc)
            return []
        self.observer.fetch_completed(sort_order, page, len(result.articles))
        return list(result.articles)

    def cluster(self, articles: Sequence[ScoredArticle]) -> ClusterResult:
        if not articles:
            result = ClusterResult(kind=ClusterKind.SKIPPED)
            self.observer.clustered(result.kind, 0)
            return result
        prompt = build_cluster_prompt(
            articles,
            max_topics=self.config.max_topics,
            output_language=self.config.output_language,
        )
        try:
            text = self.completion_client.complete(prompt, temperature=self.config.cluster_temperature)
        except Exception:
            logger.exception("Clustering model call failed")
            result = ClusterResult(kind=ClusterKind.FAILED)
        else:
            result = resolve_clusters(text, articles, max_topics=self.config.max_topics)
        self.observer.clustered(result.kind, len(result.topics))
        return result

    def summarize(self, articles: Sequence[ScoredArticle], query: str, days: int) -> str:
        if not articles:
            return NO_ARTICLES_SUMMARY
        prompt = build_summary_prompt(articles, query, days, output_language=self.config.output_language)
        try:
            return self.completion_client.complete(prompt, temperature=self.config.summary_temperature)
        except Exception:
            logger.exception("Summary model call failed")
            return ""


def _without_index(article: ScoredArticle) -> ScoredArticle:
    return ScoredArticle(
        title=article.title,
        description=article.description,
        url=article.url,
        source=article.source,
        published_at=article.published_at,
        score=article.score,
    )
