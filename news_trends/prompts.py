from __future__ import annotations

from typing import Sequence

from .models import Article, ScoredArticle

DESCRIPTION_PREVIEW_CHARS = 220

CLUSTER_SCHEMA = """{
  "trendingTopics": [ {
    "topic": "short topic name",
    "reason": "why it is drawing attention (one sentence)",
    "articles": [1, 2],
    "message": "the central development (one sentence)",
    "support": ["concrete evidence 1", "concrete evidence 2"],
    "significance": "impact or implication (one sentence)",
    "citations": ["Title. Source. YYYY-MM-DD. URL"]
  } ]
}"""


def _format_scored_article(article: ScoredArticle) -> str:
    description = (article.description or "")[:DESCRIPTION_PREVIEW_CHARS]
    return (
        f"{article.index}. [score={article.score}] TITLE: {article.title}\n"
        f"SOURCE: {article.source}\n"
        f"PUBLISHED: {article.published_at}\n"
        f"DESC: {description}"
    )


def build_cluster_prompt(
    articles: Sequence[ScoredArticle],
    max_topics: int = 8,
    output_language: str = "English",
) -> str:
    """Render the instruction asking the model for strict-JSON topic clusters."""
    listing = "\n\n".join(_format_scored_article(article) for article in articles)
    return (
        "You are an expert retail industry trend analyst. Identify HIGH-VIRALITY topical clusters.\n"
        f"Weighted Articles (index + score):\n{listing}\n\n"
        "Instructions:\n"
        "- Use score to prioritize inclusion (higher score => more central).\n"
        f"- Produce up to {max_topics} clusters; each cluster MUST contain only clearly related articles.\n"
        "- Ignore outliers with very low semantic relation even if high score.\n"
        "- Prefer clusters with cross-source coverage (different sources).\n"
        f"- Write topic, reason, message, support and significance in {output_language}.\n"
        f"JSON ONLY. Schema:\n{CLUSTER_SCHEMA}\n"
        "Rules:\n"
        "- articles contains integer indices from the list above only.\n"
        "- support has at most 3 items. No hedging words (probably, perhaps, may).\n"
        "- citations has 1 to 3 items per cluster.\n"
        "- Order topics by a combined priority of urgency, breadth of coverage and structural significance.\n"
        "- Merge similar or duplicate topics.\n"
        "Output JSON:"
    )


def build_summary_prompt(
    articles: Sequence[Article],
    query: str,
    days: int,
    output_language: str = "English",
) -> str:
    """Render the instruction asking the model for an overall bullet summary."""
    listing = "\n\n".join(
        f"{position}. {article.title} - {article.description or '(no description)'} "
        f"[{article.source}] ({article.published_at})\n{article.url}"
        for position, article in enumerate(articles, start=1)
    )
    return (
        "You are an analyst skilled at research. The following is news about "
        f"\"{query}\" from the past {days} day(s). Avoid duplicated or promotional content and "
        f"summarize 3 to 6 key points as bullet points in {output_language}. For each point give "
        "the key point, its background or evidence, and the outlook in one or two concise "
        "sentences. Finish by listing 2 to 4 related links (title plus a short description).\n\n"
        f"Articles:\n{listing}"
    )
