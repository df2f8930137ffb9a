from __future__ import annotations

import re
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from .models import ArticleDigest, ScoredArticle

_WORD_RE = re.compile(r"[A-Za-z0-9一-龠ぁ-んァ-ン']+")
_SENTENCE_RE = re.compile(r"(?<=[.!?])\s+|(?<=[。！？])\s*")


def digest_articles(articles: Sequence[ScoredArticle], max_sentences: int = 2) -> List[ArticleDigest]:
    """Extractive per-article summaries weighted by batch-wide word frequency.

    Sentences mentioning words that recur across the whole batch rank higher,
    so each digest leans towards the trending part of its article.
    """
    batch_weights = _word_weights(
        f"{article.title} {article.description}" for article in articles
    )
    return [
        ArticleDigest(
            index=article.index,
            title=article.title,
            url=article.url,
            summary=summarize(article.description, max_sentences=max_sentences, weights=batch_weights),
        )
        for article in articles
    ]


def summarize(text: Optional[str], max_sentences: int = 2, weights: Optional[Dict[str, float]] = None) -> Optional[str]:
    if not text:
        return None
    sentences = _split_sentences(text)
    if not sentences:
        return None
    if len(sentences) <= max_sentences:
        return " ".join(sentences)
    weights = weights if weights is not None else _word_weights(sentences)
    scores = {idx: _sentence_score(sentence, weights) for idx, sentence in enumerate(sentences)}
    ranked = sorted(scores, key=lambda idx: scores[idx], reverse=True)
    top_indices = sorted(ranked[:max_sentences])
    return " ".join(sentences[idx] for idx in top_indices)


def _split_sentences(text: str) -> List[str]:
    return [sentence.strip() for sentence in _SENTENCE_RE.split(text.strip()) if sentence.strip()]


def _word_weights(texts: Iterable[str]) -> Dict[str, float]:
    freq = Counter(word.lower() for text in texts for word in _WORD_RE.findall(text))
    if not freq:
        return {}
    max_freq = max(freq.values())
    return {word: count / max_freq for word, count in freq.items()}


def _sentence_score(sentence: str, weights: Dict[str, float]) -> float:
    tokens = _WORD_RE.findall(sentence)
    if not tokens:
        return 0.0
    return sum(weights.get(token.lower(), 0.0) for token in tokens) / len(tokens)
