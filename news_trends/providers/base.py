from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import List

from ..models import RawArticle, SortOrder


@dataclass(slots=True)
class SearchPage:
    """One page of raw search results plus the API's total-count hint."""

    articles: List[RawArticle] = field(default_factory=list)
    total_results: int = 0


class SearchProvider(ABC):
    """Abstract base class for paginated article search APIs."""

    @abstractmethod
    def search(
        self,
        query: str,
        sort_order: SortOrder,
        page: int,
        page_size: int,
        from_date: date,
        language: str = "en",
    ) -> SearchPage:
        """Return one page of raw articles; raise on any upstream failure."""
