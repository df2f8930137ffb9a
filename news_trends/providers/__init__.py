from .base import SearchPage, SearchProvider
from .mock_provider import MockProvider
from .newsapi_provider import NewsAPIProvider

__all__ = ["MockProvider", "NewsAPIProvider", "SearchPage", "SearchProvider"]
