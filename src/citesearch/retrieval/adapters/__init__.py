"""Specialized single-purpose evidence sources.

Each adapter queries one public API (encyclopedia, code host, news, books)
and returns TextItems, or raises FetchError. The merger treats that error as
an empty contribution from the adapter.
"""

from typing import Any, Dict, List, Optional, Protocol

from ..fetch import Fetcher, fetcher as default_fetcher
from ...config import get_settings
from ...errors import FetchError, FetchFailure
from ...schemas.evidence import TextItem

settings = get_settings()


class Adapter(Protocol):
    name: str

    async def search(self, query: str) -> List[TextItem]:
        ...


class JsonAdapter:
    """One bounded GET against `endpoint`, then `parse` on success."""

    name = "json"
    endpoint = ""

    def __init__(self, fetcher: Optional[Fetcher] = None, limit: int = 2, timeout: Optional[float] = None):
        self.fetcher = fetcher or default_fetcher
        self.limit = limit
        self.timeout = settings.SPECIALIZED_TIMEOUT_SECONDS if timeout is None else timeout

    def params(self, query: str) -> Dict[str, Any]:
        raise NotImplementedError

    def parse(self, data: Any) -> List[TextItem]:
        raise NotImplementedError

    async def search(self, query: str) -> List[TextItem]:
        if self.limit <= 0:
            return []
        result = await self.fetcher.get_json(self.endpoint, self.params(query), origin=self.name, timeout=self.timeout)
        if not result.ok:
            raise result.error
        try:
            items = self.parse(result.data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise FetchError(self.name, FetchFailure.EMPTY_OR_MALFORMED, f"unexpected shape: {e}") from e
        return items[: self.limit]


def get_adapters(fetcher: Optional[Fetcher] = None) -> List[Adapter]:
    """Adapters in precedence order: encyclopedia, code, news, books."""
    from .wikipedia import WikipediaAdapter
    from .github import GithubAdapter
    from .hackernews import HackerNewsAdapter
    from .openlibrary import OpenLibraryAdapter
    return [
        WikipediaAdapter(fetcher, limit=settings.WIKIPEDIA_LIMIT),
        GithubAdapter(fetcher, limit=settings.GITHUB_LIMIT),
        HackerNewsAdapter(fetcher, limit=settings.NEWS_LIMIT),
        OpenLibraryAdapter(fetcher, limit=settings.BOOKS_LIMIT),
    ]
