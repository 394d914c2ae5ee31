"""Multi-source evidence merger.

Fans out to the mirror failover loop and every specialized adapter at once,
classifies what comes back into text / image / video channels, and stamps
the text channel with ids 1..N. Ids exist only inside the EvidenceSet
returned for one query.
"""

import asyncio
import random
from typing import List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from ..config import get_settings
from ..errors import AggregateError, CitesearchError, EmptyEvidenceError, FetchError, FetchFailure
from ..log import get_logger
from ..schemas.evidence import (
    EvidenceSet, ImageItem, ImageResult, RawItem, Source, TextItem, VideoItem, VideoResult,
)
from .adapters import Adapter, get_adapters
from .classify import classify_web_results
from .failover import try_backends
from .fetch import Fetcher, fetcher as default_fetcher
from .registry import BackendDescriptor, load_backends

settings = get_settings()
logger = get_logger("merge")


def url_key(url: str) -> str:
    """Normalised form used for de-duplication (scheme, www. and trailing slash ignored)."""
    parsed = urlparse(url.strip())
    host = (parsed.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    key = host + parsed.path.rstrip("/")
    if parsed.query:
        key += "?" + parsed.query
    return key


def make_snippet(content: str, limit: Optional[int] = None) -> str:
    limit = settings.SNIPPET_CHARS if limit is None else limit
    if len(content) <= limit:
        return content
    return content[:limit].rstrip() + "..."


def build_sources(items: Sequence[TextItem], max_sources: Optional[int] = None) -> List[Source]:
    """De-duplicates by URL, truncates, then numbers by final position starting at 1."""
    max_sources = settings.MAX_SOURCES if max_sources is None else max_sources
    seen = set()
    kept: List[TextItem] = []
    for item in items:
        key = url_key(item.url)
        if key in seen:
            continue
        seen.add(key)
        kept.append(item)
        if len(kept) >= max_sources:
            break

    return [
        Source(
            id=i,
            title=item.title,
            url=item.url,
            content=item.content,
            origin_tag=item.origin,
            snippet=make_snippet(item.content),
        )
        for i, item in enumerate(kept, start=1)
    ]


def build_images(items: Sequence[ImageItem], max_images: Optional[int] = None) -> List[ImageResult]:
    max_images = settings.MAX_IMAGES if max_images is None else max_images
    seen = set()
    images = []
    for item in items:
        if item.img_src in seen:
            continue
        seen.add(item.img_src)
        images.append(ImageResult(url=item.url, img_src=item.img_src, title=item.title))
    return images[:max_images]


def build_videos(items: Sequence[VideoItem], max_videos: Optional[int] = None) -> List[VideoResult]:
    max_videos = settings.MAX_VIDEOS if max_videos is None else max_videos
    seen = set()
    videos = []
    for item in items:
        key = url_key(item.url)
        if key in seen:
            continue
        seen.add(key)
        videos.append(VideoResult(url=item.url, title=item.title))
    return videos[:max_videos]


class EvidenceAggregator:
    def __init__(
        self,
        backends: Optional[Sequence[BackendDescriptor]] = None,
        adapters: Optional[Sequence[Adapter]] = None,
        fetcher: Optional[Fetcher] = None,
        rng: Optional[random.Random] = None,
    ):
        self.fetcher = fetcher or default_fetcher
        self.backends = list(backends) if backends is not None else load_backends()
        self.adapters = list(adapters) if adapters is not None else get_adapters(self.fetcher)
        self.rng = rng

    async def _web_items(self, query: str) -> Tuple[List[RawItem], Optional[CitesearchError]]:
        try:
            result = await try_backends(self.backends, query, fetcher=self.fetcher, rng=self.rng)
        except AggregateError as e:
            logger.warning(f"Web search unavailable: {e}")
            return [], e
        try:
            return classify_web_results(result.data["results"], result.origin), None
        except (KeyError, TypeError, ValueError) as e:
            error = FetchError(result.origin, FetchFailure.EMPTY_OR_MALFORMED, f"unexpected shape: {e}")
            logger.warning(f"Web search unusable: {error}")
            return [], error

    async def _adapter_items(self, adapter: Adapter, query: str) -> Tuple[List[TextItem], Optional[CitesearchError]]:
        try:
            items = await adapter.search(query)
        except FetchError as e:
            logger.warning(f"Specialized source {e}")
            return [], e
        logger.info(f"{adapter.name}: {len(items)} items")
        return items, None

    async def aggregate(self, query: str) -> EvidenceSet:
        """
        Raises EmptyEvidenceError when no channel produced a single textual
        source; partial failures only show up in EvidenceSet.errors.
        """
        (web_items, web_error), *specialized = await asyncio.gather(
            self._web_items(query),
            *(self._adapter_items(adapter, query) for adapter in self.adapters),
        )

        errors: List[CitesearchError] = [err for _, err in specialized if err is not None]
        if web_error is not None:
            errors.append(web_error)

        text_items: List[TextItem] = [item for items, _ in specialized for item in items]
        text_items += [item for item in web_items if isinstance(item, TextItem)]

        sources = build_sources(text_items)
        if not sources:
            cause = errors[-1] if errors else None
            raise EmptyEvidenceError(f"No usable evidence found for query: {query!r}", cause=cause)

        evidence = EvidenceSet(
            query=query,
            sources=sources,
            images=build_images([i for i in web_items if isinstance(i, ImageItem)]),
            videos=build_videos([i for i in web_items if isinstance(i, VideoItem)]),
            errors=[str(e) for e in errors],
        )
        logger.info(
            f"Merged {len(evidence.sources)} sources, {len(evidence.images)} images, "
            f"{len(evidence.videos)} videos ({len(errors)} channel failures)"
        )
        return evidence
