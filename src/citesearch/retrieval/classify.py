"""Turns raw SearxNG result dicts into typed items.

Classification happens exactly once, here; later stages dispatch on the
item type only.
"""

import re
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlparse

from ..config import get_settings
from ..log import get_logger
from ..schemas.evidence import ImageItem, RawItem, TextItem, VideoItem

settings = get_settings()
logger = get_logger("classify")

VIDEO_HOSTS = ("youtube.com", "youtu.be", "vimeo.com", "dailymotion.com", "twitch.tv")

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def clean_text(value: Optional[str]) -> str:
    """Strips HTML tags and collapses whitespace. Non-strings become empty."""
    if not value or not isinstance(value, str):
        return ""
    return _WS_RE.sub(" ", _TAG_RE.sub("", value)).strip()


def is_video_host(url: str) -> bool:
    host = (urlparse(url).hostname or "").lower()
    return any(host == h or host.endswith("." + h) for h in VIDEO_HOSTS)


def _str_field(item: Dict[str, Any], key: str) -> Optional[str]:
    value = item.get(key)
    return value if isinstance(value, str) and value else None


def _is_video(item: Dict[str, Any], url: str) -> bool:
    if item.get("category") == "videos":
        return True
    if item.get("template") == "videos.html":
        return True
    return is_video_host(url)


def classify_web_item(item: Dict[str, Any], origin: str, min_content_chars: Optional[int] = None) -> Optional[RawItem]:
    """
    Video marker wins over an image locator; anything else must carry enough
    text to be worth citing. Returns None for items that are dropped.
    """
    if not isinstance(item, dict):
        return None
    url = item.get("url")
    if not url or not isinstance(url, str):
        return None

    title = clean_text(item.get("title")) or url

    if _is_video(item, url):
        return VideoItem(url=url, title=title)

    img_src = _str_field(item, "img_src") or _str_field(item, "thumbnail_src")
    if img_src:
        return ImageItem(url=url, img_src=img_src, title=title)

    limit = settings.MIN_CONTENT_CHARS if min_content_chars is None else min_content_chars
    content = clean_text(item.get("content"))
    if len(content) > limit:
        return TextItem(
            kind="web",
            url=url,
            title=title,
            content=content,
            origin=_str_field(item, "engine") or origin,
        )
    return None


def classify_web_results(results: Iterable[Dict[str, Any]], origin: str) -> List[RawItem]:
    items = []
    for raw in results:
        try:
            item = classify_web_item(raw, origin)
        except (TypeError, ValueError) as e:
            logger.warning(f"Dropping malformed result from {origin}: {e}")
            continue
        if item is not None:
            items.append(item)
    return items
