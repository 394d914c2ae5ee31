"""Hacker News stories via the Algolia search API."""

from typing import Any, Dict, List

from . import JsonAdapter
from ..classify import clean_text
from ...schemas.evidence import TextItem

HN_ITEM_URL = "https://news.ycombinator.com/item?id={}"


class HackerNewsAdapter(JsonAdapter):
    name = "hackernews"
    endpoint = "https://hn.algolia.com/api/v1/search"

    def params(self, query: str) -> Dict[str, Any]:
        return {"query": query, "tags": "story", "hitsPerPage": str(self.limit)}

    def parse(self, data: Any) -> List[TextItem]:
        items = []
        for hit in data.get("hits") or []:
            title = clean_text(hit.get("title"))
            object_id = hit.get("objectID")
            if not title or not object_id:
                continue
            discussion = HN_ITEM_URL.format(object_id)
            body = clean_text(hit.get("story_text"))
            summary = (
                f"Hacker News discussion with {hit.get('points') or 0} points and "
                f"{hit.get('num_comments') or 0} comments"
            )
            if hit.get("created_at"):
                summary += f", posted {hit['created_at'][:10]}"
            content = f"{body} ({summary})" if body else f"{title}. {summary}."
            items.append(TextItem(
                kind="news",
                url=hit.get("url") or discussion,
                title=title,
                content=content,
                origin=self.name,
            ))
        return items
