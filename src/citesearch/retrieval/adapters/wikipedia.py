"""Wikipedia intro extracts via the MediaWiki API (no API key)."""

from typing import Any, Dict, List

from . import JsonAdapter
from ..classify import clean_text
from ...schemas.evidence import TextItem


class WikipediaAdapter(JsonAdapter):
    name = "wikipedia"
    endpoint = "https://en.wikipedia.org/w/api.php"

    def params(self, query: str) -> Dict[str, Any]:
        # One round trip: search as a generator, intro extracts as the page prop
        return {
            "action": "query",
            "format": "json",
            "formatversion": "2",
            "generator": "search",
            "gsrsearch": query,
            "gsrlimit": str(self.limit),
            "prop": "extracts|info",
            "exintro": "1",
            "explaintext": "1",
            "exlimit": "max",
            "inprop": "url",
            "utf8": "1",
        }

    def parse(self, data: Any) -> List[TextItem]:
        pages = (data.get("query") or {}).get("pages") or []
        pages = sorted(pages, key=lambda p: p.get("index", 0))
        items = []
        for page in pages:
            extract = clean_text(page.get("extract"))
            if not extract:
                continue
            title = page.get("title") or "(no title)"
            url = page.get("fullurl") or f"https://en.wikipedia.org/?curid={page.get('pageid')}"
            items.append(TextItem(kind="encyclopedia", url=url, title=title, content=extract, origin=self.name))
        return items
