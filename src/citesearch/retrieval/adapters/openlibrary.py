"""Open Library book search."""

from typing import Any, Dict, List

from . import JsonAdapter
from ...schemas.evidence import TextItem

FIELDS = "key,title,author_name,first_publish_year,first_sentence,subject,number_of_pages_median"


class OpenLibraryAdapter(JsonAdapter):
    name = "openlibrary"
    endpoint = "https://openlibrary.org/search.json"

    def params(self, query: str) -> Dict[str, Any]:
        return {"q": query, "limit": str(self.limit), "fields": FIELDS}

    def parse(self, data: Any) -> List[TextItem]:
        items = []
        for doc in data.get("docs") or []:
            key, title = doc.get("key"), doc.get("title")
            if not key or not title:
                continue
            headline = title
            if doc.get("author_name"):
                headline += f" by {', '.join(doc['author_name'][:3])}"
            if doc.get("first_publish_year"):
                headline += f", first published {doc['first_publish_year']}"
            parts = [headline + "."]
            if doc.get("number_of_pages_median"):
                parts.append(f"About {doc['number_of_pages_median']} pages.")
            first_sentence = doc.get("first_sentence")
            if isinstance(first_sentence, list):
                first_sentence = first_sentence[0] if first_sentence else None
            if first_sentence:
                parts.append(f"Opening line: {first_sentence}")
            if doc.get("subject"):
                parts.append(f"Subjects: {', '.join(doc['subject'][:6])}.")
            items.append(TextItem(
                kind="book",
                url=f"https://openlibrary.org{key}",
                title=title,
                content=" ".join(parts),
                origin=self.name,
            ))
        return items
