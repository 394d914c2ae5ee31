"""GitHub repository search (unauthenticated, rate limited by GitHub)."""

from typing import Any, Dict, List

from . import JsonAdapter
from ...schemas.evidence import TextItem


class GithubAdapter(JsonAdapter):
    name = "github"
    endpoint = "https://api.github.com/search/repositories"

    def params(self, query: str) -> Dict[str, Any]:
        return {"q": query, "per_page": str(self.limit)}

    def parse(self, data: Any) -> List[TextItem]:
        items = []
        for repo in data.get("items") or []:
            description = (repo.get("description") or "").strip()
            url = repo.get("html_url")
            if not description or not url:
                continue
            facts = [f"{repo.get('stargazers_count', 0)} stars"]
            if repo.get("language"):
                facts.append(f"written in {repo['language']}")
            if repo.get("updated_at"):
                facts.append(f"last updated {repo['updated_at'][:10]}")
            content = f"{description} ({', '.join(facts)})"
            items.append(TextItem(
                kind="code",
                url=url,
                title=repo.get("full_name") or url,
                content=content,
                origin=self.name,
            ))
        return items
