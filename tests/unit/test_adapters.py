import httpx
import pytest

from citesearch.errors import FetchError, FetchFailure
from citesearch.retrieval.adapters import get_adapters
from citesearch.retrieval.adapters.github import GithubAdapter
from citesearch.retrieval.adapters.hackernews import HackerNewsAdapter
from citesearch.retrieval.adapters.openlibrary import OpenLibraryAdapter
from citesearch.retrieval.adapters.wikipedia import WikipediaAdapter
from citesearch.retrieval.fetch import FetchResult

def respond(payload):
    return lambda request: httpx.Response(200, json=payload)

@pytest.mark.asyncio
async def test_wikipedia_orders_by_search_rank(mock_fetcher):
    """
    WHY: The generator API returns pages keyed in arbitrary order; rank lives in `index`.
    HOW: Return two pages out of rank order plus one without an extract.
    EXPECTED: Encyclopedia items ordered by index, the empty page skipped, HTML stripped.
    """
    payload = {"query": {"pages": [
        {"pageid": 2, "index": 2, "title": "Paris (mythology)", "extract": "A Trojan prince.", "fullurl": "https://en.wikipedia.org/wiki/Paris_(mythology)"},
        {"pageid": 1, "index": 1, "title": "Paris", "extract": "Paris is the <b>capital</b> of France.", "fullurl": "https://en.wikipedia.org/wiki/Paris"},
        {"pageid": 3, "index": 3, "title": "Empty"},
    ]}}
    adapter = WikipediaAdapter(mock_fetcher(respond(payload)), limit=5)

    items = await adapter.search("Paris")

    assert [i.title for i in items] == ["Paris", "Paris (mythology)"]
    assert items[0].content == "Paris is the capital of France."
    assert items[0].kind == "encyclopedia"
    assert items[0].origin == "wikipedia"

@pytest.mark.asyncio
async def test_wikipedia_sends_search_generator_params(mock_fetcher):
    seen = {}

    def handler(request):
        seen["params"] = request.url.params
        return httpx.Response(200, json={"batchcomplete": True})

    items = await WikipediaAdapter(mock_fetcher(handler), limit=2).search("rust language")

    assert items == []
    assert seen["params"]["gsrsearch"] == "rust language"
    assert seen["params"]["gsrlimit"] == "2"
    assert seen["params"]["generator"] == "search"

@pytest.mark.asyncio
async def test_github_repositories(mock_fetcher):
    payload = {"items": [
        {"full_name": "tokio-rs/tokio", "html_url": "https://github.com/tokio-rs/tokio",
         "description": "A runtime for writing reliable asynchronous applications with Rust.",
         "stargazers_count": 27000, "language": "Rust", "updated_at": "2024-05-01T10:00:00Z"},
        {"full_name": "empty/desc", "html_url": "https://github.com/empty/desc", "description": None},
    ]}

    items = await GithubAdapter(mock_fetcher(respond(payload)), limit=2).search("async runtime")

    assert len(items) == 1
    assert items[0].kind == "code"
    assert items[0].title == "tokio-rs/tokio"
    assert "27000 stars" in items[0].content
    assert "written in Rust" in items[0].content
    assert "last updated 2024-05-01" in items[0].content

@pytest.mark.asyncio
async def test_hackernews_falls_back_to_discussion_url(mock_fetcher):
    payload = {"hits": [
        {"objectID": "42", "title": "Ask HN: Best Rust books?", "url": None, "story_text": "<p>Looking for recs</p>",
         "points": 120, "num_comments": 80, "created_at": "2023-02-03T00:00:00Z"},
        {"objectID": "43", "title": "Show HN: A thing", "url": "https://thing.example", "points": 5, "num_comments": 1},
    ]}

    items = await HackerNewsAdapter(mock_fetcher(respond(payload)), limit=2).search("rust books")

    assert items[0].url == "https://news.ycombinator.com/item?id=42"
    assert items[0].content.startswith("Looking for recs")
    assert "120 points" in items[0].content
    assert items[1].url == "https://thing.example"
    assert items[1].kind == "news"

@pytest.mark.asyncio
async def test_openlibrary_books(mock_fetcher):
    payload = {"docs": [{
        "key": "/works/OL45804W", "title": "Fantastic Mr Fox", "author_name": ["Roald Dahl"],
        "first_publish_year": 1970, "first_sentence": ["And these two very old people are the father and mother of Mr Fox."],
        "subject": ["Foxes", "Farmers"],
    }]}

    items = await OpenLibraryAdapter(mock_fetcher(respond(payload)), limit=1).search("fantastic mr fox")

    assert items[0].url == "https://openlibrary.org/works/OL45804W"
    assert items[0].content.startswith("Fantastic Mr Fox by Roald Dahl, first published 1970.")
    assert "Subjects: Foxes, Farmers." in items[0].content
    assert items[0].kind == "book"

@pytest.mark.asyncio
async def test_limit_caps_items(mock_fetcher):
    payload = {"hits": [{"objectID": str(i), "title": f"Story {i}"} for i in range(5)]}

    items = await HackerNewsAdapter(mock_fetcher(respond(payload)), limit=2).search("x")

    assert [i.title for i in items] == ["Story 0", "Story 1"]

@pytest.mark.asyncio
async def test_zero_limit_skips_the_request(mock_fetcher):
    def handler(request):
        raise AssertionError("should not be called")

    assert await GithubAdapter(mock_fetcher(handler), limit=0).search("x") == []

@pytest.mark.asyncio
async def test_upstream_failure_raises_fetch_error(mock_fetcher):
    """
    WHY: The merger has to tell "no hits" apart from "source down" for diagnostics.
    HOW: GitHub answers 403 (rate limited).
    EXPECTED: FetchError with the adapter's name and HTTP_STATUS.
    """
    adapter = GithubAdapter(mock_fetcher(lambda request: httpx.Response(403, json={"message": "rate limited"})))

    with pytest.raises(FetchError) as exc_info:
        await adapter.search("x")

    assert exc_info.value.origin == "github"
    assert exc_info.value.kind == FetchFailure.HTTP_STATUS

@pytest.mark.asyncio
async def test_unexpected_shape_is_malformed(mock_fetcher):
    adapter = WikipediaAdapter(mock_fetcher(respond({"query": {"pages": ["oops"]}})))

    with pytest.raises(FetchError) as exc_info:
        await adapter.search("x")

    assert exc_info.value.kind == FetchFailure.EMPTY_OR_MALFORMED

def test_adapter_precedence(settings):
    assert [a.name for a in get_adapters()] == ["wikipedia", "github", "hackernews", "openlibrary"]

@pytest.mark.asyncio
async def test_explicit_zero_timeout_is_passed_through(settings):
    """
    WHY: An explicit timeout must reach the fetcher as given, even when it is falsy.
    HOW: Record the timeout handed to get_json by an adapter built with timeout=0.
    EXPECTED: 0 is passed, not the configured default.
    """
    class RecordingFetcher:
        async def get_json(self, url, params, origin, timeout=None):
            self.timeout = timeout
            return FetchResult(origin=origin, data={"hits": []})

    fetcher = RecordingFetcher()

    assert await HackerNewsAdapter(fetcher, timeout=0).search("x") == []
    assert fetcher.timeout == 0
