from citesearch.retrieval.classify import classify_web_item, classify_web_results, clean_text, is_video_host
from citesearch.schemas.evidence import ImageItem, TextItem, VideoItem

LONG = "Paris is the capital of France with over 2 million residents."

def test_long_content_becomes_web_text(make_searx_item):
    item = classify_web_item(make_searx_item("https://a", "Paris", LONG), origin="searx.test")

    assert isinstance(item, TextItem)
    assert item.kind == "web"
    assert item.content == LONG
    assert item.origin == "google"  # engine name wins over the mirror name

def test_short_or_missing_content_is_dropped(make_searx_item):
    """
    WHY: Boilerplate snippets ("Sign in", "") are worthless as evidence.
    HOW: Classify items with content at and below the 50 character threshold.
    EXPECTED: Both are dropped.
    """
    assert classify_web_item(make_searx_item("https://a", "A", "x" * 50), origin="m") is None
    assert classify_web_item(make_searx_item("https://a", "A"), origin="m") is None
    assert isinstance(classify_web_item(make_searx_item("https://a", "A", "x" * 51), origin="m"), TextItem)

def test_image_locator_makes_image(make_searx_item):
    raw = make_searx_item("https://page", "Eiffel", img_src="https://img/e.jpg", category="images")

    item = classify_web_item(raw, origin="m")

    assert isinstance(item, ImageItem)
    assert item.img_src == "https://img/e.jpg"

def test_thumbnail_counts_as_image_locator(make_searx_item):
    item = classify_web_item(make_searx_item("https://page", "T", thumbnail_src="https://img/t.jpg"), origin="m")

    assert isinstance(item, ImageItem)

def test_video_marker_beats_image_locator(make_searx_item):
    """
    WHY: Video results usually carry a thumbnail; they must not end up in the image grid.
    HOW: Classify a YouTube result with a thumbnail, and a generic-host result tagged as videos.
    EXPECTED: Both are VideoItems.
    """
    yt = make_searx_item("https://www.youtube.com/watch?v=1", "Clip", LONG, thumbnail_src="https://i.ytimg.com/1.jpg")
    tagged = make_searx_item("https://example.org/v/1", "Talk", LONG, category="videos")
    templated = make_searx_item("https://example.org/v/2", "Talk 2", template="videos.html")

    assert isinstance(classify_web_item(yt, origin="m"), VideoItem)
    assert isinstance(classify_web_item(tagged, origin="m"), VideoItem)
    assert isinstance(classify_web_item(templated, origin="m"), VideoItem)

def test_video_hosts():
    assert is_video_host("https://youtu.be/abc")
    assert is_video_host("https://player.vimeo.com/video/1")
    assert not is_video_host("https://notyoutube.com/watch")

def test_items_without_url_are_dropped():
    assert classify_web_item({"title": "x", "content": LONG}, origin="m") is None
    assert classify_web_item("not a dict", origin="m") is None

def test_html_is_stripped_from_title_and_content(make_searx_item):
    raw = make_searx_item("https://a", "<b>Paris</b>", "<span>" + LONG + "</span>\n\n  extra")

    item = classify_web_item(raw, origin="m")

    assert item.title == "Paris"
    assert item.content == LONG + " extra"

def test_classify_results_keeps_order(make_searx_item):
    results = [
        make_searx_item("https://1", "one", LONG),
        make_searx_item("https://2", "short", "tiny"),
        make_searx_item("https://3", "img", img_src="https://img/3.png"),
        make_searx_item("https://4", "four", LONG),
    ]

    items = classify_web_results(results, origin="m")

    assert [i.url for i in items] == ["https://1", "https://3", "https://4"]

def test_clean_text_handles_none():
    assert clean_text(None) == ""

def test_non_string_fields_are_ignored():
    """
    WHY: Mirror payloads are untrusted; a number where text belongs must not raise out of classification.
    HOW: Feed items with numeric content, a dict img_src and a numeric engine.
    EXPECTED: The bad fields are treated as absent; the item with enough text still becomes a TextItem.
    """
    long = "x" * 80
    results = [
        {"url": "https://a", "title": "t", "content": 123},
        {"url": "https://b", "title": 9, "img_src": {"x": 1}, "content": long, "engine": 7},
    ]

    items = classify_web_results(results, origin="m")

    assert len(items) == 1
    assert isinstance(items[0], TextItem)
    assert (items[0].url, items[0].title, items[0].origin) == ("https://b", "https://b", "m")
    assert clean_text(123) == ""
