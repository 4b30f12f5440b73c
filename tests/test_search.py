import sys
from pathlib import Path
from unittest.mock import Mock

import requests

sys.path.insert(0, str(Path(__file__).parent.parent))

from helix.search import SearchClient


def make_response(organic, ok=True, status_code=200):
    response = Mock(ok=ok, status_code=status_code)
    response.json.return_value = {"organic": organic}
    return response


def organic(n):
    return [
        {"title": f"Result {i}", "snippet": f"snippet {i}", "link": f"https://www.reddit.com/r/x/{i}"}
        for i in range(n)
    ]


def test_search_posts_query_and_parses_results():
    session = Mock()
    session.post.return_value = make_response(organic(2))
    client = SearchClient(api_key="key-123", session=session)

    results = client.search("site:reddit.com \"pain point\"", num=20, time_range="qdr:m6")

    assert [r.title for r in results] == ["Result 0", "Result 1"]
    assert results[0].link == "https://www.reddit.com/r/x/0"
    _, kwargs = session.post.call_args
    assert kwargs["json"] == {"q": "site:reddit.com \"pain point\"", "num": 20, "tbs": "qdr:m6"}
    assert kwargs["headers"]["X-API-KEY"] == "key-123"


def test_search_non_ok_status_yields_nothing():
    session = Mock()
    session.post.return_value = make_response([], ok=False, status_code=429)
    client = SearchClient(api_key="k", session=session)
    assert client.search("q") == []


def test_search_transport_error_yields_nothing():
    session = Mock()
    session.post.side_effect = requests.ConnectionError("connection reset")
    client = SearchClient(api_key="k", session=session)
    assert client.search("q") == []


def test_search_non_json_body_yields_nothing():
    session = Mock()
    response = Mock(ok=True, status_code=200)
    response.json.side_effect = ValueError("no json")
    session.post.return_value = response
    client = SearchClient(api_key="k", session=session)
    assert client.search("q") == []


def test_search_pages_until_short_page():
    session = Mock()
    session.post.side_effect = [make_response(organic(2)), make_response(organic(1))]
    client = SearchClient(api_key="k", session=session)

    results = client.search("q", num=2, pages=3)

    assert len(results) == 3
    assert session.post.call_count == 2
    _, kwargs = session.post.call_args
    assert kwargs["json"]["page"] == 2


def test_search_skips_malformed_items():
    session = Mock()
    session.post.return_value = make_response(["oops", {"title": "Only title"}])
    client = SearchClient(api_key="k", session=session)
    results = client.search("q")
    assert len(results) == 1
    assert results[0].link == ""
