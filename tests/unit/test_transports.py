"""Unit tests for the rss2json and direct feed transports."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from rssbrief.fetchers import FeedTransport, Rss2JsonTransport, TransportError
from rssbrief.models import FeedItem, Rss2JsonItem

FEED_URL = "https://a.example.com/feed"

RSS_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"><channel><title>A</title>
<item><title>First</title><link>https://a.example.com/1</link>
<pubDate>Wed, 01 May 2024 12:00:00 GMT</pubDate><description>&lt;p&gt;One&lt;/p&gt;</description></item>
<item><title>Second</title><link>https://a.example.com/2</link></item>
</channel></rss>"""

ATOM_XML = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom"><title>B</title>
<entry><title>Atom entry</title><link href="https://b.example.com/x"/>
<updated>2024-05-01T10:00:00Z</updated><summary>Sum</summary></entry>
</feed>"""


def _response(status=200, json_data=None, content=b"", json_error=None):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 400
    resp.content = content
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = json_data
    return resp


class TestRss2JsonTransport:
    def test_success_and_request_params(self):
        payload = {
            "status": "ok",
            "items": [{"title": "Hello", "link": "https://x/1", "pubDate": "2024-05-01 12:00:00"}],
        }
        transport = Rss2JsonTransport(api_key="secret", timeout=5)
        with patch("rssbrief.fetchers.rss2json.requests.get", return_value=_response(json_data=payload)) as get:
            items = transport.fetch(FEED_URL, limit=15)

        assert items == [Rss2JsonItem(title="Hello", link="https://x/1", pub_date="2024-05-01 12:00:00")]
        params = get.call_args.kwargs["params"]
        assert params["rss_url"] == FEED_URL
        assert params["count"] == "15"
        assert params["order_by"] == "pubDate"
        assert params["order_dir"] == "desc"
        assert params["api_key"] == "secret"
        assert get.call_args.kwargs["timeout"] == 5

    def test_no_api_key_param_by_default(self):
        with patch(
            "rssbrief.fetchers.rss2json.requests.get",
            return_value=_response(json_data={"status": "ok", "items": []}),
        ) as get:
            assert Rss2JsonTransport().fetch(FEED_URL, limit=15) == []
        assert "api_key" not in get.call_args.kwargs["params"]

    def test_http_error(self):
        with patch("rssbrief.fetchers.rss2json.requests.get", return_value=_response(status=500)):
            with pytest.raises(TransportError, match="HTTP 500"):
                Rss2JsonTransport().fetch(FEED_URL, limit=15)

    def test_provider_error_message(self):
        payload = {"status": "error", "message": "Cannot download this RSS feed"}
        with patch("rssbrief.fetchers.rss2json.requests.get", return_value=_response(json_data=payload)):
            with pytest.raises(TransportError, match="Cannot download"):
                Rss2JsonTransport().fetch(FEED_URL, limit=15)

    def test_provider_error_without_message(self):
        with patch("rssbrief.fetchers.rss2json.requests.get", return_value=_response(json_data={"status": "error"})):
            with pytest.raises(TransportError, match="rss2json error"):
                Rss2JsonTransport().fetch(FEED_URL, limit=15)

    def test_invalid_json(self):
        with patch(
            "rssbrief.fetchers.rss2json.requests.get",
            return_value=_response(json_error=ValueError("bad json")),
        ):
            with pytest.raises(TransportError):
                Rss2JsonTransport().fetch(FEED_URL, limit=15)

    def test_network_error(self):
        with patch(
            "rssbrief.fetchers.rss2json.requests.get",
            side_effect=requests.ConnectionError("connection refused"),
        ):
            with pytest.raises(TransportError, match="connection refused"):
                Rss2JsonTransport().fetch(FEED_URL, limit=15)


class TestFeedTransport:
    def test_parses_rss_items(self):
        with patch("rssbrief.fetchers.rss.requests.get", return_value=_response(content=RSS_XML)) as get:
            items = FeedTransport().fetch(FEED_URL, limit=15)

        assert get.call_args.args[0] == FEED_URL
        assert [i.title for i in items] == ["First", "Second"]
        assert items[0].link == "https://a.example.com/1"
        assert items[0].published == "Wed, 01 May 2024 12:00:00 GMT"
        assert items[0].description == "<p>One</p>"
        assert items[1].published is None

    def test_parses_atom_entries(self):
        with patch("rssbrief.fetchers.rss.requests.get", return_value=_response(content=ATOM_XML)):
            items = FeedTransport().fetch(FEED_URL, limit=15)

        assert len(items) == 1
        assert isinstance(items[0], FeedItem)
        assert items[0].link == "https://b.example.com/x"
        assert items[0].published == "2024-05-01T10:00:00Z"
        assert items[0].description == "Sum"

    def test_proxy_prefix_encodes_url(self):
        transport = FeedTransport(proxy_prefix="https://corsproxy.io/?")
        assert transport.request_url(FEED_URL) == "https://corsproxy.io/?https%3A%2F%2Fa.example.com%2Ffeed"

    def test_http_error(self):
        with patch("rssbrief.fetchers.rss.requests.get", return_value=_response(status=404)):
            with pytest.raises(TransportError, match="HTTP 404"):
                FeedTransport().fetch(FEED_URL, limit=15)

    def test_unparsable_document(self):
        with patch("rssbrief.fetchers.rss.requests.get", return_value=_response(content=b"<html><oops")):
            with pytest.raises(TransportError, match="Malformed feed"):
                FeedTransport().fetch(FEED_URL, limit=15)

    def test_timeout(self):
        with patch("rssbrief.fetchers.rss.requests.get", side_effect=requests.Timeout("timed out")):
            with pytest.raises(TransportError, match="timed out"):
                FeedTransport().fetch(FEED_URL, limit=15)
