"""
Unit tests for the concurrent feed fetcher.
"""
from unittest.mock import MagicMock

import requests

from radar.fetcher import fetch_all, fetch_rss_feed
from radar.models import FeedSource

A = FeedSource(endpoint="https://a.example/rss", label="Source A")
B = FeedSource(endpoint="https://b.example/rss", label="Source B")
DOWN = FeedSource(endpoint="https://down.example/rss", label="Down")


def _rss(*items):
    body = "".join(
        f"<item><title>{title}</title><link>https://x/{n}</link>"
        + (f"<pubDate>{date}</pubDate>" if date else "")
        + "</item>"
        for n, (title, date) in enumerate(items)
    )
    return f'<?xml version="1.0"?><rss version="2.0"><channel><title>t</title>{body}</channel></rss>'


def _session(pages: dict):
    def get(url, timeout=None, headers=None):
        page = pages[url]
        if isinstance(page, Exception):
            raise page
        resp = MagicMock()
        resp.content = page.encode("utf-8")
        resp.raise_for_status.return_value = None
        return resp

    session = MagicMock(spec=requests.Session)
    session.get.side_effect = get
    return session


class TestFetchRssFeed:

    def test_drops_items_outside_recency_window(self, now):
        session = _session({A.endpoint: _rss(
            ("Fresh", "Fri, 16 Oct 2026 09:00:00 GMT"),
            ("Stale", "Wed, 01 Jul 2026 09:00:00 GMT"),
            ("Undated", None),
        )})

        items = fetch_rss_feed(A, session, max_age_days=7, now=now)

        assert [i.title for i in items] == ["Fresh", "Undated"]

    def test_network_error_yields_empty(self, now):
        session = _session({DOWN.endpoint: requests.ConnectionError("refused")})

        assert fetch_rss_feed(DOWN, session, now=now) == []

    def test_http_error_yields_empty(self, now):
        resp = MagicMock()
        resp.raise_for_status.side_effect = requests.HTTPError("503")
        session = MagicMock(spec=requests.Session)
        session.get.return_value = resp

        assert fetch_rss_feed(A, session, now=now) == []


class TestFetchAll:

    def test_failure_is_isolated_and_order_follows_sources(self, now):
        session = _session({
            A.endpoint: _rss(("A1", None), ("Shared", None)),
            DOWN.endpoint: requests.Timeout("slow"),
            B.endpoint: _rss(("Shared", None), ("B1", None)),
        })

        items = fetch_all([A, DOWN, B], session=session, now=now, workers=3)

        assert [(i.title, i.source_label) for i in items] == [
            ("A1", "Source A"), ("Shared", "Source A"), ("Shared", "Source B"), ("B1", "Source B"),
        ]
        assert session.get.call_count == 3

    def test_no_sources(self):
        assert fetch_all([]) == []
