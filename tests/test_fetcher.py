"""Tests for the paginated, time-windowed fetch."""

from __future__ import annotations

from datetime import timedelta

import pytest

from feed_atmosphere.core.types import ALIAS, TIMELINE, ResolvedFeed
from feed_atmosphere.feeds.fetcher import PaginatedFetcher, cutoff_for, fetch_posts

from .fakes import NOW, FakeService, make_item


FEED = ResolvedFeed(kind=ALIAS, value="at://did:plc:x/app.bsky.feed.generator/cats")
CUTOFF = NOW - timedelta(minutes=60)


def test_stops_at_first_item_before_cutoff_across_pages():
    page1 = [make_item(m, text=f"p1-{m}") for m in (1, 2, 3, 4, 5)]
    page2 = [make_item(m, text=f"p2-{m}") for m in (10, 20, 90, 30, 40)]
    page3 = [make_item(m, text=f"p3-{m}") for m in (50, 55)]
    service = FakeService(pages=[(page1, "c1"), (page2, "c2"), (page3, None)])

    posts = fetch_posts(service, FEED, CUTOFF)

    assert [p.text for p in posts] == ["p1-1", "p1-2", "p1-3", "p1-4", "p1-5", "p2-10", "p2-20"]
    assert service.calls == [
        ("feed", FEED.value, None, 100),
        ("feed", FEED.value, "c1", 100),
    ]
    assert len(service.pages) == 1


def test_stops_when_no_cursor_is_returned():
    service = FakeService(pages=[([make_item(1), make_item(2)], "c1"), ([make_item(3)], None)])

    posts = fetch_posts(service, FEED, CUTOFF)

    assert len(posts) == 3
    assert [call[2] for call in service.calls] == [None, "c1"]


def test_timeline_uses_timeline_endpoint():
    service = FakeService(pages=[([make_item(1)], None)])

    fetch_posts(service, ResolvedFeed(kind=TIMELINE), CUTOFF)

    assert service.calls == [("timeline", None, None, 100)]


def test_no_returned_post_predates_cutoff():
    minutes = [0, 15, 59, 60, 61, 120]
    service = FakeService(pages=[([make_item(m) for m in minutes], "more")])

    posts = fetch_posts(service, FEED, CUTOFF)

    assert len(posts) == 4
    assert all(p.created_at >= CUTOFF for p in posts)


def test_post_exactly_at_cutoff_is_included():
    service = FakeService(pages=[([make_item(60, text="edge")], None)])

    posts = fetch_posts(service, FEED, CUTOFF)

    assert [p.text for p in posts] == ["edge"]
    assert posts[0].created_at == CUTOFF


def test_malformed_items_are_skipped_without_stopping():
    bad = make_item(2, record={"$type": "app.bsky.feed.post", "createdAt": "2024-06-01T11:58:00Z"})
    service = FakeService(pages=[([make_item(1, text="a"), bad, make_item(3, text="b")], None)])

    posts = fetch_posts(service, FEED, CUTOFF)

    assert [p.text for p in posts] == ["a", "b"]


def test_empty_page_without_cursor_returns_nothing():
    service = FakeService(pages=[([], None)])
    assert fetch_posts(service, FEED, CUTOFF) == []


def test_custom_page_size_is_forwarded():
    service = FakeService(pages=[([make_item(1)], None)])

    PaginatedFetcher(service, page_size=25).fetch(FEED, CUTOFF)

    assert service.calls[0][3] == 25


@pytest.mark.parametrize("page_size", [0, 101])
def test_rejects_out_of_range_page_size(page_size):
    with pytest.raises(ValueError, match="page_size"):
        PaginatedFetcher(FakeService(), page_size=page_size)


def test_cutoff_for_subtracts_minutes():
    assert cutoff_for(60, now=NOW) == CUTOFF
    assert cutoff_for(0, now=NOW) == NOW
    with pytest.raises(ValueError):
        cutoff_for(-1, now=NOW)
