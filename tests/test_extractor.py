"""Tests for feed item extraction and timestamp parsing."""

from __future__ import annotations

from datetime import datetime, timezone

from atproto import models

from feed_atmosphere.feeds.extractor import extract_post, parse_indexed_at

from .fakes import NOW, make_item


def test_extract_post_from_feed_view_model():
    view = models.AppBskyFeedDefs.FeedViewPost(
        post=models.AppBskyFeedDefs.PostView(
            uri="at://did:plc:placeholder/app.bsky.feed.post/123",
            cid="bafyreiclp443lavogvhj3d2ob2cxbfuscni2k5jk7bebjzg7khl3esabwq",
            author=models.AppBskyActorDefs.ProfileViewBasic(
                did="did:plc:placeholder",
                handle="test.bsky.social",
            ),
            record=models.AppBskyFeedPost.Record(
                text="This is a test post",
                created_at="2023-01-01T00:00:00Z",
            ),
            like_count=10,
            repost_count=5,
            indexed_at="2023-01-01T00:00:00Z",
        )
    )

    post = extract_post(view)

    assert post is not None
    assert post.author == "test.bsky.social"
    assert post.text == "This is a test post"
    assert post.like_count == 10
    assert post.repost_count == 5
    assert post.created_at == datetime(2023, 1, 1, tzinfo=timezone.utc)


def test_extract_post_accepts_untyped_post_record():
    record = {"$type": "app.bsky.feed.post", "text": "from a dict", "createdAt": "2024-06-01T11:00:00Z"}
    post = extract_post(make_item(5, record=record))

    assert post is not None
    assert post.text == "from a dict"


def test_extract_post_drops_record_without_text():
    record = {"$type": "app.bsky.feed.post", "createdAt": "2024-06-01T11:00:00Z"}
    assert extract_post(make_item(5, record=record)) is None


def test_extract_post_drops_other_record_types():
    record = {
        "$type": "app.bsky.feed.like",
        "subject": {"uri": "at://did:plc:x/app.bsky.feed.post/1", "cid": "bafy"},
        "createdAt": "2024-06-01T11:00:00Z",
    }
    assert extract_post(make_item(5, record=record)) is None


def test_extract_post_substitutes_now_for_bad_timestamp():
    item = make_item(0, text="still here", handle="bob.bsky.social", like_count=3, repost_count=2)
    item.post.indexed_at = "not-a-timestamp"

    post = extract_post(item, now=NOW)

    assert post is not None
    assert post.created_at == NOW
    assert post.text == "still here"
    assert post.author == "bob.bsky.social"
    assert post.like_count == 3
    assert post.repost_count == 2


def test_extract_post_defaults_missing_counts_to_zero():
    post = extract_post(make_item(1, like_count=None, repost_count=None))

    assert post is not None
    assert post.like_count == 0
    assert post.repost_count == 0


def test_parse_indexed_at_normalizes_to_utc():
    assert parse_indexed_at("2024-06-01T14:00:00+02:00") == NOW
    assert parse_indexed_at("2024-06-01T12:00:00.000Z") == NOW
    assert parse_indexed_at("2024-06-01T12:00:00") == NOW


def test_parse_indexed_at_falls_back_for_missing_values():
    assert parse_indexed_at(None, now=NOW) == NOW
    assert parse_indexed_at("", now=NOW) == NOW
    assert parse_indexed_at("yesterday", now=NOW) == NOW


def test_parse_indexed_at_accepts_any_fraction_length():
    assert parse_indexed_at("2024-06-01T12:00:00.5Z") == NOW.replace(microsecond=500000)
    assert parse_indexed_at("2024-06-01T12:00:00.12Z") == NOW.replace(microsecond=120000)
    assert parse_indexed_at("2024-06-01T12:00:00.1234567Z") == NOW.replace(microsecond=123456)
    assert parse_indexed_at("2024-06-01T14:00:00.123456789+02:00") == NOW.replace(microsecond=123456)
