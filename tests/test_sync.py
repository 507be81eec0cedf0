"""Tests for saved-feed synchronization."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

from atproto import models

from feed_atmosphere.core.types import PREF_LEGACY, PREF_V2
from feed_atmosphere.feeds.cache import FeedAliasCache
from feed_atmosphere.feeds.sync import (
    SAVED_FEEDS_PREF,
    SAVED_FEEDS_PREF_V2,
    FeedSynchronizer,
    parse_saved_feeds,
    saved_feed_uris,
)

from .fakes import FakeService


def _uri(name: str) -> str:
    return f"at://did:plc:creator/app.bsky.feed.generator/{name}"


def _legacy_pref(uris):
    return SimpleNamespace(py_type=SAVED_FEEDS_PREF, saved=list(uris), pinned=[])


def _v2_pref(items):
    return SimpleNamespace(
        py_type=SAVED_FEEDS_PREF_V2,
        items=[SimpleNamespace(type=kind, value=value) for kind, value in items],
    )


def test_legacy_preferences_sync_three_feeds(tmp_path: Path) -> None:
    uris = [_uri("a"), _uri("b"), _uri("c")]
    service = FakeService(
        preferences=[_legacy_pref(uris)],
        generators={uris[0]: "Discover", uris[1]: "Science", uris[2]: "Cat Pics"},
    )
    cache = FeedAliasCache(tmp_path / "feeds.json")

    feeds = FeedSynchronizer(service, cache).sync()

    assert feeds == {"discover": uris[0], "science": uris[1], "cat pics": uris[2]}
    assert all(key == key.lower() for key in feeds)
    assert cache.load() == feeds


def test_v2_preferences_keep_only_feed_items():
    prefs = parse_saved_feeds(
        [
            _v2_pref([("timeline", "following"), ("feed", _uri("a")), ("list", "at://list")]),
            SimpleNamespace(py_type="app.bsky.actor.defs#adultContentPref", enabled=False),
        ]
    )

    assert len(prefs) == 1
    assert prefs[0].shape == PREF_V2
    assert prefs[0].uris == (_uri("a"),)


def test_parse_saved_feeds_accepts_sdk_models():
    prefs = parse_saved_feeds(
        [
            models.AppBskyActorDefs.SavedFeedsPrefV2(
                items=[
                    models.AppBskyActorDefs.SavedFeed(id="1", pinned=True, type="feed", value=_uri("a")),
                    models.AppBskyActorDefs.SavedFeed(id="2", pinned=True, type="timeline", value="following"),
                ]
            ),
            models.AppBskyActorDefs.SavedFeedsPref(pinned=[], saved=[_uri("b")]),
        ]
    )

    assert [p.shape for p in prefs] == [PREF_V2, PREF_LEGACY]
    assert saved_feed_uris(prefs) == [_uri("a"), _uri("b")]


def test_saved_feed_uris_drops_duplicates_across_shapes():
    prefs = parse_saved_feeds([_v2_pref([("feed", _uri("a"))]), _legacy_pref([_uri("a"), _uri("b")])])

    assert saved_feed_uris(prefs) == [_uri("a"), _uri("b")]


def test_name_collision_keeps_later_batch(tmp_path: Path) -> None:
    first, second = _uri("first"), _uri("second")
    service = FakeService(
        preferences=[_legacy_pref([first, second])],
        generators={first: "Cats", second: "CATS"},
    )

    feeds = FeedSynchronizer(service, FeedAliasCache(tmp_path / "feeds.json"), batch_size=1).sync()

    assert feeds == {"cats": second}
    assert [call for call in service.calls if call[0] == "generators"] == [
        ("generators", [first]),
        ("generators", [second]),
    ]


def test_generator_lookups_are_batched_by_25(tmp_path: Path) -> None:
    uris = [_uri(f"f{i}") for i in range(30)]
    service = FakeService(
        preferences=[_legacy_pref(uris)],
        generators={uri: f"Feed {i}" for i, uri in enumerate(uris)},
    )

    feeds = FeedSynchronizer(service, FeedAliasCache(tmp_path / "feeds.json")).sync()

    batches = [call[1] for call in service.calls if call[0] == "generators"]
    assert [len(batch) for batch in batches] == [25, 5]
    assert len(feeds) == 30


def test_no_saved_feeds_leaves_cache_untouched(tmp_path: Path) -> None:
    path = tmp_path / "feeds.json"
    path.write_text('{"kept": "at://kept"}', encoding="utf-8")
    service = FakeService(preferences=[_v2_pref([("timeline", "following")])])

    feeds = FeedSynchronizer(service, FeedAliasCache(path)).sync()

    assert feeds == {}
    assert FeedAliasCache(path).load() == {"kept": "at://kept"}
    assert all(call[0] != "generators" for call in service.calls)
