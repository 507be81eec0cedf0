"""
Synchronization of saved feeds into the local alias cache.

Reads the account's saved-feed preferences, looks up each feed
generator's display name, and rewrites the alias cache. Two preference
shapes exist in the wild:

- ``app.bsky.actor.defs#savedFeedsPrefV2``: ``items`` of ``{type, value}``;
  only ``type == "feed"`` entries are feed generators
- ``app.bsky.actor.defs#savedFeedsPref``: legacy flat ``saved`` URI list

Both are normalized to a flat URI list right after parsing.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from ..config import MAX_GENERATOR_BATCH
from ..core.types import PREF_LEGACY, PREF_V2, SavedFeedsPreference
from ..logging_utils import get_logger, log_event
from .cache import FeedAliasCache


SAVED_FEEDS_PREF_V2 = "app.bsky.actor.defs#savedFeedsPrefV2"
SAVED_FEEDS_PREF = "app.bsky.actor.defs#savedFeedsPref"


def parse_saved_feeds(preferences: Iterable[Any]) -> list[SavedFeedsPreference]:
    """Pick the saved-feeds entries out of a preferences list.

    Other preference types are ignored.
    """
    parsed: list[SavedFeedsPreference] = []
    for pref in preferences:
        pref_type = _field(pref, "py_type", "$type")
        if pref_type == SAVED_FEEDS_PREF_V2:
            uris = [
                _field(item, "value")
                for item in _field(pref, "items") or []
                if _field(item, "type") == "feed"
            ]
            parsed.append(SavedFeedsPreference(shape=PREF_V2, uris=tuple(u for u in uris if u)))
        elif pref_type == SAVED_FEEDS_PREF:
            saved = _field(pref, "saved") or []
            parsed.append(SavedFeedsPreference(shape=PREF_LEGACY, uris=tuple(u for u in saved if u)))
    return parsed


def saved_feed_uris(preferences: Iterable[SavedFeedsPreference]) -> list[str]:
    """Flatten parsed preferences into URIs, keeping first-seen order."""
    seen: set[str] = set()
    uris: list[str] = []
    for pref in preferences:
        for uri in pref.uris:
            if uri in seen:
                continue
            seen.add(uri)
            uris.append(uri)
    return uris


def chunked(values: list[str], size: int) -> list[list[str]]:
    return [values[i : i + size] for i in range(0, len(values), size)]


class FeedSynchronizer:
    """Rebuild the alias cache from the account's saved feeds.

    Attributes:
        service: Logged-in service exposing ``get_preferences`` and ``get_feed_generators``
        cache: Alias cache to overwrite
        batch_size: URIs per generator lookup (1-25)
        logger: Logger for progress events
    """

    def __init__(
        self,
        service: Any,
        cache: FeedAliasCache,
        batch_size: int = MAX_GENERATOR_BATCH,
        logger: logging.Logger | None = None,
    ):
        if not 1 <= batch_size <= MAX_GENERATOR_BATCH:
            raise ValueError(f"batch_size must be between 1 and {MAX_GENERATOR_BATCH}, got {batch_size}")
        self.service = service
        self.cache = cache
        self.batch_size = batch_size
        self.logger = logger or get_logger("sync")

    def sync(self) -> dict[str, str]:
        """Fetch saved feeds and persist the resulting alias mapping.

        Returns:
            The mapping written, or an empty mapping (cache untouched)
            when the account has no saved feeds.
        """
        response = self.service.get_preferences()
        prefs = parse_saved_feeds(getattr(response, "preferences", None) or [])
        uris = saved_feed_uris(prefs)

        if not uris:
            log_event(self.logger, "No saved feeds found on your account.", event="sync_empty")
            return {}

        feeds: dict[str, str] = {}
        # Later batches overwrite earlier ones on name collision
        for batch in chunked(uris, self.batch_size):
            result = self.service.get_feed_generators(batch)
            for generator in getattr(result, "feeds", None) or []:
                name = generator.display_name
                key = name.lower()
                if key in feeds and feeds[key] != generator.uri:
                    log_event(
                        self.logger,
                        f"Feed name '{name}' already cached, replacing {feeds[key]}",
                        event="sync_name_collision",
                        feed_name=key,
                        previous_uri=feeds[key],
                        uri=generator.uri,
                    )
                feeds[key] = generator.uri
                log_event(
                    self.logger,
                    f"Found feed: {name} -> {generator.uri}",
                    level=logging.DEBUG,
                    event="sync_feed_found",
                    feed_name=name,
                    uri=generator.uri,
                )

        path = self.cache.save(feeds)
        log_event(
            self.logger,
            f"Successfully synced {len(feeds)} feeds to {path}",
            event="sync_complete",
            count=len(feeds),
            path=str(path),
        )
        return feeds


def _field(obj: Any, *names: str) -> Any:
    for name in names:
        if isinstance(obj, dict):
            if name in obj:
                return obj[name]
        elif hasattr(obj, name):
            return getattr(obj, name)
    return None
