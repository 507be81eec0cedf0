"""
Core data types for feed_atmosphere.

This module defines the fundamental data structures used by the engine:
- Post: A normalized feed item handed back to callers
- ResolvedFeed: The concrete feed a user-supplied identifier points at
- Resolution: A ResolvedFeed plus an optional diagnostic message
- SavedFeedsPreference: One saved-feeds preference entry, in either payload shape
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


FEED_URI_PREFIX = "at://"
TIMELINE_TOKEN = "following"

# ResolvedFeed.kind values
TIMELINE = "timeline"
URI = "uri"
ALIAS = "alias"
LITERAL = "literal"

# SavedFeedsPreference.shape values
PREF_V2 = "v2"
PREF_LEGACY = "legacy"


@dataclass(frozen=True)
class Post:
    """A post fetched from a feed.

    Attributes:
        author: Handle of the post author (e.g., "alice.bsky.social")
        text: Post body text
        created_at: Instant the service indexed the post (UTC)
        like_count: Number of likes, 0 when unknown
        repost_count: Number of reposts, 0 when unknown
    """
    author: str
    text: str
    created_at: datetime
    like_count: int = 0
    repost_count: int = 0


@dataclass(frozen=True)
class ResolvedFeed:
    """A feed identifier after alias resolution.

    Attributes:
        kind: "timeline", "uri", "alias" or "literal"
        value: Feed URI (or the literal identifier); None for the timeline
    """
    kind: str
    value: str | None = None

    @property
    def is_timeline(self) -> bool:
        return self.kind == TIMELINE


@dataclass(frozen=True)
class Resolution:
    """Result of resolving a feed identifier.

    Attributes:
        feed: The resolved feed
        warning: Diagnostic message when resolution fell back to the literal value
    """
    feed: ResolvedFeed
    warning: str | None = None


@dataclass(frozen=True)
class SavedFeedsPreference:
    """A saved-feeds preference entry normalized to a flat URI list.

    Attributes:
        shape: "v2" for typed {type, value} items, "legacy" for the flat saved list
        uris: Feed generator URIs in the order the service returned them
    """
    shape: str
    uris: tuple[str, ...] = field(default_factory=tuple)
