"""
Normalization of raw feed items into Post records.

Feed items come back from the service as ``FeedViewPost`` models whose
``post.record`` is an open union: usually an ``app.bsky.feed.post``
record, but occasionally something the client could not type (a plain
dict or a ``DotDict``). Extraction is tolerant: a bad timestamp is
replaced with the current time and an unexpected record shape drops
only that one item.
"""

from __future__ import annotations

from datetime import datetime, timezone
import re
from typing import Any

from atproto import models
from pydantic import ValidationError

from ..core.types import Post


_FRACTION = re.compile(r"\.(\d+)")


def parse_indexed_at(value: Any, now: datetime | None = None) -> datetime:
    """Parse an RFC 3339 timestamp into an aware UTC datetime.

    Never fails: missing or unparsable values return ``now`` (or the
    current instant). Naive timestamps are taken to be UTC.

    Examples:
        >>> parse_indexed_at("2023-01-01T00:00:00Z")
        datetime.datetime(2023, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)
    """
    fallback = now or datetime.now(timezone.utc)
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        # fromisoformat on 3.10 only takes 3 or 6 fractional digits
        text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return fallback
    else:
        return fallback

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def item_indexed_at(item: Any, now: datetime | None = None) -> datetime:
    """Return the indexed timestamp of a feed item (see parse_indexed_at)."""
    post = getattr(item, "post", None)
    return parse_indexed_at(getattr(post, "indexed_at", None), now=now)


def extract_post(item: Any, now: datetime | None = None) -> Post | None:
    """Convert one feed item into a Post.

    Args:
        item: A ``FeedViewPost`` (or any object with the same attributes)
        now: Instant substituted for an unparsable indexed timestamp

    Returns:
        The Post, or None when the record is not a standard post record
    """
    post = getattr(item, "post", None)
    if post is None:
        return None

    record = _as_post_record(getattr(post, "record", None))
    if record is None:
        return None

    author = getattr(post, "author", None)
    return Post(
        author=str(getattr(author, "handle", "") or ""),
        text=record.text,
        created_at=parse_indexed_at(getattr(post, "indexed_at", None), now=now),
        like_count=_count(getattr(post, "like_count", None)),
        repost_count=_count(getattr(post, "repost_count", None)),
    )


def _as_post_record(record: Any) -> models.AppBskyFeedPost.Record | None:
    if record is None:
        return None
    if isinstance(record, models.AppBskyFeedPost.Record):
        return record
    # Untyped payloads (DotDict from the client, or plain dicts)
    if hasattr(record, "to_dict"):
        record = record.to_dict()
    if not isinstance(record, dict):
        return None
    try:
        return models.AppBskyFeedPost.Record.model_validate(record)
    except ValidationError:
        return None


def _count(value: Any) -> int:
    if value is None:
        return 0
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0
