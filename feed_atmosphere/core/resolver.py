"""Feed identifier resolution against the local alias cache."""

from __future__ import annotations

from typing import Mapping

from .types import (
    ALIAS,
    FEED_URI_PREFIX,
    LITERAL,
    TIMELINE,
    TIMELINE_TOKEN,
    URI,
    Resolution,
    ResolvedFeed,
)


def resolve_feed(identifier: str, cache: Mapping[str, str]) -> Resolution:
    """Turn a user-supplied feed identifier into a concrete feed.

    Resolution order:
        1. "" or "following" -> the home timeline
        2. "at://..." -> used as-is
        3. case-insensitive alias lookup in ``cache``
        4. otherwise the identifier is passed through with a warning

    Args:
        identifier: Feed name, alias or URI as typed by the user
        cache: Alias mapping keyed by lowercased display name

    Returns:
        Resolution with the feed and an optional warning. Never raises
        for an unknown alias; the remote service decides whether the
        literal value is usable.
    """
    if not identifier or identifier == TIMELINE_TOKEN:
        return Resolution(feed=ResolvedFeed(kind=TIMELINE))

    if identifier.startswith(FEED_URI_PREFIX):
        return Resolution(feed=ResolvedFeed(kind=URI, value=identifier))

    uri = cache.get(identifier.lower())
    if uri is not None:
        return Resolution(feed=ResolvedFeed(kind=ALIAS, value=uri))

    return Resolution(
        feed=ResolvedFeed(kind=LITERAL, value=identifier),
        warning=f"Feed '{identifier}' not found in cache, using literal value",
    )
