"""
Paginated, time-windowed feed fetching.

Pages are requested strictly in order (each cursor comes from the
previous response) and scanned newest first. The walk stops at the first
item indexed before the cutoff, or when the service returns no cursor.
Because feeds are reverse-chronological, everything after that item is
older as well and is never requested.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
from typing import Any

from ..config import MAX_PAGE_SIZE
from ..core.types import Post, ResolvedFeed
from ..logging_utils import get_logger, log_event
from .extractor import extract_post, item_indexed_at


def cutoff_for(minutes: int, now: datetime | None = None) -> datetime:
    """Return the earliest instant included in a window of ``minutes``."""
    if minutes < 0:
        raise ValueError(f"minutes must be non-negative, got {minutes}")
    current = now or datetime.now(timezone.utc)
    return current - timedelta(minutes=minutes)


class PaginatedFetcher:
    """Walk a feed's pages until the cutoff or the end of the feed.

    Attributes:
        service: Object exposing ``get_timeline`` and ``get_feed`` (see client.BlueskyService)
        page_size: Items requested per page (1-100)
        logger: Logger for per-page debug events
    """

    def __init__(self, service: Any, page_size: int = MAX_PAGE_SIZE, logger: logging.Logger | None = None):
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")
        self.service = service
        self.page_size = page_size
        self.logger = logger or get_logger("fetch")

    def fetch(self, feed: ResolvedFeed, cutoff: datetime, now: datetime | None = None) -> list[Post]:
        """Collect posts indexed at or after ``cutoff``.

        Args:
            feed: Resolved feed (timeline or feed URI)
            cutoff: Earliest included instant; a post exactly at the cutoff is kept
            now: Instant substituted for unparsable timestamps

        Returns:
            Posts in the order the service returned them (newest first)
        """
        posts: list[Post] = []
        cursor: str | None = None
        pages = 0

        while True:
            items, next_cursor = self._request_page(feed, cursor)
            pages += 1

            hit_cutoff = False
            for item in items:
                if item_indexed_at(item, now=now) < cutoff:
                    hit_cutoff = True
                    break
                post = extract_post(item, now=now)
                if post is not None:
                    posts.append(post)

            log_event(
                self.logger,
                "Fetched page",
                level=logging.DEBUG,
                event="page_fetched",
                page=pages,
                items=len(items),
                total_posts=len(posts),
                hit_cutoff=hit_cutoff,
            )

            if hit_cutoff or not next_cursor:
                break
            cursor = next_cursor

        return posts

    def _request_page(self, feed: ResolvedFeed, cursor: str | None) -> tuple[list[Any], str | None]:
        if feed.is_timeline:
            response = self.service.get_timeline(cursor=cursor, limit=self.page_size)
        else:
            response = self.service.get_feed(feed.value, cursor=cursor, limit=self.page_size)
        return list(getattr(response, "feed", None) or []), getattr(response, "cursor", None)


def fetch_posts(
    service: Any,
    feed: ResolvedFeed,
    cutoff: datetime,
    page_size: int = MAX_PAGE_SIZE,
    logger: logging.Logger | None = None,
    now: datetime | None = None,
) -> list[Post]:
    """Fetch posts for ``feed`` back to ``cutoff`` (see PaginatedFetcher)."""
    return PaginatedFetcher(service, page_size=page_size, logger=logger).fetch(feed, cutoff, now=now)
