"""
Programmatic entry points used by the CLI.

Each operation takes an explicit AppConfig. Remote operations log in
through ``connect`` unless a ready service is passed in:

1. fetch_recent_posts: resolve feed -> paginated fetch back to the cutoff
2. sync_user_feeds: saved feeds -> generator names -> alias cache
3. list_user_feeds: print the alias cache
4. summarize: topic summary of fetched posts via the configured LLM
"""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any, Sequence

from rich.console import Console

from .client import connect
from .config import AppConfig, validate_config
from .core.resolver import resolve_feed
from .core.types import Post
from .feeds.cache import FeedAliasCache
from .feeds.fetcher import cutoff_for, fetch_posts
from .feeds.sync import FeedSynchronizer
from .llm.providers.base import SummaryProvider
from .llm.providers.factory import create_provider
from .logging_utils import get_logger, log_event


NO_POSTS_MESSAGE = "No posts found in this timeframe."
EMPTY_CACHE_MESSAGE = "No feeds found in cache. Run `fta sync-feeds` first."


def fetch_recent_posts(
    feed_identifier: str,
    minutes: int,
    cfg: AppConfig,
    service: Any | None = None,
    now: datetime | None = None,
    logger: logging.Logger | None = None,
) -> list[Post]:
    """Fetch posts from a feed indexed within the last ``minutes``.

    Args:
        feed_identifier: "following", a feed URI, or a cached feed name
        minutes: Size of the time window
        cfg: Application configuration
        service: Logged-in service; when None, logs in with cfg.bluesky
        now: Reference instant for the window (defaults to current time)
        logger: Logger for progress events

    Returns:
        Posts newest first, none older than the cutoff

    Raises:
        ConfigError: Missing credentials or out-of-range page size (raised before any network call)
        ValueError: Negative window
    """
    logger = logger or get_logger()
    validate_config(cfg)
    cutoff = cutoff_for(minutes, now=now)

    cache = FeedAliasCache.from_config(cfg.cache, logger=logger)
    resolution = resolve_feed(feed_identifier, cache.load())
    if resolution.warning:
        log_event(
            logger,
            resolution.warning,
            level=logging.WARNING,
            event="feed_unresolved",
            feed=feed_identifier,
        )

    if service is None:
        service = connect(cfg.bluesky, logger=logger)

    log_event(
        logger,
        "Fetch start",
        level=logging.DEBUG,
        event="fetch_start",
        feed=feed_identifier,
        feed_kind=resolution.feed.kind,
        feed_uri=resolution.feed.value,
        cutoff=cutoff.isoformat(),
    )
    posts = fetch_posts(
        service,
        resolution.feed,
        cutoff,
        page_size=cfg.fetch.page_size,
        logger=logger,
        now=now,
    )
    log_event(logger, "Fetch done", level=logging.DEBUG, event="fetch_done", count=len(posts))
    return posts


def sync_user_feeds(
    cfg: AppConfig,
    service: Any | None = None,
    logger: logging.Logger | None = None,
) -> dict[str, str]:
    """Rebuild the alias cache from the account's saved feeds.

    Returns:
        The mapping written (empty when the account has no saved feeds)

    Raises:
        ConfigError: Missing credentials or out-of-range batch size (raised before any network call)
        OSError: If the cache file cannot be written
    """
    logger = logger or get_logger()
    validate_config(cfg)
    if service is None:
        service = connect(cfg.bluesky, logger=logger)
    cache = FeedAliasCache.from_config(cfg.cache, logger=logger)
    synchronizer = FeedSynchronizer(service, cache, batch_size=cfg.sync.batch_size, logger=logger)
    return synchronizer.sync()


def list_user_feeds(cfg: AppConfig, console: Console | None = None) -> dict[str, str]:
    """Print the cached feed aliases and return them."""
    console = console or Console()
    feeds = FeedAliasCache.from_config(cfg.cache).load()
    if not feeds:
        console.print(EMPTY_CACHE_MESSAGE, markup=False)
        return feeds

    console.print("Available feeds:")
    for name, uri in sorted(feeds.items()):
        console.print(f"- {name} ({uri})", markup=False, highlight=False)
    return feeds


def summarize(
    posts: Sequence[Post],
    cfg: AppConfig,
    provider: SummaryProvider | None = None,
    logger: logging.Logger | None = None,
) -> str:
    """Summarize posts into trending topics.

    An empty post list short-circuits without building a provider.
    """
    if not posts:
        return NO_POSTS_MESSAGE
    if provider is None:
        provider = create_provider(cfg.provider, logger=logger or get_logger("llm"))
    return provider.summarize(posts)
