"""
Feed fetching, extraction and alias caching.

This package handles the paginated time-windowed fetch, normalization
of feed items, and the saved-feed alias cache and its synchronization.
"""

from .cache import FeedAliasCache, default_cache_path
from .extractor import extract_post, parse_indexed_at
from .fetcher import PaginatedFetcher, cutoff_for, fetch_posts
from .sync import FeedSynchronizer, parse_saved_feeds, saved_feed_uris

__all__ = [
    "FeedAliasCache",
    "default_cache_path",
    "extract_post",
    "parse_indexed_at",
    "PaginatedFetcher",
    "cutoff_for",
    "fetch_posts",
    "FeedSynchronizer",
    "parse_saved_feeds",
    "saved_feed_uris",
]
