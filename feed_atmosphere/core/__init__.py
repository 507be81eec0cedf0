"""
Core types and feed resolution.

This package contains the data model shared by the fetch and
sync stages, and the feed identifier resolver.
"""

from .resolver import resolve_feed
from .types import Post, Resolution, ResolvedFeed, SavedFeedsPreference

__all__ = [
    "Post",
    "Resolution",
    "ResolvedFeed",
    "SavedFeedsPreference",
    "resolve_feed",
]
