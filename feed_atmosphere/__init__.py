"""
Feed the Atmosphere - trending topics from your Bluesky feeds.

This package fetches recent posts from a Bluesky feed within a time
window, resolves friendly feed names through a local alias cache synced
from the account's saved feeds, and summarizes the posts with an LLM.

Main entry point is the CLI via the `fta` command.

Example:
    $ fta --feed "Discover" --minutes 30
    $ fta sync-feeds
"""

__all__ = [
    "__version__",
    "Post",
    "fetch_recent_posts",
    "sync_user_feeds",
    "list_user_feeds",
    "resolve_feed",
]
__version__ = "0.1.0"

from .core.resolver import resolve_feed
from .core.types import Post
from .runner import fetch_recent_posts, list_user_feeds, sync_user_feeds
