"""
Bluesky service adapter built on the ``atproto`` SDK client.

Wraps the four read endpoints the engine needs behind plain method calls
so the fetch and sync stages do not depend on SDK parameter models, and
so tests can substitute a fake service object.
"""

from __future__ import annotations

import logging
from typing import Any

from atproto import Client

from .config import BlueskyConfig, get_credentials
from .logging_utils import get_logger, log_event


class BlueskyService:
    """Thin wrapper around a logged-in ``atproto.Client``."""

    def __init__(self, client: Client):
        self.client = client

    def get_timeline(self, cursor: str | None = None, limit: int = 100) -> Any:
        params: dict[str, Any] = {"limit": limit}
        if cursor:
            params["cursor"] = cursor
        return self.client.app.bsky.feed.get_timeline(params=params)

    def get_feed(self, feed: str, cursor: str | None = None, limit: int = 100) -> Any:
        params: dict[str, Any] = {"feed": feed, "limit": limit}
        if cursor:
            params["cursor"] = cursor
        return self.client.app.bsky.feed.get_feed(params=params)

    def get_preferences(self) -> Any:
        return self.client.app.bsky.actor.get_preferences()

    def get_feed_generators(self, uris: list[str]) -> Any:
        return self.client.app.bsky.feed.get_feed_generators(params={"feeds": list(uris)})


def connect(cfg: BlueskyConfig, logger: logging.Logger | None = None) -> BlueskyService:
    """Log in and return a ready service.

    Raises:
        ConfigError: If credentials are missing (before any network call)
        atproto.exceptions.AtProtocolError: If the login request fails
    """
    logger = logger or get_logger("client")
    credentials = get_credentials(cfg)
    client = Client(base_url=_xrpc_url(cfg.service_url))
    client.login(credentials.handle, credentials.password)
    log_event(
        logger,
        "Logged in",
        level=logging.DEBUG,
        event="login",
        handle=credentials.handle,
        service_url=cfg.service_url,
    )
    return BlueskyService(client)


def _xrpc_url(service_url: str) -> str:
    base = service_url.rstrip("/")
    if base.endswith("/xrpc"):
        return base
    return f"{base}/xrpc"
