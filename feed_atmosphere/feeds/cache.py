"""
Persistent feed alias cache.

The cache maps lowercased feed display names to feed generator URIs and
is stored as a single JSON object in the per-user application directory
(``feeds.json``). It is rewritten wholesale by the synchronizer and is
otherwise read-only.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping

import typer

from ..config import CacheConfig
from ..logging_utils import get_logger, log_event


def default_cache_path(cfg: CacheConfig) -> Path:
    """Return the alias cache location for a config.

    Uses ``cfg.path`` when set, otherwise ``<user config dir>/<app_name>/<filename>``.
    """
    if cfg.path:
        return Path(cfg.path).expanduser()
    return Path(typer.get_app_dir(cfg.app_name)) / cfg.filename


class FeedAliasCache:
    """Load/save the alias mapping as a JSON file.

    Attributes:
        path: Location of the cache file
        logger: Logger used for recovered read failures
    """

    def __init__(self, path: Path, logger: logging.Logger | None = None):
        self.path = Path(path)
        self.logger = logger or get_logger("cache")

    @classmethod
    def from_config(cls, cfg: CacheConfig, logger: logging.Logger | None = None) -> "FeedAliasCache":
        return cls(default_cache_path(cfg), logger=logger)

    def load(self) -> dict[str, str]:
        """Read the mapping; a missing or corrupt file yields an empty mapping."""
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            log_event(
                self.logger,
                "Ignoring unreadable feed cache",
                level=logging.WARNING,
                event="cache_read_error",
                path=str(self.path),
                error=f"{type(exc).__name__}: {exc}",
            )
            return {}

        if not isinstance(raw, dict):
            log_event(
                self.logger,
                "Ignoring feed cache that is not a JSON object",
                level=logging.WARNING,
                event="cache_read_error",
                path=str(self.path),
            )
            return {}

        return {
            str(name): uri
            for name, uri in raw.items()
            if isinstance(uri, str)
        }

    def save(self, mapping: Mapping[str, str]) -> Path:
        """Write the mapping, replacing any existing file.

        Creates the parent directory when needed. Writes to a temporary
        sibling first and renames it over the target. I/O errors propagate.

        Returns:
            The path written
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(
            json.dumps(dict(mapping), indent=2, ensure_ascii=False, sort_keys=True),
            encoding="utf-8",
        )
        tmp.replace(self.path)
        log_event(
            self.logger,
            "Feed cache written",
            level=logging.DEBUG,
            event="cache_write",
            path=str(self.path),
            count=len(mapping),
        )
        return self.path
