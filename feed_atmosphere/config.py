"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- BlueskyConfig: Service URL and account credentials
- FetchConfig: Default feed, time window and page size
- SyncConfig: Saved-feed synchronization settings
- CacheConfig: Location of the feed alias cache
- ProviderConfig: LLM provider settings for topic summaries
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

import yaml

from .errors import ConfigError


MAX_PAGE_SIZE = 100
MAX_GENERATOR_BATCH = 25


@dataclass
class BlueskyConfig:
    """Configuration for the Bluesky account.

    Attributes:
        service_url: Base URL of the PDS / entryway used for login
        handle: Inline account handle (overrides the env var)
        password: Inline app password (overrides the env var)
        handle_env: Environment variable name containing the handle
        password_env: Environment variable name containing the app password
    """

    service_url: str = "https://bsky.social"
    handle: str | None = None
    password: str | None = None
    handle_env: str = "BLUESKY_HANDLE"
    password_env: str = "BLUESKY_PASSWORD"


@dataclass
class FetchConfig:
    """Configuration for the time-windowed feed fetch.

    Attributes:
        feed: Feed identifier used when none is given ("following" = timeline)
        minutes: Size of the time window in minutes
        page_size: Items requested per page (1-100)
    """

    feed: str = "following"
    minutes: int = 60
    page_size: int = 100


@dataclass
class SyncConfig:
    """Configuration for saved-feed synchronization.

    Attributes:
        batch_size: URIs per generator lookup request (1-25)
    """

    batch_size: int = 25


@dataclass
class CacheConfig:
    """Configuration for the feed alias cache.

    Attributes:
        path: Explicit cache file path; defaults to the per-user app directory
        app_name: Application directory name under the user config dir
        filename: Name of the cache file
    """

    path: str | None = None
    app_name: str = "feed-the-atmosphere"
    filename: str = "feeds.json"


@dataclass
class ProviderConfig:
    """Configuration for LLM provider.

    Attributes:
        name: Provider name ("gemini" currently supported)
        model: Model identifier
        api_key_env: Environment variable name containing the API key
        base_url: Base URL for the provider API
        api_key: Optional inline API key (overrides env var)
        trust_env: Whether to respect system proxy settings for API requests
        timeout_seconds: HTTP request timeout
    """

    name: str = "gemini"
    model: str = "gemini-2.0-flash"
    api_key_env: str = "GEMINI_API_KEY"
    base_url: str = "https://generativelanguage.googleapis.com"
    api_key: str | None = None
    trust_env: bool = True
    timeout_seconds: float = 60.0


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file (needs a log directory)
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "fta.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    bluesky: BlueskyConfig = field(default_factory=BlueskyConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


@dataclass(frozen=True)
class Credentials:
    """Resolved account credentials for a login call."""

    handle: str
    password: str


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Config file {path} is not valid YAML: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    try:
        cfg = _fromdict(data)
    except TypeError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    validate_config(cfg)
    return cfg


def validate_config(cfg: AppConfig) -> None:
    """Check value ranges the remote endpoints impose.

    Raises:
        ConfigError: If the page size is outside 1-100 or the batch size outside 1-25
    """
    if not 1 <= cfg.fetch.page_size <= MAX_PAGE_SIZE:
        raise ConfigError(f"fetch.page_size must be between 1 and {MAX_PAGE_SIZE}, got {cfg.fetch.page_size}")
    if not 1 <= cfg.sync.batch_size <= MAX_GENERATOR_BATCH:
        raise ConfigError(
            f"sync.batch_size must be between 1 and {MAX_GENERATOR_BATCH}, got {cfg.sync.batch_size}"
        )


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "bluesky": {
            "service_url": cfg.bluesky.service_url,
            "handle": cfg.bluesky.handle,
            "password": cfg.bluesky.password,
            "handle_env": cfg.bluesky.handle_env,
            "password_env": cfg.bluesky.password_env,
        },
        "fetch": {
            "feed": cfg.fetch.feed,
            "minutes": cfg.fetch.minutes,
            "page_size": cfg.fetch.page_size,
        },
        "sync": {
            "batch_size": cfg.sync.batch_size,
        },
        "cache": {
            "path": cfg.cache.path,
            "app_name": cfg.cache.app_name,
            "filename": cfg.cache.filename,
        },
        "provider": {
            "name": cfg.provider.name,
            "model": cfg.provider.model,
            "api_key_env": cfg.provider.api_key_env,
            "base_url": cfg.provider.base_url,
            "api_key": cfg.provider.api_key,
            "trust_env": cfg.provider.trust_env,
            "timeout_seconds": cfg.provider.timeout_seconds,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        bluesky=BlueskyConfig(**data["bluesky"]),
        fetch=FetchConfig(**data["fetch"]),
        sync=SyncConfig(**data["sync"]),
        cache=CacheConfig(**data["cache"]),
        provider=ProviderConfig(**data["provider"]),
        logging=LoggingConfig(**data["logging"]),
    )


def get_credentials(cfg: BlueskyConfig) -> Credentials:
    """Resolve the login credentials from inline config or environment.

    Raises:
        ConfigError: If the handle or the password cannot be found
    """
    handle = cfg.handle or os.getenv(cfg.handle_env)
    password = cfg.password or os.getenv(cfg.password_env)
    missing = []
    if not handle:
        missing.append(cfg.handle_env)
    if not password:
        missing.append(cfg.password_env)
    if missing:
        raise ConfigError(f"Missing Bluesky credentials: set {', '.join(missing)}")
    return Credentials(handle=handle, password=password)


def get_api_key(cfg: ProviderConfig) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    return os.getenv(cfg.api_key_env)
