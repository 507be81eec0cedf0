"""
Command-line interface for feed_atmosphere.

Uses Typer to provide the ``fta`` command. Without a subcommand it
fetches recent posts from a feed and prints a topic summary; the
``sync-feeds`` and ``list-feeds`` subcommands manage the local feed
alias cache. Loads a .env file for credentials and API keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
from typing import NoReturn

from atproto.exceptions import AtProtocolError
from dotenv import load_dotenv
import httpx
import typer
from rich.console import Console
from rich.markup import escape

from .config import AppConfig, load_config
from .errors import ConfigError
from .logging_utils import setup_logging
from .runner import fetch_recent_posts, list_user_feeds, summarize, sync_user_feeds

app = typer.Typer(add_completion=False, help="Summarize what your Bluesky feeds are talking about.")
console = Console()


@dataclass
class CliState:
    cfg: AppConfig
    logger: logging.Logger


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    feed: str | None = typer.Option(
        None, "--feed", "-f", help="Which feed to fetch posts from (default: following)."
    ),
    minutes: int | None = typer.Option(
        None, "--minutes", "-m", min=0, help="Timeframe in minutes to fetch posts for (default: 60)."
    ),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
    log_dir: Path | None = typer.Option(None, "--log-dir", help="Directory for the log file."),
):
    """Fetch recent posts from a feed and print the top trending topics.

    Args:
        ctx: Typer context (carries config to subcommands)
        feed: Feed name, feed URI, or "following" for the home timeline
        minutes: Size of the time window
        config: Optional path to YAML config file
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Enable/disable file logging
        log_dir: Directory for the log file
    """
    load_dotenv()

    try:
        cfg = load_config(str(config) if config else None)
    except ConfigError as exc:
        _fail(exc)

    # Override with CLI options
    if feed is not None:
        cfg.fetch.feed = feed
    if minutes is not None:
        cfg.fetch.minutes = minutes
    if log_level:
        cfg.logging.level = log_level
    if log_file is not None:
        cfg.logging.file = log_file

    logger = setup_logging(cfg.logging, log_dir)
    ctx.obj = CliState(cfg=cfg, logger=logger)

    if ctx.invoked_subcommand is not None:
        return

    console.print(
        f"Fetching timeline for the last {cfg.fetch.minutes} minutes from feed: {cfg.fetch.feed}",
        markup=False,
    )
    try:
        posts = fetch_recent_posts(cfg.fetch.feed, cfg.fetch.minutes, cfg, logger=logger)
        console.print(f"Found {len(posts)} posts.")
        console.print("Generating topic summary...")
        summary = summarize(posts, cfg, logger=logger)
    except (ConfigError, AtProtocolError, httpx.HTTPError, ValueError) as exc:
        _fail(exc)

    console.print("\n--- Top 5 Trending Topics on Your Feed ---\n")
    console.print(summary, markup=False)


@app.command("sync-feeds")
def sync_feeds(ctx: typer.Context):
    """Synchronize your saved feeds from your Bluesky account to local cache."""
    state: CliState = ctx.obj
    try:
        sync_user_feeds(state.cfg, logger=state.logger)
    except (ConfigError, AtProtocolError, OSError, ValueError) as exc:
        _fail(exc)


@app.command("list-feeds")
def list_feeds(ctx: typer.Context):
    """List available feeds in your local cache."""
    state: CliState = ctx.obj
    list_user_feeds(state.cfg, console=console)


def _fail(exc: Exception) -> NoReturn:
    console.print(f"[red]Error:[/red] {type(exc).__name__}: {escape(str(exc))}")
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
