"""Google Gemini provider for topic summaries."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx

from ...config import ProviderConfig
from ...core.types import Post
from ...errors import ConfigError
from ...logging_utils import get_logger, log_event
from ..prompts import format_prompt
from .base import SummaryProvider


class GeminiProvider(SummaryProvider):
    """Gemini-backed provider calling the generateContent REST endpoint."""

    def __init__(
        self,
        cfg: ProviderConfig,
        api_key: str | None,
        logger: logging.Logger | None = None,
    ):
        if not api_key:
            raise ConfigError(f"Missing Gemini API key: set {cfg.api_key_env}")
        self.cfg = cfg
        self.api_key = api_key
        self.logger = logger or get_logger("llm")

    def summarize(self, posts: Sequence[Post]) -> str:
        prompt = format_prompt(posts)
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        try:
            data = self._post(payload)
        except httpx.HTTPError as exc:
            log_event(
                self.logger,
                "LLM request failed",
                level=logging.ERROR,
                event="llm_summary",
                status="provider_error",
                model=self.cfg.model,
                error=f"{type(exc).__name__}: {exc}",
            )
            raise

        content = _extract_text(data)
        log_event(
            self.logger,
            "LLM response",
            level=logging.DEBUG,
            event="llm_summary",
            status="ok" if content else "empty_response",
            model=self.cfg.model,
            posts=len(posts),
            response_chars=len(content),
        )
        return content.strip()

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.cfg.base_url}/v1beta/models/{self.cfg.model}:generateContent"
        params = {"key": self.api_key}
        with httpx.Client(timeout=self.cfg.timeout_seconds, trust_env=self.cfg.trust_env) as client:
            resp = client.post(url, params=params, json=payload)
            resp.raise_for_status()
            return resp.json()


def _extract_text(data: dict[str, Any]) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""

    if not isinstance(parts, list):
        return ""

    non_thought_chunks: list[str] = []
    all_chunks: list[str] = []
    for part in parts:
        if not isinstance(part, dict):
            continue
        text = part.get("text")
        if not text:
            continue
        chunk = str(text)
        all_chunks.append(chunk)
        if not part.get("thought"):
            non_thought_chunks.append(chunk)

    if non_thought_chunks:
        return "".join(non_thought_chunks)
    return "".join(all_chunks)
