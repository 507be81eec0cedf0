"""Abstract interface for LLM-driven topic summaries."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...core.types import Post


class SummaryProvider(ABC):
    """Provider interface for summarizing a batch of posts."""

    @abstractmethod
    def summarize(self, posts: Sequence[Post]) -> str:
        """Return a display-ready summary of the posts."""
        raise NotImplementedError
