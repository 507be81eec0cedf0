"""LLM topic summaries."""

from .prompts import format_prompt
from .providers.base import SummaryProvider
from .providers.factory import available_providers, create_provider
from .providers.gemini import GeminiProvider

__all__ = [
    "format_prompt",
    "SummaryProvider",
    "GeminiProvider",
    "create_provider",
    "available_providers",
]
