"""Single-function HTTP API adapters registered under fixed capability names."""

from .base import HttpApiAdapter
from .jina_reader import JinaScrapeAdapter
from .openai_chat import OpenAIChatAdapter
from .perplexity import PerplexitySearchAdapter
from .rytr import RytrGenerateAdapter

__all__ = [
    "HttpApiAdapter",
    "JinaScrapeAdapter",
    "OpenAIChatAdapter",
    "PerplexitySearchAdapter",
    "RytrGenerateAdapter",
]
