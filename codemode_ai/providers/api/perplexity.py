"""Perplexity research search with citations."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional
from urllib.parse import urlparse

from pydantic import Field

from ..base import BaseSchema
from .base import HttpApiAdapter

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a research assistant. Provide accurate, well-cited information from authoritative sources. "
    "Focus on recent data and expert opinions."
)


class PerplexitySearchOptions(BaseSchema):
    query: str = Field(..., min_length=1)
    search_recency_filter: Literal["month", "week", "day", "hour"] = "month"
    return_citations: bool = True
    return_images: bool = False
    model: Literal["sonar", "sonar-pro", "sonar-reasoning", "sonar-reasoning-pro"] = "sonar-pro"


class PerplexityCitation(BaseSchema):
    url: str
    domain: str


class PerplexityUsage(BaseSchema):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class PerplexitySearchResult(BaseSchema):
    answer: str
    citations: List[PerplexityCitation] = Field(default_factory=list)
    images: Optional[List[Any]] = None
    usage: Optional[PerplexityUsage] = None


def extract_domain(url: str) -> str:
    """Host of ``url`` without a leading ``www.``; the input itself when unparsable."""
    host = urlparse(url).hostname
    if not host:
        return url
    return host[4:] if host.startswith("www.") else host


class PerplexitySearchAdapter(HttpApiAdapter):
    name = "perplexity_search"
    description = "Search using Perplexity API with citations and authoritative sources"
    service = "Perplexity"
    api_key_setting = "PERPLEXITY_API_KEY"

    def __init__(self, api_key: Optional[str], *, api_url: str = "https://api.perplexity.ai/chat/completions", **kwargs: Any) -> None:
        super().__init__(api_key, **kwargs)
        self._api_url = api_url

    async def call(self, options: Dict[str, Any]) -> Dict[str, Any]:
        opts = PerplexitySearchOptions.model_validate(options)
        logger.info("Perplexity search: %s", opts.query)
        body = {
            "model": opts.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": opts.query},
            ],
            "search_recency_filter": opts.search_recency_filter,
            "return_citations": opts.return_citations,
            "return_images": opts.return_images,
            "temperature": 0.2,
        }
        resp = await self._request("POST", self._api_url, json=body)
        data = resp.json()

        choices = data.get("choices") or [{}]
        answer = ((choices[0] or {}).get("message") or {}).get("content") or ""
        citations = [
            PerplexityCitation(url=url, domain=extract_domain(url))
            for url in data.get("citations") or []
            if isinstance(url, str)
        ]
        usage = data.get("usage")
        result = PerplexitySearchResult(
            answer=answer,
            citations=citations,
            images=(data.get("images") or []) if opts.return_images else None,
            usage=(
                PerplexityUsage(
                    prompt_tokens=usage.get("prompt_tokens") or 0,
                    completion_tokens=usage.get("completion_tokens") or 0,
                    total_tokens=usage.get("total_tokens") or 0,
                )
                if isinstance(usage, dict)
                else None
            ),
        )
        logger.info("Perplexity found %d citations", len(citations))
        return result.model_dump(by_alias=True, exclude_none=True)
