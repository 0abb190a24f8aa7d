"""Jina Reader scraping: fetch a page as clean markdown plus light metadata."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

from pydantic import Field

from ..base import BaseSchema
from .base import HttpApiAdapter

logger = logging.getLogger(__name__)

_TITLE_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)
_FIELD_RES = {
    "description": re.compile(r"Description:\s*(.+)$", re.MULTILINE),
    "author": re.compile(r"Author:\s*(.+)$", re.MULTILINE),
    "published_date": re.compile(r"Published:\s*(.+)$", re.MULTILINE),
}
_MARKUP_RE = re.compile(r"[#*`\[\]()]")
_FRONTMATTER_RE = re.compile(r"^---\n[\s\S]*?\n---\n")
_METADATA_LINE_RE = re.compile(r"^(Title|Description|Author|Published):\s*.+$", re.MULTILINE)
_BLANK_RUN_RE = re.compile(r"\n{3,}")


class JinaScrapeOptions(BaseSchema):
    url: str = Field(..., min_length=1)
    timeout: int = Field(default=30000, gt=0, description="Request timeout in milliseconds")


class PageMetadata(BaseSchema):
    title: Optional[str] = None
    description: Optional[str] = None
    author: Optional[str] = None
    published_date: Optional[str] = None
    word_count: int = 0


def extract_metadata(markdown: str) -> PageMetadata:
    """Pull title, description, author, date and a word count out of Reader markdown."""
    found: Dict[str, Any] = {}
    title = _TITLE_RE.search(markdown)
    if title:
        found["title"] = title.group(1).strip()
    for field, pattern in _FIELD_RES.items():
        match = pattern.search(markdown)
        if match:
            found[field] = match.group(1).strip()
    found["word_count"] = len(_MARKUP_RE.sub("", markdown).split())
    return PageMetadata(**found)


def strip_metadata(markdown: str) -> str:
    """Remove frontmatter and ``Key: value`` metadata lines from Reader markdown."""
    cleaned = _FRONTMATTER_RE.sub("", markdown, count=1)
    cleaned = _METADATA_LINE_RE.sub("", cleaned)
    cleaned = _BLANK_RUN_RE.sub("\n\n", cleaned)
    return cleaned.strip()


class JinaScrapeAdapter(HttpApiAdapter):
    name = "jina_scrape"
    description = "Scrape and extract clean markdown content from web pages using Jina Reader API"
    service = "Jina"
    api_key_setting = "JINA_API_KEY"

    def __init__(self, api_key: Optional[str], *, reader_url: str = "https://r.jina.ai", **kwargs: Any) -> None:
        super().__init__(api_key, **kwargs)
        self._reader_url = reader_url.rstrip("/")

    async def call(self, options: Dict[str, Any]) -> Dict[str, Any]:
        opts = JinaScrapeOptions.model_validate(options)
        logger.info("Jina scraping URL: %s", opts.url)
        resp = await self._request(
            "GET",
            f"{self._reader_url}/{opts.url}",
            headers={
                "X-Return-Format": "markdown",
                "X-With-Generated-Alt": "true",
                "X-With-Links-Summary": "true",
            },
            timeout=opts.timeout / 1000,
        )
        markdown = resp.text
        metadata = extract_metadata(markdown)
        content = strip_metadata(markdown)
        logger.info("Jina scraped %s (%d words)", opts.url, metadata.word_count)
        return {
            "url": opts.url,
            "title": metadata.title,
            "content": content,
            "markdown": content,
            "metadata": metadata.model_dump(by_alias=True, exclude={"title"}),
        }
