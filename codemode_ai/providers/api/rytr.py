"""Rytr SEO text generation."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from ..base import BaseSchema
from .base import HttpApiAdapter

logger = logging.getLogger(__name__)

_CREATIVITY_LEVELS = {"low": 0, "medium": 1, "high": 2}


class RytrGenerateOptions(BaseSchema):
    use_case: str = Field(..., min_length=1, description="Rytr use case id, e.g. blog_section_writing")
    input: str
    tone: str = "informative"
    language: str = "en"
    variations: int = Field(default=1, ge=1, le=3)
    creativity: Literal["low", "medium", "high"] = "medium"

    @field_validator("input")
    @classmethod
    def _input_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Input context is required for content generation")
        return v


class RytrMetadata(BaseSchema):
    use_case: str
    tone: str
    language: str
    characters_used: int = 0


class RytrGenerateResult(BaseSchema):
    text: str
    variations: List[str] = Field(default_factory=list)
    metadata: RytrMetadata


class RytrGenerateAdapter(HttpApiAdapter):
    name = "rytr_generate"
    description = "Generate SEO-optimized content using Rytr AI"
    service = "Rytr"
    api_key_setting = "RYTR_API_KEY"

    def __init__(self, api_key: Optional[str], *, api_base: str = "https://api.rytr.me/v1", **kwargs: Any) -> None:
        super().__init__(api_key, **kwargs)
        self._api_base = api_base.rstrip("/")

    async def call(self, options: Dict[str, Any]) -> Dict[str, Any]:
        opts = RytrGenerateOptions.model_validate(options)
        body = {
            "languageId": opts.language,
            "toneId": opts.tone,
            "useCaseId": opts.use_case,
            "inputContexts": {"INPUT_TEXT": opts.input},
            "variations": opts.variations,
            "creativity": _CREATIVITY_LEVELS[opts.creativity],
        }
        resp = await self._request("POST", f"{self._api_base}/ryte", json=body)
        data = resp.json()

        texts = [item.get("text") or "" for item in data.get("data") or [] if isinstance(item, dict)]
        result = RytrGenerateResult(
            text=texts[0] if texts else "",
            variations=texts,
            metadata=RytrMetadata(
                use_case=opts.use_case,
                tone=opts.tone,
                language=opts.language,
                characters_used=data.get("credits_used") or 0,
            ),
        )
        logger.info("Rytr generated %d variation(s) for %s", len(texts), opts.use_case)
        return result.model_dump(by_alias=True)
