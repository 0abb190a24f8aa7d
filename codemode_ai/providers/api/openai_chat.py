"""OpenAI chat completion."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import Field

from ..base import BaseSchema
from .base import HttpApiAdapter

logger = logging.getLogger(__name__)


class ChatMessage(BaseSchema):
    role: str
    content: str


class OpenAIChatOptions(BaseSchema):
    messages: List[ChatMessage] = Field(..., min_length=1)
    model: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    max_tokens: Optional[int] = Field(default=None, gt=0)


class OpenAIChatAdapter(HttpApiAdapter):
    name = "openai_chat"
    description = "Chat completion using OpenAI API (GPT-4o-mini)"
    service = "OpenAI"
    api_key_setting = "OPENAI_API_KEY"

    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        **kwargs: Any,
    ) -> None:
        super().__init__(api_key, **kwargs)
        self._model = model
        self._base_url = base_url.rstrip("/")

    async def call(self, options: Dict[str, Any]) -> Dict[str, Any]:
        opts = OpenAIChatOptions.model_validate(options)
        body: Dict[str, Any] = {
            "model": opts.model or self._model,
            "messages": [m.model_dump() for m in opts.messages],
        }
        if opts.temperature is not None:
            body["temperature"] = opts.temperature
        if opts.max_tokens is not None:
            body["max_tokens"] = opts.max_tokens

        resp = await self._request("POST", f"{self._base_url}/chat/completions", json=body)
        data = resp.json()
        choice = (data.get("choices") or [{}])[0] or {}
        message = choice.get("message") or {}
        logger.debug("OpenAI chat completed: model=%s finish_reason=%s", data.get("model"), choice.get("finish_reason"))
        return {
            "content": message.get("content") or "",
            "model": data.get("model") or body["model"],
            "finishReason": choice.get("finish_reason"),
            "usage": data.get("usage"),
        }
