"""Base class for single-function HTTP API adapters.

An adapter validates its options with a :class:`BaseSchema` model, performs
one request with ``httpx.AsyncClient`` and returns a JSON-compatible result.
Non-success responses raise :class:`ApiRequestError`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, ClassVar, Dict, Mapping, Optional

import httpx

from codemode_ai.capabilities import Capability
from codemode_ai.errors import ApiRequestError, ProviderNotConfiguredError

from ..base import merge_options

logger = logging.getLogger(__name__)

_ERROR_DETAIL_CHARS = 500


class HttpApiAdapter(ABC):
    """One HTTP API exposed as a capability under a fixed name.

    Subclasses set ``name``, ``description``, ``service`` and
    ``api_key_setting`` and implement :meth:`call`.

    Args:
        api_key: Credential for the API. ``build`` raises
            ``ProviderNotConfiguredError`` when it is missing.
        client: Shared ``httpx.AsyncClient``. A short-lived client is opened
            per call when omitted.
        timeout: Request timeout in seconds for per-call clients.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    service: ClassVar[str]
    api_key_setting: ClassVar[str]

    def __init__(self, api_key: Optional[str], *, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0) -> None:
        self._api_key = api_key
        self._client = client
        self._timeout = timeout

    def build(self) -> Capability:
        if not self._api_key:
            raise ProviderNotConfiguredError(self.name, self.api_key_setting)
        return Capability(name=self.name, description=self.description, invoke=self.invoke)

    async def invoke(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Any:
        return await self.call(merge_options(options, kwargs))

    @abstractmethod
    async def call(self, options: Dict[str, Any]) -> Any:
        """Validate ``options``, call the API and return a JSON-compatible value."""

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
            yield client

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        headers = {**self._auth_headers(), **kwargs.pop("headers", {})}
        async with self._http() as client:
            resp = await client.request(method, url, headers=headers, **kwargs)
        if resp.is_error:
            detail = resp.text[:_ERROR_DETAIL_CHARS]
            logger.error("%s API error: %s - %s", self.service, resp.status_code, detail)
            raise ApiRequestError(self.service, resp.status_code, detail)
        return resp
