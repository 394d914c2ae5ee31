"""Bounded HTTP JSON fetching.

Every upstream call (SearxNG mirrors and specialized sources) goes through
Fetcher.get_json, which turns any failure into a FetchError value instead of
raising. Cancellation is the only thing that escapes.
"""

import asyncio
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict

from ..config import get_settings
from ..errors import FetchError, FetchFailure
from ..log import get_logger
from .registry import BackendDescriptor

settings = get_settings()
logger = get_logger("fetch")


class FetchResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    origin: str
    data: Optional[Any] = None
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Fetcher:
    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.transport = transport
        self.headers = {
            "User-Agent": settings.USER_AGENT,
            "Accept": "application/json",
        }

    async def fetch(self, backend: BackendDescriptor, query: str, timeout: Optional[float] = None) -> FetchResult:
        """One SearxNG query against one mirror."""
        params = {"q": query, "format": "json"}
        if backend.engines:
            params["engines"] = ",".join(backend.engines)
        return await self.get_json(backend.search_url, params, origin=backend.name, timeout=timeout)

    async def get_json(self, url: str, params: Dict[str, Any], origin: str, timeout: Optional[float] = None) -> FetchResult:
        timeout = settings.FETCH_TIMEOUT_SECONDS if timeout is None else timeout

        def failed(kind: FetchFailure, cause: Optional[str] = None) -> FetchResult:
            return FetchResult(origin=origin, error=FetchError(origin, kind, cause))

        try:
            async with httpx.AsyncClient(
                timeout=timeout,
                follow_redirects=True,
                headers=self.headers,
                transport=self.transport,
            ) as client:
                # httpx timeouts are per phase; wait_for bounds the whole exchange
                resp = await asyncio.wait_for(client.get(url, params=params), timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            return failed(FetchFailure.TIMEOUT, str(e) or f"no response within {timeout}s")
        except httpx.RequestError as e:
            return failed(FetchFailure.NETWORK, str(e) or e.__class__.__name__)

        if not resp.is_success:
            return failed(FetchFailure.HTTP_STATUS, f"HTTP {resp.status_code}")

        content_type = resp.headers.get("content-type", "")
        if "json" not in content_type:
            return failed(FetchFailure.EMPTY_OR_MALFORMED, f"content-type {content_type or 'missing'}")

        try:
            data = resp.json()
        except ValueError as e:
            return failed(FetchFailure.EMPTY_OR_MALFORMED, f"invalid JSON: {e}")

        if not data:
            return failed(FetchFailure.EMPTY_OR_MALFORMED, "empty body")

        return FetchResult(origin=origin, data=data)


fetcher = Fetcher()
