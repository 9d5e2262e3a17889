"""
TipMate UI — HTTP Client for the Tip Calculations API
=======================================================

What:  Thin async wrapper around GET/POST /api/tip-calculations.
How:   httpx.AsyncClient; every transport error or non-2xx status is raised
       as ApiClientError so callers deal with one exception type. No retries.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from tipmate.config import settings
from tipmate.exceptions import ApiClientError

logger = logging.getLogger(__name__)

TIP_CALCULATIONS_PATH = "/api/tip-calculations"


class TipCalculationsClient:
    """
    Client for the tip-calculations resource.

    Usage:
        async with TipCalculationsClient() as client:
            history = await client.list_recent()

    Args:
        base_url:  API root; defaults to settings.api_base_url
        http:      pre-built httpx.AsyncClient (tests pass one bound to an
                   ASGITransport). The caller keeps ownership of it.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(base_url=base_url or settings.api_base_url)

    async def __aenter__(self) -> "TipCalculationsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _request(self, method: str, json: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = await self._http.request(method, TIP_CALCULATIONS_PATH, json=json)
        except httpx.HTTPError as e:
            raise ApiClientError(
                message=f"Could not reach the TipMate API: {e}",
                context={"method": method, "error_type": type(e).__name__},
            ) from e

        if not response.is_success:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = (body.get("error") if isinstance(body, dict) else None) or response.text
            raise ApiClientError(
                message=f"{method} {TIP_CALCULATIONS_PATH} failed: {detail}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ApiClientError(
                message="TipMate API returned a non-JSON body",
                status_code=response.status_code,
            ) from e

    async def list_recent(self) -> List[Dict[str, Any]]:
        """GET the most recent calculations (newest first)."""
        data = await self._request("GET")
        if not isinstance(data, list):
            raise ApiClientError(message="Expected a JSON array of tip calculations")
        return data

    async def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST a new calculation; returns the created record."""
        return await self._request("POST", json=payload)
