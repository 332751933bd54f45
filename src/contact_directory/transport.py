"""transport.py — credentialed HTTP access to the contacts backend.

Every call goes through one ``httpx.AsyncClient`` that keeps the session
cookies (the equivalent of ``credentials: 'include'``) and bounds each
request with a timeout. Network errors and timeouts are re-raised as
``TransportFailure`` so callers only have one failure type to recover from.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ContactsError(Exception):
    """Base class for errors raised by contact_directory."""


class TransportFailure(ContactsError):
    """The request never produced an HTTP response (network error, timeout)."""


class ApiClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        cookies: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            cookies=cookies,
            transport=transport,
            follow_redirects=False,
        )

    @property
    def cookies(self) -> dict[str, str]:
        return dict(self._client.cookies.items())

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out", method, path)
            raise TransportFailure(f"{method} {path} timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise TransportFailure(f"{method} {path} failed: {exc}") from exc
        logger.debug("%s %s -> %d", method, path, response.status_code)
        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
