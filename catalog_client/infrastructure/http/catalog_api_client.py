"""Catalog API client — thin httpx wrapper around the authority's REST API.

Every response of the authority is wrapped in an envelope::

    {"success": true, "data": {"products": [...]}}
    {"success": false, "error": "Category not found"}

``request`` unwraps it and returns ``data``; anything else (non-2xx,
``success: false``, unparsable body, transport failure) raises
``CatalogApiError`` or its ``NetworkError`` subclass.
"""

import logging
from typing import Any

import httpx

from catalog_client.domain.exceptions import CatalogApiError, NetworkError

logger = logging.getLogger(__name__)


class CatalogApiClient:
    """Infrastructure adapter — connects to the catalog REST API.

    An injected ``http_client`` is reused (and owned by the caller);
    otherwise a short-lived client is created per request.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:4000/api",
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the envelope's ``data`` object."""
        url = f"{self._base_url}/{path.lstrip('/')}"
        client = await self._get_client()
        should_close = self._http_client is None

        logger.debug("%s %s", method, url)
        try:
            response = await client.request(
                method,
                url,
                headers=self._get_headers(),
                json=json,
                timeout=timeout if timeout is not None else self._timeout,
            )
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out: %s", method, url, e)
            raise NetworkError("Request timed out — the server took too long to respond.") from e
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise NetworkError() from e
        except httpx.RequestError as e:
            # decoding failures, too many redirects, ...
            logger.warning("%s %s could not be completed: %s", method, url, e)
            raise NetworkError(f"Request failed: {e}") from e
        finally:
            if should_close:
                await client.aclose()

        return self._unwrap(response)

    def _unwrap(self, response: httpx.Response) -> dict[str, Any]:
        if response.status_code == 204:
            return {}
        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            self._raise_api_error(response, body)

        if not isinstance(body, dict):
            raise CatalogApiError(
                response.status_code,
                "Malformed response from server",
                status_text=response.reason_phrase,
            )
        if not body.get("success", False):
            self._raise_api_error(response, body)

        data = body.get("data")
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _raise_api_error(response: httpx.Response, body: Any) -> None:
        """Raise CatalogApiError from a failed response, preferring the envelope's message."""
        message: str | None = None
        if isinstance(body, dict):
            error = body.get("error") or body.get("message")
            if isinstance(error, dict):
                error = error.get("message")
            if error:
                message = str(error)
        if message is None:
            message = response.text or response.reason_phrase or "Request failed"

        logger.info("Catalog API error %s on %s: %s", response.status_code, response.request.url, message)
        raise CatalogApiError(response.status_code, message, status_text=response.reason_phrase)

    # ── Convenience verbs ────────────────────────────────────────────

    async def get(self, path: str, **kwargs: Any) -> dict[str, Any]:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, json: Any = None, **kwargs: Any) -> dict[str, Any]:
        return await self.request("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Any = None, **kwargs: Any) -> dict[str, Any]:
        return await self.request("PUT", path, json=json, **kwargs)

    async def patch(self, path: str, json: Any = None, **kwargs: Any) -> dict[str, Any]:
        return await self.request("PATCH", path, json=json, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> dict[str, Any]:
        return await self.request("DELETE", path, **kwargs)

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
