"""Coolify API client.

Thin asynchronous wrapper around the provider's REST API.  Every call
targets ``{base_url}/api/v1{path}`` with the configured bearer token
and a JSON content type, and returns the decoded response body
unchanged.  Failures are raised as :class:`ProviderError`, which keeps
the upstream status, the provider's own error message (when its error
body has one), the transport error text and the original exception,
so that callers can choose the message to report.

The client performs exactly one attempt per call: no retries and no
timeouts beyond the transport defaults.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx


logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class ProviderError(Exception):
    """A provider call that did not produce a successful response.

    Attributes:
        status_code: HTTP status returned by the provider, or ``None``
            when no response was received.
        provider_message: The ``message`` field of the provider's JSON
            error body, if any.
        transport_message: Text of the underlying transport exception.
        body: Decoded error body (JSON or text) when a response arrived.
        cause: The original exception.
    """

    def __init__(
        self,
        *,
        status_code: Optional[int],
        provider_message: Optional[str],
        transport_message: str,
        body: Any = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(provider_message or transport_message)
        self.status_code = status_code
        self.provider_message = provider_message
        self.transport_message = transport_message
        self.body = body
        self.cause = cause

    def resolve_message(self, fallback: str) -> str:
        """Pick the provider message, then the transport message, then ``fallback``."""
        return self.provider_message or self.transport_message or fallback


class CoolifyClient:
    """Client for the Coolify REST API.

    The client owns an :class:`httpx.AsyncClient`; use it as an async
    context manager or call :meth:`aclose` when done.  Pass
    ``transport`` to route requests somewhere other than the network
    (tests use :class:`httpx.MockTransport`).
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._http = httpx.AsyncClient(
            base_url=f"{self.base_url}{API_PREFIX}",
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.base_url)

    async def __aenter__(self) -> "CoolifyClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Perform an HTTP request against the provider.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PATCH``, ``DELETE``).
            path: Path relative to the API prefix, e.g. ``/services/abc``.
            json_body: JSON body to send (POST/PATCH).
            params: Query parameters.
        Returns:
            The decoded JSON body, the text of a non-JSON body, or
            ``None`` for an empty body.
        Raises:
            ProviderError: on a non-2xx status or a transport failure.
        """
        logger.debug("Sending %s request to %s%s%s", method, self.base_url, API_PREFIX, path)
        try:
            response = await self._http.request(
                method,
                path,
                json=json_body,
                params=params,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            body = _decode_body(exc.response)
            provider_message = None
            if isinstance(body, dict) and body.get("message"):
                provider_message = str(body["message"])
            raise ProviderError(
                status_code=exc.response.status_code,
                provider_message=provider_message,
                transport_message=str(exc),
                body=body,
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(
                status_code=None,
                provider_message=None,
                transport_message=str(exc),
                cause=exc,
            ) from exc
        if not response.content:
            return None
        # Non-JSON success bodies are relayed as text.
        return _decode_body(response)


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None
