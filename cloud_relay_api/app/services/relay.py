"""
Shared provider-call step for the family services.

:class:`ProviderRelay` performs steps two and three of every handler:
it refuses to call the provider when the credential is missing, then
issues the call and converts a :class:`ProviderError` into an
:class:`UpstreamError` whose status mirrors the provider's (500 when
there was no response) and whose message is picked in the order
provider message, transport message, handler fallback.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import status

from cloud_relay_api.app.clients.coolify import CoolifyClient, ProviderError
from cloud_relay_api.app.core.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)


class ProviderRelay:
    """Base class for services that forward calls to the provider."""

    def __init__(self, client: CoolifyClient) -> None:
        self.client = client

    def ensure_configured(self, label: str) -> None:
        if not self.client.configured:
            logger.error("%s: provider credentials are not configured", label)
            raise ConfigurationError()

    async def call(
        self,
        label: str,
        fallback: str,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Forward one call to the provider.

        ``label`` names the handler in the error log and ``fallback`` is
        the message reported when neither the provider nor the transport
        supplied one.
        """
        self.ensure_configured(label)
        try:
            return await self.client.request(method, path, json_body=json_body, params=params)
        except ProviderError as exc:
            logger.error(
                "%s: %s",
                label,
                exc.body if exc.body is not None else exc.transport_message,
            )
            raise UpstreamError(
                exc.resolve_message(fallback),
                status_code=exc.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR,
            ) from exc
