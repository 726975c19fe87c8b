"""Token OAuth2 (client credentials) para la API de commerce."""

from __future__ import annotations

import logging

import httpx

from core.config import AppSettings
from core.domain.errors import ExternalError, ValidationError

logger = logging.getLogger(__name__)


async def fetch_access_token(client: httpx.AsyncClient, settings: AppSettings) -> str:
    """Devuelve un bearer token para la API.

    Si hay `commerce_access_token` configurado se usa tal cual; si no, se pide
    uno nuevo con el flujo client-credentials.
    """

    if settings.commerce_access_token:
        return settings.commerce_access_token

    if not settings.commerce_client_id or not settings.commerce_client_secret:
        raise ValidationError(
            "Commerce credentials are not configured "
            "(set STOREFRONT_COMMERCE_CLIENT_ID / STOREFRONT_COMMERCE_CLIENT_SECRET)."
        )

    data = {"grant_type": "client_credentials"}
    if settings.commerce_scope:
        data["scope"] = settings.commerce_scope

    url = f"{settings.commerce_auth_url.rstrip('/')}/oauth/token"
    response = await client.post(
        url,
        data=data,
        auth=(settings.commerce_client_id, settings.commerce_client_secret),
    )
    if response.status_code != 200:
        logger.warning("Token request failed with HTTP %s", response.status_code)
        raise ExternalError(
            f"Token request failed with HTTP {response.status_code}",
            status_code=response.status_code,
            body=response.text,
        )

    token = response.json().get("access_token")
    if not isinstance(token, str) or not token:
        raise ExternalError(
            "Token response did not include an access_token",
            status_code=response.status_code,
            body=response.text,
        )
    return token
