"""Cliente de catálogo sobre la API HTTP de commerce.

Implementa `core.interfaces.catalog.ProductCatalog`. Una instancia vive lo que
dura un request: queda ligada a un locale y una moneda, y el token OAuth2 se
pide una sola vez por instancia.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from adapters.commerce.auth import fetch_access_token
from adapters.commerce.product_mapper import (
    build_category_where,
    build_search_params,
    map_category,
    map_product,
)
from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import ExternalError
from core.domain.extension import ProjectContext
from core.domain.locale import Locale
from core.domain.models import (
    CategoryPaginatedResult,
    CategoryQuery,
    Product,
    ProductPaginatedResult,
    ProductQuery,
    cursor_to_offset,
    page_cursors,
)

logger = logging.getLogger(__name__)

# project_configuration["commercetools"] -> campo de AppSettings
_PROJECT_CONFIG_FIELDS: dict[str, str] = {
    "projectKey": "commerce_project_key",
    "clientId": "commerce_client_id",
    "clientSecret": "commerce_client_secret",
    "scope": "commerce_scope",
    "authUrl": "commerce_auth_url",
    "hostUrl": "commerce_api_url",
}


def settings_for_project(project_context: ProjectContext, settings: AppSettings) -> AppSettings:
    """Superpone la config `commercetools` del proyecto (si la hay) a los settings."""

    raw = project_context.project_configuration.get("commercetools")
    if not isinstance(raw, dict):
        return settings
    update = {
        field: raw[key]
        for key, field in _PROJECT_CONFIG_FIELDS.items()
        if isinstance(raw.get(key), str) and raw[key]
    }
    return settings.model_copy(update=update) if update else settings


class ProductApi:
    """Lecturas de productos y categorías para un locale/moneda."""

    def __init__(
        self,
        project_context: ProjectContext,
        locale: str,
        currency: str,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings_for_project(project_context, settings or AppSettings())
        try:
            self._locale = Locale.parse(locale)
        except ValueError:
            logger.warning("Invalid locale %r, falling back to %s", locale, self._settings.default_locale)
            self._locale = Locale.parse(self._settings.default_locale)
        self._currency = currency.upper()
        self._transport = transport
        self._token: str | None = None

    @property
    def locale(self) -> Locale:
        return self._locale

    @property
    def currency(self) -> str:
        return self._currency

    def _clamp_limit(self, limit: int | None) -> int:
        if limit is None:
            return self._settings.default_page_size
        return max(1, min(limit, self._settings.max_page_size))

    async def _get(self, path: str, params: list[tuple[str, str]]) -> dict[str, Any]:
        url = f"/{self._settings.commerce_project_key}{path}"
        async with build_async_client(
            self._settings,
            base_url=self._settings.commerce_api_url.rstrip("/"),
            transport=self._transport,
        ) as client:
            if self._token is None:
                self._token = await fetch_access_token(client, self._settings)
            response = await client.get(
                url,
                params=params,
                headers={"Authorization": f"Bearer {self._token}"},
            )

        if response.status_code != 200:
            logger.warning("GET %s failed with HTTP %s", url, response.status_code)
            raise ExternalError(
                f"Commerce API request to {url} failed with HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        data = response.json()
        if not isinstance(data, dict):
            raise ExternalError(
                f"Unexpected response shape from {url}",
                status_code=response.status_code,
                body=response.text,
            )
        return data

    async def query(self, product_query: ProductQuery) -> ProductPaginatedResult:
        limit = self._clamp_limit(product_query.limit)
        offset = cursor_to_offset(product_query.cursor)
        params = build_search_params(
            product_query,
            locale=self._locale,
            currency=self._currency,
            limit=limit,
        )
        logger.debug("Product search %s", params)
        data = await self._get("/product-projections/search", params)

        items = [
            map_product(raw, locale=self._locale, currency=self._currency)
            for raw in data.get("results") or []
            if isinstance(raw, dict) and raw.get("id")
        ]
        count = int(data.get("count", len(items)))
        total = data.get("total")
        total = int(total) if total is not None else None
        previous_cursor, next_cursor = page_cursors(offset=offset, count=count, total=total, limit=limit)

        return ProductPaginatedResult(
            total=total,
            count=count,
            previous_cursor=previous_cursor,
            next_cursor=next_cursor,
            items=items,
            query=product_query,
        )

    async def get_product(self, product_query: ProductQuery) -> Product | None:
        single = product_query.model_copy(update={"limit": 1, "cursor": None})
        result = await self.query(single)
        return result.items[0] if result.items else None

    async def query_categories(self, category_query: CategoryQuery) -> CategoryPaginatedResult:
        limit = self._clamp_limit(category_query.limit)
        offset = cursor_to_offset(category_query.cursor)
        params: list[tuple[str, str]] = [
            ("limit", str(limit)),
            ("offset", str(offset)),
            ("sort", "orderHint asc"),
        ]
        params.extend(("where", predicate) for predicate in build_category_where(category_query, locale=self._locale))
        data = await self._get("/categories", params)

        items = [
            map_category(raw, locale=self._locale)
            for raw in data.get("results") or []
            if isinstance(raw, dict) and raw.get("id")
        ]
        count = int(data.get("count", len(items)))
        total = data.get("total")
        total = int(total) if total is not None else None
        previous_cursor, next_cursor = page_cursors(offset=offset, count=count, total=total, limit=limit)

        return CategoryPaginatedResult(
            total=total,
            count=count,
            previous_cursor=previous_cursor,
            next_cursor=next_cursor,
            items=items,
            query=category_query,
        )


def build_product_api(project_context: ProjectContext, locale: str, currency: str) -> ProductApi:
    """Factory por defecto (`CatalogFactory`) usada por routers y data sources."""

    return ProductApi(project_context, locale, currency)
