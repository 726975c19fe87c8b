"""Routers de páginas dinámicas: producto, búsqueda y categoría.

Cada router implementa `core.interfaces.router.PageRouter`. El catálogo se
construye por request con el `CatalogFactory` inyectado (locale y moneda del
request), así los routers no conocen la API HTTP.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import unquote

from core.config import AppSettings
from core.domain.extension import ProjectContext, Request
from core.domain.models import (
    CategoryQuery,
    Product,
    ProductPaginatedResult,
    ProductQuery,
)
from core.interfaces.catalog import CatalogFactory, ProductCatalog
from core.request_utils import get_currency, get_locale, get_path
from core.services.product_query_factory import query_from_params

logger = logging.getLogger(__name__)

PRODUCT_PATH_RE = re.compile(r"/(?:(?P<slug>[^/\s]+)/)?p/(?P<sku>[^/\s]+)/?")
SEARCH_PATH_RE = re.compile(r"/search/?")
CATEGORY_PATH_RE = re.compile(r"(?:/[A-Za-z0-9_-]+)+/?")


class _CatalogRouter:
    def __init__(self, api_factory: CatalogFactory, settings: AppSettings | None = None) -> None:
        self._api_factory = api_factory
        self._settings = settings or AppSettings()

    def _catalog(self, request: Request, project_context: ProjectContext) -> ProductCatalog:
        locale = get_locale(request, project_context, self._settings)
        currency = get_currency(request, project_context, self._settings)
        return self._api_factory(project_context, locale, currency)


class ProductRouter(_CatalogRouter):
    """`/p/<sku>` y `/<slug>/p/<sku>`."""

    def identify_from(self, request: Request) -> bool:
        return self.match(request) is not None

    def match(self, request: Request) -> re.Match[str] | None:
        path = get_path(request)
        return PRODUCT_PATH_RE.fullmatch(path) if path else None

    def requested_slug(self, request: Request) -> str | None:
        match = self.match(request)
        if match is None or match.group("slug") is None:
            return None
        return unquote(match.group("slug"))

    async def load_for(self, request: Request, project_context: ProjectContext) -> Product | None:
        match = self.match(request)
        if match is None:
            return None
        sku = unquote(match.group("sku"))
        logger.debug("Loading product for sku %s", sku)
        catalog = self._catalog(request, project_context)
        return await catalog.get_product(ProductQuery(skus=[sku]))


class SearchRouter(_CatalogRouter):
    """`/search?query=...` con la paginación/orden del request."""

    def identify_from(self, request: Request) -> bool:
        path = get_path(request)
        return bool(path and SEARCH_PATH_RE.fullmatch(path))

    async def load_for(
        self, request: Request, project_context: ProjectContext
    ) -> ProductPaginatedResult | None:
        product_query = query_from_params(request, settings=self._settings)
        logger.debug("Searching products for %r", product_query.query)
        catalog = self._catalog(request, project_context)
        return await catalog.query(product_query)


class CategoryRouter(_CatalogRouter):
    """Cualquier ruta de segmentos tipo slug; el último segmento es la categoría."""

    def identify_from(self, request: Request) -> bool:
        path = get_path(request)
        return bool(path and CATEGORY_PATH_RE.fullmatch(path))

    async def load_for(
        self, request: Request, project_context: ProjectContext
    ) -> ProductPaginatedResult | None:
        path = get_path(request) or ""
        slug = path.rstrip("/").rsplit("/", 1)[-1]
        catalog = self._catalog(request, project_context)

        categories = await catalog.query_categories(CategoryQuery(slug=slug, limit=1))
        if not categories.items:
            logger.debug("No category with slug %s", slug)
            return None

        category = categories.items[0]
        product_query = query_from_params(request, settings=self._settings).model_copy(
            update={"category": category.category_id}
        )
        return await catalog.query(product_query)
