"""Resolución de páginas dinámicas (URL -> tipo de página + payload).

Orden de reglas (la primera que reconoce la URL gana):
1. Páginas estáticas del storefront (`/cart`, `/checkout`, ...).
2. Producto, búsqueda y categoría, delegando en sus routers.

Si ningún router reconoce la URL, o el router que la reconoce no encuentra
datos, el resultado es `None` y el host decide (normalmente 404).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable

from core.config import AppSettings
from core.domain.extension import (
    DynamicPageContext,
    DynamicPageRedirectResult,
    DynamicPageSuccessResult,
    Request,
)
from core.domain.models import Product
from core.interfaces.router import PageRouter, ProductPageRouter
from core.request_utils import get_path

logger = logging.getLogger(__name__)

STATIC_PAGE_RE = re.compile(
    r"/(cart|checkout|wishlist|account|login|register|reset-password|thank-you)"
)

PRODUCT_DETAIL_PAGE = "frontastic/product-detail-page"
SEARCH_PAGE = "frontastic/search"
CATEGORY_PAGE = "frontastic/category"

DynamicPageResult = DynamicPageSuccessResult | DynamicPageRedirectResult | None


def match_static_page(path: str | None) -> str | None:
    """`/cart` -> `frontastic/cart`; cualquier otra ruta -> None."""

    if not path:
        return None
    match = STATIC_PAGE_RE.fullmatch(path)
    if not match:
        return None
    return f"frontastic{match.group(0)}"


def _product_payload(product: Product) -> dict[str, Any]:
    return {"product": product}


def _same_payload(result: Any) -> Any:
    return result


@dataclass
class DynamicPageHandler:
    """Handler `dynamic-page-handler` del registro de la extensión."""

    product_router: ProductPageRouter | PageRouter
    search_router: PageRouter
    category_router: PageRouter
    settings: AppSettings = field(default_factory=AppSettings)

    def _routes(self) -> list[tuple[str, PageRouter, Callable[[Any], Any]]]:
        return [
            (PRODUCT_DETAIL_PAGE, self.product_router, _product_payload),
            (SEARCH_PAGE, self.search_router, _same_payload),
            (CATEGORY_PAGE, self.category_router, _same_payload),
        ]

    def _canonical_redirect(self, request: Request, product: Product) -> DynamicPageRedirectResult | None:
        if not self.settings.redirect_non_canonical_product_urls:
            return None
        if not isinstance(self.product_router, ProductPageRouter):
            return None
        requested_slug = self.product_router.requested_slug(request)
        if not product.url or not product.slug or requested_slug == product.slug:
            return None
        logger.debug("Redirecting non-canonical product URL to %s", product.url)
        return DynamicPageRedirectResult(status_code=301, redirect_location=product.url)

    async def __call__(self, request: Request, context: DynamicPageContext) -> DynamicPageResult:
        path = get_path(request)

        static_page_type = match_static_page(path)
        if static_page_type:
            return DynamicPageSuccessResult(
                dynamic_page_type=static_page_type,
                data_source_payload={},
                page_matching_payload={},
            )

        for page_type, router, build_payload in self._routes():
            if not router.identify_from(request):
                continue

            logger.debug("Path %s identified as %s", path, page_type)
            result = await router.load_for(request, context.project_context)
            if result is None:
                # TODO: return a not-found result once the host supports one.
                return None

            if page_type == PRODUCT_DETAIL_PAGE:
                redirect = self._canonical_redirect(request, result)
                if redirect is not None:
                    return redirect

            payload = build_payload(result)
            return DynamicPageSuccessResult(
                dynamic_page_type=page_type,
                data_source_payload=payload,
                page_matching_payload=payload,
            )

        logger.debug("No dynamic page for path %s", path)
        return None
