"""Action handlers del dominio `product`.

Rutas típicas del host: `/action/product/getProduct`, `/action/product/query`,
`/action/product/queryCategories`.
"""

from __future__ import annotations

from adapters.commerce import build_product_api
from core.config import AppSettings
from core.domain.extension import ActionContext, Request, Response
from core.domain.models import CategoryQuery
from core.interfaces.catalog import CatalogFactory, ProductCatalog
from core.request_utils import get_currency, get_locale, get_query_param
from core.services.product_query_factory import clamp_limit, query_from_params

__all__ = ["get_product", "query", "query_categories"]

catalog_factory: CatalogFactory = build_product_api


def _catalog(request: Request, context: ActionContext, settings: AppSettings) -> ProductCatalog:
    locale = get_locale(request, context.project_context, settings)
    currency = get_currency(request, context.project_context, settings)
    return catalog_factory(context.project_context, locale, currency)


async def get_product(request: Request, context: ActionContext) -> Response:
    settings = AppSettings()
    product_query = query_from_params(request, settings=settings)

    # Atajos `?id=` / `?sku=` además de productIds[] / skus[].
    product_id = get_query_param(request, "id")
    sku = get_query_param(request, "sku")
    update: dict[str, list[str]] = {}
    if product_id:
        update["product_ids"] = [product_id]
    if sku:
        update["skus"] = [sku]
    if update:
        product_query = product_query.model_copy(update=update)

    product = await _catalog(request, context, settings).get_product(product_query)
    if product is None:
        return Response.from_payload({"message": "Product not found"}, status_code=404)
    return Response.from_payload(product)


async def query(request: Request, context: ActionContext) -> Response:
    settings = AppSettings()
    product_query = query_from_params(request, settings=settings)
    result = await _catalog(request, context, settings).query(product_query)
    return Response.from_payload(result)


async def query_categories(request: Request, context: ActionContext) -> Response:
    settings = AppSettings()
    limit = get_query_param(request, "limit")
    category_query = CategoryQuery(
        slug=get_query_param(request, "slug"),
        parent_id=get_query_param(request, "parentId"),
        limit=clamp_limit(int(limit) if limit and limit.isdigit() else None, settings),
        cursor=get_query_param(request, "cursor"),
    )
    result = await _catalog(request, context, settings).query_categories(category_query)
    return Response.from_payload(result)
