"""Data sources con nombre (`frontastic/...`) que alimentan los slots de página.

Cada resolver recibe `(config, context)` y devuelve un `DataSourceResult`:
- `data_source_payload` siempre;
- `preview_payload` (título + imagen por producto) solo si `context.is_preview`.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Awaitable, Callable, Iterable, TypeVar

from core.config import AppSettings
from core.domain.errors import ValidationError
from core.domain.extension import (
    DataSourceConfiguration,
    DataSourceContext,
    DataSourcePreviewPayloadElement,
    DataSourceResult,
    PageFolder,
    Request,
)
from core.domain.models import Product
from core.interfaces.catalog import CatalogFactory, ProductCatalog
from core.request_utils import get_currency, get_locale
from core.services.product_query_factory import query_from_params

logger = logging.getLogger(__name__)

T = TypeVar("T")

DataSourceResolver = Callable[[DataSourceConfiguration, DataSourceContext], Awaitable[DataSourceResult]]

MASTER_STREAM_ID = "__master"


def _first_image(product: Product) -> str | None:
    if not product.variants or not product.variants[0].images:
        return None
    return product.variants[0].images[0]


def build_preview_payload(products: Iterable[Product]) -> list[DataSourcePreviewPayloadElement]:
    """Un elemento `{title, image}` por producto (imagen: primera de la primera variante)."""

    return [
        DataSourcePreviewPayloadElement(title=product.name, image=_first_image(product))
        for product in products
    ]


def shuffle_items(items: list[T], rng: random.Random | None = None) -> list[T]:
    """Fisher-Yates in place; devuelve la misma lista."""

    rng = rng or random.Random()
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def _dig(value: Any, *keys: str | int) -> Any:
    for key in keys:
        if isinstance(key, int):
            if not isinstance(value, list) or len(value) <= key:
                return None
            value = value[key]
        elif isinstance(value, dict):
            value = value.get(key)
        else:
            value = getattr(value, key, None)
        if value is None:
            return None
    return value


def master_product_category_id(page_folder: PageFolder | None) -> str | None:
    """Categoría principal del producto precargado en el stream `__master`."""

    if page_folder is None:
        return None
    for configuration in page_folder.data_source_configurations:
        if configuration.stream_id != MASTER_STREAM_ID:
            continue
        preloaded = configuration.preloaded_value
        category_id = _dig(preloaded, "product", "categories", 0, "categoryId")
        if category_id is None:
            category_id = _dig(preloaded, "product", "categories", 0, "category_id")
        return str(category_id) if category_id is not None else None
    return None


def _require_request(context: DataSourceContext) -> Request:
    if context.request is None:
        raise ValidationError(f"Request is not defined in context {context!r}")
    return context.request


class DataSources:
    """Resolvers de data sources ligados a un `CatalogFactory`."""

    def __init__(
        self,
        api_factory: CatalogFactory,
        settings: AppSettings | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._api_factory = api_factory
        self._settings = settings or AppSettings()
        self._rng = rng

    def _catalog(self, context: DataSourceContext) -> ProductCatalog:
        locale = get_locale(context.request, context.project_context, self._settings)
        currency = get_currency(context.request, context.project_context, self._settings)
        return self._api_factory(context.project_context, locale, currency)

    def _result(self, payload: Any, products: Iterable[Product], context: DataSourceContext) -> DataSourceResult:
        if not context.is_preview:
            return DataSourceResult(data_source_payload=payload)
        return DataSourceResult(
            data_source_payload=payload,
            preview_payload=build_preview_payload(products),
        )

    async def product_list(self, config: DataSourceConfiguration, context: DataSourceContext) -> DataSourceResult:
        product_query = query_from_params(context.request, config, self._settings)
        result = await self._catalog(context).query(product_query)
        return self._result(result, result.items, context)

    async def similar_products(
        self, config: DataSourceConfiguration, context: DataSourceContext
    ) -> DataSourceResult:
        request = _require_request(context)
        category_id = master_product_category_id(context.page_folder)
        product_query = query_from_params(request, config, self._settings).model_copy(
            update={"categories": [category_id] if category_id else []}
        )
        result = await self._catalog(context).query(product_query)
        return self._result(result, result.items, context)

    async def product(self, config: DataSourceConfiguration, context: DataSourceContext) -> DataSourceResult:
        product_query = query_from_params(context.request, config, self._settings)
        product = await self._catalog(context).get_product(product_query)
        if product is None:
            logger.debug("No product for data source %s", config.data_source_id)
        return self._result({"product": product}, [product] if product else [], context)

    async def other_products(
        self, config: DataSourceConfiguration, context: DataSourceContext
    ) -> DataSourceResult:
        request = _require_request(context)
        product_query = query_from_params(request, config, self._settings)
        result = await self._catalog(context).query(product_query)
        shuffled = result.model_copy(update={"items": shuffle_items(list(result.items), self._rng)})
        return self._result(shuffled, shuffled.items, context)

    async def empty(self, config: DataSourceConfiguration, context: DataSourceContext) -> DataSourceResult:
        return self._result({}, [], context)

    def registry(self) -> dict[str, DataSourceResolver]:
        return {
            "frontastic/product-list": self.product_list,
            "frontastic/similar-products": self.similar_products,
            "frontastic/product": self.product,
            "frontastic/other-products": self.other_products,
            "frontastic/empty": self.empty,
        }
