"""Construcción de `ProductQuery` a partir de request + configuración de data source.

Reglas:
- El request aporta búsqueda, paginación y orden (`query`, `limit`, `cursor`,
  `sortAttributes[<campo>]`, ...).
- La configuración del data source (la que fija el editor en el page builder)
  tiene prioridad sobre el request para selección de productos/categoría.
"""

from __future__ import annotations

from typing import Any

from core.config import AppSettings
from core.domain.extension import DataSourceConfiguration, Request
from core.domain.models import ProductQuery
from core.request_utils import (
    get_query_list,
    get_query_mapping,
    get_query_param,
    split_list_value,
)

_SORT_ORDERS = ("asc", "desc")

# clave en configuration -> campo lista de ProductQuery
_CONFIG_LIST_KEYS: dict[str, str] = {
    "productIds": "product_ids",
    "productSkus": "skus",
    "skus": "skus",
    "productKeys": "product_keys",
    "productKey": "product_keys",
}

_CONFIG_CATEGORY_KEYS = ("categoryId", "productCategory", "category")
_CONFIG_PRODUCT_TYPE_KEYS = ("productTypeId", "productType")


def _parse_limit(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _first_str(configuration: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = configuration.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def clamp_limit(limit: int | None, settings: AppSettings) -> int:
    if limit is None:
        return settings.default_page_size
    return max(1, min(limit, settings.max_page_size))


def query_from_params(
    request: Request | None,
    config: DataSourceConfiguration | None = None,
    settings: AppSettings | None = None,
) -> ProductQuery:
    """Combina parámetros del request y del data source en un `ProductQuery`."""

    settings = settings or AppSettings()

    values: dict[str, Any] = {
        "query": get_query_param(request, "query"),
        "category": get_query_param(request, "category"),
        "product_type": get_query_param(request, "productType"),
        "product_ids": get_query_list(request, "productIds"),
        "skus": get_query_list(request, "skus"),
        "product_keys": [],
        "cursor": get_query_param(request, "cursor"),
        "sort_attributes": {
            field: order.lower()
            for field, order in get_query_mapping(request, "sortAttributes").items()
            if order.lower() in _SORT_ORDERS
        },
    }
    limit = _parse_limit(get_query_param(request, "limit"))

    configuration = config.configuration if config is not None else {}
    for key, field in _CONFIG_LIST_KEYS.items():
        items = split_list_value(configuration.get(key))
        if items:
            values[field] = items

    category = _first_str(configuration, _CONFIG_CATEGORY_KEYS)
    if category:
        values["category"] = category
    product_type = _first_str(configuration, _CONFIG_PRODUCT_TYPE_KEYS)
    if product_type:
        values["product_type"] = product_type
    config_query = _first_str(configuration, ("query",))
    if config_query:
        values["query"] = config_query
    config_limit = _parse_limit(configuration.get("limit"))
    if config_limit is not None:
        limit = config_limit

    return ProductQuery(limit=clamp_limit(limit, settings), **values)
