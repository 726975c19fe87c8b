"""Mapeo entre la API de commerce (commercetools) y el dominio.

Responsabilidad:
- Convertir product projections / categorías JSON en `Product` / `Category`.
- Traducir un `ProductQuery` en parámetros de `product-projections/search`.

Todo es puro (sin I/O) para poder testearlo con fixtures JSON.
"""

from __future__ import annotations

from typing import Any

from core.domain.locale import Locale
from core.domain.models import (
    Category,
    CategoryQuery,
    Money,
    Product,
    ProductQuery,
    Variant,
    cursor_to_offset,
)


def localized(value: Any, locale: Locale) -> str | None:
    """Elige el texto de un LocalizedString: locale exacto, idioma, cualquiera."""

    if isinstance(value, str):
        return value
    if not isinstance(value, dict) or not value:
        return None

    for key in (locale.api_locale, locale.language):
        text = value.get(key)
        if isinstance(text, str) and text:
            return text
    for key, text in value.items():
        if key.split("-", 1)[0].lower() == locale.language and isinstance(text, str) and text:
            return text
    first = next(iter(value.values()))
    return first if isinstance(first, str) else None


def map_money(raw: Any) -> Money | None:
    if not isinstance(raw, dict):
        return None
    if "centAmount" not in raw or "currencyCode" not in raw:
        return None
    return Money(
        cent_amount=int(raw["centAmount"]),
        currency_code=str(raw["currencyCode"]),
        fraction_digits=int(raw.get("fractionDigits", 2)),
    )


def _select_price(raw_variant: dict[str, Any], currency: str) -> Money | None:
    # `price` solo viene cuando la búsqueda se hizo con priceCurrency.
    selected = raw_variant.get("price")
    if isinstance(selected, dict):
        money = map_money(selected.get("value"))
        if money:
            return money
    for price in raw_variant.get("prices") or []:
        if not isinstance(price, dict):
            continue
        money = map_money(price.get("value"))
        if money and money.currency_code == currency:
            return money
    return None


def map_variant(raw: dict[str, Any], *, currency: str) -> Variant:
    images = [
        str(image["url"])
        for image in raw.get("images") or []
        if isinstance(image, dict) and image.get("url")
    ]
    attributes = {
        str(attr["name"]): attr.get("value")
        for attr in raw.get("attributes") or []
        if isinstance(attr, dict) and attr.get("name")
    }
    availability = raw.get("availability") or {}
    is_on_stock = availability.get("isOnStock", True) if isinstance(availability, dict) else True

    variant_id = raw.get("id")
    return Variant(
        id=str(variant_id) if variant_id is not None else None,
        sku=raw.get("sku"),
        price=_select_price(raw, currency),
        images=images,
        attributes=attributes,
        is_on_stock=bool(is_on_stock),
    )


def map_category(raw: dict[str, Any], *, locale: Locale) -> Category:
    parent = raw.get("parent")
    return Category(
        category_id=str(raw["id"]),
        category_key=raw.get("key"),
        name=localized(raw.get("name"), locale),
        slug=localized(raw.get("slug"), locale),
        depth=len(raw.get("ancestors") or []),
        parent_id=parent.get("id") if isinstance(parent, dict) else None,
    )


def _map_category_reference(raw: Any, *, locale: Locale) -> Category | None:
    if not isinstance(raw, dict) or not raw.get("id"):
        return None
    # Con `expand=categories[*]` la referencia trae el objeto completo.
    obj = raw.get("obj")
    if isinstance(obj, dict) and obj.get("id"):
        return map_category(obj, locale=locale)
    return Category(category_id=str(raw["id"]))


def product_url(slug: str | None, variants: list[Variant]) -> str | None:
    sku = variants[0].sku if variants else None
    if not slug or not sku:
        return None
    return f"/{slug}/p/{sku}"


def map_product(raw: dict[str, Any], *, locale: Locale, currency: str) -> Product:
    raw_variants: list[dict[str, Any]] = []
    master = raw.get("masterVariant")
    if isinstance(master, dict):
        raw_variants.append(master)
    raw_variants.extend(v for v in raw.get("variants") or [] if isinstance(v, dict))
    variants = [map_variant(v, currency=currency) for v in raw_variants]

    categories = [
        category
        for category in (_map_category_reference(ref, locale=locale) for ref in raw.get("categories") or [])
        if category is not None
    ]

    product_type = raw.get("productType")
    slug = localized(raw.get("slug"), locale)
    return Product(
        product_id=str(raw["id"]),
        product_key=raw.get("key"),
        product_type_id=product_type.get("id") if isinstance(product_type, dict) else None,
        name=localized(raw.get("name"), locale),
        slug=slug,
        description=localized(raw.get("description"), locale),
        categories=categories,
        variants=variants,
        url=product_url(slug, variants),
    )


def _quoted(values: list[str]) -> str:
    return ",".join('"' + v.replace("\\", "\\\\").replace('"', '\\"') + '"' for v in values)


def _sort_expression(field: str, order: str, locale: Locale) -> str:
    if field == "price":
        return f"price {order}"
    if field in ("name", "slug"):
        return f"{field}.{locale.api_locale} {order}"
    if field in ("createdAt", "lastModifiedAt", "id", "score"):
        return f"{field} {order}"
    return f"variants.attributes.{field} {order}"


def build_search_params(
    product_query: ProductQuery,
    *,
    locale: Locale,
    currency: str,
    limit: int,
) -> list[tuple[str, str]]:
    """Parámetros de `GET /{projectKey}/product-projections/search`."""

    params: list[tuple[str, str]] = [
        ("limit", str(limit)),
        ("offset", str(cursor_to_offset(product_query.cursor))),
        ("staged", "false"),
        ("markMatchingVariants", "true"),
        ("expand", "categories[*]"),
        ("priceCurrency", currency),
    ]
    if locale.country:
        params.append(("priceCountry", locale.country))

    if product_query.query:
        params.append((f"text.{locale.api_locale}", product_query.query))
        params.append(("fuzzy", "true"))

    filters: list[str] = []
    if product_query.category:
        filters.append(f"categories.id:subtree({_quoted([product_query.category])})")
    if product_query.categories:
        filters.append(f"categories.id:{_quoted(product_query.categories)}")
    if product_query.product_ids:
        filters.append(f"id:{_quoted(product_query.product_ids)}")
    if product_query.product_keys:
        filters.append(f"key:{_quoted(product_query.product_keys)}")
    if product_query.skus:
        filters.append(f"variants.sku:{_quoted(product_query.skus)}")
    if product_query.product_type:
        filters.append(f"productType.id:{_quoted([product_query.product_type])}")
    params.extend(("filter.query", expression) for expression in filters)

    for field, order in product_query.sort_attributes.items():
        params.append(("sort", _sort_expression(field, order, locale)))

    return params


def build_category_where(category_query: CategoryQuery, *, locale: Locale) -> list[str]:
    """Predicados `where` de `GET /{projectKey}/categories`."""

    predicates: list[str] = []
    if category_query.slug:
        slug = _quoted([category_query.slug])
        keys = [locale.api_locale]
        if locale.language not in keys:
            keys.append(locale.language)
        predicates.append(" or ".join(f"slug({key}={slug})" for key in keys))
    if category_query.parent_id:
        predicates.append(f"parent(id={_quoted([category_query.parent_id])})")
    return predicates
