"""Modelos del dominio commerce (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a la API concreta de commerce.
- Los payloads que se devuelven al host son JSON camelCase; los atributos en
  Python siguen snake_case (alias generator + `populate_by_name`).

Nota:
- Estos modelos describen *qué* es un producto/categoría, no *cómo* se obtiene.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

SortOrder = Literal["asc", "desc"]

CURSOR_PREFIX = "offset:"


class CamelModel(BaseModel):
    """Base común: alias camelCase en JSON, nombres Python en código."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def as_payload(self) -> dict[str, Any]:
        """Forma JSON (camelCase) que se entrega al host."""

        return self.model_dump(mode="json", by_alias=True)


class Money(CamelModel):
    cent_amount: int = Field(..., description="Importe en la unidad mínima de la moneda.")
    currency_code: str = Field(..., min_length=3, max_length=3, description="ISO 4217.")
    fraction_digits: int = Field(default=2, ge=0, le=20)


class Variant(CamelModel):
    """Variante vendible (SKU) de un producto."""

    id: str | None = Field(default=None, description="Id de la variante dentro del producto.")
    sku: str | None = Field(default=None, description="SKU de la variante.")
    price: Money | None = Field(default=None, description="Precio en la moneda del request.")
    images: list[str] = Field(
        default_factory=list,
        description="URLs de imagen en orden de presentación.",
    )
    attributes: dict[str, Any] = Field(default_factory=dict)
    is_on_stock: bool = Field(default=True)


class Category(CamelModel):
    category_id: str = Field(..., min_length=1)
    category_key: str | None = None
    name: str | None = None
    slug: str | None = None
    depth: int = Field(default=0, ge=0, description="Número de ancestros.")
    parent_id: str | None = None


class Product(CamelModel):
    """Producto tal como lo consume el storefront.

    La primera variante es la master; de ella salen la URL canónica y la
    imagen del preview.
    """

    product_id: str = Field(..., min_length=1)
    product_key: str | None = None
    product_type_id: str | None = None
    name: str | None = None
    slug: str | None = None
    description: str | None = None
    categories: list[Category] = Field(default_factory=list)
    variants: list[Variant] = Field(default_factory=list)
    url: str | None = Field(default=None, description="Ruta storefront `/<slug>/p/<sku>`.")


class ProductQuery(CamelModel):
    """Consulta de productos independiente de la API concreta."""

    query: str | None = Field(default=None, description="Texto libre (full-text search).")
    category: str | None = Field(default=None, description="Id de categoría (subárbol incluido).")
    categories: list[str] = Field(
        default_factory=list,
        description="Ids de categoría adicionales (cualquiera de ellos).",
    )
    product_ids: list[str] = Field(default_factory=list)
    product_keys: list[str] = Field(default_factory=list)
    skus: list[str] = Field(default_factory=list)
    product_type: str | None = None
    sort_attributes: dict[str, SortOrder] = Field(default_factory=dict)
    limit: int | None = Field(default=None, ge=1)
    cursor: str | None = Field(default=None, description="Cursor opaco `offset:<n>`.")


class CategoryQuery(CamelModel):
    slug: str | None = None
    parent_id: str | None = None
    limit: int | None = Field(default=None, ge=1)
    cursor: str | None = None


class PaginatedResult(CamelModel):
    total: int | None = Field(default=None, ge=0)
    count: int = Field(default=0, ge=0)
    previous_cursor: str | None = None
    next_cursor: str | None = None


class ProductPaginatedResult(PaginatedResult):
    items: list[Product] = Field(default_factory=list)
    query: ProductQuery | None = None


class CategoryPaginatedResult(PaginatedResult):
    items: list[Category] = Field(default_factory=list)
    query: CategoryQuery | None = None


def cursor_to_offset(cursor: str | None) -> int:
    """`offset:48` -> 48. Cursores vacíos o ilegibles empiezan en 0."""

    if not cursor or not cursor.startswith(CURSOR_PREFIX):
        return 0
    try:
        return max(0, int(cursor[len(CURSOR_PREFIX):]))
    except ValueError:
        return 0


def offset_to_cursor(offset: int) -> str:
    return f"{CURSOR_PREFIX}{offset}"


def page_cursors(*, offset: int, count: int, total: int | None, limit: int) -> tuple[str | None, str | None]:
    """Calcula (previous_cursor, next_cursor) para una página."""

    previous_cursor = offset_to_cursor(max(0, offset - limit)) if offset > 0 else None
    next_cursor = None
    if total is not None and offset + count < total:
        next_cursor = offset_to_cursor(offset + count)
    return previous_cursor, next_cursor
