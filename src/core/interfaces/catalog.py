"""Contrato del catálogo de productos.

Por qué Protocol:
- Routers y data sources dependen de esta forma, no de la API HTTP concreta.
- En tests se sustituye por un catálogo en memoria sin tocar la red.
"""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from core.domain.extension import ProjectContext
from core.domain.models import (
    CategoryPaginatedResult,
    CategoryQuery,
    Product,
    ProductPaginatedResult,
    ProductQuery,
)


@runtime_checkable
class ProductCatalog(Protocol):
    """Operaciones de lectura sobre el catálogo.

    Reglas de diseño:
    - Todo es asíncrono porque típicamente hará I/O (HTTP).
    - Una instancia está ligada a un locale y una moneda.
    """

    async def query(self, product_query: ProductQuery) -> ProductPaginatedResult:
        ...

    async def get_product(self, product_query: ProductQuery) -> Product | None:
        """Primer producto que cumple la consulta, o `None`."""

        ...

    async def query_categories(self, category_query: CategoryQuery) -> CategoryPaginatedResult:
        ...


CatalogFactory = Callable[[ProjectContext, str, str], ProductCatalog]
"""(project_context, locale, currency) -> catálogo."""
