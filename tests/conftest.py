# tests/conftest.py
from __future__ import annotations

from typing import Any

import pytest

from core.config import AppSettings
from core.domain.extension import ProjectContext
from core.domain.models import (
    Category,
    CategoryPaginatedResult,
    CategoryQuery,
    Product,
    ProductPaginatedResult,
    ProductQuery,
    Variant,
)


def make_product(
    product_id: str,
    *,
    name: str | None = None,
    sku: str | None = None,
    slug: str | None = None,
    images: list[str] | None = None,
    category_id: str | None = None,
) -> Product:
    sku = sku or f"SKU-{product_id}"
    slug = slug or f"product-{product_id}"
    return Product(
        product_id=product_id,
        name=name or f"Product {product_id}",
        slug=slug,
        categories=[Category(category_id=category_id)] if category_id else [],
        variants=[Variant(id="1", sku=sku, images=images if images is not None else [f"https://img/{product_id}.jpg"])],
        url=f"/{slug}/p/{sku}",
    )


class FakeCatalog:
    """Catálogo en memoria que registra las consultas recibidas."""

    def __init__(
        self,
        products: list[Product] | None = None,
        categories: list[Category] | None = None,
        total: int | None = None,
    ) -> None:
        self.products = products or []
        self.categories = categories or []
        self.total = total
        self.queries: list[ProductQuery] = []
        self.category_queries: list[CategoryQuery] = []

    async def query(self, product_query: ProductQuery) -> ProductPaginatedResult:
        self.queries.append(product_query)
        items = list(self.products)
        return ProductPaginatedResult(
            total=self.total if self.total is not None else len(items),
            count=len(items),
            items=items,
            query=product_query,
        )

    async def get_product(self, product_query: ProductQuery) -> Product | None:
        self.queries.append(product_query)
        for product in self.products:
            skus = {v.sku for v in product.variants}
            if product_query.skus and not skus.intersection(product_query.skus):
                continue
            if product_query.product_ids and product.product_id not in product_query.product_ids:
                continue
            return product
        return None

    async def query_categories(self, category_query: CategoryQuery) -> CategoryPaginatedResult:
        self.category_queries.append(category_query)
        items = [c for c in self.categories if category_query.slug in (None, c.slug)]
        return CategoryPaginatedResult(total=len(items), count=len(items), items=items, query=category_query)


class RecordingFactory:
    """`CatalogFactory` que siempre devuelve el mismo catálogo y anota locale/moneda."""

    def __init__(self, catalog: FakeCatalog) -> None:
        self.catalog = catalog
        self.calls: list[tuple[ProjectContext, str, str]] = []

    def __call__(self, project_context: ProjectContext, locale: str, currency: str) -> FakeCatalog:
        self.calls.append((project_context, locale, currency))
        return self.catalog


@pytest.fixture
def settings() -> AppSettings:
    """Settings aislados de .env y de la máquina."""
    return AppSettings(
        _env_file=None,
        commerce_api_url="https://api.test",
        commerce_auth_url="https://auth.test",
        commerce_project_key="demo",
        commerce_client_id="client",
        commerce_client_secret="secret",
        default_locale="en_US",
        default_currency="USD",
        default_page_size=24,
        max_page_size=100,
    )


@pytest.fixture
def products() -> list[Product]:
    return [
        make_product("1", name="Shirt", sku="SHIRT-1", slug="shirt", category_id="cat-men"),
        make_product("2", name="Jeans", sku="JEANS-1", slug="jeans", images=[]),
        make_product("3", name="Socks", sku="SOCKS-1", slug="socks"),
    ]


@pytest.fixture
def catalog(products) -> FakeCatalog:
    return FakeCatalog(
        products=products,
        categories=[Category(category_id="cat-men", slug="men", name="Men")],
    )


@pytest.fixture
def factory(catalog) -> RecordingFactory:
    return RecordingFactory(catalog)


@pytest.fixture
def ct_product() -> dict[str, Any]:
    """Product projection tal como la devuelve la API de commerce."""
    return {
        "id": "p-1",
        "key": "shirt-key",
        "productType": {"typeId": "product-type", "id": "pt-1"},
        "name": {"en-US": "Shirt", "de-DE": "Hemd"},
        "slug": {"en-US": "shirt", "de-DE": "hemd"},
        "description": {"en": "A shirt"},
        "categories": [
            {
                "typeId": "category",
                "id": "cat-men",
                "obj": {
                    "id": "cat-men",
                    "key": "men",
                    "name": {"en-US": "Men"},
                    "slug": {"en-US": "men"},
                    "ancestors": [{"typeId": "category", "id": "cat-root"}],
                    "parent": {"typeId": "category", "id": "cat-root"},
                },
            },
            {"typeId": "category", "id": "cat-sale"},
        ],
        "masterVariant": {
            "id": 1,
            "sku": "SHIRT-1",
            "price": {"value": {"type": "centPrecision", "currencyCode": "USD", "centAmount": 1999, "fractionDigits": 2}},
            "images": [{"url": "https://img/shirt-front.jpg"}, {"url": "https://img/shirt-back.jpg"}],
            "attributes": [{"name": "color", "value": "blue"}],
            "availability": {"isOnStock": True},
        },
        "variants": [
            {
                "id": 2,
                "sku": "SHIRT-2",
                "prices": [
                    {"value": {"currencyCode": "EUR", "centAmount": 1799, "fractionDigits": 2}},
                    {"value": {"currencyCode": "USD", "centAmount": 2099, "fractionDigits": 2}},
                ],
                "images": [],
                "availability": {"isOnStock": False},
            }
        ],
    }
