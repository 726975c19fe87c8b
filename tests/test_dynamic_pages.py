import asyncio

import pytest

from core.domain.extension import (
    DynamicPageContext,
    DynamicPageRedirectResult,
    DynamicPageSuccessResult,
    Request,
)
from core.domain.models import ProductPaginatedResult
from core.services.dynamic_pages import DynamicPageHandler, match_static_page
from core.services.page_routers import CategoryRouter, ProductRouter, SearchRouter

from conftest import FakeCatalog, RecordingFactory

STATIC_PAGES = ["cart", "checkout", "wishlist", "account", "login", "register", "reset-password", "thank-you"]


class StubRouter:
    """Router que reconoce todo y anota si se le pidió cargar."""

    def __init__(self, result=None, identifies=True):
        self.result = result
        self.identifies = identifies
        self.loaded = False

    def identify_from(self, request):
        return self.identifies

    async def load_for(self, request, project_context):
        self.loaded = True
        return self.result


def build_handler(factory, settings, **overrides):
    routers = {
        "product_router": ProductRouter(factory, settings),
        "search_router": SearchRouter(factory, settings),
        "category_router": CategoryRouter(factory, settings),
    }
    routers.update(overrides)
    return DynamicPageHandler(settings=settings, **routers)


def resolve(handler, path, **request_kwargs):
    request = Request(path=path, **request_kwargs)
    return asyncio.run(handler(request, DynamicPageContext()))


class TestStaticPages:

    @pytest.mark.parametrize("name", STATIC_PAGES)
    def test_static_path_gives_page_type(self, name, factory, settings):
        result = resolve(build_handler(factory, settings), f"/{name}")

        assert isinstance(result, DynamicPageSuccessResult)
        assert result.dynamic_page_type == f"frontastic/{name}"
        assert result.data_source_payload == {}
        assert result.page_matching_payload == {}
        assert factory.calls == []

    @pytest.mark.parametrize(
        "path",
        ["/cart/", "/carts", "/Cart", "/my/cart", "cart", "/thank-you/now", "/cart\n", "\n/cart", "", None],
    )
    def test_only_exact_literal_paths_match(self, path):
        assert match_static_page(path) is None

    def test_payload_shape(self, factory, settings):
        result = resolve(build_handler(factory, settings), "/checkout")
        assert result.as_payload() == {
            "dynamicPageType": "frontastic/checkout",
            "dataSourcePayload": {},
            "pageMatchingPayload": {},
        }


class TestProductPages:

    def test_product_detail_page(self, factory, settings, products):
        result = resolve(build_handler(factory, settings), "/shirt/p/SHIRT-1")

        assert isinstance(result, DynamicPageSuccessResult)
        assert result.dynamic_page_type == "frontastic/product-detail-page"
        assert result.data_source_payload == {"product": products[0]}
        assert result.page_matching_payload == {"product": products[0]}
        assert factory.catalog.queries[-1].skus == ["SHIRT-1"]

    def test_product_path_without_slug(self, factory, settings, products):
        result = resolve(build_handler(factory, settings), "/p/JEANS-1")
        assert result.data_source_payload["product"] == products[1]

    def test_unknown_product_gives_none_and_stops(self, factory, settings):
        search = StubRouter(result=ProductPaginatedResult())
        category = StubRouter(result=ProductPaginatedResult())
        handler = build_handler(factory, settings, search_router=search, category_router=category)

        assert resolve(handler, "/p/NOPE") is None
        assert not search.loaded
        assert not category.loaded

    def test_locale_and_currency_reach_the_catalog(self, factory, settings):
        resolve(build_handler(factory, settings), "/p/SHIRT-1", headers={"frontastic-locale": "de_DE"})
        _, locale, currency = factory.calls[-1]
        assert (locale, currency) == ("de_DE", "EUR")

    def test_non_canonical_slug_redirects_when_enabled(self, factory, settings):
        settings.redirect_non_canonical_product_urls = True
        result = resolve(build_handler(factory, settings), "/old-name/p/SHIRT-1")

        assert isinstance(result, DynamicPageRedirectResult)
        assert result.status_code == 301
        assert result.redirect_location == "/shirt/p/SHIRT-1"

    def test_non_canonical_slug_served_when_disabled(self, factory, settings):
        result = resolve(build_handler(factory, settings), "/old-name/p/SHIRT-1")
        assert result.dynamic_page_type == "frontastic/product-detail-page"

    def test_redirect_skipped_for_router_without_slug(self, factory, settings, products):
        settings.redirect_non_canonical_product_urls = True
        handler = build_handler(factory, settings, product_router=StubRouter(result=products[0]))

        result = resolve(handler, "/old-name/p/SHIRT-1")

        assert isinstance(result, DynamicPageSuccessResult)
        assert result.data_source_payload == {"product": products[0]}


class TestSearchAndCategoryPages:

    def test_search_page(self, factory, settings):
        result = resolve(build_handler(factory, settings), "/search", query={"query": "shirt"})

        assert result.dynamic_page_type == "frontastic/search"
        assert isinstance(result.data_source_payload, ProductPaginatedResult)
        assert result.page_matching_payload == result.data_source_payload
        assert factory.catalog.queries[-1].query == "shirt"

    def test_category_page(self, factory, settings):
        result = resolve(build_handler(factory, settings), "/clothing/men")

        assert result.dynamic_page_type == "frontastic/category"
        assert factory.catalog.category_queries[-1].slug == "men"
        assert factory.catalog.queries[-1].category == "cat-men"

    def test_unknown_category_gives_none(self, factory, settings):
        assert resolve(build_handler(factory, settings), "/garden") is None
        assert factory.catalog.queries == []

    def test_path_from_query_param(self, factory, settings):
        result = resolve(build_handler(factory, settings), "/frontastic/page", query={"path": "/wishlist"})
        assert result.dynamic_page_type == "frontastic/wishlist"


class TestDispatchOrder:

    def test_first_matching_router_wins(self, settings):
        product = StubRouter(result=None, identifies=False)
        search = StubRouter(result=ProductPaginatedResult(total=0))
        category = StubRouter(result=ProductPaginatedResult(total=0))
        handler = build_handler(
            RecordingFactory(FakeCatalog()),
            settings,
            product_router=product,
            search_router=search,
            category_router=category,
        )

        result = resolve(handler, "/anything")

        assert result.dynamic_page_type == "frontastic/search"
        assert not product.loaded
        assert search.loaded
        assert not category.loaded

    def test_static_pages_checked_before_routers(self, settings):
        search = StubRouter(result=ProductPaginatedResult())
        handler = build_handler(RecordingFactory(FakeCatalog()), settings, search_router=search)

        assert resolve(handler, "/cart").dynamic_page_type == "frontastic/cart"
        assert not search.loaded

    def test_no_match_gives_none(self, factory, settings):
        assert resolve(build_handler(factory, settings), "/") is None
        assert resolve(build_handler(factory, settings), "/a b") is None

    @pytest.mark.parametrize("path", ["/cart\n", "/garden\n", "/search\n", "/p/SHIRT-1\n", "/clothing/men\n"])
    def test_trailing_newline_matches_nothing(self, factory, settings, path):
        handler = build_handler(factory, settings)

        assert resolve(handler, "/x", query={"path": path}) is None
        assert factory.catalog.queries == []
        assert factory.catalog.category_queries == []
