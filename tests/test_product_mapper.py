from adapters.commerce.product_mapper import (
    build_category_where,
    build_search_params,
    localized,
    map_category,
    map_product,
)
from core.domain.locale import Locale
from core.domain.models import CategoryQuery, ProductQuery

EN_US = Locale.parse("en_US")


class TestLocalized:

    def test_prefers_exact_locale_then_language(self):
        value = {"en": "Colour", "en-US": "Color", "de-DE": "Farbe"}
        assert localized(value, EN_US) == "Color"
        assert localized({"en": "Colour", "de": "Farbe"}, EN_US) == "Colour"

    def test_same_language_other_country(self):
        assert localized({"en-GB": "Colour", "de-DE": "Farbe"}, EN_US) == "Colour"

    def test_any_value_as_last_resort(self):
        assert localized({"de-DE": "Farbe"}, EN_US) == "Farbe"

    def test_plain_and_missing(self):
        assert localized("plain", EN_US) == "plain"
        assert localized(None, EN_US) is None
        assert localized({}, EN_US) is None


class TestMapProduct:

    def test_maps_projection(self, ct_product):
        product = map_product(ct_product, locale=EN_US, currency="USD")

        assert product.product_id == "p-1"
        assert product.product_key == "shirt-key"
        assert product.product_type_id == "pt-1"
        assert product.name == "Shirt"
        assert product.slug == "shirt"
        assert product.description == "A shirt"
        assert product.url == "/shirt/p/SHIRT-1"

    def test_master_variant_first(self, ct_product):
        product = map_product(ct_product, locale=EN_US, currency="USD")

        assert [v.sku for v in product.variants] == ["SHIRT-1", "SHIRT-2"]
        master, other = product.variants
        assert master.id == "1"
        assert master.images == ["https://img/shirt-front.jpg", "https://img/shirt-back.jpg"]
        assert master.attributes == {"color": "blue"}
        assert master.price.cent_amount == 1999
        assert other.price.cent_amount == 2099
        assert other.is_on_stock is False

    def test_categories_expanded_and_references(self, ct_product):
        product = map_product(ct_product, locale=EN_US, currency="USD")

        expanded, reference = product.categories
        assert expanded.category_id == "cat-men"
        assert expanded.slug == "men"
        assert expanded.depth == 1
        assert expanded.parent_id == "cat-root"
        assert reference.category_id == "cat-sale"
        assert reference.name is None

    def test_localized_for_other_locale(self, ct_product):
        product = map_product(ct_product, locale=Locale.parse("de_DE"), currency="EUR")

        assert product.name == "Hemd"
        assert product.url == "/hemd/p/SHIRT-1"
        assert product.variants[1].price.currency_code == "EUR"

    def test_payload_uses_camel_case(self, ct_product):
        payload = map_product(ct_product, locale=EN_US, currency="USD").as_payload()

        assert payload["productId"] == "p-1"
        assert payload["variants"][0]["isOnStock"] is True
        assert payload["variants"][0]["price"]["centAmount"] == 1999
        assert payload["categories"][0]["categoryId"] == "cat-men"


class TestMapCategory:

    def test_root_category(self):
        category = map_category({"id": "c", "name": {"en": "Root"}, "slug": {"en": "root"}}, locale=EN_US)
        assert (category.name, category.slug, category.depth, category.parent_id) == ("Root", "root", 0, None)


class TestSearchParams:

    def test_basic_params(self):
        params = build_search_params(ProductQuery(), locale=EN_US, currency="USD", limit=24)

        assert ("limit", "24") in params
        assert ("offset", "0") in params
        assert ("priceCurrency", "USD") in params
        assert ("priceCountry", "US") in params
        assert ("staged", "false") in params
        assert not [p for p in params if p[0] == "filter.query"]

    def test_filters_text_and_sort(self):
        query = ProductQuery(
            query="blue shirt",
            category="cat-1",
            categories=["a", "b"],
            product_ids=["p-1"],
            skus=['SKU"1'],
            product_type="pt-1",
            sort_attributes={"price": "desc", "name": "asc", "color": "asc"},
            cursor="offset:48",
        )

        params = build_search_params(query, locale=EN_US, currency="USD", limit=24)
        filters = [value for key, value in params if key == "filter.query"]
        sorts = [value for key, value in params if key == "sort"]

        assert ("offset", "48") in params
        assert ("text.en-US", "blue shirt") in params
        assert ("fuzzy", "true") in params
        assert 'categories.id:subtree("cat-1")' in filters
        assert 'categories.id:"a","b"' in filters
        assert 'id:"p-1"' in filters
        assert 'variants.sku:"SKU\\"1"' in filters
        assert 'productType.id:"pt-1"' in filters
        assert sorts == ["price desc", "name.en-US asc", "variants.attributes.color asc"]

    def test_no_country_no_price_country(self):
        params = build_search_params(ProductQuery(), locale=Locale.parse("en"), currency="USD", limit=1)
        assert not [p for p in params if p[0] == "priceCountry"]


class TestCategoryWhere:

    def test_slug_and_parent(self):
        where = build_category_where(CategoryQuery(slug="men", parent_id="root"), locale=EN_US)
        assert where == ['slug(en-US="men") or slug(en="men")', 'parent(id="root")']

    def test_language_only_locale(self):
        assert build_category_where(CategoryQuery(slug="men"), locale=Locale.parse("en")) == ['slug(en="men")']
