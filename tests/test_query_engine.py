"""
Tests for the catalog query engine.
"""

import pytest

from shopstore.domain.entities import Product, ProductStatus
from shopstore.search.query_engine import (
    ALL,
    QueryCriteria,
    SortOrder,
    clamp_page,
    count_pages,
    filter_products,
    parse_price,
    run_query,
    sort_products,
)


def make_product(i, **overrides):
    values = {
        "id": f"p{i}",
        "sku": f"SKU-{i}",
        "name": f"Product {i}",
        "price": 10.0,
        "quantity": 1,
        "category": "Electronics",
        "brand": "Acme",
        "color": "Black",
        "status": ProductStatus.AVAILABLE,
        "rating": 4.0,
    }
    values.update(overrides)
    return Product(**values)


@pytest.fixture
def mixed_catalog():
    """Catalog spread over categories, brands, statuses and prices."""
    return [
        make_product(1, name="Gaming Laptop", price=999.0, category="Electronics", rating=4.8),
        make_product(2, name="USB Cable", price=9.99, category="Electronics", rating=3.9),
        make_product(3, name="Headphones", price=49.5, category="Electronics", brand="Sonic", rating=4.5),
        make_product(4, name="Coffee Mug", price=12.0, category="Home", rating=4.1),
        make_product(5, name="Keyboard", price=10.0, category="Electronics", status=ProductStatus.OUT_OF_STOCK, rating=4.2),
        make_product(6, name="Mouse Pad", price=50.0, category="Electronics", brand="Sonic", rating=3.0),
        make_product(7, name="Desk Lamp", price=30.0, category="Home", status=ProductStatus.COMING_SOON, rating=4.9),
    ]


class TestPagination:
    """Test page slicing."""

    @pytest.fixture
    def catalog(self):
        return [make_product(i, rating=i / 10) for i in range(1, 26)]

    def test_first_page_holds_highest_rated(self, catalog):
        result = run_query(catalog, QueryCriteria(sort="rating-high", page=1))

        assert len(result.items) == 20
        assert result.items[0].rating == 2.5
        ratings = [p.rating for p in result.items]
        assert ratings == sorted(ratings, reverse=True)
        assert result.total_pages == 2
        assert result.filtered_count == 25
        assert result.total_count == 25

    def test_second_page_holds_remainder(self, catalog):
        result = run_query(catalog, QueryCriteria(page=2))

        assert [p.rating for p in result.items] == [0.5, 0.4, 0.3, 0.2, 0.1]

    def test_page_beyond_range_is_empty(self, catalog):
        result = run_query(catalog, QueryCriteria(page=3))

        assert result.items == []
        assert result.total_pages == 2
        assert result.filtered_count == 25
        assert result.has_results
        assert result.is_empty_page

    @pytest.mark.parametrize("page", [0, -1])
    def test_page_below_one_is_empty(self, catalog, page):
        result = run_query(catalog, QueryCriteria(page=page))

        assert result.items == []
        assert result.filtered_count == 25

    def test_pages_reconstruct_filtered_sequence(self, catalog):
        criteria = QueryCriteria(sort="rating-low")
        full = sort_products(filter_products(catalog, criteria), criteria.sort)

        pages = []
        total_pages = run_query(catalog, criteria, page_size=7).total_pages
        for page in range(1, total_pages + 1):
            pages.extend(run_query(catalog, criteria.with_changes(page=page), page_size=7).items)

        assert pages == full
        assert total_pages == 4

    def test_empty_catalog_has_one_page(self):
        result = run_query([], QueryCriteria())

        assert result.items == []
        assert result.total_pages == 1
        assert not result.has_results

    def test_invalid_page_size(self, catalog):
        with pytest.raises(ValueError):
            run_query(catalog, QueryCriteria(), page_size=0)

    def test_count_pages(self):
        assert count_pages(0) == 1
        assert count_pages(20) == 1
        assert count_pages(21) == 2
        assert count_pages(10, page_size=3) == 4

    def test_clamp_page(self):
        assert clamp_page(0, 3) == 1
        assert clamp_page(5, 3) == 3
        assert clamp_page(2, 3) == 2
        assert clamp_page(4, 0) == 1


class TestFiltering:
    """Test predicates."""

    def test_price_range_and_category(self, mixed_catalog):
        result = run_query(
            mixed_catalog,
            QueryCriteria(min_price=10, max_price=50, category="Electronics"),
        )

        assert {p.sku for p in result.items} == {"SKU-3", "SKU-5", "SKU-6"}
        for product in result.items:
            assert product.category == "Electronics"
            assert 10 <= product.price <= 50
        electronics = [p for p in mixed_catalog if p.category == "Electronics"]
        assert result.filtered_count <= len(electronics)

    def test_price_bounds_from_form_strings(self, mixed_catalog):
        result = run_query(mixed_catalog, QueryCriteria(min_price="10", max_price=" 50 "))

        assert all(10 <= p.price <= 50 for p in result.items)
        assert result.filtered_count == 5

    def test_unparseable_price_is_ignored(self, mixed_catalog):
        result = run_query(mixed_catalog, QueryCriteria(min_price="abc", max_price=""))

        assert result.filtered_count == len(mixed_catalog)

    def test_search_is_case_insensitive_substring(self, mixed_catalog):
        result = run_query(mixed_catalog, QueryCriteria(search="MOUSE"))

        assert [p.name for p in result.items] == ["Mouse Pad"]

    def test_all_sentinel_disables_filter(self, mixed_catalog):
        result = run_query(
            mixed_catalog, QueryCriteria(category=ALL, brand=ALL, status=ALL)
        )

        assert result.filtered_count == len(mixed_catalog)

    def test_status_filter(self, mixed_catalog):
        result = run_query(mixed_catalog, QueryCriteria(status="Coming Soon"))

        assert [p.sku for p in result.items] == ["SKU-7"]

    def test_brand_filter(self, mixed_catalog):
        result = run_query(mixed_catalog, QueryCriteria(brand="Sonic"))

        assert {p.sku for p in result.items} == {"SKU-3", "SKU-6"}

    def test_predicates_are_conjunctive(self, mixed_catalog):
        result = run_query(
            mixed_catalog,
            QueryCriteria(category="Electronics", brand="Sonic", max_price=49.5),
        )

        assert [p.sku for p in result.items] == ["SKU-3"]

    def test_filter_keeps_natural_order(self, mixed_catalog):
        filtered = filter_products(mixed_catalog, QueryCriteria(category="Home"))

        assert [p.sku for p in filtered] == ["SKU-4", "SKU-7"]

    def test_no_match(self, mixed_catalog):
        result = run_query(mixed_catalog, QueryCriteria(search="nonexistent"))

        assert result.items == []
        assert result.total_pages == 1
        assert result.total_count == len(mixed_catalog)


class TestSorting:
    """Test rating sort."""

    def test_descending(self, mixed_catalog):
        result = run_query(mixed_catalog, QueryCriteria(sort=SortOrder.RATING_HIGH.value))

        ratings = [p.rating for p in result.items]
        assert ratings == sorted(ratings, reverse=True)

    def test_ascending(self, mixed_catalog):
        result = run_query(mixed_catalog, QueryCriteria(sort="rating-low"))

        ratings = [p.rating for p in result.items]
        assert ratings == sorted(ratings)

    @pytest.mark.parametrize("sort", ["rating-high", "rating-low"])
    def test_ties_keep_natural_order(self, sort):
        catalog = [make_product(i, rating=4.0) for i in range(1, 6)]

        result = run_query(catalog, QueryCriteria(sort=sort))

        assert [p.id for p in result.items] == ["p1", "p2", "p3", "p4", "p5"]

    @pytest.mark.parametrize(
        "sort,expected",
        [
            ("rating-high", ["p2", "p4", "p1", "p3", "p5"]),
            ("rating-low", ["p1", "p3", "p5", "p2", "p4"]),
        ],
    )
    def test_interleaved_ties_keep_natural_order(self, sort, expected):
        ratings = [4.0, 5.0, 4.0, 5.0, 4.0]
        catalog = [make_product(i, rating=r) for i, r in enumerate(ratings, start=1)]

        result = run_query(catalog, QueryCriteria(sort=sort))

        assert [p.id for p in result.items] == expected

    def test_unknown_sort_keeps_natural_order(self, mixed_catalog):
        result = run_query(mixed_catalog, QueryCriteria(sort="price-low"))

        assert result.items == mixed_catalog

    def test_input_is_not_mutated(self, mixed_catalog):
        before = list(mixed_catalog)

        run_query(mixed_catalog, QueryCriteria(sort="rating-low", category="Home"))

        assert mixed_catalog == before


class TestDeterminism:
    """Test that identical inputs give identical pages."""

    def test_same_inputs_same_result(self, mixed_catalog):
        criteria = QueryCriteria(search="o", min_price="5", sort="rating-low")

        assert run_query(mixed_catalog, criteria) == run_query(mixed_catalog, criteria)


class TestParsePrice:
    """Test price criterion parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("10", 10.0),
            (" 2.5 ", 2.5),
            (7, 7.0),
            (0, 0.0),
            ("", None),
            ("   ", None),
            (None, None),
            ("abc", None),
            ("nan", None),
            ("inf", None),
            (True, None),
        ],
    )
    def test_parse_price(self, value, expected):
        assert parse_price(value) == expected
