import pytest

from product_search.models import Product, SearchFilters, SortOption
from product_search.result_shaper import ResultShaper, available_sources, parse_price

def make_product(position, price="$10.00", rating=None, source="Amazon", **overrides):
    data = {
        "title": f"Product {position}",
        "source": source,
        "link": f"https://example.com/{position}",
        "price": price,
        "imageUrl": f"https://example.com/{position}.jpg",
        "rating": rating,
        "productId": f"id-{position}",
        "position": position,
    }
    data.update(overrides)
    return Product.model_validate(data)

@pytest.fixture
def shaper():
    return ResultShaper()

@pytest.fixture
def products():
    # Deliberately not in position order
    return [
        make_product(3, price="$1,299.00", rating=4.5, source="Best Buy"),
        make_product(1, price="$19.99", rating=4.8, source="Amazon"),
        make_product(4, price="Call for price", rating=None, source="Walmart"),
        make_product(2, price="$5.49", rating=3.2, source="Amazon"),
    ]

@pytest.mark.parametrize("raw, expected", [
    ("$19.99", 19.99),
    ("$1,299.00", 1299.0),
    ("USD 45", 45.0),
    ("€12.50", 12.5),
    ("$19.99 + $5.00 shipping", 19.995),
    (".99", 0.99),
    ("Call for price", None),
    ("", None),
    (None, None),
    ("...", None),
])
def test_parse_price(raw, expected):
    assert parse_price(raw) == (pytest.approx(expected) if expected is not None else None)

def test_empty_filters_order_by_position(shaper, products):
    shaped = shaper.shape_results(products, SearchFilters())

    assert [p.position for p in shaped] == [1, 2, 3, 4]
    assert sorted(p.product_id for p in shaped) == sorted(p.product_id for p in products)

def test_input_is_not_mutated(shaper, products):
    before = [p.product_id for p in products]
    shaper.shape_results(products, SearchFilters(sortBy="price-high", minRating=3))
    assert [p.product_id for p in products] == before

@pytest.mark.parametrize("min_rating", [1, 3, 4, 5])
def test_min_rating_drops_lower_and_unrated(shaper, products, min_rating):
    shaped = shaper.shape_results(products, SearchFilters(minRating=min_rating))

    assert all(p.rating is not None and p.rating >= min_rating for p in shaped)
    expected = {p.product_id for p in products if p.rating is not None and p.rating >= min_rating}
    assert {p.product_id for p in shaped} == expected

def test_source_filter(shaper, products):
    shaped = shaper.shape_results(products, SearchFilters(sources=["Amazon", "Walmart"]))

    assert [p.position for p in shaped] == [1, 2, 4]
    assert all(p.source in {"Amazon", "Walmart"} for p in shaped)

@pytest.mark.parametrize("filters, expected_positions", [
    ({"minPrice": 10}, [1, 3]),
    ({"maxPrice": 20}, [1, 2]),
    ({"minPrice": 5, "maxPrice": 20}, [1, 2]),
    ({"minPrice": 0}, [1, 2, 3]),
    ({"maxPrice": 0}, []),
    ({"minPrice": 1299, "maxPrice": 1299}, [3]),
])
def test_price_filter_bounds_and_unparseable(shaper, products, filters, expected_positions):
    shaped = shaper.shape_results(products, SearchFilters(**filters))
    assert [p.position for p in shaped] == expected_positions

def test_sort_price_low_puts_unparseable_last(shaper, products):
    shaped = shaper.shape_results(products, SearchFilters(sortBy=SortOption.PRICE_LOW))

    assert [p.position for p in shaped] == [2, 1, 3, 4]
    prices = [parse_price(p.price) for p in shaped if parse_price(p.price) is not None]
    assert all(a <= b for a, b in zip(prices, prices[1:]))

def test_sort_price_high_puts_unparseable_last(shaper, products):
    shaped = shaper.shape_results(products, SearchFilters(sortBy="price-high"))
    assert [p.position for p in shaped] == [3, 1, 2, 4]

def test_sort_rating_treats_missing_as_zero(shaper, products):
    shaped = shaper.shape_results(products, SearchFilters(sortBy="rating"))
    assert [p.rating for p in shaped] == [4.8, 4.5, 3.2, None]

def test_sort_is_stable_for_ties(shaper):
    tied = [
        make_product(5, price="$10.00", rating=4.0),
        make_product(2, price="$10.00", rating=4.0),
        make_product(9, price="$10.00", rating=4.0),
    ]
    for sort_by in ("price-low", "price-high", "rating"):
        shaped = shaper.shape_results(tied, SearchFilters(sortBy=sort_by))
        assert [p.position for p in shaped] == [5, 2, 9]

def test_min_rating_and_rating_sort_scenario(shaper):
    """Ratings [4.8, 3.2, 4.5, None] with minRating=4 sorted by rating leave [4.8, 4.5]."""
    result_set = [
        make_product(1, rating=4.8),
        make_product(2, rating=3.2),
        make_product(3, rating=4.5),
        make_product(4, rating=None),
    ]

    shaped = shaper.shape_results(result_set, SearchFilters(minRating=4, sortBy="rating"))

    assert [p.rating for p in shaped] == [4.8, 4.5]

def test_shaping_is_idempotent(shaper, products):
    filters = SearchFilters(minRating=3, sources=["Amazon", "Best Buy"], sortBy="price-low", maxPrice=2000)
    first = shaper.shape_results(products, filters)
    second = shaper.shape_results(products, filters)
    assert first == second
    assert shaper.shape_results(first, filters) == first

def test_stats_use_unfiltered_set(shaper):
    result_set = [
        make_product(1, price="$10.00", rating=4.0, source="Amazon"),
        make_product(2, price="$20.00", rating=None, source="eBay"),
        make_product(3, price="$30.00", rating=5.0, source="Amazon"),
    ]

    stats = shaper.calculate_stats(result_set)

    assert stats.total_products == 3
    assert stats.unique_sources == 2
    assert stats.avg_price == "20.00"
    assert stats.price_range == "$10.00 - $30.00"
    assert stats.avg_rating == "4.5"

def test_stats_skip_unparseable_prices(shaper, products):
    stats = shaper.calculate_stats(products)

    assert stats.total_products == 4
    assert stats.unique_sources == 3
    assert stats.price_range == "$5.49 - $1299.00"
    assert stats.avg_price == f"{(1299.0 + 19.99 + 5.49) / 3:.2f}"
    assert stats.avg_rating == f"{(4.5 + 4.8 + 3.2) / 3:.1f}"

def test_stats_without_prices_or_ratings(shaper):
    stats = shaper.calculate_stats([make_product(1, price="N/A"), make_product(2, price="")])

    assert stats.total_products == 2
    assert stats.avg_price is None
    assert stats.price_range is None
    assert stats.avg_rating is None

def test_stats_for_empty_result_set(shaper):
    assert shaper.calculate_stats([]) is None

def test_available_sources_first_seen_order(products):
    assert available_sources(products) == ["Best Buy", "Amazon", "Walmart"]
