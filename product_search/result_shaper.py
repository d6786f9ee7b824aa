import re
from typing import List, Optional, Sequence
from .models import Product, SearchFilters, SearchStats, SortOption
from .utils.logger import get_logger

_NON_NUMERIC = re.compile(r'[^0-9.]')
_LEADING_NUMBER = re.compile(r'\d+(?:\.\d*)?|\.\d+')

def parse_price(value: Optional[str]) -> Optional[float]:
    """Extract a numeric value from a free-text price such as "$1,299.00".

    Everything that is not a digit or a decimal point is discarded, then the
    leading number is read. Returns None when nothing numeric remains.
    """
    if not value:
        return None
    match = _LEADING_NUMBER.match(_NON_NUMERIC.sub('', str(value)))
    if not match:
        return None
    return float(match.group())

def available_sources(products: Sequence[Product]) -> List[str]:
    """Distinct vendor names, in the order they first appear."""
    return list(dict.fromkeys(p.source for p in products))

class ResultShaper:
    """Filters, sorts and summarizes a search result set.

    Every method is pure: the input list is never mutated and the same
    products with the same filters always produce the same output.
    """

    def __init__(self):
        self.logger = get_logger(__name__)

    def shape_results(self, products: Sequence[Product], filters: Optional[SearchFilters] = None) -> List[Product]:
        """Apply the rating, source and price filters, then the requested sort."""
        filters = filters or SearchFilters()
        shaped = list(products)

        if filters.min_rating:
            shaped = [p for p in shaped if self._meets_min_rating(p, filters.min_rating)]

        if filters.sources:
            allowed = set(filters.sources)
            shaped = [p for p in shaped if p.source in allowed]

        if filters.min_price is not None or filters.max_price is not None:
            shaped = [p for p in shaped if self._within_price_range(p, filters.min_price, filters.max_price)]

        shaped = self._sort(shaped, filters.sort_by)
        self.logger.debug(f"Shaped {len(products)} products down to {len(shaped)} (sort: {filters.sort_by.value})")
        return shaped

    def _meets_min_rating(self, product: Product, min_rating: int) -> bool:
        return product.rating is not None and product.rating >= min_rating

    def _within_price_range(self, product: Product, min_price: Optional[float], max_price: Optional[float]) -> bool:
        price = parse_price(product.price)
        if price is None:
            return False
        lower = min_price if min_price is not None else 0.0
        upper = max_price if max_price is not None else float('inf')
        return lower <= price <= upper

    def _sort(self, products: List[Product], sort_by: Optional[SortOption]) -> List[Product]:
        # sorted() is stable, so ties keep their upstream order.
        # Unparseable prices go last in both price orders.
        if sort_by == SortOption.PRICE_LOW:
            def key(p):
                price = parse_price(p.price)
                return (price is None, price if price is not None else 0.0)
        elif sort_by == SortOption.PRICE_HIGH:
            def key(p):
                price = parse_price(p.price)
                return (price is None, -price if price is not None else 0.0)
        elif sort_by == SortOption.RATING:
            def key(p):
                return -(p.rating or 0)
        else:
            def key(p):
                return p.position
        return sorted(products, key=key)

    def calculate_stats(self, products: Sequence[Product]) -> Optional[SearchStats]:
        """Summarize the full, unfiltered result set. Returns None for an empty set."""
        if not products:
            return None

        prices = [price for price in (parse_price(p.price) for p in products) if price is not None]
        ratings = [p.rating for p in products if p.rating]

        avg_price = price_range = avg_rating = None
        if prices:
            avg_price = f"{sum(prices) / len(prices):.2f}"
            price_range = f"${min(prices):.2f} - ${max(prices):.2f}"
        if ratings:
            avg_rating = f"{sum(ratings) / len(ratings):.1f}"

        return SearchStats(
            total_products=len(products),
            unique_sources=len(available_sources(products)),
            avg_price=avg_price,
            price_range=price_range,
            avg_rating=avg_rating,
        )
