from dataclasses import dataclass, field
from typing import List, Optional
from .constants import DEFAULT_COUNTRY, MAX_SOURCE_CHOICES, SUPPORTED_COUNTRIES
from .models import Product, ProductDetails, SearchFilters, SearchStats, SortOption
from .result_shaper import ResultShaper, available_sources

NO_RESULTS_MESSAGE = 'No products found. Try a different search term like "iPhone", "laptop", or "headphones".'
NO_MATCHES_MESSAGE = "No products match your current filters. Try adjusting your filter criteria."

_FILTER_ALIASES = {
    "minPrice": "min_price",
    "maxPrice": "max_price",
    "minRating": "min_rating",
    "sortBy": "sort_by",
}

@dataclass
class SearchSession:
    """State of one search view: query, filters, results and the selected product.

    Searches are tagged with an increasing sequence number. Only the response
    for the most recent search is accepted; anything older is discarded.
    """
    query: str = ""
    filters: SearchFilters = field(default_factory=SearchFilters)
    products: List[Product] = field(default_factory=list)
    loading: bool = False
    has_searched: bool = False
    error: Optional[str] = None
    selected_product: Optional[Product] = None
    selected_details: Optional[ProductDetails] = None
    stats: Optional[SearchStats] = None
    default_country: str = DEFAULT_COUNTRY
    shaper: ResultShaper = field(default_factory=ResultShaper, repr=False)
    _sequence: int = field(default=0, repr=False)

    def __post_init__(self):
        if "country" not in self.filters.model_fields_set:
            self.filters = self.filters.model_copy(update={"country": self.default_country})

    @property
    def latest_sequence(self) -> int:
        return self._sequence

    def begin_search(self, query: str) -> int:
        """Mark a new search as in flight and return its sequence number."""
        self._sequence += 1
        self.query = query
        self.loading = True
        self.has_searched = True
        self.error = None
        return self._sequence

    def complete_search(self, sequence: int, products: List[Product], stats: Optional[SearchStats] = None) -> bool:
        """Store the results of a search. Returns False if a newer search superseded it.

        Stats describe the full result set; they are computed here when not supplied.
        """
        if sequence != self._sequence:
            return False
        self.products = list(products)
        self.stats = stats if stats is not None else self.shaper.calculate_stats(self.products)
        self.selected_product = None
        self.selected_details = None
        self.loading = False
        return True

    def fail_search(self, sequence: int, message: str) -> bool:
        if sequence != self._sequence:
            return False
        self.products = []
        self.stats = None
        self.error = message
        self.loading = False
        return True

    def update_filters(self, **changes) -> SearchFilters:
        """Replace the filters with a copy carrying the given changes (snake_case or camelCase keys)."""
        merged = self.filters.model_dump()
        for key, value in changes.items():
            name = _FILTER_ALIASES.get(key, key)
            if name not in merged:
                raise ValueError(f"Unknown filter: {key}")
            merged[name] = value
        if not (merged.get("country") or "").strip():
            merged["country"] = self.default_country
        self.filters = SearchFilters.model_validate(merged)
        return self.filters

    def clear_filters(self) -> SearchFilters:
        self.filters = SearchFilters(country=self.default_country)
        return self.filters

    @property
    def visible_products(self) -> List[Product]:
        return self.shaper.shape_results(self.products, self.filters)

    @property
    def available_sources(self) -> List[str]:
        return available_sources(self.products)

    @property
    def source_choices(self) -> List[str]:
        return self.available_sources[:MAX_SOURCE_CHOICES]

    def select_product(self, index: int) -> Product:
        """Select a product by its 1-based index in the visible list."""
        visible = self.visible_products
        if index < 1 or index > len(visible):
            raise IndexError(f"No product #{index}; choose between 1 and {len(visible)}")
        self.selected_product = visible[index - 1]
        self.selected_details = None
        return self.selected_product

    def close_product(self) -> None:
        self.selected_product = None
        self.selected_details = None

    def has_active_filters(self) -> bool:
        f = self.filters
        return any([
            f.min_price is not None,
            f.max_price is not None,
            f.min_rating is not None,
            bool(f.sources),
            f.sort_by != SortOption.POSITION,
            f.country != self.default_country,
        ])

    def active_filter_labels(self) -> List[str]:
        f = self.filters
        labels = []
        if f.min_price is not None or f.max_price is not None:
            low = f"${f.min_price:.2f}" if f.min_price is not None else "$0.00"
            high = f"${f.max_price:.2f}" if f.max_price is not None else "any"
            labels.append(f"Price: {low} - {high}")
        if f.min_rating:
            labels.append(f"Rating: {f.min_rating}★+")
        if f.country != self.default_country:
            label, flag = SUPPORTED_COUNTRIES.get(f.country, (f.country.upper(), ""))
            labels.append(f"{flag} {label}".strip())
        labels.extend(f"Source: {source}" for source in f.sources)
        if f.sort_by != SortOption.POSITION:
            labels.append(f"Sort: {f.sort_by.value}")
        return labels

    def results_heading(self) -> Optional[str]:
        visible = self.visible_products
        if not visible:
            return None
        if len(visible) != len(self.products):
            return f"Filtered Results ({len(visible)} of {len(self.products)})"
        return f"Search Results ({len(visible)} products)"

    def empty_message(self) -> Optional[str]:
        if not self.has_searched or self.loading:
            return None
        if not self.products:
            return NO_RESULTS_MESSAGE
        if not self.visible_products:
            return NO_MATCHES_MESSAGE
        return None