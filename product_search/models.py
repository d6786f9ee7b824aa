from enum import Enum
from typing import List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from .constants import DEFAULT_COUNTRY

class UpstreamModel(BaseModel):
    """Base for records parsed from the shopping API; unknown keys are ignored."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

class SortOption(str, Enum):
    """Enumeration of available sorting options for product search results."""
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    RATING = "rating"
    POSITION = "position"

class Product(UpstreamModel):
    """A single product as returned by the upstream search."""
    title: str
    source: str
    link: str
    price: str
    image_url: str = Field("", alias="imageUrl")
    rating: Optional[float] = Field(None, ge=0, le=5)
    rating_count: Optional[int] = Field(None, alias="ratingCount", ge=0)
    product_id: str = Field(alias="productId")
    position: int

class SearchResponse(UpstreamModel):
    products: List[Product] = Field(default_factory=list)

    @field_validator("products", mode="before")
    @classmethod
    def _null_products(cls, value):
        return [] if value is None else value

    @model_validator(mode="after")
    def _unique_product_ids(self) -> "SearchResponse":
        seen = set()
        for product in self.products:
            if product.product_id in seen:
                raise ValueError(f"duplicate productId in result set: {product.product_id}")
            seen.add(product.product_id)
        return self

class SearchFilters(BaseModel):
    """Filters and sort order applied to a search result set."""
    model_config = ConfigDict(populate_by_name=True)

    min_price: Optional[float] = Field(None, alias="minPrice", ge=0)
    max_price: Optional[float] = Field(None, alias="maxPrice", ge=0)
    min_rating: Optional[int] = Field(None, alias="minRating", ge=1, le=5)
    sources: List[str] = Field(default_factory=list)
    sort_by: SortOption = Field(SortOption.POSITION, alias="sortBy")
    country: str = DEFAULT_COUNTRY

    @field_validator("sources")
    @classmethod
    def _dedupe_sources(cls, sources: List[str]) -> List[str]:
        return list(dict.fromkeys(s for s in sources if s))

    @field_validator("sort_by", mode="before")
    @classmethod
    def _default_sort(cls, value):
        return SortOption.POSITION if value in (None, "") else value

    @field_validator("country", mode="before")
    @classmethod
    def _normalize_country(cls, value):
        if value is None:
            return DEFAULT_COUNTRY
        return str(value).strip().lower() or DEFAULT_COUNTRY

    @model_validator(mode="after")
    def _check_price_bounds(self) -> "SearchFilters":
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("minPrice must be less than or equal to maxPrice")
        return self

class SearchStats(BaseModel):
    """Summary of a full (unfiltered) result set."""
    total_products: int
    unique_sources: int
    avg_price: Optional[str] = None
    price_range: Optional[str] = None
    avg_rating: Optional[str] = None

# --- Product details ---

class ReviewAspect(UpstreamModel):
    aspect: str
    mention_count: int = 0
    sentiment_percentage: float = 0
    sentiment: Literal["positive", "negative"]

class SampleReview(UpstreamModel):
    text: str = ""
    full_text: str = ""
    rating: float = 0
    date: str = ""
    reviewer: str = ""
    source: str = ""

class StarDistribution(UpstreamModel):
    five_star: str = Field("0", alias="5_star")
    four_star: str = Field("0", alias="4_star")
    three_star: str = Field("0", alias="3_star")
    two_star: str = Field("0", alias="2_star")
    one_star: str = Field("0", alias="1_star")

    def as_pairs(self) -> List[Tuple[int, str]]:
        """Return (stars, count) pairs from 5 down to 1."""
        return [
            (5, self.five_star),
            (4, self.four_star),
            (3, self.three_star),
            (2, self.two_star),
            (1, self.one_star),
        ]

class Reviews(UpstreamModel):
    overall_rating: float = 0
    total_reviews: str = "0"
    star_distribution: StarDistribution = Field(default_factory=StarDistribution)
    aspects: List[ReviewAspect] = Field(default_factory=list)
    sample_reviews: List[SampleReview] = Field(default_factory=list)

class Seller(UpstreamModel):
    seller_name: str
    seller_url: str = ""
    details: str = ""
    item_price: str = ""
    total_price: str = ""
    condition: Optional[str] = None
    shipping: Optional[str] = None

class BuyingOptions(UpstreamModel):
    sellers: List[Seller] = Field(default_factory=list)

class ProductImage(UpstreamModel):
    url: str
    type: str = ""
    image_number: Optional[int] = None

class ImageOverlay(UpstreamModel):
    overlay_title: str = ""
    overlay_price: str = ""
    overlay_merchant: str = ""
    overlay_rating: Optional[float] = None
    overlay_review_count: str = ""

class Images(UpstreamModel):
    main_images: List[ProductImage] = Field(default_factory=list)
    thumbnails: List[ProductImage] = Field(default_factory=list)
    product_info: ImageOverlay = Field(default_factory=ImageOverlay)

class ProductDetails(UpstreamModel):
    """The detail record fetched on demand for one productId."""
    id: str = ""
    country: str = DEFAULT_COUNTRY
    title: str
    description: str = ""
    reviews: Reviews = Field(default_factory=Reviews)
    buying_options: BuyingOptions = Field(default_factory=BuyingOptions)
    images: Images = Field(default_factory=Images)
