DEFAULT_COUNTRY = "us"

# Countries offered by the search front end, in display order
SUPPORTED_COUNTRIES = {
    "us": ("United States", "🇺🇸"),
    "ca": ("Canada", "🇨🇦"),
    "fr": ("France", "🇫🇷"),
    "de": ("Germany", "🇩🇪"),
    "uk": ("United Kingdom", "🇬🇧"),
    "au": ("Australia", "🇦🇺"),
    "jp": ("Japan", "🇯🇵"),
}

EXAMPLE_SEARCHES = [
    "iPhone 15", "MacBook Pro", "Samsung TV", "AirPods Pro",
    "Nintendo Switch", "iPad Air", "Sony Headphones", "Dell Monitor",
]

# Upstream endpoints, relative to the configured host
SEARCH_PATH = "/shopping"
PRODUCT_PATH = "/products/{product_id}"

# Error bodies returned by the HTTP API
QUERY_REQUIRED_ERROR = "Query parameter is required"
PRODUCT_ID_REQUIRED_ERROR = "Product ID is required"
SEARCH_FAILED_ERROR = "Failed to search products"
DETAILS_FAILED_ERROR = "Failed to fetch product details"

# How much of each list the views show
MAX_SOURCE_CHOICES = 8
MAX_REVIEW_ASPECTS = 6
MAX_THUMBNAILS = 8
MAX_SAMPLE_REVIEWS = 3
