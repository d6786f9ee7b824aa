from typing import Dict, Optional
from urllib.parse import quote
import requests
from pydantic import ValidationError

from .constants import (
    PRODUCT_ID_REQUIRED_ERROR,
    PRODUCT_PATH,
    QUERY_REQUIRED_ERROR,
    SEARCH_PATH,
)
from .exceptions import InvalidInputError, UpstreamError, UpstreamSchemaError
from .models import ProductDetails, SearchResponse
from .utils.config import Config
from .utils.logger import get_logger

class ShoppingApiClient:
    """Thin client for the third-party shopping API.

    Each public call performs exactly one HTTP request and returns the decoded
    JSON body as-is. There is no retry; callers decide whether to try again.
    """

    def __init__(self, config: Optional[Config] = None, session: Optional[requests.Session] = None):
        self.config = config or Config()
        self.session = session or requests.Session()
        self.logger = get_logger(__name__)

    def _headers(self) -> Dict[str, str]:
        return {
            'X-RapidAPI-Key': self.config.RAPIDAPI_KEY,
            'X-RapidAPI-Host': self.config.RAPIDAPI_HOST,
        }

    def _request(self, method: str, path: str, **kwargs) -> Dict:
        url = f"{self.config.base_url}{path}"
        self.logger.info(f"Calling shopping API: {method} {url}")
        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(),
                timeout=self.config.REQUEST_TIMEOUT,
                **kwargs
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise UpstreamError(f"API call failed: {status}", status_code=status) from e
        except requests.RequestException as e:
            raise UpstreamError(f"API call failed: {e.__class__.__name__}") from e

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError("API returned invalid JSON", status_code=response.status_code) from e

    def search_products(self, query: str, country: Optional[str] = None) -> Dict:
        """Run a shopping search; the body is form-encoded like a browser form post."""
        query = (query or '').strip()
        if not query:
            raise InvalidInputError(QUERY_REQUIRED_ERROR)
        country = (country or '').strip() or self.config.DEFAULT_COUNTRY

        data = self._request('POST', SEARCH_PATH, data={'query': query, 'country': country})
        products = data.get('products') if isinstance(data, dict) else None
        self.logger.info(f"Search for '{query}' ({country}) returned {len(products or [])} products")
        return data

    def get_product_details(self, product_id: str, country: Optional[str] = None) -> Dict:
        """Fetch the detail record (reviews, sellers, images) for one product."""
        product_id = (product_id or '').strip()
        if not product_id:
            raise InvalidInputError(PRODUCT_ID_REQUIRED_ERROR)
        country = (country or '').strip() or self.config.DEFAULT_COUNTRY

        path = PRODUCT_PATH.format(product_id=quote(product_id, safe=''))
        return self._request('GET', path, params={'country': country})

    def close(self) -> None:
        self.session.close()

def parse_search_response(data) -> SearchResponse:
    """Validate a raw search payload, reporting shape mismatches as upstream errors."""
    try:
        return SearchResponse.model_validate(data)
    except ValidationError as e:
        raise UpstreamSchemaError(f"Unexpected search response shape: {e.error_count()} error(s)") from e

def parse_product_details(data) -> ProductDetails:
    """Validate a raw product detail payload, reporting shape mismatches as upstream errors."""
    try:
        return ProductDetails.model_validate(data)
    except ValidationError as e:
        raise UpstreamSchemaError(f"Unexpected product details shape: {e.error_count()} error(s)") from e
