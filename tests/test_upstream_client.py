import pytest
import requests
from unittest.mock import MagicMock

from product_search.exceptions import InvalidInputError, UpstreamError, UpstreamSchemaError
from product_search.upstream_client import ShoppingApiClient, parse_product_details, parse_search_response

@pytest.fixture
def config():
    config = MagicMock()
    config.RAPIDAPI_KEY = "secret-key"
    config.RAPIDAPI_HOST = "product-search-api.p.rapidapi.com"
    config.REQUEST_TIMEOUT = None
    config.DEFAULT_COUNTRY = "us"
    config.base_url = "https://product-search-api.p.rapidapi.com"
    return config

@pytest.fixture
def http_session():
    session = MagicMock(spec=requests.Session)
    response = MagicMock()
    response.status_code = 200
    response.raise_for_status.return_value = None
    response.json.return_value = {"products": []}
    session.request.return_value = response
    return session

@pytest.fixture
def api_client(config, http_session):
    return ShoppingApiClient(config=config, session=http_session)

def test_search_posts_form_data_with_api_headers(api_client, http_session):
    result = api_client.search_products("iPhone 15", "us")

    assert result == {"products": []}
    http_session.request.assert_called_once_with(
        'POST',
        "https://product-search-api.p.rapidapi.com/shopping",
        headers={
            'X-RapidAPI-Key': "secret-key",
            'X-RapidAPI-Host': "product-search-api.p.rapidapi.com",
        },
        timeout=None,
        data={'query': "iPhone 15", 'country': "us"},
    )

def test_search_trims_query_and_defaults_country(api_client, http_session):
    api_client.search_products("  laptop  ", "")

    _, kwargs = http_session.request.call_args
    assert kwargs["data"] == {'query': "laptop", 'country': "us"}

@pytest.mark.parametrize("query", ["", "   ", None])
def test_search_rejects_empty_query_without_calling_upstream(api_client, http_session, query):
    with pytest.raises(InvalidInputError, match="Query parameter is required"):
        api_client.search_products(query)
    http_session.request.assert_not_called()

def test_product_details_get_with_quoted_id_and_country(api_client, http_session):
    http_session.request.return_value.json.return_value = {"title": "Widget"}

    result = api_client.get_product_details("abc/123 x", country="de")

    assert result == {"title": "Widget"}
    http_session.request.assert_called_once_with(
        'GET',
        "https://product-search-api.p.rapidapi.com/products/abc%2F123%20x",
        headers={
            'X-RapidAPI-Key': "secret-key",
            'X-RapidAPI-Host': "product-search-api.p.rapidapi.com",
        },
        timeout=None,
        params={'country': "de"},
    )

@pytest.mark.parametrize("product_id", ["", "  ", None])
def test_product_details_rejects_empty_id(api_client, http_session, product_id):
    with pytest.raises(InvalidInputError, match="Product ID is required"):
        api_client.get_product_details(product_id)
    http_session.request.assert_not_called()

def test_timeout_setting_is_passed_through(api_client, config, http_session):
    config.REQUEST_TIMEOUT = 12.5

    api_client.search_products("tv")

    _, kwargs = http_session.request.call_args
    assert kwargs["timeout"] == 12.5

def test_non_2xx_status_becomes_upstream_error(api_client, http_session):
    error_response = MagicMock()
    error_response.status_code = 429
    http_session.request.return_value.raise_for_status.side_effect = requests.HTTPError(response=error_response)

    with pytest.raises(UpstreamError) as exc_info:
        api_client.search_products("tv")

    assert exc_info.value.status_code == 429
    assert not isinstance(exc_info.value, InvalidInputError)

def test_transport_failure_becomes_upstream_error(api_client, http_session):
    http_session.request.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(UpstreamError) as exc_info:
        api_client.get_product_details("p-1")

    assert exc_info.value.status_code is None

def test_invalid_json_becomes_upstream_error(api_client, http_session):
    http_session.request.return_value.json.side_effect = ValueError("Expecting value")

    with pytest.raises(UpstreamError, match="invalid JSON"):
        api_client.search_products("tv")

def test_single_attempt_per_call(api_client, http_session):
    http_session.request.side_effect = requests.Timeout()

    with pytest.raises(UpstreamError):
        api_client.search_products("tv")

    assert http_session.request.call_count == 1

def test_parse_search_response_accepts_camel_case_keys():
    response = parse_search_response({
        "products": [{
            "title": "Echo Dot", "source": "Amazon", "link": "https://example.com", "price": "$49.99",
            "imageUrl": "https://example.com/i.jpg", "rating": 4.6, "ratingCount": 10,
            "productId": "e-1", "position": 1,
        }]
    })

    product = response.products[0]
    assert product.product_id == "e-1"
    assert product.image_url == "https://example.com/i.jpg"
    assert product.rating_count == 10

@pytest.mark.parametrize("payload", [
    "not json object",
    {"products": "nope"},
    {"products": [{"title": "no id"}]},
])
def test_parse_search_response_rejects_bad_shapes(payload):
    with pytest.raises(UpstreamSchemaError):
        parse_search_response(payload)

def test_schema_error_is_an_upstream_error():
    with pytest.raises(UpstreamError):
        parse_product_details({"description": "title is missing"})

def test_configured_default_country_is_used(config, http_session):
    config.DEFAULT_COUNTRY = "de"
    api_client = ShoppingApiClient(config=config, session=http_session)

    api_client.search_products("kettle")
    api_client.get_product_details("p-1", country="  ")

    first, second = http_session.request.call_args_list
    assert first.kwargs["data"] == {'query': "kettle", 'country': "de"}
    assert second.kwargs["params"] == {'country': "de"}
