from flask import Flask, request, jsonify
from flask_cors import CORS
from product_search.agent import initialize_client
from product_search.constants import (
    DETAILS_FAILED_ERROR,
    PRODUCT_ID_REQUIRED_ERROR,
    QUERY_REQUIRED_ERROR,
    SEARCH_FAILED_ERROR,
)
from product_search.exceptions import InvalidInputError, UpstreamError
from product_search.upstream_client import parse_product_details, parse_search_response
from product_search.utils.logger import get_logger

app = Flask(__name__)

# Initialize CORS, allowing all origins for now.
# For production, specify origins: CORS(app, origins=["http://localhost:3000"])
CORS(app)

logger = get_logger(__name__)

# The client is created once when the app starts and shared by every request;
# it holds no per-request state.
api_client = initialize_client()
default_country = api_client.config.DEFAULT_COUNTRY

def _country_param() -> str:
    return (request.args.get('country') or '').strip() or default_country

@app.route('/', methods=['GET'])
def home():
    return jsonify({"message": "Backend API is running"})

@app.route('/api/search', methods=['GET'])
def api_search():
    query = (request.args.get('query') or '').strip()
    if not query:
        return jsonify({"error": QUERY_REQUIRED_ERROR}), 400

    country = _country_param()
    try:
        data = api_client.search_products(query, country)
        parse_search_response(data)
    except InvalidInputError:
        return jsonify({"error": QUERY_REQUIRED_ERROR}), 400
    except UpstreamError:
        logger.error(f"Search API error for query '{query}' ({country})", exc_info=True)
        return jsonify({"error": SEARCH_FAILED_ERROR}), 500

    # Pass the provider payload through unmodified; shaping happens client-side
    return jsonify(data)

@app.route('/api/product/', defaults={'product_id': ''}, methods=['GET'])
@app.route('/api/product/<path:product_id>', methods=['GET'])
def api_product_details(product_id):
    # Ids may contain "/" (sent as %2F), so the whole remaining path is the id
    product_id = (product_id or '').strip()
    if not product_id:
        return jsonify({"error": PRODUCT_ID_REQUIRED_ERROR}), 400

    country = _country_param()
    try:
        data = api_client.get_product_details(product_id, country)
        parse_product_details(data)
    except InvalidInputError:
        return jsonify({"error": PRODUCT_ID_REQUIRED_ERROR}), 400
    except UpstreamError:
        logger.error(f"Product details API error for '{product_id}' ({country})", exc_info=True)
        return jsonify({"error": DETAILS_FAILED_ERROR}), 500

    return jsonify(data)

if __name__ == "__main__":
    # Note: For development, Flask's built-in server is fine.
    # For production, use a proper WSGI server like Gunicorn or uWSGI.
    app.run(debug=True, host='0.0.0.0', port=5001)
