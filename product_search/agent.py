from typing import TypedDict, List, Dict, Optional
from langgraph.graph import StateGraph, END
from product_search.constants import DETAILS_FAILED_ERROR, QUERY_REQUIRED_ERROR, SEARCH_FAILED_ERROR
from product_search.exceptions import InvalidInputError, UpstreamError
from product_search.models import Product, ProductDetails, SearchFilters, SearchStats
from product_search.result_shaper import ResultShaper
from product_search.session import SearchSession
from product_search.upstream_client import ShoppingApiClient, parse_product_details
from product_search.langgraph_nodes import search_upstream, parse_products, summarize_results
from product_search.utils.logger import get_logger

logger = get_logger(__name__)

class SearchState(TypedDict, total=False):
    query: str
    filters: SearchFilters
    client: ShoppingApiClient
    shaper: ResultShaper
    raw_response: Dict
    products: List[Product]
    stats: Optional[SearchStats]

def initialize_client() -> ShoppingApiClient:
    """Create the shopping API client from the environment configuration."""
    return ShoppingApiClient()

def build_search_graph():
    """Compile the search pipeline: upstream call, schema check, summary.

    Filtering and sorting are not part of the graph; the session reshapes the
    stored results whenever the filters change.
    """
    graph = StateGraph(state_schema=SearchState)
    graph.add_node("search_upstream", search_upstream)
    graph.add_node("parse_products", parse_products)
    graph.add_node("summarize_results", summarize_results)

    graph.add_edge("search_upstream", "parse_products")
    graph.add_edge("parse_products", "summarize_results")
    graph.add_edge("summarize_results", END)

    graph.set_entry_point("search_upstream")
    return graph.compile()

def initialize_agent():
    """
    Initializes the shopping API client, the result shaper and the compiled search graph.
    Returns:
        Tuple: client, shaper, compiled_graph_app
    """
    client = initialize_client()
    shaper = ResultShaper()
    return client, shaper, build_search_graph()

def process_search(app, client, shaper, session: SearchSession, query: str) -> bool:
    """
    Runs one search through the graph and stores the outcome in the session.
    Args:
        app: The compiled LangGraph app.
        client: The ShoppingApiClient instance.
        shaper: The ResultShaper instance.
        session: The SearchSession holding query, filters and results.
        query (str): The user's search text.
    Returns:
        bool: True if the results were stored, False if the search failed
        or was superseded by a newer one.
    """
    query = (query or "").strip()
    if not query:
        raise InvalidInputError(QUERY_REQUIRED_ERROR)

    sequence = session.begin_search(query)
    initial_state = {
        "query": query,
        "filters": session.filters,
        "client": client,
        "shaper": shaper,
    }

    try:
        result = app.invoke(initial_state)
    except UpstreamError:
        logger.error(f"Search for '{query}' failed", exc_info=True)
        session.fail_search(sequence, SEARCH_FAILED_ERROR)
        return False
    except Exception:
        session.fail_search(sequence, SEARCH_FAILED_ERROR)
        raise

    stored = session.complete_search(sequence, result.get("products", []), result.get("stats"))
    if not stored:
        logger.info(f"Discarding stale results for '{query}' (search #{sequence})")
    return stored

def load_product_details(client, session: SearchSession) -> Optional[ProductDetails]:
    """Fetch and validate details for the selected product; None if the lookup failed."""
    product = session.selected_product
    if product is None:
        raise InvalidInputError("No product selected")

    try:
        raw = client.get_product_details(product.product_id, country=session.filters.country)
        details = parse_product_details(raw)
    except UpstreamError:
        logger.error(f"Loading details for product {product.product_id} failed", exc_info=True)
        session.error = DETAILS_FAILED_ERROR
        return None

    if session.selected_product is product:
        session.selected_details = details
    return details
