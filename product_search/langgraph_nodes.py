from .upstream_client import parse_search_response

def search_upstream(state: dict) -> dict:
    client = state["client"]
    filters = state["filters"]
    raw_response = client.search_products(
        query=state["query"],
        country=filters.country,
    )
    return {
        **state,
        "raw_response": raw_response
    }


def parse_products(state: dict) -> dict:
    response = parse_search_response(state["raw_response"])
    return {
        **state,
        "products": response.products
    }

def summarize_results(state: dict) -> dict:
    """Compute the summary card from the full result set, not the filtered view."""
    shaper = state["shaper"]
    state["stats"] = shaper.calculate_stats(state["products"])
    return state
