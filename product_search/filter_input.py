import shlex
from typing import Any, Dict

# Accepted spellings for each filter field
_KEY_NAMES = {
    "min": "min_price", "min_price": "min_price", "minprice": "min_price",
    "max": "max_price", "max_price": "max_price", "maxprice": "max_price",
    "rating": "min_rating", "min_rating": "min_rating", "minrating": "min_rating",
    "source": "sources", "sources": "sources",
    "sort": "sort_by", "sort_by": "sort_by", "sortby": "sort_by",
    "country": "country",
}

_CLEAR_VALUES = {"", "none", "any", "all"}

# Labels the search form uses for the sort options
_SORT_LABELS = {"relevance": "position", "price": "price-low"}

def parse_filter_input(text: str) -> Dict[str, Any]:
    """Turn `key=value` tokens into filter changes.

    Example: `min=10 max=250 rating=4 sources="Best Buy,Walmart" sort=price-low`.
    A value of `none` (or `any`, `all`, empty) clears that filter. Values are
    passed through as typed strings; SearchFilters validates them.
    """
    changes: Dict[str, Any] = {}
    try:
        tokens = shlex.split(text)
    except ValueError as e:
        raise ValueError(f"Could not read filters: {e}") from e

    for token in tokens:
        key, sep, value = token.partition("=")
        if not sep:
            raise ValueError(f"Expected key=value, got '{token}'")
        name = _KEY_NAMES.get(key.strip().lower().replace("-", "_"))
        if not name:
            raise ValueError(f"Unknown filter '{key}'. Use min, max, rating, sources, sort or country.")

        value = value.strip()
        if value.lower() in _CLEAR_VALUES:
            changes[name] = [] if name == "sources" else None
        elif name == "sources":
            changes[name] = [s.strip() for s in value.split(",") if s.strip()]
        elif name in ("min_price", "max_price"):
            changes[name] = value.lstrip("$").replace(",", "")
        elif name == "sort_by":
            changes[name] = _SORT_LABELS.get(value.lower(), value.lower())
        else:
            changes[name] = value
    return changes
