from typing import Optional

class ProductSearchError(Exception):
    """Base class for errors raised by the product search package."""

class InvalidInputError(ProductSearchError, ValueError):
    """A required request parameter is missing or empty."""

class UpstreamError(ProductSearchError):
    """The shopping API could not be reached or answered with a failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

class UpstreamSchemaError(UpstreamError):
    """The shopping API answered, but the payload does not have the expected shape."""
