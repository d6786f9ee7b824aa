import os
from typing import Optional
from dotenv import load_dotenv
from ..constants import DEFAULT_COUNTRY, SUPPORTED_COUNTRIES

class Config:
    def __init__(self):
        # Load environment variables from .env file, overriding existing env vars
        load_dotenv(override=True)

        self.RAPIDAPI_KEY = os.getenv('RAPIDAPI_KEY')
        if not self.RAPIDAPI_KEY:
            raise ValueError("RAPIDAPI_KEY environment variable is not set")

        self.RAPIDAPI_HOST = os.getenv('RAPIDAPI_HOST', 'product-search-api.p.rapidapi.com').strip()
        self.DEFAULT_COUNTRY = os.getenv('DEFAULT_COUNTRY', DEFAULT_COUNTRY).strip().lower()

        # Unset means no timeout, the transport default
        raw_timeout = os.getenv('REQUEST_TIMEOUT', '').strip()
        self.REQUEST_TIMEOUT: Optional[float] = float(raw_timeout) if raw_timeout else None

        self._validate_config()

    @property
    def base_url(self) -> str:
        return f"https://{self.RAPIDAPI_HOST}"

    def _validate_config(self) -> None:
        """Validate the configuration values."""
        if not self.RAPIDAPI_HOST:
            raise ValueError("RAPIDAPI_HOST must not be empty")

        if self.RAPIDAPI_HOST.startswith(('http://', 'https://')) or '/' in self.RAPIDAPI_HOST:
            raise ValueError("RAPIDAPI_HOST must be a bare host name such as product-search-api.p.rapidapi.com")

        if self.DEFAULT_COUNTRY not in SUPPORTED_COUNTRIES:
            raise ValueError(f"DEFAULT_COUNTRY must be one of: {', '.join(SUPPORTED_COUNTRIES)}")

        if self.REQUEST_TIMEOUT is not None and self.REQUEST_TIMEOUT <= 0:
            raise ValueError("REQUEST_TIMEOUT must be greater than 0")
