"""Async HTTP client for the Open Library search API."""
import httpx
from typing import Optional, Dict, Any
import logging

from bookrecommend.client import SearchError, build_search_params

logger = logging.getLogger(__name__)


class AsyncOpenLibraryClient:
    """Async client for book searches that can be cancelled mid-flight."""
    
    BASE_URL = "https://openlibrary.org/search.json"
    
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = 10,
        cache_bust: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize async client.
        
        Args:
            base_url: Search endpoint (defaults to the public one)
            timeout: Request timeout
            cache_bust: Send a random "cache" parameter with every request
            transport: Custom transport (httpx.MockTransport in tests)
        """
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout
        self.cache_bust = cache_bust
        
        # Create async HTTP client
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)
    
    async def search(self, query: str, limit: int = 12) -> Dict[str, Any]:
        """
        Search for books asynchronously.
        
        Args:
            query: Combined search string
            limit: Maximum number of docs to return
            
        Returns:
            API response JSON
            
        Raises:
            SearchError: on non-200 status, transport error or bad JSON
        """
        params = build_search_params(query, limit, self.cache_bust)
        
        try:
            logger.info(f"Async request: {query!r} (limit={limit})")
            response = await self.client.get(self.base_url, params=params)
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout searching for {query!r}")
            raise SearchError(f"Timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.warning(f"Async request failed: {e}")
            raise SearchError(f"Request failed: {e}") from e
        
        if response.status_code != 200:
            logger.warning(f"Status {response.status_code} for query: {query!r}")
            raise SearchError(f"Failed to fetch: {response.status_code}", response.status_code)
        
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON in search response: {e}")
            raise SearchError("Invalid JSON in response", response.status_code) from e
        
        if not isinstance(data, dict):
            logger.error(f"Unexpected response shape: {type(data).__name__}")
            raise SearchError("Unexpected response shape", response.status_code)
        
        return data
    
    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
    
    async def __aenter__(self):
        """Async context manager entry."""
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
