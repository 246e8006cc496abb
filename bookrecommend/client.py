"""HTTP client for the Open Library search API."""
import random
import string
import requests
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

_TOKEN_ALPHABET = string.ascii_lowercase + string.digits


class SearchError(Exception):
    """Search request failed: bad status, transport error or unreadable body."""
    
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def cache_token(length: int = 6) -> str:
    """Random base36 token so intermediaries never serve a cached page."""
    return "".join(random.choice(_TOKEN_ALPHABET) for _ in range(length))


def build_search_params(query: str, limit: int, cache_bust: bool = True) -> Dict[str, Any]:
    """
    Build query parameters for search.json.
    
    The query is passed unescaped; the HTTP library encodes it.
    """
    params = {
        "q": query,
        "limit": limit
    }
    
    if cache_bust:
        params["cache"] = cache_token()
    
    return params


class OpenLibraryClient:
    """Blocking client for Open Library search. One request per call, no retries."""
    
    BASE_URL = "https://openlibrary.org/search.json"
    
    def __init__(
        self, 
        base_url: Optional[str] = None,
        timeout: int = 10,
        cache_bust: bool = True,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize Open Library client.
        
        Args:
            base_url: Search endpoint (defaults to the public one)
            timeout: Request timeout in seconds
            cache_bust: Send a random "cache" parameter with every request
            session: Pre-built session (mostly for tests)
        """
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout
        self.cache_bust = cache_bust
        
        # Create session for connection pooling
        self.session = session or requests.Session()
    
    def search(self, query: str, limit: int = 12) -> Dict[str, Any]:
        """
        Search for books.
        
        Args:
            query: Combined search string
            limit: Maximum number of docs to return
            
        Returns:
            API response JSON
            
        Raises:
            SearchError: on non-200 status, timeout, connection error or bad JSON
        """
        params = build_search_params(query, limit, self.cache_bust)
        
        try:
            logger.info(f"Search request: {query!r} (limit={limit})")
            response = self.session.get(
                self.base_url,
                params=params,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            logger.warning(f"Timeout searching for {query!r}")
            raise SearchError(f"Timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"Connection error searching for {query!r}: {e}")
            raise SearchError(f"Request failed: {e}") from e
        
        if response.status_code != 200:
            logger.error(f"Search failed ({response.status_code}) for query: {query!r}")
            raise SearchError(f"Failed to fetch: {response.status_code}", response.status_code)
        
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON in search response: {e}")
            raise SearchError("Invalid JSON in response", response.status_code) from e
        
        if not isinstance(data, dict):
            logger.error(f"Unexpected response shape: {type(data).__name__}")
            raise SearchError("Unexpected response shape", response.status_code)
        
        docs = data.get("docs")
        logger.info(f"Success: {len(docs) if isinstance(docs, list) else 0} docs")
        return data
    
    def close(self):
        """Close the session."""
        self.session.close()
    
    def __enter__(self):
        """Context manager entry."""
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
