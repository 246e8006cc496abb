"""Configuration management."""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Application configuration."""
    
    # Open Library
    OPENLIBRARY_SEARCH_URL = os.getenv("OPENLIBRARY_SEARCH_URL", "https://openlibrary.org/search.json")
    OPENLIBRARY_COVERS_URL = os.getenv(
        "OPENLIBRARY_COVERS_URL",
        "https://covers.openlibrary.org/b/id/{cover_id}-M.jpg"
    )
    PLACEHOLDER_COVER = os.getenv("PLACEHOLDER_COVER", "/api/placeholder/180/280")
    CACHE_BUST = os.getenv("CACHE_BUST", "1") not in ("0", "false", "False", "")
    
    # Defaults
    DEFAULT_TIMEOUT = int(os.getenv("DEFAULT_TIMEOUT", "10"))
    RESULT_LIMIT = int(os.getenv("RESULT_LIMIT", "12"))
    DEBOUNCE_SECONDS = float(os.getenv("DEBOUNCE_SECONDS", "0.3"))
    
    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    
    def cover_url(self, cover_id) -> str:
        """Build the medium-size cover URL for an Open Library cover id."""
        if not cover_id:
            return self.PLACEHOLDER_COVER
        return self.OPENLIBRARY_COVERS_URL.format(cover_id=cover_id)
