"""Parse and normalize Open Library search responses."""
import logging
import random
from typing import Dict, Any, List, Optional

from bookrecommend.config import Config
from bookrecommend.models import BookSummary

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_AUTHOR = "Unknown Author"
UNKNOWN_YEAR = "Unknown"
NO_DESCRIPTION = "No description available."
MAX_GENRES = 3
MIN_RATING = 3.0
MAX_RATING = 5.0


def _first(value: Any) -> Optional[str]:
    """Return the first entry of a list field (some docs carry a bare string)."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, list) and value:
        return value[0] or None
    return None


def synthesize_rating(rng: Optional[random.Random] = None) -> float:
    """
    Make up a display rating, since search docs carry none.
    
    Args:
        rng: Random generator (module-level one when omitted)
        
    Returns:
        Rating in [3.0, 5.0] rounded to one decimal
    """
    rng = rng or random
    return round(rng.uniform(MIN_RATING, MAX_RATING), 1)


def parse_book(
    doc: Dict[str, Any],
    rng: Optional[random.Random] = None,
    config: Optional[Config] = None
) -> Optional[BookSummary]:
    """
    Parse a single doc from the Open Library search API.
    
    Args:
        doc: Single entry of the response's "docs" list
        rng: Random generator for the synthesized rating
        config: Configuration holding the cover URL template
        
    Returns:
        BookSummary or None if the doc is not an object or has no key
    """
    if not isinstance(doc, dict):
        logger.debug(f"Dropping malformed doc: {doc!r}")
        return None
    
    config = config or Config()
    
    book_id = doc.get("key")
    if not book_id:
        logger.debug(f"Dropping doc without key: {doc.get('title')!r}")
        return None
    
    subjects = doc.get("subject_facet")
    if not isinstance(subjects, list):
        subjects = []
    
    return BookSummary(
        id=book_id,
        title=doc.get("title") or UNKNOWN_TITLE,
        author=_first(doc.get("author_name")) or UNKNOWN_AUTHOR,
        cover_url=config.cover_url(doc.get("cover_i")),
        year=doc.get("first_publish_year") or UNKNOWN_YEAR,
        genres=tuple(subjects[:MAX_GENRES]),
        rating=synthesize_rating(rng),
        description=_first(doc.get("first_sentence")) or NO_DESCRIPTION
    )


def parse_search_response(
    response_json: Dict[str, Any],
    rng: Optional[random.Random] = None,
    config: Optional[Config] = None
) -> List[BookSummary]:
    """
    Parse full search API response.
    
    Args:
        response_json: Complete API response JSON
        rng: Random generator for synthesized ratings
        config: Configuration holding the cover URL template
        
    Returns:
        List of BookSummary objects (empty if no docs found)
    """
    docs = response_json.get("docs")
    if not isinstance(docs, list):
        docs = []
    books = []
    
    for doc in docs:
        book = parse_book(doc, rng, config)
        if book:
            books.append(book)
    
    return deduplicate_books(books)


def deduplicate_books(books: List[BookSummary]) -> List[BookSummary]:
    """
    Remove duplicate books by ID.
    
    Args:
        books: List of BookSummary objects
        
    Returns:
        Deduplicated list of books
    """
    seen_ids = set()
    unique_books = []
    
    for book in books:
        if book.id not in seen_ids:
            seen_ids.add(book.id)
            unique_books.append(book)
    
    return unique_books
