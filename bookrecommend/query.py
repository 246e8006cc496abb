"""Build the catalog search string from user criteria."""
from typing import Iterable, Optional

DEFAULT_QUERY = "popular"

POPULAR_INTERESTS = (
    "Fantasy", "Science Fiction", "Mystery", "Romance", "Biography",
    "History", "Philosophy", "Self-Help", "Adventure", "Thriller",
    "Horror", "Poetry", "Science", "Travel", "Fiction",
)


def build_query(text: str, interests: Iterable[str]) -> str:
    """
    Combine free text and interest tags into one query.
    
    Args:
        text: Free-text search term (trimmed here)
        interests: Selected interest tags, in selection order
        
    Returns:
        Text followed by tags, whichever is present, or "popular"
    """
    parts = []
    search = (text or "").strip()
    if search:
        parts.append(search)
    parts.extend(interests)
    
    if not parts:
        return DEFAULT_QUERY
    return " ".join(parts)


def match_interest(name: str) -> Optional[str]:
    """Resolve user input to one of the popular interests, ignoring case."""
    wanted = name.strip().lower()
    for interest in POPULAR_INTERESTS:
        if interest.lower() == wanted:
            return interest
    return None
