"""Data models for book recommendations."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class BookSummary:
    """Normalized, display-ready book representation."""
    id: str
    title: str
    author: str
    cover_url: str
    year: Union[int, str]
    genres: Tuple[str, ...]
    rating: float
    description: str
    
    @property
    def genres_str(self) -> str:
        """Format genres as comma-separated string."""
        return ", ".join(self.genres) if self.genres else "None"
    
    @property
    def rating_str(self) -> str:
        """Format rating the way cards show it."""
        return f"{self.rating:.1f}/5"


@dataclass(frozen=True)
class SearchCriteria:
    """Free-text query plus interest tags in selection order."""
    text: str = ""
    interests: Tuple[str, ...] = ()


class Mode(Enum):
    """Render mode derived from the last fetch outcome."""
    IDLE = "idle"
    LOADING = "loading"
    RESULTS = "results"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class UIState:
    """Display flags; at most one of loading/error/no_results is set."""
    loading: bool = False
    error: Optional[str] = None
    no_results: bool = False
    selected: Optional[BookSummary] = None
    fetched: bool = False
    
    @property
    def mode(self) -> Mode:
        if self.loading:
            return Mode.LOADING
        if self.error:
            return Mode.ERROR
        if self.no_results:
            return Mode.EMPTY
        if self.fetched:
            return Mode.RESULTS
        return Mode.IDLE


@dataclass(frozen=True)
class AppState:
    """Everything the page shows, passed to and returned by transitions."""
    criteria: SearchCriteria = field(default_factory=SearchCriteria)
    results: Tuple[BookSummary, ...] = ()
    favorites: Tuple[BookSummary, ...] = ()
    ui: UIState = field(default_factory=UIState)
