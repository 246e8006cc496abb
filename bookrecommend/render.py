"""Text rendering of recommendation state."""
import json
from typing import List, Sequence

from tabulate import tabulate

from bookrecommend.models import AppState, BookSummary, Mode
from bookrecommend.query import POPULAR_INTERESTS

LOADING_MESSAGE = "Loading books..."
NO_RESULTS_MESSAGE = "No books found. Try a different search or interest."
FAVORITE_MARK = "*"


def _clip(value: str, width: int) -> str:
    return value[:width] + "..." if len(value) > width else value


def render_status(state: AppState) -> str:
    """Message for the non-results modes, empty string otherwise."""
    mode = state.ui.mode
    if mode is Mode.LOADING:
        return LOADING_MESSAGE
    if mode is Mode.ERROR:
        return state.ui.error
    if mode is Mode.EMPTY:
        return NO_RESULTS_MESSAGE
    return ""


def render_cards(books: Sequence[BookSummary], favorites: Sequence[BookSummary] = ()) -> str:
    """Result list as a numbered table, favorites marked."""
    favorite_ids = {book.id for book in favorites}
    headers = ["#", "", "Title", "Author", "Rating", "Year", "Genres"]
    rows = [
        [
            i,
            FAVORITE_MARK if book.id in favorite_ids else "",
            _clip(book.title, 50),
            _clip(book.author, 30),
            book.rating_str,
            book.year,
            _clip(book.genres_str, 40)
        ]
        for i, book in enumerate(books, 1)
    ]
    return tabulate(rows, headers=headers, tablefmt="grid")


def render_details(book: BookSummary) -> str:
    """Detail drawer for one book."""
    rows = [
        ["Title", book.title],
        ["Author", book.author],
        ["Published", book.year],
        ["Rating", book.rating_str],
        ["Genres", book.genres_str],
        ["Cover", book.cover_url],
    ]
    return tabulate(rows, tablefmt="plain") + "\n\n" + book.description


def render_favorites(favorites: Sequence[BookSummary]) -> str:
    if not favorites:
        return "No favorites yet."
    return render_compact(favorites)


def render_interests(selected: Sequence[str] = ()) -> str:
    """Interest picker, selected ones checked."""
    return "\n".join(
        f"[{'x' if interest in selected else ' '}] {interest}"
        for interest in POPULAR_INTERESTS
    )


def render_state(state: AppState) -> str:
    """Whole page: status or cards, then the drawer when a book is selected."""
    sections: List[str] = []
    status = render_status(state)
    if status:
        sections.append(status)
    elif state.ui.mode is Mode.RESULTS:
        sections.append(render_cards(state.results, state.favorites))

    if state.ui.selected is not None:
        sections.append(render_details(state.ui.selected))

    return "\n\n".join(sections)


def books_to_dicts(books: Sequence[BookSummary]) -> List[dict]:
    return [
        {
            "id": book.id,
            "title": book.title,
            "author": book.author,
            "cover_url": book.cover_url,
            "year": book.year,
            "genres": list(book.genres),
            "rating": book.rating,
            "description": book.description
        }
        for book in books
    ]


def render_json(books: Sequence[BookSummary]) -> str:
    return json.dumps(books_to_dicts(books), indent=2)


def render_compact(books: Sequence[BookSummary]) -> str:
    return "\n".join(
        f"{i}. {book.title} - {book.author}" for i, book in enumerate(books, 1)
    )
