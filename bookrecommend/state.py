"""Pure transitions over AppState.

Every function takes the current state and returns a new one; nothing here
touches the network. Sessions call these around the fetch.
"""
from dataclasses import replace
from typing import Iterable

from bookrecommend.models import AppState, BookSummary

FETCH_ERROR_MESSAGE = "Failed to load book recommendations."


def set_search_text(state: AppState, text: str) -> AppState:
    """Replace the free-text term."""
    return replace(state, criteria=replace(state.criteria, text=text))


def toggle_interest(state: AppState, interest: str) -> AppState:
    """Add the interest at the end of the selection, or remove it."""
    interests = state.criteria.interests
    if interest in interests:
        interests = tuple(i for i in interests if i != interest)
    else:
        interests = interests + (interest,)
    return replace(state, criteria=replace(state.criteria, interests=interests))


def start_loading(state: AppState) -> AppState:
    """Enter loading mode, clearing any previous error or empty flag."""
    ui = replace(state.ui, loading=True, error=None, no_results=False)
    return replace(state, ui=ui)


def load_succeeded(state: AppState, books: Iterable[BookSummary]) -> AppState:
    """Show fetched books, or the no-results message when there are none."""
    books = tuple(books)
    ui = replace(
        state.ui,
        loading=False,
        error=None,
        no_results=not books,
        fetched=True
    )
    return replace(state, results=books, ui=ui)


def load_failed(state: AppState, message: str = FETCH_ERROR_MESSAGE) -> AppState:
    """Show the error message; no partial results are kept."""
    ui = replace(state.ui, loading=False, error=message, no_results=False, fetched=True)
    return replace(state, results=(), ui=ui)


def is_favorite(state: AppState, book_id: str) -> bool:
    return any(book.id == book_id for book in state.favorites)


def toggle_favorite(state: AppState, book: BookSummary) -> AppState:
    """Add the book to favorites, or remove any favorite with the same id."""
    if is_favorite(state, book.id):
        favorites = tuple(b for b in state.favorites if b.id != book.id)
    else:
        favorites = state.favorites + (book,)
    return replace(state, favorites=favorites)


def select_book(state: AppState, book: BookSummary) -> AppState:
    """Open the detail drawer for one book."""
    return replace(state, ui=replace(state.ui, selected=book))


def close_details(state: AppState) -> AppState:
    return replace(state, ui=replace(state.ui, selected=None))
