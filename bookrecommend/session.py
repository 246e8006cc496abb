"""Session controllers: hold AppState and re-fetch when criteria change."""
import asyncio
import logging
import random
from typing import Optional

from bookrecommend import state as transitions
from bookrecommend.async_client import AsyncOpenLibraryClient
from bookrecommend.client import OpenLibraryClient, SearchError
from bookrecommend.config import Config
from bookrecommend.models import AppState, BookSummary, SearchCriteria
from bookrecommend.parse import parse_search_response
from bookrecommend.query import build_query

logger = logging.getLogger(__name__)


class RecommendationSession:
    """Blocking controller: every criteria change runs one search."""

    def __init__(
        self,
        client: OpenLibraryClient,
        limit: int = 12,
        rng: Optional[random.Random] = None,
        config: Optional[Config] = None,
        criteria: Optional[SearchCriteria] = None
    ):
        """
        Initialize session.

        Args:
            client: Search client
            limit: Result cap per search
            rng: Random generator for synthesized ratings
            config: Configuration (cover URLs)
            criteria: Starting criteria
        """
        self.client = client
        self.limit = limit
        self.rng = rng
        self.config = config or Config()
        self.state = AppState(criteria=criteria or SearchCriteria())

    @property
    def query(self) -> str:
        criteria = self.state.criteria
        return build_query(criteria.text, criteria.interests)

    def refresh(self) -> AppState:
        """Fetch books for the current criteria and update state."""
        query = self.query
        self.state = transitions.start_loading(self.state)

        try:
            response = self.client.search(query, self.limit)
        except SearchError as e:
            logger.error(f"Search for {query!r} failed: {e}")
            self.state = transitions.load_failed(self.state)
            return self.state

        books = parse_search_response(response, self.rng, self.config)
        logger.info(f"Found {len(books)} books for {query!r}")
        self.state = transitions.load_succeeded(self.state, books)
        return self.state

    def set_search_text(self, text: str) -> AppState:
        if text == self.state.criteria.text:
            return self.state
        self.state = transitions.set_search_text(self.state, text)
        return self.refresh()

    def toggle_interest(self, interest: str) -> AppState:
        self.state = transitions.toggle_interest(self.state, interest)
        return self.refresh()

    def submit(self) -> AppState:
        return self.refresh()

    def toggle_favorite(self, book: BookSummary) -> AppState:
        self.state = transitions.toggle_favorite(self.state, book)
        return self.state

    def select(self, book: BookSummary) -> AppState:
        self.state = transitions.select_book(self.state, book)
        return self.state

    def close_details(self) -> AppState:
        self.state = transitions.close_details(self.state)
        return self.state


class LiveRecommendationSession:
    """
    Async controller with debounced text input.

    Scheduling a search cancels the one in flight. Each search carries a
    generation number and only the latest generation may write results, so
    an older response never overwrites a newer one.
    """

    def __init__(
        self,
        client: AsyncOpenLibraryClient,
        limit: int = 12,
        debounce: float = 0.3,
        rng: Optional[random.Random] = None,
        config: Optional[Config] = None,
        criteria: Optional[SearchCriteria] = None
    ):
        """
        Initialize live session.

        Args:
            client: Async search client
            limit: Result cap per search
            debounce: Seconds to wait after a text edit before searching
            rng: Random generator for synthesized ratings
            config: Configuration (cover URLs)
            criteria: Starting criteria
        """
        self.client = client
        self.limit = limit
        self.debounce = debounce
        self.rng = rng
        self.config = config or Config()
        self.state = AppState(criteria=criteria or SearchCriteria())
        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def query(self) -> str:
        criteria = self.state.criteria
        return build_query(criteria.text, criteria.interests)

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def _schedule(self, delay: float) -> None:
        if self.pending:
            logger.debug(f"Cancelling superseded search (generation {self._generation})")
            self._task.cancel()

        self._generation += 1
        self._task = asyncio.get_running_loop().create_task(
            self._run(self._generation, delay)
        )

    async def _run(self, generation: int, delay: float) -> None:
        if delay > 0:
            await asyncio.sleep(delay)

        query = self.query
        self.state = transitions.start_loading(self.state)

        try:
            response = await self.client.search(query, self.limit)
        except SearchError as e:
            if generation != self._generation:
                logger.debug(f"Ignoring failure of stale search {query!r}")
                return
            logger.error(f"Search for {query!r} failed: {e}")
            self.state = transitions.load_failed(self.state)
            return

        if generation != self._generation:
            logger.info(f"Discarding stale response for {query!r}")
            return

        books = parse_search_response(response, self.rng, self.config)
        logger.info(f"Found {len(books)} books for {query!r}")
        self.state = transitions.load_succeeded(self.state, books)

    def set_search_text(self, text: str) -> None:
        if text == self.state.criteria.text:
            return
        self.state = transitions.set_search_text(self.state, text)
        self._schedule(self.debounce)

    def toggle_interest(self, interest: str) -> None:
        self.state = transitions.toggle_interest(self.state, interest)
        self._schedule(0)

    def submit(self) -> None:
        self._schedule(0)

    async def settle(self) -> AppState:
        """Wait until no search is pending and return the resulting state."""
        while self.pending:
            task = self._task
            await asyncio.wait([task])
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()
        return self.state

    def toggle_favorite(self, book: BookSummary) -> AppState:
        self.state = transitions.toggle_favorite(self.state, book)
        return self.state

    def select(self, book: BookSummary) -> AppState:
        self.state = transitions.select_book(self.state, book)
        return self.state

    def close_details(self) -> AppState:
        self.state = transitions.close_details(self.state)
        return self.state
