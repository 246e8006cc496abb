#!/usr/bin/env python3
"""BookRecommend CLI - discover books based on your interests."""
import argparse
import asyncio
import logging
import sys
from typing import Optional, Tuple, Union

from bookrecommend.async_client import AsyncOpenLibraryClient
from bookrecommend.client import OpenLibraryClient
from bookrecommend.config import Config
from bookrecommend.models import SearchCriteria
from bookrecommend.query import POPULAR_INTERESTS, match_interest
from bookrecommend.render import (
    render_cards,
    render_compact,
    render_details,
    render_favorites,
    render_interests,
    render_json,
    render_state,
    render_status,
)
from bookrecommend.session import LiveRecommendationSession, RecommendationSession

logger = logging.getLogger(__name__)

Session = Union[RecommendationSession, LiveRecommendationSession]

BROWSE_HELP = """
Commands:
  search <text>      set the search text (empty clears it)
  tag <interest>     toggle interests, comma separated
  find               search again with the current criteria
  info <n>           show details for card n
  close              close the details view
  fav <n>            toggle card n as favorite
  favs               list favorites
  interests          show the interest picker
  help               show this help
  quit               leave
"""


def setup_logging(config: Config):
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


def build_client(config: Config) -> OpenLibraryClient:
    return OpenLibraryClient(
        base_url=config.OPENLIBRARY_SEARCH_URL,
        timeout=config.DEFAULT_TIMEOUT,
        cache_bust=config.CACHE_BUST
    )


def build_async_client(config: Config) -> AsyncOpenLibraryClient:
    return AsyncOpenLibraryClient(
        base_url=config.OPENLIBRARY_SEARCH_URL,
        timeout=config.DEFAULT_TIMEOUT,
        cache_bust=config.CACHE_BUST
    )


def resolve_interests(names) -> list:
    """Map user-typed names to known interests, rejecting unknown ones."""
    resolved = []
    for name in names:
        interest = match_interest(name)
        if interest is None:
            raise ValueError(f"Unknown interest: {name!r}. Run 'interests' to list them.")
        resolved.append(interest)
    return resolved


def parse_command(line: str) -> Tuple[str, str]:
    """Split a browse-session line into (command, argument)."""
    command, _, argument = line.strip().partition(" ")
    return command.lower(), argument.strip()


def _card(session: Session, argument: str):
    """Book shown on card number `argument`, or None after printing why."""
    results = session.state.results
    try:
        index = int(argument)
    except ValueError:
        print(f"Not a card number: {argument!r}")
        return None
    if not 1 <= index <= len(results):
        print(f"No card {index}; there are {len(results)}.")
        return None
    return results[index - 1]


def dispatch(session: Session, line: str) -> Optional[bool]:
    """
    Apply one browse command to the session.

    Returns:
        False to quit, True when criteria changed (a search was triggered),
        None otherwise
    """
    command, argument = parse_command(line)

    if command in ("quit", "exit", "q"):
        return False

    if command == "search":
        session.set_search_text(argument)
        return True

    if command == "tag":
        try:
            interests = resolve_interests(n for n in argument.split(",") if n.strip())
        except ValueError as e:
            print(e)
            return None
        for interest in interests:
            session.toggle_interest(interest)
        return bool(interests) or None

    if command == "find":
        session.submit()
        return True

    if command == "info":
        book = _card(session, argument)
        if book is not None:
            session.select(book)
            print(render_details(book))
        return None

    if command == "close":
        session.close_details()
        return None

    if command == "fav":
        book = _card(session, argument)
        if book is not None:
            session.toggle_favorite(book)
            print(render_cards(session.state.results, session.state.favorites))
        return None

    if command == "favs":
        print(render_favorites(session.state.favorites))
        return None

    if command == "interests":
        print(render_interests(session.state.criteria.interests))
        return None

    if command in ("help", ""):
        print(BROWSE_HELP)
        return None

    print(f"Unknown command: {command!r}. Type 'help'.")
    return None


def browse_sync(config: Config):
    """Interactive session with blocking searches."""
    with build_client(config) as client:
        session = RecommendationSession(client, limit=config.RESULT_LIMIT, config=config)
        print(BROWSE_HELP)
        print(render_state(session.refresh()))

        while True:
            try:
                line = input("books> ")
            except EOFError:
                break
            outcome = dispatch(session, line)
            if outcome is False:
                break
            if outcome:
                print(render_state(session.state))


async def browse_async(config: Config):
    """Interactive session with debounced, cancellable searches."""
    loop = asyncio.get_running_loop()

    async with build_async_client(config) as client:
        session = LiveRecommendationSession(
            client,
            limit=config.RESULT_LIMIT,
            debounce=config.DEBOUNCE_SECONDS,
            config=config
        )
        print(BROWSE_HELP)
        session.submit()
        print(render_state(await session.settle()))

        while True:
            try:
                line = await loop.run_in_executor(None, input, "books> ")
            except EOFError:
                break
            outcome = dispatch(session, line)
            if outcome is False:
                break
            if outcome:
                print(render_status(session.state) or "Searching...")
                print(render_state(await session.settle()))


def display_books(books, format_type: str):
    """Display books in specified format."""
    if format_type == "table":
        print("\n" + render_cards(books))
    elif format_type == "json":
        print(render_json(books))
    elif format_type == "compact":
        print(render_compact(books))


def _show_search_outcome(state, args):
    status = render_status(state)
    if status:
        print(status)
        return 1 if state.ui.error else 0

    display_books(state.results, args.format)

    if args.details:
        if not 1 <= args.details <= len(state.results):
            print(f"No card {args.details}; there are {len(state.results)}.")
            return 1
        print("\n" + render_details(state.results[args.details - 1]))
    return 0


def search_books_sync(args, config: Config) -> int:
    """One-shot search using the sync client."""
    interests = resolve_interests(args.interest)

    with build_client(config) as client:
        criteria = SearchCriteria(args.query, tuple(interests))
        session = RecommendationSession(client, limit=args.limit, config=config, criteria=criteria)
        logger.info(f"Searching for: {session.query}")
        return _show_search_outcome(session.submit(), args)


async def search_books_async(args, config: Config) -> int:
    """One-shot search using the async client."""
    interests = resolve_interests(args.interest)

    async with build_async_client(config) as client:
        criteria = SearchCriteria(args.query, tuple(interests))
        session = LiveRecommendationSession(
            client, limit=args.limit, debounce=0, config=config, criteria=criteria
        )
        logger.info(f"Searching for: {session.query}")
        session.submit()
        return _show_search_outcome(await session.settle(), args)


def list_interests(args, config: Config) -> int:
    for interest in POPULAR_INTERESTS:
        print(interest)
    return 0


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="BookRecommend - discover books based on your interests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Popular books
  %(prog)s search

  # Text plus interests, show details of the second card
  %(prog)s search "dune" --interest "Science Fiction" --interest Adventure --details 2

  # Interactive session with debounced searches
  %(prog)s browse --async
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Search command
    search_parser = subparsers.add_parser("search", help="Search for books")
    search_parser.add_argument("query", nargs="?", default="", help="Search text (default: none)")
    search_parser.add_argument("--interest", action="append", default=[], help="Interest tag (repeatable)")
    search_parser.add_argument("--limit", type=int, default=None, help="Max results (default: RESULT_LIMIT)")
    search_parser.add_argument("--format", choices=["table", "json", "compact"], default="table", help="Output format")
    search_parser.add_argument("--details", type=int, help="Show details for card N")
    search_parser.add_argument("--async", dest="use_async", action="store_true", help="Use async client")

    # Interests command
    subparsers.add_parser("interests", help="List popular interests")

    # Browse command
    browse_parser = subparsers.add_parser("browse", help="Interactive session")
    browse_parser.add_argument("--async", dest="use_async", action="store_true", help="Debounce and cancel stale searches")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = Config()
    setup_logging(config)

    try:
        if args.command == "search":
            if args.limit is None:
                args.limit = config.RESULT_LIMIT
            if args.use_async:
                code = asyncio.run(search_books_async(args, config))
            else:
                code = search_books_sync(args, config)

        elif args.command == "interests":
            code = list_interests(args, config)

        elif args.command == "browse":
            if args.use_async:
                asyncio.run(browse_async(config))
            else:
                browse_sync(config)
            code = 0

    except ValueError as e:
        print(e)
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("\nInterrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
