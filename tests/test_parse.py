"""Tests for parsing functions."""
import random

from bookrecommend.config import Config
from bookrecommend.models import BookSummary
from bookrecommend.parse import (
    parse_book,
    parse_search_response,
    deduplicate_books,
    synthesize_rating,
)


def test_parse_book_complete():
    """Test parsing a doc with all fields present."""
    doc = {
        "key": "/works/OL893415W",
        "title": "Dune",
        "author_name": ["Frank Herbert", "Someone Else"],
        "cover_i": 11481354,
        "first_publish_year": 1965,
        "subject_facet": ["Science Fiction", "Deserts", "Ecology", "Politics"],
        "first_sentence": ["In the week before their departure to Arrakis..."]
    }
    
    book = parse_book(doc, random.Random(1))
    
    assert book is not None
    assert book.id == "/works/OL893415W"
    assert book.title == "Dune"
    assert book.author == "Frank Herbert"
    assert book.cover_url == "https://covers.openlibrary.org/b/id/11481354-M.jpg"
    assert book.year == 1965
    assert book.genres == ("Science Fiction", "Deserts", "Ecology")
    assert book.description.startswith("In the week before")


def test_parse_book_missing_fields():
    """Test that a doc with only a key gets every default."""
    book = parse_book({"key": "/works/OL1W"})
    
    assert book is not None
    assert book.id == "/works/OL1W"
    assert book.title == "Unknown Title"
    assert book.author == "Unknown Author"
    assert book.cover_url == Config.PLACEHOLDER_COVER
    assert book.year == "Unknown"
    assert book.genres == ()
    assert book.description == "No description available."


def test_parse_book_empty_values_use_defaults():
    """Test that empty strings and lists fall back like missing fields."""
    doc = {"key": "/works/OL2W", "title": "", "author_name": [], "first_sentence": []}
    
    book = parse_book(doc)
    
    assert book.title == "Unknown Title"
    assert book.author == "Unknown Author"
    assert book.description == "No description available."


def test_parse_book_first_sentence_as_string():
    """Test that a bare-string first_sentence is accepted."""
    book = parse_book({"key": "/works/OL3W", "first_sentence": "Call me Ishmael."})
    assert book.description == "Call me Ishmael."


def test_parse_book_no_key():
    """Test that doc without key returns None."""
    book = parse_book({"title": "No Key Book"})
    assert book is None


def test_rating_in_range():
    """Test that synthesized ratings stay within 3.0 and 5.0."""
    rng = random.Random(42)
    ratings = [synthesize_rating(rng) for _ in range(500)]
    
    assert all(3.0 <= r <= 5.0 for r in ratings)
    assert all(round(r, 1) == r for r in ratings)


def test_rating_deterministic_with_seeded_rng():
    """Test that the same seed gives the same ratings."""
    docs = {"docs": [{"key": "/works/A"}, {"key": "/works/B"}]}
    
    first = parse_search_response(docs, random.Random(7))
    second = parse_search_response(docs, random.Random(7))
    
    assert [b.rating for b in first] == [b.rating for b in second]


def test_custom_cover_template():
    """Test that the cover URL follows the configured template."""
    config = Config()
    config.OPENLIBRARY_COVERS_URL = "http://covers.local/{cover_id}.jpg"
    
    book = parse_book({"key": "/works/C", "cover_i": 5}, config=config)
    
    assert book.cover_url == "http://covers.local/5.jpg"


def test_parse_search_response():
    """Test parsing complete API response, dropping keyless docs."""
    response = {
        "docs": [
            {"key": "/works/1", "title": "Book 1"},
            {"title": "Keyless"},
            {"key": "/works/2", "title": "Book 2"}
        ]
    }
    
    books = parse_search_response(response)
    
    assert len(books) == 2
    assert books[0].title == "Book 1"
    assert books[1].title == "Book 2"


def test_parse_search_response_without_docs():
    """Test that missing or empty docs give an empty list."""
    assert parse_search_response({}) == []
    assert parse_search_response({"docs": []}) == []
    assert parse_search_response({"docs": None}) == []


def _book(book_id, title):
    return BookSummary(book_id, title, "Author", "/cover", 2000, (), 4.0, "desc")


def test_deduplicate_books():
    """Test deduplication by book ID."""
    books = [
        _book("1", "Book A"),
        _book("2", "Book B"),
        _book("1", "Book A Duplicate"),
    ]
    
    unique = deduplicate_books(books)
    
    assert len(unique) == 2
    assert unique[0].id == "1"
    assert unique[0].title == "Book A"
    assert unique[1].id == "2"


def test_parse_book_not_an_object():
    """Test that docs which are not objects are dropped."""
    assert parse_book(None) is None
    assert parse_book("x") is None
    assert parse_book(["/works/1"]) is None


def test_parse_search_response_skips_malformed_docs():
    """Test that null and string docs are skipped, good ones kept."""
    books = parse_search_response({"docs": [None, "x", {"key": "/works/1"}]})
    
    assert [b.id for b in books] == ["/works/1"]


def test_parse_search_response_docs_not_a_list():
    """Test that a non-list docs field gives an empty list."""
    assert parse_search_response({"docs": 3}) == []
    assert parse_search_response({"docs": {"key": "/works/1"}}) == []


def test_parse_book_subject_facet_not_a_list():
    """Test that a bare-string subject_facet is ignored."""
    book = parse_book({"key": "/works/1", "subject_facet": "Fantasy"})
    assert book.genres == ()
