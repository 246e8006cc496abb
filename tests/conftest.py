"""Shared test fixtures."""
import pytest

from bookrecommend.client import SearchError


class FakeSearchClient:
    """Blocking client double: replays canned responses, records queries."""
    
    def __init__(self, *responses):
        self.responses = list(responses)
        self.queries = []
    
    def search(self, query, limit=12):
        self.queries.append((query, limit))
        response = self.responses.pop(0) if self.responses else {"docs": []}
        if isinstance(response, Exception):
            raise response
        return response


def _docs(*keys):
    """Search response holding one titled doc per key."""
    return {"docs": [{"key": key, "title": f"Title {key}"} for key in keys]}


@pytest.fixture
def docs():
    return _docs


@pytest.fixture
def fake_client():
    return FakeSearchClient


@pytest.fixture
def search_error():
    return SearchError("Failed to fetch: 500", 500)
