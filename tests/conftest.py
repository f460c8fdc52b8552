import pytest

from forkify.state import RecipeState
from forkify.storage import MemoryStore

API_URL = "https://api.test/recipes/"
KEY = "test-key"
RES_PER_PAGE = 10


class FakeFetcher:
    """Records requests and answers with a canned response (or raises)."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def request(self, url, body=None):
        self.calls.append((url, body))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def model(fetcher, store):
    return RecipeState(fetcher, store, api_url=API_URL, api_key=KEY, results_per_page=RES_PER_PAGE)
