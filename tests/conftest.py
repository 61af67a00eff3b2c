import sys
from pathlib import Path

import pytest

# Allow tests to import the package from src without installation
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class StubResponse:
    def __init__(self, status_code=200, json_data=None, text=""):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text

    def json(self):
        if isinstance(self._json_data, Exception):
            raise self._json_data
        return self._json_data


class StubSession:
    def __init__(self):
        self.request_calls = []
        self.request_response = StubResponse(200, {"items": [], "total": 0})

    def mount(self, prefix, adapter):
        pass

    def request(self, method, url, headers=None, params=None, verify=None, timeout=None, **kwargs):
        self.request_calls.append(
            {
                "method": method,
                "url": url,
                "headers": headers or {},
                "params": params or {},
                "verify": verify,
                "timeout": timeout,
                "kwargs": kwargs,
            }
        )
        return self.request_response


class StubProvider:
    """
    Stand-in for the cached fetch provider used by façade tests.

    Records every (content_type, query) pair and answers with the queued
    raw collection (or raises it when it is an exception).
    """

    def __init__(self, response=None):
        self.calls = []
        self.response = response if response is not None else {"items": [], "total": 0}

    async def get_cache_entries(self, content_type, query):
        self.calls.append((content_type, dict(query)))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class StubDeliveryClient:
    """Counts blocking `get_entries` calls made by the cached provider."""

    def __init__(self, response=None):
        self.queries = []
        self.response = response if response is not None else {"items": [], "total": 0}

    def get_entries(self, query):
        self.queries.append(query)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class FakeClock:
    def __init__(self, now=1_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def raw_category(id, name=None, slug=None, parent=None):
    fields = {}
    if name is not None:
        fields["name"] = name
    if slug is not None:
        fields["slug"] = slug
    if parent is not None:
        fields["parent"] = parent
    return {"id": id, "createdAt": "2020-01-01T00:00:00Z", "fields": fields}


@pytest.fixture
def stub_session():
    return StubSession()


@pytest.fixture
def stub_provider():
    return StubProvider()


@pytest.fixture
def clock():
    return FakeClock()
