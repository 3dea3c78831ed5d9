import random
from types import SimpleNamespace

import pytest

from content.resolver import ResponseResolver
from intelligence.engine import FallbackChain
from intelligence.generative import GenerativeStrategy
from intelligence.heuristics import HeuristicStrategy
from intelligence.query_service import QueryServiceClient, QueryServiceStrategy
from session.assistant import Assistant


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; returns or raises a canned result."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


class FakeGenai:
    """Mimics genai.Client: `client.models.generate_content(...)`."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []
        self.models = SimpleNamespace(generate_content=self._generate_content)

    def _generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def query_client(response=None, error=None):
    return QueryServiceClient("http://query.test/query", timeout_seconds=1, session=FakeSession(response, error))


def build_chain(resolver, query=None, genai_client=None, seed=7):
    return FallbackChain([
        QueryServiceStrategy(query, resolver),
        GenerativeStrategy(genai_client, system_prompt="Be brief."),
        HeuristicStrategy(resolver, rng=random.Random(seed)),
    ])


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "assistant.db"


@pytest.fixture
def resolver():
    return ResponseResolver()


@pytest.fixture
def offline_chain(resolver):
    return build_chain(resolver)


@pytest.fixture
def assistant(db_path, resolver, offline_chain):
    return Assistant.create(db_path=db_path, resolver=resolver, fallback_chain=offline_chain)
