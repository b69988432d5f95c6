import os

import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from todograph.main import create_app  # noqa: E402
from todograph.settings import Settings  # noqa: E402
from todograph.store import InMemoryStore  # noqa: E402


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def client(store):
    app = create_app(Settings(persistence_backend="memory"), store=store)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def gql(client):
    """Post a GraphQL document and return the decoded response body."""

    def run(query, variables=None):
        res = client.post("/graphql", json={"query": query, "variables": variables or {}})
        assert res.status_code == 200, res.text
        return res.json()

    return run
