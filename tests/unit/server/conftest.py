"""Fixtures for HTTP host tests."""

import pytest
from fastapi.testclient import TestClient

from screenflow.server.api import create_app


@pytest.fixture
def app(quiz_document, services):
    return create_app(document=quiz_document, services=services)


@pytest.fixture
def test_client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def session_id(test_client) -> str:
    """Id of a fresh session on the quiz document."""
    response = test_client.post("/sessions", json={})
    assert response.status_code == 201
    return response.json()["session_id"]
