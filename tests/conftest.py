from __future__ import annotations

from typing import Callable

import pytest
from fastapi.testclient import TestClient

from fakes import CONDITION_REPLY, FakeTransport


@pytest.fixture
def chat_transport():
    return FakeTransport()


@pytest.fixture
def summary_transport():
    return FakeTransport()


@pytest.fixture
def app(chat_transport, summary_transport):
    import main

    return main.create_app(chat_transport=chat_transport, summary_transport=summary_transport)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def new_session(client) -> Callable[[], str]:
    def _make() -> str:
        response = client.post("/api/sessions")
        assert response.status_code == 200
        return response.json()["session_id"]

    return _make


@pytest.fixture
def condition_reply() -> str:
    return CONDITION_REPLY
