"""
Shared fixtures.

Every test gets a fresh in-memory SQLite database. The assistant is
wired to a fake completion client, so no test ever calls a real LLM.
"""

import asyncio
from typing import Optional
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from shopledger.agents import CompletionClient, InsightAgent
from shopledger.api import create_app
from shopledger.auth import RequestContext
from shopledger.config import AppSettings, DatabaseSettings, LLMSettings
from shopledger.models import PublicUser, UserRecord
from shopledger.orchestrator import create_app_components
from shopledger.services.storage import (
    DatabaseClient,
    SQLAlchemyTransactionStorage,
    SQLAlchemyUserStorage,
)


class FakeCompletionClient(CompletionClient):
    """Returns a canned reply, or raises the configured error."""

    def __init__(self, reply: Optional[str] = "Stock up on Rice.", error: Optional[BaseException] = None):
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def complete(self, system: str, prompt: str) -> Optional[str]:
        self.calls.append((system, prompt))
        if self.error is not None:
            raise self.error
        return self.reply


class StatusError(Exception):
    """Provider-style error carrying an HTTP status."""

    def __init__(self, status_code: int, message: str = "provider error", code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def llm_settings() -> LLMSettings:
    return LLMSettings(provider="openai", api_key="test-key", model_name="test-model", timeout_seconds=5)


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(currency_symbol="₹")


@pytest.fixture
def database() -> DatabaseClient:
    client = DatabaseClient(settings=DatabaseSettings(url="sqlite://"))
    client.create_tables()
    return client


@pytest.fixture
def transaction_storage(database) -> SQLAlchemyTransactionStorage:
    return SQLAlchemyTransactionStorage(database)


@pytest.fixture
def user_storage(database) -> SQLAlchemyUserStorage:
    return SQLAlchemyUserStorage(database)


@pytest.fixture
def owner(user_storage):
    return run(user_storage.create_user("owner", "Shop Owner", "not-a-real-hash"))


@pytest.fixture
def fake_llm() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def app(database, fake_llm, llm_settings, app_settings):
    agent = InsightAgent(client=fake_llm, llm_settings=llm_settings, app_settings=app_settings)
    components = create_app_components(database=database, insight_agent=agent)
    return create_app(components)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def register(client: TestClient, username: str, password: str = "secret123") -> dict:
    response = client.post(
        "/api/register",
        json={"username": username, "name": username.title(), "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def alice(client) -> TestClient:
    register(client, "alice")
    return client


@pytest.fixture
def bob(app, alice) -> TestClient:
    # Separate cookie jar; tables already exist from alice's client
    other = TestClient(app)
    register(other, "bob")
    return other


def make_context(user: UserRecord) -> RequestContext:
    return RequestContext(
        user=PublicUser(id=user.id, username=user.username, name=user.name),
        correlation_id=uuid4(),
    )
