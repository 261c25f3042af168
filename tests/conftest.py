"""Pytest configuration for test isolation.

Settings are read once at import time, so the environment is pinned here
before anything from ``fintrack`` is imported: no Gemini key (no test may
reach the network) and a known JWT secret for minting bearer tokens.

Every test gets a fresh in-memory transaction store wired into the app, and
the dependency overrides are cleared afterwards so tests don't share state.
"""

from __future__ import annotations

import os

os.environ["GOOGLE_API_KEY"] = ""
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_ALGORITHM"] = "HS256"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from fintrack.api import deps  # noqa: E402
from fintrack.database.transaction_store import MemoryTransactionStore  # noqa: E402
from fintrack.main import app  # noqa: E402
from tests.helpers.tokens import bearer  # noqa: E402


@pytest.fixture
def store() -> MemoryTransactionStore:
    return MemoryTransactionStore()


@pytest.fixture(autouse=True)
def _isolate_app(store: MemoryTransactionStore):
    app.dependency_overrides[deps.get_transaction_store] = lambda: store
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    # Not used as a context manager: startup (and its database bootstrap) stays off.
    return TestClient(app)


@pytest.fixture
def auth() -> dict[str, str]:
    return bearer("user-1")


@pytest.fixture
def other_auth() -> dict[str, str]:
    return bearer("user-2")
