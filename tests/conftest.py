"""Shared fixtures."""
from datetime import date
from typing import List

import httpx
import pytest
import pytest_asyncio

from fintrack.api.facade import FinanceApi
from fintrack.mock_api import app, reset_backend
from fintrack.models.auth import Session

TODAY = date(2024, 3, 15)


class FakeSleep:
    """Records requested delays instead of waiting."""
    
    def __init__(self):
        self.calls: List[float] = []
    
    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)
    
    @property
    def total(self) -> float:
        return sum(self.calls)


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture(autouse=True)
def backend():
    """Fresh in-memory API state pinned to a fixed date."""
    return reset_backend(today=lambda: TODAY)


@pytest_asyncio.fixture
async def api():
    """Client wired to the reference API in-process, not logged in."""
    client = FinanceApi.from_settings(transport=httpx.ASGITransport(app=app))
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def authed_api(api):
    """Client with a registered user and an attached session."""
    await api.auth.register("alice@example.com", "s3cret")
    token = await api.auth.login("alice@example.com", "s3cret")
    api.set_session(Session.from_token(token, email="alice@example.com"))
    return api
