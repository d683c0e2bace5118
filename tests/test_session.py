"""Tests for the session model, its store and the auth service."""
from datetime import datetime, timedelta, timezone

import pytest

from fintrack.models.auth import Session, Token
from fintrack.services.auth import AuthService
from fintrack.storage.session_store import SessionStore

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store(tmp_path):
    return SessionStore(db_path=str(tmp_path / "sessions.db"))


def test_session_expiry_from_server_lifetime():
    session = Session.from_token(Token(access_token="t", expires_in=3600), now=NOW)
    
    assert session.expires_at == NOW + timedelta(hours=1)
    assert not session.is_expired(NOW + timedelta(minutes=59))
    assert session.is_expired(NOW + timedelta(hours=1))


def test_session_expiry_falls_back_to_configured_ttl():
    session = Session.from_token(Token(access_token="t"), default_ttl_minutes=30, now=NOW)
    assert session.expires_at == NOW + timedelta(minutes=30)


def test_session_without_lifetime_never_expires():
    session = Session.from_token(Token(access_token="t"), now=NOW)
    
    assert session.expires_at is None
    assert not session.is_expired(NOW + timedelta(days=3650))
    assert session.authorization_header() == {"Authorization": "Bearer t"}


def test_store_round_trip(store):
    session = Session(access_token="abc", email="alice@example.com", issued_at=NOW)
    store.save("http://api.test", session)
    
    assert store.load("http://api.test") == session
    assert store.load("http://other.test") is None
    
    store.clear("http://api.test")
    assert store.load("http://api.test") is None


def test_store_keeps_one_session_per_api(store):
    store.save("http://api.test", Session(access_token="first"))
    store.save("http://api.test", Session(access_token="second"))
    
    assert store.load("http://api.test").access_token == "second"


@pytest.mark.asyncio
async def test_login_attaches_and_persists_session(api, store):
    await api.auth.register("carol@example.com", "pw")
    auth = AuthService(api, store)
    
    assert await auth.login("carol@example.com", "pw") is True
    assert auth.is_authenticated
    assert api.session.email == "carol@example.com"
    assert api.session.expires_at is not None
    assert store.load(api.client.base_url).access_token == api.session.access_token
    
    me = await api.auth.current_user()
    assert me.email == "carol@example.com"


@pytest.mark.asyncio
async def test_login_failure_returns_false(api, store):
    auth = AuthService(api, store)
    
    assert await auth.login("nobody@example.com", "pw") is False
    assert not auth.is_authenticated
    assert auth.last_error == "Incorrect email or password"
    assert store.load(api.client.base_url) is None


@pytest.mark.asyncio
async def test_restore_uses_stored_session(api, store):
    await api.auth.register("dan@example.com", "pw")
    await AuthService(api, store).login("dan@example.com", "pw")
    api.set_session(None)
    
    auth = AuthService(api, store)
    assert auth.restore() is True
    assert (await api.auth.current_user()).email == "dan@example.com"


@pytest.mark.asyncio
async def test_restore_discards_expired_session(api, store):
    expired = Session(access_token="old", expires_at=datetime.now(timezone.utc) - timedelta(seconds=1))
    store.save(api.client.base_url, expired)
    
    auth = AuthService(api, store)
    assert auth.restore() is False
    assert api.session is None
    assert store.load(api.client.base_url) is None


@pytest.mark.asyncio
async def test_logout_clears_everything(authed_api, store):
    store.save(authed_api.client.base_url, authed_api.session)
    auth = AuthService(authed_api, store)
    
    auth.logout()
    
    assert authed_api.session is None
    assert not auth.is_authenticated
    assert store.load(authed_api.client.base_url) is None
