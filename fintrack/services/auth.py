"""Session lifecycle: restore, login, register, logout."""
import logging
from typing import Optional

from fintrack.api.errors import FinanceApiError, user_message
from fintrack.api.facade import FinanceApi
from fintrack.config import settings
from fintrack.models.auth import Session, User
from fintrack.storage.session_store import SessionStore

logger = logging.getLogger(__name__)


class AuthService:
    """Owns the session attached to a :class:`FinanceApi` and its persisted copy."""
    
    def __init__(
        self,
        api: FinanceApi,
        store: Optional[SessionStore] = None,
        session_ttl_minutes: Optional[int] = None,
    ):
        self.api = api
        self.store = store
        self.session_ttl_minutes = (
            session_ttl_minutes if session_ttl_minutes is not None else settings.session_ttl_minutes
        )
        self.last_error: Optional[str] = None
    
    @property
    def session(self) -> Optional[Session]:
        return self.api.session
    
    @property
    def is_authenticated(self) -> bool:
        return self.session is not None and not self.session.is_expired()
    
    def restore(self) -> bool:
        """Attach a previously stored session. Expired sessions are discarded."""
        if self.store is None:
            return False
        session = self.store.load(self.api.client.base_url)
        if session is None:
            return False
        if session.is_expired():
            logger.info("Stored session expired, discarding", extra={"email": session.email})
            self.store.clear(self.api.client.base_url)
            return False
        self.api.set_session(session)
        return True
    
    async def login(self, email: str, password: str) -> bool:
        """Exchange credentials for a session. Returns False on any failure."""
        self.last_error = None
        try:
            token = await self.api.auth.login(email, password)
        except FinanceApiError as e:
            logger.error("Login failed: %s", e)
            self.last_error = user_message(e, "Login failed")
            return False
        
        if not token.access_token:
            logger.error("No access token in login response")
            self.last_error = "Login failed"
            return False
        
        session = Session.from_token(token, email=email, default_ttl_minutes=self.session_ttl_minutes)
        self.api.set_session(session)
        if self.store is not None:
            self.store.save(self.api.client.base_url, session)
        return True
    
    async def register(self, email: str, password: str) -> User:
        """Create an account. Errors propagate to the caller."""
        return await self.api.auth.register(email, password)
    
    def logout(self) -> None:
        self.api.set_session(None)
        if self.store is not None:
            self.store.clear(self.api.client.base_url)
        self.last_error = None
