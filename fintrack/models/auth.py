"""Authentication models and the client-side session."""
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from pydantic import BaseModel, Field


class Token(BaseModel):
    """Token response from the API's OAuth2 password flow."""
    
    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = Field(None, description="Lifetime in seconds, when the server reports one")


class User(BaseModel):
    """Authenticated user."""
    
    id: int
    email: str
    is_active: bool = True


class Session(BaseModel):
    """
    Explicit authentication state handed to the HTTP client.
    
    A session without ``expires_at`` never expires locally; the server stays
    the authority and answers 401 once it rejects the token.
    """
    
    access_token: str
    token_type: str = "bearer"
    email: Optional[str] = None
    issued_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: Optional[datetime] = None
    
    @classmethod
    def from_token(
        cls,
        token: Token,
        email: Optional[str] = None,
        default_ttl_minutes: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> "Session":
        """Build a session from a token response."""
        issued_at = now or datetime.now(timezone.utc)
        expires_at = None
        if token.expires_in is not None:
            expires_at = issued_at + timedelta(seconds=token.expires_in)
        elif default_ttl_minutes:
            expires_at = issued_at + timedelta(minutes=default_ttl_minutes)
        
        return cls(
            access_token=token.access_token,
            token_type=token.token_type or "bearer",
            email=email,
            issued_at=issued_at,
            expires_at=expires_at,
        )
    
    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at
    
    def authorization_header(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}
