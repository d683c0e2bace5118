"""Authentication endpoints."""
import logging

from fintrack.api.client import ApiClient, parse_model
from fintrack.api.errors import NotAuthenticatedError
from fintrack.models.auth import Token, User

logger = logging.getLogger(__name__)


class AuthApi:
    """Credential exchange and user endpoints."""
    
    def __init__(self, client: ApiClient):
        self.client = client
    
    async def login(self, email: str, password: str) -> Token:
        """Exchange credentials for a bearer token (OAuth2 password form)."""
        data = await self.client.post_form("/token", {"username": email, "password": password})
        token = parse_model(Token, data)
        logger.info("Login succeeded", extra={"email": email})
        return token
    
    async def register(self, email: str, password: str) -> User:
        data = await self.client.request(
            "POST",
            "/users/",
            json={"email": email, "password": password},
            authenticated=False,
        )
        logger.info("Registered user", extra={"email": email})
        return parse_model(User, data)
    
    async def current_user(self) -> User:
        """The signed-in user. Needs an attached session; no request is sent without one."""
        if self.client.session is None:
            raise NotAuthenticatedError("current_user needs a session; log in first")
        data = await self.client.get("/users/me")
        return parse_model(User, data)
