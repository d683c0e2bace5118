"""Login / registration screen."""
import asyncio
import logging
from typing import Optional

from fintrack.api.errors import ApiConnectionError, ApiResponseError, FinanceApiError
from fintrack.screens.base import Screen
from fintrack.services.auth import AuthService
from fintrack.services.retry import SleepFunc

logger = logging.getLogger(__name__)

ALREADY_REGISTERED_DETAIL = "Email already registered"


class LoginScreen(Screen):
    """Credential form that signs in or registers through :class:`AuthService`."""
    
    def __init__(self, auth: AuthService, register: bool = False, sleep: SleepFunc = asyncio.sleep):
        super().__init__(auth.api, sleep)
        self.auth = auth
        self.register_mode = register
        self.email = ""
        self.password = ""
        self.success: Optional[str] = None
    
    @property
    def title(self) -> str:
        return "Register" if self.register_mode else "Login"
    
    @property
    def authenticated(self) -> bool:
        return self.auth.is_authenticated
    
    def toggle_mode(self) -> None:
        self.register_mode = not self.register_mode
        self.error = None
        self.success = None
    
    async def submit(self) -> bool:
        self.error = None
        self.success = None
        self.loading = True
        try:
            if self.register_mode:
                return await self._register()
            return await self._login()
        finally:
            if not self.closed:
                self.loading = False
    
    async def _login(self) -> bool:
        if await self.auth.login(self.email, self.password):
            return True
        self.error = "Login failed. Please check your credentials."
        return False
    
    async def _register(self) -> bool:
        try:
            await self.auth.register(self.email, self.password)
        except ApiResponseError as e:
            logger.error("Registration error: %s", e)
            if e.status_code == 400 and e.detail == ALREADY_REGISTERED_DETAIL:
                self.error = "This email is already registered. Please try logging in instead."
            else:
                self.error = "Registration failed: " + (e.detail or "Unknown error")
            return False
        except ApiConnectionError as e:
            logger.error("Registration error: %s", e)
            self.error = "No response from server. Is the API running?"
            return False
        except FinanceApiError as e:
            logger.error("Registration error: %s", e)
            self.error = "Registration failed: Unknown error"
            return False
        
        self.success = "Registration successful! You can now log in."
        self.register_mode = False
        self.password = ""
        return True
