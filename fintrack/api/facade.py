"""Single entry point bundling every endpoint group over one client."""
from typing import Optional

import httpx

from fintrack.api.auth import AuthApi
from fintrack.api.client import ApiClient
from fintrack.api.reports import ReportsApi
from fintrack.api.resources import BudgetsApi, CategoriesApi, TransactionsApi
from fintrack.config import Settings, settings as default_settings
from fintrack.models.auth import Session


class FinanceApi:
    """All endpoint groups sharing one :class:`ApiClient`."""
    
    def __init__(self, client: ApiClient):
        self.client = client
        self.auth = AuthApi(client)
        self.transactions = TransactionsApi(client)
        self.categories = CategoriesApi(client)
        self.budgets = BudgetsApi(client)
        self.reports = ReportsApi(client)
    
    @classmethod
    def from_settings(
        cls,
        config: Optional[Settings] = None,
        session: Optional[Session] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "FinanceApi":
        config = config or default_settings
        client = ApiClient(
            base_url=config.api_base_url,
            session=session,
            timeout=config.request_timeout,
            transport=transport,
        )
        return cls(client)
    
    @property
    def session(self) -> Optional[Session]:
        return self.client.session
    
    def set_session(self, session: Optional[Session]) -> None:
        self.client.set_session(session)
    
    async def __aenter__(self) -> "FinanceApi":
        return self
    
    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
    
    async def aclose(self) -> None:
        await self.client.aclose()
