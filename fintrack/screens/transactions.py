"""Transactions screen."""
import asyncio
import logging
from typing import Any, Awaitable, List, Optional

from fintrack.api.errors import FinanceApiError
from fintrack.api.facade import FinanceApi
from fintrack.api.resources import ResourceApi
from fintrack.models.category import Category
from fintrack.models.transaction import Transaction
from fintrack.screens.base import CrudScreen, category_name
from fintrack.screens.forms import TransactionForm
from fintrack.services.retry import ResilientFetch, RetryExhaustedError, RetryPolicy, SleepFunc

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load transactions. Please try again."


class TransactionsScreen(CrudScreen[Transaction, TransactionForm]):
    title = "Transactions"
    resource_label = "transaction"
    
    def __init__(
        self,
        api: FinanceApi,
        sleep: SleepFunc = asyncio.sleep,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        super().__init__(api, sleep)
        self.categories: List[Category] = []
        self.fetcher: ResilientFetch[List[Transaction]] = ResilientFetch(
            api.transactions.list,
            policy=retry_policy,
            sleep=sleep,
            description="list transactions",
        )
    
    @property
    def resource(self) -> ResourceApi:
        return self.api.transactions
    
    def empty_form(self) -> TransactionForm:
        return TransactionForm()
    
    def form_from(self, record: Transaction) -> TransactionForm:
        return TransactionForm.from_record(record)
    
    def load_tasks(self) -> List[Awaitable[Any]]:
        return [self.fetch_items(), self.fetch_categories()]
    
    async def fetch_items(self) -> None:
        """Fetch transactions with retries; loading stays set for the whole sequence."""
        self.loading = True
        try:
            transactions = await self.fetcher.start()
        except RetryExhaustedError as e:
            logger.error("Failed to fetch transactions: %s", e.last_error)
            # The previous list is left on screen rather than cleared. Not yet
            # decided whether stale rows or an empty table is the better failure mode.
            self.error = LOAD_ERROR
            return
        finally:
            if not self.closed:
                self.loading = False
        
        self.items = transactions
        self.error = None
    
    async def fetch_categories(self) -> None:
        try:
            self.categories = await self.api.categories.list()
        except FinanceApiError as e:
            # Transactions are the primary data; a missing category list only degrades names.
            logger.error("Failed to fetch categories: %s", e)
    
    def category_name(self, category_id: Optional[int]) -> str:
        return category_name(self.categories, category_id)
    
    async def close(self) -> None:
        self.fetcher.cancel()
        await super().close()
