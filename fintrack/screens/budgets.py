"""Budgets screen: active budget status plus budget CRUD."""
import asyncio
import logging
from typing import Any, Awaitable, List, Optional

from pydantic import BaseModel

from fintrack.api.errors import ApiResponseError, FinanceApiError
from fintrack.api.facade import FinanceApi
from fintrack.api.resources import ResourceApi
from fintrack.models.budget import Budget, BudgetStatus
from fintrack.models.category import Category
from fintrack.screens.base import CrudScreen, category_name
from fintrack.screens.forms import BudgetForm
from fintrack.services.budget_status import (
    derive_budget_status,
    progress_color,
    progress_value,
    status_color,
)
from fintrack.services.retry import SleepFunc
from fintrack.utils.formatting import format_currency

logger = logging.getLogger(__name__)


class BudgetRow(BaseModel):
    """One active budget as displayed."""
    
    budget: BudgetStatus
    status: str
    status_color: str
    progress_color: str
    progress_value: float
    percentage_label: str
    spent_label: str
    
    @classmethod
    def from_status(cls, budget: BudgetStatus) -> "BudgetRow":
        p = budget.percentage_used
        status = derive_budget_status(p)
        return cls(
            budget=budget,
            status=status,
            status_color=status_color(status),
            progress_color=progress_color(p),
            progress_value=progress_value(p),
            percentage_label=f"{round(p)}%",
            spent_label=f"{format_currency(budget.spent)} of {format_currency(budget.amount)}",
        )


def _detail(error: Exception) -> str:
    if isinstance(error, ApiResponseError) and error.detail:
        return error.detail
    return str(error)


class BudgetsScreen(CrudScreen[Budget, BudgetForm]):
    title = "Budgets"
    resource_label = "budget"
    
    def __init__(self, api: FinanceApi, sleep: SleepFunc = asyncio.sleep):
        self.budget_status: List[BudgetStatus] = []
        self.categories: List[Category] = []
        super().__init__(api, sleep)
    
    @property
    def resource(self) -> ResourceApi:
        return self.api.budgets
    
    def empty_form(self) -> BudgetForm:
        form = BudgetForm()
        if self.categories:
            form.category_id = str(self.categories[0].id)
        return form
    
    def form_from(self, record: Budget) -> BudgetForm:
        return BudgetForm.from_record(record)
    
    def validate_form(self) -> Optional[str]:
        if self.form.missing_required():
            return "Please fill in all required fields"
        return None
    
    def save_error_message(self, error: Exception) -> str:
        return f"Failed to save budget: {_detail(error)}"
    
    def delete_error_message(self, error: Exception) -> str:
        return f"Failed to delete budget: {_detail(error)}"
    
    def load_tasks(self) -> List[Awaitable[Any]]:
        return [self.fetch_items(), self.fetch_categories()]
    
    async def fetch_items(self) -> None:
        """Fetch active budget status, then the plain budget list used for editing."""
        self.loading = True
        try:
            self.budget_status = await self.api.budgets.status()
            self.items = await self.api.budgets.list()
            self.error = None
        except FinanceApiError as e:
            logger.error("Failed to fetch budgets: %s", e)
            self.budget_status = []
            self.items = []
            self.error = "Failed to load budgets. Please try again."
        finally:
            if not self.closed:
                self.loading = False
    
    async def fetch_categories(self) -> None:
        try:
            self.categories = await self.api.categories.list()
        except FinanceApiError as e:
            logger.error("Failed to fetch categories: %s", e)
            return
        
        if self.categories and not self.form.category_id:
            self.update_form(category_id=str(self.categories[0].id))
    
    def rows(self) -> List[BudgetRow]:
        return [BudgetRow.from_status(b) for b in self.budget_status]
    
    def category_name(self, category_id: Optional[int]) -> str:
        return category_name(self.categories, category_id)
