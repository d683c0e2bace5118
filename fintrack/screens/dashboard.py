"""Dashboard screen: this month at a glance."""
import asyncio
import logging
from datetime import date
from typing import Any, Awaitable, Callable, List, Optional

from fintrack.api.errors import FinanceApiError
from fintrack.api.facade import FinanceApi
from fintrack.models.reports import CategorySpending, MonthlySpending, SpendingInsights
from fintrack.screens.base import Screen
from fintrack.services.retry import SleepFunc
from fintrack.utils.formatting import format_currency

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load dashboard data. Please ensure the API is running."
TOP_CATEGORIES = 5
TREND_MONTHS = 6


class DashboardScreen(Screen):
    title = "Financial Dashboard"
    
    def __init__(
        self,
        api: FinanceApi,
        sleep: SleepFunc = asyncio.sleep,
        today: Callable[[], date] = date.today,
    ):
        super().__init__(api, sleep)
        self.today = today
        self.insights: Optional[SpendingInsights] = None
        self.category_data: List[CategorySpending] = []
        self.monthly_data: List[MonthlySpending] = []
    
    def load_tasks(self) -> List[Awaitable[Any]]:
        return [self.fetch_dashboard_data()]
    
    async def fetch_dashboard_data(self) -> None:
        """Insights, top categories for the current month, then the monthly series."""
        self.loading = True
        try:
            self.insights = await self.api.reports.spending_insights()
            
            today = self.today()
            first_day = today.replace(day=1)
            by_category = await self.api.reports.spending_by_category(first_day, today)
            if by_category.spending_by_category:
                self.category_data = by_category.top(TOP_CATEGORIES)
            
            monthly = await self.api.reports.monthly_spending(TREND_MONTHS)
            if monthly.monthly_spending:
                self.monthly_data = monthly.monthly_spending
            
            self.error = None
        except FinanceApiError as e:
            logger.error("Failed to fetch dashboard data: %s", e)
            self.error = LOAD_ERROR
        finally:
            if not self.closed:
                self.loading = False
    
    def this_month_text(self) -> Optional[str]:
        if self.insights is None:
            return None
        return format_currency(self.insights.this_month_spending)
    
    def biggest_expense_text(self) -> Optional[str]:
        """e.g. "Food: $135.40"; None before load or with no spending."""
        if self.insights is None or not self.insights.biggest_expense_category:
            return None
        return f"{self.insights.biggest_expense_category}: {format_currency(self.insights.biggest_expense_amount)}"
    
    def month_over_month_text(self) -> Optional[str]:
        if self.insights is None:
            return None
        change = self.insights.month_over_month_change
        if change > 0:
            return f"Up {change:.1f}% from last month"
        if change < 0:
            return f"Down {abs(change):.1f}% from last month"
        return "No change from last month"
    
    def month_progress(self) -> float:
        """Share of the current month elapsed, in percent."""
        if self.insights is None or not self.insights.days_in_month:
            return 0.0
        return self.insights.days_elapsed / self.insights.days_in_month * 100
