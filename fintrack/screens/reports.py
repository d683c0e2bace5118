"""Reports screen: five independent report sections with their own filters."""
import asyncio
import logging
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from fintrack.api.errors import FinanceApiError, user_message
from fintrack.api.facade import FinanceApi
from fintrack.api.reports import TREND_INTERVALS
from fintrack.screens.base import Screen
from fintrack.services.budget_status import performance_bar_color, progress_value
from fintrack.services.retry import SleepFunc
from fintrack.utils.formatting import format_currency

logger = logging.getLogger(__name__)

SPENDING_BY_CATEGORY = "spending_by_category"
MONTHLY_SPENDING = "monthly_spending"
TRANSACTION_TRENDS = "transaction_trends"
BUDGET_PERFORMANCE = "budget_performance"
SPENDING_INSIGHTS = "spending_insights"

SECTIONS = (
    SPENDING_BY_CATEGORY,
    MONTHLY_SPENDING,
    TRANSACTION_TRENDS,
    BUDGET_PERFORMANCE,
    SPENDING_INSIGHTS,
)

_FALLBACK_ERRORS = {
    SPENDING_BY_CATEGORY: "Error fetching category data",
    MONTHLY_SPENDING: "Error fetching monthly data",
    TRANSACTION_TRENDS: "Error fetching trend data",
    BUDGET_PERFORMANCE: "Error fetching budget data",
    SPENDING_INSIGHTS: "Error fetching insights",
}


class ReportsScreen(Screen):
    """
    Each section keeps its own data, loading flag and error, so one failing
    report never blanks the others. Changing a filter refetches only the
    section it drives.
    """
    
    title = "Financial Reports"
    
    def __init__(
        self,
        api: FinanceApi,
        sleep: SleepFunc = asyncio.sleep,
        today: Callable[[], date] = date.today,
    ):
        super().__init__(api, sleep)
        start = today()
        self.date_range: Tuple[date, date] = (start, start)
        self.months = 6
        self.interval = "monthly"
        self.timeframe = 12
        
        self.data: Dict[str, Any] = {name: None for name in SECTIONS}
        self.section_loading: Dict[str, bool] = {name: False for name in SECTIONS}
        self.section_errors: Dict[str, Optional[str]] = {name: None for name in SECTIONS}
        
        self._fetchers: Dict[str, Callable[[], Awaitable[Any]]] = {
            SPENDING_BY_CATEGORY: lambda: self.api.reports.spending_by_category(*self.date_range),
            MONTHLY_SPENDING: lambda: self.api.reports.monthly_spending(self.months),
            TRANSACTION_TRENDS: lambda: self.api.reports.transaction_trends(self.interval, self.timeframe),
            BUDGET_PERFORMANCE: self.api.reports.budget_performance,
            SPENDING_INSIGHTS: self.api.reports.spending_insights,
        }
    
    @property
    def any_loading(self) -> bool:
        return any(self.section_loading.values())
    
    def load_tasks(self) -> List[Awaitable[Any]]:
        return [self.fetch_section(name) for name in SECTIONS]
    
    async def fetch_section(self, name: str) -> None:
        if name not in self._fetchers:
            raise KeyError(f"Unknown report section: {name}")
        
        self.section_loading[name] = True
        try:
            self.data[name] = await self._fetchers[name]()
            self.section_errors[name] = None
        except FinanceApiError as e:
            logger.error("Failed to fetch %s: %s", name, e)
            self.section_errors[name] = user_message(e, _FALLBACK_ERRORS[name])
        finally:
            if not self.closed:
                self.section_loading[name] = False
    
    async def refresh(self, name: str) -> None:
        await self.spawn(self.fetch_section(name))
    
    # Filters
    
    async def set_date_range(self, start_date: date, end_date: date) -> None:
        if end_date < start_date:
            raise ValueError("end_date must not be before start_date")
        self.date_range = (start_date, end_date)
        await self.refresh(SPENDING_BY_CATEGORY)
    
    async def set_months(self, months: int) -> None:
        if months < 1:
            raise ValueError("months must be positive")
        self.months = months
        await self.refresh(MONTHLY_SPENDING)
    
    async def set_trend_options(self, interval: Optional[str] = None, timeframe: Optional[int] = None) -> None:
        if interval is not None:
            if interval not in TREND_INTERVALS:
                raise ValueError(f"interval must be one of {TREND_INTERVALS}")
            self.interval = interval
        if timeframe is not None:
            if timeframe < 1:
                raise ValueError("timeframe must be positive")
            self.timeframe = timeframe
        await self.refresh(TRANSACTION_TRENDS)
    
    # Display helpers
    
    def budget_bars(self) -> List[Dict[str, Any]]:
        """Bar colour and fill for each budget in the performance report."""
        report = self.data[BUDGET_PERFORMANCE]
        if report is None:
            return []
        return [
            {
                "budget_id": b.budget_id,
                "color": performance_bar_color(b.percentage_used),
                "value": progress_value(b.percentage_used),
                "label": f"{b.percentage_used:.1f}% used",
                "spent_label": f"{format_currency(b.spent)} of {format_currency(b.budget_amount)}",
            }
            for b in report.budget_performance
        ]
