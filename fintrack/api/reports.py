"""Reporting endpoints."""
from datetime import date
from typing import Optional, Union

from fintrack.api.client import ApiClient, parse_model
from fintrack.models.reports import (
    BudgetPerformanceReport,
    MonthlySpendingReport,
    SpendingByCategoryReport,
    SpendingInsights,
    TransactionTrendsReport,
)

TREND_INTERVALS = ("daily", "weekly", "monthly")

DateLike = Union[date, str]


def _iso(value: DateLike) -> str:
    return value.isoformat() if isinstance(value, date) else value


class ReportsApi:
    """Read-only, pre-aggregated reports."""
    
    def __init__(self, client: ApiClient):
        self.client = client
    
    async def spending_by_category(
        self,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
    ) -> SpendingByCategoryReport:
        """
        Spending grouped by category.
        
        The date range is only sent when both ends are given; otherwise the
        server picks its default range.
        """
        params = None
        if start_date and end_date:
            params = {"start_date": _iso(start_date), "end_date": _iso(end_date)}
        data = await self.client.get("/reports/spending-by-category", params=params)
        return parse_model(SpendingByCategoryReport, data)
    
    async def monthly_spending(self, months: int = 6) -> MonthlySpendingReport:
        data = await self.client.get("/reports/monthly-spending", params={"months": months})
        return parse_model(MonthlySpendingReport, data)
    
    async def transaction_trends(
        self,
        interval: str = "monthly",
        timeframe: int = 12,
    ) -> TransactionTrendsReport:
        if interval not in TREND_INTERVALS:
            raise ValueError(f"interval must be one of {TREND_INTERVALS}, got {interval!r}")
        data = await self.client.get(
            "/reports/transaction-trends",
            params={"interval": interval, "timeframe": timeframe},
        )
        return parse_model(TransactionTrendsReport, data)
    
    async def budget_performance(self) -> BudgetPerformanceReport:
        data = await self.client.get("/reports/budget-performance")
        return parse_model(BudgetPerformanceReport, data)
    
    async def spending_insights(self) -> SpendingInsights:
        data = await self.client.get("/reports/spending-insights")
        return parse_model(SpendingInsights, data)
