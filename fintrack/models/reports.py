"""Read-only report models returned by the reporting endpoints."""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ReportModel(BaseModel):
    """Base for server-computed aggregates; unknown fields are kept."""
    
    model_config = ConfigDict(extra="allow")


class CategorySpending(ReportModel):
    """Spending total for one category."""
    
    category_id: Optional[int] = None
    category_name: str
    total: float = 0.0
    percentage: float = Field(default=0.0, description="Share of total spending in the range")


class SpendingByCategoryReport(ReportModel):
    """Spending grouped by category for a date range."""
    
    spending_by_category: List[CategorySpending] = Field(default_factory=list)
    total_spending: float = 0.0
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    
    def top(self, n: int = 5) -> List[CategorySpending]:
        return self.spending_by_category[:n]


class MonthlySpending(ReportModel):
    """Spending total for one calendar month."""
    
    month: str = Field(..., description="Month key, e.g. '2024-03'")
    month_name: str = Field(..., description="Display label, e.g. 'Mar 2024'")
    total: float = 0.0


class MonthlySpendingReport(ReportModel):
    monthly_spending: List[MonthlySpending] = Field(default_factory=list)


class TrendPoint(ReportModel):
    """Aggregate for one interval bucket."""
    
    interval: str
    total_amount: float = 0.0
    transaction_count: int = 0


class TransactionTrendsReport(ReportModel):
    interval: str = "monthly"
    timeframe: int = 12
    trend_data: List[TrendPoint] = Field(default_factory=list)


class BudgetPerformance(ReportModel):
    """Performance figures for one budget."""
    
    budget_id: int
    budget_name: Optional[str] = None
    category: Optional[str] = None
    start_date: date
    end_date: date
    is_active: bool = False
    days_remaining: int = 0
    budget_amount: float
    spent: float = 0.0
    remaining: float = 0.0
    percentage_used: float = 0.0
    status: str = "On Track"
    daily_burn_rate: float = 0.0
    forecast_end_amount: float = 0.0
    forecast_status: str = "On Track"


class BudgetPerformanceReport(ReportModel):
    budget_performance: List[BudgetPerformance] = Field(default_factory=list)


class SpendingInsights(ReportModel):
    """Summary of the current month's spending."""
    
    this_month_spending: float = 0.0
    month_over_month_change: float = Field(default=0.0, description="Percent change against last month")
    biggest_expense_category: Optional[str] = None
    biggest_expense_amount: float = 0.0
    average_daily_spending: float = 0.0
    days_elapsed: int = 0
    days_in_month: int = 0
    transaction_count: int = 0
    average_transaction_amount: float = 0.0
