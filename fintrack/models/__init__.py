from .auth import Token, User, Session
from .transaction import Transaction, TransactionCreate
from .category import Category, CategoryCreate
from .budget import Budget, BudgetCreate, BudgetStatus
from .reports import (
    CategorySpending,
    SpendingByCategoryReport,
    MonthlySpending,
    MonthlySpendingReport,
    TrendPoint,
    TransactionTrendsReport,
    BudgetPerformance,
    BudgetPerformanceReport,
    SpendingInsights,
)

__all__ = [
    "Token",
    "User",
    "Session",
    "Transaction",
    "TransactionCreate",
    "Category",
    "CategoryCreate",
    "Budget",
    "BudgetCreate",
    "BudgetStatus",
    "CategorySpending",
    "SpendingByCategoryReport",
    "MonthlySpending",
    "MonthlySpendingReport",
    "TrendPoint",
    "TransactionTrendsReport",
    "BudgetPerformance",
    "BudgetPerformanceReport",
    "SpendingInsights",
]
