from .base import Screen, CrudScreen, Notification
from .forms import TransactionForm, CategoryForm, BudgetForm
from .transactions import TransactionsScreen
from .categories import CategoriesScreen
from .budgets import BudgetsScreen, BudgetRow
from .dashboard import DashboardScreen
from .reports import ReportsScreen
from .login import LoginScreen

__all__ = [
    "Screen",
    "CrudScreen",
    "Notification",
    "TransactionForm",
    "CategoryForm",
    "BudgetForm",
    "TransactionsScreen",
    "CategoriesScreen",
    "BudgetsScreen",
    "BudgetRow",
    "DashboardScreen",
    "ReportsScreen",
    "LoginScreen",
]
