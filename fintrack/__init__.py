"""Async client for the personal finance tracker API."""
from .api import FinanceApi, ApiClient, FinanceApiError
from .services import AuthService, ResilientFetch, RetryPolicy, derive_budget_status, progress_color
from .storage import SessionStore

__version__ = "1.0.0"

__all__ = [
    "FinanceApi",
    "ApiClient",
    "FinanceApiError",
    "AuthService",
    "ResilientFetch",
    "RetryPolicy",
    "derive_budget_status",
    "progress_color",
    "SessionStore",
]
