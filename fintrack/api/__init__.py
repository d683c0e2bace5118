from .client import ApiClient
from .errors import (
    FinanceApiError,
    ApiConnectionError,
    ApiDecodeError,
    ApiResponseError,
    NotAuthenticatedError,
    SessionExpiredError,
    user_message,
)
from .auth import AuthApi
from .resources import ResourceApi, TransactionsApi, CategoriesApi, BudgetsApi
from .reports import ReportsApi
from .facade import FinanceApi

__all__ = [
    "ApiClient",
    "FinanceApiError",
    "ApiConnectionError",
    "ApiDecodeError",
    "ApiResponseError",
    "NotAuthenticatedError",
    "SessionExpiredError",
    "user_message",
    "AuthApi",
    "ResourceApi",
    "TransactionsApi",
    "CategoriesApi",
    "BudgetsApi",
    "ReportsApi",
    "FinanceApi",
]
