from .retry import RetryPolicy, RetryExhaustedError, ResilientFetch, retry_with_backoff
from .budget_status import (
    derive_budget_status,
    progress_color,
    status_color,
    performance_bar_color,
    progress_value,
)
from .auth import AuthService

__all__ = [
    "RetryPolicy",
    "RetryExhaustedError",
    "ResilientFetch",
    "retry_with_backoff",
    "derive_budget_status",
    "progress_color",
    "status_color",
    "performance_bar_color",
    "progress_value",
    "AuthService",
]
