"""Errors raised by the API client."""
from typing import Any, Optional

NO_RESPONSE_MESSAGE = "No response from server. Is the API running?"


class FinanceApiError(Exception):
    """Base class for all client-side API failures."""


class ApiConnectionError(FinanceApiError):
    """The request was sent but no response came back."""
    
    def __init__(self, message: str, original: Optional[Exception] = None):
        super().__init__(message)
        self.original = original


class ApiResponseError(FinanceApiError):
    """The server answered with a non-2xx status."""
    
    def __init__(self, status_code: int, detail: str, body: Any = None):
        super().__init__(f"API error {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail
        self.body = body
    
    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


class ApiDecodeError(FinanceApiError):
    """A 2xx response whose body is not JSON or not the expected shape."""
    
    def __init__(self, message: str, body: Any = None):
        super().__init__(message)
        self.body = body


class NotAuthenticatedError(FinanceApiError):
    """An operation needs a session but none is attached."""


class SessionExpiredError(FinanceApiError):
    """The attached session is past its expiry; no request was sent."""


def extract_detail(body: Any, fallback: str = "") -> str:
    """
    Pull the human-readable ``detail`` out of an error body.
    
    FastAPI validation errors carry a list of ``{"loc", "msg"}`` objects
    under ``detail``; those are flattened to their messages.
    """
    if isinstance(body, dict) and "detail" in body:
        detail = body["detail"]
        if isinstance(detail, str):
            return detail
        if isinstance(detail, list):
            messages = []
            for item in detail:
                if isinstance(item, dict) and item.get("msg"):
                    loc = ".".join(str(p) for p in item.get("loc", []) if p != "body")
                    messages.append(f"{loc}: {item['msg']}" if loc else item["msg"])
                else:
                    messages.append(str(item))
            return "; ".join(messages)
        return str(detail)
    if isinstance(body, str) and body:
        return body
    return fallback


def user_message(error: Exception, fallback: str = "Unknown error") -> str:
    """Short user-facing text for a failed call."""
    if isinstance(error, ApiResponseError):
        return error.detail or fallback
    if isinstance(error, ApiConnectionError):
        return NO_RESPONSE_MESSAGE
    if isinstance(error, ApiDecodeError):
        return fallback
    if isinstance(error, SessionExpiredError):
        return "Your session has expired. Please log in again."
    if isinstance(error, NotAuthenticatedError):
        return "Please log in first."
    return str(error) or fallback
