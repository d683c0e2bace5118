"""Async HTTP client for the finance REST API."""
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from fintrack.api.errors import (
    ApiConnectionError,
    ApiDecodeError,
    ApiResponseError,
    SessionExpiredError,
    extract_detail,
)
from fintrack.config import settings
from fintrack.models.auth import Session

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ApiClient:
    """
    Thin wrapper around ``httpx.AsyncClient``.
    
    The bearer token comes from the attached :class:`Session`, never from
    global state. Pass ``transport`` to route requests somewhere other than
    the network (tests use ``httpx.ASGITransport``).
    """
    
    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[Session] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.session = session
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout if timeout is not None else settings.request_timeout,
            transport=transport,
        )
    
    async def __aenter__(self) -> "ApiClient":
        return self
    
    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
    
    async def aclose(self) -> None:
        await self._client.aclose()
    
    def set_session(self, session: Optional[Session]) -> None:
        self.session = session
    
    def _auth_headers(self) -> Dict[str, str]:
        if self.session is None:
            logger.warning("No session attached; sending request without authorization")
            return {}
        if self.session.is_expired():
            raise SessionExpiredError(
                f"Session for {self.session.email or 'user'} expired at {self.session.expires_at}"
            )
        return self.session.authorization_header()
    
    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        authenticated: bool = True,
    ) -> Any:
        """Send a request and return the decoded JSON body (``None`` when empty)."""
        request_headers = self._auth_headers() if authenticated else {}
        if headers:
            request_headers.update(headers)
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        
        logger.debug("API request", extra={"method": method, "path": path, "params": params})
        try:
            resp = await self._client.request(
                method,
                path,
                params=params or None,
                json=json,
                data=data,
                headers=request_headers,
            )
        except httpx.RequestError as e:
            logger.error("API no response for %s %s: %s", method, path, e)
            raise ApiConnectionError(f"No response for {method} {path}: {e}", original=e) from e
        
        if resp.is_success:
            if resp.status_code == 204 or not resp.content:
                return None
            try:
                return resp.json()
            except ValueError as e:
                logger.error("API %s %s returned a non-JSON body", method, path, extra={"status": resp.status_code})
                raise ApiDecodeError(f"Invalid JSON from {method} {path}: {e}", body=resp.text) from e
        
        body = _decode_body(resp)
        detail = extract_detail(body, fallback=resp.reason_phrase or "Server error")
        logger.error("API error response %s: %s", resp.status_code, body)
        if resp.status_code == 401:
            logger.warning("Unauthorized request - token might be expired")
        raise ApiResponseError(resp.status_code, detail, body=body)
    
    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)
    
    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)
    
    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)
    
    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
    
    async def post_form(self, path: str, data: Dict[str, Any], authenticated: bool = False) -> Any:
        """POST as ``application/x-www-form-urlencoded`` (OAuth2 token endpoint)."""
        return await self.request(
            "POST",
            path,
            data=data,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            authenticated=authenticated,
        )


def _decode_body(resp: httpx.Response) -> Any:
    if resp.headers.get("content-type", "").startswith("application/json"):
        try:
            return resp.json()
        except ValueError:
            return resp.text
    return resp.text


def parse_model(model: Type[ModelT], data: Any) -> ModelT:
    """Validate a decoded body as ``model``; a shape mismatch raises :class:`ApiDecodeError`."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error("Unexpected %s response: %s", model.__name__, e)
        raise ApiDecodeError(
            f"Unexpected {model.__name__} response ({e.error_count()} validation errors)",
            body=data,
        ) from e


def parse_list(model: Type[ModelT], data: Any) -> List[ModelT]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise ApiDecodeError(f"Expected a list of {model.__name__}, got {type(data).__name__}", body=data)
    return [parse_model(model, item) for item in data]
