"""Async HTTP client for the marketplace API.

Session state lives on a :class:`SessionContext` owned by the caller; an
expired token clears that context and notifies ``on_session_expired``
instead of reaching into any process-wide state.
"""

from typing import Any, Callable, Dict, Optional

import httpx

from urbanstay.config import settings
from urbanstay.utils.logging import get_logger

logger = get_logger("client")

GENERIC_ERROR = "Request failed, please try again"


class ApiError(Exception):
    """Non-2xx response (or transport failure, ``status_code == 0``)."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class SessionContext:
    """Credentials for one signed-in user."""

    def __init__(self, on_session_expired: Optional[Callable[[], None]] = None) -> None:
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None
        self.on_session_expired = on_session_expired

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def set(self, token: str, user: Optional[Dict[str, Any]] = None) -> None:
        self.token = token
        self.user = user

    def clear(self) -> None:
        """Drop credentials; the callback fires only if there was a session."""
        had_session = self.token is not None
        self.token = None
        self.user = None
        if had_session and self.on_session_expired is not None:
            self.on_session_expired()

    def headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}


class MarketplaceClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[SessionContext] = None,
        timeout: Optional[httpx.Timeout] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.session = session or SessionContext()
        self.timeout = timeout or httpx.Timeout(
            settings.client_timeout_seconds,
            connect=settings.client_connect_timeout_seconds,
        )
        self.transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        *,
        auth: bool = False,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        headers = self.session.headers() if auth else {}
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                resp = await client.request(method, path, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.error("api_request_failed", method=method, path=path, error=str(e))
            raise ApiError(0, GENERIC_ERROR) from e

        if resp.status_code == 401 and auth:
            logger.info("session_expired", path=path)
            self.session.clear()

        if not resp.is_success:
            raise ApiError(resp.status_code, _error_message(resp))

        return resp.json()

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self._request(
            "POST", "/api/auth/login", json={"email": email, "password": password}
        )
        self.session.set(data["access_token"], data.get("user"))
        return data

    def logout(self) -> None:
        self.session.token = None
        self.session.user = None

    async def search_properties(self, **filters: Any) -> Dict[str, Any]:
        """Keyword arguments are sent as-is, e.g. ``city="Pune", minPrice=5000000``."""
        params = {k: v for k, v in filters.items() if v is not None}
        return await self._request("GET", "/api/properties/", params=params)

    async def get_property(self, property_id: int) -> Dict[str, Any]:
        data = await self._request("GET", f"/api/properties/{property_id}")
        return data["property"]

    async def alert_matches(self, alert_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/api/alerts/{alert_id}/matches", auth=True)

    async def health(self) -> bool:
        try:
            data = await self._request("GET", "/api/health")
        except ApiError:
            return False
        return data.get("status") == "healthy"


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return GENERIC_ERROR
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return GENERIC_ERROR
