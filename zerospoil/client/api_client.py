"""
Async client for the ZeroSpoil HTTP API.

One aiohttp session (with its cookie jar) is shared by every service on the
client, so signing in through `auth` authenticates later `analytics` calls.
"""

import datetime
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from zerospoil.config.settings import get_settings
from zerospoil.utils.error_handler import AppError

logger = logging.getLogger(__name__)


class ApiClientError(AppError):
    """Raised when the API answers with a non-2xx status."""


class HttpTransport:
    """Owns the aiohttp session used by the API services."""

    def __init__(self, base_url: str, access_token: Optional[str] = None):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self._session: Optional[aiohttp.ClientSession] = None

    async def get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(cookie_jar=aiohttp.CookieJar(unsafe=True))
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                      json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Send a request and return the JSON body with the HTTP status under `_status`."""
        session = await self.get_session()
        headers = {"Authorization": f"Bearer {self.access_token}"} if self.access_token else None
        async with session.request(method, f"{self.base_url}{path}", params=params,
                                   json=json, headers=headers) as response:
            try:
                body = await response.json(content_type=None)
            except ValueError:
                body = None
            if not isinstance(body, dict):
                body = {}
            body["_status"] = response.status
            return body


def _checked(body: Dict[str, Any], message: str, use_server_error: bool = False) -> Dict[str, Any]:
    status = body.pop("_status", 200)
    if status >= 400:
        if use_server_error and body.get("error"):
            message = body["error"]
        logger.error(f"{message} (status {status})")
        raise ApiClientError(message, status_code=status)
    return body


class AnalyticsApi:
    """Analytics and waste log endpoints."""

    def __init__(self, transport: HttpTransport):
        self.transport = transport

    async def get_analytics(self, period: int = 30) -> Dict[str, Any]:
        body = await self.transport.request("GET", "/api/analytics", params={"period": str(period)})
        return _checked(body, "Failed to fetch analytics").get("data")

    async def get_waste_logs(self, filters: Optional[Dict[str, Optional[str]]] = None) -> List[Dict[str, Any]]:
        params = {key: value for key, value in (filters or {}).items()
                  if key in ("action", "start_date", "end_date") and value}
        body = await self.transport.request("GET", "/api/waste-logs", params=params)
        return _checked(body, "Failed to fetch waste logs").get("data") or []

    async def create_waste_log(self, waste_log: Dict[str, Any]) -> Dict[str, Any]:
        body = await self.transport.request("POST", "/api/waste-logs", json=waste_log)
        return _checked(body, "Failed to create waste log").get("data")

    async def get_waste_reduction(self, period: int = 30) -> Dict[str, Any]:
        body = await self.transport.request("GET", "/api/analytics/waste-reduction", params={"days": str(period)})
        return _checked(body, "Failed to calculate waste reduction").get("data")

    async def get_category_insights(self) -> List[Dict[str, Any]]:
        body = await self.transport.request("GET", "/api/analytics/category-insights")
        return _checked(body, "Failed to get category insights").get("data") or []


class FoodApi:
    """Pantry endpoints."""

    def __init__(self, transport: HttpTransport):
        self.transport = transport

    async def get_food_items(self, filters: Optional[Dict[str, Optional[str]]] = None) -> List[Dict[str, Any]]:
        params = {key: value for key, value in (filters or {}).items()
                  if key in ("status", "category", "storage_location") and value and value != "all"}
        body = await self.transport.request("GET", "/api/food-items", params=params)
        return _checked(body, "Failed to fetch food items", use_server_error=True).get("data") or []

    async def create_food_item(self, food_item: Dict[str, Any]) -> Dict[str, Any]:
        body = await self.transport.request("POST", "/api/food-items", json=food_item)
        return _checked(body, "Failed to create food item", use_server_error=True).get("data")

    async def update_food_item(self, item_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        body = await self.transport.request("PUT", f"/api/food-items/{item_id}", json=updates)
        return _checked(body, "Failed to update food item", use_server_error=True).get("data")

    async def delete_food_item(self, item_id: str) -> None:
        body = await self.transport.request("DELETE", f"/api/food-items/{item_id}")
        _checked(body, "Failed to delete food item", use_server_error=True)

    async def get_expiring_items(self, days: int = 3,
                                 today: Optional[datetime.date] = None) -> List[Dict[str, Any]]:
        """Items that expire within `days`, soonest first; already expired items are left out."""
        cutoff = ((today or datetime.date.today()) + datetime.timedelta(days=days)).isoformat()
        expiring = [item for item in await self.get_food_items()
                    if item.get("expiration_date") and item.get("status") != "expired"
                    and item["expiration_date"] <= cutoff]
        return sorted(expiring, key=lambda item: item["expiration_date"])


class DonationsApi:
    """Donation endpoints."""

    def __init__(self, transport: HttpTransport):
        self.transport = transport

    async def get_donations(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"status": status} if status else {}
        body = await self.transport.request("GET", "/api/donations", params=params)
        return _checked(body, "Failed to fetch donations").get("data") or []

    async def get_donation(self, donation_id: str) -> Dict[str, Any]:
        body = await self.transport.request("GET", f"/api/donations/{donation_id}")
        return _checked(body, "Failed to fetch donation").get("data")

    async def create_donation(self, donation: Dict[str, Any]) -> Dict[str, Any]:
        body = await self.transport.request("POST", "/api/donations", json=donation)
        return _checked(body, "Failed to create donation").get("data")

    async def update_donation(self, donation_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        body = await self.transport.request("PUT", f"/api/donations/{donation_id}", json=updates)
        return _checked(body, "Failed to update donation").get("data")

    async def delete_donation(self, donation_id: str) -> None:
        body = await self.transport.request("DELETE", f"/api/donations/{donation_id}")
        _checked(body, "Failed to delete donation")


class AuthApi:
    """Account and profile endpoints."""

    def __init__(self, transport: HttpTransport):
        self.transport = transport

    async def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> Dict[str, Any]:
        body = await self.transport.request("POST", "/api/auth/signup", json={
            "email": email, "password": password, "full_name": full_name,
        })
        return _checked(body, "Failed to sign up", use_server_error=True)

    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        body = await self.transport.request("POST", "/api/auth/signin", json={
            "email": email, "password": password,
        })
        return _checked(body, "Failed to sign in", use_server_error=True)

    async def sign_out(self) -> Dict[str, Any]:
        body = await self.transport.request("POST", "/api/auth/signout")
        return _checked(body, "Failed to sign out", use_server_error=True)

    async def get_user_profile(self) -> Dict[str, Any]:
        body = await self.transport.request("GET", "/api/profile")
        return _checked(body, "Failed to fetch user profile").get("data")

    async def update_user_profile(self, updates: Dict[str, Any]) -> Dict[str, Any]:
        body = await self.transport.request("PUT", "/api/profile", json=updates)
        return _checked(body, "Failed to update user profile").get("data")


class ApiClient:
    """Entry point grouping the API services."""

    def __init__(self, base_url: str, access_token: Optional[str] = None):
        self.transport = HttpTransport(base_url, access_token)
        self.analytics = AnalyticsApi(self.transport)
        self.food = FoodApi(self.transport)
        self.donations = DonationsApi(self.transport)
        self.auth = AuthApi(self.transport)

    async def close(self) -> None:
        await self.transport.close()

    async def __aenter__(self) -> 'ApiClient':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


def create_api_client(access_token: Optional[str] = None) -> ApiClient:
    """ApiClient pointed at the configured `API_BASE_URL`."""
    return ApiClient(get_settings().api_base_url, access_token)
