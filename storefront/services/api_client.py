"""
Storefront API Client

HTTP client for the remote storefront REST API: product listing, user
profile and statistics, sign in and sign up.
"""

import logging
from typing import Optional, Any

import httpx

from ..models.product import Product
from ..models.user import AuthResponse, ProfileStats, UserProfile

logger = logging.getLogger(__name__)

PRODUCT_FETCH_MESSAGE = "Could not load products. Please check your connection and try again."

STAT_ENDPOINTS = {
    "orders": "/api/orders",
    "wishlist": "/api/wishlist",
    "reviews": "/api/reviews",
    "points": "/api/points",
}


class ProductFetchError(Exception):
    """Product listing could not be loaded; the caller may retry"""

    def __init__(self, message: str = PRODUCT_FETCH_MESSAGE):
        super().__init__(message)
        self.message = message


class AuthError(Exception):
    """Sign in or sign up was rejected or failed"""


def _count(payload: Any, key: str) -> Optional[int]:
    """
    Read a statistic from a loosely shaped response.

    Accepts a list (its length), a bare number, or an object carrying
    count/total/value/<key> as a number or a list.
    """
    if isinstance(payload, list):
        return len(payload)
    if isinstance(payload, (int, float)) and not isinstance(payload, bool):
        return int(payload)
    if isinstance(payload, dict):
        for field in ("count", "total", "value", key):
            value = payload.get(field)
            if isinstance(value, list):
                return len(value)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return int(value)
    return None


class StorefrontClient:
    """Client for the remote storefront API"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize storefront client.

        Args:
            base_url: Base URL of the storefront API
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def set_auth_token(self, token: Optional[str] = None) -> None:
        """Set or clear the bearer token sent with every request"""
        if token:
            self._http_client.headers["Authorization"] = f"Bearer {token}"
        else:
            self._http_client.headers.pop("Authorization", None)

    @property
    def authenticated(self) -> bool:
        return "Authorization" in self._http_client.headers

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Make an HTTP request and decode the JSON response"""
        response = await self._http_client.request(method, path, json=body, params=params)

        if response.status_code >= 400:
            logger.error(f"Request failed: {method} {path} -> {response.status_code} - {response.text}")
            response.raise_for_status()

        return response.json()

    # ==================== Product APIs ====================

    async def list_products(self) -> list[Product]:
        """
        Fetch the product listing.

        Raises:
            ProductFetchError: the request failed or returned an unusable body
        """
        try:
            payload = await self._request("GET", "/api/products")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Product listing failed: {e}")
            raise ProductFetchError() from e

        records = payload.get("products") if isinstance(payload, dict) else payload
        if not isinstance(records, list):
            logger.warning(f"Unexpected product listing shape: {type(payload).__name__}")
            raise ProductFetchError()

        products = [Product.from_api(record) for record in records if isinstance(record, dict)]
        return [product for product in products if product is not None]

    # ==================== User APIs ====================

    async def get_me(self) -> UserProfile:
        """Get the signed-in user (requires a bearer token)"""
        return UserProfile.from_api(await self._request("GET", "/api/users/me"))

    async def get_user(self, user_id: str) -> UserProfile:
        """Get a user by ID"""
        return UserProfile.from_api(await self._request("GET", f"/api/users/{user_id}"))

    async def get_profile_stats(self, user_id: str) -> ProfileStats:
        """
        Fetch profile statistics.

        Each statistic is fetched independently; one that fails is left as
        None rather than failing the whole profile.
        """
        stats = {}
        for name, path in STAT_ENDPOINTS.items():
            try:
                payload = await self._request("GET", path, params={"user_id": user_id})
            except (httpx.HTTPError, ValueError) as e:
                logger.debug(f"Profile stat '{name}' unavailable: {e}")
                continue
            stats[name] = _count(payload, name)
        return ProfileStats(**stats)

    # ==================== Auth APIs ====================

    async def _auth(self, path: str, body: dict) -> AuthResponse:
        try:
            payload = await self._request("POST", path, body=body)
        except httpx.HTTPStatusError as e:
            try:
                error_body = e.response.json()
            except ValueError:
                error_body = None
            detail = error_body.get("message") if isinstance(error_body, dict) else None
            raise AuthError(detail or "Invalid credentials") from e
        except (httpx.HTTPError, ValueError) as e:
            raise AuthError("Could not reach the server. Please try again.") from e

        if not isinstance(payload, dict) or not payload.get("token"):
            raise AuthError("Unexpected response from the server")
        return AuthResponse(token=payload["token"], user=payload.get("user") or {})

    async def sign_up(self, name: str, email: str, password: str) -> AuthResponse:
        """Create an account"""
        return await self._auth(
            "/api/users/signup",
            {"name": name, "email": email, "password": password},
        )

    async def sign_in(self, email: str, password: str) -> AuthResponse:
        """Sign in with email and password"""
        return await self._auth("/api/users/signin", {"email": email, "password": password})
