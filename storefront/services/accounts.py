"""Account session: token and user persistence, profile view"""

import logging
from typing import Optional

import httpx

from ..database.orders import OrderDatabase
from ..database.store import KeyValueStore, TOKEN_KEY, USER_KEY
from ..models.user import ProfileResponse, ProfileStats, UserProfile
from .api_client import StorefrontClient

logger = logging.getLogger(__name__)


class AccountService:
    """Signs users in and out and keeps the session in the store"""

    def __init__(self, store: KeyValueStore, client: StorefrontClient):
        self.store = store
        self.client = client

    async def restore(self) -> bool:
        """Load a persisted token into the client; True if one was found"""
        token = await self.store.get_item(TOKEN_KEY)
        self.client.set_auth_token(token)
        return bool(token)

    async def _persist(self, token: str, user: dict) -> UserProfile:
        await self.store.set_item(TOKEN_KEY, token)
        await self.store.write_json(USER_KEY, user)
        self.client.set_auth_token(token)
        return UserProfile.from_api(user)

    async def sign_in(self, email: str, password: str) -> UserProfile:
        auth = await self.client.sign_in(email, password)
        profile = await self._persist(auth.token, auth.user)
        logger.info(f"Signed in as {profile.email or profile.name}")
        return profile

    async def sign_up(self, name: str, email: str, password: str) -> UserProfile:
        auth = await self.client.sign_up(name, email, password)
        profile = await self._persist(auth.token, auth.user)
        logger.info(f"Signed up as {profile.email or profile.name}")
        return profile

    async def sign_out(self) -> None:
        """Forget the session; the cart is kept"""
        await self.store.delete_item(TOKEN_KEY)
        await self.store.delete_item(USER_KEY)
        self.client.set_auth_token(None)

    async def current_user(self) -> Optional[UserProfile]:
        user = await self.store.read_json(USER_KEY)
        if not isinstance(user, dict):
            return None
        return UserProfile.from_api(user)

    async def profile(self, orders: OrderDatabase) -> ProfileResponse:
        """
        Build the profile view.

        The remote profile is preferred; the stored user is the fallback when
        the request fails. Statistics are best-effort.
        """
        user = await self.current_user()
        if self.client.authenticated:
            try:
                user = await self.client.get_me()
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"Could not refresh profile: {e}")

        if user is None:
            user = UserProfile()

        stats = await self.client.get_profile_stats(user.id) if user.id else ProfileStats()
        return ProfileResponse(user=user, stats=stats, local_orders=await orders.count())
