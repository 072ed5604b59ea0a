"""User, auth and profile models"""

from typing import Any, Optional

from pydantic import BaseModel

from .base import CamelModel


class UserProfile(CamelModel):
    """Signed-in user as shown on the profile screen"""
    id: Optional[str] = None
    name: str = "Guest"
    email: Optional[str] = None
    is_premium: bool = False

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "UserProfile":
        """Derive display fields from a remote user record"""
        if isinstance(raw.get("user"), dict):
            raw = raw["user"]

        full_name = " ".join(
            part for part in (raw.get("first_name"), raw.get("last_name")) if part
        )
        email = raw.get("email")
        name = (
            raw.get("name")
            or full_name
            or raw.get("username")
            or (email.split("@")[0] if email else None)
            or "Guest"
        )

        membership = str(raw.get("membership") or raw.get("tier") or "").lower()
        is_premium = bool(
            raw.get("is_premium") or raw.get("isPremium") or raw.get("premium")
            or membership == "premium"
        )

        user_id = raw.get("id", raw.get("_id"))
        return cls(
            id=str(user_id) if user_id is not None else None,
            name=name,
            email=email,
            is_premium=is_premium,
        )


class ProfileStats(CamelModel):
    """
    Profile statistics.

    Each stat is None when it could not be fetched, which is distinct from a
    fetched count of zero.
    """
    orders: Optional[int] = None
    wishlist: Optional[int] = None
    reviews: Optional[int] = None
    points: Optional[int] = None

    @property
    def complete(self) -> bool:
        return None not in (self.orders, self.wishlist, self.reviews, self.points)


class AuthResponse(BaseModel):
    """Result of a successful sign in or sign up"""
    token: str
    user: dict[str, Any]


class SignInRequest(BaseModel):
    email: str
    password: str


class SignUpRequest(BaseModel):
    name: str
    email: str
    password: str


class ProfileResponse(CamelModel):
    """Profile API response"""
    user: UserProfile
    stats: ProfileStats
    local_orders: int = 0
