"""Cart models"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from .base import CamelModel


class CartItem(BaseModel):
    """Line item in the shopping cart"""
    id: int
    name: str
    price: float = Field(ge=0)
    image: Optional[str] = None
    quantity: int = Field(default=1, ge=1)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    @classmethod
    def from_stored(cls, raw: Any) -> Optional["CartItem"]:
        """
        Normalise a persisted cart record.

        Quantity is coerced to an integer of at least 1 and price to a
        non-negative number (0 when unusable). Returns None for records that
        have no integer id.
        """
        if not isinstance(raw, dict):
            return None
        try:
            item_id = int(raw.get("id"))
        except (TypeError, ValueError):
            return None

        try:
            quantity = int(raw.get("quantity") or 1)
        except (TypeError, ValueError):
            quantity = 1

        try:
            price = float(raw.get("price") or 0)
        except (TypeError, ValueError):
            price = 0.0

        return cls(
            id=item_id,
            name=str(raw.get("name") or ""),
            price=max(0.0, price),
            image=raw.get("image") or None,
            quantity=max(1, quantity),
        )


class AddToCartRequest(BaseModel):
    """Request to add a product to the cart"""
    id: int
    name: str
    price: Optional[float] = None
    image: Optional[str] = None


class CartResponse(CamelModel):
    """Cart API response"""
    items: list[CartItem] = []
    total: float = 0
    formatted_total: str
    message: Optional[str] = None
