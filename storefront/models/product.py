"""Product models for the remote storefront catalog"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


def parse_price(value: Any) -> Optional[float]:
    """Parse a price given as a number or a numeric string"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


class Product(BaseModel):
    """Product in the catalog"""
    id: int
    name: str
    price: Optional[float] = None
    image: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Optional["Product"]:
        """
        Build a product from a remote listing record.

        The listing is loosely shaped: the name may come as name or title,
        the price as a number or a numeric string, and the image under any of
        image, image_url or thumbnail. Records without an integer id are
        skipped (None).
        """
        try:
            product_id = int(raw.get("id"))
        except (TypeError, ValueError):
            logger.debug(f"Skipping product without usable id: {raw!r}")
            return None

        return cls(
            id=product_id,
            name=raw.get("name") or raw.get("title") or "Unnamed product",
            price=parse_price(raw.get("price")),
            image=raw.get("image") or raw.get("image_url") or raw.get("thumbnail"),
            description=raw.get("description"),
        )


class ProductListResponse(BaseModel):
    """Response from product listing"""
    products: list[Product]
    total: int = Field(ge=0)
