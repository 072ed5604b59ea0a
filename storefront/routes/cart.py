"""Cart API routes"""

from typing import Optional

from fastapi import APIRouter, Depends

from ..core.config import settings
from ..database.carts import CartDatabase
from ..models.cart import AddToCartRequest, CartItem, CartResponse
from ..models.product import Product
from ..services.pricing import format_currency
from .deps import get_cart_db

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def _cart_response(items: list[CartItem], message: Optional[str] = None) -> CartResponse:
    total = CartDatabase.total(items)
    return CartResponse(
        items=items,
        total=total,
        formatted_total=format_currency(total, settings.currency),
        message=message,
    )


@router.get("", response_model=CartResponse)
async def get_cart(carts: CartDatabase = Depends(get_cart_db)):
    """Get the cart"""
    return _cart_response(await carts.load())


@router.post("/items", response_model=CartResponse)
async def add_to_cart(request: AddToCartRequest, carts: CartDatabase = Depends(get_cart_db)):
    """Add one unit of a product to the cart"""
    product = Product(id=request.id, name=request.name, price=request.price, image=request.image)
    items = await carts.add_or_increment(product)
    return _cart_response(items, message=f"Added {product.name} to cart")


@router.post("/items/{item_id}/increase", response_model=CartResponse)
async def increase_quantity(item_id: int, carts: CartDatabase = Depends(get_cart_db)):
    """Increase item quantity"""
    return _cart_response(await carts.increase(item_id))


@router.post("/items/{item_id}/decrease", response_model=CartResponse)
async def decrease_quantity(item_id: int, carts: CartDatabase = Depends(get_cart_db)):
    """Decrease item quantity (never below 1)"""
    return _cart_response(await carts.decrease(item_id))


@router.delete("/items/{item_id}", response_model=CartResponse)
async def remove_from_cart(item_id: int, carts: CartDatabase = Depends(get_cart_db)):
    """Remove an item from the cart"""
    return _cart_response(await carts.remove(item_id), message="Item removed")


@router.delete("", response_model=CartResponse)
async def clear_cart(carts: CartDatabase = Depends(get_cart_db)):
    """Clear all items from cart"""
    return _cart_response(await carts.clear(), message="Cart cleared")
