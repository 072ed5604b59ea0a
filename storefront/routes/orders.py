"""Order history API routes"""

from fastapi import APIRouter, HTTPException, Depends, Query

from ..database.orders import OrderDatabase
from ..models.checkout import Order
from .deps import get_order_db

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.get("", response_model=list[Order])
async def list_orders(
    limit: int = Query(50, ge=1, le=500),
    orders: OrderDatabase = Depends(get_order_db),
):
    """List recent orders, newest first"""
    return await orders.list_orders(limit=limit)


@router.get("/{order_id}", response_model=Order)
async def get_order(order_id: str, orders: OrderDatabase = Depends(get_order_db)):
    """Get order details"""
    order = await orders.get_order(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order
