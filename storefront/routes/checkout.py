"""Checkout wizard API routes"""

import logging
from fastapi import APIRouter, HTTPException, Depends

from ..core.config import settings
from ..core.session import CheckoutSession, CheckoutSessionManager
from ..database.carts import CartDatabase
from ..database.orders import OrderDatabase
from ..models.checkout import (
    CheckoutStateResponse,
    CustomerUpdate,
    DeliveryUpdate,
    OrderResult,
    PaymentMethod,
    PaymentSummary,
    PaymentUpdate,
)
from ..services.checkout import CheckoutWorkflow, CheckoutStateError, EmptyCartError
from ..services.pricing import format_currency
from ..services.validation import mask_card_number
from .deps import get_cart_db, get_order_db, get_session_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/checkout", tags=["Checkout"])


async def _state(session: CheckoutSession) -> CheckoutStateResponse:
    workflow = session.workflow
    items = await workflow.load_items()
    totals = workflow.totals_for(items)
    payment = workflow.payment_info
    card_digits = payment.card_number.replace(" ", "")

    return CheckoutStateResponse(
        session_id=session.session_id,
        step=workflow.current_step,
        step_label=workflow.current_step.label,
        status=workflow.status,
        errors=workflow.errors,
        items=items,
        customer_info=workflow.customer_info,
        delivery_method=workflow.delivery_method,
        delivery_info=workflow.delivery_info,
        payment_method=workflow.payment_method,
        payment_info=PaymentSummary(
            card_number=mask_card_number(card_digits) if len(card_digits) >= 4 else None,
            expiry_date=payment.expiry_date or None,
            card_name=payment.card_name or None,
        ) if workflow.payment_method == PaymentMethod.CARD else PaymentSummary(),
        totals=totals,
        formatted_total=format_currency(totals.total, workflow.currency),
    )


def _get_session(session_id: str, sessions: CheckoutSessionManager) -> CheckoutSession:
    session = sessions.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Checkout session not found")
    return session


@router.post("", response_model=CheckoutStateResponse)
async def start_checkout(
    carts: CartDatabase = Depends(get_cart_db),
    orders: OrderDatabase = Depends(get_order_db),
    sessions: CheckoutSessionManager = Depends(get_session_manager),
):
    """Start a checkout wizard from the current cart"""
    sessions.cleanup_old_sessions(settings.session_max_age_hours)
    try:
        workflow = await CheckoutWorkflow.start(
            carts,
            orders,
            payment_delay=settings.payment_delay_seconds,
            delivery_fee=settings.delivery_fee,
            tax_rate=settings.tax_rate,
            currency=settings.currency,
            default_city=settings.default_city,
            strict_expiry=settings.strict_expiry_validation,
        )
    except EmptyCartError as e:
        raise HTTPException(status_code=400, detail=str(e))

    session = sessions.create_session(workflow)
    logger.info(f"Checkout session {session.session_id} started")
    return await _state(session)


@router.get("/{session_id}", response_model=CheckoutStateResponse)
async def get_checkout(
    session_id: str,
    sessions: CheckoutSessionManager = Depends(get_session_manager),
):
    """Get the wizard state"""
    return await _state(_get_session(session_id, sessions))


@router.put("/{session_id}/customer", response_model=CheckoutStateResponse)
async def update_customer(
    session_id: str,
    request: CustomerUpdate,
    sessions: CheckoutSessionManager = Depends(get_session_manager),
):
    """Update customer information"""
    session = _get_session(session_id, sessions)
    session.workflow.update_customer(**request.model_dump(exclude_none=True))
    return await _state(session)


@router.put("/{session_id}/delivery", response_model=CheckoutStateResponse)
async def update_delivery(
    session_id: str,
    request: DeliveryUpdate,
    sessions: CheckoutSessionManager = Depends(get_session_manager),
):
    """Update delivery method and address"""
    session = _get_session(session_id, sessions)
    fields = request.model_dump(exclude_none=True)
    method = fields.pop("method", None)
    if method is not None:
        session.workflow.set_delivery_method(method)
    session.workflow.update_delivery(**fields)
    return await _state(session)


@router.put("/{session_id}/payment", response_model=CheckoutStateResponse)
async def update_payment(
    session_id: str,
    request: PaymentUpdate,
    sessions: CheckoutSessionManager = Depends(get_session_manager),
):
    """Update payment method and card details"""
    session = _get_session(session_id, sessions)
    fields = request.model_dump(exclude_none=True)
    method = fields.pop("method", None)
    if method is not None:
        session.workflow.set_payment_method(method)
    session.workflow.update_payment(**fields)
    return await _state(session)


@router.post("/{session_id}/next", response_model=CheckoutStateResponse)
async def next_step(
    session_id: str,
    sessions: CheckoutSessionManager = Depends(get_session_manager),
):
    """Validate the current step and advance; errors are returned in the state"""
    session = _get_session(session_id, sessions)
    session.workflow.next()
    return await _state(session)


@router.post("/{session_id}/previous", response_model=CheckoutStateResponse)
async def previous_step(
    session_id: str,
    sessions: CheckoutSessionManager = Depends(get_session_manager),
):
    """Go back one step"""
    session = _get_session(session_id, sessions)
    session.workflow.previous()
    return await _state(session)


@router.post("/{session_id}/place-order", response_model=OrderResult)
async def place_order(
    session_id: str,
    sessions: CheckoutSessionManager = Depends(get_session_manager),
):
    """
    Place the order from the review step.

    A failed commit returns success=false and leaves the session on the
    review step so the client can retry.
    """
    session = _get_session(session_id, sessions)
    try:
        result = await session.workflow.place_order()
    except CheckoutStateError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if result.success:
        sessions.delete_session(session_id)
    return result


@router.delete("/{session_id}")
async def cancel_checkout(
    session_id: str,
    sessions: CheckoutSessionManager = Depends(get_session_manager),
):
    """Abandon a checkout; the cart is untouched"""
    if not sessions.delete_session(session_id):
        raise HTTPException(status_code=404, detail="Checkout session not found")
    return {"message": "Checkout cancelled"}
