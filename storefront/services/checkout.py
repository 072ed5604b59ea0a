"""
Checkout Workflow

Four-step checkout wizard: customer -> delivery -> payment -> review.
Each step is validated before the wizard advances; placing the order from
the review step records it in the order history and clears the cart.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from ..database.carts import CartDatabase
from ..database.orders import OrderDatabase, generate_order_id
from ..models.cart import CartItem
from ..models.checkout import (
    CheckoutStatus,
    CheckoutStep,
    CustomerInfo,
    DeliveryForm,
    DeliveryInfo,
    DeliveryMethod,
    Order,
    OrderResult,
    OrderTotals,
    PaymentForm,
    PaymentInfo,
    PaymentMethod,
)
from .pricing import CURRENCY, DELIVERY_FEE, TAX_RATE, compute_totals, format_currency
from .validation import (
    format_card_number,
    format_expiry_date,
    mask_card_number,
    validate_customer,
    validate_delivery,
    validate_payment,
)

logger = logging.getLogger(__name__)

ORDER_FAILED_MESSAGE = "There was an error processing your order. Please try again."


class CheckoutError(Exception):
    """Base class for checkout errors"""


class EmptyCartError(CheckoutError):
    """Checkout was started with nothing in the cart"""

    def __init__(self):
        super().__init__("Your cart is empty. Please add some items before checkout.")


class CheckoutStateError(CheckoutError):
    """Operation not allowed in the current step or status"""


class CheckoutWorkflow:
    """
    Checkout wizard for one session.

    Holds the form state of every step. Items and totals are always read
    from the current cart; the cart and order history are only written when
    the order is placed.
    """

    def __init__(
        self,
        carts: CartDatabase,
        orders: OrderDatabase,
        payment_delay: float = 3.0,
        delivery_fee: float = DELIVERY_FEE,
        tax_rate: float = TAX_RATE,
        currency: str = CURRENCY,
        default_city: str = "",
        strict_expiry: bool = False,
    ):
        self.carts = carts
        self.orders = orders
        self.payment_delay = payment_delay
        self.delivery_fee = delivery_fee
        self.tax_rate = tax_rate
        self.currency = currency
        self.strict_expiry = strict_expiry

        self.current_step = CheckoutStep.CUSTOMER
        self.status = CheckoutStatus.IN_PROGRESS
        self.errors: dict[str, str] = {}

        self.customer_info = CustomerInfo()
        self.delivery_method = DeliveryMethod.DELIVERY
        self.delivery_info = DeliveryForm(city=default_city)
        self.payment_method = PaymentMethod.CARD
        self.payment_info = PaymentForm()

        self.placed_order: Optional[Order] = None
        self._pending_order: Optional[Order] = None

    @classmethod
    async def start(cls, carts: CartDatabase, orders: OrderDatabase, **kwargs) -> "CheckoutWorkflow":
        """
        Start a checkout from the current cart.

        Raises:
            EmptyCartError: the cart has no items
        """
        await orders.recover_pending(carts)
        items = await carts.load()
        if not items:
            raise EmptyCartError()
        logger.info(f"Checkout started with {len(items)} cart lines")
        return cls(carts, orders, **kwargs)

    async def load_items(self) -> list[CartItem]:
        return await self.carts.load()

    # ==================== Form state ====================

    def update_customer(self, **fields: str) -> None:
        self.customer_info = self.customer_info.model_copy(update=fields)

    def set_delivery_method(self, method: DeliveryMethod) -> None:
        self.delivery_method = DeliveryMethod(method)

    def update_delivery(self, **fields: str) -> None:
        self.delivery_info = self.delivery_info.model_copy(update=fields)

    def set_payment_method(self, method: PaymentMethod) -> None:
        self.payment_method = PaymentMethod(method)

    def update_payment(self, **fields: str) -> None:
        """Update payment fields, shaping card number and expiry as typed"""
        if "card_number" in fields:
            fields["card_number"] = format_card_number(fields["card_number"])
        if "expiry_date" in fields:
            fields["expiry_date"] = format_expiry_date(fields["expiry_date"])
        self.payment_info = self.payment_info.model_copy(update=fields)

    # ==================== Totals ====================

    def totals_for(self, items: list[CartItem]) -> OrderTotals:
        return compute_totals(
            items,
            self.delivery_method,
            delivery_fee=self.delivery_fee,
            tax_rate=self.tax_rate,
        )

    async def totals(self) -> OrderTotals:
        """Totals of the cart as it is now, for the selected delivery method"""
        return self.totals_for(await self.load_items())

    # ==================== Navigation ====================

    def validate_step(self, step: CheckoutStep) -> dict[str, str]:
        if step == CheckoutStep.CUSTOMER:
            return validate_customer(self.customer_info)
        if step == CheckoutStep.DELIVERY:
            return validate_delivery(self.delivery_method, self.delivery_info)
        if step == CheckoutStep.PAYMENT:
            return validate_payment(
                self.payment_method, self.payment_info, strict_expiry=self.strict_expiry
            )
        return {}

    def next(self) -> bool:
        """
        Advance to the next step if the current one is valid.

        Returns:
            True if the step changed
        """
        errors = self.validate_step(self.current_step)
        if errors:
            self.errors = errors
            return False

        self.errors = {}
        if self.current_step < CheckoutStep.REVIEW:
            self.current_step = CheckoutStep(self.current_step + 1)
            return True
        return False

    def previous(self) -> None:
        if self.current_step > CheckoutStep.CUSTOMER:
            self.current_step = CheckoutStep(self.current_step - 1)
        self.errors = {}

    # ==================== Order placement ====================

    def _build_order(self, items: list[CartItem]) -> Order:
        totals = self.totals_for(items)

        if self.delivery_method == DeliveryMethod.DELIVERY:
            delivery_info = DeliveryInfo(
                method=self.delivery_method,
                address=self.delivery_info.address,
                city=self.delivery_info.city,
                zip_code=self.delivery_info.zip_code,
                notes=self.delivery_info.notes,
            )
        else:
            delivery_info = DeliveryInfo(method=self.delivery_method)

        if self.payment_method == PaymentMethod.CARD:
            payment_info = PaymentInfo(
                method=self.payment_method,
                card_number=mask_card_number(self.payment_info.card_number),
                card_name=self.payment_info.card_name,
            )
        else:
            payment_info = PaymentInfo(method=self.payment_method)

        return Order(
            id=generate_order_id(),
            items=[item.model_copy() for item in items],
            customer_info=self.customer_info.model_copy(),
            delivery_info=delivery_info,
            payment_info=payment_info,
            total=totals.subtotal,
            delivery_fee=totals.delivery_fee,
            tax=totals.tax,
            final_total=totals.total,
            date=datetime.now(timezone.utc),
        )

    async def _authorize_payment(self) -> None:
        # Hook point for a payment processor; a decline would raise here
        await asyncio.sleep(self.payment_delay)

    def _success(self, order: Order) -> OrderResult:
        self.status = CheckoutStatus.ORDER_PLACED
        self.placed_order = order
        self._pending_order = None
        return OrderResult(
            success=True,
            order=order,
            order_id=order.id,
            final_total=order.final_total,
            formatted_total=format_currency(order.final_total, self.currency),
        )

    async def place_order(self) -> OrderResult:
        """
        Place the order from the review step.

        Payment details are re-validated first. A commit failure leaves the
        wizard on the review step with status ORDER_FAILED so it can be
        retried; a retry after the order was already recorded finishes that
        commit instead of recording the order twice.

        Raises:
            CheckoutStateError: not on the review step, or already placed
        """
        if self.status == CheckoutStatus.ORDER_PLACED:
            raise CheckoutStateError(f"Order {self.placed_order.id} was already placed")
        if self.current_step != CheckoutStep.REVIEW:
            raise CheckoutStateError(
                f"Orders can only be placed from the review step (current: {self.current_step.label})"
            )

        errors = self.validate_step(CheckoutStep.PAYMENT)
        if errors:
            self.errors = errors
            return OrderResult(success=False, errors=errors, error_message="Please check your payment details.")

        try:
            if self._pending_order is not None:
                order = self._pending_order
                if await self.orders.get_order(order.id) is None:
                    self._pending_order = None
                    order = await self._commit()
                else:
                    logger.info(f"Resuming commit of recorded order {order.id}")
                    await self.carts.clear()
                    await self.orders.resolve_pending(order.id)
            else:
                order = await self._commit()
        except EmptyCartError:
            logger.info("Order not placed: the cart was emptied during checkout")
            return OrderResult(success=False, error_message="Your cart is empty.")
        except Exception:
            logger.exception("Order processing failed")
            self.status = CheckoutStatus.ORDER_FAILED
            return OrderResult(success=False, error_message=ORDER_FAILED_MESSAGE)

        logger.info(f"Order {order.id} confirmed: {format_currency(order.final_total, self.currency)}")
        return self._success(order)

    async def _commit(self) -> Order:
        await self._authorize_payment()

        async def record(items: list[CartItem]) -> Order:
            if not items:
                raise EmptyCartError()
            order = await self.orders.append(self._build_order(items))
            self._pending_order = order
            return order

        # The order is built from the cart under the same lock that clears it
        order = await self.carts.check_out(record)
        await self.orders.resolve_pending(order.id)
        return order
