"""Checkout and order models"""

from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional

from pydantic import Field

from .base import CamelModel
from .cart import CartItem


class CheckoutStep(IntEnum):
    CUSTOMER = 1
    DELIVERY = 2
    PAYMENT = 3
    REVIEW = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()


class CheckoutStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    ORDER_PLACED = "order_placed"
    ORDER_FAILED = "order_failed"


class OrderStatus(str, Enum):
    CONFIRMED = "confirmed"


class DeliveryMethod(str, Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


class PaymentMethod(str, Enum):
    CARD = "card"
    CASH = "cash"
    BANK = "bank"


# ==================== Wizard form state ====================

class CustomerInfo(CamelModel):
    """Customer step fields"""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""


class DeliveryForm(CamelModel):
    """Delivery step fields"""
    address: str = ""
    city: str = ""
    zip_code: str = ""
    notes: str = ""


class PaymentForm(CamelModel):
    """Payment step fields, kept in memory only"""
    card_number: str = ""
    expiry_date: str = ""
    cvv: str = ""
    card_name: str = ""


class CustomerUpdate(CamelModel):
    """Partial update of the customer step"""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class DeliveryUpdate(CamelModel):
    """Partial update of the delivery step"""
    method: Optional[DeliveryMethod] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    notes: Optional[str] = None


class PaymentUpdate(CamelModel):
    """Partial update of the payment step"""
    method: Optional[PaymentMethod] = None
    card_number: Optional[str] = None
    expiry_date: Optional[str] = None
    cvv: Optional[str] = None
    card_name: Optional[str] = None


# ==================== Orders ====================

class OrderTotals(CamelModel):
    """Amounts derived from the cart and the delivery method"""
    subtotal: float
    delivery_fee: float
    tax: float
    total: float


class DeliveryInfo(CamelModel):
    """Delivery details recorded on an order"""
    method: DeliveryMethod
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    notes: Optional[str] = None


class PaymentInfo(CamelModel):
    """Payment details recorded on an order; the card number is masked"""
    method: PaymentMethod
    card_number: Optional[str] = None
    card_name: Optional[str] = None


class Order(CamelModel):
    """Placed order"""
    id: str
    items: list[CartItem]
    customer_info: CustomerInfo
    delivery_info: DeliveryInfo
    payment_info: PaymentInfo
    total: float
    delivery_fee: float
    tax: float
    final_total: float
    date: datetime
    status: OrderStatus = OrderStatus.CONFIRMED

    def to_record(self) -> dict:
        """Serialise for the order history"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class OrderResult(CamelModel):
    """Outcome of placing an order"""
    success: bool
    order: Optional[Order] = None
    order_id: Optional[str] = None
    final_total: Optional[float] = None
    formatted_total: Optional[str] = None
    errors: dict[str, str] = Field(default_factory=dict)
    error_message: Optional[str] = None


# ==================== API ====================

class PaymentSummary(CamelModel):
    """Payment step as echoed back to the client, without the CVV"""
    card_number: Optional[str] = None
    expiry_date: Optional[str] = None
    card_name: Optional[str] = None


class CheckoutStateResponse(CamelModel):
    """Current state of a checkout session"""
    session_id: str
    step: CheckoutStep
    step_label: str
    status: CheckoutStatus
    errors: dict[str, str] = Field(default_factory=dict)
    items: list[CartItem]
    customer_info: CustomerInfo
    delivery_method: DeliveryMethod
    delivery_info: DeliveryForm
    payment_method: PaymentMethod
    payment_info: PaymentSummary
    totals: OrderTotals
    formatted_total: str
