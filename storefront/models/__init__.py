# Storefront Models

from .base import CamelModel
from .product import Product, ProductListResponse
from .cart import CartItem, AddToCartRequest, CartResponse
from .checkout import (
    CheckoutStep,
    CheckoutStatus,
    CheckoutStateResponse,
    CustomerInfo,
    CustomerUpdate,
    DeliveryForm,
    DeliveryInfo,
    DeliveryMethod,
    DeliveryUpdate,
    Order,
    OrderResult,
    OrderStatus,
    OrderTotals,
    PaymentForm,
    PaymentInfo,
    PaymentMethod,
    PaymentSummary,
    PaymentUpdate,
)
from .user import (
    AuthResponse,
    ProfileResponse,
    ProfileStats,
    SignInRequest,
    SignUpRequest,
    UserProfile,
)

__all__ = [
    "CamelModel",
    "Product",
    "ProductListResponse",
    "CartItem",
    "AddToCartRequest",
    "CartResponse",
    "CheckoutStep",
    "CheckoutStatus",
    "CheckoutStateResponse",
    "CustomerInfo",
    "CustomerUpdate",
    "DeliveryForm",
    "DeliveryInfo",
    "DeliveryMethod",
    "DeliveryUpdate",
    "Order",
    "OrderResult",
    "OrderStatus",
    "OrderTotals",
    "PaymentForm",
    "PaymentInfo",
    "PaymentMethod",
    "PaymentSummary",
    "PaymentUpdate",
    "AuthResponse",
    "ProfileResponse",
    "ProfileStats",
    "SignInRequest",
    "SignUpRequest",
    "UserProfile",
]
