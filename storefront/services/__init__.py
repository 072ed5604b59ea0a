# Service modules

from .api_client import StorefrontClient, ProductFetchError, AuthError
from .accounts import AccountService
from .checkout import (
    CheckoutWorkflow,
    CheckoutError,
    CheckoutStateError,
    EmptyCartError,
)
from .pricing import compute_totals, format_currency

__all__ = [
    "StorefrontClient",
    "ProductFetchError",
    "AuthError",
    "AccountService",
    "CheckoutWorkflow",
    "CheckoutError",
    "CheckoutStateError",
    "EmptyCartError",
    "compute_totals",
    "format_currency",
]
