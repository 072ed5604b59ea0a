"""
Checkout form validation and input formatting

Validators return a map of field name to message; an empty map means the
step is valid. Field names are the camelCase names the client uses.
"""

import re
from datetime import date
from typing import Optional

from ..models.checkout import (
    CustomerInfo,
    DeliveryForm,
    DeliveryMethod,
    PaymentForm,
    PaymentMethod,
)

# Matched with fullmatch; digits are ASCII only
EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_RE = re.compile(r"[+]?[0-9\s\-\(\)]{8,}")
EXPIRY_RE = re.compile(r"\d{2}/\d{2}", re.ASCII)
CVV_RE = re.compile(r"\d{3,4}", re.ASCII)


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.fullmatch(email))


def is_valid_phone(phone: str) -> bool:
    return bool(PHONE_RE.fullmatch(phone))


def is_valid_card_number(number: str) -> bool:
    """13-19 ASCII digits once spaces are stripped"""
    cleaned = re.sub(r"\s", "", number)
    return 13 <= len(cleaned) <= 19 and cleaned.isascii() and cleaned.isdigit()


def is_unexpired(expiry: str, today: Optional[date] = None) -> bool:
    """Month is 01-12 and the card is valid through the end of that month"""
    month, year = (int(part) for part in expiry.split("/"))
    if not 1 <= month <= 12:
        return False
    today = today or date.today()
    return (2000 + year, month) >= (today.year, today.month)


def validate_customer(info: CustomerInfo) -> dict[str, str]:
    errors: dict[str, str] = {}

    if not info.first_name.strip():
        errors["firstName"] = "First name is required"
    if not info.last_name.strip():
        errors["lastName"] = "Last name is required"

    if not info.email.strip():
        errors["email"] = "Email is required"
    elif not is_valid_email(info.email):
        errors["email"] = "Please enter a valid email"

    if not info.phone.strip():
        errors["phone"] = "Phone number is required"
    elif not is_valid_phone(info.phone):
        errors["phone"] = "Please enter a valid phone number"

    return errors


def validate_delivery(method: DeliveryMethod, form: DeliveryForm) -> dict[str, str]:
    errors: dict[str, str] = {}

    # Pickup needs no address
    if method == DeliveryMethod.DELIVERY:
        if not form.address.strip():
            errors["address"] = "Address is required"
        if not form.city.strip():
            errors["city"] = "City is required"
        if not form.zip_code.strip():
            errors["zipCode"] = "ZIP code is required"

    return errors


def validate_payment(
    method: PaymentMethod,
    form: PaymentForm,
    strict_expiry: bool = False,
    today: Optional[date] = None,
) -> dict[str, str]:
    """
    Validate the payment step.

    Only card payments carry fields. The expiry date is checked for the MM/YY
    shape; with strict_expiry the month range and expiry are checked too.
    """
    errors: dict[str, str] = {}
    if method != PaymentMethod.CARD:
        return errors

    if not form.card_number.strip():
        errors["cardNumber"] = "Card number is required"
    elif not is_valid_card_number(form.card_number):
        errors["cardNumber"] = "Please enter a valid card number"

    if not form.expiry_date.strip():
        errors["expiryDate"] = "Expiry date is required"
    elif not EXPIRY_RE.fullmatch(form.expiry_date):
        errors["expiryDate"] = "Format: MM/YY"
    elif strict_expiry and not is_unexpired(form.expiry_date, today):
        errors["expiryDate"] = "Card has expired or the month is invalid"

    if not form.cvv.strip():
        errors["cvv"] = "CVV is required"
    elif not CVV_RE.fullmatch(form.cvv):
        errors["cvv"] = "CVV must be 3-4 digits"

    if not form.card_name.strip():
        errors["cardName"] = "Cardholder name is required"

    return errors


def format_card_number(text: str) -> str:
    """Group digits in fours: '4111111111111111' -> '4111 1111 1111 1111'"""
    cleaned = re.sub(r"\s", "", text)
    grouped = " ".join(cleaned[i:i + 4] for i in range(0, len(cleaned), 4))
    return grouped[:19]


def format_expiry_date(text: str) -> str:
    """Keep digits and insert the slash: '1227' -> '12/27'"""
    cleaned = re.sub(r"\D", "", text, flags=re.ASCII)
    if len(cleaned) >= 2:
        return cleaned[:2] + "/" + cleaned[2:4]
    return cleaned


def mask_card_number(number: str) -> str:
    """Only the last four digits survive"""
    digits = re.sub(r"\s", "", number)
    return "**** **** **** " + digits[-4:]
