from datetime import date

import pytest

from storefront.models import (
    CustomerInfo,
    DeliveryForm,
    DeliveryMethod,
    PaymentForm,
    PaymentMethod,
)
from storefront.services.validation import (
    format_card_number,
    format_expiry_date,
    is_valid_card_number,
    is_valid_email,
    is_valid_phone,
    mask_card_number,
    validate_customer,
    validate_delivery,
    validate_payment,
)

VALID_CARD = PaymentForm(
    card_number="4111 1111 1111 1111",
    expiry_date="12/29",
    cvv="123",
    card_name="Ana Petrovska",
)


@pytest.mark.parametrize("email,expected", [
    ("ana@example.mk", True),
    ("a.b+c@sub.domain.com", True),
    ("ana@example", False),
    ("ana example@x.com", False),
    ("@example.com", False),
    ("ana@example.mk\n", False),
])
def test_email_pattern(email, expected):
    assert is_valid_email(email) is expected


@pytest.mark.parametrize("phone,expected", [
    ("+389 70 123 456", True),
    ("(02) 3123-456", True),
    ("070123456", True),
    ("1234567", False),
    ("070-abc-456", False),
])
def test_phone_pattern(phone, expected):
    assert is_valid_phone(phone) is expected


@pytest.mark.parametrize("number,expected", [
    ("4111111111111111", True),
    ("4111 1111 1111 1111", True),
    ("4222222222222", True),
    ("411111111111", False),
    ("41111111111111111111", False),
    ("4111-1111-1111-1111", False),
    ("\u0664" * 16, False),
    ("\uff14\uff11\uff11\uff11" * 4, False),
])
def test_card_number(number, expected):
    assert is_valid_card_number(number) is expected


def test_customer_requires_all_fields():
    errors = validate_customer(CustomerInfo(first_name="  ", last_name="", email="", phone=""))
    assert set(errors) == {"firstName", "lastName", "email", "phone"}
    assert errors["email"] == "Email is required"


def test_customer_reports_malformed_email_and_phone():
    errors = validate_customer(
        CustomerInfo(first_name="Ana", last_name="P", email="ana@", phone="12")
    )
    assert errors == {
        "email": "Please enter a valid email",
        "phone": "Please enter a valid phone number",
    }


def test_pickup_skips_delivery_validation():
    assert validate_delivery(DeliveryMethod.PICKUP, DeliveryForm()) == {}


def test_delivery_requires_address_fields():
    errors = validate_delivery(DeliveryMethod.DELIVERY, DeliveryForm(city=" "))
    assert set(errors) == {"address", "city", "zipCode"}


@pytest.mark.parametrize("method", [PaymentMethod.CASH, PaymentMethod.BANK])
def test_non_card_payment_skips_validation(method):
    assert validate_payment(method, PaymentForm()) == {}


def test_card_payment_valid():
    assert validate_payment(PaymentMethod.CARD, VALID_CARD) == {}


def test_card_payment_errors():
    form = PaymentForm(card_number="1234", expiry_date="1229", cvv="12", card_name="")
    errors = validate_payment(PaymentMethod.CARD, form)
    assert errors == {
        "cardNumber": "Please enter a valid card number",
        "expiryDate": "Format: MM/YY",
        "cvv": "CVV must be 3-4 digits",
        "cardName": "Cardholder name is required",
    }


def test_expiry_is_lenient_by_default():
    form = VALID_CARD.model_copy(update={"expiry_date": "13/99"})
    assert validate_payment(PaymentMethod.CARD, form) == {}


@pytest.mark.parametrize("field,value", [
    ("cvv", "123\n"),
    ("cvv", "\u0661\u0662\u0663"),
    ("expiry_date", "12/29\n"),
    ("expiry_date", "\u0661\u0662/\u0662\u0669"),
])
def test_card_fields_reject_trailing_newline_and_non_ascii_digits(field, value):
    form = VALID_CARD.model_copy(update={field: value})
    errors = validate_payment(PaymentMethod.CARD, form)
    assert set(errors) == {"cvv" if field == "cvv" else "expiryDate"}


def test_strict_expiry_rejects_invalid_month_and_past_dates():
    today = date(2026, 10, 19)
    bad_month = VALID_CARD.model_copy(update={"expiry_date": "13/30"})
    expired = VALID_CARD.model_copy(update={"expiry_date": "09/26"})
    current = VALID_CARD.model_copy(update={"expiry_date": "10/26"})

    assert "expiryDate" in validate_payment(PaymentMethod.CARD, bad_month, strict_expiry=True, today=today)
    assert "expiryDate" in validate_payment(PaymentMethod.CARD, expired, strict_expiry=True, today=today)
    assert validate_payment(PaymentMethod.CARD, current, strict_expiry=True, today=today) == {}


def test_format_card_number():
    assert format_card_number("4111111111111111") == "4111 1111 1111 1111"
    assert format_card_number("4111 11") == "4111 11"
    assert format_card_number("41111111111111112222") == "4111 1111 1111 1111"


def test_format_expiry_date():
    assert format_expiry_date("1") == "1"
    assert format_expiry_date("12") == "12/"
    assert format_expiry_date("12/2") == "12/2"
    assert format_expiry_date("122999") == "12/29"
    assert format_expiry_date("\u0661\u06622") == "2"


def test_mask_card_number():
    assert mask_card_number("4111 1111 1111 1111") == "**** **** **** 1111"
