"""Checkout test helpers"""

from storefront.services.checkout import CheckoutWorkflow


async def start_workflow(carts, orders, **kwargs) -> CheckoutWorkflow:
    kwargs.setdefault("payment_delay", 0)
    kwargs.setdefault("default_city", "Skopje")
    return await CheckoutWorkflow.start(carts, orders, **kwargs)


def fill_customer(workflow: CheckoutWorkflow) -> None:
    workflow.update_customer(
        first_name="Ana",
        last_name="Petrovska",
        email="ana@example.mk",
        phone="+389 70 123 456",
    )


def fill_delivery(workflow: CheckoutWorkflow) -> None:
    workflow.update_delivery(address="Partizanska 12", city="Skopje", zip_code="1000")


def fill_card(workflow: CheckoutWorkflow, number: str = "4111111111111111") -> None:
    workflow.update_payment(
        card_number=number,
        expiry_date="1229",
        cvv="123",
        card_name="Ana Petrovska",
    )


def advance_to_review(workflow: CheckoutWorkflow) -> None:
    fill_customer(workflow)
    assert workflow.next()
    fill_delivery(workflow)
    assert workflow.next()
    fill_card(workflow)
    assert workflow.next()
