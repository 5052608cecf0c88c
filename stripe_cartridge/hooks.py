"""
Payment authorization hooks invoked by the order pipeline.

Both hooks return a Status and never raise; Status.OK is returned only
when the payment was actually authorized.
"""

import logging

from stripe_cartridge.currency import to_minor_units
from stripe_cartridge.database import transaction
from stripe_cartridge.errors import PaymentProcessingError, extract_error
from stripe_cartridge.models import Order
from stripe_cartridge.status import Status
from stripe_cartridge import stripe_service

logger = logging.getLogger(__name__)


def build_billing_details(order: Order) -> dict:
    address = order.billing_address
    billing_details = {
        "address": {
            "city": address.city,
            "country": address.country_code,
            "line1": address.address1,
            "postal_code": address.postal_code,
            "state": address.state_code or "",
        }
    }

    if order.customer_email:
        billing_details["email"] = order.customer_email
    if address.full_name:
        billing_details["name"] = address.full_name
    if address.phone:
        billing_details["phone"] = address.phone

    return billing_details


def authorize_credit_card(db, order: Order, payment_instrument, cvc: str, site_id: str) -> Status:
    """
    Authorize a card payment synchronously as a MOTO (card-not-present) transaction.

    The CVC is passed separately because it is never stored on the payment instrument.
    """
    logger.debug(
        "authorize_credit_card invoked: order=%s, payment_instrument=%s",
        order.order_no, payment_instrument.id,
    )

    try:
        if payment_instrument.amount is None or not payment_instrument.currency_code:
            raise PaymentProcessingError("Payment instrument amount not available")

        currency_code = payment_instrument.currency_code
        order_amount = to_minor_units(payment_instrument.amount, currency_code)

        payment_method = stripe_service.create_payment_method(
            card={
                "number": payment_instrument.credit_card_number,
                "exp_month": payment_instrument.credit_card_expiration_month,
                "exp_year": payment_instrument.credit_card_expiration_year,
                "cvc": cvc,
            },
            billing_details=build_billing_details(order),
        )

        payment_intent = stripe_service.create_payment_intent(
            amount=order_amount,
            currency=currency_code.lower(),
            payment_method=payment_method.id,
            description="MOTO transaction",
            metadata={
                "order_id": order.order_no,
                "site_id": site_id,
            },
            confirm=True,
            payment_method_options={"card": {"moto": True}},
        )

        if payment_intent.status != "succeeded":
            raise PaymentProcessingError("Transaction authorization was not successful")

        with transaction(db):
            order.stripe_payment_intent_id = payment_intent.id
            order.payment_status = Order.PAYMENT_STATUS_PAID
    except Exception as e:
        error = extract_error(e)
        logger.error("Card authorization failed for order %s: %s", order.order_no, error.message)
        return Status(Status.ERROR, error.message)

    logger.info("Order %s paid with payment intent %s", order.order_no, payment_intent.id)
    return Status(Status.OK)


def authorize(order: Order, payment_instrument) -> Status:
    # Only card payments are authorized through hooks; APMs go through HandleAPM.
    return Status(Status.ERROR, "Not supported")
