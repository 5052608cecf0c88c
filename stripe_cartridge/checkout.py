import logging

from sqlalchemy import update

from stripe_cartridge.currency import to_minor_units
from stripe_cartridge.database import transaction
from stripe_cartridge.errors import PaymentProcessingError
from stripe_cartridge.models import Basket
from stripe_cartridge import stripe_service

logger = logging.getLogger(__name__)


def get_stripe_payment_instrument(basket: Basket):
    for payment_instrument in basket.payment_instruments:
        if payment_instrument.is_stripe:
            return payment_instrument
    return None


def create_payment_intent(basket: Basket, payment_instrument, site_id: str, customer=None):
    if basket.total_gross is None or not basket.currency_code:
        raise PaymentProcessingError("Basket total not available")

    if not payment_instrument.stripe_payment_method_id:
        raise PaymentProcessingError("Payment instrument has no Stripe payment method")

    params = {
        "amount": to_minor_units(basket.total_gross, basket.currency_code),
        "currency": basket.currency_code.lower(),
        "payment_method": payment_instrument.stripe_payment_method_id,
        "confirmation_method": "manual",
        "metadata": {
            "basket_id": basket.basket_id,
            "site_id": site_id,
        },
    }
    if customer is not None and customer.email:
        params["receipt_email"] = customer.email

    return stripe_service.create_payment_intent(**params)


def confirm_payment_intent(payment_intent_id: str):
    return stripe_service.confirm_payment_intent(payment_intent_id)


def store_payment_intent_id(db, basket: Basket, payment_intent_id: str) -> bool:
    """
    Persist the intent id onto the basket only if none is stored yet.

    Returns False when a concurrent request stored its own intent first.
    """
    with transaction(db):
        result = db.execute(
            update(Basket)
            .where(
                Basket.basket_id == basket.basket_id,
                Basket.stripe_payment_intent_id.is_(None),
            )
            .values(stripe_payment_intent_id=payment_intent_id)
            .execution_options(synchronize_session=False)
        )
        stored = result.rowcount == 1
    db.refresh(basket)
    return stored


def flag_payment_intent_in_review(db, basket: Basket):
    with transaction(db):
        basket.stripe_is_payment_intent_in_review = True
    logger.info("Basket %s payment intent placed in review", basket.basket_id)
