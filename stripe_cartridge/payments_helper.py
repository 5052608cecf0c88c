"""
Storefront checkout flows backed by Stripe payment intents and sources.

Every entry point here converts failures into its own response shape:
a JSON payload for BeforePaymentAuthorization and a redirect URL for
HandleAPM.
"""

import logging

from stripe_cartridge import checkout
from stripe_cartridge.context import CheckoutContext
from stripe_cartridge.errors import PaymentProcessingError, extract_error
from stripe_cartridge.models import PAYMENT_METHOD_CREDIT_CARD
from stripe_cartridge import stripe_service
from stripe_cartridge.urls import url

logger = logging.getLogger(__name__)

AUTHORIZED_SOURCE_STATUSES = ("chargeable", "pending")


def generate_cards_payment_response(intent) -> dict:
    next_action = getattr(intent, "next_action", None)

    if (
        intent.status == "requires_action"
        and next_action is not None
        and next_action.type == "use_stripe_sdk"
    ):
        # client finishes authentication with stripe.js
        return {
            "requires_action": True,
            "payment_intent_client_secret": intent.client_secret,
        }

    if intent.status == "succeeded":
        return {"success": True}

    return {"error": "Invalid PaymentIntent status"}


def _create_or_confirm_payment_intent(ctx: CheckoutContext, payment_instrument):
    basket = ctx.basket

    if basket.stripe_payment_intent_id:
        return checkout.confirm_payment_intent(basket.stripe_payment_intent_id)

    payment_intent = checkout.create_payment_intent(
        basket, payment_instrument, ctx.site_id, ctx.customer
    )
    # created unconfirmed so a duplicate can always be cancelled
    if checkout.store_payment_intent_id(ctx.db, basket, payment_intent.id):
        return checkout.confirm_payment_intent(payment_intent.id)

    # Another request on this basket stored its intent first: keep that one.
    logger.warning(
        "Basket %s already has payment intent %s, cancelling duplicate %s",
        basket.basket_id, basket.stripe_payment_intent_id, payment_intent.id,
    )
    stripe_service.cancel_payment_intent(payment_intent.id)
    return checkout.confirm_payment_intent(basket.stripe_payment_intent_id)


def before_payment_authorization(ctx: CheckoutContext) -> dict:
    """Create or confirm the basket's payment intent and tell the client what to do next."""
    try:
        basket = ctx.basket
        if basket is None:
            return {"success": True}

        payment_instrument = checkout.get_stripe_payment_instrument(basket)
        if payment_instrument is None or payment_instrument.payment_method != PAYMENT_METHOD_CREDIT_CARD:
            return {"success": True}

        payment_intent = _create_or_confirm_payment_intent(ctx, payment_instrument)

        if getattr(payment_intent, "review", None):
            checkout.flag_payment_intent_in_review(ctx.db, basket)

        response_payload = generate_cards_payment_response(payment_intent)
    except Exception as e:
        error = extract_error(e)
        logger.error("BeforePaymentAuthorization failed: %s", error.message)
        return error.to_payload()

    logger.info(
        "Basket %s payment intent %s is %s",
        basket.basket_id, payment_intent.id, payment_intent.status,
    )
    return response_payload


def handle_apm(source_id: str | None, client_secret: str | None, sfra: bool) -> str:
    """Verify a source after the customer returns from an APM page; return where to send them."""
    try:
        if not source_id:
            raise PaymentProcessingError("Missing source")

        source = stripe_service.retrieve_source(source_id)

        if not client_secret or source.client_secret != client_secret:
            raise PaymentProcessingError("Source client secret mismatch")

        if source.status not in AUTHORIZED_SOURCE_STATUSES:
            raise PaymentProcessingError("Source not authorized.")
    except Exception as e:
        message = extract_error(e).message
        logger.warning("APM return rejected for source %s: %s", source_id, message)
        if sfra:
            return url("Checkout-Begin", "stage", "payment", "apm_return_error", message)
        return url("COBilling-Start", "apm_return_error", message)

    if sfra:
        return url("Checkout-Begin", "stage", "placeOrder")
    return url("COSummary-Start")
