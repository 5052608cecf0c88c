import logging

from stripe_cartridge.database import transaction
from stripe_cartridge.models import Basket, Order
from stripe_cartridge import stripe_service

logger = logging.getLogger(__name__)


def _on_payment_intent_succeeded(db, intent):
    order = db.query(Order).filter_by(stripe_payment_intent_id=intent["id"]).first()
    if order is None:
        logger.info("No order for payment intent %s yet", intent["id"])
        return

    if order.payment_status != Order.PAYMENT_STATUS_PAID:
        with transaction(db):
            order.payment_status = Order.PAYMENT_STATUS_PAID
        logger.info("Order %s marked paid by webhook", order.order_no)


def _on_payment_intent_failed(db, intent):
    error = intent.get("last_payment_error") or {}
    logger.warning(
        "Payment intent %s failed: %s", intent["id"], error.get("message", "unknown error")
    )


def _set_review_flag(db, review, in_review: bool):
    payment_intent_id = review.get("payment_intent")
    if not payment_intent_id:
        return

    records = [
        *db.query(Order).filter_by(stripe_payment_intent_id=payment_intent_id).all(),
        *db.query(Basket).filter_by(stripe_payment_intent_id=payment_intent_id).all(),
    ]
    if not records:
        logger.info("No basket or order for reviewed payment intent %s", payment_intent_id)
        return

    with transaction(db):
        for record in records:
            record.stripe_is_payment_intent_in_review = in_review


EVENT_HANDLERS = {
    "payment_intent.succeeded": _on_payment_intent_succeeded,
    "payment_intent.payment_failed": _on_payment_intent_failed,
    "review.opened": lambda db, review: _set_review_flag(db, review, True),
    "review.closed": lambda db, review: _set_review_flag(db, review, False),
}


def process_incoming_notification(db, payload: bytes, signature: str | None) -> dict:
    """
    Verify and dispatch a Stripe webhook event.

    Raises ValueError for an unparseable payload and
    stripe.SignatureVerificationError for a bad signature.
    """
    event = stripe_service.construct_webhook_event(payload, signature)
    event_type = event["type"]

    handler = EVENT_HANDLERS.get(event_type)
    if handler is None:
        logger.debug("Ignoring webhook event %s", event_type)
    else:
        logger.info("Processing webhook event %s", event_type)
        handler(db, event["data"]["object"])

    return {"ok": True, "type": event_type}
