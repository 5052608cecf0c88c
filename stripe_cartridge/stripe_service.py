import stripe

from stripe_cartridge.config import STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET

stripe.api_key = STRIPE_SECRET_KEY


def create_payment_method(card: dict, billing_details: dict):
    return stripe.PaymentMethod.create(
        type="card",
        card=card,
        billing_details=billing_details
    )


def create_payment_intent(**params):
    return stripe.PaymentIntent.create(**params)


def confirm_payment_intent(payment_intent_id: str):
    return stripe.PaymentIntent.confirm(payment_intent_id)


def cancel_payment_intent(payment_intent_id: str):
    return stripe.PaymentIntent.cancel(payment_intent_id)


def retrieve_source(source_id: str):
    return stripe.Source.retrieve(source_id)


def construct_webhook_event(payload: bytes, signature: str):
    return stripe.Webhook.construct_event(payload, signature, STRIPE_WEBHOOK_SECRET)
