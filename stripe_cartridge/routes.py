import json
import logging

import stripe
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from stripe_cartridge.auth import verify_token
from stripe_cartridge.config import SITE_ID, STOREFRONT_SFRA
from stripe_cartridge.context import CheckoutContext, get_checkout_context
from stripe_cartridge.database import get_db
from stripe_cartridge.hooks import authorize, authorize_credit_card
from stripe_cartridge.models import Order, PAYMENT_METHOD_CREDIT_CARD
from stripe_cartridge.payments_helper import before_payment_authorization, handle_apm
from stripe_cartridge.webhooks import process_incoming_notification

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stripe")
hooks_router = APIRouter(prefix="/hooks")


class AuthorizeCreditCardRequest(BaseModel):
    order_no: str
    cvc: str


class AuthorizeRequest(BaseModel):
    order_no: str


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(None),
    db: Session = Depends(get_db)
):
    payload = await request.body()

    try:
        return process_incoming_notification(db, payload, stripe_signature)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid payload")
    except stripe.SignatureVerificationError:
        raise HTTPException(status_code=400, detail="Invalid signature")


@router.post("/payment-request-button")
async def payment_request_button_handler(request: Request):
    # TODO: create the payment intent for Apple Pay / Google Pay once the button flow is wired
    try:
        payload = json.loads(await request.body() or b"{}")
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid payload")
    if isinstance(payload, dict):
        logger.debug("Payment request button payload keys=%s", list(payload))
    else:
        logger.debug("Payment request button payload type=%s", type(payload).__name__)
    return {}


@router.get("/shipping-options")
def get_shipping_options(ctx: CheckoutContext = Depends(get_checkout_context)):
    basket = ctx.basket
    logger.debug("Shipping options requested for basket %s", basket.basket_id if basket else None)
    return {}


@router.post("/before-payment-authorization")
def before_payment_authorization_api(ctx: CheckoutContext = Depends(get_checkout_context)):
    return before_payment_authorization(ctx)


@router.get("/handle-apm")
def handle_apm_api(source: str | None = None, client_secret: str | None = None):
    return RedirectResponse(handle_apm(source, client_secret, STOREFRONT_SFRA), status_code=302)


def _get_order(db: Session, order_no: str) -> Order:
    order = db.get(Order, order_no)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


def _order_payment_instrument(order: Order, credit_card: bool):
    for payment_instrument in order.payment_instruments:
        if (payment_instrument.payment_method == PAYMENT_METHOD_CREDIT_CARD) == credit_card:
            return payment_instrument
    raise HTTPException(status_code=404, detail="Payment instrument not found")


@hooks_router.post("/authorize-credit-card")
def authorize_credit_card_api(
    request: AuthorizeCreditCardRequest,
    db: Session = Depends(get_db),
    auth=Depends(verify_token)
):
    order = _get_order(db, request.order_no)
    payment_instrument = _order_payment_instrument(order, credit_card=True)
    return authorize_credit_card(db, order, payment_instrument, request.cvc, SITE_ID).to_dict()


@hooks_router.post("/authorize")
def authorize_api(
    request: AuthorizeRequest,
    db: Session = Depends(get_db),
    auth=Depends(verify_token)
):
    order = _get_order(db, request.order_no)
    payment_instrument = _order_payment_instrument(order, credit_card=False)
    return authorize(order, payment_instrument).to_dict()
