from dataclasses import dataclass

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from stripe_cartridge.config import SITE_ID
from stripe_cartridge.database import get_db
from stripe_cartridge.models import Basket, Customer


@dataclass
class CheckoutContext:
    """Everything a storefront handler needs about the current request."""

    db: Session
    basket: Basket | None = None
    customer: Customer | None = None
    site_id: str = SITE_ID


def get_checkout_context(
    db: Session = Depends(get_db),
    x_basket_id: str | None = Header(None),
    x_customer_id: str | None = Header(None),
) -> CheckoutContext:
    basket = db.get(Basket, x_basket_id) if x_basket_id else None
    customer = db.get(Customer, x_customer_id) if x_customer_id else None
    if customer is None and basket is not None:
        customer = basket.customer

    return CheckoutContext(db=db, basket=basket, customer=customer, site_id=SITE_ID)
