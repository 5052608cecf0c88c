from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict

from stripe_cartridge.context import CheckoutContext, get_checkout_context
from stripe_cartridge.models import Customer

router = APIRouter()


class WalletPaymentInstrument(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    payment_method: str | None = None
    credit_card_type: str | None = None
    masked_credit_card_number: str | None = None
    credit_card_expiration_month: int | None = None
    credit_card_expiration_year: int | None = None
    stripe_payment_method_id: str | None = None


def get_stripe_wallet(customer: Customer):
    return list(customer.wallet)


def populate_account_payment(view_data: dict, customer: Customer) -> dict:
    payment_instruments = get_stripe_wallet(customer)
    if payment_instruments:
        view_data["account"]["payment"] = WalletPaymentInstrument.model_validate(
            payment_instruments[0]
        ).model_dump()
    return view_data


@router.get("/account")
def show_account(ctx: CheckoutContext = Depends(get_checkout_context)):
    customer = ctx.customer
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")

    view_data = {
        "account": {
            "customer_no": customer.customer_no,
            "email": customer.email,
        }
    }
    return populate_account_payment(view_data, customer)
