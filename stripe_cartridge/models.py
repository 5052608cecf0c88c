from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from stripe_cartridge.database import Base

PAYMENT_METHOD_CREDIT_CARD = "CREDIT_CARD"
STRIPE_PAYMENT_METHOD_PREFIX = "STRIPE_"


class Customer(Base):
    __tablename__ = "customers"

    customer_no = Column(String, primary_key=True)
    email = Column(String)

    wallet = relationship(
        "CustomerPaymentInstrument",
        back_populates="customer",
        order_by="CustomerPaymentInstrument.id",
    )


class CustomerPaymentInstrument(Base):
    __tablename__ = "customer_payment_instruments"

    id = Column(Integer, primary_key=True)
    customer_no = Column(String, ForeignKey("customers.customer_no"), index=True)
    payment_method = Column(String, default=PAYMENT_METHOD_CREDIT_CARD)
    credit_card_type = Column(String)
    masked_credit_card_number = Column(String)
    credit_card_expiration_month = Column(Integer)
    credit_card_expiration_year = Column(Integer)
    stripe_payment_method_id = Column(String)

    customer = relationship("Customer", back_populates="wallet")


class OrderAddress(Base):
    __tablename__ = "order_addresses"

    id = Column(Integer, primary_key=True)
    first_name = Column(String)
    last_name = Column(String)
    address1 = Column(String)
    city = Column(String)
    postal_code = Column(String)
    state_code = Column(String)
    country_code = Column(String)
    phone = Column(String)

    @property
    def full_name(self):
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class Order(Base):
    __tablename__ = "orders"

    PAYMENT_STATUS_NOT_PAID = 0
    PAYMENT_STATUS_PART_PAID = 1
    PAYMENT_STATUS_PAID = 2

    order_no = Column(String, primary_key=True)
    customer_email = Column(String)
    currency_code = Column(String)
    billing_address_id = Column(Integer, ForeignKey("order_addresses.id"))
    payment_status = Column(Integer, default=PAYMENT_STATUS_NOT_PAID, nullable=False)

    # custom attributes
    stripe_payment_intent_id = Column(String, index=True)
    stripe_is_payment_intent_in_review = Column(Boolean, default=False, nullable=False)

    billing_address = relationship("OrderAddress")
    payment_instruments = relationship(
        "PaymentInstrument", back_populates="order", order_by="PaymentInstrument.id"
    )


class Basket(Base):
    __tablename__ = "baskets"

    basket_id = Column(String, primary_key=True)
    customer_no = Column(String, ForeignKey("customers.customer_no"))
    currency_code = Column(String)
    total_gross = Column(Numeric(12, 3))                 # NULL until the basket is calculated

    # custom attributes
    stripe_payment_intent_id = Column(String, index=True)
    stripe_is_payment_intent_in_review = Column(Boolean, default=False, nullable=False)

    customer = relationship("Customer")
    payment_instruments = relationship(
        "PaymentInstrument", back_populates="basket", order_by="PaymentInstrument.id"
    )


class PaymentInstrument(Base):
    __tablename__ = "payment_instruments"

    id = Column(Integer, primary_key=True)
    basket_id = Column(String, ForeignKey("baskets.basket_id"), index=True)
    order_no = Column(String, ForeignKey("orders.order_no"), index=True)
    payment_method = Column(String, nullable=False)       # CREDIT_CARD | STRIPE_APM_* | ...
    amount = Column(Numeric(12, 3))                       # payment transaction amount
    currency_code = Column(String)
    credit_card_type = Column(String)
    credit_card_number = Column(String)
    credit_card_expiration_month = Column(Integer)
    credit_card_expiration_year = Column(Integer)

    # custom attributes
    stripe_payment_method_id = Column(String)

    basket = relationship("Basket", back_populates="payment_instruments")
    order = relationship("Order", back_populates="payment_instruments")

    @property
    def is_stripe(self) -> bool:
        return (
            self.payment_method == PAYMENT_METHOD_CREDIT_CARD
            or (self.payment_method or "").startswith(STRIPE_PAYMENT_METHOD_PREFIX)
        )
