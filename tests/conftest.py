from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from stripe_cartridge.main import app as fastapi_app
from stripe_cartridge.database import Base, get_db
from stripe_cartridge.models import (
    Basket,
    Customer,
    CustomerPaymentInstrument,
    Order,
    OrderAddress,
    PaymentInstrument,
)
import stripe_cartridge.auth

# Setup test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_temp.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={
                       "check_same_thread": False})
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db():
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    # Bypass auth verification for tests
    fastapi_app.dependency_overrides[stripe_cartridge.auth.verify_token] = lambda: True
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def order(db):
    address = OrderAddress(
        first_name="Jane", last_name="Doe", address1="10 Main St", city="Boston",
        postal_code="02110", state_code="MA", country_code="US", phone="555-0100"
    )
    o = Order(
        order_no="00001001", customer_email="jane@example.com",
        currency_code="USD", billing_address=address
    )
    o.payment_instruments.append(PaymentInstrument(
        payment_method="CREDIT_CARD", amount=Decimal("49.99"), currency_code="USD",
        credit_card_type="Visa", credit_card_number="4242424242424242",
        credit_card_expiration_month=12, credit_card_expiration_year=2030
    ))
    db.add(o)
    db.commit()
    return o


@pytest.fixture
def customer(db):
    c = Customer(customer_no="C-1", email="jane@example.com")
    db.add(c)
    db.commit()
    return c


@pytest.fixture
def basket(db, customer):
    b = Basket(basket_id="B-1", customer=customer, currency_code="EUR", total_gross=Decimal("25.00"))
    b.payment_instruments.append(PaymentInstrument(
        payment_method="CREDIT_CARD", amount=Decimal("25.00"), currency_code="EUR",
        stripe_payment_method_id="pm_card_visa"
    ))
    db.add(b)
    db.commit()
    return b


@pytest.fixture
def wallet(db, customer):
    db.add_all([
        CustomerPaymentInstrument(
            customer_no=customer.customer_no, credit_card_type="Visa",
            masked_credit_card_number="************4242",
            credit_card_expiration_month=12, credit_card_expiration_year=2030,
            stripe_payment_method_id="pm_saved_1"
        ),
        CustomerPaymentInstrument(
            customer_no=customer.customer_no, credit_card_type="Amex",
            masked_credit_card_number="***********0005",
            credit_card_expiration_month=1, credit_card_expiration_year=2031,
            stripe_payment_method_id="pm_saved_2"
        ),
    ])
    db.commit()
