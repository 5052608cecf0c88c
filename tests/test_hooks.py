from decimal import Decimal

import stripe

from stripe_cartridge.hooks import authorize, authorize_credit_card, build_billing_details
from stripe_cartridge.models import Order
from stripe_cartridge.status import Status


def _card(order):
    return order.payment_instruments[0]


def test_authorize_credit_card_success(db, order, mocker):
    mock_pm = mocker.Mock()
    mock_pm.id = "pm_123"
    create_pm = mocker.patch("stripe_cartridge.stripe_service.create_payment_method", return_value=mock_pm)

    mock_intent = mocker.Mock()
    mock_intent.id = "pi_123"
    mock_intent.status = "succeeded"
    create_pi = mocker.patch("stripe_cartridge.stripe_service.create_payment_intent", return_value=mock_intent)

    result = authorize_credit_card(db, order, _card(order), "123", "RefArch")

    assert result == Status(Status.OK)
    assert create_pm.call_args.kwargs["card"] == {
        "number": "4242424242424242", "exp_month": 12, "exp_year": 2030, "cvc": "123"
    }
    create_pi.assert_called_once_with(
        amount=4999,
        currency="usd",
        payment_method="pm_123",
        description="MOTO transaction",
        metadata={"order_id": "00001001", "site_id": "RefArch"},
        confirm=True,
        payment_method_options={"card": {"moto": True}},
    )

    db.expire_all()
    stored = db.get(Order, "00001001")
    assert stored.stripe_payment_intent_id == "pi_123"
    assert stored.payment_status == Order.PAYMENT_STATUS_PAID


def test_authorize_credit_card_not_succeeded(db, order, mocker):
    mocker.patch("stripe_cartridge.stripe_service.create_payment_method", return_value=mocker.Mock(id="pm_1"))
    mock_intent = mocker.Mock()
    mock_intent.id = "pi_456"
    mock_intent.status = "requires_action"
    mocker.patch("stripe_cartridge.stripe_service.create_payment_intent", return_value=mock_intent)

    result = authorize_credit_card(db, order, _card(order), "123", "RefArch")

    assert result.is_error()
    assert result.message == "Transaction authorization was not successful"
    db.expire_all()
    stored = db.get(Order, "00001001")
    assert stored.stripe_payment_intent_id is None
    assert stored.payment_status == Order.PAYMENT_STATUS_NOT_PAID


def test_authorize_credit_card_unwraps_remote_error(db, order, mocker):
    mocker.patch(
        "stripe_cartridge.stripe_service.create_payment_method",
        side_effect=stripe.CardError(
            "Request req_1: declined", param="number", code="card_declined",
            json_body={"error": {"code": "card_declined", "message": "Your card was declined."}},
        ),
    )
    create_pi = mocker.patch("stripe_cartridge.stripe_service.create_payment_intent")

    result = authorize_credit_card(db, order, _card(order), "000", "RefArch")

    assert result == Status(Status.ERROR, "Your card was declined.")
    create_pi.assert_not_called()


def test_authorize_credit_card_amount_not_available(db, order, mocker):
    payment_instrument = _card(order)
    payment_instrument.amount = None
    create_pm = mocker.patch("stripe_cartridge.stripe_service.create_payment_method")

    result = authorize_credit_card(db, order, payment_instrument, "123", "RefArch")

    assert result == Status(Status.ERROR, "Payment instrument amount not available")
    create_pm.assert_not_called()


def test_billing_details_only_include_present_fields(order):
    order.customer_email = None
    order.billing_address.phone = None
    order.billing_address.state_code = None

    details = build_billing_details(order)

    assert details == {
        "address": {
            "city": "Boston",
            "country": "US",
            "line1": "10 Main St",
            "postal_code": "02110",
            "state": "",
        },
        "name": "Jane Doe",
    }


def test_authorize_is_not_supported(order):
    result = authorize(order, _card(order))

    assert result.status == Status.ERROR
    assert result.message == "Not supported"
    assert authorize(None, None) == Status(Status.ERROR, "Not supported")


def test_amount_uses_currency_fraction_digits(db, order, mocker):
    payment_instrument = _card(order)
    payment_instrument.amount = Decimal("5400")
    payment_instrument.currency_code = "JPY"
    mocker.patch("stripe_cartridge.stripe_service.create_payment_method", return_value=mocker.Mock(id="pm_1"))
    create_pi = mocker.patch(
        "stripe_cartridge.stripe_service.create_payment_intent",
        return_value=mocker.Mock(id="pi_jpy", status="succeeded"),
    )

    authorize_credit_card(db, order, payment_instrument, "123", "RefArch")

    assert create_pi.call_args.kwargs["amount"] == 5400
    assert create_pi.call_args.kwargs["currency"] == "jpy"


def test_failed_commit_rolls_back_intent_and_payment_status(db, order, mocker):
    mocker.patch("stripe_cartridge.stripe_service.create_payment_method", return_value=mocker.Mock(id="pm_1"))
    mocker.patch(
        "stripe_cartridge.stripe_service.create_payment_intent",
        return_value=mocker.Mock(id="pi_lost", status="succeeded"),
    )
    mocker.patch.object(db, "commit", side_effect=RuntimeError("disk full"))

    result = authorize_credit_card(db, order, _card(order), "123", "RefArch")

    assert result == Status(Status.ERROR, "disk full")
    db.expire_all()
    stored = db.get(Order, "00001001")
    assert stored.stripe_payment_intent_id is None
    assert stored.payment_status == Order.PAYMENT_STATUS_NOT_PAID
