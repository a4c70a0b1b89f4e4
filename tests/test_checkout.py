import logging
from decimal import Decimal

import pytest

from api import ApiError
from cart import Cart, add_to_cart, set_quantity
from checkout import (
    BAD_PHONE,
    EMPTY_CART,
    ORDER_FAILED,
    ORDER_OK,
    PUSH_FAILED,
    PUSH_SENT,
    CheckoutOrchestrator,
    PaymentMethod,
    build_order_payload,
    normalize_msisdn,
)
from conftest import FakeApi, make_product


@pytest.fixture()
def cart(notifier, product):
    cart = add_to_cart(Cart(), product, [product], notifier)
    return add_to_cart(cart, product, [product], notifier)


def test_payload_shape(cart):
    assert build_order_payload(cart, "cash") == {
        "items": [{"product_id": 1, "quantity": 2, "unit_price": 100}],
        "payment_method": "cash",
        "total_amount": 232,
        "tax_amount": 32,
    }


def test_payload_fractional_amounts_are_floats(notifier):
    p = make_product(price="33.33", stock=10)
    cart = add_to_cart(Cart(), p, [p], notifier)
    payload = build_order_payload(cart, PaymentMethod.CARD)
    assert payload["items"][0]["unit_price"] == 33.33
    assert payload["tax_amount"] == 5.33
    assert payload["total_amount"] == 38.66
    assert payload["payment_method"] == "card"


def test_payment_method_parse():
    assert PaymentMethod.parse("mobile-money") is PaymentMethod.MPESA
    assert PaymentMethod.parse("MPESA") is PaymentMethod.MPESA
    assert PaymentMethod.parse("cash") is PaymentMethod.CASH
    with pytest.raises(ValueError):
        PaymentMethod.parse("cheque")


@pytest.mark.parametrize("raw, expected", [
    ("254712345678", "254712345678"),
    ("+254 712 345 678", "254712345678"),
    ("0712-345-678", "254712345678"),
    ("0110345678", "254110345678"),
    ("712345678", "254712345678"),
    ("12345", None),
    ("", None),
    (None, None),
])
def test_normalize_msisdn(raw, expected):
    assert normalize_msisdn(raw) == expected


def test_empty_cart_makes_no_call(notifier):
    api = FakeApi()
    result = CheckoutOrchestrator(api, notifier).checkout(Cart(), "cash")
    assert api.calls == []
    assert notifier.errors == [EMPTY_CART]
    assert not result.ok


def test_cash_checkout_clears_cart_and_refreshes(notifier, cart, product):
    api = FakeApi(products=[make_product(stock=3)])
    result = CheckoutOrchestrator(api, notifier).checkout(cart, "cash")

    assert api.call_names() == ["create_order", "get_products"]
    assert result.ok and result.order.id == 42
    assert result.cart.is_empty
    assert result.products[0].stock_quantity == 3
    assert [i.quantity for i in result.lines] == [2]
    assert not result.payment_requested
    assert notifier.successes == [ORDER_OK]


def test_mpesa_push_keyed_to_order(notifier, cart):
    api = FakeApi(order_id=42)
    result = CheckoutOrchestrator(api, notifier).checkout(cart, "mobile-money", prompt_phone=lambda: "0712345678")

    assert api.call_names() == ["create_order", "stk_push", "get_products"]
    push = api.calls[1][1]
    assert push == {"phone_number": "254712345678", "amount": 232, "order_id": 42}
    assert api.calls[0][1]["payment_method"] == "mpesa"
    assert result.payment_requested
    assert result.cart.is_empty
    assert notifier.successes == [PUSH_SENT]


def test_mpesa_amount_is_ceiling(notifier):
    p = make_product(price="33.33", stock=10)
    cart = set_quantity(add_to_cart(Cart(), p, [p], notifier), 1, 3, [p], notifier)
    api = FakeApi()
    CheckoutOrchestrator(api, notifier).checkout(cart, PaymentMethod.MPESA, prompt_phone=lambda: "254712345678")
    # total 115.99
    assert api.calls[1][1]["amount"] == 116


def test_mpesa_without_phone_skips_push(notifier, cart):
    api = FakeApi()
    result = CheckoutOrchestrator(api, notifier).checkout(cart, "mpesa", prompt_phone=lambda: None)
    assert api.call_names() == ["create_order", "get_products"]
    assert result.ok and result.cart.is_empty
    assert not result.payment_requested


def test_mpesa_bad_phone_notifies(notifier, cart):
    api = FakeApi()
    result = CheckoutOrchestrator(api, notifier).checkout(cart, "mpesa", prompt_phone=lambda: "12")
    assert "stk_push" not in api.call_names()
    assert notifier.errors == [BAD_PHONE]
    assert result.ok


def test_push_failure_keeps_order_and_logs(notifier, cart, caplog):
    api = FakeApi(order_id=7)
    api.fail["stk_push"] = ApiError("Gateway timeout", status_code=504)
    with caplog.at_level(logging.WARNING, logger="checkout"):
        result = CheckoutOrchestrator(api, notifier).checkout(cart, "mpesa", prompt_phone=lambda: "0712345678")

    assert result.ok and result.order.id == 7
    assert result.cart.is_empty
    assert not result.payment_requested
    assert notifier.errors == [PUSH_FAILED]
    assert "Order 7" in caplog.text


def test_order_failure_uses_server_message(notifier, cart):
    api = FakeApi()
    api.fail["create_order"] = ApiError("Insufficient stock for Sugar 1kg", status_code=422)
    result = CheckoutOrchestrator(api, notifier).checkout(cart, "cash")

    assert not result.ok
    assert result.cart is cart
    assert api.call_names() == ["create_order"]
    assert notifier.errors == ["Insufficient stock for Sugar 1kg"]


def test_order_failure_generic_message(notifier, cart):
    api = FakeApi()
    api.fail["create_order"] = ApiError("")
    CheckoutOrchestrator(api, notifier).checkout(cart, "card")
    assert notifier.errors == [ORDER_FAILED]


def test_refresh_failure_still_completes(notifier, cart):
    api = FakeApi()
    api.fail["get_products"] = ApiError("No connection to server")
    result = CheckoutOrchestrator(api, notifier).checkout(cart, "cash")
    assert result.ok and result.cart.is_empty
    assert result.products is None
    assert notifier.errors == ["Failed to fetch products"]


def test_place_order_total_matches_cart(notifier, cart):
    api = FakeApi()
    order = CheckoutOrchestrator(api, notifier).place_order(cart, "cash")
    assert order.total_amount == Decimal("232")
