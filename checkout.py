"""
Checkout: turn a cart into an order on the server, and for M-Pesa follow up
with an STK push keyed to the new order id.

The push is a second, independent request. If it fails the order stays as
created; there is no rollback. The cashier sees an error and the failure is
logged with the order id so it can be chased up by hand.
"""
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from api import ApiError
from cart import Cart, clear_cart, payment_amount
from models import CartItem, Order, Product

log = logging.getLogger(__name__)

EMPTY_CART = "Cart is empty"
ORDER_FAILED = "Failed to process order"
ORDER_OK = "Order processed successfully!"
PUSH_SENT = "M-Pesa payment request sent!"
PUSH_FAILED = "M-Pesa payment request failed. The order was saved; collect payment manually."
BAD_PHONE = "Invalid M-Pesa phone number. Use 254XXXXXXXXX."
CATALOG_FAILED = "Failed to fetch products"


class PaymentMethod(Enum):
    CASH = "cash"
    MPESA = "mpesa"
    CARD = "card"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key in ("mobile-money", "mobile_money", "m-pesa"):
            return cls.MPESA
        return cls(key)

    @property
    def label(self):
        return {"cash": "Cash", "mpesa": "M-Pesa", "card": "Card"}[self.value]


def normalize_msisdn(raw):
    """
    Normalise a Kenyan mobile number to 2547XXXXXXXX / 2541XXXXXXXX.
    Returns None when it can't be one.
    """
    s = re.sub(r"[\s\-().]", "", raw or "")
    if s.startswith("+"):
        s = s[1:]
    if s.startswith("0") and len(s) == 10:
        s = "254" + s[1:]
    elif len(s) == 9 and s[0] in "17":
        s = "254" + s
    if not re.fullmatch(r"254[17][0-9]{8}", s):
        return None
    return s


def _wire_number(value):
    # JSON has no Decimal; whole amounts go as ints
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def build_order_payload(cart, method):
    method = PaymentMethod.parse(method)
    return {
        "items": [
            {
                "product_id": item.product.id,
                "quantity": item.quantity,
                "unit_price": _wire_number(item.product.price),
            }
            for item in cart
        ],
        "payment_method": method.value,
        "total_amount": _wire_number(cart.total),
        "tax_amount": _wire_number(cart.tax),
    }


@dataclass
class CheckoutResult:
    cart: Cart
    order: Optional[Order] = None
    products: Optional[List[Product]] = None
    payment_requested: bool = False
    lines: Tuple[CartItem, ...] = ()

    @property
    def ok(self):
        return self.order is not None


class CheckoutOrchestrator:
    def __init__(self, api, notifier):
        self.api = api
        self.notifier = notifier

    def place_order(self, cart, method):
        if cart.is_empty:
            self.notifier.error(EMPTY_CART)
            return None
        payload = build_order_payload(cart, method)
        try:
            order = self.api.create_order(payload)
        except ApiError as e:
            log.error("Order submission failed: %s", e.message)
            self.notifier.error(e.message or ORDER_FAILED)
            return None
        log.info("Order %s created (%s, total %s)", order.id, payload["payment_method"], payload["total_amount"])
        return order

    def request_mobile_payment(self, order, total, phone):
        phone_number = normalize_msisdn(phone)
        if phone_number is None:
            log.warning("Order %s: STK push skipped, bad phone %r", order.id, phone)
            self.notifier.error(BAD_PHONE)
            return False
        amount = payment_amount(total)
        try:
            self.api.stk_push(phone_number, amount, order.id)
        except ApiError as e:
            # Order stands; flagged in the log for manual follow-up
            log.warning("Order %s: STK push for %s to %s failed: %s", order.id, amount, phone_number, e.message)
            self.notifier.error(PUSH_FAILED)
            return False
        log.info("Order %s: STK push for %s sent to %s", order.id, amount, phone_number)
        self.notifier.success(PUSH_SENT)
        return True

    def refresh_catalog(self):
        try:
            return self.api.get_products()
        except ApiError as e:
            log.error("Catalog refresh failed: %s", e.message)
            self.notifier.error(CATALOG_FAILED)
            return None

    def checkout(self, cart, method, prompt_phone=None):
        """
        Run the whole sequence. prompt_phone is called (with no arguments)
        only for M-Pesa, after the order exists; returning a blank value
        skips the push.
        """
        method = PaymentMethod.parse(method)
        order = self.place_order(cart, method)
        if order is None:
            return CheckoutResult(cart=cart)

        payment_requested = False
        if method is PaymentMethod.MPESA:
            phone = prompt_phone() if prompt_phone else None
            if phone and phone.strip():
                payment_requested = self.request_mobile_payment(order, cart.total, phone)
            else:
                log.info("Order %s: no phone entered, STK push skipped", order.id)
        else:
            self.notifier.success(ORDER_OK)

        return CheckoutResult(
            cart=clear_cart(),
            order=order,
            products=self.refresh_catalog(),
            payment_requested=payment_requested,
            lines=cart.items,
        )
