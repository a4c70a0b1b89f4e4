"""
Cart engine for the POS screen.

The cart is an immutable value: every operation takes the current cart and
returns the next one, so the view only has to swap its reference and redraw.
Rejected changes (no stock, too many) go to the notifier and hand back the
same cart object.

Quantities are gated by the stock level from the last catalog fetch. The
server is the real authority on stock; this is only a guard at the till.
"""
import math
from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Tuple

from catalog import find_product
from models import CartItem

TAX_RATE = Decimal("0.16")
CENTS = Decimal("0.01")

OUT_OF_STOCK = "Product out of stock"
NOT_ENOUGH_STOCK = "Not enough stock available"


@dataclass(frozen=True)
class Cart:
    items: Tuple[CartItem, ...] = ()

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    @property
    def is_empty(self):
        return not self.items

    def get(self, product_id):
        for item in self.items:
            if item.product.id == product_id:
                return item
        return None

    @property
    def item_count(self):
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self):
        return sum((item.line_total for item in self.items), Decimal("0"))

    @property
    def tax(self):
        return (self.subtotal * TAX_RATE).quantize(CENTS, rounding=ROUND_HALF_UP)

    @property
    def total(self):
        return self.subtotal + self.tax


def payment_amount(total):
    """Amount for a push payment: the total rounded up to a whole shilling."""
    return int(math.ceil(Decimal(total)))


def add_to_cart(cart, product, catalog, notifier):
    if product.stock_quantity <= 0:
        notifier.error(OUT_OF_STOCK)
        return cart
    existing = cart.get(product.id)
    if existing:
        return set_quantity(cart, product.id, existing.quantity + 1, catalog, notifier)
    return Cart(cart.items + (CartItem(product, 1),))


def set_quantity(cart, product_id, quantity, catalog, notifier):
    if quantity <= 0:
        return remove_from_cart(cart, product_id)
    existing = cart.get(product_id)
    if existing is None:
        return cart

    # Prefer the freshest stock figure; fall back to what was captured on add
    product = find_product(catalog, product_id) or existing.product
    if quantity > product.stock_quantity:
        notifier.error(NOT_ENOUGH_STOCK)
        return cart

    return Cart(tuple(
        replace(item, quantity=quantity) if item.product.id == product_id else item
        for item in cart.items
    ))


def remove_from_cart(cart, product_id):
    if cart.get(product_id) is None:
        return cart
    return Cart(tuple(item for item in cart.items if item.product.id != product_id))


def clear_cart():
    return Cart()
