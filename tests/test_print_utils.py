import subprocess
from datetime import datetime

import print_utils
from cart import Cart, add_to_cart
from conftest import make_product
from models import Order
from print_utils import build_receipt, print_receipt


def _receipt(notifier):
    p = make_product(name="Sugar 1kg Premium Brand White")
    cart = add_to_cart(add_to_cart(Cart(), p, [p], notifier), p, [p], notifier)
    return build_receipt(cart.items, Order(id=42), "mpesa", shop_name="DUKA", printed_at=datetime(2024, 5, 1, 8, 30))


def test_receipt_content(notifier):
    text = _receipt(notifier)
    assert "DUKA" in text.splitlines()[0]
    assert "Order No : #42" in text
    assert "Date     : 01/05/2024 08:30" in text
    assert "Sugar 1kg Premium " in text
    assert "200.00" in text
    assert "VAT (16%)" in text
    assert "32.00" in text
    assert "232.00" in text
    assert "Payment   : M-Pesa" in text


def test_receipt_lines_fit_width(notifier):
    for line in _receipt(notifier).splitlines():
        assert len(line) <= print_utils.WIDTH


def test_print_unsupported_platform(monkeypatch):
    monkeypatch.setattr(print_utils.platform, "system", lambda: "Plan9")
    assert print_receipt("hello") is False


def test_print_linux_uses_lpr(monkeypatch):
    calls = []
    monkeypatch.setattr(print_utils.platform, "system", lambda: "Linux")
    monkeypatch.setattr(print_utils.subprocess, "run", lambda args, check: calls.append(args))
    assert print_receipt("hello") is True
    assert calls[0][0] == "lpr"


def test_print_failure_returns_false(monkeypatch):
    def fail(args, check):
        raise subprocess.CalledProcessError(1, args)
    monkeypatch.setattr(print_utils.platform, "system", lambda: "Darwin")
    monkeypatch.setattr(print_utils.subprocess, "run", fail)
    assert print_receipt("hello") is False
