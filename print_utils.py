import logging
import os
import platform
import subprocess
import tempfile
from datetime import datetime

from cart import CENTS, TAX_RATE, Cart
from checkout import PaymentMethod

log = logging.getLogger(__name__)

WIDTH = 40


def _money(value):
    return f"{value.quantize(CENTS):,.2f}"


def build_receipt(lines, order, payment_method, shop_name="POS", footer_note="Thank you for shopping with us!", printed_at=None):
    """
    Plain-text receipt for a completed order. lines are the CartItems that
    were submitted; totals are recomputed from them by the cart.
    """
    printed_at = printed_at or datetime.now()
    method = PaymentMethod.parse(payment_method)

    out = [shop_name.center(WIDTH), "-" * WIDTH]
    out.append(f"Order No : #{order.id}")
    out.append(f"Date     : {printed_at.strftime('%d/%m/%Y %H:%M')}")
    out.append("-" * WIDTH)
    out.append(f"{'Item':<18}{'Qty':>4}{'Price':>9}{'Total':>9}")
    out.append("-" * WIDTH)
    for item in lines:
        name = item.product.name[:18]
        out.append(f"{name:<18}{item.quantity:>4}{_money(item.product.price):>9}{_money(item.line_total):>9}")
    cart = Cart(tuple(lines))
    out.append("-" * WIDTH)
    vat_label = f"VAT ({int(TAX_RATE * 100)}%)"
    out.append(f"{'Subtotal':<22}{'KES':>4}{_money(cart.subtotal):>14}")
    out.append(f"{vat_label:<22}{'KES':>4}{_money(cart.tax):>14}")
    out.append(f"{'TOTAL':<22}{'KES':>4}{_money(cart.total):>14}")
    out.append(f"{'Payment':<10}: {method.label}")
    out.append("-" * WIDTH)
    if footer_note:
        out.append(footer_note.center(WIDTH))
    out.append("\n")
    return "\n".join(out)


def print_receipt(receipt_text):
    """Send receipt to the default printer. Returns False if it couldn't."""
    system = platform.system()
    if system not in ("Windows", "Linux", "Darwin"):
        log.warning("Automatic printing not supported on %s\n%s", system, receipt_text)
        return False
    try:
        with tempfile.NamedTemporaryFile(delete=False, mode="w", encoding="utf-8", suffix=".txt") as f:
            f.write(receipt_text)
            temp_filename = f.name
        if system == "Windows":
            os.startfile(temp_filename, "print")
        elif system == "Linux":
            # needs cups-client (lpr)
            subprocess.run(["lpr", temp_filename], check=True)
        else:
            subprocess.run(["lp", temp_filename], check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        log.error("Receipt printing failed: %s", e)
        return False
    return True
