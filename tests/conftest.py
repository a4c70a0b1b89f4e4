from decimal import Decimal

import pytest

from api import ApiError
from models import DashboardStats, Order, Product
from notifications import Notifier


class RecordingNotifier(Notifier):
    def __init__(self):
        self.messages = []

    def success(self, message):
        self.messages.append(("success", message))

    def error(self, message):
        self.messages.append(("error", message))

    @property
    def errors(self):
        return [m for kind, m in self.messages if kind == "error"]

    @property
    def successes(self):
        return [m for kind, m in self.messages if kind == "success"]


class FakeApi:
    """Stands in for PosApi; records calls, failures are set per operation."""

    def __init__(self, products=None, order_id=42):
        self.products = list(products or [])
        self.order_id = order_id
        self.calls = []
        self.fail = {}
        self.stats = DashboardStats.empty()

    def _maybe_fail(self, name):
        if name in self.fail:
            raise self.fail[name]

    def get_dashboard_stats(self):
        self.calls.append(("get_dashboard_stats",))
        self._maybe_fail("get_dashboard_stats")
        return self.stats

    def get_products(self):
        self.calls.append(("get_products",))
        self._maybe_fail("get_products")
        return list(self.products)

    def get_categories(self):
        self.calls.append(("get_categories",))
        self._maybe_fail("get_categories")
        return []

    def create_order(self, payload):
        self.calls.append(("create_order", payload))
        self._maybe_fail("create_order")
        return Order(id=self.order_id, total_amount=Decimal(str(payload["total_amount"])))

    def stk_push(self, phone_number, amount, order_id):
        self.calls.append(("stk_push", {"phone_number": phone_number, "amount": amount, "order_id": order_id}))
        self._maybe_fail("stk_push")
        return {"message": "accepted"}

    def call_names(self):
        return [c[0] for c in self.calls]


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, text=None):
        self.status_code = status_code
        self._json = json_data
        self.text = text if text is not None else ("" if json_data is None else str(json_data))

    def json(self):
        if self._json is None:
            raise ValueError("No JSON")
        return self._json


class FakeSession:
    def __init__(self, responses=None, error=None):
        self.headers = {}
        self.responses = list(responses or [])
        self.error = error
        self.requests = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.responses.pop(0)

    def close(self):
        self.closed = True


def make_product(id=1, name="Sugar 1kg", price="100", stock=5, category_id=1, active=True):
    return Product(
        id=id,
        name=name,
        price=Decimal(price),
        stock_quantity=stock,
        category_id=category_id,
        is_active=active,
    )


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def product():
    return make_product()


@pytest.fixture()
def api_error():
    return ApiError("Server down", status_code=500)
