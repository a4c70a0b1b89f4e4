# Thin client for the POS REST API. Pricing, stock and payment settlement
# all live on the server; this module only moves JSON back and forth.

import logging

import requests

from models import Category, DashboardStats, Order, Product

log = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


def unwrap(data):
    """Strip the optional {"data": ...} envelope."""
    if isinstance(data, dict) and "data" in data:
        return data["data"]
    return data


def error_message(payload, default=None):
    # Laravel-style bodies: {"message": ...} or {"errors": {"field": ["..."]}}
    if isinstance(payload, dict):
        if payload.get("message"):
            return str(payload["message"])
        errors = payload.get("errors")
        if isinstance(errors, dict):
            for messages in errors.values():
                if isinstance(messages, list) and messages:
                    return str(messages[0])
                if messages:
                    return str(messages)
    return default


class PosApi:
    def __init__(self, base_url, token="", timeout=10, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if token:
            self.session.headers.update({"Authorization": f"Bearer {token}"})

    def _request(self, method, path, **kwargs):
        url = f"{self.base_url}/{path.lstrip('/')}"
        log.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            raise ApiError(f"Request to {path} timed out") from e
        except requests.exceptions.ConnectionError as e:
            raise ApiError("No connection to server") from e
        except requests.exceptions.RequestException as e:
            raise ApiError(str(e)) from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not 200 <= response.status_code < 300:
            log.warning("%s %s -> %s %s", method, path, response.status_code, response.text.strip()[:200])
            raise ApiError(
                error_message(payload, f"Server returned {response.status_code}"),
                status_code=response.status_code,
                payload=payload,
            )
        if payload is None:
            raise ApiError(f"Invalid JSON from {path}", status_code=response.status_code)
        return payload

    def get_dashboard_stats(self):
        data = unwrap(self._request("GET", "/dashboard/stats"))
        if not isinstance(data, dict):
            raise ApiError("Unexpected dashboard response", payload=data)
        return DashboardStats.from_dict(data)

    def get_products(self):
        data = unwrap(self._request("GET", "/products"))
        if not isinstance(data, list):
            raise ApiError("Unexpected products response", payload=data)
        return [Product.from_dict(p) for p in data]

    def get_categories(self):
        data = unwrap(self._request("GET", "/categories"))
        if not isinstance(data, list):
            raise ApiError("Unexpected categories response", payload=data)
        return [Category.from_dict(c) for c in data]

    def create_order(self, payload):
        data = self._request("POST", "/orders", json=payload)
        if isinstance(data, dict) and "id" not in data:
            data = unwrap(data)
        if not isinstance(data, dict) or data.get("id") is None:
            raise ApiError("Order created without an id", payload=data)
        return Order.from_dict(data)

    def stk_push(self, phone_number, amount, order_id):
        return self._request("POST", "/mpesa/stk-push", json={
            "phone_number": phone_number,
            "amount": amount,
            "order_id": order_id,
        })

    def close(self):
        self.session.close()
