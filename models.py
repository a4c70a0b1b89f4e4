# Data records exchanged with the POS API.
# The client owns none of these; they are snapshots of what the server sent.

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from currency import to_decimal


def _to_int(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_bool(value, default=True):
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


@dataclass
class Category:
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool = True
    products_count: Optional[int] = None

    @classmethod
    def from_dict(cls, data):
        count = data.get("products_count")
        return cls(
            id=_to_int(data.get("id")),
            name=str(data.get("name") or ""),
            description=data.get("description"),
            is_active=_to_bool(data.get("is_active")),
            products_count=_to_int(count) if count is not None else None,
        )


@dataclass
class Product:
    id: int
    name: str
    price: Decimal
    stock_quantity: int
    category_id: Optional[int] = None
    description: Optional[str] = None
    cost_price: Decimal = Decimal("0")
    min_stock_level: int = 0
    image: Optional[str] = None
    barcode: Optional[str] = None
    is_active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        category_id = data.get("category_id")
        if category_id is None and isinstance(data.get("category"), dict):
            category_id = data["category"].get("id")
        return cls(
            id=_to_int(data.get("id")),
            name=str(data.get("name") or ""),
            price=to_decimal(data.get("price")),
            stock_quantity=_to_int(data.get("stock_quantity")),
            category_id=_to_int(category_id) if category_id is not None else None,
            description=data.get("description"),
            cost_price=to_decimal(data.get("cost_price")),
            min_stock_level=_to_int(data.get("min_stock_level")),
            image=data.get("image"),
            barcode=data.get("barcode"),
            is_active=_to_bool(data.get("is_active")),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    @property
    def is_low_stock(self):
        return self.stock_quantity <= self.min_stock_level


@dataclass
class User:
    id: int
    name: str
    email: str = ""
    role: str = "user"

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=_to_int(data.get("id")),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            role=str(data.get("role") or "user"),
        )


@dataclass
class OrderItem:
    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Optional[Decimal] = None
    id: Optional[int] = None
    product_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        product = data.get("product") if isinstance(data.get("product"), dict) else {}
        total = data.get("total_price")
        return cls(
            id=data.get("id"),
            product_id=_to_int(data.get("product_id") or product.get("id")),
            quantity=_to_int(data.get("quantity")),
            unit_price=to_decimal(data.get("unit_price")),
            total_price=to_decimal(total) if total is not None else None,
            product_name=product.get("name"),
        )


@dataclass
class Order:
    id: int
    total_amount: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    payment_method: str = "cash"
    payment_status: str = "pending"
    status: str = "pending"
    items: List[OrderItem] = field(default_factory=list)
    user: Optional[User] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        user = data.get("user")
        return cls(
            id=_to_int(data.get("id")),
            total_amount=to_decimal(data.get("total_amount")),
            tax_amount=to_decimal(data.get("tax_amount")),
            discount_amount=to_decimal(data.get("discount_amount")),
            payment_method=str(data.get("payment_method") or "cash"),
            payment_status=str(data.get("payment_status") or "pending"),
            status=str(data.get("status") or "pending"),
            items=[OrderItem.from_dict(i) for i in data.get("items") or []],
            user=User.from_dict(user) if isinstance(user, dict) else None,
            created_at=data.get("created_at"),
        )


@dataclass(frozen=True)
class CartItem:
    product: Product
    quantity: int

    @property
    def line_total(self):
        return self.product.price * self.quantity


@dataclass
class DashboardStats:
    total_sales: Decimal = Decimal("0")
    total_orders: int = 0
    total_products: int = 0
    low_stock_products: int = 0
    today_sales: Decimal = Decimal("0")
    today_orders: int = 0
    recent_orders: List[Order] = field(default_factory=list)

    @classmethod
    def empty(cls):
        return cls()

    @classmethod
    def from_dict(cls, data):
        return cls(
            total_sales=to_decimal(data.get("total_sales")),
            total_orders=_to_int(data.get("total_orders")),
            total_products=_to_int(data.get("total_products")),
            low_stock_products=_to_int(data.get("low_stock_products")),
            today_sales=to_decimal(data.get("today_sales")),
            today_orders=_to_int(data.get("today_orders")),
            recent_orders=[Order.from_dict(o) for o in data.get("recent_orders") or []],
        )
