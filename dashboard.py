import logging

from api import ApiError
from currency import format_date, format_kes
from models import DashboardStats

log = logging.getLogger(__name__)


def load_stats(api):
    """
    Fetch the dashboard snapshot. The dashboard is informational, so a
    failure is only logged and the zero snapshot is shown instead.
    """
    try:
        return api.get_dashboard_stats()
    except ApiError as e:
        log.error("Failed to fetch dashboard stats: %s", e.message)
        return DashboardStats.empty()


def stat_cards(stats):
    stats = stats or DashboardStats.empty()
    return [
        ("Total Sales", format_kes(stats.total_sales)),
        ("Total Orders", str(stats.total_orders)),
        ("Products", str(stats.total_products)),
        ("Low Stock", str(stats.low_stock_products)),
    ]


def today_summary(stats):
    stats = stats or DashboardStats.empty()
    return [
        ("Today's Sales", format_kes(stats.today_sales)),
        ("Today's Orders", str(stats.today_orders)),
    ]


def recent_order_rows(stats):
    if not stats:
        return []
    return [
        (f"#{order.id}", format_kes(order.total_amount), order.status, format_date(order.created_at))
        for order in stats.recent_orders
    ]
