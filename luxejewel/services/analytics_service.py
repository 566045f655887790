# luxejewel/services/analytics_service.py
from collections import Counter, OrderedDict
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from luxejewel.repos.order_repo import OrderRepo
from luxejewel.repos.product_repo import ProductRepo
from luxejewel.repos.user_repo import UserRepo

CENTS = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENTS)


class AnalyticsService:
    """Read-only figures for the admin dashboard and analytics pages."""

    def __init__(self, db: Session):
        self.orders = OrderRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)

    def dashboard(self) -> Dict[str, Any]:
        orders = self.orders.list_orders()
        total_revenue = sum((_money(o.total_amount) for o in orders), Decimal("0.00"))
        order_count = len(orders)
        avg_order_value = (total_revenue / order_count).quantize(CENTS) if order_count else Decimal("0.00")
        customer_count = self.users.count_customers()

        return {
            "total_revenue": total_revenue,
            "order_count": order_count,
            "customer_count": customer_count,
            "avg_order_value": avg_order_value,
            "stats": [
                {"title": "Total Revenue", "value": f"${total_revenue:,.2f}"},
                {"title": "Orders", "value": str(order_count)},
                {"title": "Customers", "value": str(customer_count)},
                {"title": "Avg Order Value", "value": f"${avg_order_value:.2f}"},
            ],
            "recent_orders": orders[:5],
            "top_products": self._top_products(),
        }

    def _top_products(self, limit: int = 5):
        names = {p.id: p.name for p in self.products.list_products(active_only=False)}
        sold = sorted(self.orders.units_sold_by_product(), key=lambda row: row[1] or 0, reverse=True)[:limit]
        return [
            {"name": names.get(product_id, f"#{product_id}"), "sold": int(units or 0), "revenue": _money(revenue)}
            for product_id, units, revenue in sold
        ]

    def analytics(self) -> Dict[str, Any]:
        orders = [o for o in self.orders.list_orders() if o.status != "cancelled"]

        revenue_by_month: Dict[str, Decimal] = OrderedDict()
        for order in sorted(orders, key=lambda o: o.created_at):
            month = order.created_at.strftime("%Y-%m")
            revenue_by_month[month] = revenue_by_month.get(month, Decimal("0.00")) + _money(order.total_amount)

        orders_by_status = dict(Counter(o.status for o in self.orders.list_orders()))

        per_customer = Counter(o.user_id for o in orders if o.user_id is not None)
        customer_count = self.users.count_customers()
        buyers = len(per_customer)
        total = sum((_money(o.total_amount) for o in orders), Decimal("0.00"))

        return {
            "revenue_by_month": [{"month": m, "revenue": r} for m, r in revenue_by_month.items()],
            "top_products": self._top_products(),
            "orders_by_status": orders_by_status,
            "customer_stats": {
                "new_customers": buyers - sum(1 for n in per_customer.values() if n > 1),
                "returning_customers": sum(1 for n in per_customer.values() if n > 1),
                "avg_order_value": (total / len(orders)).quantize(CENTS) if orders else Decimal("0.00"),
                "conversion_rate": round(buyers / customer_count * 100, 1) if customer_count else 0.0,
            },
        }
