# Overview: Derived read values for the dashboard; recomputed from current rows on every call.

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func

from ..extensions import db
from ..models import Product, ProductVariant, Sale
from .alert_service import count_unread_alerts
from stockroom.time_utils import local_day_bounds


def get_summary(*, tz_name: str = "UTC", now: datetime | None = None) -> dict:
    """
    Aggregate counts for the dashboard.

    - low_stock_count: variants with 0 < stock <= their product's threshold
    - out_of_stock_count: variants with stock == 0
    - today_*: sales whose created_at falls on the current calendar day in tz_name
    """
    total_products = db.session.query(func.count(Product.id)).scalar() or 0
    total_items = db.session.query(
        func.coalesce(func.sum(ProductVariant.current_stock), 0)
    ).scalar() or 0

    low_stock_count = (
        db.session.query(func.count(ProductVariant.id))
        .select_from(ProductVariant)
        .join(Product, ProductVariant.product_id == Product.id)
        .filter(
            ProductVariant.current_stock > 0,
            ProductVariant.current_stock <= Product.min_stock_threshold,
        )
        .scalar()
        or 0
    )
    out_of_stock_count = (
        db.session.query(func.count(ProductVariant.id))
        .filter(ProductVariant.current_stock == 0)
        .scalar()
        or 0
    )

    start, end = local_day_bounds(tz_name, now)
    today_sales, today_revenue = db.session.query(
        func.count(Sale.id),
        func.coalesce(func.sum(Sale.total_cents), 0),
    ).filter(Sale.created_at >= start, Sale.created_at < end).one()

    return {
        "total_products": int(total_products),
        "total_items": int(total_items),
        "low_stock_count": int(low_stock_count),
        "out_of_stock_count": int(out_of_stock_count),
        "unread_alerts": count_unread_alerts(),
        "today_sales": int(today_sales or 0),
        "today_revenue_cents": int(today_revenue or 0),
    }


def lowest_stock_products(limit: int = 5) -> list[dict]:
    """Products ordered by total units on hand, fewest first."""
    total_stock = func.coalesce(func.sum(ProductVariant.current_stock), 0).label("total_stock")
    rows = (
        db.session.query(Product, total_stock)
        .outerjoin(ProductVariant, ProductVariant.product_id == Product.id)
        .group_by(Product.id)
        .order_by(total_stock.asc(), Product.id.asc())
        .limit(limit)
        .all()
    )
    return [
        {
            "id": product.id,
            "reference": product.reference,
            "name": product.name,
            "category": product.category.name if product.category else None,
            "total_stock": int(stock),
        }
        for product, stock in rows
    ]
