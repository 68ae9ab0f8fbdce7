# Overview: Service-layer operations for alerts; stock alert rule plus read/unread bookkeeping.

from __future__ import annotations

from ..extensions import db
from ..models import Alert, Product, ProductVariant
from .transaction import run_in_transaction


def evaluate_stock_alert(product: Product, variant: ProductVariant) -> Alert | None:
    """
    Apply the stock alert rule to a variant after a mutation.

    - stock == 0                          -> one out_of_stock alert
    - 0 < stock <= product.min_stock_threshold -> one low_stock alert
    - otherwise                           -> nothing

    Adds the alert to the session without committing; the caller commits it
    together with the stock change that caused it.
    """
    stock = variant.current_stock
    if stock == 0:
        return _add_alert(
            product,
            "out_of_stock",
            f"{product.name} - {variant.label} is out of stock",
        )
    if stock <= product.min_stock_threshold:
        return _add_alert(
            product,
            "low_stock",
            f"{product.name} - {variant.label} is running low ({stock} units)",
        )
    return None


def add_price_change_alert(product: Product, old_cents: int, new_cents: int) -> Alert:
    return _add_alert(
        product,
        "price_change",
        f"{product.name} price changed from {old_cents / 100:.2f} to {new_cents / 100:.2f}",
    )


def _add_alert(product: Product, alert_type: str, message: str) -> Alert:
    alert = Alert(
        type=alert_type,
        message=message,
        product=product,
        product_name=product.name,
        reference=product.reference,
        read=False,
    )
    db.session.add(alert)
    db.session.flush()
    return alert


def list_alerts(*, unread_only: bool = False, limit: int | None = None) -> list[Alert]:
    q = db.session.query(Alert)
    if unread_only:
        q = q.filter(Alert.read.is_(False))
    q = q.order_by(Alert.created_at.desc(), Alert.id.desc())
    if limit is not None:
        q = q.limit(limit)
    return q.all()


def count_unread_alerts() -> int:
    return db.session.query(Alert).filter(Alert.read.is_(False)).count()


def mark_alert_read(alert_id: int) -> Alert | None:
    """Mark one alert read. Unknown ids are a no-op and return None."""
    def _op():
        alert = db.session.get(Alert, alert_id)
        if alert is None:
            return None
        alert.read = True
        return alert

    return run_in_transaction(_op)


def mark_all_alerts_read() -> int:
    """Mark every unread alert read; returns how many changed."""
    def _op():
        return (
            db.session.query(Alert)
            .filter(Alert.read.is_(False))
            .update({Alert.read: True}, synchronize_session="fetch")
        )

    return run_in_transaction(_op)
