"""
Sales Service - checkout

A sale is written in one transaction:
  1. Sale row and SaleItem rows (unit price snapshotted from the product)
  2. OUT movement for every line through inventory_service.process_operation
  3. Alerts raised by those movements
and committed once. If any step fails nothing is committed.

Over-selling policy: quantities larger than the stock on hand are accepted
and the variant clamps at zero. Lines must reference existing variants,
since the sale needs their price and name snapshot.
"""

from __future__ import annotations

from ..extensions import db
from ..models import Sale, SaleItem, PAYMENT_METHODS
from ..validation import ValidationError, coerce_int
from stockroom.time_utils import local_day_bounds
from .inventory_service import find_variant, process_operation
from .transaction import run_in_transaction


class SaleError(ValidationError):
    """Raised for sale payloads that cannot be recorded."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


def compute_discount_cents(subtotal_cents: int, discount_percent: int) -> int:
    # nearest-cent rounding (half-up)
    return (subtotal_cents * discount_percent + 50) // 100


def _sale_reason(sale: Sale) -> str:
    if sale.customer_name:
        return f"Sale #{sale.id} - {sale.customer_name}"
    return f"Sale #{sale.id}"


def _clean_lines(raw_items) -> list[dict]:
    if not isinstance(raw_items, list) or not raw_items:
        raise SaleError("Cannot register a sale with no items")

    lines = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            raise SaleError("each item must be an object")
        quantity = coerce_int(raw.get("quantity"), "quantity")
        if quantity <= 0:
            raise SaleError("quantity must be > 0")
        lines.append({
            "product_id": coerce_int(raw.get("product_id"), "product_id"),
            "variant_id": coerce_int(raw.get("variant_id"), "variant_id"),
            "quantity": quantity,
        })
    return lines


def register_sale(payload: dict) -> Sale:
    """
    Record a sale and take its items out of stock.

    payload keys: items [{product_id, variant_id, quantity}],
    discount_percent (0-100), payment_method, cash_received_cents (cash only),
    customer_name (optional).
    """
    if not isinstance(payload, dict):
        raise SaleError("Invalid JSON payload")

    lines = _clean_lines(payload.get("items"))

    discount_percent = coerce_int(payload.get("discount_percent", 0), "discount_percent")
    if not 0 <= discount_percent <= 100:
        raise SaleError("discount_percent must be between 0 and 100")

    payment_method = str(payload.get("payment_method") or "cash").strip().lower()
    if payment_method not in PAYMENT_METHODS:
        raise SaleError(f"payment_method must be one of {', '.join(PAYMENT_METHODS)}")

    cash_received = payload.get("cash_received_cents")
    if cash_received is not None:
        if payment_method != "cash":
            raise SaleError("cash_received_cents only applies to cash payments")
        cash_received = coerce_int(cash_received, "cash_received_cents")

    customer_name = str(payload.get("customer_name") or "").strip()[:255] or None

    def _op():
        sale = Sale(
            discount_percent=discount_percent,
            payment_method=payment_method,
            customer_name=customer_name,
        )

        missing = []
        for line in lines:
            found = find_variant(line["product_id"], line["variant_id"])
            if found is None:
                missing.append(line)
                continue
            product, variant = found
            sale.items.append(
                SaleItem(
                    product_id=product.id,
                    variant_id=variant.id,
                    product_name=product.name,
                    variant_label=variant.label,
                    sku=variant.sku,
                    quantity=line["quantity"],
                    unit_price_cents=product.sale_price_cents,
                )
            )
        if missing:
            raise SaleError("Sale references unknown variants", details={"items": missing})

        sale.subtotal_cents = sum(item.line_total_cents for item in sale.items)
        sale.discount_cents = compute_discount_cents(sale.subtotal_cents, discount_percent)
        sale.total_cents = sale.subtotal_cents - sale.discount_cents

        if cash_received is not None:
            if cash_received < sale.total_cents:
                raise SaleError(
                    "Cash received does not cover the total",
                    details={"total_cents": sale.total_cents, "cash_received_cents": cash_received},
                )
            sale.cash_received_cents = cash_received
            sale.change_cents = cash_received - sale.total_cents

        db.session.add(sale)
        db.session.flush()  # sale.id is needed for the movement reason

        process_operation(lines, "OUT", _sale_reason(sale), commit=False)
        return sale

    return run_in_transaction(_op)


def get_sale(sale_id: int) -> Sale | None:
    return db.session.get(Sale, sale_id)


def list_sales(limit: int = 100) -> list[Sale]:
    return (
        db.session.query(Sale)
        .order_by(Sale.created_at.desc(), Sale.id.desc())
        .limit(limit)
        .all()
    )


def sales_for_today(tz_name: str, now=None) -> list[Sale]:
    start, end = local_day_bounds(tz_name, now)
    return (
        db.session.query(Sale)
        .filter(Sale.created_at >= start, Sale.created_at < end)
        .all()
    )
