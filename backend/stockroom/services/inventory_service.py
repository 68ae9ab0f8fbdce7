# Overview: Service-layer operations for inventory; stock mutations, movement log and alert evaluation.

# backend/stockroom/services/inventory_service.py

from dataclasses import dataclass, field

from flask import current_app

from ..extensions import db
from ..models import InventoryLog, Product, ProductVariant, LOG_TYPES
from ..validation import ValidationError, coerce_int, enforce_rules_operation_item
from stockroom.time_utils import utcnow
from .alert_service import evaluate_stock_alert
from .transaction import run_in_transaction
"""
Inventory Invariants (authoritative)

Stock model:
- Stock lives on ProductVariant.current_stock and is never negative.
- IN adds the quantity.
- OUT subtracts the quantity and clamps at 0.
- ADJUST adds a signed delta and clamps at 0.
- A direct set (update_variant_stock) must be >= 0 and writes no log row.

Audit:
- Each applied IN/OUT/ADJUST item appends exactly one InventoryLog row;
  OUT quantities are stored negative.
- Logs are never updated or deleted by this module.

Alerts:
- After every mutation the variant is checked once: stock == 0 raises
  out_of_stock, 0 < stock <= min_stock_threshold raises low_stock.

Batches:
- Malformed items reject the whole batch before anything is written.
- Unknown product/variant ids are skipped; the remaining items apply.
- Stock, logs and alerts of one batch are committed together.
"""


@dataclass
class OperationResult:
    logs: list = field(default_factory=list)
    skipped: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "logs": [log.to_dict() for log in self.logs],
            "skipped": self.skipped,
        }


def find_variant(product_id: int, variant_id: int) -> tuple[Product, ProductVariant] | None:
    variant = db.session.get(ProductVariant, variant_id)
    if variant is None or variant.product_id != product_id:
        return None
    return variant.product, variant


def _apply_movement(current: int, kind: str, quantity: int) -> int:
    if kind == "IN":
        return current + quantity
    if kind == "OUT":
        return max(current - quantity, 0)
    return max(current + quantity, 0)


def update_variant_stock(product_id: int, variant_id: int, quantity) -> ProductVariant | None:
    """
    Set a variant's stock directly (manual correction).

    Unknown ids are a no-op and return None.
    """
    quantity = coerce_int(quantity, "quantity")
    if quantity < 0:
        raise ValidationError("quantity must be >= 0")

    def _op():
        found = find_variant(product_id, variant_id)
        if found is None:
            return None
        product, variant = found
        variant.current_stock = quantity
        product.updated_at = utcnow()
        db.session.flush()
        evaluate_stock_alert(product, variant)
        return variant

    return run_in_transaction(_op)


def _process_items(items: list[dict], kind: str, reason: str) -> OperationResult:
    result = OperationResult()
    for item in items:
        found = find_variant(item["product_id"], item["variant_id"])
        if found is None:
            current_app.logger.warning(
                "Skipping %s for unknown product %s / variant %s",
                kind, item["product_id"], item["variant_id"],
            )
            result.skipped.append(item)
            continue

        product, variant = found
        variant.current_stock = _apply_movement(variant.current_stock, kind, item["quantity"])
        product.updated_at = utcnow()

        log = InventoryLog(
            variant_id=variant.id,
            product_id=product.id,
            product_name=product.name,
            variant_label=variant.label,
            type=kind,
            quantity=-item["quantity"] if kind == "OUT" else item["quantity"],
            resulting_stock=variant.current_stock,
            reason=reason,
        )
        db.session.add(log)
        db.session.flush()

        evaluate_stock_alert(product, variant)
        result.logs.append(log)
    return result


def process_operation(items: list, kind: str, reason: str = "", *, commit: bool = True) -> OperationResult:
    """
    Apply a batch of stock movements of one kind.

    items: [{product_id, variant_id, quantity}]
    kind: IN | OUT | ADJUST

    commit=False runs inside the caller's transaction (used by sales, which
    commit the sale rows and the stock movement together).
    """
    if kind not in LOG_TYPES:
        raise ValidationError(f"kind must be one of {', '.join(LOG_TYPES)}")
    if not isinstance(items, list) or not items:
        raise ValidationError("at least one item is required")
    clean = [enforce_rules_operation_item(item, kind) for item in items]
    reason = str(reason or "").strip()[:255]

    if not commit:
        return _process_items(clean, kind, reason)
    return run_in_transaction(lambda: _process_items(clean, kind, reason))


def list_logs(*, product_id: int | None = None, variant_id: int | None = None, limit: int = 50) -> list[InventoryLog]:
    q = db.session.query(InventoryLog)
    if product_id is not None:
        q = q.filter(InventoryLog.product_id == product_id)
    if variant_id is not None:
        q = q.filter(InventoryLog.variant_id == variant_id)
    return q.order_by(InventoryLog.created_at.desc(), InventoryLog.id.desc()).limit(limit).all()
