from __future__ import annotations

from ..extensions import db
from stockroom.time_utils import utcnow, to_utc_z


LOG_TYPES = ("IN", "OUT", "ADJUST")
ALERT_TYPES = ("low_stock", "out_of_stock", "new_arrival", "price_change")


class InventoryLog(db.Model):
    """
    Append-only record of one stock movement on one variant.

    quantity is signed: OUT rows are stored negative. It is the requested
    movement; resulting_stock is what the variant held afterwards, so a
    clamped OUT/ADJUST is visible in the trail.

    product_name and variant_label are snapshots and survive product deletion
    (the foreign keys are nulled).
    """
    __tablename__ = "inventory_logs"
    __table_args__ = (
        db.Index("ix_inventory_logs_variant_created", "variant_id", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    variant_id = db.Column(db.Integer, db.ForeignKey("product_variants.id", ondelete="SET NULL"), nullable=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    product_name = db.Column(db.String(255), nullable=False)
    variant_label = db.Column(db.String(96), nullable=False)

    type = db.Column(db.String(16), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    resulting_stock = db.Column(db.Integer, nullable=False)
    reason = db.Column(db.String(255), nullable=False, default="")

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "variant_id": self.variant_id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "variant_label": self.variant_label,
            "type": self.type,
            "quantity": self.quantity,
            "resulting_stock": self.resulting_stock,
            "reason": self.reason,
            "created_at": to_utc_z(self.created_at),
        }


class Alert(db.Model):
    """System-generated notification. Only `read` changes after insert."""
    __tablename__ = "alerts"
    __table_args__ = (
        db.Index("ix_alerts_read_created", "read", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(32), nullable=False)
    message = db.Column(db.String(500), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    product_name = db.Column(db.String(255), nullable=False)
    reference = db.Column(db.String(32), nullable=False, default="")
    read = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    product = db.relationship("Product", back_populates="alerts")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "message": self.message,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "reference": self.reference,
            "read": self.read,
            "created_at": to_utc_z(self.created_at),
        }
