from __future__ import annotations

from ..extensions import db
from stockroom.time_utils import utcnow, to_utc_z


class Category(db.Model):
    """
    Product category.

    Products point at categories by foreign key, so renaming a category is
    visible on every product without rewriting product rows. A category that
    still has products cannot be deleted (enforced in category_service).
    """
    __tablename__ = "categories"
    __table_args__ = (
        db.UniqueConstraint("name", name="uq_categories_name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Category id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": to_utc_z(self.created_at),
        }


class Product(db.Model):
    """
    Product master data.

    A product owns its variants (one per size/color); stock is tracked on the
    variant, never on the product. Prices are stored in cents.

    reference is the human-readable code printed on labels, e.g. "CAM-4821".
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_category", "category_id"),
        db.Index("ix_products_created", "created_at"),
        db.CheckConstraint("min_stock_threshold >= 0", name="ck_products_min_stock_nonneg"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    reference = db.Column(db.String(32), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=False)
    brand = db.Column(db.String(120), nullable=False)

    cost_price_cents = db.Column(db.Integer, nullable=False, default=0)
    sale_price_cents = db.Column(db.Integer, nullable=False)
    min_stock_threshold = db.Column(db.Integer, nullable=False, default=3)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    category = db.relationship("Category", backref=db.backref("products", lazy=True))
    variants = db.relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductVariant.id",
    )
    alerts = db.relationship("Alert", back_populates="product", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Product id={self.id} reference={self.reference!r} name={self.name!r}>"

    @property
    def total_stock(self) -> int:
        return sum(v.current_stock for v in self.variants)

    def to_dict(self, include_variants: bool = True) -> dict:
        data = {
            "id": self.id,
            "reference": self.reference,
            "name": self.name,
            "category_id": self.category_id,
            "category": self.category.name if self.category else None,
            "brand": self.brand,
            "cost_price_cents": self.cost_price_cents,
            "sale_price_cents": self.sale_price_cents,
            "min_stock_threshold": self.min_stock_threshold,
            "total_stock": self.total_stock,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
        if include_variants:
            data["variants"] = [v.to_dict() for v in self.variants]
        return data


class ProductVariant(db.Model):
    """One size/color combination of a product; the unit stock is counted in."""
    __tablename__ = "product_variants"
    __table_args__ = (
        db.UniqueConstraint("barcode", name="uq_product_variants_barcode"),
        db.UniqueConstraint("product_id", "size", "color", name="uq_product_variants_size_color"),
        db.CheckConstraint("current_stock >= 0", name="ck_product_variants_stock_nonneg"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    size = db.Column(db.String(16), nullable=False)
    color = db.Column(db.String(64), nullable=False)
    barcode = db.Column(db.String(64), nullable=False)
    sku = db.Column(db.String(64), nullable=False)
    current_stock = db.Column(db.Integer, nullable=False, default=0)

    product = db.relationship("Product", back_populates="variants")

    def __repr__(self) -> str:
        return f"<ProductVariant id={self.id} sku={self.sku!r} stock={self.current_stock}>"

    @property
    def label(self) -> str:
        return f"{self.color} {self.size}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "size": self.size,
            "color": self.color,
            "label": self.label,
            "barcode": self.barcode,
            "sku": self.sku,
            "current_stock": self.current_stock,
        }
