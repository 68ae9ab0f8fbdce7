# backend/stockroom/services/catalog_service.py
"""
Catalog Service: products, variants and barcode lookup.

Codes generated here:
- reference: first three letters of the category, upper-cased, plus the last
  four digits of the millisecond clock ("Camisetas" -> "CAM-4821").
- sku: category, color and size prefixes ("CAM-AZU-M"); prefixes skip
  spaces and punctuation ("T-Shirts" -> "TSH").
- barcode: "789" followed by ten random digits (13 characters). Regenerated
  on collision with an existing variant.
"""
from __future__ import annotations

import random
import time

from flask import current_app

from ..extensions import db
from ..models import Product, ProductVariant
from ..validation import ValidationError, enforce_rules_product_draft, enforce_rules_product_patch
from .alert_service import add_price_change_alert
from .category_service import get_or_create_category
from .transaction import run_in_transaction

BARCODE_PREFIX = "789"
BARCODE_ATTEMPTS = 5


def _code_prefix(text: str) -> str:
    return "".join(ch for ch in text if ch.isalnum())[:3].upper()


def generate_reference(category_name: str, now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{_code_prefix(category_name)}-{str(now_ms)[-4:]}"


def generate_sku(category_name: str, color: str, size: str) -> str:
    return f"{_code_prefix(category_name)}-{_code_prefix(color)}-{size.upper()}"


def generate_barcode(rng: random.Random | None = None) -> str:
    rng = rng or random.SystemRandom()
    return BARCODE_PREFIX + "".join(str(rng.randrange(10)) for _ in range(10))


def _unique_barcode(taken: set[str]) -> str:
    """
    Draw barcodes until one is free both in the database and in ``taken``
    (codes already handed out in the current batch).
    """
    for _ in range(BARCODE_ATTEMPTS):
        code = generate_barcode()
        if code in taken:
            continue
        exists = db.session.query(ProductVariant.id).filter_by(barcode=code).first()
        if exists is None:
            taken.add(code)
            return code
        current_app.logger.info("Barcode %s already assigned, drawing another", code)
    raise ValidationError("could not allocate a unique barcode")


def add_product(draft: dict) -> Product:
    """
    Create a product with its variants from a draft.

    draft keys: name, category (name), brand, sale_price_cents,
    cost_price_cents, min_stock_threshold (optional) and
    variants: [{size, color, initial_stock}].

    Unknown category names are created on the fly.
    """
    clean = enforce_rules_product_draft(draft)
    threshold = clean["min_stock_threshold"]
    if threshold is None:
        threshold = current_app.config.get("DEFAULT_MIN_STOCK_THRESHOLD", 3)

    def _op():
        category = get_or_create_category(clean["category"])
        product = Product(
            reference=generate_reference(category.name),
            name=clean["name"],
            category=category,
            brand=clean["brand"],
            cost_price_cents=clean["cost_price_cents"],
            sale_price_cents=clean["sale_price_cents"],
            min_stock_threshold=threshold,
        )
        db.session.add(product)
        taken: set[str] = set()
        for v in clean["variants"]:
            product.variants.append(
                ProductVariant(
                    size=v["size"],
                    color=v["color"],
                    sku=generate_sku(category.name, v["color"], v["size"]),
                    barcode=_unique_barcode(taken),
                    current_stock=v["initial_stock"],
                )
            )
        db.session.flush()
        return product

    return run_in_transaction(_op)


def update_product(product_id: int, patch: dict) -> Product | None:
    """
    Edit product fields. A changed sale price raises a price_change alert.
    Unknown ids are a no-op and return None.
    """
    clean = enforce_rules_product_patch(patch)

    def _op():
        product = db.session.get(Product, product_id)
        if product is None:
            return None

        old_price = product.sale_price_cents
        for key, value in clean.items():
            if key == "category":
                product.category = get_or_create_category(value)
            else:
                setattr(product, key, value)

        new_price = product.sale_price_cents
        if new_price != old_price:
            add_price_change_alert(product, old_price, new_price)
        db.session.flush()
        return product

    return run_in_transaction(_op)


def delete_product(product_id: int) -> bool:
    """
    Delete a product and its variants.

    Idempotent: an unknown id returns False without raising.
    """
    def _op():
        product = db.session.get(Product, product_id)
        if product is None:
            return False
        db.session.delete(product)
        return True

    return run_in_transaction(_op)


def get_product(product_id: int) -> Product | None:
    return db.session.get(Product, product_id)


def list_products(search: str | None = None) -> list[Product]:
    """Products newest first, optionally filtered by name or reference substring."""
    q = db.session.query(Product)
    if search:
        pattern = f"%{search.strip()}%"
        q = q.filter(db.or_(Product.name.ilike(pattern), Product.reference.ilike(pattern)))
    return q.order_by(Product.created_at.desc(), Product.id.desc()).all()


def find_by_barcode(code: str) -> tuple[Product, ProductVariant] | None:
    """
    Exact barcode lookup. Returns (product, variant) or None.

    Scanned and typed codes go through here alike; no trimming or fuzzy
    matching happens at this layer.
    """
    if not code:
        return None
    variant = db.session.query(ProductVariant).filter(ProductVariant.barcode == code).first()
    if variant is None:
        return None
    return variant.product, variant
