from __future__ import annotations

from typing import Any


# Maximum price: 9,999,999.99 (999,999,999 cents)
# This prevents database overflow issues and nonsensical prices
MAX_PRICE_CENTS = 999_999_999


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate category)."""


def require_text(payload: dict, key: str, *, max_length: int = 255) -> str:
    """Return payload[key] stripped; blank, missing or overlong values are rejected."""
    value = payload.get(key)
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} is required")
    value = value.strip()
    if len(value) > max_length:
        raise ValidationError(f"{key} exceeds max length {max_length}")
    return value


def coerce_int(value: Any, key: str) -> int:
    """
    Strict integer coercion for JSON input.

    Accepts ints and plain digit strings; rejects bools, floats,
    decimals and scientific notation.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{key} must be an integer")
        if "e" in stripped.lower():
            raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
        if "." in stripped:
            raise ValidationError(f"{key} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{key} must be an integer")
    if isinstance(value, float):
        raise ValidationError(f"{key} must be an integer, not a decimal")
    raise ValidationError(f"{key} must be an integer")


def enforce_price_cents(value: Any, key: str, *, allow_zero: bool) -> int:
    price = coerce_int(value, key)
    if price < 0 or (price == 0 and not allow_zero):
        raise ValidationError(f"{key} must be {'>= 0' if allow_zero else '> 0'}")
    if price > MAX_PRICE_CENTS:
        raise ValidationError(f"{key} cannot exceed {MAX_PRICE_CENTS}")
    return price


def enforce_rules_product_draft(draft: dict) -> dict:
    """
    Validate a new-product draft and return a normalized copy.

    Required: name, category, brand, sale_price_cents (> 0) and at least one
    variant with size and color. Nothing is written before this passes.
    """
    if not isinstance(draft, dict):
        raise ValidationError("Invalid JSON payload")

    clean = {
        "name": require_text(draft, "name"),
        "category": require_text(draft, "category", max_length=120),
        "brand": require_text(draft, "brand", max_length=120),
        "sale_price_cents": enforce_price_cents(draft.get("sale_price_cents"), "sale_price_cents", allow_zero=False),
        "cost_price_cents": enforce_price_cents(draft.get("cost_price_cents", 0), "cost_price_cents", allow_zero=True),
    }

    threshold = draft.get("min_stock_threshold")
    if threshold is not None:
        threshold = coerce_int(threshold, "min_stock_threshold")
        if threshold < 0:
            raise ValidationError("min_stock_threshold must be >= 0")
    clean["min_stock_threshold"] = threshold

    variants = draft.get("variants")
    if not isinstance(variants, list) or not variants:
        raise ValidationError("at least one variant is required")

    seen = set()
    clean_variants = []
    for raw in variants:
        if not isinstance(raw, dict):
            raise ValidationError("each variant must be an object")
        size = require_text(raw, "size", max_length=16)
        color = require_text(raw, "color", max_length=64)
        stock = coerce_int(raw.get("initial_stock", 0), "initial_stock")
        if stock < 0:
            raise ValidationError("initial_stock must be >= 0")
        if (size, color) in seen:
            raise ValidationError(f"duplicate variant {color} {size}")
        seen.add((size, color))
        clean_variants.append({"size": size, "color": color, "initial_stock": stock})
    clean["variants"] = clean_variants
    return clean


PRODUCT_MUTABLE_FIELDS = {"name", "brand", "category", "cost_price_cents", "sale_price_cents", "min_stock_threshold"}


def enforce_rules_product_patch(patch: dict) -> dict:
    if not isinstance(patch, dict):
        raise ValidationError("Invalid JSON payload")
    for key in patch:
        if key not in PRODUCT_MUTABLE_FIELDS:
            raise ValidationError(f"Field not allowed: {key}")

    clean: dict = {}
    for key in ("name", "brand", "category"):
        if key in patch:
            clean[key] = require_text(patch, key)
    if "sale_price_cents" in patch:
        clean["sale_price_cents"] = enforce_price_cents(patch["sale_price_cents"], "sale_price_cents", allow_zero=False)
    if "cost_price_cents" in patch:
        clean["cost_price_cents"] = enforce_price_cents(patch["cost_price_cents"], "cost_price_cents", allow_zero=True)
    if "min_stock_threshold" in patch:
        threshold = coerce_int(patch["min_stock_threshold"], "min_stock_threshold")
        if threshold < 0:
            raise ValidationError("min_stock_threshold must be >= 0")
        clean["min_stock_threshold"] = threshold
    return clean


def enforce_rules_operation_item(item: Any, kind: str) -> dict:
    # IN/OUT take a positive quantity; ADJUST takes a non-zero signed delta
    if not isinstance(item, dict):
        raise ValidationError("each item must be an object")
    if item.get("product_id") is None or item.get("variant_id") is None:
        raise ValidationError("product_id and variant_id are required")
    quantity = coerce_int(item.get("quantity"), "quantity")
    if kind == "ADJUST":
        if quantity == 0:
            raise ValidationError("quantity must be non-zero for ADJUST")
    elif quantity <= 0:
        raise ValidationError(f"quantity must be > 0 for {kind}")
    return {
        "product_id": coerce_int(item["product_id"], "product_id"),
        "variant_id": coerce_int(item["variant_id"], "variant_id"),
        "quantity": quantity,
    }
