# Overview: Flask API routes for products, variants and barcode lookup; parses input and returns JSON responses.

# backend/stockroom/routes/products.py
"""
Product catalog routes.

- Products are created with their variants in one request.
- Deleting a product is idempotent (unknown id -> 204 as well).
- Barcode lookup treats scanner and keyboard input the same: the code is
  stripped of surrounding whitespace (scanners often append a newline) and
  then matched exactly.
"""
from flask import Blueprint, current_app, request

from ..services import catalog_service, inventory_service
from ..services.transaction import StorageError
from ..validation import ConflictError, ValidationError

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    List products newest first.

    Query params:
    - q: str (optional) - substring of name or reference
    """
    products = catalog_service.list_products(search=request.args.get("q"))
    return {
        "items": [p.to_dict() for p in products],
        "count": len(products),
    }


@products_bp.post("")
def create_product_route():
    payload = request.get_json(silent=True) or {}

    try:
        product = catalog_service.add_product(payload)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except StorageError as e:
        return {"error": str(e)}, 503
    except Exception:
        current_app.logger.exception("Failed to create product")
        return {"error": "Internal server error"}, 500

    current_app.logger.info("Created product %s (%s)", product.id, product.reference)
    return product.to_dict(), 201


@products_bp.get("/<int:product_id>")
def get_product_route(product_id: int):
    product = catalog_service.get_product(product_id)
    if product is None:
        return {"error": "Product not found"}, 404
    return product.to_dict()


@products_bp.patch("/<int:product_id>")
def update_product_route(product_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        product = catalog_service.update_product(product_id, payload)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except StorageError as e:
        return {"error": str(e)}, 503

    if product is None:
        return {"error": "Product not found"}, 404
    return product.to_dict()


@products_bp.delete("/<int:product_id>")
def delete_product_route(product_id: int):
    try:
        catalog_service.delete_product(product_id)
    except StorageError as e:
        return {"error": str(e)}, 503
    return "", 204


@products_bp.put("/<int:product_id>/variants/<int:variant_id>/stock")
def set_variant_stock_route(product_id: int, variant_id: int):
    """Set stock directly; body: {"quantity": int >= 0}."""
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return {"error": "Invalid JSON payload"}, 400

    try:
        variant = inventory_service.update_variant_stock(product_id, variant_id, payload.get("quantity"))
    except ValidationError as e:
        return {"error": str(e)}, 400
    except StorageError as e:
        return {"error": str(e)}, 503

    if variant is None:
        return {"error": "Variant not found"}, 404
    return variant.to_dict()


@products_bp.get("/lookup/<path:code>")
def lookup_barcode_route(code: str):
    found = catalog_service.find_by_barcode(code.strip())
    if found is None:
        return {"found": False, "error": "Barcode not found"}, 404
    product, variant = found
    return {
        "found": True,
        "product": product.to_dict(include_variants=False),
        "variant": variant.to_dict(),
    }
