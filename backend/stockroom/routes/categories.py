# Overview: Flask API routes for category management; parses input and returns JSON responses.

from flask import Blueprint, request

from ..services import category_service
from ..services.transaction import StorageError
from ..validation import ConflictError, ValidationError

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.get("")
def list_categories_route():
    categories = category_service.list_categories()
    items = []
    for category in categories:
        data = category.to_dict()
        data["product_count"] = category_service.count_products(category.id)
        items.append(data)
    return {"items": items, "count": len(items)}


@categories_bp.post("")
def create_category_route():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return {"error": "Invalid JSON payload"}, 400

    try:
        category = category_service.add_category(payload.get("name"))
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except StorageError as e:
        return {"error": str(e)}, 503

    return category.to_dict(), 201


@categories_bp.patch("/<int:category_id>")
def rename_category_route(category_id: int):
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return {"error": "Invalid JSON payload"}, 400

    try:
        category = category_service.update_category(category_id, payload.get("name"))
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ConflictError as e:
        return {"error": str(e)}, 409
    except StorageError as e:
        return {"error": str(e)}, 503

    if category is None:
        return {"error": "Category not found"}, 404
    return category.to_dict()


@categories_bp.delete("/<int:category_id>")
def delete_category_route(category_id: int):
    """Rejected with 409 while products use the category; unknown ids -> 204."""
    try:
        category_service.delete_category(category_id)
    except ConflictError as e:
        return {"error": str(e)}, 409
    except StorageError as e:
        return {"error": str(e)}, 503
    return "", 204
