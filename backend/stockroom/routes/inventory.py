# backend/stockroom/routes/inventory.py
"""
Stock movement routes.

POST /api/inventory/operations
    {"kind": "IN" | "OUT" | "ADJUST", "reason": str,
     "items": [{"product_id", "variant_id", "quantity"}]}

Items naming unknown products/variants are skipped and reported under
"skipped"; the rest of the batch is applied.
"""
from flask import Blueprint, current_app, request

from ..services import inventory_service
from ..services.transaction import StorageError
from ..validation import ValidationError

inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")


@inventory_bp.post("/operations")
def process_operation_route():
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return {"error": "Invalid JSON payload"}, 400
    kind = str(payload.get("kind") or "").upper()

    try:
        result = inventory_service.process_operation(
            payload.get("items"),
            kind,
            str(payload.get("reason") or ""),
        )
    except ValidationError as e:
        return {"error": str(e)}, 400
    except StorageError as e:
        current_app.logger.error("Inventory operation %s failed: %s", kind, e)
        return {"error": str(e)}, 503

    return result.to_dict(), 201


@inventory_bp.get("/logs")
def list_logs_route():
    """
    Recent movement log, newest first.

    Query params: product_id, variant_id, limit (default 50, max 500)
    """
    limit = min(request.args.get("limit", default=50, type=int), 500)
    logs = inventory_service.list_logs(
        product_id=request.args.get("product_id", type=int),
        variant_id=request.args.get("variant_id", type=int),
        limit=limit,
    )
    return {"items": [log.to_dict() for log in logs], "count": len(logs)}
