# Overview: Flask API routes for checkout; parses input and returns JSON responses.

from flask import Blueprint, current_app, request

from ..services import sales_service
from ..services.sales_service import SaleError
from ..services.transaction import StorageError
from ..validation import ValidationError

sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.post("")
def register_sale_route():
    """
    Register a completed sale and take its items out of stock.

    Over-selling is accepted; stock clamps at zero.
    """
    payload = request.get_json(silent=True) or {}

    try:
        sale = sales_service.register_sale(payload)
    except SaleError as e:
        return {"error": str(e), "details": e.details}, 400
    except ValidationError as e:
        return {"error": str(e)}, 400
    except StorageError as e:
        current_app.logger.error("Sale could not be stored: %s", e)
        return {"error": str(e)}, 503
    except Exception:
        current_app.logger.exception("Failed to register sale")
        return {"error": "Internal server error"}, 500

    return {"sale": sale.to_dict()}, 201


@sales_bp.get("")
def list_sales_route():
    """Query params: today=1 limits to the current store day."""
    if request.args.get("today") in ("1", "true"):
        sales = sales_service.sales_for_today(current_app.config["STORE_TIMEZONE"])
    else:
        sales = sales_service.list_sales(limit=min(request.args.get("limit", default=100, type=int), 500))
    return {"items": [s.to_dict() for s in sales], "count": len(sales)}


@sales_bp.get("/<int:sale_id>")
def get_sale_route(sale_id: int):
    sale = sales_service.get_sale(sale_id)
    if sale is None:
        return {"error": "Sale not found"}, 404
    return {"sale": sale.to_dict()}
