# Overview: Flask API routes for alerts; parses input and returns JSON responses.

from flask import Blueprint, request

from ..services import alert_service
from ..services.transaction import StorageError

alerts_bp = Blueprint("alerts", __name__, url_prefix="/api/alerts")


@alerts_bp.get("")
def list_alerts_route():
    unread_only = request.args.get("unread") in ("1", "true")
    alerts = alert_service.list_alerts(
        unread_only=unread_only,
        limit=request.args.get("limit", type=int),
    )
    return {
        "items": [a.to_dict() for a in alerts],
        "count": len(alerts),
        "unread": alert_service.count_unread_alerts(),
    }


@alerts_bp.post("/<int:alert_id>/read")
def mark_read_route(alert_id: int):
    try:
        alert = alert_service.mark_alert_read(alert_id)
    except StorageError as e:
        return {"error": str(e)}, 503
    return {"alert": alert.to_dict() if alert else None}


@alerts_bp.post("/read-all")
def mark_all_read_route():
    try:
        updated = alert_service.mark_all_alerts_read()
    except StorageError as e:
        return {"error": str(e)}, 503
    return {"updated": updated}
