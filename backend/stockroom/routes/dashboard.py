# Overview: Flask API route for dashboard counters.

from flask import Blueprint, current_app

from ..services.alert_service import list_alerts
from ..services.dashboard_service import get_summary, lowest_stock_products

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.get("")
def dashboard_route():
    summary = get_summary(tz_name=current_app.config["STORE_TIMEZONE"])
    summary["recent_alerts"] = [a.to_dict() for a in list_alerts(unread_only=True, limit=5)]
    summary["lowest_stock_products"] = lowest_stock_products(limit=5)
    return summary
