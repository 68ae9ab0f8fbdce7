# Overview: Flask routes for barcode images and printable label sheets.

from flask import Blueprint, Response, request

from ..services import label_service
from ..validation import ValidationError

labels_bp = Blueprint("labels", __name__, url_prefix="/api/labels")


@labels_bp.get("/barcode/<code>.svg")
def barcode_svg_route(code: str):
    try:
        svg = label_service.render_barcode_svg(code)
    except ValidationError as e:
        return {"error": str(e)}, 400
    return Response(svg, mimetype="image/svg+xml")


@labels_bp.get("/sheet")
def label_sheet_route():
    """
    HTML label sheet for printing.

    Query params:
    - variant_id: int, repeatable
    - copies: int (default 1) - labels per variant
    """
    variant_ids = request.args.getlist("variant_id", type=int)
    copies = request.args.get("copies", default=1, type=int)

    try:
        labels = label_service.build_labels(variant_ids, copies)
    except ValidationError as e:
        return {"error": str(e)}, 400
    return Response(label_service.render_label_sheet(labels), mimetype="text/html")
