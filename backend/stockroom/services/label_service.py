# Overview: Barcode images and printable label sheets for product variants.

from __future__ import annotations

import base64
from io import BytesIO

from barcode import Code128
from barcode.writer import SVGWriter
from flask import current_app, render_template

from ..extensions import db
from ..models import ProductVariant
from ..validation import ValidationError

# Sized for small adhesive labels (millimetres)
BARCODE_OPTIONS = {
    "module_width": 0.2,
    "module_height": 10.0,
    "quiet_zone": 2.0,
    "font_size": 8,
    "text_distance": 3.0,
}

LABELS_PER_ROW = 3
MAX_COPIES = 100


def render_barcode_svg(code: str) -> bytes:
    """Render ``code`` as a Code 128 SVG with the human-readable text underneath."""
    if not code or len(code) > 64 or not all(32 <= ord(ch) < 127 for ch in code):
        raise ValidationError("barcode must be 1-64 printable ASCII characters")
    barcode = Code128(code, writer=SVGWriter())
    buffer = BytesIO()
    barcode.write(buffer, options=BARCODE_OPTIONS)
    return buffer.getvalue()


def barcode_data_uri(code: str) -> str:
    svg = render_barcode_svg(code)
    return "data:image/svg+xml;base64," + base64.b64encode(svg).decode("ascii")


def format_price(cents: int) -> str:
    symbol = current_app.config.get("CURRENCY_SYMBOL", "")
    return f"{symbol} {cents / 100:.2f}".strip()


def build_labels(variant_ids: list[int], copies: int = 1) -> list[dict]:
    """
    Lay out one label card per copy of each known variant, in request order.
    Unknown ids are left out.
    """
    if not 1 <= copies <= MAX_COPIES:
        raise ValidationError(f"copies must be between 1 and {MAX_COPIES}")

    labels = []
    for variant_id in variant_ids:
        variant = db.session.get(ProductVariant, variant_id)
        if variant is None:
            continue
        product = variant.product
        card = {
            "product_name": product.name,
            "reference": product.reference,
            "variant_label": variant.label,
            "sku": variant.sku,
            "barcode": variant.barcode,
            "barcode_image": barcode_data_uri(variant.barcode),
            "price": format_price(product.sale_price_cents),
        }
        labels.extend(dict(card) for _ in range(copies))
    return labels


def render_label_sheet(labels: list[dict]) -> str:
    """Print-ready HTML page, LABELS_PER_ROW cards per row."""
    return render_template("labels.html", labels=labels, per_row=LABELS_PER_ROW)
