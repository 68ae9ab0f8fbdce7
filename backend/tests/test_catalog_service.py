import re
import warnings

import pytest
from sqlalchemy.exc import SAWarning

from stockroom.extensions import db
from stockroom.models import Alert, Category, InventoryLog, Product, ProductVariant
from stockroom.services import catalog_service, inventory_service
from stockroom.validation import ValidationError


class TestCodes:
    def test_reference_uses_category_prefix_and_clock_suffix(self):
        assert catalog_service.generate_reference("Camisetas", now_ms=1718040004821) == "CAM-4821"
        assert catalog_service.generate_reference("T-Shirts", now_ms=1718040000042) == "TSH-0042"

    def test_sku_from_category_color_size(self):
        assert catalog_service.generate_sku("T-Shirts", "Navy Blue", "m") == "TSH-NAV-M"

    def test_barcode_shape(self):
        code = catalog_service.generate_barcode()
        assert len(code) == 13
        assert code.startswith("789")
        assert code.isdigit()


class TestAddProduct:
    def test_creates_product_with_variants(self, product):
        assert product.id is not None
        assert re.fullmatch(r"TSH-\d{4}", product.reference)
        assert product.category.name == "T-Shirts"
        assert product.min_stock_threshold == 3
        assert [(v.color, v.size, v.current_stock) for v in product.variants] == [
            ("White", "M", 5),
            ("Black", "L", 10),
        ]
        assert [v.sku for v in product.variants] == ["TSH-WHI-M", "TSH-BLA-L"]

    def test_barcodes_unique_across_catalog(self, product, draft_factory):
        catalog_service.add_product(draft_factory(name="Long Sleeve Tee"))
        barcodes = [b for (b,) in db.session.query(ProductVariant.barcode).all()]
        assert len(barcodes) == 4
        assert len(set(barcodes)) == 4

    def test_product_visible_in_listing(self, product):
        assert [p.id for p in catalog_service.list_products()] == [product.id]
        assert catalog_service.list_products(search="basic")[0].id == product.id
        assert catalog_service.list_products(search="nothing-like-this") == []

    def test_reuses_existing_category(self, product, draft_factory):
        catalog_service.add_product(draft_factory(name="Pocket Tee", category="t-shirts"))
        assert db.session.query(Category).count() == 1

    def test_default_threshold_from_config(self, db_session, draft_factory):
        draft = draft_factory()
        del draft["min_stock_threshold"]
        created = catalog_service.add_product(draft)
        assert created.min_stock_threshold == 3

    def test_category_link_emits_no_session_warning(self, db_session, draft_factory):
        with warnings.catch_warnings():
            warnings.simplefilter("error", SAWarning)
            created = catalog_service.add_product(draft_factory())

        assert created.category.products == [created]
        assert db.session.query(ProductVariant).count() == 2

    def test_does_not_raise_stock_alerts(self, db_session, draft_factory):
        catalog_service.add_product(draft_factory(variants=[{"size": "S", "color": "Red", "initial_stock": 0}]))
        assert db.session.query(Alert).count() == 0

    @pytest.mark.parametrize("overrides", [
        {"name": ""},
        {"category": "   "},
        {"brand": None},
        {"sale_price_cents": 0},
        {"sale_price_cents": "12.50"},
        {"cost_price_cents": -1},
        {"variants": []},
        {"variants": [{"size": "M", "color": ""}]},
        {"variants": [{"size": "M", "color": "Red", "initial_stock": -2}]},
        {"variants": [{"size": "M", "color": "Red"}, {"size": "M", "color": "Red"}]},
    ])
    def test_invalid_draft_rejected_without_writes(self, db_session, draft_factory, overrides):
        with pytest.raises(ValidationError):
            catalog_service.add_product(draft_factory(**overrides))
        assert db.session.query(Product).count() == 0
        assert db.session.query(Category).count() == 0


class TestDeleteProduct:
    def test_removes_variants_and_is_idempotent(self, product):
        product_id = product.id

        assert catalog_service.delete_product(product_id) is True
        assert catalog_service.delete_product(product_id) is False

        assert db.session.get(Product, product_id) is None
        assert db.session.query(ProductVariant).count() == 0

    def test_keeps_log_snapshots_and_drops_alerts(self, product, variant):
        inventory_service.process_operation(
            [{"product_id": product.id, "variant_id": variant.id, "quantity": 5}], "OUT", "Clearance"
        )
        catalog_service.delete_product(product.id)

        logs = db.session.query(InventoryLog).all()
        assert len(logs) == 1
        assert logs[0].product_name == "Basic Tee"
        assert db.session.query(Alert).count() == 0


class TestFindByBarcode:
    def test_returns_owning_product_and_variant(self, product):
        target = product.variants[1]
        found = catalog_service.find_by_barcode(target.barcode)
        assert found is not None
        found_product, found_variant = found
        assert found_product.id == product.id
        assert found_variant.id == target.id

    def test_not_found(self, product):
        assert catalog_service.find_by_barcode("NOPE") is None
        assert catalog_service.find_by_barcode("") is None

    def test_exact_match_only(self, product, variant):
        assert catalog_service.find_by_barcode(variant.barcode[:-1]) is None
        assert catalog_service.find_by_barcode(f" {variant.barcode}") is None


class TestUpdateProduct:
    def test_price_change_raises_price_change_alert(self, product):
        updated = catalog_service.update_product(product.id, {"sale_price_cents": 8990})

        assert updated.sale_price_cents == 8990
        alerts = db.session.query(Alert).all()
        assert [a.type for a in alerts] == ["price_change"]
        assert "79.90" in alerts[0].message and "89.90" in alerts[0].message

    def test_other_fields_do_not_alert(self, product):
        catalog_service.update_product(product.id, {"brand": "Other Brand", "min_stock_threshold": 6})
        assert product.brand == "Other Brand"
        assert db.session.query(Alert).count() == 0

    def test_unknown_field_rejected(self, product):
        with pytest.raises(ValidationError):
            catalog_service.update_product(product.id, {"reference": "XYZ-0001"})

    def test_unknown_product_is_noop(self, db_session):
        assert catalog_service.update_product(31337, {"brand": "X"}) is None
