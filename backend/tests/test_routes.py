"""HTTP surface tests: status codes and JSON shapes of the blueprints."""


def _create_product(client, draft):
    response = client.post("/api/products", json=draft)
    assert response.status_code == 201, response.json
    return response.json


def test_health(client, db_session):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json["checks"]["database"]["status"] == "healthy"


def test_create_and_list_products(client, db_session, draft_factory):
    created = _create_product(client, draft_factory())

    assert created["category"] == "T-Shirts"
    assert len(created["variants"]) == 2
    assert created["total_stock"] == 15

    listing = client.get("/api/products").json
    assert listing["count"] == 1
    assert listing["items"][0]["id"] == created["id"]


def test_create_product_validation_error(client, db_session, draft_factory):
    response = client.post("/api/products", json=draft_factory(variants=[]))
    assert response.status_code == 400
    assert "variant" in response.json["error"]


def test_delete_product_twice(client, db_session, draft_factory):
    created = _create_product(client, draft_factory())

    assert client.delete(f"/api/products/{created['id']}").status_code == 204
    assert client.delete(f"/api/products/{created['id']}").status_code == 204
    assert client.get(f"/api/products/{created['id']}").status_code == 404


def test_barcode_lookup(client, db_session, draft_factory):
    created = _create_product(client, draft_factory())
    barcode = created["variants"][1]["barcode"]

    found = client.get(f"/api/products/lookup/{barcode}")
    assert found.status_code == 200
    assert found.json["found"] is True
    assert found.json["variant"]["label"] == "Black L"
    assert found.json["product"]["id"] == created["id"]

    missing = client.get("/api/products/lookup/NOPE")
    assert missing.status_code == 404
    assert missing.json["found"] is False


def test_set_variant_stock(client, db_session, draft_factory):
    created = _create_product(client, draft_factory())
    variant = created["variants"][0]
    url = f"/api/products/{created['id']}/variants/{variant['id']}/stock"

    assert client.put(url, json={"quantity": 0}).json["current_stock"] == 0
    assert client.put(url, json={"quantity": -3}).status_code == 400
    assert client.get("/api/alerts").json["unread"] == 1


def test_inventory_operation_with_skipped_item(client, db_session, draft_factory):
    created = _create_product(client, draft_factory())
    variant = created["variants"][0]

    response = client.post("/api/inventory/operations", json={
        "kind": "in",
        "reason": "Delivery",
        "items": [
            {"product_id": created["id"], "variant_id": variant["id"], "quantity": 6},
            {"product_id": created["id"], "variant_id": 999999, "quantity": 1},
        ],
    })

    assert response.status_code == 201
    assert len(response.json["logs"]) == 1
    assert response.json["logs"][0]["resulting_stock"] == 11
    assert len(response.json["skipped"]) == 1

    logs = client.get("/api/inventory/logs").json
    assert logs["count"] == 1
    assert logs["items"][0]["reason"] == "Delivery"


def test_inventory_operation_bad_kind(client, db_session):
    response = client.post("/api/inventory/operations", json={"kind": "MOVE", "items": []})
    assert response.status_code == 400


def test_register_sale_and_dashboard(client, db_session, draft_factory):
    created = _create_product(client, draft_factory())
    variant = created["variants"][0]

    response = client.post("/api/sales", json={
        "items": [{"product_id": created["id"], "variant_id": variant["id"], "quantity": 2}],
        "payment_method": "debit",
    })
    assert response.status_code == 201
    sale = response.json["sale"]
    assert sale["total_cents"] == 15980
    assert sale["items"][0]["quantity"] == 2

    assert client.get(f"/api/sales/{sale['id']}").status_code == 200
    assert client.get("/api/sales?today=1").json["count"] == 1

    dashboard = client.get("/api/dashboard").json
    assert dashboard["today_sales"] == 1
    assert dashboard["today_revenue_cents"] == 15980
    assert dashboard["low_stock_count"] == 1
    assert dashboard["unread_alerts"] == 1
    assert len(dashboard["recent_alerts"]) == 1


def test_register_sale_error_details(client, db_session, draft_factory):
    created = _create_product(client, draft_factory())
    variant = created["variants"][0]

    response = client.post("/api/sales", json={
        "items": [{"product_id": created["id"], "variant_id": variant["id"], "quantity": 1}],
        "cash_received_cents": 5,
    })
    assert response.status_code == 400
    assert response.json["details"]["total_cents"] == 7990


def test_alert_read_endpoints(client, db_session, draft_factory):
    created = _create_product(client, draft_factory())
    variant = created["variants"][0]
    client.put(f"/api/products/{created['id']}/variants/{variant['id']}/stock", json={"quantity": 1})
    client.put(f"/api/products/{created['id']}/variants/{variant['id']}/stock", json={"quantity": 0})

    alerts = client.get("/api/alerts").json
    assert alerts["unread"] == 2

    first_id = alerts["items"][0]["id"]
    assert client.post(f"/api/alerts/{first_id}/read").json["alert"]["read"] is True
    assert client.post("/api/alerts/424242/read").json["alert"] is None
    assert client.post("/api/alerts/read-all").json["updated"] == 1
    assert client.get("/api/alerts?unread=1").json["count"] == 0


def test_category_routes(client, db_session, draft_factory):
    created = _create_product(client, draft_factory())

    categories = client.get("/api/categories").json
    assert categories["items"][0]["product_count"] == 1
    category_id = created["category_id"]

    assert client.post("/api/categories", json={"name": "t-shirts"}).status_code == 409
    assert client.delete(f"/api/categories/{category_id}").status_code == 409

    renamed = client.patch(f"/api/categories/{category_id}", json={"name": "Tees"})
    assert renamed.status_code == 200
    assert client.get(f"/api/products/{created['id']}").json["category"] == "Tees"

    spare = client.post("/api/categories", json={"name": "Hats"}).json
    assert client.delete(f"/api/categories/{spare['id']}").status_code == 204
    assert [c["name"] for c in client.get("/api/categories").json["items"]] == ["Tees"]


def test_label_routes(client, db_session, draft_factory):
    created = _create_product(client, draft_factory())
    variant = created["variants"][0]

    svg = client.get(f"/api/labels/barcode/{variant['barcode']}.svg")
    assert svg.status_code == 200
    assert svg.mimetype == "image/svg+xml"

    sheet = client.get(f"/api/labels/sheet?variant_id={variant['id']}&copies=3")
    assert sheet.status_code == 200
    assert sheet.mimetype == "text/html"
    assert sheet.get_data(as_text=True).count('<div class="label">') == 3


def test_dashboard_lists_lowest_stock_products(client, db_session, draft_factory):
    for name, stock in (("Polo", 8), ("Tank", 1)):
        _create_product(client, draft_factory(
            name=name, variants=[{"size": "M", "color": "White", "initial_stock": stock}],
        ))

    lowest = client.get("/api/dashboard").json["lowest_stock_products"]

    assert [(p["name"], p["total_stock"]) for p in lowest] == [("Tank", 1), ("Polo", 8)]


def test_array_bodies_are_rejected(client, db_session, draft_factory):
    created = _create_product(client, draft_factory())
    variant = created["variants"][0]
    category_id = created["category_id"]

    assert client.post("/api/categories", json=["x"]).status_code == 400
    assert client.patch(f"/api/categories/{category_id}", json=["x"]).status_code == 400
    assert client.post("/api/inventory/operations", json=[{"kind": "IN"}]).status_code == 400
    stock_url = f"/api/products/{created['id']}/variants/{variant['id']}/stock"
    assert client.put(stock_url, json=[0]).status_code == 400
    assert client.post("/api/products", json=[draft_factory()]).status_code == 400
    assert client.patch(f"/api/products/{created['id']}", json=["x"]).status_code == 400
    assert client.post("/api/sales", json=[]).status_code == 400

    assert client.get(f"/api/products/{created['id']}").json["variants"][0]["current_stock"] == 5
