from app.core.exceptions import UpstreamUnavailableException

CUSTOMER = {"id": 1, "name": "Jane Doe", "email": "jane@example.com"}


def test_create_order_submits_purchase_order(client, erp, products):
    desk, _ = products
    erp.stocks = {"Desk": 4}

    response = client.post("/api/orders", json={"customer": CUSTOMER, "items": [{"product_id": desk.id, "quantity": 2}]})

    assert response.status_code == 201
    assert response.json() == {"success": True, "erp": erp.purchase_order_response}
    assert erp.purchase_orders[0]["total"] == 240.0


def test_create_order_without_items_is_invalid(client, erp):
    response = client.post("/api/orders", json={"customer": CUSTOMER, "items": []})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_ARGUMENT"
    assert erp.calls == []


def test_insufficient_stock_returns_conflict_with_shortfalls(client, erp, products):
    desk, chair = products
    erp.stocks = {"Desk": 1, "Chair": 50}

    response = client.post(
        "/api/orders",
        json={
            "customer": CUSTOMER,
            "items": [{"product_id": desk.id, "quantity": 3}, {"product_id": chair.id, "quantity": 1}],
        },
    )

    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "INSUFFICIENT_STOCK"
    assert body["details"] == [{"productName": "Desk", "requested": 3, "available": 1}]
    assert erp.calls_to("create_purchase_order") == []


def test_erp_down_during_stock_check_returns_bad_gateway(client, erp, products):
    erp.stock_error = UpstreamUnavailableException("ERP unreachable")

    response = client.post(
        "/api/orders", json={"customer": CUSTOMER, "items": [{"product_id": products[0].id, "quantity": 1}]}
    )

    assert response.status_code == 502
    assert response.json()["code"] == "UPSTREAM_UNAVAILABLE"
    assert erp.calls_to("create_purchase_order") == []


def test_customer_orders_come_back_as_canonical_list(client, erp, customer):
    erp.orders_by_email[customer.email] = [
        {
            "ID": "SO-1",
            "createdAt": "2026-10-01T10:00:00Z",
            "status": {"code": 30},
            "total": "99.5",
            "items": [{"product": {"name": "Desk", "ID": 7}, "quantity": 1, "price": 99.5}],
        }
    ]

    response = client.get(f"/api/orders/customer/{customer.id}")

    assert response.status_code == 200
    assert response.json() == [
        {
            "id": "SO-1",
            "created_at": "2026-10-01T10:00:00Z",
            "status": "shipped",
            "total_price": 99.5,
            "items": [{"product_id": 7, "name": "Desk", "quantity": 1, "price": 99.5}],
        }
    ]


def test_customer_orders_degrade_to_local_history(client, erp, customer, products):
    created = client.post(
        "/api/orders/local",
        json={"customer_id": customer.id, "items": [{"product_id": products[1].id, "quantity": 2}]},
    )
    assert created.status_code == 201
    erp.orders_error = UpstreamUnavailableException("ERP unreachable")

    response = client.get(f"/api/orders/customer/{customer.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["erp_unreachable"] is True
    assert [o["id"] for o in body["orders"]] == [created.json()["id"]]
    assert body["orders"][0]["total_price"] == 91.0


def test_customer_orders_for_unknown_customer(client):
    response = client.get("/api/orders/customer/999")
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_update_local_order_status(client, customer, products):
    created = client.post(
        "/api/orders/local",
        json={"customer_id": customer.id, "items": [{"product_id": products[0].id, "quantity": 1}]},
    ).json()

    response = client.put(f"/api/orders/{created['id']}/status", json={"status": "completed"})
    assert response.status_code == 200
    assert response.json()["status"] == "completed"

    rejected = client.put(f"/api/orders/{created['id']}/status", json={"status": "lost"})
    assert rejected.status_code == 422
