"""HTTP surface: status mapping and query parameters through the FastAPI app."""
import subprocess
import sys
from pathlib import Path

import pytest


@pytest.fixture
async def api(client, auth_headers):
    """Authenticated request helper returning the raw response."""
    async def _call(method, path, **kwargs):
        return await client.request(method, path, headers=auth_headers, **kwargs)
    return _call


async def create_product(api, sku, quantity, price=100.0, name=None):
    resp = await api(
        "POST",
        "/products/",
        json={"sku": sku, "name": name or sku, "price": price, "quantity": quantity},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_wallet(api, owner_email="owner@eshop.com"):
    resp = await api("POST", "/wallets/", json={"owner_email": owner_email})
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_product_lifecycle(api):
    product = await create_product(api, "TAB-1", 4, price=249.0, name="Tablet")
    assert product["version"] == 1
    assert product["description"] == ""

    resp = await api("GET", f"/products/{product['id']}")
    assert resp.json()["name"] == "Tablet"

    resp = await api("PATCH", f"/products/{product['id']}", json={"price": 199.0, "version": 1})
    assert resp.status_code == 200
    assert resp.json()["price"] == 199.0
    assert resp.json()["version"] == 2

    resp = await api("PATCH", f"/products/{product['id']}", json={"price": 1.0, "version": 1})
    assert resp.status_code == 409

    resp = await api("DELETE", f"/products/{product['id']}")
    assert resp.status_code == 204

    resp = await api("GET", f"/products/{product['id']}")
    assert resp.status_code == 404
    assert resp.json()["detail"] == f"Product {product['id']} not found"


async def test_product_validation_errors(api):
    resp = await api("POST", "/products/", json={"sku": "NEG", "name": "Neg", "price": 1, "quantity": -1})
    assert resp.status_code == 422

    resp = await api("POST", "/products/", json={"sku": "BLANK", "name": "  ", "price": 1, "quantity": 1})
    assert resp.status_code == 422

    await create_product(api, "DUP", 1)
    resp = await api("POST", "/products/", json={"sku": "DUP", "name": "Again", "price": 1, "quantity": 1})
    assert resp.status_code == 409


async def test_product_filters(api):
    await create_product(api, "LAP-1", 3, price=1200.0, name="Laptop")
    await create_product(api, "MOU-1", 0, price=25.0, name="Mouse")

    resp = await api("GET", "/products/", params={"stock": "out-of-stock"})
    assert [p["sku"] for p in resp.json()] == ["MOU-1"]

    resp = await api("GET", "/products/", params={"search": "lap", "max_price": 2000})
    assert [p["sku"] for p in resp.json()] == ["LAP-1"]

    resp = await api("GET", "/products/", params={"stock": "sometimes"})
    assert resp.status_code == 422


async def test_order_flow(api):
    product = await create_product(api, "CAM-1", 5, price=300.0, name="Camera")

    resp = await api(
        "POST",
        "/orders/",
        json={"customer_email": "buyer@shop.io", "items": [{"product_id": product["id"], "quantity": 3}]},
    )
    assert resp.status_code == 201
    order = resp.json()
    assert order["total_amount"] == 900.0
    assert order["status"] == "placed"
    assert order["items"] == [
        {"product_id": product["id"], "product_name": "Camera", "quantity": 3, "price": 300.0}
    ]
    assert (await api("GET", f"/products/{product['id']}")).json()["quantity"] == 2

    resp = await api(
        "POST",
        "/orders/",
        json={"customer_email": "buyer@shop.io", "items": [{"product_id": product["id"], "quantity": 5}]},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Insufficient stock for Camera. Available: 2"

    resp = await api(
        "POST",
        "/orders/",
        json={"customer_email": "buyer@shop.io", "items": [{"product_id": 999, "quantity": 1}]},
    )
    assert resp.status_code == 404

    resp = await api(
        "POST",
        "/orders/",
        json={"customer_email": "buyer@shop.io", "items": []},
    )
    assert resp.status_code == 422

    resp = await api("POST", f"/orders/{order['id']}/cancel")
    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"
    assert (await api("GET", f"/products/{product['id']}")).json()["quantity"] == 5

    resp = await api("POST", f"/orders/{order['id']}/cancel")
    assert resp.status_code == 409

    resp = await api("DELETE", f"/orders/{order['id']}")
    assert resp.status_code == 204
    assert (await api("GET", f"/orders/{order['id']}")).status_code == 404


async def test_order_list_query(api):
    product = await create_product(api, "PEN", 50, price=2.0)
    for email, quantity in (("ann@shop.io", 1), ("ben@shop.io", 10)):
        await api(
            "POST",
            "/orders/",
            json={"customer_email": email, "items": [{"product_id": product["id"], "quantity": quantity}]},
        )

    resp = await api("GET", "/orders/", params={"sort": "price-desc"})
    assert [o["customer_email"] for o in resp.json()] == ["ben@shop.io", "ann@shop.io"]

    resp = await api("GET", "/orders/", params={"search": "ann", "days": 7})
    assert [o["customer_email"] for o in resp.json()] == ["ann@shop.io"]

    resp = await api("GET", "/orders/", params={"min_total": 10})
    assert [o["customer_email"] for o in resp.json()] == ["ben@shop.io"]

    resp = await api("GET", "/orders/", params={"sort": "random"})
    assert resp.status_code == 422


async def test_wallet_flow(api):
    wallet = await create_wallet(api)
    assert wallet["balance"] == 0

    resp = await api("POST", f"/wallets/{wallet['id']}/deposit", json={"amount": 100, "reference": "ref1"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["balance"] == 100
    assert body["transaction"]["type"] == "deposit"
    assert body["transaction"]["description"] == "Deposit"

    resp = await api("POST", f"/wallets/{wallet['id']}/withdraw", json={"amount": 30})
    assert resp.json()["balance"] == 70

    resp = await api("POST", f"/wallets/{wallet['id']}/withdraw", json={"amount": 1000})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Insufficient balance"

    resp = await api("POST", f"/wallets/{wallet['id']}/deposit", json={"amount": 0})
    assert resp.status_code == 422

    resp = await api("GET", f"/wallets/{wallet['id']}")
    assert resp.json()["balance"] == 70

    resp = await api("GET", f"/wallets/{wallet['id']}/transactions")
    assert [t["type"] for t in resp.json()] == ["withdraw", "deposit"]

    resp = await api("GET", f"/wallets/{wallet['id']}/summary")
    assert resp.json() == {"total_deposits": 100.0, "total_withdrawals": 30.0, "count": 2}

    resp = await api("GET", f"/wallets/{wallet['id']}/reconciliation")
    assert resp.json()["balanced"] is True

    resp = await api("POST", "/wallets/999/deposit", json={"amount": 5})
    assert resp.status_code == 404


async def test_current_wallet_follows_session_owner(api):
    resp = await api("GET", "/wallets/me")
    assert resp.status_code == 404

    await create_wallet(api, "someone@eshop.com")
    mine = await create_wallet(api, "admin@eshop.com")

    resp = await api("GET", "/wallets/me")
    assert resp.status_code == 200
    assert resp.json()["id"] == mine["id"]


async def test_transaction_log_query(api):
    alice = await create_wallet(api, "alice@eshop.com")
    bob = await create_wallet(api, "bob@eshop.com")
    await api("POST", f"/wallets/{alice['id']}/deposit", json={"amount": 80, "reference": "INV-7"})
    await api("POST", f"/wallets/{bob['id']}/deposit", json={"amount": 20})
    await api("POST", f"/wallets/{alice['id']}/withdraw", json={"amount": 5})

    resp = await api("GET", "/transactions/")
    entries = resp.json()
    assert [t["amount"] for t in entries] == [5, 20, 80]
    assert entries[0]["owner_email"] == "alice@eshop.com"

    resp = await api("GET", "/transactions/", params={"type": "deposit", "search": "inv-7"})
    assert [t["reference"] for t in resp.json()] == ["INV-7"]

    resp = await api("GET", "/transactions/", params={"wallet_id": bob["id"]})
    assert [t["amount"] for t in resp.json()] == [20]

    resp = await api("GET", "/transactions/", params={"limit": 2})
    assert len(resp.json()) == 2

    resp = await api("GET", "/transactions/summary")
    assert resp.json() == {"total_deposits": 100.0, "total_withdrawals": 5.0, "count": 3}

    resp = await api("GET", "/transactions/", params={"type": "refund"})
    assert resp.status_code == 422


async def test_overview(api):
    product = await create_product(api, "SSD", 10, price=50.0)
    await create_product(api, "HDD", 0, price=40.0)
    wallet = await create_wallet(api, "rich@eshop.com")
    await api("POST", f"/wallets/{wallet['id']}/deposit", json={"amount": 500})
    await api("POST", f"/wallets/{wallet['id']}/withdraw", json={"amount": 100})
    placed = await api(
        "POST",
        "/orders/",
        json={"customer_email": "buyer@shop.io", "items": [{"product_id": product["id"], "quantity": 2}]},
    )
    cancelled = await api(
        "POST",
        "/orders/",
        json={"customer_email": "buyer@shop.io", "items": [{"product_id": product["id"], "quantity": 1}]},
    )
    await api("POST", f"/orders/{cancelled.json()['id']}/cancel")

    resp = await api("GET", "/overview/")
    assert resp.status_code == 200
    overview = resp.json()

    assert overview["total_products"] == 2
    assert overview["in_stock_products"] == 1
    assert overview["total_orders"] == 2
    assert overview["total_revenue"] == placed.json()["total_amount"] == 100.0
    assert overview["total_wallets"] == 1
    assert overview["total_balance"] == 400.0
    assert overview["total_transactions"] == 2
    assert [p["sku"] for p in overview["top_products"]] == ["SSD", "HDD"]
    assert overview["top_wallets"] == [{"owner": "rich", "owner_email": "rich@eshop.com", "balance": 400.0}]
    assert len(overview["daily_flows"]) == 1
    assert overview["daily_flows"][0]["deposits"] == 500.0
    assert overview["daily_flows"][0]["withdrawals"] == 100.0


async def test_metrics_endpoint_is_exposed(client):
    resp = await client.get("/metrics")

    assert resp.status_code == 200
    assert "eshop_orders_placed_total" in resp.text


def test_error_classes_use_current_status_constants():
    """shared.errors must not touch deprecated status names when imported."""
    result = subprocess.run(
        [sys.executable, "-W", "error::DeprecationWarning:shared.errors", "-c", "import shared.errors"],
        cwd=Path(__file__).resolve().parent.parent,
        capture_output=True,
        text=True,
    )

    assert result.returncode == 0, result.stderr


async def test_validation_errors_map_to_422(api):
    wallet = await create_wallet(api)

    resp = await api("POST", f"/wallets/{wallet['id']}/deposit", json={"amount": 10.006})

    assert resp.status_code == 422
    assert resp.json()["detail"].startswith("amount:")


async def test_patch_with_null_fields(api):
    product = await create_product(api, "NUL-1", 2)
    await api("PATCH", f"/products/{product['id']}", json={"description": "Boxed"})

    resp = await api("PATCH", f"/products/{product['id']}", json={"description": None})
    assert resp.status_code == 200
    assert resp.json()["description"] == ""

    resp = await api("PATCH", f"/products/{product['id']}", json={"price": None})
    assert resp.status_code == 422
