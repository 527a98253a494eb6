# tests/test_vendor.py
import uuid
from decimal import Decimal

from sqlmodel import select

from storefront.models.product import Inventory, Product

VENDOR_URL = "/api/v1/vendor"


def place_order(client, headers, product_id):
    client.post("/api/v1/cart", json={"product_id": str(product_id)}, headers=headers)
    return client.post(
        "/api/v1/orders/checkout",
        json={
            "first_name": "Alice",
            "last_name": "Martin",
            "email": "alice@example.com",
            "address": "12 Rue des Lilas",
            "city": "Lyon",
            "zip_code": "69001",
            "country": "France",
        },
        headers=headers,
    ).json()["order"]


def test_customers_are_forbidden(client, customer_headers):
    resp = client.get(f"{VENDOR_URL}/products", headers=customer_headers)

    assert resp.status_code == 403
    assert resp.json()["detail"] == "Vendor access required"


def test_anonymous_is_unauthorized(client):
    assert client.get(f"{VENDOR_URL}/summary").status_code == 401


def test_products_sorted_by_name(client, vendor_headers, make_product):
    make_product(name="Zinc Bucket")
    make_product(name="Apron")

    resp = client.get(f"{VENDOR_URL}/products", headers=vendor_headers)

    assert [p["name"] for p in resp.json()] == ["Apron", "Zinc Bucket"]


def test_summary(client, vendor_headers, make_product):
    make_product(price="10.00", stock=5)
    make_product(price="2.50", stock=20)
    make_product(price="99.99", stock=0)

    body = client.get(f"{VENDOR_URL}/summary", headers=vendor_headers).json()

    assert body["total_products"] == 3
    assert Decimal(str(body["total_inventory_value"])) == Decimal("100.00")
    assert body["low_stock_count"] == 2
    assert body["low_stock_threshold"] == 10


def test_update_stock_writes_inventory(client, session, vendor_headers, make_product):
    product = make_product(stock=5)

    resp = client.patch(
        f"{VENDOR_URL}/products/{product.id}/stock",
        json={"stock": 42},
        headers=vendor_headers,
    )

    assert resp.status_code == 200
    assert resp.json()["stock"] == 42
    session.expire_all()
    assert session.get(Product, product.id).stock == 42
    inventory = session.exec(
        select(Inventory).where(Inventory.product_id == product.id)
    ).one()
    assert inventory.stock == 42


def test_update_stock_rejects_negative(client, vendor_headers, make_product):
    product = make_product()

    resp = client.patch(
        f"{VENDOR_URL}/products/{product.id}/stock",
        json={"stock": -1},
        headers=vendor_headers,
    )

    assert resp.status_code == 422


def test_update_stock_unknown_product(client, vendor_headers):
    resp = client.patch(
        f"{VENDOR_URL}/products/{uuid.uuid4()}/stock",
        json={"stock": 1},
        headers=vendor_headers,
    )

    assert resp.status_code == 404


def test_order_status_lifecycle(client, customer_headers, vendor_headers, make_product):
    product = make_product()
    order = place_order(client, customer_headers, product.id)
    url = f"{VENDOR_URL}/orders/{order['id']}/status"

    for new in ("processing", "shipped", "delivered"):
        resp = client.patch(url, json={"status": new}, headers=vendor_headers)
        assert resp.status_code == 200
        assert resp.json()["status"] == new

    resp = client.patch(url, json={"status": "cancelled"}, headers=vendor_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid status transition: delivered -> cancelled"


def test_pending_order_can_be_cancelled(client, customer_headers, vendor_headers, make_product):
    product = make_product()
    order = place_order(client, customer_headers, product.id)
    url = f"{VENDOR_URL}/orders/{order['id']}/status"

    resp = client.patch(url, json={"status": "cancelled"}, headers=vendor_headers)

    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"
    mine = client.get(f"/api/v1/orders/me/{order['id']}", headers=customer_headers)
    assert mine.json()["status"] == "cancelled"


def test_unknown_status_is_rejected(client, customer_headers, vendor_headers, make_product):
    product = make_product()
    order = place_order(client, customer_headers, product.id)

    resp = client.patch(
        f"{VENDOR_URL}/orders/{order['id']}/status",
        json={"status": "lost"},
        headers=vendor_headers,
    )

    assert resp.status_code == 422
