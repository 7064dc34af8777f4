from datetime import datetime
from decimal import Decimal

from app.core.config import settings

API = "/api/v1"


def test_register_purchase_generates_code_and_keeps_stock(client, create_product, create_order, get_stock):
    product = create_product(stock_quantity=5)

    order = create_order(type="compra", product_id=product["id"], quantity=10, price="12.50")

    year = datetime.utcnow().year
    assert order["code"] == f"PED-{year}-000001"
    assert order["status"] == "a-caminho"
    assert Decimal(order["total"]) == Decimal("125.00")
    assert get_stock(product["id"]) == 5


def test_order_codes_are_sequential_and_unique(client, auth_headers, create_order):
    first = create_order()
    second = create_order()
    assert first["code"] != second["code"]

    response = client.post(f"{API}/orders/", json={
        "type": "compra", "name": "X", "price": "1.00", "quantity": 1, "code": first["code"]
    }, headers=auth_headers)
    assert response.status_code == 409


def test_code_generation_skips_taken_codes(client, create_order):
    year = datetime.utcnow().year
    create_order(code=f"PED-{year}-000001")

    order = create_order()

    assert order["code"] == f"PED-{year}-000002"


def test_register_sale_decrements_stock(client, create_product, create_client, create_order, get_stock):
    product = create_product(stock_quantity=5)
    customer = create_client()

    order = create_order(type="venda", product_id=product["id"], client_id=customer["id"], quantity=3)

    assert order["type"] == "venda"
    assert order["client_id"] == customer["id"]
    assert get_stock(product["id"]) == 2


def test_sale_with_insufficient_stock(client, auth_headers, create_product, get_stock):
    product = create_product(stock_quantity=2)

    response = client.post(f"{API}/orders/", json={
        "type": "venda", "name": "Teclado", "price": "50.00", "quantity": 3, "product_id": product["id"]
    }, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"]["type"] == "insufficient_stock"
    assert get_stock(product["id"]) == 2
    assert client.get(f"{API}/orders/", headers=auth_headers).json()["total"] == 0


def test_sale_requires_product(client, auth_headers):
    response = client.post(f"{API}/orders/", json={
        "type": "venda", "name": "Teclado", "price": "50.00", "quantity": 1
    }, headers=auth_headers)

    assert response.status_code == 400


def test_register_with_unknown_references(client, auth_headers):
    base = {"type": "compra", "name": "Teclado", "price": "50.00", "quantity": 1}

    for field in ("product_id", "client_id", "supplier_id", "category_id"):
        response = client.post(f"{API}/orders/", json={**base, field: 999}, headers=auth_headers)
        assert response.status_code == 404, field


def test_register_validation(client, auth_headers):
    base = {"type": "compra", "name": "Teclado", "price": "50.00", "quantity": 1}

    assert client.post(f"{API}/orders/", json={**base, "quantity": 0}, headers=auth_headers).status_code == 422
    assert client.post(f"{API}/orders/", json={**base, "type": "troca"}, headers=auth_headers).status_code == 422


def test_receive_purchase_increments_stock_and_links_supplier(
        client, auth_headers, create_product, create_supplier, create_order, get_stock):
    product = create_product(stock_quantity=5)
    supplier = create_supplier()
    order = create_order(type="compra", product_id=product["id"], supplier_id=supplier["id"], quantity=7)

    response = client.put(f"{API}/orders/{order['id']}/receive", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "recebido"
    assert data["received_at"] is not None
    assert get_stock(product["id"]) == 12

    suppliers = client.get(f"{API}/products/{product['id']}/suppliers", headers=auth_headers).json()
    assert [s["id"] for s in suppliers["data"]["suppliers"]] == [supplier["id"]]


def test_receive_purchase_without_product_creates_it(client, auth_headers, create_category, create_order):
    category = create_category(name="Informática")
    order = create_order(type="compra", name="Webcam", price="80.00", quantity=4, category_id=category["id"])

    response = client.put(f"{API}/orders/{order['id']}/receive", headers=auth_headers)

    assert response.status_code == 200
    product_id = response.json()["data"]["product_id"]
    assert product_id is not None

    product = client.get(f"{API}/products/{product_id}", headers=auth_headers).json()["data"]
    assert product["name"] == "Webcam"
    assert product["stock_quantity"] == 4
    assert Decimal(product["price"]) == Decimal("80.00")
    assert product["category_id"] == category["id"]


def test_receive_purchase_without_category_uses_default(client, auth_headers, create_order):
    first = create_order(type="compra", name="Cabo HDMI", quantity=2)
    second = create_order(type="compra", name="Cabo USB", quantity=3)

    client.put(f"{API}/orders/{first['id']}/receive", headers=auth_headers)
    client.put(f"{API}/orders/{second['id']}/receive", headers=auth_headers)

    categories = client.get(f"{API}/categories/", headers=auth_headers).json()["data"]
    assert [c["name"] for c in categories] == [settings.default_category_name]

    products = client.get(f"{API}/products/", headers=auth_headers).json()["data"]
    assert {p["name"] for p in products} == {"Cabo HDMI", "Cabo USB"}
    assert {p["category_id"] for p in products} == {categories[0]["id"]}


def test_receive_sale_does_not_move_stock(client, auth_headers, create_product, create_order, get_stock):
    product = create_product(stock_quantity=5)
    order = create_order(type="venda", product_id=product["id"], quantity=2)

    response = client.put(f"{API}/orders/{order['id']}/receive", headers=auth_headers)

    assert response.status_code == 200
    assert get_stock(product["id"]) == 3


def test_status_changes_only_once(client, auth_headers, create_order):
    order = create_order()
    client.put(f"{API}/orders/{order['id']}/receive", headers=auth_headers)

    response = client.put(f"{API}/orders/{order['id']}/receive", headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["error"]["type"] == "invalid_order_state"

    assert client.put(f"{API}/orders/{order['id']}/cancel", headers=auth_headers).status_code == 409


def test_cancel_sale_restocks(client, auth_headers, create_product, create_order, get_stock):
    product = create_product(stock_quantity=5)
    order = create_order(type="venda", product_id=product["id"], quantity=4)
    assert get_stock(product["id"]) == 1

    response = client.put(f"{API}/orders/{order['id']}/cancel", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "cancelado"
    assert response.json()["data"]["cancelled_at"] is not None
    assert get_stock(product["id"]) == 5

    assert client.put(f"{API}/orders/{order['id']}/receive", headers=auth_headers).status_code == 409


def test_cancel_purchase_keeps_stock(client, auth_headers, create_product, create_order, get_stock):
    product = create_product(stock_quantity=5)
    order = create_order(type="compra", product_id=product["id"], quantity=4)

    client.put(f"{API}/orders/{order['id']}/cancel", headers=auth_headers)

    assert get_stock(product["id"]) == 5


def test_update_pending_order(client, auth_headers, create_order, create_supplier):
    supplier = create_supplier()
    order = create_order(type="compra")

    response = client.put(f"{API}/orders/{order['id']}", json={
        "price": "60.00", "notes": "Entrega urgente", "supplier_id": supplier["id"]
    }, headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert Decimal(data["price"]) == Decimal("60.00")
    assert data["notes"] == "Entrega urgente"
    assert data["supplier_id"] == supplier["id"]


def test_update_ignores_immutable_fields(client, auth_headers, create_order):
    order = create_order(quantity=2)

    response = client.put(f"{API}/orders/{order['id']}", json={"quantity": 9, "type": "venda"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"]["quantity"] == 2
    assert response.json()["data"]["type"] == "compra"


def test_update_sale_product_is_refused(client, auth_headers, create_product, create_order):
    product = create_product(stock_quantity=5)
    other = create_product(name="Monitor")
    order = create_order(type="venda", product_id=product["id"])

    response = client.put(f"{API}/orders/{order['id']}", json={"product_id": other["id"]}, headers=auth_headers)

    assert response.status_code == 400


def test_update_received_order_is_refused(client, auth_headers, create_order):
    order = create_order()
    client.put(f"{API}/orders/{order['id']}/receive", headers=auth_headers)

    response = client.put(f"{API}/orders/{order['id']}", json={"notes": "tarde"}, headers=auth_headers)

    assert response.status_code == 409


def test_delete_pending_sale_restocks(client, auth_headers, create_product, create_order, get_stock):
    product = create_product(stock_quantity=5)
    order = create_order(type="venda", product_id=product["id"], quantity=3)

    response = client.delete(f"{API}/orders/{order['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert get_stock(product["id"]) == 5
    assert client.get(f"{API}/orders/{order['id']}", headers=auth_headers).status_code == 404


def test_delete_received_sale_keeps_stock(client, auth_headers, create_product, create_order, get_stock):
    product = create_product(stock_quantity=5)
    order = create_order(type="venda", product_id=product["id"], quantity=3)
    client.put(f"{API}/orders/{order['id']}/receive", headers=auth_headers)

    client.delete(f"{API}/orders/{order['id']}", headers=auth_headers)

    assert get_stock(product["id"]) == 2


def test_list_orders_filters(client, auth_headers, create_product, create_order):
    product = create_product(stock_quantity=10)
    purchase = create_order(type="compra")
    sale = create_order(type="venda", product_id=product["id"])
    client.put(f"{API}/orders/{purchase['id']}/receive", headers=auth_headers)

    body = client.get(f"{API}/orders/", headers=auth_headers).json()
    assert body["total"] == 2
    assert [o["id"] for o in body["data"]] == [sale["id"], purchase["id"]]

    body = client.get(f"{API}/orders/", params={"status": "recebido"}, headers=auth_headers).json()
    assert [o["id"] for o in body["data"]] == [purchase["id"]]

    body = client.get(f"{API}/orders/", params={"type": "venda"}, headers=auth_headers).json()
    assert [o["id"] for o in body["data"]] == [sale["id"]]


def test_missing_order(client, auth_headers):
    assert client.get(f"{API}/orders/999", headers=auth_headers).status_code == 404
    assert client.put(f"{API}/orders/999/receive", headers=auth_headers).status_code == 404
    assert client.put(f"{API}/orders/999/cancel", headers=auth_headers).status_code == 404
    assert client.delete(f"{API}/orders/999", headers=auth_headers).status_code == 404


def test_sale_of_deactivated_product_is_refused(client, auth_headers, create_product, get_stock):
    product = create_product(stock_quantity=5)
    client.delete(f"{API}/products/{product['id']}", headers=auth_headers)

    response = client.post(f"{API}/orders/", json={
        "type": "venda", "name": "Teclado", "price": "50.00", "quantity": 1, "product_id": product["id"]
    }, headers=auth_headers)

    assert response.status_code == 404
    assert get_stock(product["id"]) == 5
