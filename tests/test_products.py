from decimal import Decimal

from app.core.config import settings

API = "/api/v1"


def test_create_product_with_category_and_suppliers(client, auth_headers, create_category, create_supplier):
    category = create_category(name="Periféricos")
    supplier = create_supplier(name="Distribuidora X")

    response = client.post(f"{API}/products/", json={
        "name": "Mouse",
        "code": "MS-01",
        "category_id": category["id"],
        "price": "25.50",
        "sale_price": "39.90",
        "stock_quantity": 4,
        "supplier_ids": [supplier["id"]],
    }, headers=auth_headers)

    assert response.status_code == 201
    product = response.json()["data"]
    assert product["category"]["name"] == "Periféricos"
    assert Decimal(product["price"]) == Decimal("25.50")
    assert Decimal(product["sale_price"]) == Decimal("39.90")
    assert [s["id"] for s in product["suppliers"]] == [supplier["id"]]


def test_create_product_unknown_category(client, auth_headers):
    response = client.post(f"{API}/products/", json={
        "name": "Mouse", "category_id": 999, "price": "10.00"
    }, headers=auth_headers)

    assert response.status_code == 404


def test_create_product_unknown_supplier(client, auth_headers, create_category):
    category = create_category()

    response = client.post(f"{API}/products/", json={
        "name": "Mouse", "category_id": category["id"], "price": "10.00", "supplier_ids": [42]
    }, headers=auth_headers)

    assert response.status_code == 404


def test_duplicate_code_conflicts(client, auth_headers, create_product):
    existing = create_product(name="Mouse", code="MS-01")

    response = client.post(f"{API}/products/", json={
        "name": "Outro", "code": "MS-01", "category_id": existing["category_id"], "price": "1.00"
    }, headers=auth_headers)

    assert response.status_code == 409


def test_blank_code_is_stored_as_null(client, auth_headers, create_category):
    category = create_category()

    for name in ("Mouse", "Cabo"):
        response = client.post(f"{API}/products/", json={
            "name": name, "code": "", "category_id": category["id"], "price": "10.00"
        }, headers=auth_headers)
        assert response.status_code == 201, response.text
        assert response.json()["data"]["code"] is None


def test_negative_stock_is_rejected(client, auth_headers, create_category):
    category = create_category()

    response = client.post(f"{API}/products/", json={
        "name": "Mouse", "category_id": category["id"], "price": "10.00", "stock_quantity": -1
    }, headers=auth_headers)

    assert response.status_code == 422


def test_list_filters_and_pagination(client, auth_headers, create_category, create_product):
    tools = create_category(name="Ferramentas")
    create_product(name="Martelo", category_id=tools["id"], code="FER-1")
    create_product(name="Alicate", category_id=tools["id"])
    removed = create_product(name="Serrote", category_id=tools["id"])
    create_product(name="Caneta")
    client.delete(f"{API}/products/{removed['id']}", headers=auth_headers)

    response = client.get(f"{API}/products/", params={"category_id": tools["id"]}, headers=auth_headers)
    body = response.json()
    assert body["total"] == 2
    assert [p["name"] for p in body["data"]] == ["Alicate", "Martelo"]

    response = client.get(f"{API}/products/", params={"search": "fer-"}, headers=auth_headers)
    assert [p["name"] for p in response.json()["data"]] == ["Martelo"]

    response = client.get(f"{API}/products/", params={"skip": 0, "limit": 2}, headers=auth_headers)
    body = response.json()
    assert body["total"] == 3
    assert body["per_page"] == 2
    assert body["has_more"] is True


def test_update_product_replaces_suppliers(client, auth_headers, create_product, create_supplier):
    first = create_supplier(name="Primeiro")
    second = create_supplier(name="Segundo")
    product = create_product(supplier_ids=[first["id"]])

    response = client.put(f"{API}/products/{product['id']}", json={
        "name": "Teclado Mecânico", "supplier_ids": [second["id"]]
    }, headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Teclado Mecânico"
    assert [s["id"] for s in data["suppliers"]] == [second["id"]]


def test_update_product_code_clash(client, auth_headers, create_product):
    create_product(name="Mouse", code="MS-01")
    other = create_product(name="Monitor", code="MN-01")

    response = client.put(f"{API}/products/{other['id']}", json={"code": "MS-01"}, headers=auth_headers)

    assert response.status_code == 409


def test_stock_entry_and_exit(client, auth_headers, create_product):
    product = create_product(stock_quantity=5)

    response = client.patch(f"{API}/products/{product['id']}/stock", json={
        "quantity": 3, "movement": "entrada"
    }, headers=auth_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["previous_quantity"] == 5
    assert data["current_quantity"] == 8

    response = client.patch(f"{API}/products/{product['id']}/stock", json={
        "quantity": 8, "movement": "saida"
    }, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["current_quantity"] == 0


def test_stock_exit_beyond_available(client, auth_headers, create_product, get_stock):
    product = create_product(stock_quantity=2)

    response = client.patch(f"{API}/products/{product['id']}/stock", json={
        "quantity": 3, "movement": "saida"
    }, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"]["type"] == "insufficient_stock"
    assert get_stock(product["id"]) == 2


def test_stock_movement_validation(client, auth_headers, create_product):
    product = create_product()

    response = client.patch(f"{API}/products/{product['id']}/stock", json={
        "quantity": 0, "movement": "entrada"
    }, headers=auth_headers)
    assert response.status_code == 422

    response = client.patch(f"{API}/products/{product['id']}/stock", json={
        "quantity": 1, "movement": "transfer"
    }, headers=auth_headers)
    assert response.status_code == 422


def test_stock_movement_unknown_product(client, auth_headers):
    response = client.patch(f"{API}/products/999/stock", json={
        "quantity": 1, "movement": "entrada"
    }, headers=auth_headers)

    assert response.status_code == 404


def test_low_stock(client, auth_headers, create_product):
    create_product(name="Cheio", stock_quantity=50)
    create_product(name="Baixo", stock_quantity=3)
    create_product(name="Zerado", stock_quantity=0)

    response = client.get(f"{API}/products/low-stock", headers=auth_headers)
    body = response.json()
    assert body["threshold"] == settings.low_stock_threshold
    assert [p["name"] for p in body["data"]] == ["Zerado", "Baixo"]

    response = client.get(f"{API}/products/low-stock", params={"threshold": 0}, headers=auth_headers)
    assert [p["name"] for p in response.json()["data"]] == ["Zerado"]


def test_product_suppliers_lists_active_only(client, auth_headers, create_product, create_supplier):
    active = create_supplier(name="Ativo")
    inactive = create_supplier(name="Inativo", is_active=False)
    product = create_product(supplier_ids=[active["id"], inactive["id"]])

    response = client.get(f"{API}/products/{product['id']}/suppliers", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["product"]["id"] == product["id"]
    assert [s["name"] for s in data["suppliers"]] == ["Ativo"]


def test_soft_delete_keeps_product_readable(client, auth_headers, create_product):
    product = create_product()

    assert client.delete(f"{API}/products/{product['id']}", headers=auth_headers).status_code == 200

    response = client.get(f"{API}/products/{product['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is False
