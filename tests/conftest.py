import os

# Environnement de test, avant tout import de l'application
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["MAIL_SUPPRESS_SEND"] = "true"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import app.models  # noqa: E402,F401
from app.core.database import Base, SessionLocal, engine  # noqa: E402
from app.core.security import create_access_token, get_password_hash  # noqa: E402
from app.main import app as fastapi_app  # noqa: E402
from app.models.user import User, UserRole  # noqa: E402

API = "/api/v1"
PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def client():
    with TestClient(fastapi_app) as test_client:
        yield test_client


@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db):
    def _make_user(email="user@example.com", name="Usuário", role=UserRole.USER,
                   password=PASSWORD, is_active=True):
        user = User(
            name=name,
            email=email,
            role=role.value,
            password_hash=get_password_hash(password),
            is_active=is_active,
            failed_login_attempts=0,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_user


def _headers_for(user):
    token = create_access_token(subject=user.id, email=user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def user(make_user):
    return make_user()


@pytest.fixture()
def admin(make_user):
    return make_user(email="admin@example.com", name="Admin", role=UserRole.ADMIN)


@pytest.fixture()
def auth_headers(user):
    return _headers_for(user)


@pytest.fixture()
def admin_headers(admin):
    return _headers_for(admin)


@pytest.fixture()
def create_category(client, auth_headers):
    def _create_category(name="Eletrônicos", **fields):
        response = client.post(
            f"{API}/categories/", json={"name": name, **fields}, headers=auth_headers
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create_category


@pytest.fixture()
def create_supplier(client, auth_headers):
    def _create_supplier(name="Fornecedor A", **fields):
        response = client.post(
            f"{API}/suppliers/", json={"name": name, **fields}, headers=auth_headers
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create_supplier


@pytest.fixture()
def create_product(client, auth_headers, create_category):
    def _create_product(name="Teclado", stock_quantity=10, price="50.00", category_id=None, **fields):
        if category_id is None:
            category_id = create_category(name=f"Cat {name}")["id"]
        payload = {
            "name": name,
            "category_id": category_id,
            "price": price,
            "stock_quantity": stock_quantity,
            **fields,
        }
        response = client.post(f"{API}/products/", json=payload, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create_product


@pytest.fixture()
def create_client(client, auth_headers):
    def _create_client(name="Cliente Um", email="cliente@example.com", **fields):
        response = client.post(
            f"{API}/clients/", json={"name": name, "email": email, **fields}, headers=auth_headers
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create_client


@pytest.fixture()
def create_order(client, auth_headers):
    def _create_order(type="compra", name="Teclado", price="50.00", quantity=1, **fields):
        payload = {"type": type, "name": name, "price": price, "quantity": quantity, **fields}
        response = client.post(f"{API}/orders/", json=payload, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create_order


@pytest.fixture()
def get_stock(client, auth_headers):
    def _get_stock(product_id):
        response = client.get(f"{API}/products/{product_id}", headers=auth_headers)
        assert response.status_code == 200, response.text
        return response.json()["data"]["stock_quantity"]
    return _get_stock
