"""Tests for request validation messages."""
import pytest


def _messages(response):
    return {error["path"]: error["msg"] for error in response.json()["errors"]}


def test_create_product_empty_body(client):
    """Test every required field is reported."""
    response = client.post("/api/products", json={})
    assert response.status_code == 400
    assert _messages(response) == {
        "name": "El nombre es obligatorio",
        "price": "El precio debe ser un número",
        "availability": "La disponibilidad debe ser un valor booleano",
    }
    for error in response.json()["errors"]:
        assert error["location"] == "body"
        assert error["type"] == "field"
        assert error["value"] is None


def test_create_product_missing_body(client):
    """Test a request without a body is rejected."""
    response = client.post("/api/products")
    assert response.status_code == 400
    assert response.json()["errors"][0]["msg"] == "Cuerpo de la petición no válido"


@pytest.mark.parametrize("price", [0, -1, -300.5])
def test_create_product_price_not_positive(client, price):
    """Test prices must be greater than zero."""
    response = client.post(
        "/api/products",
        json={"name": "Monitor", "price": price, "availability": True},
    )
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert len(errors) == 1
    assert errors[0]["path"] == "price"
    assert errors[0]["msg"] == "Precio no válido"
    assert errors[0]["value"] == price


def test_create_product_price_not_a_number(client):
    """Test a non-numeric price is rejected."""
    response = client.post(
        "/api/products",
        json={"name": "Monitor", "price": "Hola", "availability": True},
    )
    assert response.status_code == 400
    assert _messages(response) == {"price": "El precio debe ser un número"}


def test_create_product_empty_name(client):
    """Test an empty name is rejected."""
    response = client.post(
        "/api/products",
        json={"name": "", "price": 300, "availability": True},
    )
    assert response.status_code == 400
    assert _messages(response) == {"name": "El nombre es obligatorio"}


def test_create_product_availability_not_boolean(client):
    """Test availability must be a boolean."""
    response = client.post(
        "/api/products",
        json={"name": "Monitor", "price": 300, "availability": "quizas"},
    )
    assert response.status_code == 400
    assert _messages(response) == {
        "availability": "La disponibilidad debe ser un valor booleano"
    }


def test_rejected_product_is_not_stored(client):
    """Test nothing is persisted when validation fails."""
    client.post("/api/products", json={"name": "Monitor", "price": -1, "availability": True})

    response = client.get("/api/products")
    assert response.json() == {"data": []}


def test_create_product_price_boolean(client):
    """Test a boolean price is rejected rather than read as 1."""
    response = client.post(
        "/api/products",
        json={"name": "Monitor", "price": True, "availability": True},
    )
    assert response.status_code == 400
    assert _messages(response) == {"price": "El precio debe ser un número"}
    assert client.get("/api/products").json() == {"data": []}


def test_create_product_price_numeric_string(client):
    """Test a numeric string price is still accepted."""
    response = client.post(
        "/api/products",
        json={"name": "Monitor", "price": "300", "availability": True},
    )
    assert response.status_code == 201
    assert response.json()["data"]["price"] == 300


def test_create_product_name_too_long(client):
    """Test an overlong name gets its own message."""
    response = client.post(
        "/api/products",
        json={"name": "M" * 300, "price": 300, "availability": True},
    )
    assert response.status_code == 400
    assert _messages(response) == {
        "name": "El nombre no puede superar los 255 caracteres"
    }


@pytest.mark.parametrize("method", ["get", "patch", "delete"])
def test_product_id_out_of_range(client, method):
    """Test an integer id beyond 64 bits is rejected as an invalid id."""
    response = client.request(method, "/api/products/99999999999999999999")
    assert response.status_code == 400
    assert response.json()["errors"][0]["msg"] == "ID no válido"
    assert response.json()["errors"][0]["path"] == "id"
