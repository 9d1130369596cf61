"""
Tests des routes HTTP /api/v1/orders.

L'application est construite avec un Container DI dont la configuration
pointe vers une base SQLite de test et dont le client catalogue est
remplace par le catalogue en memoire.

Verifie:
- Representation JSON des commandes (camelCase, montants a 2 decimales)
- Traduction de chaque type d'erreur en code HTTP
- Reponse generique pour une erreur imprevue
"""

from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient
from loguru import logger

from src.config import Settings
from src.container import Container
from src.web.app import create_app
from src.web.errors import UNEXPECTED_ERROR_MESSAGE


@pytest.fixture
def container(test_settings: Settings, fake_catalog) -> Container:
    di_container = Container()
    di_container.config.override(providers.Object(test_settings))
    di_container.catalog_client.override(providers.Object(fake_catalog))
    return di_container


@pytest.fixture
def client(container: Container) -> Iterator[TestClient]:
    with TestClient(create_app(container)) as test_client:
        yield test_client


@pytest.fixture
def log_records() -> Iterator[list[dict]]:
    """Handler loguru actif pendant le test, retire ensuite."""
    records: list[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


def create(client: TestClient, customer_id: int = 7, items=None, **extra) -> dict:
    payload = {
        "customerId": customer_id,
        "items": items if items is not None else [{"productId": 1, "quantity": 2}],
        **extra,
    }
    response = client.post("/api/v1/orders", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "UP"}


class TestCreateOrderRoute:
    def test_create_returns_order_representation(self, client: TestClient) -> None:
        body = create(
            client,
            items=[{"productId": 1, "quantity": 2}, {"productId": 2, "quantity": 3}],
            shippingAddress="12 rue de la Paix, Paris",
        )

        assert body["id"] is not None
        assert body["customerId"] == 7
        assert body["status"] == "PENDING"
        assert body["version"] == 0
        assert body["totalAmount"] == "36.50"
        assert body["shippingAddress"] == "12 rue de la Paix, Paris"
        assert body["notes"] is None
        assert [item["productId"] for item in body["items"]] == [1, 2]
        assert body["items"][1] == {
            "id": body["items"][1]["id"],
            "productId": 2,
            "productName": "Wireless Mouse",
            "quantity": 3,
            "price": "5.50",
            "subtotal": "16.50",
        }
        for field in ("orderDate", "createdAt", "updatedAt"):
            assert body[field] is not None

    def test_create_business_validation_error(self, client: TestClient, fake_catalog) -> None:
        response = client.post(
            "/api/v1/orders",
            json={"customerId": 7, "items": [{"productId": 1, "quantity": 0}]},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION"
        assert body["message"] == "Input validation error"
        assert body["path"] == "/api/v1/orders"
        assert body["fieldErrors"] == {"items[0].quantity": "Quantity must be at least 1"}
        assert fake_catalog.calls == []

    def test_create_missing_fields(self, client: TestClient) -> None:
        response = client.post("/api/v1/orders", json={})

        assert response.status_code == 400
        assert set(response.json()["fieldErrors"]) == {"customerId", "items"}

    def test_create_malformed_types(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/orders",
            json={"customerId": 7, "items": [{"productId": 1, "quantity": "many"}]},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION"
        assert "items[0].quantity" in body["fieldErrors"]

    def test_create_unknown_product(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/orders",
            json={"customerId": 7, "items": [{"productId": 999, "quantity": 1}]},
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Product not found with id: 999"

    def test_create_insufficient_stock(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/orders",
            json={"customerId": 7, "items": [{"productId": 2, "quantity": 5}]},
        )

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "UNAVAILABLE"
        assert body["message"] == (
            "Insufficient stock for product id 2. Available: 3, Requested: 5"
        )

    def test_create_with_catalog_down(self, client: TestClient, fake_catalog) -> None:
        fake_catalog.failing.add(1)

        response = client.post(
            "/api/v1/orders",
            json={"customerId": 7, "items": [{"productId": 1, "quantity": 1}]},
        )

        assert response.status_code == 503
        assert response.json()["code"] == "UPSTREAM_FAILURE"


class TestReadRoutes:
    def test_get_order(self, client: TestClient) -> None:
        created = create(client)

        response = client.get(f"/api/v1/orders/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_unknown_order(self, client: TestClient) -> None:
        response = client.get("/api/v1/orders/999")

        assert response.status_code == 404
        body = response.json()
        assert body["status"] == 404
        assert body["error"] == "Not Found"
        assert body["code"] == "NOT_FOUND"
        assert body["message"] == "Order not found with id: 999"
        assert body["path"] == "/api/v1/orders/999"
        assert "timestamp" in body

    def test_list_customer_orders(self, client: TestClient) -> None:
        first = create(client)
        second = create(client)
        create(client, customer_id=8)

        response = client.get("/api/v1/orders/customer/7", params={"size": 1})

        assert response.status_code == 200
        body = response.json()
        assert [o["id"] for o in body["content"]] == [second["id"]]
        assert body["page"] == 0
        assert body["size"] == 1
        assert body["totalElements"] == 2
        assert body["totalPages"] == 2
        assert body["first"] is True
        assert body["last"] is False

        body = client.get(
            "/api/v1/orders/customer/7", params={"sortDir": "asc"}
        ).json()
        assert [o["id"] for o in body["content"]] == [first["id"], second["id"]]

    def test_list_rejects_unknown_sort_field(self, client: TestClient) -> None:
        response = client.get("/api/v1/orders/customer/7", params={"sortBy": "password"})

        assert response.status_code == 400
        assert "sortBy" in response.json()["fieldErrors"]

    def test_list_rejects_oversized_page(self, client: TestClient) -> None:
        response = client.get("/api/v1/orders", params={"size": 1000})

        assert response.status_code == 400
        assert "size" in response.json()["fieldErrors"]

    def test_list_all_filtered_by_status(self, client: TestClient) -> None:
        first = create(client)
        create(client, customer_id=8)
        client.put(f"/api/v1/orders/{first['id']}/status", json={"status": "CONFIRMED"})

        body = client.get("/api/v1/orders", params={"status": "CONFIRMED"}).json()

        assert [o["id"] for o in body["content"]] == [first["id"]]
        assert client.get("/api/v1/orders").json()["totalElements"] == 2

    def test_list_by_date_range(self, client: TestClient) -> None:
        created = create(client)

        response = client.get(
            "/api/v1/orders/range",
            params={"start": "2000-01-01T00:00:00", "end": "2100-01-01T00:00:00"},
        )

        assert response.status_code == 200
        assert [o["id"] for o in response.json()["content"]] == [created["id"]]

    def test_list_by_date_range_requires_bounds(self, client: TestClient) -> None:
        response = client.get("/api/v1/orders/range")

        assert response.status_code == 400
        assert {"start", "end"} <= set(response.json()["fieldErrors"])

    def test_list_by_date_range_mixed_offsets(self, client: TestClient) -> None:
        created = create(client)

        response = client.get(
            "/api/v1/orders/range",
            params={"start": "2000-01-01T00:00:00Z", "end": "2100-01-01T00:00:00"},
        )

        assert response.status_code == 200
        assert [o["id"] for o in response.json()["content"]] == [created["id"]]

    def test_list_by_date_range_converts_offset_to_utc(self, client: TestClient) -> None:
        created = create(client)
        order_date = datetime.fromisoformat(created["orderDate"])
        local = timezone(timedelta(hours=2))

        # Fenetre de 10 minutes autour de la creation, exprimee en +02:00
        window = {
            "start": (order_date - timedelta(minutes=5)).replace(tzinfo=timezone.utc)
            .astimezone(local).isoformat(),
            "end": (order_date + timedelta(minutes=5)).replace(tzinfo=timezone.utc)
            .astimezone(local).isoformat(),
        }
        response = client.get("/api/v1/orders/range", params=window)

        assert response.status_code == 200
        assert [o["id"] for o in response.json()["content"]] == [created["id"]]

    def test_list_by_customer_and_status(self, client: TestClient) -> None:
        created = create(client)

        response = client.get("/api/v1/orders/customer/7/status/PENDING")

        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == [created["id"]]
        assert client.get("/api/v1/orders/customer/7/status/SHIPPED").json() == []


class TestUpdateStatusRoute:
    def test_update_status(self, client: TestClient) -> None:
        created = create(client)

        response = client.put(
            f"/api/v1/orders/{created['id']}/status", json={"status": "CONFIRMED"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "CONFIRMED"
        assert body["version"] == 1

    def test_update_status_with_active_log_handler(
        self, client: TestClient, log_records: list[dict]
    ) -> None:
        created = create(client)

        response = client.put(
            f"/api/v1/orders/{created['id']}/status", json={"status": "CONFIRMED"}
        )

        assert response.status_code == 200, response.text
        requested = [r for r in log_records if r["message"] == "Changement de statut demande"]
        assert len(requested) == 1
        assert requested[0]["extra"] == {"order_id": created["id"], "new_status": "CONFIRMED"}

    def test_update_status_is_case_insensitive(self, client: TestClient) -> None:
        created = create(client)

        response = client.put(
            f"/api/v1/orders/{created['id']}/status", json={"status": "cancelled"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"

    def test_invalid_transition(self, client: TestClient) -> None:
        created = create(client)
        client.put(f"/api/v1/orders/{created['id']}/status", json={"status": "CANCELLED"})

        response = client.put(
            f"/api/v1/orders/{created['id']}/status", json={"status": "CONFIRMED"}
        )

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "INVALID_OPERATION"
        assert "retryable" not in body

    def test_stale_version(self, client: TestClient) -> None:
        created = create(client)

        response = client.put(
            f"/api/v1/orders/{created['id']}/status",
            json={"status": "CONFIRMED", "version": 5},
        )

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "CONCURRENCY_CONFLICT"
        assert body["retryable"] is True

    def test_missing_status(self, client: TestClient) -> None:
        created = create(client)

        response = client.put(f"/api/v1/orders/{created['id']}/status", json={})

        assert response.status_code == 400
        assert "status" in response.json()["fieldErrors"]

    def test_unknown_status_value(self, client: TestClient) -> None:
        created = create(client)

        response = client.put(
            f"/api/v1/orders/{created['id']}/status", json={"status": "LOST"}
        )

        assert response.status_code == 400
        assert "status" in response.json()["fieldErrors"]

    def test_update_unknown_order(self, client: TestClient) -> None:
        response = client.put("/api/v1/orders/999/status", json={"status": "CONFIRMED"})
        assert response.status_code == 404


class TestUnexpectedError:
    def test_unexpected_error_is_generic(
        self, container: Container, fake_catalog, monkeypatch
    ) -> None:
        async def explode(product_id: int, quantity: int) -> None:
            raise RuntimeError("secret internal detail")

        monkeypatch.setattr(fake_catalog, "check_availability", explode)

        with TestClient(create_app(container), raise_server_exceptions=False) as client:
            response = client.post(
                "/api/v1/orders",
                json={"customerId": 7, "items": [{"productId": 1, "quantity": 1}]},
            )

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == UNEXPECTED_ERROR_MESSAGE
        assert "secret" not in response.text
