"""Tests for product API endpoints."""

from collections.abc import Callable, Generator
from datetime import date, timedelta

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from inventory_tracker.api.products import get_store
from inventory_tracker.main import app
from inventory_tracker.services.products import Product
from inventory_tracker.services.store import ProductStore


@pytest.fixture
def store(memory_storage) -> ProductStore:
    """Empty product store backed by in-memory storage."""
    return ProductStore(memory_storage, "@test")


@pytest.fixture
def client(store: ProductStore) -> Generator[TestClient, None, None]:
    """Test client with the product store overridden."""
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def days_from_today(days: int) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    def test_health_check(self) -> None:
        """Test health check returns healthy status."""
        response = TestClient(app).get("/health")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "healthy"}


class TestCreateProduct:
    """Tests for POST /products."""

    def test_create_success(self, client: TestClient, store: ProductStore) -> None:
        """Test creating a product from raw form values."""
        response = client.post(
            "/products",
            json={
                "name": "Queijo Minas",
                "quantity": "3",
                "price": "24,90",
                "weight": "0,5",
                "expiryDate": "01/01/2099",
                "category": "Laticínios",
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["name"] == "Queijo Minas"
        assert data["quantity"] == 3
        assert data["price"] == 24.9
        assert data["expiryDate"] == "2099-01-01"
        assert data["expiryDisplay"] == "01/01/2099"
        assert data["priceDisplay"] == "R$ 24,90"
        assert data["totalValueDisplay"] == "R$ 74,70"
        assert data["weightDisplay"] == "0.5 kg"
        assert data["quantityDisplay"] == "3 unidades"
        assert data["status"] == "healthy"
        assert len(store) == 1
        assert store.products[0].id == data["id"]

    def test_create_blank_name(self, client: TestClient, store: ProductStore) -> None:
        """Test that a blank name is rejected without changing the store."""
        response = client.post("/products", json={"name": "  ", "quantity": "5"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["detail"] == "Digite o nome do produto"
        assert len(store) == 0

    def test_create_null_name(self, client: TestClient, store: ProductStore) -> None:
        """Test that a null name gets the same message as a blank one."""
        response = client.post("/products", json={"name": None, "quantity": "5"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["detail"] == "Digite o nome do produto"
        assert len(store) == 0

    def test_create_large_weight(self, client: TestClient) -> None:
        """Test that large weights are displayed without exponent notation."""
        data = client.post("/products", json={"name": "Granel", "weight": "1234567"}).json()
        assert data["weight"] == 1234567.0
        assert data["weightDisplay"] == "1234567 kg"

    def test_create_defaults(self, client: TestClient) -> None:
        """Test defaults for omitted fields."""
        data = client.post("/products", json={"name": "Sabão"}).json()
        assert data["quantity"] == 0
        assert data["quantityDisplay"] == "Em falta"
        assert data["category"] == "Outros"
        assert data["expiryDate"] is None
        assert data["expiryDisplay"] == "Sem validade"
        assert data["weightDisplay"] is None


class TestListProducts:
    """Tests for GET /products."""

    @pytest.fixture(autouse=True)
    def seed(self, store: ProductStore, make_product: Callable[..., Product]) -> None:
        store._products = [
            make_product(name="Leite", category="Laticínios", quantity=4, expiry_date=days_from_today(3)),
            make_product(name="Iogurte", category="Laticínios", quantity=0, expiry_date=days_from_today(-2)),
            make_product(name="Detergente", category="Limpeza", quantity=0),
            make_product(name="Arroz", category="Mercearia", quantity=10, expiry_date=days_from_today(60)),
        ]

    def test_list_all(self, client: TestClient) -> None:
        """Test listing every product, newest first."""
        data = client.get("/products").json()
        assert data["totalItems"] == 4
        assert data["filter"] == "all"
        assert [item["name"] for item in data["items"]] == [
            "Leite",
            "Iogurte",
            "Detergente",
            "Arroz",
        ]

    def test_status_fields(self, client: TestClient) -> None:
        """Test derived status and color per item."""
        items = {item["name"]: item for item in client.get("/products").json()["items"]}
        assert items["Leite"]["status"] == "warning"
        assert items["Leite"]["statusColor"] == "#fbbf24"
        assert items["Iogurte"]["status"] == "critical"
        assert items["Iogurte"]["expired"] is True
        assert items["Detergente"]["status"] == "healthy"
        assert items["Arroz"]["status"] == "healthy"

    @pytest.mark.parametrize(
        ("mode", "expected"),
        [
            ("inStock", ["Leite", "Arroz"]),
            ("outOfStock", ["Iogurte", "Detergente"]),
            ("expired", ["Iogurte"]),
        ],
    )
    def test_filter_modes(self, client: TestClient, mode: str, expected: list[str]) -> None:
        """Test each filter mode."""
        data = client.get("/products", params={"filter": mode}).json()
        assert [item["name"] for item in data["items"]] == expected

    def test_search(self, client: TestClient) -> None:
        """Test search over category."""
        data = client.get("/products", params={"search": "LATIC"}).json()
        assert [item["name"] for item in data["items"]] == ["Leite", "Iogurte"]

    def test_unknown_filter(self, client: TestClient) -> None:
        """Test that an unknown filter mode is rejected."""
        response = client.get("/products", params={"filter": "lowStock"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestStats:
    """Tests for GET /products/stats."""

    def test_stats(
        self, client: TestClient, store: ProductStore, make_product: Callable[..., Product]
    ) -> None:
        """Test count, in-stock count and total value."""
        store._products = [
            make_product(price=10, quantity=2),
            make_product(price=5, quantity=0),
        ]
        data = client.get("/products/stats").json()
        assert data == {
            "count": 2,
            "inStockCount": 1,
            "totalValue": 20.0,
            "totalValueDisplay": "R$ 20,00",
        }

    def test_stats_ignore_filters(self, client: TestClient) -> None:
        """Test stats on an empty store."""
        data = client.get("/products/stats", params={"filter": "expired"}).json()
        assert data["count"] == 0
        assert data["totalValueDisplay"] == "R$ 0,00"


class TestCategories:
    """Tests for GET /products/categories."""

    def test_categories(self, client: TestClient) -> None:
        """Test the category picker values."""
        data = client.get("/products/categories").json()
        assert "Laticínios" in data["categories"]
        assert data["defaultCategory"] == "Outros"


class TestGetAndUpdateProduct:
    """Tests for GET and PUT /products/{id}."""

    def test_get(
        self, client: TestClient, store: ProductStore, make_product: Callable[..., Product]
    ) -> None:
        """Test fetching a product for the edit form."""
        product = make_product(name="Leite")
        store._products = [product]
        response = client.get(f"/products/{product.id}")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "Leite"

    def test_get_missing(self, client: TestClient) -> None:
        """Test 404 for an unknown id."""
        response = client.get("/products/123")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update(
        self, client: TestClient, store: ProductStore, make_product: Callable[..., Product]
    ) -> None:
        """Test replacing fields while keeping the id."""
        product = make_product(name="Leite", quantity=1)
        store._products = [product]
        response = client.put(
            f"/products/{product.id}",
            json={"name": "Leite Desnatado", "quantity": "8", "category": "Laticínios"},
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == product.id
        assert data["name"] == "Leite Desnatado"
        assert data["quantity"] == 8
        assert store.get(product.id).quantity == 8

    def test_update_missing(self, client: TestClient) -> None:
        """Test 404 when updating an unknown id."""
        response = client.put("/products/1", json={"name": "X"})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_blank_name(
        self, client: TestClient, store: ProductStore, make_product: Callable[..., Product]
    ) -> None:
        """Test 422 when the edited name is blank."""
        product = make_product(name="Leite")
        store._products = [product]
        response = client.put(f"/products/{product.id}", json={"name": ""})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert store.get(product.id).name == "Leite"


class TestAdjustQuantity:
    """Tests for POST /products/{id}/quantity."""

    def test_increment_and_decrement(
        self, client: TestClient, store: ProductStore, make_product: Callable[..., Product]
    ) -> None:
        """Test +1 and -1 buttons, clamping at zero."""
        product = make_product(quantity=1)
        store._products = [product]

        assert client.post(f"/products/{product.id}/quantity", json={"delta": 1}).json()["quantity"] == 2
        assert client.post(f"/products/{product.id}/quantity", json={"delta": -5}).json()["quantity"] == 0

    def test_missing(self, client: TestClient) -> None:
        """Test 404 for an unknown id."""
        response = client.post("/products/5/quantity", json={"delta": 1})
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDeleteProduct:
    """Tests for DELETE /products/{id}."""

    def test_requires_confirmation(
        self, client: TestClient, store: ProductStore, make_product: Callable[..., Product]
    ) -> None:
        """Test that deletion without confirmation leaves the store untouched."""
        product = make_product()
        store._products = [product]
        response = client.delete(f"/products/{product.id}")
        assert response.status_code == status.HTTP_409_CONFLICT
        assert "Tem certeza" in response.json()["detail"]
        assert len(store) == 1

    def test_confirmed_delete(
        self, client: TestClient, store: ProductStore, make_product: Callable[..., Product]
    ) -> None:
        """Test deletion with confirmation."""
        product = make_product()
        store._products = [product]
        response = client.delete(f"/products/{product.id}", params={"confirm": "true"})
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert len(store) == 0

    def test_missing_is_ignored(self, client: TestClient) -> None:
        """Test that deleting an unknown id is a silent no-op."""
        response = client.delete("/products/77", params={"confirm": "true"})
        assert response.status_code == status.HTTP_204_NO_CONTENT
