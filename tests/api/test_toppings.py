"""Tests for topping API endpoints."""

from typing import Any

import pytest

from catalog_service.infrastructure.config import settings


def topping_form(**overrides: Any) -> dict[str, str]:
    form = {"name": "Cheese", "price": "50", "tenantId": "7", "isPublish": "true"}
    form.update(overrides)
    return form


def image_file() -> dict[str, Any]:
    return {"image": ("cheese.jpg", b"\xff\xd8\xff" + b"0" * 32, "image/jpeg")}


@pytest.fixture
def create_topping(client, auth_headers):
    """Create a topping as the tenant-7 manager and return its id."""

    def _create(**overrides: Any) -> str:
        response = client.post(
            "/toppings",
            data=topping_form(**overrides),
            files=image_file(),
            headers=auth_headers("manager", "7"),
        )
        assert response.status_code == 200, response.text
        return response.json()["id"]

    return _create


class TestCreateTopping:
    """Tests for POST /toppings endpoint."""

    def test_create_publishes_price(self, client, create_topping, producer) -> None:
        """Creating a topping publishes its price for the tenant."""
        topping_id = create_topping(price="12.5")

        assert producer.messages == [
            (
                settings.topping_topic,
                {
                    "event_type": "topping-create",
                    "data": {"id": topping_id, "price": "12.5", "tenantId": "7"},
                },
            )
        ]
        data = client.get(f"/toppings/{topping_id}").json()
        assert data["price"] == "12.5"
        assert data["isPublish"] is True
        assert data["image"].startswith("https://catalog-images.s3.us-east-1.amazonaws.com/")

    def test_non_numeric_price(self, client, auth_headers, storage, producer) -> None:
        """Prices must be numbers."""
        response = client.post(
            "/toppings",
            data=topping_form(price="cheap"),
            files=image_file(),
            headers=auth_headers("admin"),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Price must be a Number"
        assert storage.objects == {}
        assert producer.messages == []

    def test_negative_price(self, client, auth_headers) -> None:
        """Prices cannot be negative."""
        response = client.post(
            "/toppings",
            data=topping_form(price="-1"),
            files=image_file(),
            headers=auth_headers("admin"),
        )
        assert response.status_code == 400

    def test_oversize_image(self, client, auth_headers, storage, producer) -> None:
        """Images over the limit are rejected."""
        response = client.post(
            "/toppings",
            data=topping_form(),
            files={"image": ("big.jpg", b"0" * (settings.max_image_size + 1), "image/jpeg")},
            headers=auth_headers("admin"),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "File size exceeds the limit"
        assert storage.objects == {}
        assert producer.messages == []

    def test_manager_of_other_tenant(self, client, auth_headers) -> None:
        """Managers create only for their own tenant."""
        response = client.post(
            "/toppings",
            data=topping_form(tenantId="8"),
            files=image_file(),
            headers=auth_headers("manager", "7"),
        )
        assert response.status_code == 403


class TestReadToppings:
    """Tests for GET /toppings endpoints."""

    def test_list_by_tenant(self, client, auth_headers, create_topping) -> None:
        """Toppings can be listed per tenant."""
        create_topping(name="Cheese")
        create_topping(name="Olives")
        client.post(
            "/toppings",
            data=topping_form(name="Jalapeno", tenantId="8"),
            files=image_file(),
            headers=auth_headers("admin"),
        )

        all_toppings = client.get("/toppings").json()["data"]
        assert len(all_toppings) == 3

        tenant_toppings = client.get("/toppings", params={"tenantId": "7"}).json()["data"]
        assert [t["name"] for t in tenant_toppings] == ["Cheese", "Olives"]

    def test_get_unknown_topping(self, client) -> None:
        """Unknown toppings return 404."""
        response = client.get("/toppings/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
        assert response.json()["message"] == "Topping not found"


class TestUpdateTopping:
    """Tests for PUT /toppings/{id} endpoint."""

    def test_update(self, client, auth_headers, create_topping, storage, producer) -> None:
        """Owners update price and image; the old image is released."""
        topping_id = create_topping()
        (old_key,) = storage.objects

        response = client.put(
            f"/toppings/{topping_id}",
            data=topping_form(price="75"),
            files=image_file(),
            headers=auth_headers("manager", "7"),
        )
        assert response.status_code == 200
        assert response.json() == {"id": topping_id}
        assert old_key not in storage.objects
        assert client.get(f"/toppings/{topping_id}").json()["price"] == "75"
        assert producer.messages[-1][1] == {
            "event_type": "topping-update",
            "data": {"id": topping_id, "price": "75", "tenantId": "7"},
        }

    def test_other_tenant_forbidden(self, client, auth_headers, create_topping) -> None:
        """Managers of another tenant cannot change the topping."""
        topping_id = create_topping()

        response = client.put(
            f"/toppings/{topping_id}",
            data=topping_form(price="1", tenantId="8"),
            headers=auth_headers("manager", "8"),
        )
        assert response.status_code == 403
        assert client.get(f"/toppings/{topping_id}").json()["price"] == "50"


class TestDeleteTopping:
    """Tests for DELETE /toppings/{id} endpoint."""

    def test_owner_deletes(self, client, auth_headers, create_topping, storage, producer) -> None:
        """Deleting removes the record and image and publishes the change."""
        topping_id = create_topping()

        response = client.delete(f"/toppings/{topping_id}", headers=auth_headers("manager", "7"))
        assert response.status_code == 200
        assert response.json() == {"message": "Topping deleted successfully"}
        assert client.get(f"/toppings/{topping_id}").status_code == 404
        assert storage.objects == {}
        assert producer.event_types() == ["topping-create", "topping-delete"]

    def test_customer_of_same_tenant_forbidden(
        self, client, auth_headers, create_topping, storage, producer
    ) -> None:
        """Only staff can delete, even with a matching tenant claim."""
        topping_id = create_topping()

        response = client.delete(
            f"/toppings/{topping_id}", headers=auth_headers("customer", "7")
        )
        assert response.status_code == 403
        assert client.get(f"/toppings/{topping_id}").status_code == 200
        assert len(storage.objects) == 1
        assert producer.event_types() == ["topping-create"]

    def test_requires_token(self, client, create_topping) -> None:
        """Anonymous callers cannot delete toppings."""
        topping_id = create_topping()
        response = client.delete(f"/toppings/{topping_id}")
        assert response.status_code == 401
