"""Integration tests for the Profile API."""

import pytest
from httpx import AsyncClient

JANE = {"name": "Jane Doe", "email": "jane@example.com", "age": 30}


class TestCreateOrUpdateProfile:
    """Tests for POST /api/profiles."""

    @pytest.mark.asyncio
    async def test_create_profile(self, client: AsyncClient) -> None:
        """A new email creates a profile and answers 201."""
        response = await client.post("/api/profiles", json=JANE)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Profile created successfully"
        assert body["data"]["email"] == "jane@example.com"
        assert body["data"]["age"] == 30
        assert "createdAt" in body["data"]
        assert "updatedAt" in body["data"]

    @pytest.mark.asyncio
    async def test_same_email_updates_instead_of_duplicating(self, client: AsyncClient) -> None:
        """Posting an existing email with different case updates that profile."""
        created = await client.post("/api/profiles", json=JANE)

        response = await client.post(
            "/api/profiles", json={"name": "Jane Smith", "email": "JANE@Example.com", "age": 31}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Profile updated successfully"
        assert body["data"]["id"] == created.json()["data"]["id"]
        assert body["data"]["name"] == "Jane Smith"
        assert body["data"]["age"] == 31
        assert body["data"]["createdAt"] == created.json()["data"]["createdAt"]

        listing = await client.get("/api/profiles")
        assert listing.json()["count"] == 1

    @pytest.mark.asyncio
    async def test_fields_are_normalized(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/profiles", json={"name": "  Jane Doe  ", "email": " Jane@Example.COM ", "age": "30"}
        )

        data = response.json()["data"]
        assert data["name"] == "Jane Doe"
        assert data["email"] == "jane@example.com"
        assert data["age"] == 30

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides, field, message",
        [
            ({"name": "Al"}, "name", "Please enter your full name (first and last name)"),
            ({"email": "not-an-email"}, "email", "Please enter a valid email address"),
            ({"age": 0}, "age", "Age must be at least 1 year"),
            ({"age": 121}, "age", "Age cannot exceed 120 years"),
            ({"age": "abc"}, "age", "Age must be a valid number"),
            ({"age": True}, "age", "Age must be a valid number"),
            ({"age": 30.5}, "age", "Age must be a whole number"),
            ({"age": None}, "age", "Age is required"),
        ],
    )
    async def test_rejects_invalid_fields(
        self, client: AsyncClient, overrides: dict, field: str, message: str
    ) -> None:
        response = await client.post("/api/profiles", json={**JANE, **overrides})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        assert {"field": field, "message": message} in body["errors"]

        listing = await client.get("/api/profiles")
        assert listing.json()["count"] == 0

    @pytest.mark.asyncio
    async def test_rejects_wrong_json_types(self, client: AsyncClient) -> None:
        response = await client.post("/api/profiles", json={**JANE, "name": ["Jane", "Doe"]})

        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"


class TestGetProfile:
    """Tests for GET /api/profiles/{email}."""

    @pytest.mark.asyncio
    async def test_get_is_case_insensitive(self, client: AsyncClient) -> None:
        await client.post("/api/profiles", json=JANE)

        response = await client.get("/api/profiles/JANE@EXAMPLE.COM")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Profile retrieved successfully"
        assert body["data"]["name"] == "Jane Doe"

    @pytest.mark.asyncio
    async def test_get_missing_returns_404(self, client: AsyncClient) -> None:
        response = await client.get("/api/profiles/ghost@example.com")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Profile not found"


class TestListProfiles:
    """Tests for GET /api/profiles."""

    @pytest.mark.asyncio
    async def test_empty_list(self, client: AsyncClient) -> None:
        response = await client.get("/api/profiles")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Profiles retrieved successfully",
            "count": 0,
            "data": [],
        }

    @pytest.mark.asyncio
    async def test_lists_every_profile(self, client: AsyncClient) -> None:
        await client.post("/api/profiles", json=JANE)
        await client.post("/api/profiles", json={"name": "Bob Stone", "email": "bob@example.com", "age": 45})

        response = await client.get("/api/profiles")

        body = response.json()
        assert body["count"] == 2
        assert {p["email"] for p in body["data"]} == {"jane@example.com", "bob@example.com"}


class TestDeleteProfile:
    """Tests for DELETE /api/profiles/{email}."""

    @pytest.mark.asyncio
    async def test_delete_then_get_is_404(self, client: AsyncClient) -> None:
        await client.post("/api/profiles", json=JANE)

        response = await client.delete("/api/profiles/Jane@Example.com")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Profile deleted successfully"}
        assert (await client.get("/api/profiles/jane@example.com")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_returns_404(self, client: AsyncClient) -> None:
        response = await client.delete("/api/profiles/ghost@example.com")

        assert response.status_code == 404
        assert response.json()["message"] == "Profile not found"


class TestUnknownRoute:
    @pytest.mark.asyncio
    async def test_unknown_route_returns_route_not_found(self, client: AsyncClient) -> None:
        response = await client.get("/api/nothing-here")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Route not found"
