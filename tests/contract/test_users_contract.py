"""Contract tests for profile and subscription endpoints."""

import pytest
from httpx import AsyncClient


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.contract
class TestProfile:
    """Contract tests for /api/users/me."""

    @pytest.mark.asyncio
    async def test_get_me(self, client: AsyncClient, register) -> None:
        profile = await register("me@test.ng", role="cleaner", bio="Tidy", services=["Laundry"])

        response = await client.get("/api/users/me", headers=bearer(profile["token"]))

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == profile["id"]
        assert data["bio"] == "Tidy"
        assert data["services"] == ["Laundry"]
        assert data["bookingHistory"] == []
        assert "token" not in data

    @pytest.mark.asyncio
    async def test_partial_update_keeps_unspecified_fields(self, client: AsyncClient, register) -> None:
        """Test that absent and null fields keep their stored values."""
        profile = await register("edit@test.ng", phoneNumber="08011112222", bio="Old")

        response = await client.put(
            "/api/users/me",
            headers=bearer(profile["token"]),
            json={"bio": "New", "phoneNumber": None, "city": "Yaba", "chargePerContractNegotiable": True},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["bio"] == "New"
        assert data["phoneNumber"] == "08011112222"
        assert data["city"] == "Yaba"
        assert data["chargePerContractNegotiable"] is True
        assert data["fullName"] == "Edit"

    @pytest.mark.asyncio
    async def test_profile_of_deleted_user(self, client: AsyncClient, register, create_admin) -> None:
        """Test that a token outliving its user gets 404."""
        profile = await register("gone@test.ng")
        _, super_token = await create_admin("Super")
        await client.delete(f"/api/admin/users/{profile['id']}", headers=bearer(super_token))

        response = await client.get("/api/users/me", headers=bearer(profile["token"]))

        assert response.status_code == 404


@pytest.mark.contract
class TestSubscription:
    """Contract tests for subscription requests."""

    @pytest.mark.asyncio
    async def test_upgrade_request_and_receipt(self, client: AsyncClient, register) -> None:
        profile = await register("sub@test.ng", role="cleaner")
        headers = bearer(profile["token"])

        upgrade = await client.post("/api/users/subscription/upgrade", headers=headers, json={"plan": "Pro"})
        receipt = await client.post(
            "/api/users/subscription/receipt",
            headers=headers,
            json={"name": "transfer.png", "dataUrl": "data:image/png;base64,AAAA"},
        )

        assert upgrade.status_code == 200
        assert upgrade.json()["pendingSubscription"] == "Pro"
        assert upgrade.json()["subscriptionTier"] == "Free"
        assert receipt.status_code == 200
        assert receipt.json()["subscriptionReceipt"] == {
            "name": "transfer.png",
            "dataUrl": "data:image/png;base64,AAAA",
        }

    @pytest.mark.asyncio
    async def test_unknown_plan_is_rejected(self, client: AsyncClient, register) -> None:
        profile = await register("sub2@test.ng", role="cleaner")

        response = await client.post(
            "/api/users/subscription/upgrade", headers=bearer(profile["token"]), json={"plan": "Gold"}
        )

        assert response.status_code == 422
