"""Contract tests for support tickets and the contact form."""

import pytest
from httpx import AsyncClient


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.contract
class TestTickets:
    """Contract tests for /api/support."""

    @pytest.mark.asyncio
    async def test_create_and_list_own_tickets(self, client: AsyncClient, register) -> None:
        user = await register("help@test.ng")
        other = await register("other@test.ng")
        headers = bearer(user["token"])

        created = await client.post(
            "/api/support",
            headers=headers,
            json={"category": "Payment Issue", "subject": "Refund", "message": "Please refund me"},
        )
        await client.post(
            "/api/support", headers=bearer(other["token"]), json={"subject": "Hi", "message": "Hello"}
        )
        mine = await client.get("/api/support/my", headers=headers)

        assert created.status_code == 201
        ticket = created.json()
        assert ticket["category"] == "Payment Issue"
        assert ticket["status"] == "Open"
        assert ticket["userId"] == user["id"]
        assert ticket["adminResponse"] is None
        assert [t["id"] for t in mine.json()] == [ticket["id"]]

    @pytest.mark.asyncio
    async def test_category_defaults_to_other(self, client: AsyncClient, register) -> None:
        user = await register("default@test.ng")

        response = await client.post(
            "/api/support", headers=bearer(user["token"]), json={"subject": "Question", "message": "How?"}
        )

        assert response.json()["category"] == "Other"

    @pytest.mark.asyncio
    async def test_unknown_category_is_rejected(self, client: AsyncClient, register) -> None:
        user = await register("bad@test.ng")

        response = await client.post(
            "/api/support",
            headers=bearer(user["token"]),
            json={"category": "Complaints", "subject": "x", "message": "y"},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client: AsyncClient) -> None:
        response = await client.get("/api/support/my")

        assert response.status_code == 401


@pytest.mark.contract
class TestContactForm:
    """Contract tests for POST /api/contact."""

    @pytest.mark.asyncio
    async def test_contact_lands_in_admin_queue(self, client: AsyncClient, create_admin) -> None:
        """Test that a guest enquiry becomes an open ticket for support admins."""
        response = await client.post(
            "/api/contact",
            json={
                "topic": "Booking Dispute",
                "name": "Guest Person",
                "email": "guest@mail.ng",
                "phone": "08099998888",
                "message": "My cleaner did not show up",
            },
        )
        _, token = await create_admin("Support")
        tickets = (await client.get("/api/admin/support", headers=bearer(token))).json()

        assert response.status_code == 200
        assert response.json()["message"]
        assert len(tickets) == 1
        ticket = tickets[0]
        assert ticket["userId"] is None
        assert ticket["userName"] == "Guest Person"
        assert ticket["userRole"] == "Guest"
        assert ticket["category"] == "Booking Dispute"
        assert ticket["subject"] == "Booking Dispute"
        assert ticket["message"] == "My cleaner did not show up\n\nPhone: 08099998888"

    @pytest.mark.asyncio
    async def test_free_text_topic_is_filed_as_other(self, client: AsyncClient, create_admin) -> None:
        await client.post(
            "/api/contact",
            json={"topic": "Partnership", "name": "Biz", "email": "biz@mail.ng", "message": "Let's talk"},
        )
        await client.post("/api/contact", json={"name": "Anon", "email": "anon@mail.ng", "message": "Hi"})
        _, token = await create_admin("Super")

        tickets = (await client.get("/api/admin/support", headers=bearer(token))).json()

        subjects = {t["subject"]: t["category"] for t in tickets}
        assert subjects == {"Partnership": "Other", "General Enquiry": "Other"}

    @pytest.mark.asyncio
    async def test_invalid_email(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/contact", json={"name": "X", "email": "not-an-email", "message": "Hi"}
        )

        assert response.status_code == 422
