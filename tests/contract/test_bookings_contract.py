"""Contract tests for the booking endpoints."""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import update

from cleanconnect.models.user import UserDB
from cleanconnect.services.database import DatabaseManager


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def parties(register) -> tuple[dict, dict]:
    """A registered client and cleaner."""
    customer = await register("client@test.ng", fullName="Chidi Client")
    cleaner = await register("cleaner@test.ng", role="cleaner", fullName="Ada Cleaner")
    return customer, cleaner


async def book(client: AsyncClient, token: str, cleaner_id: str, **fields) -> dict:
    response = await client.post(
        "/api/bookings",
        headers=bearer(token),
        json={"cleanerId": cleaner_id, "service": "Deep Cleaning", "date": "2026-11-02", "amount": 15000, **fields},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.contract
class TestCreateBooking:
    """Contract tests for POST /api/bookings."""

    @pytest.mark.asyncio
    async def test_escrow_booking(self, client: AsyncClient, parties) -> None:
        customer, cleaner = parties

        booking = await book(client, customer["token"], cleaner["id"])

        assert booking["clientId"] == customer["id"]
        assert booking["cleanerId"] == cleaner["id"]
        assert booking["clientName"] == "Chidi Client"
        assert booking["cleanerName"] == "Ada Cleaner"
        assert booking["status"] == "Upcoming"
        assert booking["paymentMethod"] == "Escrow"
        assert booking["paymentStatus"] == "Pending Payment"
        assert booking["totalAmount"] == 15000
        assert booking["jobApprovedByClient"] is False
        assert booking["reviewSubmitted"] is False

    @pytest.mark.asyncio
    async def test_direct_booking_skips_payment_tracking(self, client: AsyncClient, parties) -> None:
        customer, cleaner = parties

        booking = await book(client, customer["token"], cleaner["id"], paymentMethod="Direct", totalAmount=16500)

        assert booking["paymentMethod"] == "Direct"
        assert booking["paymentStatus"] == "Not Applicable"
        assert booking["totalAmount"] == 16500

    @pytest.mark.asyncio
    async def test_unknown_cleaner(self, client: AsyncClient, parties) -> None:
        customer, _ = parties

        response = await client.post(
            "/api/bookings",
            headers=bearer(customer["token"]),
            json={"cleanerId": str(uuid.uuid4()), "service": "Laundry", "amount": 1000},
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Cleaner not found"

    @pytest.mark.asyncio
    async def test_only_active_cleaners_can_be_booked(
        self, client: AsyncClient, parties, register, create_admin, db_manager: DatabaseManager
    ) -> None:
        """Test that clients, admins and suspended cleaners are not bookable."""
        customer, _ = parties
        other_client = await register("neighbour@test.ng")
        admin_id, _ = await create_admin("Support")
        suspended = await register("benched@test.ng", role="cleaner")
        async with db_manager.session() as session:
            await session.execute(
                update(UserDB).where(UserDB.id == uuid.UUID(suspended["id"])).values(is_suspended=True)
            )

        for target in (other_client["id"], str(admin_id), suspended["id"]):
            response = await client.post(
                "/api/bookings",
                headers=bearer(customer["token"]),
                json={"cleanerId": target, "service": "Laundry", "amount": 1000},
            )
            assert response.status_code == 404, target
            assert response.json()["message"] == "Cleaner not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("booker", ["client", "cleaner"])
    async def test_cannot_book_yourself(self, client: AsyncClient, parties, booker: str) -> None:
        customer, cleaner = parties
        me = customer if booker == "client" else cleaner

        response = await client.post(
            "/api/bookings",
            headers=bearer(me["token"]),
            json={"cleanerId": me["id"], "service": "Laundry", "amount": 1000},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "You cannot book yourself"

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client: AsyncClient, parties) -> None:
        _, cleaner = parties

        response = await client.post(
            "/api/bookings", json={"cleanerId": cleaner["id"], "service": "Laundry", "amount": 1000}
        )

        assert response.status_code == 401


@pytest.mark.contract
class TestListBookings:
    """Contract tests for GET /api/bookings."""

    @pytest.mark.asyncio
    async def test_both_parties_see_the_booking(self, client: AsyncClient, parties, register) -> None:
        customer, cleaner = parties
        outsider = await register("outsider@test.ng")
        first = await book(client, customer["token"], cleaner["id"], service="Laundry")
        second = await book(client, customer["token"], cleaner["id"], service="Fumigation")

        as_client = (await client.get("/api/bookings", headers=bearer(customer["token"]))).json()
        as_cleaner = (await client.get("/api/bookings", headers=bearer(cleaner["token"]))).json()
        as_outsider = (await client.get("/api/bookings", headers=bearer(outsider["token"]))).json()

        assert [b["id"] for b in as_client] == [second["id"], first["id"]]
        assert [b["id"] for b in as_cleaner] == [second["id"], first["id"]]
        assert as_outsider == []


@pytest.mark.contract
class TestBookingActions:
    """Contract tests for cancel, complete, review and receipt."""

    @pytest.mark.asyncio
    async def test_cleaner_cancels(self, client: AsyncClient, parties) -> None:
        customer, cleaner = parties
        booking = await book(client, customer["token"], cleaner["id"])

        response = await client.post(f"/api/bookings/{booking['id']}/cancel", headers=bearer(cleaner["token"]))

        assert response.status_code == 200
        assert response.json()["status"] == "Cancelled"

    @pytest.mark.asyncio
    async def test_outsider_cannot_touch_booking(self, client: AsyncClient, parties, register) -> None:
        customer, cleaner = parties
        outsider = await register("nosy@test.ng")
        booking = await book(client, customer["token"], cleaner["id"])
        headers = bearer(outsider["token"])

        for action in ("cancel", "complete", "receipt"):
            body = {"name": "r.png", "dataUrl": "data:,x"} if action == "receipt" else None
            response = await client.post(f"/api/bookings/{booking['id']}/{action}", headers=headers, json=body)
            assert response.status_code == 403, action

    @pytest.mark.asyncio
    async def test_unknown_booking(self, client: AsyncClient, parties) -> None:
        customer, _ = parties

        response = await client.post(f"/api/bookings/{uuid.uuid4()}/cancel", headers=bearer(customer["token"]))

        assert response.status_code == 404
        assert response.json()["message"] == "Booking not found"

    @pytest.mark.asyncio
    async def test_client_completes(self, client: AsyncClient, parties) -> None:
        customer, cleaner = parties
        booking = await book(client, customer["token"], cleaner["id"])

        by_cleaner = await client.post(
            f"/api/bookings/{booking['id']}/complete", headers=bearer(cleaner["token"])
        )
        by_client = await client.post(
            f"/api/bookings/{booking['id']}/complete", headers=bearer(customer["token"])
        )

        assert by_cleaner.status_code == 403
        assert by_client.status_code == 200
        assert by_client.json()["status"] == "Completed"
        assert by_client.json()["jobApprovedByClient"] is True
        assert by_client.json()["paymentStatus"] == "Pending Payment"

    @pytest.mark.asyncio
    async def test_review_once(self, client: AsyncClient, parties) -> None:
        """Test that a booking accepts exactly one review."""
        customer, cleaner = parties
        booking = await book(client, customer["token"], cleaner["id"])
        review = {"rating": 4, "timeliness": 5, "thoroughness": 4, "conduct": 3, "comment": "Good job"}

        first = await client.post(
            f"/api/bookings/{booking['id']}/review", headers=bearer(customer["token"]), json=review
        )
        second = await client.post(
            f"/api/bookings/{booking['id']}/review", headers=bearer(customer["token"]), json=review
        )

        assert first.status_code == 200
        assert first.json() == {"message": "Review submitted"}
        assert second.status_code == 400
        bookings = (await client.get("/api/bookings", headers=bearer(customer["token"]))).json()
        assert bookings[0]["reviewSubmitted"] is True
        profile = (await client.get(f"/api/cleaners/{cleaner['id']}")).json()
        assert profile["reviews"] == 1
        assert profile["reviewsData"][0]["reviewerName"] == "Chidi Client"
        assert profile["reviewsData"][0]["timeliness"] == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6])
    async def test_rating_out_of_range(self, client: AsyncClient, parties, rating: int) -> None:
        customer, cleaner = parties
        booking = await book(client, customer["token"], cleaner["id"])

        response = await client.post(
            f"/api/bookings/{booking['id']}/review", headers=bearer(customer["token"]), json={"rating": rating}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_receipt_awaits_admin_confirmation(self, client: AsyncClient, parties) -> None:
        customer, cleaner = parties
        booking = await book(client, customer["token"], cleaner["id"])

        response = await client.post(
            f"/api/bookings/{booking['id']}/receipt",
            headers=bearer(customer["token"]),
            json={"name": "transfer.jpg", "dataUrl": "data:image/jpeg;base64,/9j/"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["paymentStatus"] == "Pending Admin Confirmation"
        assert data["paymentReceipt"] == {"name": "transfer.jpg", "dataUrl": "data:image/jpeg;base64,/9j/"}
