"""Contract tests for chats and messages."""

import uuid

import pytest
from httpx import AsyncClient


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def pair(register) -> tuple[dict, dict]:
    customer = await register("chidi@test.ng", fullName="Chidi")
    cleaner = await register("ada@test.ng", role="cleaner", fullName="Ada")
    return customer, cleaner


async def open_chat(client: AsyncClient, token: str, participant_id: str):
    return await client.post("/api/chats", headers=bearer(token), json={"participantId": participant_id})


@pytest.mark.contract
class TestOpenChat:
    """Contract tests for POST /api/chats."""

    @pytest.mark.asyncio
    async def test_created_then_reused(self, client: AsyncClient, pair) -> None:
        """Test that either side opening the chat gets the same one back."""
        customer, cleaner = pair

        first = await open_chat(client, customer["token"], cleaner["id"])
        again = await open_chat(client, cleaner["token"], customer["id"])

        assert first.status_code == 201
        assert again.status_code == 200
        assert first.json()["id"] == again.json()["id"]
        assert set(first.json()["participants"]) == {customer["id"], cleaner["id"]}
        assert first.json()["participantNames"] == {customer["id"]: "Chidi", cleaner["id"]: "Ada"}
        assert first.json()["lastMessage"] is None

    @pytest.mark.asyncio
    async def test_cannot_chat_with_self(self, client: AsyncClient, pair) -> None:
        customer, _ = pair

        response = await open_chat(client, customer["token"], customer["id"])

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_participant(self, client: AsyncClient, pair) -> None:
        customer, _ = pair

        response = await open_chat(client, customer["token"], str(uuid.uuid4()))

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"


@pytest.mark.contract
class TestMessages:
    """Contract tests for chat messages and the inbox."""

    @pytest.mark.asyncio
    async def test_conversation(self, client: AsyncClient, pair) -> None:
        customer, cleaner = pair
        chat_id = (await open_chat(client, customer["token"], cleaner["id"])).json()["id"]
        url = f"/api/chats/{chat_id}/messages"

        sent = await client.post(url, headers=bearer(customer["token"]), json={"text": "Are you free Monday?"})
        await client.post(url, headers=bearer(cleaner["token"]), json={"text": "Yes, from 9am"})
        messages = (await client.get(url, headers=bearer(customer["token"]))).json()

        assert sent.status_code == 201
        assert sent.json()["senderId"] == customer["id"]
        assert sent.json()["chatId"] == chat_id
        assert [m["text"] for m in messages] == ["Are you free Monday?", "Yes, from 9am"]

    @pytest.mark.asyncio
    async def test_inbox_shows_latest_message(self, client: AsyncClient, pair, register) -> None:
        customer, cleaner = pair
        other_cleaner = await register("bola@test.ng", role="cleaner", fullName="Bola")
        quiet_chat = (await open_chat(client, customer["token"], other_cleaner["id"])).json()["id"]
        busy_chat = (await open_chat(client, customer["token"], cleaner["id"])).json()["id"]
        await client.post(
            f"/api/chats/{busy_chat}/messages", headers=bearer(cleaner["token"]), json={"text": "Hello!"}
        )
        await client.post(
            f"/api/chats/{quiet_chat}/messages", headers=bearer(customer["token"]), json={"text": "Ping"}
        )

        inbox = (await client.get("/api/chats", headers=bearer(customer["token"]))).json()

        assert [c["id"] for c in inbox] == [quiet_chat, busy_chat]
        assert inbox[0]["lastMessage"]["text"] == "Ping"
        assert inbox[1]["lastMessage"]["text"] == "Hello!"
        assert inbox[1]["lastMessage"]["senderId"] == cleaner["id"]

    @pytest.mark.asyncio
    async def test_outsider_is_denied(self, client: AsyncClient, pair, register) -> None:
        customer, cleaner = pair
        outsider = await register("eve@test.ng")
        chat_id = (await open_chat(client, customer["token"], cleaner["id"])).json()["id"]
        url = f"/api/chats/{chat_id}/messages"

        read = await client.get(url, headers=bearer(outsider["token"]))
        write = await client.post(url, headers=bearer(outsider["token"]), json={"text": "hi"})

        assert read.status_code == 403
        assert write.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_chat(self, client: AsyncClient, pair) -> None:
        customer, _ = pair

        response = await client.get(f"/api/chats/{uuid.uuid4()}/messages", headers=bearer(customer["token"]))

        assert response.status_code == 404
        assert response.json()["message"] == "Chat not found"
