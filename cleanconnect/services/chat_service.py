"""Direct messaging between two users."""

import uuid

import structlog
from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.errors import AccessDenied, NotFound, ValidationFailed
from cleanconnect.models.base import utcnow
from cleanconnect.models.chat import ChatDB, ChatView, LastMessage, MessageDB, MessageView
from cleanconnect.models.user import UserDB

logger = structlog.get_logger(__name__)


def to_message_view(message: MessageDB) -> MessageView:
    return MessageView(
        id=message.id,
        chat_id=message.chat_id,
        sender_id=message.sender_id,
        text=message.text,
        timestamp=message.created_at,
    )


class ChatService:
    """Manages chats and their messages.

    A chat holds exactly two participants and there is at most one chat per
    pair, whichever of them opened it.
    """

    def __init__(self, db_session: AsyncSession):
        """Initialize chat service.

        Args:
            db_session: Database session for persistence
        """
        self.db_session = db_session

    async def _find_chat(self, user_a: uuid.UUID, user_b: uuid.UUID) -> ChatDB | None:
        query = select(ChatDB).where(
            or_(
                and_(ChatDB.participant_one == user_a, ChatDB.participant_two == user_b),
                and_(ChatDB.participant_one == user_b, ChatDB.participant_two == user_a),
            )
        )
        result = await self.db_session.execute(query)
        return result.scalars().first()

    async def _get_participant_chat(self, chat_id: uuid.UUID, user_id: uuid.UUID) -> ChatDB:
        """Fetch a chat the caller takes part in.

        Raises:
            NotFound: If the chat does not exist
            AccessDenied: If the caller is not a participant
        """
        chat = await self.db_session.get(ChatDB, chat_id)
        if chat is None:
            raise NotFound("Chat not found")
        if user_id not in (chat.participant_one, chat.participant_two):
            raise AccessDenied("Not a participant in this chat")
        return chat

    async def _last_message(self, chat_id: uuid.UUID) -> LastMessage | None:
        query = (
            select(MessageDB)
            .where(MessageDB.chat_id == chat_id)
            .order_by(MessageDB.created_at.desc())
            .limit(1)
        )
        result = await self.db_session.execute(query)
        message = result.scalars().first()
        if message is None:
            return None
        return LastMessage(text=message.text, sender_id=message.sender_id, timestamp=message.created_at)

    async def _participant_names(self, chats: list[ChatDB]) -> dict[uuid.UUID, str | None]:
        ids = {c.participant_one for c in chats} | {c.participant_two for c in chats}
        if not ids:
            return {}
        result = await self.db_session.execute(
            select(UserDB.id, UserDB.full_name).where(UserDB.id.in_(ids))
        )
        return {row[0]: row[1] for row in result.all()}

    async def _to_view(self, chat: ChatDB, names: dict[uuid.UUID, str | None]) -> ChatView:
        participants = [chat.participant_one, chat.participant_two]
        return ChatView(
            id=chat.id,
            participants=participants,
            participant_names={str(p): names.get(p) for p in participants},
            last_message=await self._last_message(chat.id),
            updated_at=chat.updated_at,
        )

    async def open_chat(self, user_id: uuid.UUID, participant_id: uuid.UUID) -> tuple[ChatView, bool]:
        """Return the chat between two users, creating it if needed.

        Args:
            user_id: Authenticated user
            participant_id: The other user

        Returns:
            Tuple of the chat view and whether it was newly created

        Raises:
            ValidationFailed: If a user tries to chat with themselves
            NotFound: If the other user does not exist
        """
        if user_id == participant_id:
            raise ValidationFailed("Cannot start a chat with yourself")

        if await self.db_session.get(UserDB, participant_id) is None:
            raise NotFound("User not found")

        chat = await self._find_chat(user_id, participant_id)
        created = chat is None
        if created:
            now = utcnow()
            chat = ChatDB(
                id=uuid.uuid4(),
                participant_one=user_id,
                participant_two=participant_id,
                created_at=now,
                updated_at=now,
            )
            self.db_session.add(chat)
            await self.db_session.commit()
            logger.info("chat_created", chat_id=str(chat.id))

        names = await self._participant_names([chat])
        return await self._to_view(chat, names), created

    async def list_chats(self, user_id: uuid.UUID) -> list[ChatView]:
        """Caller's chats, most recent activity first."""
        query = (
            select(ChatDB)
            .where(or_(ChatDB.participant_one == user_id, ChatDB.participant_two == user_id))
            .order_by(ChatDB.updated_at.desc())
        )
        result = await self.db_session.execute(query)
        chats = list(result.scalars().all())

        names = await self._participant_names(chats)
        return [await self._to_view(chat, names) for chat in chats]

    async def list_messages(self, chat_id: uuid.UUID, user_id: uuid.UUID) -> list[MessageView]:
        """Messages of a chat in chronological order."""
        await self._get_participant_chat(chat_id, user_id)

        query = (
            select(MessageDB)
            .where(MessageDB.chat_id == chat_id)
            .order_by(MessageDB.created_at.asc())
        )
        result = await self.db_session.execute(query)
        return [to_message_view(m) for m in result.scalars().all()]

    async def send_message(self, chat_id: uuid.UUID, user_id: uuid.UUID, text: str) -> MessageView:
        """Post a message and bump the chat's activity time."""
        chat = await self._get_participant_chat(chat_id, user_id)

        now = utcnow()
        message = MessageDB(
            id=uuid.uuid4(),
            chat_id=chat.id,
            sender_id=user_id,
            text=text,
            created_at=now,
        )
        self.db_session.add(message)
        chat.updated_at = now
        await self.db_session.commit()

        logger.info("message_sent", chat_id=str(chat_id), sender_id=str(user_id))
        return to_message_view(message)
