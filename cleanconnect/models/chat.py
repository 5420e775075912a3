"""Chat and message data models."""

import uuid
from datetime import datetime

from pydantic import Field
from sqlalchemy import Column, DateTime, ForeignKey, Index, Text, Uuid

from cleanconnect.models.base import ApiModel, Base, utcnow

# ========== SQLAlchemy ORM Models ==========


class ChatDB(Base):
    """SQLAlchemy model for chats table (one row per participant pair)."""

    __tablename__ = "chats"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    participant_one = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    participant_two = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_chats_participant_one", "participant_one"),
        Index("idx_chats_participant_two", "participant_two"),
    )


class MessageDB(Base):
    """SQLAlchemy model for messages table."""

    __tablename__ = "messages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    chat_id = Column(Uuid, ForeignKey("chats.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (Index("idx_chat_messages", "chat_id", "created_at"),)


# ========== Pydantic Models ==========


class CreateChatRequest(ApiModel):
    participant_id: uuid.UUID


class SendMessageRequest(ApiModel):
    text: str = Field(..., min_length=1, max_length=10000)


class MessageView(ApiModel):
    """Single chat message."""

    id: uuid.UUID
    chat_id: uuid.UUID
    sender_id: uuid.UUID
    text: str
    timestamp: datetime


class LastMessage(ApiModel):
    text: str
    sender_id: uuid.UUID
    timestamp: datetime


class ChatView(ApiModel):
    """Chat summary shown in a user's inbox."""

    id: uuid.UUID
    participants: list[uuid.UUID]
    participant_names: dict[str, str | None] = Field(default_factory=dict)
    last_message: LastMessage | None = None
    updated_at: datetime | None = None
