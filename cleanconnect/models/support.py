"""Support ticket data models."""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import EmailStr, Field
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, String, Text, Uuid

from cleanconnect.models.base import ApiModel, Base, utcnow


class TicketCategory(str, Enum):
    TECHNICAL_ISSUE = "Technical Issue"
    PAYMENT_ISSUE = "Payment Issue"
    BOOKING_DISPUTE = "Booking Dispute"
    ACCOUNT_VERIFICATION = "Account Verification"
    OTHER = "Other"


class TicketStatus(str, Enum):
    OPEN = "Open"
    RESOLVED = "Resolved"


# ========== SQLAlchemy ORM Models ==========


class SupportTicketDB(Base):
    """SQLAlchemy model for support_tickets table.

    ``user_id`` is NULL for tickets raised through the public contact form;
    those carry ``contact_name`` and ``contact_email`` instead.
    """

    __tablename__ = "support_tickets"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    contact_name = Column(String(100), nullable=True)
    contact_email = Column(String(255), nullable=True)
    category = Column(String(100), nullable=False, default=TicketCategory.OTHER.value)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=TicketStatus.OPEN.value)
    admin_response = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint("status IN ('Open', 'Resolved')", name="support_tickets_status_check"),
        Index("idx_support_user", "user_id", "created_at"),
    )


# ========== Pydantic Models ==========


class CreateTicketRequest(ApiModel):
    category: TicketCategory = TicketCategory.OTHER
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1, max_length=10000)


class ResolveTicketRequest(ApiModel):
    admin_response: str = Field(..., min_length=1, max_length=10000)


class ContactRequest(ApiModel):
    """Body of the public contact form."""

    topic: str | None = Field(None, max_length=255)
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str | None = Field(None, max_length=20)
    message: str = Field(..., min_length=1, max_length=10000)


class TicketView(ApiModel):
    """Support ticket; ``user_name``/``user_role`` are filled for admin views."""

    id: uuid.UUID
    user_id: uuid.UUID | None = None
    user_name: str | None = None
    user_role: str | None = None
    category: str
    subject: str
    message: str
    status: str
    admin_response: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
