"""Booking and review data models."""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import Field
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    Uuid,
)

from cleanconnect.models.base import ApiModel, Base, utcnow


class BookingStatus(str, Enum):
    """Lifecycle of a booked job."""

    UPCOMING = "Upcoming"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class PaymentMethod(str, Enum):
    """Escrow payments go through the platform; direct ones do not."""

    ESCROW = "Escrow"
    DIRECT = "Direct"


class PaymentStatus(str, Enum):
    """Escrow payment progress."""

    PENDING_PAYMENT = "Pending Payment"
    PENDING_ADMIN_CONFIRMATION = "Pending Admin Confirmation"
    CONFIRMED = "Confirmed"
    PENDING_PAYOUT = "Pending Payout"
    PAID = "Paid"
    NOT_APPLICABLE = "Not Applicable"


# ========== SQLAlchemy ORM Models ==========


class BookingDB(Base):
    """SQLAlchemy model for bookings table."""

    __tablename__ = "bookings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    cleaner_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    client_name = Column(String(100), nullable=True)
    cleaner_name = Column(String(100), nullable=True)
    service = Column(String(100), nullable=False)
    date = Column(String(50), nullable=True)
    amount = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    total_amount = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    status = Column(String(20), nullable=False, default=BookingStatus.UPCOMING.value)
    payment_method = Column(String(20), nullable=False, default=PaymentMethod.ESCROW.value)
    payment_status = Column(
        String(50), nullable=False, default=PaymentStatus.PENDING_PAYMENT.value
    )
    payment_receipt = Column(JSON, nullable=True)
    job_approved_by_client = Column(Boolean, nullable=False, default=False)
    review_submitted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint(
            "status IN ('Upcoming', 'Completed', 'Cancelled')",
            name="bookings_status_check",
        ),
        CheckConstraint(
            "payment_method IN ('Escrow', 'Direct')",
            name="bookings_payment_method_check",
        ),
        Index("idx_bookings_client", "client_id", "created_at"),
        Index("idx_bookings_cleaner", "cleaner_id", "created_at"),
    )


class ReviewDB(Base):
    """SQLAlchemy model for reviews table."""

    __tablename__ = "reviews"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id = Column(Uuid, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)
    cleaner_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    reviewer_name = Column(String(100), nullable=True)
    rating = Column(Numeric(3, 1, asdecimal=False), nullable=False)
    timeliness = Column(Numeric(3, 1, asdecimal=False), nullable=True)
    thoroughness = Column(Numeric(3, 1, asdecimal=False), nullable=True)
    conduct = Column(Numeric(3, 1, asdecimal=False), nullable=True)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="reviews_rating_check"),
        Index("idx_reviews_cleaner", "cleaner_id", "created_at"),
    )


# ========== Pydantic Models ==========


class Receipt(ApiModel):
    """Uploaded proof of payment (file name plus base64 data URL)."""

    name: str = Field(..., min_length=1, max_length=255)
    data_url: str = Field(..., min_length=1)


class CreateBookingRequest(ApiModel):
    """Body of ``POST /api/bookings``."""

    cleaner_id: uuid.UUID
    service: str = Field(..., min_length=1, max_length=100)
    date: str | None = Field(None, max_length=50)
    amount: float = Field(..., ge=0)
    total_amount: float | None = Field(None, ge=0)
    payment_method: PaymentMethod = PaymentMethod.ESCROW


class ReviewRequest(ApiModel):
    """Body of ``POST /api/bookings/{id}/review``."""

    rating: float = Field(..., ge=1, le=5)
    timeliness: float | None = Field(None, ge=1, le=5)
    thoroughness: float | None = Field(None, ge=1, le=5)
    conduct: float | None = Field(None, ge=1, le=5)
    comment: str | None = Field(None, max_length=5000)


class BookingView(ApiModel):
    """Booking as returned to clients, cleaners and admins."""

    id: uuid.UUID
    client_id: uuid.UUID
    cleaner_id: uuid.UUID
    client_name: str | None = None
    cleaner_name: str | None = None
    service: str
    date: str | None = None
    amount: float
    total_amount: float | None = None
    status: str
    payment_method: str
    payment_status: str
    payment_receipt: Receipt | None = None
    job_approved_by_client: bool = False
    review_submitted: bool = False
    created_at: datetime | None = None


class ReviewView(ApiModel):
    """Review as shown on cleaner profiles."""

    id: uuid.UUID | None = None
    booking_id: uuid.UUID | None = None
    reviewer_name: str | None = None
    rating: float
    timeliness: float | None = None
    thoroughness: float | None = None
    conduct: float | None = None
    comment: str | None = None
    created_at: datetime | None = None
