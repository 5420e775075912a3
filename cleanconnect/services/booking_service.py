"""Booking lifecycle, reviews and escrow payment tracking."""

import uuid

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.errors import AccessDenied, Conflict, NotFound, ValidationFailed
from cleanconnect.models.booking import (
    BookingDB,
    BookingStatus,
    BookingView,
    CreateBookingRequest,
    PaymentMethod,
    PaymentStatus,
    Receipt,
    ReviewDB,
    ReviewRequest,
)
from cleanconnect.models.user import UserDB, UserRole
from cleanconnect.services.notifier import EmailNotifier, NotificationError

logger = structlog.get_logger(__name__)


class BookingService:
    """Manages bookings between clients and cleaners.

    Every mutating operation checks that the caller is a party to the booking
    before touching it. Payment confirmation and payout are admin operations
    and are gated at the API layer instead.
    """

    def __init__(self, db_session: AsyncSession, notifier: EmailNotifier | None = None):
        """Initialize booking service.

        Args:
            db_session: Database session for persistence
            notifier: Sends booking confirmations (defaults to settings-based notifier)
        """
        self.db_session = db_session
        self.notifier = notifier or EmailNotifier()

    async def _get_booking(self, booking_id: uuid.UUID) -> BookingDB:
        booking = await self.db_session.get(BookingDB, booking_id)
        if booking is None:
            raise NotFound("Booking not found")
        return booking

    async def _get_client_booking(self, booking_id: uuid.UUID, user_id: uuid.UUID) -> BookingDB:
        """Fetch a booking the caller made as client.

        Raises:
            NotFound: If the booking does not exist
            AccessDenied: If the caller is not the booking's client
        """
        booking = await self._get_booking(booking_id)
        if booking.client_id != user_id:
            raise AccessDenied("Only the client who made this booking can do that")
        return booking

    async def create_booking(self, client_id: uuid.UUID, request: CreateBookingRequest) -> BookingView:
        """Book a cleaner.

        Args:
            client_id: Authenticated client
            request: Booking details

        Returns:
            The created booking

        Raises:
            NotFound: If the client does not exist, or the target is not an active cleaner
            ValidationFailed: If the caller tries to book themselves
        """
        if request.cleaner_id == client_id:
            raise ValidationFailed("You cannot book yourself")
        cleaner = await self.db_session.get(UserDB, request.cleaner_id)
        if cleaner is None or cleaner.role != UserRole.CLEANER.value or cleaner.is_suspended:
            raise NotFound("Cleaner not found")
        client = await self.db_session.get(UserDB, client_id)
        if client is None:
            raise NotFound("User not found")

        payment_status = (
            PaymentStatus.NOT_APPLICABLE
            if request.payment_method == PaymentMethod.DIRECT.value
            else PaymentStatus.PENDING_PAYMENT
        )
        booking = BookingDB(
            id=uuid.uuid4(),
            client_id=client.id,
            cleaner_id=cleaner.id,
            client_name=client.full_name,
            cleaner_name=cleaner.full_name,
            service=request.service,
            date=request.date,
            amount=request.amount,
            total_amount=request.total_amount if request.total_amount is not None else request.amount,
            status=BookingStatus.UPCOMING.value,
            payment_method=PaymentMethod(request.payment_method).value,
            payment_status=payment_status.value,
        )

        self.db_session.add(booking)
        await self.db_session.commit()

        logger.info(
            "booking_created",
            booking_id=str(booking.id),
            client_id=str(client.id),
            cleaner_id=str(cleaner.id),
            payment_method=booking.payment_method,
        )

        try:
            await self.notifier.send(
                to=client.email,
                subject="Booking Confirmation",
                text=f"You booked {cleaner.full_name or 'a cleaner'} for {request.service}.",
            )
        except NotificationError:
            logger.warning("booking_confirmation_not_sent", booking_id=str(booking.id))

        return BookingView.model_validate(booking)

    async def list_bookings(self, user_id: uuid.UUID) -> list[BookingView]:
        """Bookings where the user is client or cleaner, newest first."""
        query = (
            select(BookingDB)
            .where(or_(BookingDB.client_id == user_id, BookingDB.cleaner_id == user_id))
            .order_by(BookingDB.created_at.desc())
        )
        result = await self.db_session.execute(query)
        return [BookingView.model_validate(b) for b in result.scalars().all()]

    async def cancel_booking(self, booking_id: uuid.UUID, user_id: uuid.UUID) -> BookingView:
        """Cancel a booking.

        Raises:
            NotFound: If the booking does not exist
            AccessDenied: If the caller is neither client nor cleaner
        """
        booking = await self._get_booking(booking_id)
        if user_id not in (booking.client_id, booking.cleaner_id):
            raise AccessDenied("Not a party to this booking")

        booking.status = BookingStatus.CANCELLED.value
        await self.db_session.commit()

        logger.info("booking_cancelled", booking_id=str(booking_id), by=str(user_id))
        return BookingView.model_validate(booking)

    async def complete_booking(self, booking_id: uuid.UUID, user_id: uuid.UUID) -> BookingView:
        """Client approves the finished job.

        A confirmed escrow payment moves on to payout; other payment states
        are left alone.
        """
        booking = await self._get_client_booking(booking_id, user_id)

        booking.status = BookingStatus.COMPLETED.value
        booking.job_approved_by_client = True
        if (
            booking.payment_method == PaymentMethod.ESCROW.value
            and booking.payment_status == PaymentStatus.CONFIRMED.value
        ):
            booking.payment_status = PaymentStatus.PENDING_PAYOUT.value
        await self.db_session.commit()

        logger.info(
            "booking_completed",
            booking_id=str(booking_id),
            payment_status=booking.payment_status,
        )
        return BookingView.model_validate(booking)

    async def submit_review(self, booking_id: uuid.UUID, user_id: uuid.UUID, request: ReviewRequest) -> None:
        """Leave a review for the booking's cleaner.

        Raises:
            NotFound: If the booking does not exist
            AccessDenied: If the caller is not the booking's client
            Conflict: If the booking has already been reviewed
        """
        booking = await self._get_client_booking(booking_id, user_id)
        if booking.review_submitted:
            raise Conflict("Review already submitted for this booking")

        client = await self.db_session.get(UserDB, user_id)
        review = ReviewDB(
            id=uuid.uuid4(),
            booking_id=booking.id,
            cleaner_id=booking.cleaner_id,
            reviewer_name=client.full_name if client else booking.client_name,
            rating=request.rating,
            timeliness=request.timeliness,
            thoroughness=request.thoroughness,
            conduct=request.conduct,
            comment=request.comment,
        )
        self.db_session.add(review)
        booking.review_submitted = True
        await self.db_session.commit()

        logger.info(
            "review_submitted",
            booking_id=str(booking_id),
            cleaner_id=str(booking.cleaner_id),
            rating=request.rating,
        )

    async def attach_receipt(self, booking_id: uuid.UUID, user_id: uuid.UUID, receipt: Receipt) -> BookingView:
        """Client uploads proof of an escrow payment."""
        booking = await self._get_client_booking(booking_id, user_id)

        booking.payment_receipt = receipt.model_dump(by_alias=True)
        booking.payment_status = PaymentStatus.PENDING_ADMIN_CONFIRMATION.value
        await self.db_session.commit()

        logger.info("booking_receipt_uploaded", booking_id=str(booking_id))
        return BookingView.model_validate(booking)

    async def set_payment_status(self, booking_id: uuid.UUID, status: PaymentStatus) -> BookingView:
        """Admin override of a booking's payment status (confirm or pay out)."""
        booking = await self._get_booking(booking_id)

        booking.payment_status = PaymentStatus(status).value
        await self.db_session.commit()

        logger.info("booking_payment_updated", booking_id=str(booking_id), payment_status=booking.payment_status)
        return BookingView.model_validate(booking)
