"""Booking endpoints for clients and cleaners."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.api.middleware.auth import CurrentUser, get_current_user
from cleanconnect.models.base import MessageResponse
from cleanconnect.models.booking import BookingView, CreateBookingRequest, Receipt, ReviewRequest
from cleanconnect.services.booking_service import BookingService
from cleanconnect.services.database import get_db_session

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.post("", response_model=BookingView, status_code=status.HTTP_201_CREATED)
async def create_booking(
    request: CreateBookingRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> BookingView:
    """Book a cleaner.

    Escrow bookings start awaiting payment; direct bookings are settled
    off-platform and have no payment status to track.
    """
    return await BookingService(db).create_booking(current_user.id, request)


@router.get("", response_model=list[BookingView])
async def list_bookings(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> list[BookingView]:
    """Caller's bookings as client or cleaner, newest first."""
    return await BookingService(db).list_bookings(current_user.id)


@router.post("/{booking_id}/cancel", response_model=BookingView)
async def cancel_booking(
    booking_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> BookingView:
    return await BookingService(db).cancel_booking(booking_id, current_user.id)


@router.post("/{booking_id}/complete", response_model=BookingView)
async def complete_booking(
    booking_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> BookingView:
    """Client marks the job done and approves payout."""
    return await BookingService(db).complete_booking(booking_id, current_user.id)


@router.post("/{booking_id}/review", response_model=MessageResponse)
async def review_booking(
    booking_id: uuid.UUID,
    request: ReviewRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Client reviews the cleaner of a booking (once)."""
    await BookingService(db).submit_review(booking_id, current_user.id, request)
    return MessageResponse(message="Review submitted")


@router.post("/{booking_id}/receipt", response_model=BookingView)
async def upload_receipt(
    booking_id: uuid.UUID,
    receipt: Receipt,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> BookingView:
    """Client uploads proof of an escrow payment for admin confirmation."""
    return await BookingService(db).attach_receipt(booking_id, current_user.id, receipt)
