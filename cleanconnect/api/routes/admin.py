"""Admin dashboard endpoints.

Each route is gated on the admin role responsible for it. Super admins
pass every gate.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.api.middleware.auth import (
    CurrentUser,
    require_admin,
    require_payment_admin,
    require_super_admin,
    require_support_admin,
    require_verification_admin,
)
from cleanconnect.config import get_settings
from cleanconnect.models.base import ApiModel, MessageResponse
from cleanconnect.models.booking import BookingView, PaymentStatus
from cleanconnect.models.support import ResolveTicketRequest, TicketView
from cleanconnect.models.user import (
    AdminUserView,
    CreateAdminRequest,
    PlatformStats,
    ProfileUpdate,
    SuspensionRequest,
    UserProfile,
)
from cleanconnect.services.admin_service import AdminService
from cleanconnect.services.booking_service import BookingService
from cleanconnect.services.database import get_db_session
from cleanconnect.services.support_service import SupportService

router = APIRouter(prefix="/api/admin", tags=["admin"])
seed_router = APIRouter(tags=["admin"])


class SeedResponse(ApiModel):
    message: str
    created: list[str]


# ========== Users ==========


@router.get("/users", response_model=list[AdminUserView])
async def list_users(
    _: CurrentUser = Depends(require_support_admin),
    db: AsyncSession = Depends(get_db_session),
) -> list[AdminUserView]:
    return await AdminService(db).list_users()


@router.get("/stats", response_model=PlatformStats)
async def platform_stats(
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> PlatformStats:
    """User and booking counts for the dashboard header."""
    return await AdminService(db).platform_stats()


@router.patch("/users/{user_id}/status", response_model=MessageResponse)
async def set_user_status(
    user_id: uuid.UUID,
    request: SuspensionRequest,
    _: CurrentUser = Depends(require_support_admin),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Suspend or reinstate a user."""
    await AdminService(db).set_suspension(user_id, request.is_suspended)
    return MessageResponse(message="User status updated")


@router.put("/users/{user_id}", response_model=UserProfile)
async def update_user(
    user_id: uuid.UUID,
    update: ProfileUpdate,
    _: CurrentUser = Depends(require_support_admin),
    db: AsyncSession = Depends(get_db_session),
) -> UserProfile:
    return await AdminService(db).update_user(user_id, update)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: uuid.UUID,
    _: CurrentUser = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Delete a user with their bookings, reviews, chats and tickets."""
    await AdminService(db).delete_user(user_id)
    return MessageResponse(message="User deleted")


@router.post("/users/{user_id}/approve-subscription", response_model=MessageResponse)
async def approve_subscription(
    user_id: uuid.UUID,
    _: CurrentUser = Depends(require_verification_admin),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Activate a user's pending plan for the next 30 days."""
    await AdminService(db).approve_subscription(user_id)
    return MessageResponse(message="Subscription approved")


@router.post("/create-admin", response_model=AdminUserView, status_code=status.HTTP_201_CREATED)
async def create_admin(
    request: CreateAdminRequest,
    _: CurrentUser = Depends(require_super_admin),
    db: AsyncSession = Depends(get_db_session),
) -> AdminUserView:
    return await AdminService(db).create_admin(request)


# ========== Payments ==========


@router.post("/bookings/{booking_id}/confirm-payment", response_model=BookingView)
async def confirm_payment(
    booking_id: uuid.UUID,
    _: CurrentUser = Depends(require_payment_admin),
    db: AsyncSession = Depends(get_db_session),
) -> BookingView:
    """Confirm an escrow payment was received."""
    return await BookingService(db).set_payment_status(booking_id, PaymentStatus.CONFIRMED)


@router.post("/bookings/{booking_id}/mark-paid", response_model=BookingView)
async def mark_paid(
    booking_id: uuid.UUID,
    _: CurrentUser = Depends(require_payment_admin),
    db: AsyncSession = Depends(get_db_session),
) -> BookingView:
    """Record that the cleaner has been paid out."""
    return await BookingService(db).set_payment_status(booking_id, PaymentStatus.PAID)


# ========== Support ==========


@router.get("/support", response_model=list[TicketView])
async def list_tickets(
    _: CurrentUser = Depends(require_support_admin),
    db: AsyncSession = Depends(get_db_session),
) -> list[TicketView]:
    return await SupportService(db).list_all_tickets()


@router.post("/support/{ticket_id}/resolve", response_model=TicketView)
async def resolve_ticket(
    ticket_id: uuid.UUID,
    request: ResolveTicketRequest,
    _: CurrentUser = Depends(require_support_admin),
    db: AsyncSession = Depends(get_db_session),
) -> TicketView:
    return await SupportService(db).resolve_ticket(ticket_id, request.admin_response)


# ========== Seeding ==========


@seed_router.get("/api/seed-admins", response_model=SeedResponse)
async def seed_admins(db: AsyncSession = Depends(get_db_session)) -> SeedResponse:
    """Create the default admin accounts.

    Only exposed when ``ALLOW_ADMIN_SEEDING`` is enabled.
    """
    if not get_settings().allow_admin_seeding:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    created = await AdminService(db).seed_default_admins()
    return SeedResponse(message="Admins seeded successfully", created=created)
