"""Self-service profile and subscription endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.api.middleware.auth import CurrentUser, get_current_user
from cleanconnect.models.booking import Receipt
from cleanconnect.models.user import ProfileUpdate, SubscriptionUpgradeRequest, UserProfile
from cleanconnect.services.database import get_db_session
from cleanconnect.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserProfile)
async def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserProfile:
    """Full profile of the caller with booking history and reviews."""
    return await UserService(db).get_profile(current_user.id)


@router.put("/me", response_model=UserProfile)
async def update_me(
    update: ProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserProfile:
    """Update the caller's profile; omitted or null fields are left unchanged."""
    return await UserService(db).update_profile(current_user.id, update)


@router.post("/subscription/upgrade", response_model=UserProfile)
async def request_upgrade(
    request: SubscriptionUpgradeRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserProfile:
    """Request a subscription plan; an admin approves it once paid."""
    return await UserService(db).request_subscription(current_user.id, request.plan)


@router.post("/subscription/receipt", response_model=UserProfile)
async def upload_subscription_receipt(
    receipt: Receipt,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserProfile:
    return await UserService(db).attach_subscription_receipt(current_user.id, receipt)
