"""Registration, login and password reset endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.api.middleware.rate_limiter import limit_auth_requests
from cleanconnect.models.base import MessageResponse
from cleanconnect.models.user import (
    AuthenticatedProfile,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    ResetPasswordRequest,
    UserSummary,
)
from cleanconnect.services.database import get_db_session
from cleanconnect.services.user_service import UserService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthenticatedProfile,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(limit_auth_requests)],
)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthenticatedProfile:
    """Create a client or cleaner account and sign it in.

    Raises:
        Conflict: If the email is already registered (400)
    """
    service = UserService(db)
    user, token = await service.register(request)
    profile = await service.get_profile(user.id)
    return AuthenticatedProfile(**profile.model_dump(), token=token)


@router.post("/login", response_model=LoginResponse, dependencies=[Depends(limit_auth_requests)])
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    """Exchange credentials for a session token."""
    token, user = await UserService(db).authenticate(request.email, request.password)
    return LoginResponse(token=token, user=UserSummary.model_validate(user))


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    dependencies=[Depends(limit_auth_requests)],
)
async def forgot_password(
    request: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Email a password reset link if the account exists."""
    message = await UserService(db).request_password_reset(request.email)
    return MessageResponse(message=message)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Set a new password using a reset token."""
    await UserService(db).reset_password(request.token, request.password)
    return MessageResponse(message="Password has been reset successfully. You can now log in.")
