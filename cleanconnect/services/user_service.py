"""Account lifecycle: registration, login, password reset and profiles."""

import uuid
from datetime import datetime, timedelta, timezone

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.config import get_settings
from cleanconnect.errors import AccessDenied, AuthenticationFailed, Conflict, NotFound, ValidationFailed
from cleanconnect.models.base import ApiModel
from cleanconnect.models.booking import BookingDB, BookingView, Receipt, ReviewDB, ReviewView
from cleanconnect.models.user import (
    ProfileUpdate,
    RegisterRequest,
    SubscriptionTier,
    UserDB,
    UserProfile,
)
from cleanconnect.services.notifier import EmailNotifier, NotificationError
from cleanconnect.services.passwords import (
    digest_reset_token,
    generate_reset_token,
    hash_password,
    verify_password,
)
from cleanconnect.services.tokens import TokenService

logger = structlog.get_logger(__name__)

RESET_REQUESTED_MESSAGE = "If an account with that email exists, a reset link has been sent."


def normalize_email(email: str) -> str:
    return email.strip().lower()


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def apply_partial_update(row: object, update: ApiModel) -> list[str]:
    """Copy the non-null fields of ``update`` onto ``row``.

    Absent and null fields keep their stored values.

    Returns:
        Names of the columns that were written
    """
    changes = update.model_dump(exclude_none=True, by_alias=False, mode="json")
    for field, value in changes.items():
        setattr(row, field, value)
    return sorted(changes)


class UserService:
    """Manages user accounts with persistent storage.

    Handles registration, credential checks, password resets, profile reads
    and updates, and subscription requests.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        token_service: TokenService | None = None,
        notifier: EmailNotifier | None = None,
    ):
        """Initialize user service.

        Args:
            db_session: Database session for persistence
            token_service: Issues session tokens (defaults to settings-based service)
            notifier: Sends account emails (defaults to settings-based notifier)
        """
        self.db_session = db_session
        self.token_service = token_service or TokenService()
        self.notifier = notifier or EmailNotifier()

    # ========== Lookup ==========

    async def find_by_email(self, email: str) -> UserDB | None:
        query = select(UserDB).where(UserDB.email == normalize_email(email))
        result = await self.db_session.execute(query)
        return result.scalar_one_or_none()

    async def get_user(self, user_id: uuid.UUID) -> UserDB:
        """Get a user row.

        Raises:
            NotFound: If no user has this id
        """
        user = await self.db_session.get(UserDB, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def issue_token(self, user: UserDB) -> str:
        return self.token_service.issue(
            user_id=str(user.id),
            role=user.role,
            is_admin=user.is_admin,
            admin_role=user.admin_role,
        )

    # ========== Authentication ==========

    async def register(self, request: RegisterRequest) -> tuple[UserDB, str]:
        """Create a client or cleaner account.

        Args:
            request: Registration details

        Returns:
            Tuple of the new user row and its session token

        Raises:
            Conflict: If the email is already registered
        """
        email = normalize_email(request.email)
        if await self.find_by_email(email) is not None:
            raise Conflict("User already exists")

        fields = request.model_dump(exclude={"email", "password", "role"}, exclude_none=True, mode="json")
        user = UserDB(
            id=uuid.uuid4(),
            email=email,
            password_hash=hash_password(request.password),
            role=request.role,
            subscription_tier=SubscriptionTier.FREE.value,
            **fields,
        )

        self.db_session.add(user)
        await self.db_session.commit()

        logger.info("user_registered", user_id=str(user.id), role=user.role)
        return user, self.issue_token(user)

    async def authenticate(self, email: str, password: str) -> tuple[str, UserDB]:
        """Check credentials and issue a session token.

        Raises:
            AuthenticationFailed: On unknown email or wrong password
            AccessDenied: If the account is suspended
        """
        user = await self.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("login_failed", email=normalize_email(email))
            raise AuthenticationFailed("Invalid email or password")

        if user.is_suspended:
            raise AccessDenied("Account is suspended.")

        logger.info("login_succeeded", user_id=str(user.id))
        return self.issue_token(user), user

    async def request_password_reset(self, email: str) -> str:
        """Start a password reset.

        The response is identical whether or not the account exists.

        Returns:
            Message to show the caller
        """
        user = await self.find_by_email(email)
        if user is None:
            return RESET_REQUESTED_MESSAGE

        settings = get_settings()
        raw_token, token_digest = generate_reset_token()
        user.reset_password_token = token_digest
        user.reset_password_expires = datetime.now(timezone.utc) + timedelta(
            minutes=settings.password_reset_ttl_minutes
        )
        await self.db_session.commit()

        reset_url = f"{settings.frontend_url.rstrip('/')}/?token={raw_token}&action=resetPassword"
        try:
            await self.notifier.send(
                to=user.email,
                subject="Reset your CleanConnect password",
                text=(
                    "You requested a password reset.\n\n"
                    f"Click the link below (valid for {settings.password_reset_ttl_minutes} minutes):\n"
                    f"{reset_url}\n\n"
                    "If you did not request this, ignore this email."
                ),
                html=(
                    f'<p>You requested a password reset.</p><p><a href="{reset_url}">Reset my password</a></p>'
                    "<p>If you did not request this, ignore this email.</p>"
                ),
            )
        except NotificationError:
            # Respond exactly as for unknown emails
            logger.warning("password_reset_email_not_sent", user_id=str(user.id))
            return RESET_REQUESTED_MESSAGE

        logger.info("password_reset_requested", user_id=str(user.id))
        return RESET_REQUESTED_MESSAGE

    async def reset_password(self, raw_token: str, new_password: str) -> None:
        """Complete a password reset.

        Raises:
            ValidationFailed: If the token is unknown or expired
        """
        query = select(UserDB).where(UserDB.reset_password_token == digest_reset_token(raw_token))
        result = await self.db_session.execute(query)
        user = result.scalar_one_or_none()

        expired = (
            user is None
            or user.reset_password_expires is None
            or as_utc(user.reset_password_expires) <= datetime.now(timezone.utc)
        )
        if expired:
            raise ValidationFailed(
                "This reset link is invalid or has expired. Please request a new one."
            )

        user.password_hash = hash_password(new_password)
        user.reset_password_token = None
        user.reset_password_expires = None
        await self.db_session.commit()

        logger.info("password_reset_completed", user_id=str(user.id))

    # ========== Profiles ==========

    async def get_profile(self, user_id: uuid.UUID) -> UserProfile:
        """Full profile with booking history and received reviews.

        Raises:
            NotFound: If the user no longer exists
        """
        user = await self.get_user(user_id)

        bookings = await self.db_session.execute(
            select(BookingDB)
            .where(or_(BookingDB.client_id == user.id, BookingDB.cleaner_id == user.id))
            .order_by(BookingDB.created_at.desc())
        )
        reviews = await self.db_session.execute(
            select(ReviewDB)
            .where(ReviewDB.cleaner_id == user.id)
            .order_by(ReviewDB.created_at.desc())
        )

        profile = UserProfile.model_validate(user)
        profile.booking_history = [BookingView.model_validate(b) for b in bookings.scalars().all()]
        profile.reviews_data = [ReviewView.model_validate(r) for r in reviews.scalars().all()]
        return profile

    async def update_profile(self, user_id: uuid.UUID, update: ProfileUpdate) -> UserProfile:
        """Apply a partial profile update."""
        user = await self.get_user(user_id)
        changed = apply_partial_update(user, update)
        await self.db_session.commit()

        logger.info("profile_updated", user_id=str(user_id), fields=changed)
        return await self.get_profile(user_id)

    # ========== Subscriptions ==========

    async def request_subscription(self, user_id: uuid.UUID, plan: SubscriptionTier) -> UserProfile:
        """Record a requested plan change pending admin approval."""
        user = await self.get_user(user_id)
        user.pending_subscription = SubscriptionTier(plan).value
        await self.db_session.commit()

        logger.info("subscription_requested", user_id=str(user_id), plan=user.pending_subscription)
        return await self.get_profile(user_id)

    async def attach_subscription_receipt(self, user_id: uuid.UUID, receipt: Receipt) -> UserProfile:
        """Store proof of payment for a subscription."""
        user = await self.get_user(user_id)
        user.subscription_receipt = receipt.model_dump(by_alias=True)
        await self.db_session.commit()

        logger.info("subscription_receipt_uploaded", user_id=str(user_id))
        return await self.get_profile(user_id)

