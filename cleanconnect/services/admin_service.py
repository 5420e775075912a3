"""Back-office operations on user accounts."""

import uuid
from datetime import date, timedelta

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.errors import AccessDenied, Conflict, NotFound, ValidationFailed
from cleanconnect.models.booking import BookingDB, BookingStatus
from cleanconnect.models.user import (
    AdminRole,
    AdminUserView,
    CreateAdminRequest,
    PlatformStats,
    ProfileUpdate,
    UserDB,
    UserProfile,
    UserRole,
)
from cleanconnect.services.passwords import hash_password
from cleanconnect.services.user_service import UserService, apply_partial_update, normalize_email

logger = structlog.get_logger(__name__)

SUBSCRIPTION_PERIOD_DAYS = 30
SEED_PASSWORD = "password"
DEFAULT_ADMINS = [
    ("super@cleanconnect.ng", "Super Admin", AdminRole.SUPER),
    ("payment@cleanconnect.ng", "Payment Admin", AdminRole.PAYMENT),
    ("verification@cleanconnect.ng", "Verification Admin", AdminRole.VERIFICATION),
    ("support@cleanconnect.ng", "Support Admin", AdminRole.SUPPORT),
]


class AdminService:
    """User management for the admin dashboard.

    Role checks happen in the API layer; this service assumes the caller is
    allowed to perform the operation.
    """

    def __init__(self, db_session: AsyncSession):
        """Initialize admin service.

        Args:
            db_session: Database session for persistence
        """
        self.db_session = db_session
        self.users = UserService(db_session)

    async def list_users(self) -> list[AdminUserView]:
        """All users, newest first."""
        result = await self.db_session.execute(select(UserDB).order_by(UserDB.created_at.desc()))
        return [AdminUserView.model_validate(u) for u in result.scalars().all()]

    async def platform_stats(self) -> PlatformStats:
        """Headline counts for the dashboard."""

        async def count(query) -> int:
            return (await self.db_session.execute(query)).scalar_one()

        return PlatformStats(
            total_users=await count(select(func.count(UserDB.id))),
            total_cleaners=await count(
                select(func.count(UserDB.id)).where(UserDB.role == UserRole.CLEANER.value)
            ),
            total_clients=await count(
                select(func.count(UserDB.id)).where(UserDB.role == UserRole.CLIENT.value)
            ),
            total_bookings=await count(select(func.count(BookingDB.id))),
            active_bookings=await count(
                select(func.count(BookingDB.id)).where(
                    BookingDB.status == BookingStatus.UPCOMING.value
                )
            ),
        )

    async def set_suspension(self, user_id: uuid.UUID, is_suspended: bool) -> None:
        """Suspend or reinstate an account.

        Suspension takes effect at the user's next login.
        """
        user = await self.users.get_user(user_id)
        user.is_suspended = is_suspended
        await self.db_session.commit()

        logger.info("user_suspension_changed", user_id=str(user_id), is_suspended=is_suspended)

    async def update_user(self, user_id: uuid.UUID, update: ProfileUpdate) -> UserProfile:
        """Edit any user's profile with the same partial-update rules as self-service."""
        user = await self.users.get_user(user_id)
        changed = apply_partial_update(user, update)
        await self.db_session.commit()

        logger.info("user_updated_by_admin", user_id=str(user_id), fields=changed)
        return await self.users.get_profile(user_id)

    async def delete_user(self, user_id: uuid.UUID) -> None:
        """Delete an account and, by cascade, everything it owns.

        Raises:
            NotFound: If the user does not exist
            AccessDenied: If the target is a Super admin
        """
        user = await self.users.get_user(user_id)
        if user.is_admin and user.admin_role == AdminRole.SUPER.value:
            raise AccessDenied("Super admin accounts cannot be deleted")

        # Bulk delete lets the database apply ON DELETE CASCADE
        await self.db_session.execute(delete(UserDB).where(UserDB.id == user_id))
        await self.db_session.commit()

        logger.info("user_deleted", user_id=str(user_id))

    async def approve_subscription(self, user_id: uuid.UUID, today: date | None = None) -> UserProfile:
        """Promote a pending plan request to the active tier.

        Raises:
            NotFound: If the user does not exist
            ValidationFailed: If there is no pending request
        """
        user = await self.users.get_user(user_id)
        if not user.pending_subscription:
            raise ValidationFailed("No pending subscription")

        user.subscription_tier = user.pending_subscription
        user.pending_subscription = None
        user.subscription_receipt = None
        user.subscription_end_date = (today or date.today()) + timedelta(days=SUBSCRIPTION_PERIOD_DAYS)
        await self.db_session.commit()

        logger.info("subscription_approved", user_id=str(user_id), tier=user.subscription_tier)
        return await self.users.get_profile(user_id)

    async def create_admin(self, request: CreateAdminRequest) -> AdminUserView:
        """Create another admin account.

        Raises:
            Conflict: If the email is already registered
        """
        email = normalize_email(request.email)
        if await self.users.find_by_email(email) is not None:
            raise Conflict("User already exists")

        admin = UserDB(
            id=uuid.uuid4(),
            email=email,
            password_hash=hash_password(request.password),
            full_name=request.full_name,
            role=UserRole.ADMIN.value,
            is_admin=True,
            admin_role=AdminRole(request.role).value,
        )
        self.db_session.add(admin)
        await self.db_session.commit()

        logger.info("admin_created", user_id=str(admin.id), admin_role=admin.admin_role)
        return AdminUserView.model_validate(admin)

    async def seed_default_admins(self) -> list[str]:
        """Create the four default admin accounts that are missing.

        Returns:
            Emails of the accounts that were created
        """
        created = []
        password_hash = hash_password(SEED_PASSWORD)
        for email, name, role in DEFAULT_ADMINS:
            if await self.users.find_by_email(email) is not None:
                continue
            self.db_session.add(
                UserDB(
                    id=uuid.uuid4(),
                    email=email,
                    password_hash=password_hash,
                    full_name=name,
                    role=UserRole.ADMIN.value,
                    is_admin=True,
                    admin_role=role.value,
                    phone_number="0000000000",
                )
            )
            created.append(email)
        await self.db_session.commit()

        logger.info("admins_seeded", created=created)
        return created
