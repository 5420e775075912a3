"""User accounts: clients, cleaners and administrators."""

import uuid
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import AfterValidator, EmailStr, Field, field_validator
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)

from cleanconnect.models.base import ApiModel, Base, utcnow
from cleanconnect.models.booking import BookingView, Receipt, ReviewView


class UserRole(str, Enum):
    """Account role."""

    CLIENT = "client"
    CLEANER = "cleaner"
    ADMIN = "admin"


class AdminRole(str, Enum):
    """Administrative scope of an admin account."""

    SUPER = "Super"
    SUPPORT = "Support"
    VERIFICATION = "Verification"
    PAYMENT = "Payment"


class SubscriptionTier(str, Enum):
    """Cleaner subscription plans, lowest first."""

    FREE = "Free"
    STANDARD = "Standard"
    PRO = "Pro"
    PREMIUM = "Premium"


class AccountType(str, Enum):
    """Whether a client or cleaner is a person or a business."""

    INDIVIDUAL = "Individual"
    COMPANY = "Company"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


# Search ranking weight per tier
TIER_RANK = {
    SubscriptionTier.PREMIUM.value: 4,
    SubscriptionTier.PRO.value: 3,
    SubscriptionTier.STANDARD.value: 2,
    SubscriptionTier.FREE.value: 1,
}

# bcrypt ignores everything past this many bytes
PASSWORD_MAX_BYTES = 72


def check_password_bytes(value: str) -> str:
    """Reject passwords that bcrypt would silently truncate."""
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded")
    return value


Password = Annotated[
    str, Field(min_length=8, max_length=PASSWORD_MAX_BYTES), AfterValidator(check_password_bytes)
]


# ========== SQLAlchemy ORM Models ==========


class UserDB(Base):
    """SQLAlchemy model for users table."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=True)
    phone_number = Column(String(20), nullable=True)
    gender = Column(String(20), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.CLIENT.value)
    state = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    other_city = Column(String(100), nullable=True)
    address = Column(Text, nullable=True)
    client_type = Column(String(20), nullable=True)
    cleaner_type = Column(String(20), nullable=True)
    company_name = Column(String(100), nullable=True)
    company_address = Column(Text, nullable=True)
    experience = Column(Integer, nullable=True)
    services = Column(JSON, nullable=True)
    bio = Column(Text, nullable=True)
    charge_hourly = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    charge_daily = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    charge_per_contract = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    charge_per_contract_negotiable = Column(Boolean, nullable=False, default=False)
    bank_name = Column(String(100), nullable=True)
    account_number = Column(String(20), nullable=True)
    profile_photo = Column(Text, nullable=True)
    government_id = Column(Text, nullable=True)
    business_reg_doc = Column(Text, nullable=True)
    subscription_tier = Column(
        String(20), nullable=False, default=SubscriptionTier.FREE.value
    )
    pending_subscription = Column(String(20), nullable=True)
    subscription_receipt = Column(JSON, nullable=True)
    subscription_end_date = Column(Date, nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    admin_role = Column(String(50), nullable=True)
    is_suspended = Column(Boolean, nullable=False, default=False)
    reset_password_token = Column(String(64), nullable=True)
    reset_password_expires = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("idx_users_role", "role", "is_suspended"),
        Index("idx_users_reset_token", "reset_password_token"),
    )


# ========== Pydantic Models ==========


class ProfileFields(ApiModel):
    """Profile fields shared by registration and updates.

    Every field is optional; ``None`` means "leave unchanged" on update.
    """

    full_name: str | None = Field(None, max_length=100)
    phone_number: str | None = Field(None, max_length=20)
    gender: Gender | None = None
    state: str | None = Field(None, max_length=100)
    city: str | None = Field(None, max_length=100)
    other_city: str | None = Field(None, max_length=100)
    address: str | None = None
    company_name: str | None = Field(None, max_length=100)
    company_address: str | None = None
    experience: int | None = Field(None, ge=0)
    services: list[str] | None = None
    bio: str | None = None
    charge_hourly: float | None = Field(None, ge=0)
    charge_daily: float | None = Field(None, ge=0)
    charge_per_contract: float | None = Field(None, ge=0)
    charge_per_contract_negotiable: bool | None = None
    bank_name: str | None = Field(None, max_length=100)
    account_number: str | None = Field(None, max_length=20)
    profile_photo: str | None = None


class RegisterRequest(ProfileFields):
    """Body of ``POST /api/auth/register``."""

    email: EmailStr
    password: Password
    role: Literal["client", "cleaner"]
    client_type: AccountType | None = None
    cleaner_type: AccountType | None = None
    government_id: str | None = None
    business_reg_doc: str | None = None


class ProfileUpdate(ProfileFields):
    """Body of ``PUT /api/users/me`` and ``PUT /api/admin/users/{id}``."""


class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(ApiModel):
    email: EmailStr


class ResetPasswordRequest(ApiModel):
    token: str = Field(..., min_length=1)
    password: Password


class SubscriptionUpgradeRequest(ApiModel):
    plan: SubscriptionTier


class CreateAdminRequest(ApiModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: Password
    role: AdminRole


class SuspensionRequest(ApiModel):
    is_suspended: bool


class UserSummary(ApiModel):
    """Compact user view returned on login."""

    id: uuid.UUID
    full_name: str | None = None
    email: str
    role: str
    is_admin: bool = False
    admin_role: str | None = None
    profile_photo: str | None = None
    subscription_tier: str | None = None


class AdminUserView(UserSummary):
    """User row as listed in the admin dashboard."""

    is_suspended: bool = False
    pending_subscription: str | None = None
    subscription_receipt: Receipt | None = None
    client_type: str | None = None
    cleaner_type: str | None = None
    company_name: str | None = None
    created_at: datetime | None = None


class UserProfile(AdminUserView):
    """Full profile of a user."""

    phone_number: str | None = None
    gender: str | None = None
    address: str | None = None
    state: str | None = None
    city: str | None = None
    other_city: str | None = None
    company_address: str | None = None
    experience: int | None = None
    bio: str | None = None
    services: list[str] = Field(default_factory=list)
    charge_hourly: float | None = None
    charge_daily: float | None = None
    charge_per_contract: float | None = None
    charge_per_contract_negotiable: bool | None = None
    bank_name: str | None = None
    account_number: str | None = None
    government_id: str | None = None
    business_reg_doc: str | None = None
    subscription_end_date: date | None = None
    booking_history: list[BookingView] = Field(default_factory=list)
    reviews_data: list[ReviewView] = Field(default_factory=list)

    @field_validator("services", mode="before")
    @classmethod
    def default_services(cls, v: list[str] | None) -> list[str]:
        """Stored service lists may be NULL."""
        return v or []


class AuthenticatedProfile(UserProfile):
    """Registration response: the new profile plus its session token."""

    token: str


class LoginResponse(ApiModel):
    token: str
    user: UserSummary


class PlatformStats(ApiModel):
    total_users: int
    total_cleaners: int
    total_clients: int
    total_bookings: int
    active_bookings: int


class CleanerCard(ApiModel):
    """Public view of a cleaner used in listings and profile pages."""

    id: uuid.UUID
    name: str | None = None
    photo_url: str | None = None
    rating: float = 5.0
    reviews: int = 0
    service_types: list[str] = Field(default_factory=list)
    state: str | None = None
    city: str | None = None
    other_city: str | None = None
    experience: int | None = None
    bio: str | None = None
    is_verified: bool = False
    charge_hourly: float | None = None
    charge_daily: float | None = None
    charge_per_contract: float | None = None
    charge_per_contract_negotiable: bool | None = None
    subscription_tier: str | None = None
    cleaner_type: str | None = None
    reviews_data: list[ReviewView] = Field(default_factory=list)


class SearchRequest(ApiModel):
    query: str = Field(..., min_length=1, max_length=1000)


class SearchCriteria(ApiModel):
    """Structured filters extracted from a free-text search."""

    location: str | None = None
    service: str | None = None
    max_price: float | None = None


class SearchResponse(ApiModel):
    matching_ids: list[uuid.UUID] = Field(default_factory=list)
