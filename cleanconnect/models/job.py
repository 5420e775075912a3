"""Job board data models: jobs posted by clients and cleaners' applications."""

import uuid
from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator
from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)

from cleanconnect.models.base import ApiModel, Base, utcnow


class JobStatus(str, Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class BudgetType(str, Enum):
    HOURLY = "Hourly"
    DAILY = "Daily"
    MONTHLY = "Monthly"
    FIXED = "Fixed"


class JobVisibility(str, Enum):
    PUBLIC = "Public"
    SUBSCRIBERS_ONLY = "Subscribers Only"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# ========== SQLAlchemy ORM Models ==========


class JobDB(Base):
    """SQLAlchemy model for jobs table."""

    __tablename__ = "jobs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    client_name = Column(String(100), nullable=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    service = Column(String(100), nullable=False)
    location = Column(String(255), nullable=True)
    state = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    budget = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    budget_type = Column(String(20), nullable=False, default=BudgetType.FIXED.value)
    start_date = Column(String(50), nullable=True)
    end_date = Column(String(50), nullable=True)
    status = Column(String(20), nullable=False, default=JobStatus.OPEN.value)
    requirements = Column(JSON, nullable=True)
    visibility = Column(String(20), nullable=False, default=JobVisibility.SUBSCRIBERS_ONLY.value)
    selected_worker_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    posted_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint(
            "status IN ('Open', 'In Progress', 'Completed', 'Cancelled')", name="jobs_status_check"
        ),
        CheckConstraint("budget >= 0", name="jobs_budget_check"),
        Index("idx_jobs_status_posted", "status", "posted_date"),
        Index("idx_jobs_client", "client_id", "posted_date"),
    )


class JobApplicationDB(Base):
    """SQLAlchemy model for job_applications table.

    One row per cleaner per job; the unique constraint keeps a cleaner
    from applying twice.
    """

    __tablename__ = "job_applications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    worker_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    proposal = Column(Text, nullable=True)
    proposed_price = Column(Numeric(12, 2, asdecimal=False), nullable=True)
    status = Column(String(20), nullable=False, default=ApplicationStatus.PENDING.value)
    applied_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("job_id", "worker_id", name="uq_job_applications_job_worker"),
        Index("idx_job_applications_job", "job_id", "applied_at"),
    )


# ========== Pydantic Models ==========


class CreateJobRequest(ApiModel):
    """Body of ``POST /api/jobs``."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=10000)
    service: str = Field(..., min_length=1, max_length=100)
    location: str | None = Field(None, max_length=255)
    state: str | None = Field(None, max_length=100)
    city: str | None = Field(None, max_length=100)
    budget: float = Field(..., ge=0)
    budget_type: BudgetType = BudgetType.FIXED
    start_date: str | None = Field(None, max_length=50)
    end_date: str | None = Field(None, max_length=50)
    requirements: list[str] = Field(default_factory=list)
    visibility: JobVisibility = JobVisibility.SUBSCRIBERS_ONLY


class JobUpdate(ApiModel):
    """Body of ``PUT /api/jobs/{id}``; absent fields keep their values."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1, max_length=10000)
    service: str | None = Field(None, min_length=1, max_length=100)
    location: str | None = Field(None, max_length=255)
    state: str | None = Field(None, max_length=100)
    city: str | None = Field(None, max_length=100)
    budget: float | None = Field(None, ge=0)
    budget_type: BudgetType | None = None
    start_date: str | None = Field(None, max_length=50)
    end_date: str | None = Field(None, max_length=50)
    requirements: list[str] | None = None
    visibility: JobVisibility | None = None
    status: JobStatus | None = None


class ApplyRequest(ApiModel):
    """Optional pitch sent with an application."""

    proposal: str | None = Field(None, max_length=5000)
    proposed_price: float | None = Field(None, ge=0)


class AssignRequest(ApiModel):
    worker_id: uuid.UUID


class JobView(ApiModel):
    """A job as shown on the board; ``applicants`` lists worker ids."""

    id: uuid.UUID
    client_id: uuid.UUID
    client_name: str | None = None
    title: str
    description: str
    service: str
    location: str | None = None
    state: str | None = None
    city: str | None = None
    budget: float
    budget_type: str
    start_date: str | None = None
    end_date: str | None = None
    status: str
    requirements: list[str] = Field(default_factory=list)
    visibility: str
    selected_worker_id: uuid.UUID | None = None
    applicants: list[uuid.UUID] = Field(default_factory=list)
    posted_date: datetime

    @field_validator("requirements", mode="before")
    @classmethod
    def default_requirements(cls, v: list[str] | None) -> list[str]:
        """Stored requirement lists may be NULL."""
        return v or []


class JobActionResponse(ApiModel):
    message: str
    job: JobView


class ApplicantView(ApiModel):
    """An application joined with the applicant's public profile."""

    id: uuid.UUID
    full_name: str | None = None
    email: str
    phone_number: str | None = None
    profile_photo: str | None = None
    services: list[str] = Field(default_factory=list)
    bio: str | None = None
    city: str | None = None
    state: str | None = None
    experience: int | None = None
    subscription_tier: str
    charge_hourly: float | None = None
    charge_daily: float | None = None
    charge_per_contract: float | None = None
    proposal: str | None = None
    proposed_price: float | None = None
    status: str
    applied_at: datetime
