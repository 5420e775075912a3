"""Job board: clients post jobs, cleaners apply, clients pick a worker."""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.errors import AccessDenied, Conflict, NotFound, ValidationFailed
from cleanconnect.models.base import utcnow
from cleanconnect.models.job import (
    ApplicantView,
    ApplicationStatus,
    ApplyRequest,
    BudgetType,
    CreateJobRequest,
    JobApplicationDB,
    JobDB,
    JobStatus,
    JobUpdate,
    JobView,
    JobVisibility,
)
from cleanconnect.models.user import UserDB, UserRole
from cleanconnect.services.user_service import apply_partial_update

logger = structlog.get_logger(__name__)


def to_job_view(job: JobDB, applicant_ids: list[uuid.UUID]) -> JobView:
    view = JobView.model_validate(job)
    view.applicants = applicant_ids
    return view


class JobService:
    """Manages job posts and the applications made to them.

    Only the client who posted a job may edit, cancel, delete it or see
    who applied; assigning a worker is also open to admins.
    """

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def _get_job(self, job_id: uuid.UUID) -> JobDB:
        job = await self.db_session.get(JobDB, job_id)
        if job is None:
            raise NotFound("Job not found")
        return job

    async def _get_owned_job(self, job_id: uuid.UUID, user_id: uuid.UUID, action: str) -> JobDB:
        job = await self._get_job(job_id)
        if job.client_id != user_id:
            raise AccessDenied(f"Not authorized to {action} this job")
        return job

    async def _applicant_ids(self, job_ids: list[uuid.UUID]) -> dict[uuid.UUID, list[uuid.UUID]]:
        if not job_ids:
            return {}
        query = (
            select(JobApplicationDB.job_id, JobApplicationDB.worker_id)
            .where(JobApplicationDB.job_id.in_(job_ids))
            .order_by(JobApplicationDB.applied_at)
        )
        result = await self.db_session.execute(query)
        applicants: dict[uuid.UUID, list[uuid.UUID]] = {job_id: [] for job_id in job_ids}
        for job_id, worker_id in result.all():
            applicants[job_id].append(worker_id)
        return applicants

    async def _view(self, job: JobDB) -> JobView:
        applicants = await self._applicant_ids([job.id])
        return to_job_view(job, applicants[job.id])

    async def create_job(self, user_id: uuid.UUID, role: str, request: CreateJobRequest) -> JobView:
        """Post a new open job.

        Raises:
            AccessDenied: If the caller is not a client
            NotFound: If the caller's account no longer exists
        """
        if role != UserRole.CLIENT.value:
            raise AccessDenied("Only clients can post jobs")
        client = await self.db_session.get(UserDB, user_id)
        if client is None:
            raise NotFound("User not found")

        now = utcnow()
        job = JobDB(
            id=uuid.uuid4(),
            client_id=client.id,
            client_name=client.full_name or client.email,
            title=request.title,
            description=request.description,
            service=request.service,
            location=request.location,
            state=request.state,
            city=request.city,
            budget=request.budget,
            budget_type=BudgetType(request.budget_type).value,
            start_date=request.start_date,
            end_date=request.end_date,
            status=JobStatus.OPEN.value,
            requirements=request.requirements,
            visibility=JobVisibility(request.visibility).value,
            posted_date=now,
            updated_at=now,
        )
        self.db_session.add(job)
        await self.db_session.commit()

        logger.info("job_posted", job_id=str(job.id), client_id=str(client.id))
        return to_job_view(job, [])

    async def list_jobs(
        self,
        status: JobStatus | None = None,
        service: str | None = None,
        client_id: uuid.UUID | None = None,
    ) -> list[JobView]:
        """Jobs on the board, newest first.

        Without a status filter the public board shows open jobs only; a
        client's own listing (``client_id``) shows every status.
        """
        query = select(JobDB).order_by(JobDB.posted_date.desc())
        if status is not None:
            query = query.where(JobDB.status == JobStatus(status).value)
        elif client_id is None:
            query = query.where(JobDB.status == JobStatus.OPEN.value)
        if service:
            query = query.where(JobDB.service == service)
        if client_id is not None:
            query = query.where(JobDB.client_id == client_id)

        jobs = (await self.db_session.execute(query)).scalars().all()
        applicants = await self._applicant_ids([job.id for job in jobs])
        return [to_job_view(job, applicants[job.id]) for job in jobs]

    async def get_job(self, job_id: uuid.UUID) -> JobView:
        return await self._view(await self._get_job(job_id))

    async def update_job(self, job_id: uuid.UUID, user_id: uuid.UUID, update: JobUpdate) -> JobView:
        """Apply a partial update; id, owner and posted date never change.

        Raises:
            NotFound: If the job does not exist
            AccessDenied: If the caller did not post the job
        """
        job = await self._get_owned_job(job_id, user_id, "edit")
        changed = apply_partial_update(job, update)
        job.updated_at = utcnow()
        await self.db_session.commit()

        logger.info("job_updated", job_id=str(job_id), fields=changed)
        return await self._view(job)

    async def cancel_job(self, job_id: uuid.UUID, user_id: uuid.UUID) -> JobView:
        job = await self._get_owned_job(job_id, user_id, "cancel")
        job.status = JobStatus.CANCELLED.value
        job.updated_at = utcnow()
        await self.db_session.commit()

        logger.info("job_cancelled", job_id=str(job_id))
        return await self._view(job)

    async def delete_job(self, job_id: uuid.UUID, user_id: uuid.UUID) -> None:
        """Remove a job and its applications."""
        job = await self._get_owned_job(job_id, user_id, "delete")
        await self.db_session.delete(job)
        await self.db_session.commit()

        logger.info("job_deleted", job_id=str(job_id))

    async def apply(
        self, job_id: uuid.UUID, worker_id: uuid.UUID, role: str, request: ApplyRequest
    ) -> JobView:
        """Record a cleaner's application.

        Raises:
            NotFound: If the job does not exist
            AccessDenied: If the caller is not a cleaner
            ValidationFailed: If the job is no longer open
            Conflict: If the cleaner has already applied
        """
        job = await self._get_job(job_id)
        if role != UserRole.CLEANER.value:
            raise AccessDenied("Only cleaners can apply to jobs")
        if job.status != JobStatus.OPEN.value:
            raise ValidationFailed("This job is no longer accepting applications")

        existing = await self.db_session.execute(
            select(JobApplicationDB.id).where(
                JobApplicationDB.job_id == job_id, JobApplicationDB.worker_id == worker_id
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise Conflict("You have already applied to this job")

        self.db_session.add(
            JobApplicationDB(
                id=uuid.uuid4(),
                job_id=job_id,
                worker_id=worker_id,
                proposal=request.proposal,
                proposed_price=request.proposed_price,
                status=ApplicationStatus.PENDING.value,
                applied_at=utcnow(),
            )
        )
        await self.db_session.commit()

        logger.info("job_application_submitted", job_id=str(job_id), worker_id=str(worker_id))
        return await self._view(job)

    async def list_applicants(self, job_id: uuid.UUID, user_id: uuid.UUID) -> list[ApplicantView]:
        """Applicants with their public profile details, earliest first."""
        await self._get_owned_job(job_id, user_id, "view applicants for")
        query = (
            select(JobApplicationDB, UserDB)
            .join(UserDB, JobApplicationDB.worker_id == UserDB.id)
            .where(JobApplicationDB.job_id == job_id)
            .order_by(JobApplicationDB.applied_at)
        )
        result = await self.db_session.execute(query)
        return [
            ApplicantView(
                id=worker.id,
                full_name=worker.full_name,
                email=worker.email,
                phone_number=worker.phone_number,
                profile_photo=worker.profile_photo,
                services=worker.services or [],
                bio=worker.bio,
                city=worker.city,
                state=worker.state,
                experience=worker.experience,
                subscription_tier=worker.subscription_tier,
                charge_hourly=worker.charge_hourly,
                charge_daily=worker.charge_daily,
                charge_per_contract=worker.charge_per_contract,
                proposal=application.proposal,
                proposed_price=application.proposed_price,
                status=application.status,
                applied_at=application.applied_at,
            )
            for application, worker in result.all()
        ]

    async def assign_worker(
        self, job_id: uuid.UUID, user_id: uuid.UUID, is_admin: bool, worker_id: uuid.UUID
    ) -> JobView:
        """Select one applicant; the job moves to In Progress.

        Raises:
            NotFound: If the job does not exist or the worker did not apply
            AccessDenied: If the caller is neither the job's client nor an admin
            ValidationFailed: If the job is no longer open
        """
        job = await self._get_job(job_id)
        if job.client_id != user_id and not is_admin:
            raise AccessDenied("Not authorized to assign a worker to this job")
        if job.status != JobStatus.OPEN.value:
            raise ValidationFailed("Only open jobs can be assigned")

        result = await self.db_session.execute(
            select(JobApplicationDB).where(JobApplicationDB.job_id == job_id)
        )
        applications = result.scalars().all()
        if not any(a.worker_id == worker_id for a in applications):
            raise NotFound("Applicant not found")

        for application in applications:
            application.status = (
                ApplicationStatus.ACCEPTED.value
                if application.worker_id == worker_id
                else ApplicationStatus.REJECTED.value
            )
        job.selected_worker_id = worker_id
        job.status = JobStatus.IN_PROGRESS.value
        job.updated_at = utcnow()
        await self.db_session.commit()

        logger.info("job_worker_assigned", job_id=str(job_id), worker_id=str(worker_id))
        return await self._view(job)
