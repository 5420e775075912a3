"""Job board endpoints."""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.api.middleware.auth import CurrentUser, get_current_user
from cleanconnect.models.base import MessageResponse
from cleanconnect.models.job import (
    ApplicantView,
    ApplyRequest,
    AssignRequest,
    CreateJobRequest,
    JobActionResponse,
    JobStatus,
    JobUpdate,
    JobView,
)
from cleanconnect.services.database import get_db_session
from cleanconnect.services.job_service import JobService

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


@router.post("", response_model=JobView, status_code=status.HTTP_201_CREATED)
async def create_job(
    request: CreateJobRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> JobView:
    """Client posts a job for cleaners to apply to."""
    return await JobService(db).create_job(current_user.id, current_user.role, request)


@router.get("", response_model=list[JobView])
async def list_jobs(
    job_status: JobStatus | None = Query(None, alias="status"),
    service: str | None = None,
    client_id: uuid.UUID | None = Query(None, alias="clientId"),
    db: AsyncSession = Depends(get_db_session),
) -> list[JobView]:
    """Public job board, newest first.

    Args:
        job_status: Only jobs in this status (open jobs when omitted, unless
            ``clientId`` is given)
        service: Only jobs for this service
        client_id: Only jobs posted by this client
    """
    return await JobService(db).list_jobs(status=job_status, service=service, client_id=client_id)


@router.get("/{job_id}", response_model=JobView)
async def get_job(
    job_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
) -> JobView:
    return await JobService(db).get_job(job_id)


@router.put("/{job_id}", response_model=JobView)
async def update_job(
    job_id: uuid.UUID,
    update: JobUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> JobView:
    return await JobService(db).update_job(job_id, current_user.id, update)


@router.put("/{job_id}/cancel", response_model=JobView)
async def cancel_job(
    job_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> JobView:
    return await JobService(db).cancel_job(job_id, current_user.id)


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await JobService(db).delete_job(job_id, current_user.id)
    return MessageResponse(message="Job deleted successfully")


@router.post("/{job_id}/apply", response_model=JobActionResponse)
async def apply_to_job(
    job_id: uuid.UUID,
    request: ApplyRequest | None = None,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> JobActionResponse:
    """Cleaner applies to an open job, optionally with a proposal."""
    job = await JobService(db).apply(job_id, current_user.id, current_user.role, request or ApplyRequest())
    return JobActionResponse(message="Application submitted successfully", job=job)


@router.get("/{job_id}/applicants", response_model=list[ApplicantView])
async def list_applicants(
    job_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> list[ApplicantView]:
    """Who applied, with profile details; visible to the job's client only."""
    return await JobService(db).list_applicants(job_id, current_user.id)


@router.post("/{job_id}/assign", response_model=JobActionResponse)
async def assign_worker(
    job_id: uuid.UUID,
    request: AssignRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> JobActionResponse:
    """Pick one applicant for the job; the others are turned down."""
    job = await JobService(db).assign_worker(job_id, current_user.id, current_user.is_admin, request.worker_id)
    return JobActionResponse(message="Worker assigned successfully", job=job)
