"""Public cleaner directory and AI-assisted search."""

import uuid

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.models.user import CleanerCard, SearchRequest, SearchResponse
from cleanconnect.services.cleaner_service import CleanerService
from cleanconnect.services.database import get_db_session
from cleanconnect.services.search_assistant import AssistantError, SearchAssistant

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["cleaners"])


async def get_search_assistant():
    """FastAPI dependency yielding a search assistant for one request."""
    assistant = SearchAssistant()
    try:
        yield assistant
    finally:
        await assistant.close()


@router.get("/api/cleaners", response_model=list[CleanerCard])
async def list_cleaners(
    state: str | None = None,
    city: str | None = None,
    service: str | None = None,
    db: AsyncSession = Depends(get_db_session),
) -> list[CleanerCard]:
    """List active cleaners, best subscription tier and rating first.

    Args:
        state: Only cleaners in this state
        city: Only cleaners in this city (or listing it as their other city)
        service: Only cleaners offering this service
    """
    return await CleanerService(db).list_cleaners(state=state, city=city, service=service)


@router.get("/api/cleaners/{cleaner_id}", response_model=CleanerCard)
async def get_cleaner(
    cleaner_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
) -> CleanerCard:
    """One cleaner's public profile with all reviews."""
    return await CleanerService(db).get_cleaner(cleaner_id)


@router.post("/api/search/ai", response_model=SearchResponse)
async def ai_search(
    request: SearchRequest,
    db: AsyncSession = Depends(get_db_session),
    assistant: SearchAssistant = Depends(get_search_assistant),
) -> SearchResponse:
    """Match cleaners against a free-text request.

    The assistant turns the query into filters. When it is unavailable or
    its reply cannot be used, no cleaners are matched.
    """
    try:
        criteria = await assistant.extract_criteria(request.query)
    except AssistantError as exc:
        logger.warning("ai_search_failed", error=str(exc))
        return SearchResponse(matching_ids=[])

    return SearchResponse(matching_ids=await CleanerService(db).search(criteria))
