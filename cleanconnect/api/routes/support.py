"""Support tickets and the public contact form."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.api.middleware.auth import CurrentUser, get_current_user
from cleanconnect.models.base import MessageResponse
from cleanconnect.models.support import ContactRequest, CreateTicketRequest, TicketView
from cleanconnect.services.database import get_db_session
from cleanconnect.services.support_service import SupportService

router = APIRouter(tags=["support"])


@router.post("/api/support", response_model=TicketView, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    request: CreateTicketRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> TicketView:
    return await SupportService(db).create_ticket(current_user.id, request)


@router.get("/api/support/my", response_model=list[TicketView])
async def my_tickets(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> list[TicketView]:
    """Caller's tickets, newest first."""
    return await SupportService(db).list_user_tickets(current_user.id)


@router.post("/api/contact", response_model=MessageResponse)
async def contact(
    request: ContactRequest,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Public contact form; enquiries land in the admin support queue."""
    message = await SupportService(db).submit_contact_form(request)
    return MessageResponse(message=message)
