"""Support tickets raised by users and through the public contact form."""

import uuid

import structlog
from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.errors import NotFound
from cleanconnect.models.base import utcnow
from cleanconnect.models.support import (
    ContactRequest,
    CreateTicketRequest,
    SupportTicketDB,
    TicketCategory,
    TicketStatus,
    TicketView,
)
from cleanconnect.models.user import UserDB

logger = structlog.get_logger(__name__)

GUEST_ROLE = "Guest"
CONTACT_THANKS = "Thank you for contacting us. We will get back to you shortly."


def to_ticket_view(ticket: SupportTicketDB, user: UserDB | None = None) -> TicketView:
    view = TicketView.model_validate(ticket)
    if user is not None:
        view.user_name = user.full_name
        view.user_role = user.role
    elif ticket.user_id is None:
        view.user_name = ticket.contact_name
        view.user_role = GUEST_ROLE
    return view


class SupportService:
    """Creates, lists and resolves support tickets."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def create_ticket(self, user_id: uuid.UUID, request: CreateTicketRequest) -> TicketView:
        """Open a ticket on behalf of an authenticated user."""
        now = utcnow()
        ticket = SupportTicketDB(
            id=uuid.uuid4(),
            user_id=user_id,
            category=TicketCategory(request.category).value,
            subject=request.subject,
            message=request.message,
            status=TicketStatus.OPEN.value,
            created_at=now,
            updated_at=now,
        )
        self.db_session.add(ticket)
        await self.db_session.commit()

        logger.info("support_ticket_created", ticket_id=str(ticket.id), user_id=str(user_id))
        return to_ticket_view(ticket)

    async def submit_contact_form(self, request: ContactRequest) -> str:
        """Store a contact-form enquiry as a guest ticket.

        A topic that names a ticket category files the ticket under it;
        anything else is filed under ``Other`` with the topic as subject.

        Returns:
            Acknowledgement to show the sender
        """
        categories = {c.value for c in TicketCategory}
        topic = (request.topic or "").strip()
        category = topic if topic in categories else TicketCategory.OTHER.value

        message = request.message
        if request.phone:
            message = f"{message}\n\nPhone: {request.phone}"

        now = utcnow()
        ticket = SupportTicketDB(
            id=uuid.uuid4(),
            user_id=None,
            contact_name=request.name,
            contact_email=request.email,
            category=category,
            subject=topic or "General Enquiry",
            message=message,
            status=TicketStatus.OPEN.value,
            created_at=now,
            updated_at=now,
        )
        self.db_session.add(ticket)
        await self.db_session.commit()

        logger.info("contact_form_received", ticket_id=str(ticket.id), category=category)
        return CONTACT_THANKS

    async def list_user_tickets(self, user_id: uuid.UUID) -> list[TicketView]:
        """Caller's own tickets, newest first."""
        query = (
            select(SupportTicketDB)
            .where(SupportTicketDB.user_id == user_id)
            .order_by(SupportTicketDB.created_at.desc())
        )
        result = await self.db_session.execute(query)
        return [to_ticket_view(t) for t in result.scalars().all()]

    async def list_all_tickets(self) -> list[TicketView]:
        """Every ticket with the raiser's name and role, open ones first."""
        open_first = case((SupportTicketDB.status == TicketStatus.OPEN.value, 0), else_=1)
        query = (
            select(SupportTicketDB, UserDB)
            .outerjoin(UserDB, SupportTicketDB.user_id == UserDB.id)
            .order_by(open_first, SupportTicketDB.created_at.desc())
        )
        result = await self.db_session.execute(query)
        return [to_ticket_view(ticket, user) for ticket, user in result.all()]

    async def resolve_ticket(self, ticket_id: uuid.UUID, admin_response: str) -> TicketView:
        """Close a ticket with the admin's reply.

        Raises:
            NotFound: If the ticket does not exist
        """
        ticket = await self.db_session.get(SupportTicketDB, ticket_id)
        if ticket is None:
            raise NotFound("Ticket not found")

        ticket.status = TicketStatus.RESOLVED.value
        ticket.admin_response = admin_response
        ticket.updated_at = utcnow()
        await self.db_session.commit()

        logger.info("support_ticket_resolved", ticket_id=str(ticket_id))
        return to_ticket_view(ticket)
