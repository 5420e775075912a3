"""Chat endpoints between clients, cleaners and support."""

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from cleanconnect.api.middleware.auth import CurrentUser, get_current_user
from cleanconnect.models.chat import ChatView, CreateChatRequest, MessageView, SendMessageRequest
from cleanconnect.services.chat_service import ChatService
from cleanconnect.services.database import get_db_session

router = APIRouter(prefix="/api/chats", tags=["chats"])


@router.post("", response_model=ChatView)
async def open_chat(
    request: CreateChatRequest,
    response: Response,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ChatView:
    """Get the caller's chat with another user, creating it on first contact.

    Responds 201 when a chat was created and 200 when one already existed.
    """
    chat, created = await ChatService(db).open_chat(current_user.id, request.participant_id)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return chat


@router.get("", response_model=list[ChatView])
async def list_chats(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> list[ChatView]:
    return await ChatService(db).list_chats(current_user.id)


@router.get("/{chat_id}/messages", response_model=list[MessageView])
async def list_messages(
    chat_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> list[MessageView]:
    return await ChatService(db).list_messages(chat_id, current_user.id)


@router.post("/{chat_id}/messages", response_model=MessageView, status_code=status.HTTP_201_CREATED)
async def send_message(
    chat_id: uuid.UUID,
    request: SendMessageRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageView:
    return await ChatService(db).send_message(chat_id, current_user.id, request.text)
