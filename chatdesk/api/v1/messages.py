"""Message REST API routes - V1."""

from fastapi import APIRouter, HTTPException, Depends

from ...container import Container
from ...context import RequestContext
from ...db import ContactRepository, UserRepository
from ...db.database_models import (
    AttachmentDO,
    ContentType,
    ConversationDO,
    FileType,
    MessageDO,
    MessageType,
)
from ...errors import ValidationError
from ...models.message import (
    CreateMessageRequest,
    ConversationMessagesMeta,
    ConversationMessagesResponse,
)
from ...services.presenters import message_push_data
from ...services.unread import unread_count
from ..deps import get_container, get_conversation, get_request_context

router = APIRouter(prefix="/api/v1/accounts/{account_id}/conversations/{display_id}/messages", tags=["Messages"])


@router.get("", response_model=ConversationMessagesResponse)
async def list_messages(
    conversation: ConversationDO = Depends(get_conversation),
    services: Container = Depends(get_container)
):
    """Messages of a conversation, oldest first."""
    messages = services.messages.list_messages(conversation.id)

    with services.db.transaction() as conn:
        contact = ContactRepository(conn).get(conversation.contact_id)
        assignee = UserRepository(conn).get(conversation.assignee_id)
        meta = ConversationMessagesMeta(
            contact=contact.push_event_data() if contact else None,
            assignee=assignee.push_event_data() if assignee else None,
            unread_count=unread_count(conn, conversation)
        )
        payload = [message_push_data(conn, m, conversation) for m in messages]

    return ConversationMessagesResponse(meta=meta, payload=payload)


@router.post("", response_model=dict, status_code=201)
async def create_message(
    request: CreateMessageRequest,
    conversation: ConversationDO = Depends(get_conversation),
    context: RequestContext = Depends(get_request_context),
    services: Container = Depends(get_container)
):
    """Post a message into the conversation."""
    message_type = MessageType[request.message_type.upper()]
    message = MessageDO(
        account_id=conversation.account_id,
        inbox_id=conversation.inbox_id,
        conversation_id=conversation.id,
        content=request.content,
        message_type=message_type,
        content_type=ContentType[request.content_type.upper()],
        private=request.private,
        content_attributes=request.content_attributes or {},
        user_id=context.actor.id if message_type == MessageType.OUTGOING else None
    )

    attachment = None
    if request.attachment:
        attachment = AttachmentDO(
            account_id=conversation.account_id,
            file_type=FileType[request.attachment.file_type.upper()],
            external_url=request.attachment.external_url,
            extension=request.attachment.extension,
            coordinates_lat=request.attachment.coordinates_lat,
            coordinates_long=request.attachment.coordinates_long
        )

    try:
        message = services.messages.create_message(context, message, attachment=attachment)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    with services.db.transaction() as conn:
        return message_push_data(conn, message)
