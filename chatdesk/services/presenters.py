"""Push and event-stream payloads."""

from typing import Any, Dict, Optional

import duckdb

from ..db.database_models import ConversationDO, MessageDO
from ..db.repositories import (
    AttachmentRepository,
    ContactRepository,
    ConversationRepository,
    MessageRepository,
    UserRepository,
)
from ..utils.timestamps import to_epoch
from .unread import unread_count


def conversation_push_data(conn: duckdb.DuckDBPyConnection, conversation: ConversationDO) -> Dict[str, Any]:
    """Conversation payload sent to agents' clients."""
    contact = ContactRepository(conn).get(conversation.contact_id)
    assignee = UserRepository(conn).get(conversation.assignee_id)
    last_message = MessageRepository(conn).get_last_chat(conversation.id)

    return {
        "meta": {
            "sender": contact.push_event_data() if contact else None,
            "assignee": assignee.push_event_data() if assignee else None,
        },
        "id": conversation.display_id,
        "messages": [message_push_data(conn, last_message, conversation)] if last_message else [],
        "inbox_id": conversation.inbox_id,
        "status": int(conversation.status),
        "timestamp": to_epoch(conversation.created_at),
        "user_last_seen_at": to_epoch(conversation.user_last_seen_at),
        "agent_last_seen_at": to_epoch(conversation.agent_last_seen_at),
        "unread_count": unread_count(conn, conversation),
    }


def lock_event_data(conversation: ConversationDO) -> Dict[str, Any]:
    return conversation.lock_event_data()


def message_push_data(
    conn: duckdb.DuckDBPyConnection,
    message: MessageDO,
    conversation: Optional[ConversationDO] = None
) -> Dict[str, Any]:
    """
    Message payload: every column, with epoch ``created_at``, the integer
    message type and the conversation's display id in ``conversation_id``.
    """
    if conversation is None or conversation.id != message.conversation_id:
        conversation = ConversationRepository(conn).get(message.conversation_id)

    data = {
        "id": message.id,
        "content": message.content,
        "account_id": message.account_id,
        "inbox_id": message.inbox_id,
        "conversation_id": conversation.display_id if conversation else None,
        "message_type": int(message.message_type),
        "created_at": to_epoch(message.created_at),
        "updated_at": message.updated_at.isoformat() if message.updated_at else None,
        "private": message.private,
        "user_id": message.user_id,
        "status": message.status.name.lower(),
        "fb_id": message.fb_id,
        "content_type": message.content_type.name.lower(),
        "content_attributes": dict(message.content_attributes or {}),
    }

    attachment = AttachmentRepository(conn).get_by_message(message.id)
    if attachment:
        data["attachment"] = attachment.push_event_data()

    sender = UserRepository(conn).get(message.user_id)
    if sender:
        data["sender"] = sender.push_event_data()

    return data
