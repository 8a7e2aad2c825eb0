"""Unread message computation against the agent watermark."""

from datetime import datetime, timedelta
from typing import List, Optional

import duckdb

from ..db.database_models import ConversationDO, MessageDO, MessageType
from ..db.repositories import MessageRepository


EPOCH = datetime(1970, 1, 1)


def unread_boundary(last_seen_at: Optional[datetime]) -> datetime:
    """
    First instant counted as unread for a watermark.

    Comparison is done on whole seconds: anything inside the watermark's own
    second is read, anything from the next second on is unread. A missing
    watermark behaves as the epoch.
    """
    watermark = (last_seen_at or EPOCH).replace(microsecond=0)
    return watermark + timedelta(seconds=1)


def unread_messages(conn: duckdb.DuckDBPyConnection, conversation: ConversationDO) -> List[MessageDO]:
    """Chat messages the agents have not seen yet."""
    return MessageRepository(conn).get_chat_since(
        conversation.id, unread_boundary(conversation.agent_last_seen_at)
    )


def unread_incoming_messages(conn: duckdb.DuckDBPyConnection, conversation: ConversationDO) -> List[MessageDO]:
    """Unread chat messages sent by the contact."""
    return MessageRepository(conn).get_chat_since(
        conversation.id,
        unread_boundary(conversation.agent_last_seen_at),
        message_type=MessageType.INCOMING
    )


def unread_count(conn: duckdb.DuckDBPyConnection, conversation: ConversationDO) -> int:
    return len(unread_messages(conn, conversation))
