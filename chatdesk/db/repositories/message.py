"""Message repository for database operations."""

import json
from datetime import datetime
from typing import Optional, List
from .base import BaseRepository
from ..database_models.message import MessageDO, MessageType, ContentType, MessageStatus


class MessageRepository(BaseRepository):
    """Repository for Message CRUD operations."""

    _COLUMNS = """
        id, account_id, inbox_id, conversation_id, user_id, content, content_attributes,
        content_type, message_type, status, private, fb_id, created_at, updated_at
    """

    # Not an activity and not a private note
    _CHAT = "message_type <> 2 AND private = FALSE"

    def add(self, message: MessageDO) -> MessageDO:
        """
        Add a new message.

        Args:
            message: MessageDO instance

        Returns:
            The message with its id set
        """
        message.id = self._next_id("messages_id_seq")
        self.conn.execute("""
            INSERT INTO messages (
                id, account_id, inbox_id, conversation_id, user_id, content, content_attributes,
                content_type, message_type, status, private, fb_id, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, [
            message.id,
            message.account_id,
            message.inbox_id,
            message.conversation_id,
            message.user_id,
            message.content,
            json.dumps(message.content_attributes or {}),
            int(message.content_type),
            int(message.message_type),
            int(message.status),
            message.private,
            message.fb_id,
            message.created_at,
            message.updated_at
        ])
        self.logger.debug(f"Added message {message.id} to conversation {message.conversation_id}")
        return message

    def get(self, message_id: int) -> Optional[MessageDO]:
        result = self.conn.execute(
            f"SELECT {self._COLUMNS} FROM messages WHERE id = ?", [message_id]
        ).fetchone()
        return self._to_do(result) if result else None

    def get_by_conversation(self, conversation_id: int) -> List[MessageDO]:
        """
        Get messages for a conversation.

        Args:
            conversation_id: Conversation ID

        Returns:
            List of MessageDO instances (chronological order)
        """
        results = self.conn.execute(f"""
            SELECT {self._COLUMNS} FROM messages
            WHERE conversation_id = ?
            ORDER BY created_at ASC, id ASC
        """, [conversation_id]).fetchall()
        return [self._to_do(row) for row in results]

    def count_by_type(self, conversation_id: int, message_type: MessageType) -> int:
        result = self.conn.execute("""
            SELECT COUNT(*) FROM messages
            WHERE conversation_id = ? AND message_type = ?
        """, [conversation_id, int(message_type)]).fetchone()
        return result[0]

    def get_chat_since(
        self,
        conversation_id: int,
        since: datetime,
        message_type: Optional[MessageType] = None
    ) -> List[MessageDO]:
        """
        Chat messages created at or after ``since``, chronological order.

        Args:
            conversation_id: Conversation ID
            since: Inclusive lower bound on created_at
            message_type: Optional message type filter

        Returns:
            List of MessageDO instances
        """
        query = f"""
            SELECT {self._COLUMNS} FROM messages
            WHERE conversation_id = ? AND {self._CHAT} AND created_at >= ?
        """
        params = [conversation_id, since]
        if message_type is not None:
            query += " AND message_type = ?"
            params.append(int(message_type))
        query += " ORDER BY created_at ASC, id ASC"

        results = self.conn.execute(query, params).fetchall()
        return [self._to_do(row) for row in results]

    def get_last_chat(self, conversation_id: int) -> Optional[MessageDO]:
        result = self.conn.execute(f"""
            SELECT {self._COLUMNS} FROM messages
            WHERE conversation_id = ? AND {self._CHAT}
            ORDER BY created_at DESC, id DESC
            LIMIT 1
        """, [conversation_id]).fetchone()
        return self._to_do(result) if result else None

    @staticmethod
    def _to_do(row) -> MessageDO:
        return MessageDO(
            id=row[0],
            account_id=row[1],
            inbox_id=row[2],
            conversation_id=row[3],
            user_id=row[4],
            content=row[5],
            content_attributes=json.loads(row[6]) if isinstance(row[6], str) else (row[6] or {}),
            content_type=ContentType(row[7]),
            message_type=MessageType(row[8]),
            status=MessageStatus(row[9]),
            private=row[10],
            fb_id=row[11],
            created_at=row[12],
            updated_at=row[13]
        )
