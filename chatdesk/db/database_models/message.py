"""Message database model."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, Optional


class MessageType(IntEnum):
    INCOMING = 0
    OUTGOING = 1
    ACTIVITY = 2
    TEMPLATE = 3


class ContentType(IntEnum):
    TEXT = 0
    INPUT = 1
    INPUT_TEXTAREA = 2
    INPUT_EMAIL = 3


class MessageStatus(IntEnum):
    SENT = 0
    DELIVERED = 1
    READ = 2
    FAILED = 3


@dataclass
class MessageDO:
    """Message data object - maps to messages table."""

    account_id: Optional[int]
    inbox_id: Optional[int]
    conversation_id: Optional[int]
    content: Optional[str] = None
    message_type: MessageType = MessageType.INCOMING
    content_type: ContentType = ContentType.TEXT
    status: MessageStatus = MessageStatus.SENT
    private: bool = False
    content_attributes: Dict[str, Any] = field(default_factory=dict)
    user_id: Optional[int] = None
    fb_id: Optional[str] = None
    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_chat(self) -> bool:
        """Visible in the chat thread: not an activity and not a private note."""
        return self.message_type != MessageType.ACTIVITY and not self.private
