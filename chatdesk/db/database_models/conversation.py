"""Conversation database model."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Optional


class ConversationStatus(IntEnum):
    """Conversation status, stored as its integer code."""

    OPEN = 0
    RESOLVED = 1
    PENDING = 2

    @classmethod
    def parse(cls, value) -> "ConversationStatus":
        """Accept a member, an integer code or a status name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and not value.isdigit():
            return cls[value.upper()]
        return cls(int(value))

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass
class ConversationDO:
    """Conversation data object - maps to conversations table."""

    account_id: int
    inbox_id: int
    contact_id: int
    id: Optional[int] = None
    display_id: Optional[int] = None
    status: ConversationStatus = ConversationStatus.OPEN
    locked: bool = False
    assignee_id: Optional[int] = None
    user_last_seen_at: Optional[datetime] = None
    agent_last_seen_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    last_activity_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_resolved(self) -> bool:
        return self.status == ConversationStatus.RESOLVED

    def lock_event_data(self):
        return {"id": self.display_id, "locked": self.locked}
