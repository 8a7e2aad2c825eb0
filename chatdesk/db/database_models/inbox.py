"""Inbox database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class InboxDO:
    """Inbox data object - maps to inboxes table."""

    account_id: int
    name: str
    channel_type: str = "Channel::WebWidget"
    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
