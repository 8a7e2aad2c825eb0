"""Reporting event database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class ReportingEventDO:
    """Reporting event data object - maps to reporting_events table."""

    name: str
    value: float
    account_id: int
    inbox_id: Optional[int] = None
    user_id: Optional[int] = None
    conversation_id: Optional[int] = None
    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
