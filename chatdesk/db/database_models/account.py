"""Account database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class AccountDO:
    """Account data object - maps to accounts table."""

    name: str
    id: Optional[int] = None
    conversation_sequence: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
