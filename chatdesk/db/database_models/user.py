"""User database model."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class UserRole(str, Enum):
    """Roles a user can hold inside an account."""

    ADMINISTRATOR = "administrator"
    AGENT = "agent"


@dataclass
class UserDO:
    """User data object - maps to users table."""

    account_id: int
    name: str
    email: str
    role: str = UserRole.AGENT.value
    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_administrator(self) -> bool:
        return self.role == UserRole.ADMINISTRATOR.value

    @property
    def is_agent(self) -> bool:
        return self.role == UserRole.AGENT.value

    def push_event_data(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }
