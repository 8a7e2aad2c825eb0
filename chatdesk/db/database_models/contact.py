"""Contact database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class ContactDO:
    """Contact data object - maps to contacts table."""

    account_id: int
    name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    thumbnail: str = ""
    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    def push_event_data(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone_number": self.phone_number,
            "thumbnail": self.thumbnail,
            "type": "contact",
        }
