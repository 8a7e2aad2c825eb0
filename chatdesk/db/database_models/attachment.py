"""Attachment database model."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, Optional


class FileType(IntEnum):
    IMAGE = 0
    AUDIO = 1
    VIDEO = 2
    FILE = 3
    LOCATION = 4
    FALLBACK = 5


@dataclass
class AttachmentDO:
    """Attachment data object - maps to attachments table."""

    account_id: int
    message_id: Optional[int] = None
    file_type: FileType = FileType.IMAGE
    external_url: Optional[str] = None
    extension: Optional[str] = None
    coordinates_lat: float = 0.0
    coordinates_long: float = 0.0
    id: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    def push_event_data(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "message_id": self.message_id,
            "file_type": int(self.file_type),
            "account_id": self.account_id,
            "extension": self.extension,
            "data_url": self.external_url,
            "coordinates_lat": self.coordinates_lat,
            "coordinates_long": self.coordinates_long,
        }
