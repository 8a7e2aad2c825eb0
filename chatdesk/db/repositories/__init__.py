"""Repository layer for data access."""

from .account import AccountRepository
from .user import UserRepository
from .inbox import InboxRepository
from .contact import ContactRepository
from .conversation import ConversationRepository
from .message import MessageRepository
from .attachment import AttachmentRepository
from .rotation import RotationRepository
from .reporting_event import ReportingEventRepository

__all__ = [
    "AccountRepository",
    "UserRepository",
    "InboxRepository",
    "ContactRepository",
    "ConversationRepository",
    "MessageRepository",
    "AttachmentRepository",
    "RotationRepository",
    "ReportingEventRepository",
]
