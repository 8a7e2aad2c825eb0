"""Database models (Data Objects) - map to database tables."""

from .account import AccountDO
from .user import UserDO, UserRole
from .inbox import InboxDO
from .contact import ContactDO
from .conversation import ConversationDO, ConversationStatus
from .message import MessageDO, MessageType, ContentType, MessageStatus
from .attachment import AttachmentDO, FileType
from .reporting_event import ReportingEventDO

__all__ = [
    "AccountDO",
    "UserDO",
    "UserRole",
    "InboxDO",
    "ContactDO",
    "ConversationDO",
    "ConversationStatus",
    "MessageDO",
    "MessageType",
    "ContentType",
    "MessageStatus",
    "AttachmentDO",
    "FileType",
    "ReportingEventDO",
]
