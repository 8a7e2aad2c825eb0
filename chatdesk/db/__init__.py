"""Database package - connection, models, and repositories."""

from .connection import DatabaseConnection
from .repositories import (
    AccountRepository,
    UserRepository,
    InboxRepository,
    ContactRepository,
    ConversationRepository,
    MessageRepository,
    AttachmentRepository,
    RotationRepository,
    ReportingEventRepository,
)

__all__ = [
    "DatabaseConnection",
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
