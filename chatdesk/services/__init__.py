"""Services package."""

from .round_robin import RoundRobinService
from .conversation_service import ConversationService
from .message_service import MessageService
from .conversation_finder import (
    AssigneeType,
    ConversationCounts,
    ConversationFinder,
    FinderResult,
    parse_assignee_type,
)
from .event_stream import EventStream
from .mailer import Mailer, SmtpMailer

__all__ = [
    "RoundRobinService",
    "ConversationService",
    "MessageService",
    "AssigneeType",
    "ConversationCounts",
    "ConversationFinder",
    "FinderResult",
    "parse_assignee_type",
    "EventStream",
    "Mailer",
    "SmtpMailer",
]
