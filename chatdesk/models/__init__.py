"""Pydantic models for API request/response."""

from .account import (
    CreateAccountRequest,
    AccountResponse,
    CreateUserRequest,
    UserResponse,
    CreateInboxRequest,
    InboxResponse,
    AddInboxMemberRequest,
    CreateContactRequest,
    ContactResponse,
)
from .conversation import (
    CreateConversationRequest,
    AssignmentRequest,
    UpdateLastSeenRequest,
    ConversationCountsMeta,
    ConversationListData,
    ConversationListResponse,
    ToggleStatusResponse,
    LockResponse,
)
from .message import (
    AttachmentRequest,
    CreateMessageRequest,
    ConversationMessagesMeta,
    ConversationMessagesResponse,
)

__all__ = [
    "CreateAccountRequest",
    "AccountResponse",
    "CreateUserRequest",
    "UserResponse",
    "CreateInboxRequest",
    "InboxResponse",
    "AddInboxMemberRequest",
    "CreateContactRequest",
    "ContactResponse",
    "CreateConversationRequest",
    "AssignmentRequest",
    "UpdateLastSeenRequest",
    "ConversationCountsMeta",
    "ConversationListData",
    "ConversationListResponse",
    "ToggleStatusResponse",
    "LockResponse",
    "AttachmentRequest",
    "CreateMessageRequest",
    "ConversationMessagesMeta",
    "ConversationMessagesResponse",
]
