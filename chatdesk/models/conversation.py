"""Conversation API models."""

from typing import Optional, Dict, Any, List, Literal
from pydantic import BaseModel, Field


class CreateConversationRequest(BaseModel):
    """Request model for creating a conversation."""

    inbox_id: int = Field(description="Inbox the conversation arrives in")
    contact_id: int = Field(description="Contact on the other side")
    assignee_id: Optional[int] = Field(None, description="Agent to assign, round robin when omitted")
    status: Literal["open", "resolved", "pending"] = Field(default="open", description="Initial status")


class AssignmentRequest(BaseModel):
    """Request model for assigning a conversation."""

    assignee_id: Optional[int] = Field(None, description="Agent to assign, null to unassign")


class UpdateLastSeenRequest(BaseModel):
    """Request model for moving a read watermark."""

    viewer: Literal["agent", "user"] = Field(default="agent", description="Whose watermark to move")


class ConversationCountsMeta(BaseModel):
    """Badge counts of a conversation listing."""

    mine_count: int = Field(description="Conversations assigned to the caller")
    unassigned_count: int = Field(description="Conversations without assignee")
    all_count: int = Field(description="All conversations in scope")


class ConversationListData(BaseModel):
    meta: ConversationCountsMeta
    payload: List[Dict[str, Any]] = Field(description="Conversation push payloads, latest first")


class ConversationListResponse(BaseModel):
    """Response model for listing conversations."""

    data: ConversationListData


class ToggleStatusResponse(BaseModel):
    """Response model for toggling a conversation status."""

    success: bool
    current_status: str


class LockResponse(BaseModel):
    """Lock event payload."""

    id: int
    locked: bool
