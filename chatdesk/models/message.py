"""Message API models."""

from typing import Optional, Dict, Any, List, Literal
from pydantic import BaseModel, Field


class AttachmentRequest(BaseModel):
    """Attachment sent along with a message."""

    file_type: Literal["image", "audio", "video", "file", "location", "fallback"] = Field(default="image")
    external_url: Optional[str] = Field(None, description="Where the file is stored")
    extension: Optional[str] = Field(None, description="File extension")
    coordinates_lat: float = Field(default=0.0)
    coordinates_long: float = Field(default=0.0)


class CreateMessageRequest(BaseModel):
    """Request model for creating a message."""

    content: str = Field(description="Message content", min_length=1)
    message_type: Literal["incoming", "outgoing", "template"] = Field(
        default="outgoing", description="Direction of the message"
    )
    private: bool = Field(default=False, description="Private note, hidden from the contact")
    content_type: Literal["text", "input", "input_textarea", "input_email"] = Field(default="text")
    content_attributes: Optional[Dict[str, Any]] = Field(default_factory=dict)
    attachment: Optional[AttachmentRequest] = None


class ConversationMessagesMeta(BaseModel):
    contact: Optional[Dict[str, Any]] = None
    assignee: Optional[Dict[str, Any]] = None
    unread_count: int = 0


class ConversationMessagesResponse(BaseModel):
    """Response model for conversation messages."""

    meta: ConversationMessagesMeta
    payload: List[Dict[str, Any]] = Field(description="Message push payloads, oldest first")
