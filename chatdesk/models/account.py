"""Account setup API models."""

import re
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from ..db.database_models import UserRole


EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+$')


class CreateAccountRequest(BaseModel):
    name: str = Field(description="Account name", min_length=1, max_length=200)


class AccountResponse(BaseModel):
    id: int
    name: str
    created_at: datetime


class CreateUserRequest(BaseModel):
    """Request model for creating an agent or administrator."""

    name: str = Field(description="Display name", min_length=1, max_length=200)
    email: str = Field(description="Email address")
    role: UserRole = Field(default=UserRole.AGENT, description="Role inside the account")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        """Validate email format."""
        if not EMAIL_PATTERN.match(v):
            raise ValueError(f"Invalid email '{v}'")
        return v


class UserResponse(BaseModel):
    id: int
    account_id: int
    name: str
    email: str
    role: str


class CreateInboxRequest(BaseModel):
    name: str = Field(description="Inbox name", min_length=1, max_length=200)
    channel_type: str = Field(default="Channel::WebWidget", description="Channel the inbox is bound to")


class InboxResponse(BaseModel):
    id: int
    account_id: int
    name: str
    channel_type: str


class AddInboxMemberRequest(BaseModel):
    user_id: int = Field(description="Agent to add to the inbox pool")


class CreateContactRequest(BaseModel):
    name: str = Field(description="Contact name", min_length=1, max_length=200)
    email: Optional[str] = None
    phone_number: Optional[str] = None


class ContactResponse(BaseModel):
    id: int
    account_id: int
    name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
