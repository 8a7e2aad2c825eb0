"""Tests for API models and settings."""

import pytest
from pydantic import ValidationError

from chatdesk.config import Settings
from chatdesk.db.database_models import ConversationStatus, UserRole
from chatdesk.models import (
    CreateConversationRequest,
    CreateMessageRequest,
    CreateUserRequest,
    UpdateLastSeenRequest,
)


class TestCreateUserRequest:
    """SUT: CreateUserRequest"""

    def test_defaults_to_agent(self):
        request = CreateUserRequest(name="Agent", email="agent@example.com")
        assert request.role == UserRole.AGENT

    def test_rejects_bad_email(self):
        with pytest.raises(ValidationError):
            CreateUserRequest(name="Agent", email="not-an-email")


class TestCreateConversationRequest:
    """SUT: CreateConversationRequest"""

    def test_defaults(self):
        request = CreateConversationRequest(inbox_id=1, contact_id=2)
        assert request.assignee_id is None
        assert ConversationStatus.parse(request.status) == ConversationStatus.OPEN

    def test_rejects_unknown_status(self):
        with pytest.raises(ValidationError):
            CreateConversationRequest(inbox_id=1, contact_id=2, status="archived")


class TestCreateMessageRequest:
    """SUT: CreateMessageRequest"""

    def test_defaults(self):
        request = CreateMessageRequest(content="hi")
        assert request.message_type == "outgoing"
        assert request.content_type == "text"
        assert request.private is False
        assert request.attachment is None

    def test_rejects_activity(self):
        with pytest.raises(ValidationError):
            CreateMessageRequest(content="hi", message_type="activity")

    def test_rejects_empty_content(self):
        with pytest.raises(ValidationError):
            CreateMessageRequest(content="")


class TestUpdateLastSeenRequest:
    """SUT: UpdateLastSeenRequest"""

    def test_viewer(self):
        assert UpdateLastSeenRequest().viewer == "agent"
        with pytest.raises(ValidationError):
            UpdateLastSeenRequest(viewer="bot")


class TestSettings:
    """SUT: Settings"""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.conversations_per_page == 25
        assert settings.mail_enabled() is False

    def test_mail_enabled(self):
        assert Settings(_env_file=None, smtp_address="smtp.local").mail_enabled() is True

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("CONVERSATIONS_PER_PAGE", "10")
        assert Settings(_env_file=None).conversations_per_page == 10
