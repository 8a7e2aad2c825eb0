"""Lifecycle event topics."""

from enum import Enum


class EventType(str, Enum):
    """Topics published by the conversation engine."""

    CONVERSATION_CREATED = "conversation.created"
    CONVERSATION_RESOLVED = "conversation.resolved"
    CONVERSATION_READ = "conversation.read"
    CONVERSATION_LOCK_TOGGLE = "conversation.lock_toggle"
    CONVERSATION_REOPENED = "conversation.reopened"
    ASSIGNEE_CHANGED = "assignee.changed"
    MESSAGE_CREATED = "message.created"
    FIRST_REPLY_CREATED = "first.reply.created"

    @property
    def handler_name(self) -> str:
        """Listener method name handling this topic."""
        return self.value.replace(".", "_")
