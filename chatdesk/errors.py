"""Error types raised by the conversation engine."""

from typing import Optional


class ChatdeskError(Exception):
    """Base class for engine errors."""


class ValidationError(ChatdeskError):
    """A record is missing a required reference or points at the wrong account."""

    def __init__(self, record: str, field: str, reason: str = "must exist"):
        self.record = record
        self.field = field
        self.reason = reason
        super().__init__(f"{record}.{field} {reason}")


class PersistenceConflict(ChatdeskError):
    """A concurrent writer changed the row between read and write."""


class DispatchSubscriberFailure(ChatdeskError):
    """One subscriber failed while handling an event."""

    def __init__(self, topic, subscriber: str, error: Optional[BaseException] = None):
        self.topic = topic
        self.subscriber = subscriber
        self.error = error
        super().__init__(f"Subscriber {subscriber} failed on {topic}: {error}")
