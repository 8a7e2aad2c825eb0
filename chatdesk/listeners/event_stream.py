"""Forwards lifecycle events to connected clients."""

from ..db import DatabaseConnection
from ..events import Event
from ..services.event_stream import EventStream
from ..services.presenters import conversation_push_data, lock_event_data, message_push_data
from ..utils.logger import get_app_logger


class EventStreamListener:
    """Publishes each event as a frame on the account's event stream."""

    def __init__(self, db: DatabaseConnection, stream: EventStream):
        self.db = db
        self.stream = stream
        self.logger = get_app_logger()

    def conversation_created(self, event: Event):
        self._conversation_frame(event)

    def conversation_read(self, event: Event):
        self._conversation_frame(event)

    def conversation_resolved(self, event: Event):
        self._conversation_frame(event)

    def conversation_reopened(self, event: Event):
        self._conversation_frame(event)

    def assignee_changed(self, event: Event):
        self._conversation_frame(event)

    def conversation_lock_toggle(self, event: Event):
        conversation = event["conversation"]
        self.stream.publish(conversation.account_id, event.topic.value, lock_event_data(conversation))

    def message_created(self, event: Event):
        message = event["message"]
        with self.db.transaction() as conn:
            data = message_push_data(conn, message, event.get("conversation"))
        self.stream.publish(message.account_id, event.topic.value, data)

    def _conversation_frame(self, event: Event):
        conversation = event["conversation"]
        with self.db.transaction() as conn:
            data = conversation_push_data(conn, conversation)
        self.stream.publish(conversation.account_id, event.topic.value, data)
