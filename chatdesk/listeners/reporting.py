"""Records reporting metrics from lifecycle events."""

from ..db import DatabaseConnection, ReportingEventRepository
from ..db.database_models import ReportingEventDO
from ..events import Event


CONVERSATION_CREATED = "conversation_created"
CONVERSATION_RESOLVED = "conversation_resolved"
FIRST_RESPONSE = "first_response"


class ReportingListener:
    def __init__(self, db: DatabaseConnection):
        self.db = db

    def conversation_created(self, event: Event):
        conversation = event["conversation"]
        self._record(CONVERSATION_CREATED, 1.0, conversation, event)

    def conversation_resolved(self, event: Event):
        conversation = event["conversation"]
        time_to_resolve = (event.timestamp - conversation.created_at).total_seconds()
        self._record(CONVERSATION_RESOLVED, time_to_resolve, conversation, event, user_id=conversation.assignee_id)

    def first_reply_created(self, event: Event):
        message = event["message"]
        conversation = event["conversation"]
        first_response = (message.created_at - conversation.created_at).total_seconds()
        self._record(FIRST_RESPONSE, first_response, conversation, event, user_id=message.user_id)

    def _record(self, name: str, value: float, conversation, event: Event, user_id=None):
        with self.db.transaction() as conn:
            ReportingEventRepository(conn).add(ReportingEventDO(
                name=name,
                value=max(value, 0.0),
                account_id=conversation.account_id,
                inbox_id=conversation.inbox_id,
                user_id=user_id,
                conversation_id=conversation.id,
                created_at=event.timestamp
            ))
