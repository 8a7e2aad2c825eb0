"""Conversation lifecycle: status, lock, assignee and watermarks."""

import dataclasses
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import duckdb

from ..context import RequestContext
from ..db import (
    DatabaseConnection,
    AccountRepository,
    ContactRepository,
    ConversationRepository,
    InboxRepository,
    MessageRepository,
    UserRepository,
)
from ..db.database_models import ConversationDO, ConversationStatus, MessageDO, MessageType
from ..errors import ValidationError
from ..events import EventDispatcher, EventType
from ..utils.logger import get_app_logger
from .round_robin import RoundRobinService


# Dimensions accepted by ConversationService.update()
MUTABLE_FIELDS = ("status", "locked", "assignee_id", "user_last_seen_at", "agent_last_seen_at")

AGENT_VIEWER = "agent"
USER_VIEWER = "user"

PendingEvent = Tuple[EventType, Dict[str, Any]]


class ConversationService:
    """
    State machine of a conversation.

    Every mutation commits first; the events it produced are handed to the
    dispatcher after the commit and outside the database lock. Activity
    messages are written in the same transaction as the change they record.
    """

    def __init__(
        self,
        db: DatabaseConnection,
        dispatcher: EventDispatcher,
        round_robin: Optional[RoundRobinService] = None
    ):
        self.db = db
        self.dispatcher = dispatcher
        self.round_robin = round_robin
        self.logger = get_app_logger()

    def get(self, conversation_id: int) -> Optional[ConversationDO]:
        with self.db.transaction() as conn:
            return ConversationRepository(conn).get(conversation_id)

    def get_by_display_id(self, account_id: int, display_id: int) -> Optional[ConversationDO]:
        with self.db.transaction() as conn:
            return ConversationRepository(conn).get_by_display_id(account_id, display_id)

    def create_conversation(
        self,
        context: RequestContext,
        account_id: int,
        inbox_id: int,
        contact_id: int,
        assignee_id: Optional[int] = None,
        status: ConversationStatus = ConversationStatus.OPEN
    ) -> ConversationDO:
        """
        Open a new conversation between a contact and an inbox.

        Unassigned conversations are handed to the inbox's round robin once
        the insert has committed. A failing assignment is logged and leaves
        the conversation unassigned.

        Raises:
            ValidationError: account, inbox, contact or assignee is invalid
        """
        with self.db.transaction() as conn:
            self._validate_references(conn, account_id, inbox_id, contact_id)
            if assignee_id is not None:
                self._validate_assignee(conn, account_id, inbox_id, assignee_id)

            now = datetime.utcnow()
            conversation = ConversationDO(
                account_id=account_id,
                inbox_id=inbox_id,
                contact_id=contact_id,
                display_id=AccountRepository(conn).next_display_id(account_id),
                status=ConversationStatus.parse(status),
                locked=False,
                assignee_id=assignee_id,
                created_at=now,
                updated_at=now,
                last_activity_at=now
            )
            ConversationRepository(conn).create(conversation)

            self._publish([(EventType.CONVERSATION_CREATED, {"conversation": self._snapshot(conversation)})], now)
            if assignee_id is None:
                self.db.after_commit(lambda: self._assign_round_robin(context, conversation))

        return self.get(conversation.id) or conversation

    def update(
        self,
        context: RequestContext,
        conversation_id: int,
        changes: Dict[str, Any]
    ) -> Optional[ConversationDO]:
        """
        Apply changes to one or more dimensions of a conversation.

        One event is queued per changed dimension: resolved status, user
        watermark, lock and assignee. With an actor in the context, status
        and assignee changes are recorded as activity messages.

        Args:
            context: Request context carrying the acting user
            conversation_id: Conversation ID
            changes: Values keyed by a name in MUTABLE_FIELDS

        Returns:
            The updated conversation, or None if nothing was persisted

        Raises:
            ValueError: a key is not a mutable field
            ValidationError: the new assignee is not an agent of the inbox
        """
        unknown = set(changes) - set(MUTABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unsupported conversation fields: {', '.join(sorted(unknown))}")

        with self.db.transaction() as conn:
            repo = ConversationRepository(conn)
            before = repo.get(conversation_id)
            if before is None:
                return None

            changes = dict(changes)
            if "status" in changes:
                changes["status"] = ConversationStatus.parse(changes["status"])
            if changes.get("assignee_id") is not None:
                self._validate_assignee(conn, before.account_id, before.inbox_id, changes["assignee_id"])

            changed = {
                name: value for name, value in changes.items()
                if getattr(before, name) != value
            }
            if not changed:
                return before

            if not repo.update(conversation_id, changed):
                return None
            after = repo.get(conversation_id)

            now = datetime.utcnow()
            events = self._transition_events(after, changed)
            events.extend(self._create_activities(conn, context, after, changed, now))
            self._publish(events, now)

        self.logger.info(
            f"Updated conversation {after.display_id} of account {after.account_id}: "
            f"{', '.join(sorted(changed))}"
        )
        return after

    def update_assignee(self, context: RequestContext, conversation_id: int, agent_id: Optional[int]) -> bool:
        return self.update(context, conversation_id, {"assignee_id": agent_id}) is not None

    def toggle_status(self, context: RequestContext, conversation_id: int) -> bool:
        """Resolve an open or pending conversation, reopen a resolved one."""
        with self.db.transaction() as conn:
            conversation = ConversationRepository(conn).get(conversation_id)
            if conversation is None:
                return False
            if conversation.status == ConversationStatus.RESOLVED:
                status = ConversationStatus.OPEN
            else:
                status = ConversationStatus.RESOLVED
            return self.update(context, conversation_id, {"status": status}) is not None

    def lock(self, context: RequestContext, conversation_id: int) -> bool:
        return self.update(context, conversation_id, {"locked": True}) is not None

    def unlock(self, context: RequestContext, conversation_id: int) -> bool:
        return self.update(context, conversation_id, {"locked": False}) is not None

    def mark_seen(
        self,
        context: RequestContext,
        conversation_id: int,
        viewer: str = AGENT_VIEWER,
        seen_at: Optional[datetime] = None
    ) -> bool:
        """Move the agent or user watermark to ``seen_at`` (default now)."""
        if viewer not in (AGENT_VIEWER, USER_VIEWER):
            raise ValueError(f"Unknown viewer: {viewer}")
        field_name = f"{viewer}_last_seen_at"
        return self.update(context, conversation_id, {field_name: seen_at or datetime.utcnow()}) is not None

    def _assign_round_robin(self, context: RequestContext, conversation: ConversationDO):
        if self.round_robin is None:
            return
        try:
            agent_id = self.round_robin.available_agent(conversation.inbox_id)
            if agent_id is None:
                self.logger.info(f"No agent available for conversation {conversation.display_id}")
                return
            self.update_assignee(context, conversation.id, agent_id)
        except Exception:
            self.logger.exception(f"Round robin assignment failed for conversation {conversation.id}")

    def _transition_events(self, conversation: ConversationDO, changed: Dict[str, Any]) -> List[PendingEvent]:
        payload = {"conversation": self._snapshot(conversation)}
        conditions = [
            (EventType.CONVERSATION_RESOLVED,
             "status" in changed and conversation.status == ConversationStatus.RESOLVED),
            (EventType.CONVERSATION_READ, "user_last_seen_at" in changed),
            (EventType.CONVERSATION_LOCK_TOGGLE, "locked" in changed),
            (EventType.ASSIGNEE_CHANGED, "assignee_id" in changed),
        ]
        return [(topic, payload) for topic, condition in conditions if condition]

    def _create_activities(
        self,
        conn: duckdb.DuckDBPyConnection,
        context: RequestContext,
        conversation: ConversationDO,
        changed: Dict[str, Any],
        now: datetime
    ) -> List[PendingEvent]:
        if context.actor is None:
            return []

        contents = []
        if "status" in changed:
            contents.append(f"Conversation was marked {conversation.status.label} by {context.actor_name}")
        if changed.get("assignee_id") is not None:
            assignee = UserRepository(conn).get(conversation.assignee_id)
            contents.append(f"Assigned to {assignee.name} by {context.actor_name}")

        events = []
        messages = MessageRepository(conn)
        for content in contents:
            activity = messages.add(MessageDO(
                account_id=conversation.account_id,
                inbox_id=conversation.inbox_id,
                conversation_id=conversation.id,
                content=content,
                message_type=MessageType.ACTIVITY,
                created_at=now,
                updated_at=now
            ))
            events.append((EventType.MESSAGE_CREATED, {"message": activity, "conversation": self._snapshot(conversation)}))
        return events

    def _publish(self, events: List[PendingEvent], timestamp: datetime):
        """Dispatch events once the surrounding transaction commits."""
        for topic, payload in events:
            self.db.after_commit(
                lambda topic=topic, payload=payload: self.dispatcher.dispatch(topic, timestamp, **payload)
            )

    @staticmethod
    def _snapshot(conversation: ConversationDO) -> ConversationDO:
        return dataclasses.replace(conversation)

    @staticmethod
    def _validate_references(conn: duckdb.DuckDBPyConnection, account_id, inbox_id, contact_id):
        if account_id is None or AccountRepository(conn).get(account_id) is None:
            raise ValidationError("conversation", "account_id")
        inbox = InboxRepository(conn).get(inbox_id)
        if inbox is None or inbox.account_id != account_id:
            raise ValidationError("conversation", "inbox_id")
        contact = ContactRepository(conn).get(contact_id)
        if contact is None or contact.account_id != account_id:
            raise ValidationError("conversation", "contact_id")

    @staticmethod
    def _validate_assignee(conn: duckdb.DuckDBPyConnection, account_id: int, inbox_id: int, assignee_id: int):
        assignee = UserRepository(conn).get(assignee_id)
        if assignee is None or assignee.account_id != account_id:
            raise ValidationError("conversation", "assignee_id", "must belong to the account")
        if not InboxRepository(conn).is_member(inbox_id, assignee_id):
            raise ValidationError("conversation", "assignee_id", "must be an agent of the inbox")
