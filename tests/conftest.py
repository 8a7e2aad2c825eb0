"""Shared fixtures for engine tests."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import pytest

from chatdesk.context import RequestContext
from chatdesk.db import (
    DatabaseConnection,
    AccountRepository,
    ContactRepository,
    ConversationRepository,
    InboxRepository,
    UserRepository,
)
from chatdesk.db.database_models import (
    AccountDO,
    ContactDO,
    ConversationDO,
    ConversationStatus,
    InboxDO,
    UserDO,
    UserRole,
)
from chatdesk.events import EventDispatcher, EventType
from chatdesk.services import ConversationService, MessageService, RoundRobinService


class EventRecorder:
    """Subscribes to every topic and keeps the events in arrival order."""

    def __init__(self, dispatcher: EventDispatcher):
        self.events = []
        for topic in EventType:
            dispatcher.subscribe(topic, self.events.append)

    @property
    def topics(self) -> List[EventType]:
        return [event.topic for event in self.events]

    def of(self, topic: EventType):
        return [event for event in self.events if event.topic == topic]

    def clear(self):
        self.events.clear()


@dataclass
class Seed:
    """One account with an administrator, an inbox of agents and a contact."""

    account: AccountDO
    admin: UserDO
    inbox: InboxDO
    contact: ContactDO
    agents: List[UserDO] = field(default_factory=list)

    @property
    def admin_context(self) -> RequestContext:
        return RequestContext(actor=self.admin)


@pytest.fixture
def db(tmp_path):
    """Provide a fresh database connection."""
    conn = DatabaseConnection(str(tmp_path / "test.db"))
    yield conn
    conn.close()


@pytest.fixture
def dispatcher():
    return EventDispatcher()


@pytest.fixture
def recorder(dispatcher):
    return EventRecorder(dispatcher)


@pytest.fixture
def round_robin(db):
    return RoundRobinService(db, max_retries=5)


@pytest.fixture
def conversations(db, dispatcher, round_robin):
    return ConversationService(db, dispatcher, round_robin)


@pytest.fixture
def messages(db, dispatcher, conversations):
    return MessageService(db, dispatcher, conversations)


@pytest.fixture
def make_user(db):
    """Factory creating users."""
    def _make(account_id: int, name: str, role: UserRole = UserRole.AGENT) -> UserDO:
        with db.transaction() as conn:
            return UserRepository(conn).create(UserDO(
                account_id=account_id,
                name=name,
                email=f"{name.lower().replace(' ', '.')}@example.com",
                role=role.value
            ))
    return _make


@pytest.fixture
def make_inbox(db):
    """Factory creating an inbox with its agent pool."""
    def _make(account_id: int, name: str = "Website", agents: Optional[List[UserDO]] = None) -> InboxDO:
        with db.transaction() as conn:
            inboxes = InboxRepository(conn)
            inbox = inboxes.create(InboxDO(account_id=account_id, name=name))
            for agent in agents or []:
                inboxes.add_member(inbox.id, agent.id)
        return inbox
    return _make


@pytest.fixture
def make_conversation(db):
    """
    Factory inserting a conversation directly, bypassing the service.

    No events fire and no round robin runs.
    """
    def _make(
        seed: Seed,
        assignee: Optional[UserDO] = None,
        status: ConversationStatus = ConversationStatus.OPEN,
        inbox: Optional[InboxDO] = None,
        last_activity_at: Optional[datetime] = None
    ) -> ConversationDO:
        inbox = inbox or seed.inbox
        now = datetime.utcnow()
        with db.transaction() as conn:
            return ConversationRepository(conn).create(ConversationDO(
                account_id=seed.account.id,
                inbox_id=inbox.id,
                contact_id=seed.contact.id,
                display_id=AccountRepository(conn).next_display_id(seed.account.id),
                assignee_id=assignee.id if assignee else None,
                status=status,
                created_at=now,
                updated_at=now,
                last_activity_at=last_activity_at or now
            ))
    return _make


@pytest.fixture
def seed(db, make_user, make_inbox):
    with db.transaction() as conn:
        account = AccountRepository(conn).create(AccountDO(name="Acme"))
        contact = ContactRepository(conn).create(ContactDO(
            account_id=account.id, name="Carol Contact", email="carol@example.org"
        ))

    admin = make_user(account.id, "Ada Admin", UserRole.ADMINISTRATOR)
    agents = [make_user(account.id, f"Agent {n}") for n in (1, 2, 3)]
    inbox = make_inbox(account.id, agents=agents)

    return Seed(account=account, admin=admin, inbox=inbox, contact=contact, agents=agents)
