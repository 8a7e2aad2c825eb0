"""Tests for unread message computation."""

from datetime import datetime, timedelta

import pytest

from chatdesk.db import MessageRepository
from chatdesk.db.database_models import MessageDO, MessageType
from chatdesk.services.unread import (
    EPOCH,
    unread_boundary,
    unread_count,
    unread_incoming_messages,
    unread_messages,
)


T = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def add_message(db):
    """Factory adding a message at a given time."""
    def _add(conversation, created_at, message_type=MessageType.INCOMING, private=False):
        with db.transaction() as conn:
            return MessageRepository(conn).add(MessageDO(
                account_id=conversation.account_id,
                inbox_id=conversation.inbox_id,
                conversation_id=conversation.id,
                content="hi",
                message_type=message_type,
                private=private,
                created_at=created_at,
                updated_at=created_at
            ))
    return _add


class TestUnreadBoundary:
    """SUT: unread_boundary"""

    def test_next_whole_second(self):
        assert unread_boundary(T) == T + timedelta(seconds=1)

    def test_drops_sub_second_part(self):
        assert unread_boundary(T + timedelta(microseconds=500000)) == T + timedelta(seconds=1)

    def test_missing_watermark(self):
        assert unread_boundary(None) == EPOCH + timedelta(seconds=1)


class TestUnreadMessages:
    """SUT: unread_messages / unread_incoming_messages / unread_count"""

    def test_boundary(self, db, make_conversation, add_message, seed):
        """A message at the watermark is read, one a second later is not."""
        conv = make_conversation(seed)
        conv.agent_last_seen_at = T
        add_message(conv, T)
        later = add_message(conv, T + timedelta(seconds=1))

        with db.transaction() as conn:
            assert [m.id for m in unread_messages(conn, conv)] == [later.id]

    def test_same_second_is_read(self, db, make_conversation, add_message, seed):
        conv = make_conversation(seed)
        conv.agent_last_seen_at = T
        add_message(conv, T + timedelta(milliseconds=999))
        with db.transaction() as conn:
            assert unread_count(conn, conv) == 0

    def test_never_seen(self, db, make_conversation, add_message, seed):
        conv = make_conversation(seed)
        add_message(conv, T)
        add_message(conv, T + timedelta(minutes=1))
        with db.transaction() as conn:
            assert unread_count(conn, conv) == 2

    def test_excludes_activity_and_private(self, db, make_conversation, add_message, seed):
        conv = make_conversation(seed)
        add_message(conv, T, message_type=MessageType.ACTIVITY)
        add_message(conv, T, private=True)
        with db.transaction() as conn:
            assert unread_messages(conn, conv) == []

    def test_incoming_only(self, db, make_conversation, add_message, seed):
        conv = make_conversation(seed)
        incoming = add_message(conv, T)
        add_message(conv, T, message_type=MessageType.OUTGOING)
        with db.transaction() as conn:
            assert unread_count(conn, conv) == 2
            assert [m.id for m in unread_incoming_messages(conn, conv)] == [incoming.id]

    def test_idempotent(self, db, make_conversation, add_message, seed):
        conv = make_conversation(seed)
        add_message(conv, T)
        with db.transaction() as conn:
            first = [m.id for m in unread_messages(conn, conv)]
            second = [m.id for m in unread_messages(conn, conv)]
        assert first == second
