"""Tests for MessageService."""

import pytest

from chatdesk.context import SYSTEM_CONTEXT, RequestContext
from chatdesk.db import AccountRepository
from chatdesk.db.database_models import (
    AccountDO,
    AttachmentDO,
    ConversationStatus,
    FileType,
    MessageDO,
    MessageType,
)
from chatdesk.errors import ValidationError
from chatdesk.events import EventType


def _message(conversation, message_type=MessageType.INCOMING, **overrides):
    """Factory for MessageDO belonging to a conversation."""
    defaults = dict(
        account_id=conversation.account_id,
        inbox_id=conversation.inbox_id,
        conversation_id=conversation.id,
        content="hello",
        message_type=message_type
    )
    defaults.update(overrides)
    return MessageDO(**defaults)


class TestMessageService:
    """Tests for MessageService."""

    class TestCreateMessage:
        """SUT: MessageService.create_message"""

        def test_persists_and_fires(self, messages, make_conversation, recorder, seed):
            conv = make_conversation(seed)
            created = messages.create_message(SYSTEM_CONTEXT, _message(conv))

            assert created.id is not None
            assert [m.id for m in messages.list_messages(conv.id)] == [created.id]
            assert recorder.topics == [EventType.MESSAGE_CREATED]
            assert recorder.events[0]["message"].id == created.id

        def test_bumps_last_activity(self, messages, conversations, make_conversation, seed):
            conv = make_conversation(seed)
            created = messages.create_message(SYSTEM_CONTEXT, _message(conv))
            assert conversations.get(conv.id).last_activity_at == created.created_at

        def test_stores_attachment(self, messages, make_conversation, seed):
            conv = make_conversation(seed)
            created = messages.create_message(
                SYSTEM_CONTEXT,
                _message(conv),
                attachment=AttachmentDO(account_id=conv.account_id, file_type=FileType.FILE, external_url="s3://x")
            )
            attachment = messages.get_attachment(created.id)
            assert attachment.file_type == FileType.FILE
            assert attachment.message_id == created.id

        @pytest.mark.parametrize("field_name", ["account_id", "inbox_id", "conversation_id"])
        def test_missing_reference(self, messages, make_conversation, recorder, seed, field_name):
            conv = make_conversation(seed)
            with pytest.raises(ValidationError) as exc_info:
                messages.create_message(SYSTEM_CONTEXT, _message(conv, **{field_name: 999}))
            assert exc_info.value.field == field_name
            assert messages.list_messages(conv.id) == []
            assert recorder.topics == []

        def test_missing_conversation_id(self, messages, make_conversation, seed):
            conv = make_conversation(seed)
            with pytest.raises(ValidationError):
                messages.create_message(SYSTEM_CONTEXT, _message(conv, conversation_id=None))

        def test_rejects_foreign_account_and_inbox(self, db, messages, make_conversation, make_inbox, recorder, seed):
            conv = make_conversation(seed)
            with db.transaction() as conn:
                other_account = AccountRepository(conn).create(AccountDO(name="Globex"))
            other_inbox = make_inbox(other_account.id, name="Globex Web")

            with pytest.raises(ValidationError) as exc_info:
                messages.create_message(
                    SYSTEM_CONTEXT,
                    _message(conv, account_id=other_account.id, inbox_id=other_inbox.id)
                )
            assert exc_info.value.field == "account_id"
            assert messages.list_messages(conv.id) == []
            assert recorder.topics == []

        def test_rejects_sibling_inbox(self, messages, make_conversation, make_inbox, recorder, seed):
            conv = make_conversation(seed)
            sibling = make_inbox(seed.account.id, name="Email")

            with pytest.raises(ValidationError) as exc_info:
                messages.create_message(SYSTEM_CONTEXT, _message(conv, inbox_id=sibling.id))
            assert exc_info.value.field == "inbox_id"
            assert messages.list_messages(conv.id) == []
            assert recorder.topics == []

    class TestReopen:
        """SUT: MessageService.create_message on a resolved conversation"""

        def test_incoming_reopens(self, messages, conversations, make_conversation, recorder, seed):
            conv = make_conversation(seed, status=ConversationStatus.RESOLVED)
            messages.create_message(SYSTEM_CONTEXT, _message(conv))

            assert conversations.get(conv.id).status == ConversationStatus.OPEN
            assert recorder.topics == [EventType.CONVERSATION_REOPENED, EventType.MESSAGE_CREATED]

        def test_reopen_fires_once(self, messages, make_conversation, recorder, seed):
            conv = make_conversation(seed, status=ConversationStatus.RESOLVED)
            messages.create_message(SYSTEM_CONTEXT, _message(conv))
            messages.create_message(SYSTEM_CONTEXT, _message(conv))
            assert len(recorder.of(EventType.CONVERSATION_REOPENED)) == 1

        def test_reopen_records_activity(self, messages, make_conversation, recorder, seed):
            conv = make_conversation(seed, status=ConversationStatus.RESOLVED)
            context = RequestContext(actor=seed.agents[0])
            messages.create_message(context, _message(conv))

            assert recorder.topics == [
                EventType.MESSAGE_CREATED,
                EventType.CONVERSATION_REOPENED,
                EventType.MESSAGE_CREATED,
            ]
            assert recorder.events[0]["message"].content == "Conversation was marked open by Agent 1"

        def test_reopened_event_carries_open_conversation(self, messages, make_conversation, recorder, seed):
            conv = make_conversation(seed, status=ConversationStatus.RESOLVED)
            messages.create_message(SYSTEM_CONTEXT, _message(conv))
            reopened = recorder.of(EventType.CONVERSATION_REOPENED)[0]
            assert reopened["conversation"].status == ConversationStatus.OPEN

        @pytest.mark.parametrize("overrides", [
            {"message_type": MessageType.OUTGOING},
            {"private": True},
        ])
        def test_does_not_reopen(self, messages, conversations, make_conversation, recorder, seed, overrides):
            conv = make_conversation(seed, status=ConversationStatus.RESOLVED)
            messages.create_message(SYSTEM_CONTEXT, _message(conv, **overrides))
            assert conversations.get(conv.id).status == ConversationStatus.RESOLVED
            assert recorder.of(EventType.CONVERSATION_REOPENED) == []

        def test_open_conversation_untouched(self, messages, make_conversation, recorder, seed):
            conv = make_conversation(seed)
            messages.create_message(SYSTEM_CONTEXT, _message(conv))
            assert recorder.of(EventType.CONVERSATION_REOPENED) == []

    class TestFirstReply:
        """SUT: MessageService.create_message first outgoing message"""

        def test_first_outgoing_fires_once(self, messages, make_conversation, recorder, seed):
            conv = make_conversation(seed)
            agent = seed.agents[0]
            messages.create_message(SYSTEM_CONTEXT, _message(conv))
            messages.create_message(SYSTEM_CONTEXT, _message(conv, MessageType.OUTGOING, user_id=agent.id))
            messages.create_message(SYSTEM_CONTEXT, _message(conv, MessageType.OUTGOING, user_id=agent.id))

            first_replies = recorder.of(EventType.FIRST_REPLY_CREATED)
            assert len(first_replies) == 1
            assert first_replies[0]["message"].user_id == agent.id

        def test_fires_after_message_created(self, messages, make_conversation, recorder, seed):
            conv = make_conversation(seed)
            messages.create_message(SYSTEM_CONTEXT, _message(conv, MessageType.OUTGOING))
            assert recorder.topics == [EventType.MESSAGE_CREATED, EventType.FIRST_REPLY_CREATED]

        def test_incoming_never_counts(self, messages, make_conversation, recorder, seed):
            conv = make_conversation(seed)
            messages.create_message(SYSTEM_CONTEXT, _message(conv))
            assert recorder.of(EventType.FIRST_REPLY_CREATED) == []
