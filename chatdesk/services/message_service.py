"""Message creation and its conversation side effects."""

from datetime import datetime
from typing import List, Optional

from ..context import RequestContext
from ..db import (
    DatabaseConnection,
    AccountRepository,
    AttachmentRepository,
    ConversationRepository,
    InboxRepository,
    MessageRepository,
)
from ..db.database_models import AttachmentDO, ConversationDO, MessageDO, MessageType
from ..errors import ValidationError
from ..events import EventDispatcher, EventType
from ..utils.logger import get_app_logger
from .conversation_service import ConversationService


class MessageService:
    """Creates messages and drives the transitions they trigger."""

    def __init__(
        self,
        db: DatabaseConnection,
        dispatcher: EventDispatcher,
        conversations: ConversationService
    ):
        self.db = db
        self.dispatcher = dispatcher
        self.conversations = conversations
        self.logger = get_app_logger()

    def create_message(
        self,
        context: RequestContext,
        message: MessageDO,
        attachment: Optional[AttachmentDO] = None
    ) -> MessageDO:
        """
        Persist a message.

        In the same transaction an incoming message reopens a resolved
        conversation. After commit the events fire in order: the status
        change events, ``conversation.reopened``, ``message.created`` and,
        for the first outgoing message of the conversation,
        ``first.reply.created``.

        Args:
            context: Request context carrying the acting user
            message: Message to create
            attachment: Optional attachment stored with the message

        Returns:
            The created message

        Raises:
            ValidationError: account, inbox or conversation is missing
        """
        with self.db.transaction() as conn:
            conversation = self._validate(conn, message)
            now = datetime.utcnow()
            message.created_at = message.created_at or now
            message.updated_at = message.updated_at or now

            MessageRepository(conn).add(message)
            if attachment is not None:
                attachment.message_id = message.id
                attachment.account_id = message.account_id
                AttachmentRepository(conn).add(attachment)

            conversations = ConversationRepository(conn)
            conversations.update(conversation.id, {"last_activity_at": message.created_at})

            if self._reopens(message, conversation):
                self.conversations.toggle_status(context, conversation.id)
                reopened = conversations.get(conversation.id)
                self._publish(EventType.CONVERSATION_REOPENED, now, conversation=reopened)
                self.logger.info(f"Reopened conversation {reopened.display_id} on incoming message {message.id}")
                conversation = reopened

            self._publish(EventType.MESSAGE_CREATED, now, message=message, conversation=conversation)

            if (
                message.message_type == MessageType.OUTGOING
                and MessageRepository(conn).count_by_type(conversation.id, MessageType.OUTGOING) == 1
            ):
                self._publish(EventType.FIRST_REPLY_CREATED, now, message=message, conversation=conversation)

        return message

    def list_messages(self, conversation_id: int) -> List[MessageDO]:
        """Messages of a conversation in chronological order."""
        with self.db.transaction() as conn:
            return MessageRepository(conn).get_by_conversation(conversation_id)

    def get_attachment(self, message_id: int) -> Optional[AttachmentDO]:
        with self.db.transaction() as conn:
            return AttachmentRepository(conn).get_by_message(message_id)

    @staticmethod
    def _reopens(message: MessageDO, conversation: ConversationDO) -> bool:
        return (
            message.message_type == MessageType.INCOMING
            and not message.private
            and conversation.is_resolved
        )

    def _publish(self, topic: EventType, timestamp: datetime, **payload):
        self.db.after_commit(lambda: self.dispatcher.dispatch(topic, timestamp, **payload))

    @staticmethod
    def _validate(conn, message: MessageDO) -> ConversationDO:
        if message.account_id is None or AccountRepository(conn).get(message.account_id) is None:
            raise ValidationError("message", "account_id")
        if message.inbox_id is None or InboxRepository(conn).get(message.inbox_id) is None:
            raise ValidationError("message", "inbox_id")
        if message.conversation_id is None:
            raise ValidationError("message", "conversation_id")
        conversation = ConversationRepository(conn).get(message.conversation_id)
        if conversation is None:
            raise ValidationError("message", "conversation_id")
        if message.account_id != conversation.account_id:
            raise ValidationError("message", "account_id")
        if message.inbox_id != conversation.inbox_id:
            raise ValidationError("message", "inbox_id")
        return conversation
