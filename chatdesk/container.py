"""Wires the engine's collaborators together."""

from dataclasses import dataclass
from typing import Optional

from .config import Settings
from .db import DatabaseConnection
from .events import EventDispatcher
from .listeners import AssignmentNotifier, EventStreamListener, ReportingListener
from .services import (
    ConversationService,
    EventStream,
    Mailer,
    MessageService,
    RoundRobinService,
    SmtpMailer,
)
from .utils.logger import get_app_logger


@dataclass
class Container:
    """Everything a request handler needs, built once per process."""

    settings: Settings
    db: DatabaseConnection
    dispatcher: EventDispatcher
    round_robin: RoundRobinService
    conversations: ConversationService
    messages: MessageService
    event_stream: EventStream
    notifier: AssignmentNotifier

    def shutdown(self):
        self.notifier.shutdown(wait=False)
        self.db.close()


def build_container(
    settings: Settings,
    db: Optional[DatabaseConnection] = None,
    mailer: Optional[Mailer] = None
) -> Container:
    """
    Build the services and subscribe the listeners, in this order: event
    stream, reporting, assignment notifier.

    Args:
        settings: Application settings
        db: Existing connection, opened from settings.database_path when omitted
        mailer: Mailer override, SMTP from settings when omitted

    Returns:
        Ready container
    """
    logger = get_app_logger()
    db = db or DatabaseConnection(settings.database_path)
    dispatcher = EventDispatcher()

    round_robin = RoundRobinService(db, max_retries=settings.assignment_max_retries)
    conversations = ConversationService(db, dispatcher, round_robin)
    messages = MessageService(db, dispatcher, conversations)

    if mailer is None and settings.mail_enabled():
        mailer = SmtpMailer(
            settings.smtp_address,
            settings.smtp_port,
            sender=settings.mailer_sender,
            username=settings.smtp_username,
            password=settings.smtp_password
        )

    event_stream = EventStream(queue_size=settings.event_stream_queue_size)
    notifier = AssignmentNotifier(
        db,
        mailer,
        enabled=settings.mail_enabled(),
        max_workers=settings.notification_workers
    )

    for listener in (EventStreamListener(db, event_stream), ReportingListener(db), notifier):
        topics = dispatcher.subscribe_listener(listener)
        logger.debug(f"Subscribed {type(listener).__name__} to {', '.join(t.value for t in topics)}")

    return Container(
        settings=settings,
        db=db,
        dispatcher=dispatcher,
        round_robin=round_robin,
        conversations=conversations,
        messages=messages,
        event_stream=event_stream,
        notifier=notifier
    )
