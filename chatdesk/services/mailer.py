"""Assignment notification mail."""

import smtplib
from email.message import EmailMessage
from typing import Optional, Protocol

from ..db.database_models import ConversationDO, UserDO
from ..utils.logger import get_app_logger


class Mailer(Protocol):
    def conversation_assigned(self, conversation: ConversationDO, assignee: UserDO) -> None:
        ...


class SmtpMailer:
    """Sends mail through a plain SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int = 25,
        sender: str = "notifications@chatdesk.local",
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10.0
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.timeout = timeout
        self.logger = get_app_logger("notifications")

    def conversation_assigned(self, conversation: ConversationDO, assignee: UserDO) -> None:
        message = EmailMessage()
        message["Subject"] = f"#{conversation.display_id} - Assigned to You"
        message["From"] = self.sender
        message["To"] = assignee.email
        message.set_content(
            f"Hi {assignee.name},\n\n"
            f"Conversation #{conversation.display_id} has been assigned to you.\n"
        )
        self.deliver(message)

    def deliver(self, message: EmailMessage):
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.ehlo()
            if self.username and self.password:
                server.starttls()
                server.ehlo()
                server.login(self.username, self.password)
            server.send_message(message)
        self.logger.info(f"Delivered '{message['Subject']}' to {message['To']}")
