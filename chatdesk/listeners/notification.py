"""Mails agents about conversations assigned to them."""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from ..db import DatabaseConnection, UserRepository
from ..events import Event
from ..services.mailer import Mailer
from ..utils.logger import get_app_logger


class AssignmentNotifier:
    """
    Sends the assignment mail in the background.

    Delivery never blocks the dispatching request and a failed delivery is
    only logged.
    """

    def __init__(
        self,
        db: DatabaseConnection,
        mailer: Optional[Mailer],
        enabled: bool = True,
        max_workers: int = 2
    ):
        self.db = db
        self.mailer = mailer
        self.enabled = enabled and mailer is not None
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notifier")
        self.logger = get_app_logger("notifications")

    def assignee_changed(self, event: Event) -> Optional[Future]:
        conversation = event["conversation"]
        if not self.enabled or conversation.assignee_id is None:
            return None

        with self.db.transaction() as conn:
            assignee = UserRepository(conn).get(conversation.assignee_id)
        if assignee is None:
            return None

        future = self.executor.submit(self.mailer.conversation_assigned, conversation, assignee)
        future.add_done_callback(
            lambda f: self._log_outcome(f, conversation.display_id, assignee.email)
        )
        return future

    def _log_outcome(self, future: Future, display_id: int, email: str):
        error = future.exception()
        if error is not None:
            self.logger.error(f"Assignment mail for conversation {display_id} to {email} failed: {error}")
        else:
            self.logger.debug(f"Assignment mail for conversation {display_id} sent to {email}")

    def shutdown(self, wait: bool = True):
        self.executor.shutdown(wait=wait)
