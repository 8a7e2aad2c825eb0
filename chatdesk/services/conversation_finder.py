"""Role-scoped conversation listing with badge counts."""

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, List, Optional

from ..db import DatabaseConnection, ConversationRepository, InboxRepository
from ..db.database_models import ConversationDO, ConversationStatus, UserDO
from ..db.repositories.conversation import ASSIGNED_TO, UNASSIGNED


DEFAULT_STATUS = ConversationStatus.OPEN
_LEADING_INT = re.compile(r"\s*[+-]?\d+")


class AssigneeType(IntEnum):
    ME = 0
    UNASSIGNED = 1
    ALL = 2


def parse_assignee_type(raw: Any) -> AssigneeType:
    """
    Map a requested assignee type id onto an AssigneeType.

    Strings are read up to their leading integer, so "1.0" is UNASSIGNED and
    "2abc" is ALL. Anything that does not name one of the known ids (absent,
    non-numeric, negative, out of range) falls back to ME.
    """
    if isinstance(raw, int):
        value = raw
    else:
        match = _LEADING_INT.match(raw) if isinstance(raw, str) else None
        if match is None:
            return AssigneeType.ME
        value = int(match.group(0))
    try:
        return AssigneeType(value)
    except ValueError:
        return AssigneeType.ME


@dataclass
class ConversationCounts:
    mine: int = 0
    unassigned: int = 0
    all: int = 0


@dataclass
class FinderResult:
    conversations: List[ConversationDO] = field(default_factory=list)
    counts: ConversationCounts = field(default_factory=ConversationCounts)


class ConversationFinder:
    """
    Lists the conversations a user may see.

    Scope is narrowed by inbox, then status; the three counts are taken on
    that scope before the assignee type filter is applied, so they are the
    same whichever assignee type was requested.
    """

    def __init__(
        self,
        db: DatabaseConnection,
        current_user: UserDO,
        inbox_id: Optional[int] = None,
        assignee_type_id: Any = None,
        status: Any = None,
        page: Optional[int] = None,
        per_page: int = 25
    ):
        self.db = db
        self.current_user = current_user
        self.inbox_id = inbox_id
        self.assignee_type = parse_assignee_type(assignee_type_id)
        self.status = ConversationStatus.parse(status) if status not in (None, "") else DEFAULT_STATUS
        self.page = page
        self.per_page = per_page

    def perform(self) -> FinderResult:
        with self.db.transaction() as conn:
            conversations = ConversationRepository(conn)
            inbox_ids = self._inbox_ids(InboxRepository(conn))
            scope = dict(
                account_id=self.current_user.account_id,
                inbox_ids=inbox_ids,
                status=self.status,
            )

            counts = ConversationCounts(
                mine=conversations.count(**scope, assignee=ASSIGNED_TO, user_id=self.current_user.id),
                unassigned=conversations.count(**scope, assignee=UNASSIGNED),
                all=conversations.count(**scope),
            )

            limit, offset = None, 0
            if self.page:
                limit = self.per_page
                offset = (max(int(self.page), 1) - 1) * self.per_page

            results = conversations.search(
                **scope,
                **self._assignee_filter(),
                limit=limit,
                offset=offset
            )

        return FinderResult(conversations=results, counts=counts)

    def _inbox_ids(self, inboxes: InboxRepository) -> List[int]:
        account_id = self.current_user.account_id
        if self.inbox_id is not None:
            inbox = inboxes.get(self.inbox_id)
            return [inbox.id] if inbox and inbox.account_id == account_id else []
        if self.current_user.is_administrator:
            return inboxes.list_ids_by_account(account_id)
        if self.current_user.is_agent:
            return inboxes.list_ids_for_member(self.current_user.id)
        return []

    def _assignee_filter(self) -> dict:
        if self.assignee_type == AssigneeType.ME:
            return {"assignee": ASSIGNED_TO, "user_id": self.current_user.id}
        if self.assignee_type == AssigneeType.UNASSIGNED:
            return {"assignee": UNASSIGNED}
        return {}
