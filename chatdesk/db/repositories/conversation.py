"""Conversation repository for database operations."""

from datetime import datetime
from typing import Optional, List, Dict, Any, Sequence, Tuple
from .base import BaseRepository
from ..database_models.conversation import ConversationDO, ConversationStatus


# Assignee filters understood by search() and count()
ASSIGNED_TO = "assigned_to"
UNASSIGNED = "unassigned"

UPDATABLE_FIELDS = (
    "status",
    "locked",
    "assignee_id",
    "user_last_seen_at",
    "agent_last_seen_at",
    "last_activity_at",
)


class ConversationRepository(BaseRepository):
    """Repository for Conversation CRUD operations."""

    _COLUMNS = """
        id, account_id, display_id, inbox_id, contact_id, assignee_id, status, locked,
        user_last_seen_at, agent_last_seen_at, created_at, updated_at, last_activity_at
    """

    def create(self, conversation: ConversationDO) -> ConversationDO:
        """
        Insert a conversation whose display id is already allocated.

        Args:
            conversation: ConversationDO instance

        Returns:
            The conversation with its internal id set
        """
        conversation.id = self._next_id("conversations_id_seq")
        self.conn.execute("""
            INSERT INTO conversations (
                id, account_id, display_id, inbox_id, contact_id, assignee_id, status, locked,
                user_last_seen_at, agent_last_seen_at, created_at, updated_at, last_activity_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, [
            conversation.id,
            conversation.account_id,
            conversation.display_id,
            conversation.inbox_id,
            conversation.contact_id,
            conversation.assignee_id,
            int(conversation.status),
            conversation.locked,
            conversation.user_last_seen_at,
            conversation.agent_last_seen_at,
            conversation.created_at,
            conversation.updated_at,
            conversation.last_activity_at
        ])
        self.logger.info(
            f"Created conversation record: {conversation.id} "
            f"(account {conversation.account_id}, display id {conversation.display_id})"
        )
        return conversation

    def get(self, conversation_id: int) -> Optional[ConversationDO]:
        """
        Get conversation by internal ID.

        Args:
            conversation_id: Conversation ID

        Returns:
            ConversationDO instance or None
        """
        result = self.conn.execute(
            f"SELECT {self._COLUMNS} FROM conversations WHERE id = ?", [conversation_id]
        ).fetchone()
        return self._to_do(result) if result else None

    def get_by_display_id(self, account_id: int, display_id: int) -> Optional[ConversationDO]:
        result = self.conn.execute(
            f"SELECT {self._COLUMNS} FROM conversations WHERE account_id = ? AND display_id = ?",
            [account_id, display_id]
        ).fetchone()
        return self._to_do(result) if result else None

    def list_display_ids(self, account_id: int) -> List[int]:
        results = self.conn.execute("""
            SELECT display_id FROM conversations
            WHERE account_id = ?
            ORDER BY id
        """, [account_id]).fetchall()
        return [row[0] for row in results]

    def update(self, conversation_id: int, updates: Dict[str, Any]) -> bool:
        """
        Update conversation fields.

        Args:
            conversation_id: Conversation ID
            updates: Dictionary of fields to update

        Returns:
            True if the row was written, False otherwise
        """
        set_clauses = []
        params = []

        for name in UPDATABLE_FIELDS:
            if name in updates:
                value = updates[name]
                if name == "status":
                    value = int(value)
                set_clauses.append(f"{name} = ?")
                params.append(value)

        if not set_clauses:
            return self.get(conversation_id) is not None

        set_clauses.append("updated_at = ?")
        params.append(updates.get("updated_at") or datetime.utcnow())
        params.append(conversation_id)
        query = f"UPDATE conversations SET {', '.join(set_clauses)} WHERE id = ?"

        return self._changed(query, params) == 1

    def search(
        self,
        account_id: int,
        inbox_ids: Sequence[int],
        status: Optional[ConversationStatus] = None,
        assignee: Optional[str] = None,
        user_id: Optional[int] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[ConversationDO]:
        """
        List conversations of an account, latest activity first.

        Args:
            account_id: Account ID
            inbox_ids: Inboxes in scope
            status: Optional status filter
            assignee: None, ASSIGNED_TO (with user_id) or UNASSIGNED
            user_id: Assignee for the ASSIGNED_TO filter
            limit: Optional page size
            offset: Rows to skip

        Returns:
            List of ConversationDO instances
        """
        where, params = self._where(account_id, inbox_ids, status, assignee, user_id)
        query = f"""
            SELECT {self._COLUMNS} FROM conversations
            WHERE {where}
            ORDER BY last_activity_at DESC, id DESC
        """
        if limit is not None:
            query += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])

        results = self.conn.execute(query, params).fetchall()
        return [self._to_do(row) for row in results]

    def count(
        self,
        account_id: int,
        inbox_ids: Sequence[int],
        status: Optional[ConversationStatus] = None,
        assignee: Optional[str] = None,
        user_id: Optional[int] = None
    ) -> int:
        """Count conversations matching the same filters as search()."""
        where, params = self._where(account_id, inbox_ids, status, assignee, user_id)
        result = self.conn.execute(
            f"SELECT COUNT(*) FROM conversations WHERE {where}", params
        ).fetchone()
        return result[0]

    def _where(
        self,
        account_id: int,
        inbox_ids: Sequence[int],
        status: Optional[ConversationStatus],
        assignee: Optional[str],
        user_id: Optional[int]
    ) -> Tuple[str, List[Any]]:
        inbox_clause, params = self._in_clause("inbox_id", inbox_ids)
        clauses = ["account_id = ?", inbox_clause]
        params.insert(0, account_id)

        if status is not None:
            clauses.append("status = ?")
            params.append(int(status))

        if assignee == ASSIGNED_TO:
            clauses.append("assignee_id = ?")
            params.append(user_id)
        elif assignee == UNASSIGNED:
            clauses.append("assignee_id IS NULL")

        return " AND ".join(clauses), params

    @staticmethod
    def _to_do(row) -> ConversationDO:
        return ConversationDO(
            id=row[0],
            account_id=row[1],
            display_id=row[2],
            inbox_id=row[3],
            contact_id=row[4],
            assignee_id=row[5],
            status=ConversationStatus(row[6]),
            locked=row[7],
            user_last_seen_at=row[8],
            agent_last_seen_at=row[9],
            created_at=row[10],
            updated_at=row[11],
            last_activity_at=row[12]
        )
