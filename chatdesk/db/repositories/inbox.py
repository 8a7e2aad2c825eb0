"""Inbox repository for database operations."""

from typing import Optional, List
from .base import BaseRepository
from ..database_models.inbox import InboxDO


class InboxRepository(BaseRepository):
    """Repository for Inbox CRUD operations and the inbox agent pool."""

    def create(self, inbox: InboxDO) -> InboxDO:
        inbox.id = self._next_id("inboxes_id_seq")
        self.conn.execute("""
            INSERT INTO inboxes (id, account_id, name, channel_type, created_at)
            VALUES (?, ?, ?, ?, ?)
        """, [inbox.id, inbox.account_id, inbox.name, inbox.channel_type, inbox.created_at])
        self.logger.info(f"Created inbox record: {inbox.id}")
        return inbox

    def get(self, inbox_id: Optional[int]) -> Optional[InboxDO]:
        if inbox_id is None:
            return None
        result = self.conn.execute("""
            SELECT id, account_id, name, channel_type, created_at
            FROM inboxes
            WHERE id = ?
        """, [inbox_id]).fetchone()

        if result:
            return InboxDO(
                id=result[0],
                account_id=result[1],
                name=result[2],
                channel_type=result[3],
                created_at=result[4]
            )
        return None

    def list_ids_by_account(self, account_id: int) -> List[int]:
        results = self.conn.execute(
            "SELECT id FROM inboxes WHERE account_id = ? ORDER BY id", [account_id]
        ).fetchall()
        return [row[0] for row in results]

    def list_ids_for_member(self, user_id: int) -> List[int]:
        """Inboxes whose agent pool contains the user."""
        results = self.conn.execute("""
            SELECT inbox_id FROM inbox_members
            WHERE user_id = ?
            ORDER BY inbox_id
        """, [user_id]).fetchall()
        return [row[0] for row in results]

    def add_member(self, inbox_id: int, user_id: int) -> bool:
        """
        Append an agent to the end of the inbox pool.

        Returns:
            True if added, False if the agent was already a member
        """
        if self.is_member(inbox_id, user_id):
            return False
        position = self.conn.execute(
            "SELECT COALESCE(MAX(position), -1) + 1 FROM inbox_members WHERE inbox_id = ?",
            [inbox_id]
        ).fetchone()[0]
        self.conn.execute("""
            INSERT INTO inbox_members (inbox_id, user_id, position)
            VALUES (?, ?, ?)
        """, [inbox_id, user_id, position])
        return True

    def remove_member(self, inbox_id: int, user_id: int) -> bool:
        return self._changed(
            "DELETE FROM inbox_members WHERE inbox_id = ? AND user_id = ?",
            [inbox_id, user_id]
        ) > 0

    def is_member(self, inbox_id: int, user_id: int) -> bool:
        result = self.conn.execute("""
            SELECT 1 FROM inbox_members WHERE inbox_id = ? AND user_id = ? LIMIT 1
        """, [inbox_id, user_id]).fetchone()
        return result is not None

    def list_member_ids(self, inbox_id: int) -> List[int]:
        """Agent pool of the inbox in rotation order."""
        results = self.conn.execute("""
            SELECT user_id FROM inbox_members
            WHERE inbox_id = ?
            ORDER BY position, user_id
        """, [inbox_id]).fetchall()
        return [row[0] for row in results]
