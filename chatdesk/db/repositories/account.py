"""Account repository for database operations."""

from typing import Optional
from .base import BaseRepository
from ..database_models.account import AccountDO


class AccountRepository(BaseRepository):
    """Repository for Account CRUD operations and display id allocation."""

    def create(self, account: AccountDO) -> AccountDO:
        account.id = self._next_id("accounts_id_seq")
        self.conn.execute("""
            INSERT INTO accounts (id, name, conversation_sequence, created_at)
            VALUES (?, ?, ?, ?)
        """, [account.id, account.name, account.conversation_sequence, account.created_at])
        self.logger.info(f"Created account record: {account.id}")
        return account

    def get(self, account_id: int) -> Optional[AccountDO]:
        result = self.conn.execute("""
            SELECT id, name, conversation_sequence, created_at
            FROM accounts
            WHERE id = ?
        """, [account_id]).fetchone()

        if result:
            return AccountDO(
                id=result[0],
                name=result[1],
                conversation_sequence=result[2],
                created_at=result[3]
            )
        return None

    def next_display_id(self, account_id: int) -> int:
        """
        Allocate the next conversation display id of an account.

        Must run inside the transaction that inserts the conversation so an
        aborted insert does not burn the id.

        Args:
            account_id: Account ID

        Returns:
            The allocated display id
        """
        self.conn.execute("""
            UPDATE accounts
            SET conversation_sequence = conversation_sequence + 1
            WHERE id = ?
        """, [account_id])
        result = self.conn.execute(
            "SELECT conversation_sequence FROM accounts WHERE id = ?", [account_id]
        ).fetchone()
        return result[0]
