"""User repository for database operations."""

from typing import Optional, List
from .base import BaseRepository
from ..database_models.user import UserDO


class UserRepository(BaseRepository):
    """Repository for User CRUD operations."""

    _COLUMNS = "id, account_id, name, email, role, created_at"

    def create(self, user: UserDO) -> UserDO:
        user.id = self._next_id("users_id_seq")
        self.conn.execute("""
            INSERT INTO users (id, account_id, name, email, role, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """, [user.id, user.account_id, user.name, user.email, user.role, user.created_at])
        self.logger.info(f"Created user record: {user.id} ({user.role})")
        return user

    def get(self, user_id: Optional[int]) -> Optional[UserDO]:
        if user_id is None:
            return None
        result = self.conn.execute(
            f"SELECT {self._COLUMNS} FROM users WHERE id = ?", [user_id]
        ).fetchone()
        return self._to_do(result) if result else None

    def list_by_account(self, account_id: int) -> List[UserDO]:
        results = self.conn.execute(
            f"SELECT {self._COLUMNS} FROM users WHERE account_id = ? ORDER BY id",
            [account_id]
        ).fetchall()
        return [self._to_do(row) for row in results]

    @staticmethod
    def _to_do(row) -> UserDO:
        return UserDO(
            id=row[0],
            account_id=row[1],
            name=row[2],
            email=row[3],
            role=row[4],
            created_at=row[5]
        )
