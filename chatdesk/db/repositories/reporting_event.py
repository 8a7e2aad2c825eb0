"""Reporting event repository."""

from typing import List, Optional
from .base import BaseRepository
from ..database_models.reporting_event import ReportingEventDO


class ReportingEventRepository(BaseRepository):
    """Repository for reporting metrics."""

    def add(self, event: ReportingEventDO) -> ReportingEventDO:
        event.id = self._next_id("reporting_events_id_seq")
        self.conn.execute("""
            INSERT INTO reporting_events (
                id, name, value, account_id, inbox_id, user_id, conversation_id, created_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """, [
            event.id,
            event.name,
            event.value,
            event.account_id,
            event.inbox_id,
            event.user_id,
            event.conversation_id,
            event.created_at
        ])
        return event

    def list_by_account(self, account_id: int, name: Optional[str] = None) -> List[ReportingEventDO]:
        query = """
            SELECT id, name, value, account_id, inbox_id, user_id, conversation_id, created_at
            FROM reporting_events
            WHERE account_id = ?
        """
        params = [account_id]
        if name:
            query += " AND name = ?"
            params.append(name)
        query += " ORDER BY id"

        results = self.conn.execute(query, params).fetchall()
        return [
            ReportingEventDO(
                id=row[0],
                name=row[1],
                value=row[2],
                account_id=row[3],
                inbox_id=row[4],
                user_id=row[5],
                conversation_id=row[6],
                created_at=row[7]
            )
            for row in results
        ]
