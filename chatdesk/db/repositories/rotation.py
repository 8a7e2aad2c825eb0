"""Round-robin rotation repository."""

import json
from typing import List, Optional, Tuple
from .base import BaseRepository


class RotationRepository(BaseRepository):
    """Persisted round-robin queues, one row per inbox."""

    def get(self, inbox_id: int) -> Optional[Tuple[List[int], int]]:
        """
        Load the queue of an inbox.

        Returns:
            (queue, version) or None if the inbox has no rotation yet
        """
        result = self.conn.execute("""
            SELECT queue, version FROM inbox_rotations WHERE inbox_id = ?
        """, [inbox_id]).fetchone()

        if result:
            queue = json.loads(result[0]) if isinstance(result[0], str) else list(result[0])
            return queue, result[1]
        return None

    def insert(self, inbox_id: int, queue: List[int]) -> bool:
        """
        Create the rotation row of an inbox.

        Returns:
            True if created, False if another writer created it first
        """
        inserted = self._changed("""
            INSERT INTO inbox_rotations (inbox_id, queue, version)
            SELECT ?, ?, 1
            WHERE NOT EXISTS (SELECT 1 FROM inbox_rotations WHERE inbox_id = ?)
        """, [inbox_id, json.dumps(queue), inbox_id])
        return inserted == 1

    def compare_and_swap(self, inbox_id: int, queue: List[int], expected_version: int) -> bool:
        """
        Replace the queue only if nobody wrote it since ``expected_version``.

        Returns:
            True if written, False if the version moved on
        """
        return self._changed("""
            UPDATE inbox_rotations
            SET queue = ?, version = version + 1
            WHERE inbox_id = ? AND version = ?
        """, [json.dumps(queue), inbox_id, expected_version]) == 1

    def delete(self, inbox_id: int) -> bool:
        return self._changed(
            "DELETE FROM inbox_rotations WHERE inbox_id = ?", [inbox_id]
        ) > 0
