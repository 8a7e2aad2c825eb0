"""Round-robin agent assignment."""

from typing import List, Optional

import duckdb

from ..db import DatabaseConnection, InboxRepository, RotationRepository
from ..errors import PersistenceConflict
from ..utils.logger import get_app_logger


class RoundRobinService:
    """
    Hands out the agents of an inbox in turn.

    The queue of each inbox lives in ``inbox_rotations``. Every call pops the
    head and requeues it at the tail in one transaction guarded by a version
    compare-and-swap, so concurrent callers never draw the same agent within
    a cycle and the queue always holds each pool member exactly once.
    """

    def __init__(self, db: DatabaseConnection, max_retries: int = 5):
        self.db = db
        self.max_retries = max(1, max_retries)
        self.logger = get_app_logger("round_robin")

    def available_agent(self, inbox_id: int) -> Optional[int]:
        """
        Next agent of the inbox, advancing the rotation.

        Args:
            inbox_id: Inbox ID

        Returns:
            User ID, or None when the inbox has no agents
        """
        for attempt in range(1, self.max_retries + 1):
            try:
                return self._rotate(inbox_id)
            except (PersistenceConflict, duckdb.TransactionException) as e:
                self.logger.debug(f"Rotation conflict on inbox {inbox_id} (attempt {attempt}): {e}")

        self.logger.warning(
            f"Round robin for inbox {inbox_id} gave up after {self.max_retries} conflicting attempts"
        )
        return None

    def queue(self, inbox_id: int) -> List[int]:
        """Current rotation order of the inbox, next agent first."""
        with self.db.transaction() as conn:
            stored = RotationRepository(conn).get(inbox_id)
            pool = InboxRepository(conn).list_member_ids(inbox_id)
        if stored is None:
            return pool
        return self._reconcile(stored[0], pool)

    def add_agent(self, inbox_id: int, user_id: int) -> bool:
        """Add an agent to the inbox pool; it joins the end of the rotation."""
        with self.db.transaction() as conn:
            added = InboxRepository(conn).add_member(inbox_id, user_id)
        if added:
            self.logger.info(f"Added agent {user_id} to inbox {inbox_id}")
        return added

    def remove_agent(self, inbox_id: int, user_id: int) -> bool:
        """Remove an agent from the inbox pool and the rotation."""
        with self.db.transaction() as conn:
            removed = InboxRepository(conn).remove_member(inbox_id, user_id)
        if removed:
            self.logger.info(f"Removed agent {user_id} from inbox {inbox_id}")
        return removed

    def reset_queue(self, inbox_id: int):
        """Restart the rotation from the pool order."""
        with self.db.transaction() as conn:
            RotationRepository(conn).delete(inbox_id)
        self.logger.info(f"Reset round robin queue for inbox {inbox_id}")

    def _rotate(self, inbox_id: int) -> Optional[int]:
        with self.db.transaction() as conn:
            rotations = RotationRepository(conn)
            pool = InboxRepository(conn).list_member_ids(inbox_id)

            stored = rotations.get(inbox_id)
            if stored is None:
                if not pool:
                    return None
                if not rotations.insert(inbox_id, pool):
                    raise PersistenceConflict(f"Rotation of inbox {inbox_id} created concurrently")
                stored = rotations.get(inbox_id)

            queue, version = stored
            queue = self._reconcile(queue, pool)
            if not queue:
                return None

            agent_id = queue.pop(0)
            queue.append(agent_id)

            if not rotations.compare_and_swap(inbox_id, queue, version):
                raise PersistenceConflict(f"Rotation of inbox {inbox_id} moved past version {version}")

        self.logger.debug(f"Round robin picked agent {agent_id} for inbox {inbox_id}")
        return agent_id

    @staticmethod
    def _reconcile(queue: List[int], pool: List[int]) -> List[int]:
        """Drop agents that left the pool and append newcomers in pool order."""
        members = set(pool)
        kept = []
        for agent_id in queue:
            if agent_id in members and agent_id not in kept:
                kept.append(agent_id)
        kept.extend(agent_id for agent_id in pool if agent_id not in kept)
        return kept
