"""Database connection and schema management."""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, List, Optional

import duckdb

from ..utils.logger import get_app_logger


SEQUENCES = [
    "accounts_id_seq",
    "users_id_seq",
    "inboxes_id_seq",
    "contacts_id_seq",
    "conversations_id_seq",
    "messages_id_seq",
    "attachments_id_seq",
    "reporting_events_id_seq",
]


class DatabaseConnection:
    """
    DuckDB connection manager.

    The connection is shared by every thread of the process and guarded by a
    re-entrant lock. ``transaction()`` holds that lock from BEGIN to COMMIT;
    callbacks registered with ``after_commit()`` run once the outermost
    transaction has committed and the lock has been released.
    """

    def __init__(self, db_path: str = "./data/chatdesk.db"):
        """
        Initialize database connection.

        Args:
            db_path: Path to DuckDB database file
        """
        self.db_path = db_path
        self.logger = get_app_logger()
        self.conn: Optional[duckdb.DuckDBPyConnection] = None
        self.lock = threading.RLock()
        self._depth = 0
        self._after_commit: List[Callable[[], None]] = []

        # Ensure database directory exists
        db_dir = Path(db_path).parent
        db_dir.mkdir(parents=True, exist_ok=True)

        self._connect()
        self._init_schema()

    def _connect(self):
        """Connect to DuckDB database."""
        try:
            self.conn = duckdb.connect(self.db_path)
            self.logger.info(f"Connected to DuckDB at {self.db_path}")
        except Exception as e:
            self.logger.error(f"Failed to connect to DuckDB: {e}")
            raise

    def _init_schema(self):
        """Initialize database schema."""
        try:
            for sequence in SEQUENCES:
                self.conn.execute(f"CREATE SEQUENCE IF NOT EXISTS {sequence} START 1")

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS accounts (
                    id BIGINT PRIMARY KEY,
                    name VARCHAR NOT NULL,
                    conversation_sequence BIGINT NOT NULL DEFAULT 0,
                    created_at TIMESTAMP NOT NULL
                )
            """)

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id BIGINT PRIMARY KEY,
                    account_id BIGINT NOT NULL,
                    name VARCHAR NOT NULL,
                    email VARCHAR NOT NULL,
                    role VARCHAR NOT NULL,
                    created_at TIMESTAMP NOT NULL
                )
            """)

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS inboxes (
                    id BIGINT PRIMARY KEY,
                    account_id BIGINT NOT NULL,
                    name VARCHAR NOT NULL,
                    channel_type VARCHAR NOT NULL,
                    created_at TIMESTAMP NOT NULL
                )
            """)

            # Ordered agent pool of each inbox
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS inbox_members (
                    inbox_id BIGINT NOT NULL,
                    user_id BIGINT NOT NULL,
                    position INTEGER NOT NULL,
                    PRIMARY KEY (inbox_id, user_id)
                )
            """)

            # Round-robin queue of each inbox, written with compare-and-swap on version
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS inbox_rotations (
                    inbox_id BIGINT PRIMARY KEY,
                    queue JSON NOT NULL,
                    version BIGINT NOT NULL
                )
            """)

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS contacts (
                    id BIGINT PRIMARY KEY,
                    account_id BIGINT NOT NULL,
                    name VARCHAR NOT NULL,
                    email VARCHAR,
                    phone_number VARCHAR,
                    thumbnail VARCHAR,
                    created_at TIMESTAMP NOT NULL
                )
            """)

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS conversations (
                    id BIGINT PRIMARY KEY,
                    account_id BIGINT NOT NULL,
                    display_id BIGINT NOT NULL,
                    inbox_id BIGINT NOT NULL,
                    contact_id BIGINT NOT NULL,
                    assignee_id BIGINT,
                    status INTEGER NOT NULL DEFAULT 0,
                    locked BOOLEAN NOT NULL DEFAULT FALSE,
                    user_last_seen_at TIMESTAMP,
                    agent_last_seen_at TIMESTAMP,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL,
                    last_activity_at TIMESTAMP NOT NULL,
                    UNIQUE (account_id, display_id)
                )
            """)

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS messages (
                    id BIGINT PRIMARY KEY,
                    account_id BIGINT NOT NULL,
                    inbox_id BIGINT NOT NULL,
                    conversation_id BIGINT NOT NULL,
                    user_id BIGINT,
                    content VARCHAR,
                    content_attributes JSON,
                    content_type INTEGER NOT NULL DEFAULT 0,
                    message_type INTEGER NOT NULL,
                    status INTEGER NOT NULL DEFAULT 0,
                    private BOOLEAN NOT NULL DEFAULT FALSE,
                    fb_id VARCHAR,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
            """)

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS attachments (
                    id BIGINT PRIMARY KEY,
                    message_id BIGINT NOT NULL,
                    account_id BIGINT NOT NULL,
                    file_type INTEGER NOT NULL DEFAULT 0,
                    external_url VARCHAR,
                    extension VARCHAR,
                    coordinates_lat DOUBLE DEFAULT 0,
                    coordinates_long DOUBLE DEFAULT 0,
                    created_at TIMESTAMP NOT NULL
                )
            """)

            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS reporting_events (
                    id BIGINT PRIMARY KEY,
                    name VARCHAR NOT NULL,
                    value DOUBLE NOT NULL,
                    account_id BIGINT NOT NULL,
                    inbox_id BIGINT,
                    user_id BIGINT,
                    conversation_id BIGINT,
                    created_at TIMESTAMP NOT NULL
                )
            """)

            # Create indexes
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_users_account ON users(account_id)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_inboxes_account ON inboxes(account_id)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_conversations_account ON conversations(account_id)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_conversations_inbox ON conversations(inbox_id)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_messages_conversation ON messages(conversation_id)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_messages_created ON messages(created_at)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_attachments_message ON attachments(message_id)")

            self.logger.info("Database schema initialized successfully")

        except Exception as e:
            self.logger.error(f"Failed to initialize database schema: {e}")
            raise

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    @contextmanager
    def transaction(self):
        """
        Run the block in one transaction.

        Nested blocks join the outer transaction. After-commit callbacks run
        once the outermost block commits, outside the lock; on rollback they
        are discarded.
        """
        callbacks: List[Callable[[], None]] = []
        with self.lock:
            outermost = self._depth == 0
            if outermost:
                self.conn.execute("BEGIN TRANSACTION")
            self._depth += 1
            try:
                yield self.conn
            except BaseException:
                self._depth -= 1
                if outermost:
                    self._after_commit.clear()
                    self.conn.execute("ROLLBACK")
                raise
            self._depth -= 1
            if outermost:
                try:
                    self.conn.execute("COMMIT")
                except Exception:
                    self._after_commit.clear()
                    raise
                callbacks = self._after_commit
                self._after_commit = []

        for callback in callbacks:
            callback()

    def after_commit(self, callback: Callable[[], None]):
        """Run ``callback`` once the current transaction commits, or now if none is open."""
        with self.lock:
            if self._depth > 0:
                self._after_commit.append(callback)
                return
        callback()

    def close(self):
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.logger.info("Database connection closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
