"""Database connection and schema management."""

import duckdb
from typing import Optional
from pathlib import Path
from ..utils.logger import get_app_logger


class DatabaseConnection:
    """DuckDB connection manager."""

    def __init__(self, db_path: str = "./data/frontdesk.db"):
        """
        Initialize database connection.

        Args:
            db_path: Path to DuckDB database file
        """
        self.db_path = db_path
        self.logger = get_app_logger()
        self.conn: Optional[duckdb.DuckDBPyConnection] = None

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
            # Tenant configuration
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS projects (
                    id VARCHAR PRIMARY KEY,
                    user_id VARCHAR,
                    ai_name VARCHAR,
                    business_name VARCHAR,
                    business_category VARCHAR,
                    business_location VARCHAR,
                    business_description VARCHAR,
                    enabled_features JSON,
                    status VARCHAR NOT NULL DEFAULT 'draft',
                    telegram_token VARCHAR,
                    telegram_bot_username VARCHAR,
                    google_connected BOOLEAN DEFAULT FALSE,
                    google_access_token VARCHAR,
                    google_refresh_token VARCHAR,
                    google_location_id VARCHAR,
                    google_last_validated_at TIMESTAMP,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
            """)

            # One transcript per project + chat address
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS conversations (
                    id VARCHAR PRIMARY KEY,
                    project_id VARCHAR NOT NULL,
                    chat_id VARCHAR NOT NULL,
                    messages JSON NOT NULL,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
            """)

            # Append-only quota log - action (rate limit) and llm (usage guard)
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS usage_events (
                    id BIGINT PRIMARY KEY,
                    project_id VARCHAR NOT NULL,
                    category VARCHAR NOT NULL,
                    kind VARCHAR NOT NULL,
                    created_at TIMESTAMP NOT NULL
                )
            """)

            # Audit trail for executed actions
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS activity_logs (
                    id BIGINT PRIMARY KEY,
                    project_id VARCHAR NOT NULL,
                    action_type VARCHAR NOT NULL,
                    status VARCHAR NOT NULL,
                    input_payload JSON,
                    result JSON,
                    created_at TIMESTAMP NOT NULL
                )
            """)

            # Scheduled follow-ups and summaries
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS tasks (
                    id VARCHAR PRIMARY KEY,
                    project_id VARCHAR NOT NULL,
                    chat_id VARCHAR,
                    action_type VARCHAR NOT NULL,
                    context JSON,
                    execute_at TIMESTAMP NOT NULL,
                    status VARCHAR NOT NULL DEFAULT 'pending',
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
            """)

            try:
                self.conn.execute("""
                    CREATE UNIQUE INDEX IF NOT EXISTS idx_conversations_key ON conversations(project_id, chat_id)
                """)
            except Exception as e:
                self.logger.warning(f"Could not create conversation key index: {e}")

            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_usage_events_window ON usage_events(project_id, category, created_at)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_activity_logs_project ON activity_logs(project_id)")
            self.conn.execute("CREATE INDEX IF NOT EXISTS idx_tasks_project_status ON tasks(project_id, status)")

            self.conn.execute("CREATE SEQUENCE IF NOT EXISTS usage_events_id_seq START 1")
            self.conn.execute("CREATE SEQUENCE IF NOT EXISTS activity_logs_id_seq START 1")

            self.logger.info("Database schema initialized successfully")

        except Exception as e:
            self.logger.error(f"Failed to initialize database schema: {e}")
            raise

    def close(self):
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            self.logger.info("Database connection closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
