"""Base repository class."""

import json
from typing import Any

import duckdb
from ...utils.logger import get_app_logger


class BaseRepository:
    """Base class for all repositories."""

    def __init__(self, conn: duckdb.DuckDBPyConnection):
        """
        Initialize repository with database connection.

        Args:
            conn: DuckDB connection instance
        """
        self.conn = conn
        self.logger = get_app_logger()

    @staticmethod
    def _dump_json(value: Any) -> str:
        """Serialize a value for a JSON column."""
        return json.dumps(value if value is not None else {}, default=str)

    @staticmethod
    def _load_json(raw: Any, default: Any) -> Any:
        """Deserialize a JSON column, falling back to ``default`` on empty or bad data."""
        if raw is None or raw == "":
            return default
        if not isinstance(raw, str):
            return raw
        try:
            return json.loads(raw)
        except ValueError:
            return default
