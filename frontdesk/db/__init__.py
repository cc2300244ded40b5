"""Database package - connection, models, repositories and the store gateway."""

from .connection import DatabaseConnection
from .repositories.project import ProjectRepository
from .repositories.conversation import ConversationRepository
from .store import StoreGateway, DuckDBStore

__all__ = [
    "DatabaseConnection",
    "ProjectRepository",
    "ConversationRepository",
    "StoreGateway",
    "DuckDBStore",
]
