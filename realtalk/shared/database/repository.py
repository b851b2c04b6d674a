"""Base repository pattern for database operations.

Subclasses map one table to one entity type; the base class owns the SQL
for lookups and upserts and translates driver errors into repository
errors.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, Sequence, TypeVar

import psycopg2

from .connection import ConnectionManager

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class NotFoundError(RepositoryError):
    """Entity not found in database."""
    pass


class DuplicateError(RepositoryError):
    """Duplicate entity already exists."""
    pass


class BaseRepository(ABC, Generic[T]):
    """Abstract base repository keyed by a single primary-key column."""

    def __init__(
        self,
        connection_manager: ConnectionManager,
        table_name: str,
        key_column: str = "id",
    ):
        """Initialize repository.

        Args:
            connection_manager: Database connection manager
            table_name: Name of the database table
            key_column: Primary key column used by lookups and upserts
        """
        self.connection_manager = connection_manager
        self.table_name = table_name
        self.key_column = key_column

        logger.info(
            "REPOSITORY_INITIALIZED",
            extra={"table_name": table_name}
        )

    @property
    @abstractmethod
    def columns(self) -> Sequence[str]:
        """Selected columns, in the order _row_to_entity expects them."""

    @abstractmethod
    def _row_to_entity(self, row: tuple) -> T:
        """Convert a database row (ordered as self.columns) to an entity."""

    @abstractmethod
    def _entity_to_params(self, entity: T) -> Dict[str, Any]:
        """Convert an entity to a column -> value mapping."""

    def find_by_id(self, entity_id: Any) -> Optional[T]:
        """Find entity by primary key, None when absent."""
        query = (
            f"SELECT {', '.join(self.columns)} FROM {self.table_name} "
            f"WHERE {self.key_column} = %s"
        )
        row = self._fetch_one(query, (entity_id,))
        return self._row_to_entity(row) if row is not None else None

    def get_by_id(self, entity_id: Any) -> T:
        """Find entity by primary key.

        Raises:
            NotFoundError: If no row has this key
        """
        entity = self.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(f"{self.table_name} row {entity_id!r} not found")
        return entity

    def save(self, entity: T) -> T:
        """Insert or update an entity and return the stored version."""
        params = self._entity_to_params(entity)
        columns = list(params.keys())
        update_clause = ", ".join(
            f"{col} = EXCLUDED.{col}" for col in columns if col != self.key_column
        )

        query = (
            f"INSERT INTO {self.table_name} ({', '.join(columns)}) "
            f"VALUES ({', '.join(['%s'] * len(columns))}) "
            f"ON CONFLICT ({self.key_column}) DO UPDATE SET {update_clause} "
            f"RETURNING {', '.join(self.columns)}"
        )
        row = self._fetch_one(query, tuple(params.values()), commit=True)
        return self._row_to_entity(row) if row is not None else entity

    def insert(self, entity: T) -> T:
        """Insert a new entity.

        Raises:
            DuplicateError: If the key already exists
        """
        params = self._entity_to_params(entity)
        columns = list(params.keys())
        query = (
            f"INSERT INTO {self.table_name} ({', '.join(columns)}) "
            f"VALUES ({', '.join(['%s'] * len(columns))}) "
            f"RETURNING {', '.join(self.columns)}"
        )
        try:
            row = self._fetch_one(query, tuple(params.values()), commit=True)
        except psycopg2.IntegrityError as e:
            raise DuplicateError(f"{self.table_name} row already exists") from e
        return self._row_to_entity(row) if row is not None else entity

    def _fetch_one(self, query: str, params: tuple, commit: bool = False) -> Optional[tuple]:
        try:
            with self.connection_manager.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    row = cur.fetchone()
                if commit:
                    conn.commit()
                return row
        except psycopg2.IntegrityError:
            raise
        except psycopg2.Error as e:
            logger.error(
                "REPOSITORY_QUERY_FAILED",
                extra={"table_name": self.table_name, "error": str(e)}
            )
            raise RepositoryError(str(e)) from e
