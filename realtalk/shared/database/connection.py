"""PostgreSQL connection pooling for the usage store.

The connection target is either a single DATABASE_URL connection string
(as set by hosted Postgres providers) or discrete DB_* settings. The pool
is opened lazily so services import without a reachable database.
"""
import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

from psycopg2 import pool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatabaseConfig:
    """Where and how to connect. A dsn, when given, wins over the fields."""
    host: str = "localhost"
    port: int = 5432
    database: str = "realtalk"
    username: str = ""
    password: str = ""
    dsn: Optional[str] = None
    min_connections: int = 1
    max_connections: int = 10
    connect_timeout: int = 10
    ssl_mode: str = "prefer"

    def __post_init__(self):
        if self.min_connections < 0:
            raise ValueError(f"min_connections must be >= 0, got {self.min_connections}")
        if self.max_connections < max(self.min_connections, 1):
            raise ValueError(
                f"max_connections must be >= max(min_connections, 1), got {self.max_connections}"
            )

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Create config from environment variables.

        Environment variables:
            DATABASE_URL: Full connection string (overrides DB_HOST..DB_PASSWORD)
            DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD: Discrete settings
            DB_MIN_CONN / DB_MAX_CONN: Pool bounds (default 1 / 10)
            DB_SSL_MODE: libpq sslmode (default prefer; a DATABASE_URL sets its own)
        """
        return cls(
            host=os.getenv("DB_HOST", "localhost"),
            port=int(os.getenv("DB_PORT", "5432")),
            database=os.getenv("DB_NAME", "realtalk"),
            username=os.getenv("DB_USER", ""),
            password=os.getenv("DB_PASSWORD", ""),
            dsn=os.getenv("DATABASE_URL") or None,
            min_connections=int(os.getenv("DB_MIN_CONN", "1")),
            max_connections=int(os.getenv("DB_MAX_CONN", "10")),
            ssl_mode=os.getenv("DB_SSL_MODE", "prefer"),
        )

    def connect_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for psycopg2.connect().

        Keywords override the same settings inside a dsn, so a dsn keeps its
        own sslmode.
        """
        kwargs: Dict[str, Any] = {"connect_timeout": self.connect_timeout}
        if self.dsn:
            kwargs["dsn"] = self.dsn
        else:
            kwargs.update(
                sslmode=self.ssl_mode,
                host=self.host,
                port=self.port,
                dbname=self.database,
                user=self.username,
                password=self.password,
            )
        return kwargs

    @property
    def target(self) -> str:
        """Loggable description of the target, never including credentials."""
        if self.dsn:
            return "DATABASE_URL"
        return f"{self.host}:{self.port}/{self.database}"


class ConnectionManager:
    """Lends pooled connections and reports database health."""

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self._pool: Optional[pool.ThreadedConnectionPool] = None

    @property
    def is_initialized(self) -> bool:
        return self._pool is not None

    def initialize(self) -> None:
        """Open the pool if it is not open yet.

        Raises:
            psycopg2.Error: If the database is unreachable
        """
        if self._pool is not None:
            return

        try:
            self._pool = pool.ThreadedConnectionPool(
                self.config.min_connections,
                self.config.max_connections,
                **self.config.connect_kwargs(),
            )
        except Exception as e:
            logger.error(
                "CONNECTION_POOL_INIT_FAILED",
                extra={"target": self.config.target, "error_type": type(e).__name__}
            )
            raise

        logger.info(
            "CONNECTION_POOL_INITIALIZED",
            extra={"target": self.config.target, "max_connections": self.config.max_connections}
        )

    @contextmanager
    def get_connection(self) -> Iterator[Any]:
        """Borrow a connection; roll back if the block raises.

        The connection goes back to the pool either way.
        """
        self.initialize()
        conn = self._pool.getconn()
        try:
            yield conn
        except Exception:
            conn.rollback()
            raise
        finally:
            self._pool.putconn(conn)

    def health_check(self, initialize: bool = False) -> Dict[str, Any]:
        """Run SELECT 1 against the pool.

        Args:
            initialize: Open the pool first when it is not open yet
        """
        if self._pool is None and not initialize:
            return {"status": "not_initialized", "healthy": False}

        try:
            with self.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT 1")
                    cur.fetchone()
        except Exception as e:
            logger.error(
                "DATABASE_HEALTH_CHECK_FAILED",
                extra={"target": self.config.target, "error": str(e)}
            )
            return {"status": "error", "healthy": False, "error": str(e)}

        return {"status": "connected", "healthy": True, "target": self.config.target}

    def close(self) -> None:
        """Close every pooled connection."""
        if self._pool is None:
            return
        self._pool.closeall()
        self._pool = None
        logger.info("CONNECTION_POOL_CLOSED", extra={"target": self.config.target})


_connection_manager: Optional[ConnectionManager] = None


def get_connection_manager() -> ConnectionManager:
    """Process-wide connection manager built from the environment."""
    global _connection_manager
    if _connection_manager is None:
        _connection_manager = ConnectionManager(DatabaseConfig.from_env())
    return _connection_manager
