"""
PostgreSQL connection factory for the partition store and reference source.

The PoolManager singleton owns one psycopg pool per process and closes it on
exit. Worker threads share the pool; each store call borrows a connection for
the duration of one statement and commits before returning it.

Connection establishment retries transient failures with tenacity; statements
themselves are never retried here because counter increments are not
idempotent.
"""

from __future__ import annotations

import atexit
import threading
from typing import Optional

import psycopg
from psycopg import Connection
from psycopg_pool import ConnectionPool
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from paygen.config import Settings, get_settings
from paygen.utils.logging import get_logger

log = get_logger(__name__)


class PoolManager:
    """
    Thread-safe singleton for managing the database connection pool.

    Handles lifecycle management with automatic cleanup via atexit hook.
    """

    _instance: Optional["PoolManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "PoolManager":
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._pool = None
                cls._instance._dsn = None
                atexit.register(cls._instance.close_all)
            return cls._instance

    def get_pool(self, settings: Optional[Settings] = None, min_size: int = 1) -> ConnectionPool:
        """
        Get or create the connection pool.

        Parameters
        ----------
        settings : Settings, optional
            Source of the DSN and pool size. Defaults to the cached settings.
        min_size : int
            Minimum number of idle connections to keep.

        Returns
        -------
        ConnectionPool
            The managed pool instance. A second call with a different DSN
            replaces the pool.
        """
        settings = settings or get_settings()
        with self._lock:
            if self._pool is not None and self._dsn != settings.dsn:
                self._close_locked()
            if self._pool is None:
                max_size = max(settings.db_pool_size, min_size)
                self._pool = ConnectionPool(
                    conninfo=settings.dsn, min_size=min_size, max_size=max_size, open=True
                )
                self._dsn = settings.dsn
                log.debug(
                    "[DB POOL OPEN]",
                    extra={"host": settings.db_host, "db": settings.db_name, "max_size": max_size},
                )
            return self._pool

    def _close_locked(self) -> None:
        if self._pool is not None:
            try:
                self._pool.close()
            except psycopg.Error as exc:
                log.warning("[DB POOL CLOSE FAILED]", extra={"error": str(exc)})
            finally:
                self._pool = None
                self._dsn = None

    def close_all(self) -> None:
        """Close the managed pool. Called automatically on exit via atexit hook."""
        with self._lock:
            self._close_locked()


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(settings: Optional[Settings] = None) -> Connection:
    """
    Open a dedicated connection, retrying transient failures up to 3 times.

    Use for one-off work such as bulk loading; prefer the pool otherwise.
    """
    settings = settings or get_settings()
    return psycopg.connect(settings.dsn)


def get_sync_pool(settings: Optional[Settings] = None) -> ConnectionPool:
    return PoolManager().get_pool(settings)


__all__ = [
    "PoolManager",
    "get_sync_connection",
    "get_sync_pool",
]
