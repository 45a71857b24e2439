"""
PostgreSQL partition store.

Backed by the `partition_counters` table (see db/init.sql):

    partition_date date PRIMARY KEY
    job_counter    bigint NOT NULL DEFAULT 0
    active_jobs    jsonb           -- NULL until the first assignment

Each primitive is one statement on a pooled connection, committed when the
connection returns to the pool. Row-level locking of the upsert makes the
increment atomic across processes.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from psycopg import sql
from psycopg_pool import ConnectionPool

from paygen.partitioning.abstract import AbstractPartitionStore, ActiveJobsMissingError

DEFAULT_TABLE = "partition_counters"


class PostgresPartitionStore(AbstractPartitionStore):
    name = "postgres"

    def __init__(self, pool: ConnectionPool, table_name: Optional[str] = None) -> None:
        self.pool = pool
        self.table = sql.Identifier(table_name or DEFAULT_TABLE)

    def get_active_order(self, partition_date: date, job_id: str) -> Optional[int]:
        query = sql.SQL(
            "SELECT (active_jobs ->> %s)::bigint FROM {table} WHERE partition_date = %s"
        ).format(table=self.table)
        with self.pool.connection() as conn:
            row = conn.execute(query, (job_id, partition_date)).fetchone()
        if row is None or row[0] is None:
            return None
        return int(row[0])

    def increment_counter(self, partition_date: date) -> int:
        query = sql.SQL(
            "INSERT INTO {table} (partition_date, job_counter) VALUES (%s, 1) "
            "ON CONFLICT (partition_date) DO UPDATE "
            "SET job_counter = {table}.job_counter + 1 "
            "RETURNING job_counter"
        ).format(table=self.table)
        with self.pool.connection() as conn:
            row = conn.execute(query, (partition_date,)).fetchone()
        if row is None:
            raise ValueError(f"counter upsert for {partition_date} returned no row")
        return int(row[0])

    def set_active_order(self, partition_date: date, job_id: str, order: int) -> None:
        query = sql.SQL(
            "UPDATE {table} "
            "SET active_jobs = jsonb_set(active_jobs, ARRAY[%s]::text[], to_jsonb(%s::bigint), true) "
            "WHERE partition_date = %s AND active_jobs IS NOT NULL"
        ).format(table=self.table)
        with self.pool.connection() as conn:
            cursor = conn.execute(query, (job_id, order, partition_date))
            updated = cursor.rowcount
        if updated == 0:
            raise ActiveJobsMissingError(partition_date.isoformat())

    def create_active_container(self, partition_date: date) -> None:
        query = sql.SQL(
            "INSERT INTO {table} (partition_date, job_counter, active_jobs) "
            "VALUES (%s, 0, '{{}}'::jsonb) "
            "ON CONFLICT (partition_date) DO UPDATE "
            "SET active_jobs = COALESCE({table}.active_jobs, '{{}}'::jsonb)"
        ).format(table=self.table)
        with self.pool.connection() as conn:
            conn.execute(query, (partition_date,))

    def remove_active(self, partition_date: date, job_id: str) -> None:
        query = sql.SQL(
            "UPDATE {table} SET active_jobs = active_jobs - %s "
            "WHERE partition_date = %s AND active_jobs IS NOT NULL"
        ).format(table=self.table)
        with self.pool.connection() as conn:
            conn.execute(query, (job_id, partition_date))

    def counter(self, partition_date: date) -> int:
        query = sql.SQL("SELECT job_counter FROM {table} WHERE partition_date = %s").format(
            table=self.table
        )
        with self.pool.connection() as conn:
            row = conn.execute(query, (partition_date,)).fetchone()
        return int(row[0]) if row else 0


__all__ = ["PostgresPartitionStore", "DEFAULT_TABLE"]
