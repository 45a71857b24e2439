"""
Reference pool of tokenized card numbers (`hash_pan`).

Each worker thread fetches its pool once before generating. The remote table
holds REFERENCE_RECORDS records keyed by integer id; the thread draws ids from
a seeded PRNG so the same shard always asks for the same records.

Misses and connection failures are not fatal: the missing entries are filled
with synthetic `hash_<16 hex>` values from the same seed and the shortfall is
logged at WARNING.
"""

from __future__ import annotations

import random
from typing import Any, Dict, Iterable, Iterator, List, Optional, Protocol, Sequence, Tuple, Type

import psycopg
from botocore.exceptions import BotoCoreError, ClientError
from psycopg import sql
from psycopg_pool import ConnectionPool

from paygen.utils.logging import get_logger

log = get_logger(__name__)

REFERENCE_RECORDS = 100_000
DYNAMODB_BATCH_SIZE = 100
POSTGRES_BATCH_SIZE = 1_000
DEFAULT_REFERENCE_TABLE = "reference_pans"


def synthetic_hash_pan(rng: random.Random) -> str:
    return f"hash_{rng.getrandbits(64):016x}"


def draw_indices(count: int, seed: int) -> List[int]:
    rng = random.Random(seed)
    return [rng.randrange(REFERENCE_RECORDS) for _ in range(count)]


def _chunks(items: Sequence[int], size: int) -> Iterator[List[int]]:
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


class ReferencePoolSource(Protocol):
    name: str

    def fetch(self, count: int, seed: int) -> List[str]:
        """Return exactly `count` hash_pan values for the given seed."""
        ...


class SyntheticReferenceSource:
    name = "synthetic"

    def fetch(self, count: int, seed: int) -> List[str]:
        rng = random.Random(f"{seed}:synthetic")
        return [synthetic_hash_pan(rng) for _ in range(count)]


class _IndexedReferenceSource:
    """
    Shared fetch logic for sources keyed by record id.

    Subclasses implement `_lookup(ids)` for one batch and declare which
    exceptions mean the backend is unreachable.
    """

    name: str = "indexed"
    batch_size: int = 100
    connection_errors: Tuple[Type[BaseException], ...] = ()

    def _lookup(self, ids: List[int]) -> Dict[int, str]:  # pragma: no cover - interface only
        raise NotImplementedError

    def fetch(self, count: int, seed: int) -> List[str]:
        indices = draw_indices(count, seed)
        unique = sorted(set(indices))
        found: Dict[int, str] = {}
        for batch in _chunks(unique, self.batch_size):
            try:
                found.update(self._lookup(batch))
            except self.connection_errors as exc:
                log.warning(
                    "[REFERENCE POOL UNAVAILABLE] filling remaining values synthetically",
                    extra={"source": self.name, "fetched": len(found), "error": str(exc)},
                )
                break
        return _fill(indices, found, seed, self.name)


def _fill(indices: Iterable[int], found: Dict[int, str], seed: int, source: str) -> List[str]:
    rng = random.Random(f"{seed}:miss")
    pool: List[str] = []
    misses = 0
    for idx in indices:
        value = found.get(idx)
        if not value:
            value = synthetic_hash_pan(rng)
            misses += 1
        pool.append(value)
    if misses:
        log.warning(
            "[REFERENCE POOL MISS]",
            extra={"source": source, "missing": misses, "requested": len(pool)},
        )
    return pool


class DynamoDBReferenceSource(_IndexedReferenceSource):
    """
    Reads `{id: N, hash_pan: S}` items with `batch_get_item`.

    Keys left in `UnprocessedKeys` are requested again once and counted as
    misses if still unprocessed.
    """

    name = "dynamodb"
    batch_size = DYNAMODB_BATCH_SIZE
    connection_errors = (BotoCoreError, ClientError)

    def __init__(self, client: Any, table_name: str) -> None:
        self.client = client
        self.table_name = table_name

    def _request(self, keys: List[Dict[str, Any]]) -> Tuple[Dict[int, str], List[Dict[str, Any]]]:
        response = self.client.batch_get_item(
            RequestItems={
                self.table_name: {
                    "Keys": keys,
                    "ProjectionExpression": "id, hash_pan",
                }
            }
        )
        found: Dict[int, str] = {}
        for item in response.get("Responses", {}).get(self.table_name, []):
            try:
                found[int(item["id"]["N"])] = item["hash_pan"]["S"]
            except (KeyError, ValueError):
                continue
        unprocessed = response.get("UnprocessedKeys", {}).get(self.table_name, {}).get("Keys", [])
        return found, unprocessed

    def _lookup(self, ids: List[int]) -> Dict[int, str]:
        keys = [{"id": {"N": str(idx)}} for idx in ids]
        found, unprocessed = self._request(keys)
        if unprocessed:
            retried, _ = self._request(unprocessed)
            found.update(retried)
        return found


class PostgresReferenceSource(_IndexedReferenceSource):
    name = "postgres"
    batch_size = POSTGRES_BATCH_SIZE
    connection_errors = (psycopg.Error,)

    def __init__(self, pool: ConnectionPool, table_name: Optional[str] = None) -> None:
        self.pool = pool
        self.table_name = table_name or DEFAULT_REFERENCE_TABLE

    def _lookup(self, ids: List[int]) -> Dict[int, str]:
        query = sql.SQL("SELECT id, hash_pan FROM {table} WHERE id = ANY(%s)").format(
            table=sql.Identifier(self.table_name)
        )
        with self.pool.connection() as conn:
            rows = conn.execute(query, (ids,)).fetchall()
        return {int(row[0]): row[1] for row in rows}


__all__ = [
    "REFERENCE_RECORDS",
    "ReferencePoolSource",
    "SyntheticReferenceSource",
    "DynamoDBReferenceSource",
    "PostgresReferenceSource",
    "draw_indices",
    "synthetic_hash_pan",
]
