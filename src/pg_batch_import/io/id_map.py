"""
External id -> internal id maps built by the node pass.

A map grows while nodes are loaded and is frozen by the importer before
the relationship pass starts; adding to a frozen map is a programming
error and raises RuntimeError.
"""

from __future__ import annotations

import pickle
from typing import Any, Dict, List, Optional, Tuple

from pg_batch_import.errors import SinkFailure
from pg_batch_import.io.kv_store import (
    sqlite_kv_count,
    sqlite_kv_get,
    sqlite_kv_open,
    sqlite_kv_put_many,
)


class ExternalIdMap:
    """In-memory map. Suitable for any node file whose ids fit in a dict."""

    def __init__(self) -> None:
        self._ids: Dict[str, Any] = {}
        self.frozen = False

    def _check_writable(self) -> None:
        if self.frozen:
            raise RuntimeError("external id map is frozen; node pass already completed")

    def add(self, external_id: str, internal_id: Any) -> None:
        """Record a mapping. The caller checks for duplicates first."""
        self._check_writable()
        if external_id in self._ids:
            raise KeyError(external_id)
        self._ids[external_id] = internal_id

    def resolve(self, external_id: str) -> Optional[Any]:
        return self._ids.get(external_id)

    def __contains__(self, external_id: object) -> bool:
        return external_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def freeze(self) -> None:
        self.frozen = True

    def close(self) -> None:
        pass


class SqliteExternalIdMap(ExternalIdMap):
    """
    SQLite-backed map for node files too large to keep in memory.

    Writes are buffered and flushed in batches of `batch_size`; lookups
    consult the unflushed buffer first. Internal ids are pickled into a
    BLOB column, so any picklable id a sink returns (ints, strings, UUIDs,
    tuples) comes back equal to what was stored.

    Args:
        db_path (str): SQLite database path (":memory:" is allowed).
        batch_size (int): Number of pending mappings per flush.
    """

    def __init__(self, db_path: str, batch_size: int = 10_000) -> None:
        super().__init__()
        self.db_path = db_path
        self.batch_size = batch_size
        self._conn = sqlite_kv_open(db_path)
        # external id -> (internal id, pickled internal id)
        self._pending: Dict[str, Tuple[Any, bytes]] = {}

    def _flush(self) -> None:
        if not self._pending:
            return
        rows: List[Tuple[str, bytes]] = [(k, blob) for k, (_, blob) in self._pending.items()]
        sqlite_kv_put_many(self._conn, rows)
        self._conn.commit()
        self._pending = {}

    def add(self, external_id: str, internal_id: Any) -> None:
        """
        Raises:
            SinkFailure: If the internal id cannot be pickled.
        """
        self._check_writable()
        if external_id in self:
            raise KeyError(external_id)
        try:
            blob = pickle.dumps(internal_id, protocol=pickle.HIGHEST_PROTOCOL)
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            raise SinkFailure(
                f"internal id {internal_id!r} of node '{external_id}' cannot be stored in the SQLite id map: {e}"
            ) from e
        self._pending[external_id] = (internal_id, blob)
        if len(self._pending) >= self.batch_size:
            self._flush()

    def resolve(self, external_id: str) -> Optional[Any]:
        if external_id in self._pending:
            return self._pending[external_id][0]
        blob = sqlite_kv_get(self._conn, external_id)
        return None if blob is None else pickle.loads(blob)

    def __contains__(self, external_id: object) -> bool:
        if external_id in self._pending:
            return True
        return isinstance(external_id, str) and sqlite_kv_get(self._conn, external_id) is not None

    def __len__(self) -> int:
        return sqlite_kv_count(self._conn) + len(self._pending)

    def freeze(self) -> None:
        self._flush()
        super().freeze()

    def close(self) -> None:
        try:
            self._flush()
        finally:
            self._conn.close()
