from __future__ import annotations

import sqlite3
from typing import List, Optional, Tuple


def sqlite_kv_open(db_path: str) -> sqlite3.Connection:
    """
    Open and initialize a SQLite-backed external-id store.

    This function creates (or opens) a SQLite database used to persist
    the external id to internal id mapping of a node pass. The database
    is configured with performance-oriented pragmas and any mapping left
    over from an earlier run is cleared, since a map is only valid for the
    import that built it.

    Args:
        db_path (str): Path to the SQLite database file, or ":memory:".

    Returns:
        sqlite3.Connection: Open SQLite connection ready for use.
    """

    conn = sqlite3.connect(db_path)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA temp_store=MEMORY;")
    # internal_id holds the pickled id returned by the graph sink
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS external_id_map (
            external_id TEXT PRIMARY KEY,
            internal_id BLOB NOT NULL
        )
        """
    )
    conn.execute("DELETE FROM external_id_map")
    conn.commit()
    return conn


def sqlite_kv_put_many(conn: sqlite3.Connection, rows: List[Tuple[str, bytes]]) -> None:
    """
    Insert multiple external id mappings.

    Plain INSERT is used so that a duplicate key surfaces as an
    IntegrityError instead of silently replacing the earlier mapping.

    Args:
        conn (sqlite3.Connection): Open SQLite connection.
        rows (List[Tuple[str, bytes]]): (external_id, pickled internal_id) pairs.

    Returns:
        None
    """

    conn.executemany(
        "INSERT INTO external_id_map(external_id, internal_id) VALUES (?, ?)",
        rows,
    )


def sqlite_kv_get(conn: sqlite3.Connection, external_id: str) -> Optional[bytes]:
    """Return the pickled internal id for one external id, or None."""
    row = conn.execute(
        "SELECT internal_id FROM external_id_map WHERE external_id = ?",
        (external_id,),
    ).fetchone()
    return row[0] if row else None


def sqlite_kv_count(conn: sqlite3.Connection) -> int:
    return int(conn.execute("SELECT COUNT(*) FROM external_id_map").fetchone()[0])
