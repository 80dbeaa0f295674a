from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, TypeVar

from .connection import DatabaseConnection

T = TypeVar("T")
Row = Dict[str, Any]


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """Connection + cursor for one unit of work.

    Commits when the block finishes, rolls everything back if it raises.
    """
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchall(cur, mapper: Optional[Callable[[Row], T]] = None) -> List[Any]:
    rows = list(cur.fetchall() or [])
    if mapper is None:
        return rows
    return [mapper(r) for r in rows]


def placeholders(count: int) -> str:
    """``%s,%s,...`` for an ``IN (...)`` clause; MySQL rejects an empty list."""
    if count <= 0:
        raise ValueError("IN clause needs at least one value")
    return ",".join(["%s"] * count)
