"""
Shared helpers for API routes.
Contains: DB access and type coercion.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import psycopg2
from psycopg2.extras import RealDictCursor

from db_utils import get_conn_str


# ─── DB helpers ─────────────────────────────────────────────

def _conn_str() -> str:
    return get_conn_str()


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def _fetch_all(query: str, params: Optional[tuple] = None) -> List[Dict[str, Any]]:
    cs = _conn_str()
    if not cs:
        raise RuntimeError("POSTGRES_CONNECTION_STRING is not set")
    conn = psycopg2.connect(cs)
    try:
        with conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(query, params or ())
            rows = cur.fetchall()
            out: List[Dict[str, Any]] = []
            for row in rows:
                out.append({k: _to_jsonable(v) for k, v in dict(row).items()})
            return out
    finally:
        conn.close()


def _fetch_one(query: str, params: Optional[tuple] = None) -> Optional[Dict[str, Any]]:
    rows = _fetch_all(query, params=params)
    return rows[0] if rows else None


# ─── Type coercion ──────────────────────────────────────────

def _num(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _int(value: Any, default: int = 0) -> int:
    v = _num(value)
    return int(v) if v is not None else default


def _text(value: Any) -> str:
    return str(value) if value is not None else ""
