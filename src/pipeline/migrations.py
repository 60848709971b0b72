"""Startup migration and audit helpers for the habit tracking tables."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import psycopg2
from dotenv import load_dotenv

from db_utils import get_conn_str

log = logging.getLogger("pipeline.migrations")

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS components (
    id               TEXT PRIMARY KEY,
    name             TEXT NOT NULL,
    weight           TEXT NOT NULL DEFAULT 'medium'
                     CHECK (weight IN ('low', 'medium', 'high')),
    min_weekly_freq  INTEGER NOT NULL CHECK (min_weekly_freq >= 1),
    color            TEXT NOT NULL,
    created_at       TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at       TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS records (
    id            SERIAL PRIMARY KEY,
    component_id  TEXT NOT NULL REFERENCES components(id) ON DELETE CASCADE,
    date          DATE NOT NULL,
    effort_level  TEXT NOT NULL DEFAULT 'medium'
                  CHECK (effort_level IN ('low', 'medium', 'high')),
    note          TEXT,
    created_at    TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_records_component_date
ON records(component_id, date);

CREATE TABLE IF NOT EXISTS pulse_checks (
    id            SERIAL PRIMARY KEY,
    date          DATE NOT NULL UNIQUE,
    energy_level  INTEGER NOT NULL CHECK (energy_level BETWEEN 1 AND 5),
    mood_level    INTEGER NOT NULL CHECK (mood_level BETWEEN 1 AND 5),
    note          VARCHAR(500),
    created_at    TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""

REQUIRED_COLUMNS: Dict[str, List[str]] = {
    "components": ["id", "name", "min_weekly_freq"],
    "records": ["component_id", "date", "effort_level"],
    "pulse_checks": ["date", "energy_level", "mood_level"],
}


def _resolve_conn_str(conn_str: str | None) -> str:
    load_dotenv()
    return get_conn_str(conn_str)


def ensure_startup_schema(conn_str: str | None = None) -> None:
    """Run idempotent startup migrations."""
    cs = _resolve_conn_str(conn_str)
    if not cs:
        raise RuntimeError("POSTGRES_CONNECTION_STRING (or DATABASE_URL) is not configured")

    conn = psycopg2.connect(cs)
    conn.autocommit = True
    try:
        with conn.cursor() as cur:
            for stmt in SCHEMA_SQL.split(";"):
                stmt = stmt.strip()
                if stmt:
                    cur.execute(stmt)
    finally:
        conn.close()

    log.info("Startup migrations completed.")


def schema_audit(conn_str: str | None = None) -> Dict[str, Any]:
    """Return table/column audit data for runtime inspection."""
    cs = _resolve_conn_str(conn_str)
    if not cs:
        return {
            "ok": False,
            "error": "POSTGRES_CONNECTION_STRING (or DATABASE_URL) is not configured",
            "tables": {},
            "missing_tables": [],
        }

    out: Dict[str, Any] = {"ok": True, "tables": {}, "missing_tables": []}
    conn = psycopg2.connect(cs)
    try:
        with conn.cursor() as cur:
            for table, expected in REQUIRED_COLUMNS.items():
                cur.execute(
                    """
                    SELECT column_name
                    FROM information_schema.columns
                    WHERE table_schema = 'public' AND table_name = %s
                    ORDER BY ordinal_position
                    """,
                    (table,),
                )
                cols = [r[0] for r in cur.fetchall()]
                if not cols:
                    out["missing_tables"].append(table)
                out["tables"][table] = {
                    "exists": bool(cols),
                    "columns": cols,
                    "missing_columns": [c for c in expected if c not in cols],
                }

        out["ok"] = not out["missing_tables"] and not any(
            info["missing_columns"] for info in out["tables"].values()
        )
        return out
    finally:
        conn.close()
