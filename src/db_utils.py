"""
Shared database utilities.
Single source of truth for PostgreSQL connection-string resolution.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def normalize_db_url(value: str) -> str:
    url = (value or "").strip()
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


def get_conn_str(conn_str: str | None = None) -> str:
    """Return PostgreSQL connection string.

    An explicit argument wins.  Otherwise checks POSTGRES_CONNECTION_STRING
    first and falls back to DATABASE_URL (Heroku standard).  Normalises
    postgres:// to postgresql:// for psycopg2.
    """
    url = conn_str or os.getenv("POSTGRES_CONNECTION_STRING") or os.getenv("DATABASE_URL") or ""
    return normalize_db_url(url)
