"""
API Routes Package
==================
Shared utilities for the FastAPI handlers in api.py.

Modules:
  helpers  - DB access (psycopg2, RealDictCursor) and type coercion
"""
