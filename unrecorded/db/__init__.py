"""Declarative Base — shared metadata for every ORM model and for Alembic.

Invariants:
    - Engines and sessions are owned by infrastructure/database.py, not here
"""
