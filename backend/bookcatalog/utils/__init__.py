"""Utility modules"""

from .database import get_db, engine, init_db, store_errors

__all__ = ["get_db", "engine", "init_db", "store_errors"]
