"""
Database Base Module

Creates the SQLAlchemy database instance that all models inherit from.
This is separate to avoid circular imports.
"""

import sqlite3
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

from constants import MAX_ROW_ID

# Create the SQLAlchemy instance
# This will be initialized with the Flask app in app.py
db = SQLAlchemy()


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable SQLite foreign key enforcement so ON DELETE rules apply."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_by_id(model, row_id):
    """Row with that primary key, or None. Ids outside the INTEGER range match nothing."""
    if row_id is None or not 0 < row_id <= MAX_ROW_ID:
        return None
    return db.session.get(model, row_id)


def utcnow():
    """Current time as an aware UTC datetime, for timestamp columns."""
    return datetime.now(timezone.utc)
