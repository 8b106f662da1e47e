"""SQLite document store: connection handling and schema.

Each collection is a table holding the JSON document in ``data`` next to the
few columns that are queried or indexed (ids, username, user_id...).
"""
import sqlite3
import threading

from . import config

# Thread-local storage for database connections
_local = threading.local()


def get_db() -> sqlite3.Connection:
    """Get thread-local database connection"""
    path = str(config.DATABASE_PATH)
    if getattr(_local, 'connection', None) is None or getattr(_local, 'path', None) != path:
        _local.connection = sqlite3.connect(path)
        _local.connection.row_factory = sqlite3.Row
        _local.connection.execute("PRAGMA foreign_keys = ON")
        _local.path = path
    return _local.connection


def close_db() -> None:
    """Close this thread's connection, if any."""
    connection = getattr(_local, 'connection', None)
    if connection is not None:
        connection.close()
    _local.connection = None


def init_db():
    """Initialize database schema"""
    db = get_db()

    # Users: username is unique and always stored lower case
    db.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            username TEXT UNIQUE,
            github_id TEXT,
            archived INTEGER NOT NULL DEFAULT 0,
            data TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    db.execute("CREATE INDEX IF NOT EXISTS idx_users_username ON users(username)")
    db.execute("CREATE INDEX IF NOT EXISTS idx_users_github_id ON users(github_id)")

    # Pending/approved/rejected profile edits
    db.execute("""
        CREATE TABLE IF NOT EXISTS profile_diffs (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            approval TEXT NOT NULL CHECK(approval IN ('PENDING', 'APPROVED', 'REJECTED')),
            data TEXT NOT NULL,
            timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    db.execute("""
        CREATE INDEX IF NOT EXISTS idx_profile_diffs_user ON profile_diffs(user_id, approval)
    """)

    # One status document per user
    db.execute("""
        CREATE TABLE IF NOT EXISTS users_status (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL UNIQUE,
            data TEXT NOT NULL
        )
    """)

    # One photo verification record per user
    db.execute("""
        CREATE TABLE IF NOT EXISTS photo_verification (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL UNIQUE,
            data TEXT NOT NULL
        )
    """)

    # Join (onboarding) form submissions
    db.execute("""
        CREATE TABLE IF NOT EXISTS join_data (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            data TEXT NOT NULL,
            timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    db.execute("CREATE INDEX IF NOT EXISTS idx_join_data_user ON join_data(user_id)")

    db.execute("""
        CREATE TABLE IF NOT EXISTS chaincodes (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    # Audit log
    db.execute("""
        CREATE TABLE IF NOT EXISTS logs (
            id TEXT PRIMARY KEY,
            type TEXT NOT NULL,
            data TEXT NOT NULL,
            timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    db.execute("CREATE INDEX IF NOT EXISTS idx_logs_type ON logs(type)")

    db.commit()
