"""
Database connection management for gamelib.

Provides context managers for connections and transactions.
Uses SQLite with WAL mode for concurrent readers, and immediate write
transactions so that a read-then-insert cannot interleave with another
writer.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Generator

from .errors import translate_error
from .schema import ensure_schema

DEFAULT_BUSY_TIMEOUT = 5.0


def get_db_path(config: Optional[dict] = None) -> Path:
    """
    Get the database file path.

    Checks in order:
    1. GAMELIB_DB environment variable
    2. config['database']['path'] if provided
    3. Default: ~/.gamelib/library.db

    Args:
        config: Optional configuration dictionary

    Returns:
        Path to database file
    """
    # Environment variable override
    if 'GAMELIB_DB' in os.environ:
        return Path(os.environ['GAMELIB_DB'])

    # Config override
    if config and 'database' in config and config['database'].get('path'):
        return Path(config['database']['path']).expanduser()

    # Default location
    return Path.home() / '.gamelib' / 'library.db'


def get_busy_timeout(config: Optional[dict] = None) -> float:
    """Seconds a connection waits on a locked database before giving up."""
    if config and 'database' in config and 'busy_timeout' in config['database']:
        return float(config['database']['busy_timeout'])
    return DEFAULT_BUSY_TIMEOUT


def _raise_translated(exc: sqlite3.Error) -> None:
    translated = translate_error(exc)
    if translated is None:
        raise exc
    raise translated from exc


def get_connection(
    db_path: Optional[Path] = None,
    config: Optional[dict] = None,
    read_only: bool = False
) -> sqlite3.Connection:
    """
    Get a database connection.

    Creates the database and applies schema if it doesn't exist.
    The connection runs in autocommit mode; transactions are opened
    explicitly with transaction().

    Args:
        db_path: Optional explicit path to database
        config: Optional configuration dictionary
        read_only: If True, open in read-only mode

    Returns:
        SQLite connection
    """
    if db_path is None:
        db_path = get_db_path(config)
    db_path = Path(db_path)
    timeout = get_busy_timeout(config)

    try:
        if read_only:
            uri = f"file:{db_path}?mode=ro"
            conn = sqlite3.connect(uri, uri=True, timeout=timeout, isolation_level=None)
        else:
            # Ensure directory exists
            db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(db_path), timeout=timeout, isolation_level=None)

        # Configure connection
        conn.row_factory = sqlite3.Row  # Enable dict-like access
        conn.execute("PRAGMA foreign_keys = ON")  # Enforce foreign keys

        if not read_only:
            conn.execute("PRAGMA journal_mode = WAL")
            conn.execute("PRAGMA synchronous = NORMAL")
            ensure_schema(conn)
    except sqlite3.Error as e:
        _raise_translated(e)

    return conn


class Database:
    """
    Database context manager for gamelib.

    Each instance owns one connection; open a fresh one per operation and
    never share it between threads.

    Usage:
        with Database(db_path=path) as db:
            with transaction(db):
                db.execute("INSERT ...")
                db.execute("INSERT ...")

        # Read-only mode
        with Database(config=config, read_only=True) as db:
            ...
    """

    def __init__(
        self,
        db_path: Optional[Path] = None,
        config: Optional[dict] = None,
        read_only: bool = False
    ):
        self.db_path = db_path
        self.config = config
        self.read_only = read_only
        self._conn: Optional[sqlite3.Connection] = None
        self._cursor: Optional[sqlite3.Cursor] = None

    def __enter__(self) -> 'Database':
        self._conn = get_connection(
            db_path=self.db_path,
            config=self.config,
            read_only=self.read_only
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._cursor:
            self._cursor.close()
        if self._conn:
            if self._conn.in_transaction:
                # Left open by a caller that did not use transaction()
                if exc_type is None:
                    self._conn.commit()
                else:
                    self._conn.rollback()
            self._conn.close()
            self._conn = None

    @property
    def conn(self) -> sqlite3.Connection:
        """Get the underlying connection."""
        if self._conn is None:
            raise RuntimeError("Database not connected. Use 'with Database() as db:'")
        return self._conn

    @property
    def in_transaction(self) -> bool:
        return self.conn.in_transaction

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute SQL statement, translating constraint and lock errors."""
        try:
            self._cursor = self.conn.execute(sql, params)
        except sqlite3.Error as e:
            _raise_translated(e)
        return self._cursor

    def fetchone(self) -> Optional[sqlite3.Row]:
        """Fetch one row from last query."""
        if self._cursor is None:
            return None
        return self._cursor.fetchone()

    def fetchall(self) -> list:
        """Fetch all rows from last query."""
        if self._cursor is None:
            return []
        return self._cursor.fetchall()

    def commit(self) -> None:
        """Commit current transaction."""
        try:
            self.conn.commit()
        except sqlite3.Error as e:
            _raise_translated(e)

    def rollback(self) -> None:
        """Rollback current transaction."""
        self.conn.rollback()

    @property
    def lastrowid(self) -> Optional[int]:
        """Get last inserted row ID."""
        if self._cursor is None:
            return None
        return self._cursor.lastrowid

    @property
    def rowcount(self) -> int:
        """Get number of rows affected by last statement."""
        if self._cursor is None:
            return 0
        return self._cursor.rowcount


@contextmanager
def transaction(db: Database, immediate: bool = True) -> Generator[None, None, None]:
    """
    Context manager for explicit transactions.

    With immediate=True (the default) the write lock is taken at BEGIN, so
    everything read inside the block is still current when the block
    writes. A lock that cannot be taken within the busy timeout raises
    Unavailable.

    Usage:
        with Database() as db:
            with transaction(db):
                db.execute("SELECT MAX(revision) ...")
                db.execute("INSERT ...")
                # Commits on success, rolls back on exception
    """
    db.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
    try:
        yield
        db.commit()
    except BaseException:
        if db.in_transaction:
            db.rollback()
        raise


def get_database_info(config: Optional[dict] = None) -> dict:
    """
    Get information about the database.

    Returns:
        Dictionary with database stats
    """
    db_path = get_db_path(config)

    if not db_path.exists():
        return {
            'exists': False,
            'path': str(db_path),
        }

    counts = {}
    with Database(config=config, read_only=True) as db:
        for table in ('users', 'projects', 'project_revisions', 'packages', 'releases'):
            db.execute(f"SELECT COUNT(*) FROM {table}")
            row = db.fetchone()
            counts[table] = row[0] if row else 0

        # Get schema version
        db.execute("SELECT MAX(version) FROM _schema_info")
        row = db.fetchone()
        schema_version = row[0] if row else 0

    file_size = db_path.stat().st_size

    return {
        'exists': True,
        'path': str(db_path),
        'size_bytes': file_size,
        'size_human': _human_size(file_size),
        'schema_version': schema_version,
        'users': counts['users'],
        'projects': counts['projects'],
        'revisions': counts['project_revisions'],
        'packages': counts['packages'],
        'releases': counts['releases'],
    }


def _human_size(size_bytes: int) -> str:
    """Convert bytes to human-readable size."""
    size: float = float(size_bytes)
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"
