"""
Database schema for gamelib.

This module defines the SQLite schema and applies it to new databases.
The schema is designed to:
- Hold users, projects, packages and releases with their uniqueness rules
- Keep project metadata as an append-only ledger of snapshots
- Make the append-only tables reject UPDATE and DELETE at the storage level
- Keep the three role relations (owners, authors, players) independent
"""

import logging
import sqlite3

logger = logging.getLogger(__name__)

# Current schema version - increment when schema changes
# v1: Initial schema
CURRENT_VERSION = 1

# Tables whose rows are never updated or deleted once inserted
APPEND_ONLY_TABLES = ('project_data', 'readmes', 'project_revisions', 'releases')

# Largest value an INTEGER column holds
MAX_INTEGER = 2**63 - 1

SCHEMA_V1 = """
-- Schema version tracking
CREATE TABLE IF NOT EXISTS _schema_info (
    version INTEGER PRIMARY KEY,
    applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    description TEXT
);

CREATE TABLE IF NOT EXISTS users (
    user_id INTEGER PRIMARY KEY NOT NULL,
    username TEXT NOT NULL,
    UNIQUE (username)
);

CREATE TABLE IF NOT EXISTS projects (
    project_id INTEGER PRIMARY KEY NOT NULL,
    name TEXT NOT NULL,
    created_at TEXT NOT NULL,
    UNIQUE (name)
);

-- Role relations: three separate tables, no hierarchy between them
CREATE TABLE IF NOT EXISTS owners (
    user_id INTEGER NOT NULL,
    project_id INTEGER NOT NULL,
    FOREIGN KEY (user_id) REFERENCES users(user_id),
    FOREIGN KEY (project_id) REFERENCES projects(project_id),
    UNIQUE (user_id, project_id)
);

CREATE TABLE IF NOT EXISTS players (
    user_id INTEGER NOT NULL,
    project_id INTEGER NOT NULL,
    FOREIGN KEY (user_id) REFERENCES users(user_id),
    FOREIGN KEY (project_id) REFERENCES projects(project_id),
    UNIQUE (user_id, project_id)
);

-- Metadata snapshots (append-only)
CREATE TABLE IF NOT EXISTS project_data (
    project_data_id INTEGER PRIMARY KEY NOT NULL,
    project_id INTEGER NOT NULL,
    description TEXT NOT NULL,
    game_title TEXT NOT NULL,
    game_title_sort TEXT NOT NULL,
    game_publisher TEXT NOT NULL,
    game_year TEXT NOT NULL,
    FOREIGN KEY (project_id) REFERENCES projects(project_id)
);

CREATE TABLE IF NOT EXISTS readmes (
    readme_id INTEGER PRIMARY KEY NOT NULL,
    project_id INTEGER NOT NULL,
    text TEXT NOT NULL,
    FOREIGN KEY (project_id) REFERENCES projects(project_id)
);

CREATE TABLE IF NOT EXISTS project_revisions (
    project_id INTEGER NOT NULL,
    revision INTEGER NOT NULL CHECK (revision >= 1),
    project_data_id INTEGER NOT NULL,
    readme_id INTEGER NOT NULL,
    modified_at TEXT NOT NULL,
    modified_by INTEGER NOT NULL,
    UNIQUE (project_id, revision),
    FOREIGN KEY (project_id) REFERENCES projects(project_id),
    FOREIGN KEY (project_data_id) REFERENCES project_data(project_data_id),
    FOREIGN KEY (readme_id) REFERENCES readmes(readme_id),
    FOREIGN KEY (modified_by) REFERENCES users(user_id)
);

CREATE TABLE IF NOT EXISTS packages (
    package_id INTEGER PRIMARY KEY NOT NULL,
    project_id INTEGER NOT NULL,
    name TEXT NOT NULL,
    created_at TEXT NOT NULL,
    created_by INTEGER NOT NULL,
    UNIQUE (project_id, name),
    FOREIGN KEY (project_id) REFERENCES projects(project_id),
    FOREIGN KEY (created_by) REFERENCES users(user_id)
);

-- Uniqueness is scoped to major.minor.patch; pre/build labels do not count
CREATE TABLE IF NOT EXISTS releases (
    release_id INTEGER PRIMARY KEY NOT NULL,
    package_id INTEGER NOT NULL,
    version TEXT NOT NULL,
    version_major INTEGER NOT NULL,
    version_minor INTEGER NOT NULL,
    version_patch INTEGER NOT NULL,
    version_pre TEXT NOT NULL,
    version_build TEXT NOT NULL,
    url TEXT NOT NULL,
    filename TEXT NOT NULL,
    size INTEGER NOT NULL,
    checksum TEXT NOT NULL,
    published_at TEXT NOT NULL,
    published_by INTEGER NOT NULL,
    UNIQUE (package_id, version_major, version_minor, version_patch),
    FOREIGN KEY (package_id) REFERENCES packages(package_id),
    FOREIGN KEY (published_by) REFERENCES users(user_id)
);

CREATE TABLE IF NOT EXISTS authors (
    user_id INTEGER NOT NULL,
    release_id INTEGER NOT NULL,
    FOREIGN KEY (user_id) REFERENCES users(user_id),
    FOREIGN KEY (release_id) REFERENCES releases(release_id),
    UNIQUE (user_id, release_id)
);

CREATE TABLE IF NOT EXISTS images (
    project_id INTEGER NOT NULL,
    filename TEXT NOT NULL,
    url TEXT NOT NULL,
    published_at TEXT NOT NULL,
    published_by INTEGER NOT NULL,
    UNIQUE (project_id, filename),
    FOREIGN KEY (project_id) REFERENCES projects(project_id),
    FOREIGN KEY (published_by) REFERENCES users(user_id)
);

-- Indexes for fast queries
CREATE INDEX IF NOT EXISTS idx_owners_project ON owners(project_id);
CREATE INDEX IF NOT EXISTS idx_players_project ON players(project_id);
CREATE INDEX IF NOT EXISTS idx_authors_release ON authors(release_id);
CREATE INDEX IF NOT EXISTS idx_packages_created ON packages(project_id, created_at);
CREATE INDEX IF NOT EXISTS idx_releases_published ON releases(package_id, published_at);
"""


def _append_only_triggers() -> str:
    """Triggers that abort any UPDATE or DELETE on the append-only tables."""
    statements = []
    for table in APPEND_ONLY_TABLES:
        for action in ('UPDATE', 'DELETE'):
            statements.append(
                f"CREATE TRIGGER IF NOT EXISTS {table}_no_{action.lower()} "
                f"BEFORE {action} ON {table} BEGIN "
                f"SELECT RAISE(ABORT, '{table} is append-only'); "
                f"END;"
            )
    return "\n".join(statements)


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Get current schema version from database."""
    try:
        cursor = conn.execute(
            "SELECT MAX(version) FROM _schema_info"
        )
        result = cursor.fetchone()
        return result[0] if result[0] is not None else 0
    except sqlite3.OperationalError:
        # Table doesn't exist yet
        return 0


def apply_schema(conn: sqlite3.Connection, version: int = CURRENT_VERSION) -> None:
    """
    Apply schema to database.

    Unlike a cache, the library database is the ground truth, so an older
    schema is never dropped; statements are idempotent and only add what
    is missing.
    """
    current = get_schema_version(conn)
    if current > version:
        raise RuntimeError(
            f"Database schema v{current} is newer than this gamelib (v{version})"
        )

    logger.debug(f"Applying schema v{version} (found v{current})")
    conn.executescript(SCHEMA_V1 + _append_only_triggers())
    conn.execute(
        "INSERT OR REPLACE INTO _schema_info (version, description) VALUES (?, ?)",
        (version, "Initial schema")
    )
    conn.commit()


def ensure_schema(conn: sqlite3.Connection) -> None:
    """Ensure database has current schema."""
    current = get_schema_version(conn)

    if current < CURRENT_VERSION:
        apply_schema(conn, CURRENT_VERSION)

