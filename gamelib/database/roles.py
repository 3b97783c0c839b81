"""
Role database operations for gamelib.

Owners, players and authors are three independent relations. Each is a
set of (user, target) pairs; granting an existing pair or removing a
missing one is a no-op.
"""

from typing import Dict, Iterable, List, Tuple

from .connection import Database


# table -> target column
ROLE_TABLES = {
    'owners': 'project_id',
    'players': 'project_id',
    'authors': 'release_id',
}


def _target_column(table: str) -> str:
    if table not in ROLE_TABLES:
        raise ValueError(f"Unknown role table: {table}")
    return ROLE_TABLES[table]


def has_role(db: Database, table: str, user_id: int, target_id: int) -> bool:
    column = _target_column(table)
    db.execute(
        f"SELECT 1 FROM {table} WHERE user_id = ? AND {column} = ?",
        (user_id, target_id)
    )
    return db.fetchone() is not None


def add_roles(db: Database, table: str, user_ids: Iterable[int], target_id: int) -> int:
    """
    Grant a role to users.

    Returns:
        Number of pairs actually added
    """
    column = _target_column(table)
    added = 0
    for user_id in user_ids:
        db.execute(
            f"INSERT OR IGNORE INTO {table} (user_id, {column}) VALUES (?, ?)",
            (user_id, target_id)
        )
        added += db.rowcount
    return added


def remove_roles(db: Database, table: str, user_ids: Iterable[int], target_id: int) -> int:
    """
    Revoke a role from users.

    Returns:
        Number of pairs actually removed
    """
    column = _target_column(table)
    removed = 0
    for user_id in user_ids:
        db.execute(
            f"DELETE FROM {table} WHERE user_id = ? AND {column} = ?",
            (user_id, target_id)
        )
        removed += db.rowcount
    return removed


def list_role(db: Database, table: str, target_id: int) -> List[str]:
    """Usernames holding a role on a target, sorted."""
    column = _target_column(table)
    db.execute(
        f"""
        SELECT users.username FROM {table}
        JOIN users ON users.user_id = {table}.user_id
        WHERE {table}.{column} = ?
        ORDER BY users.username
        """,
        (target_id,)
    )
    return [row['username'] for row in db.fetchall()]


def is_owner(db: Database, user_id: int, project_id: int) -> bool:
    return has_role(db, 'owners', user_id, project_id)


def has_owner(db: Database, project_id: int) -> bool:
    """Check that a project still has at least one owner."""
    db.execute("SELECT 1 FROM owners WHERE project_id = ? LIMIT 1", (project_id,))
    return db.fetchone() is not None


def get_authors_for_releases(
    db: Database,
    release_ids: Iterable[int]
) -> Dict[int, Tuple[str, ...]]:
    """Authors of several releases at once, keyed by release ID."""
    ids = list(release_ids)
    if not ids:
        return {}
    placeholders = ','.join('?' * len(ids))
    db.execute(
        f"""
        SELECT authors.release_id, users.username FROM authors
        JOIN users ON users.user_id = authors.user_id
        WHERE authors.release_id IN ({placeholders})
        ORDER BY users.username
        """,
        tuple(ids)
    )
    result: Dict[int, list] = {}
    for row in db.fetchall():
        result.setdefault(row['release_id'], []).append(row['username'])
    return {release_id: tuple(names) for release_id, names in result.items()}
