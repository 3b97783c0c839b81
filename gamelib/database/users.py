"""
User database operations for gamelib.
"""

from typing import Dict, Iterable, List, Optional

from ..domain.user import User
from .connection import Database


def insert_user(db: Database, username: str) -> int:
    """
    Insert a user.

    Returns:
        Row ID of the new user

    Raises:
        NameTaken: If the username exists (from the UNIQUE constraint)
    """
    db.execute("INSERT INTO users (username) VALUES (?)", (username,))
    return db.lastrowid


def get_user_by_name(db: Database, username: str) -> Optional[User]:
    """Get a user by username."""
    db.execute("SELECT user_id, username FROM users WHERE username = ?", (username,))
    row = db.fetchone()
    if row is None:
        return None
    return User(id=row['user_id'], username=row['username'])


def get_user_ids(db: Database, usernames: Iterable[str]) -> Dict[str, int]:
    """
    Resolve usernames to user IDs.

    Unknown usernames are simply absent from the result.
    """
    names = list(dict.fromkeys(usernames))
    if not names:
        return {}
    placeholders = ','.join('?' * len(names))
    db.execute(
        f"SELECT user_id, username FROM users WHERE username IN ({placeholders})",
        tuple(names)
    )
    return {row['username']: row['user_id'] for row in db.fetchall()}


def get_all_users(db: Database) -> List[User]:
    db.execute("SELECT user_id, username FROM users ORDER BY username")
    return [User(id=row['user_id'], username=row['username']) for row in db.fetchall()]
