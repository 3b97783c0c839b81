"""
Translation of SQLite errors into gamelib errors.

Uniqueness constraints are the last line of defence for the registry's
invariants, so a violation is reported as the domain failure it stands
for, told apart by the table whose constraint fired.
"""

import logging
import re
import sqlite3
from typing import Optional

from ..errors import (
    GameLibError,
    DuplicateVersion,
    NameTaken,
    NotFound,
    RevisionConflict,
    Unavailable,
)

logger = logging.getLogger(__name__)

_UNIQUE_RE = re.compile(r"UNIQUE constraint failed: (\w+)\.")

UNIQUE_ERRORS = {
    'users': (NameTaken, "Username is already taken"),
    'projects': (NameTaken, "Project name is already taken"),
    'packages': (NameTaken, "Package name is already taken in this project"),
    'images': (NameTaken, "Image filename is already used in this project"),
    'releases': (DuplicateVersion, "A release with this major.minor.patch already exists"),
    'project_revisions': (RevisionConflict, "Revision number was taken concurrently; retry"),
}


def constraint_table(exc: sqlite3.IntegrityError) -> Optional[str]:
    """Name of the table whose UNIQUE constraint fired, if any."""
    m = _UNIQUE_RE.search(str(exc))
    return m.group(1) if m else None


def translate_error(exc: sqlite3.Error) -> Optional[GameLibError]:
    """
    Map a storage error to a gamelib error.

    Args:
        exc: Error raised by sqlite3

    Returns:
        The matching GameLibError, or None if the error has no domain meaning
        and should propagate unchanged
    """
    message = str(exc)

    if isinstance(exc, sqlite3.IntegrityError):
        table = constraint_table(exc)
        if table in UNIQUE_ERRORS:
            error_class, text = UNIQUE_ERRORS[table]
            logger.debug(f"UNIQUE constraint on {table} -> {error_class.__name__}")
            return error_class(text)
        if 'FOREIGN KEY constraint failed' in message:
            return NotFound("Referenced record does not exist")
        return None

    if isinstance(exc, sqlite3.OperationalError):
        lowered = message.lower()
        if 'locked' in lowered or 'busy' in lowered:
            logger.debug(f"Storage busy: {message}")
            return Unavailable("Storage is busy; retry later")

    return None
