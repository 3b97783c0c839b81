"""
Shared plumbing for gamelib services.

Every service call opens its own Database and runs a complete
read, validate and write cycle; services hold configuration only, never
connections or cached entities, so they are safe to share across threads.
"""

import functools
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from ..database import Database, get_package, get_project_by_name, get_user_by_name, is_owner
from ..domain import Package, Project, User
from ..errors import Forbidden, GameLibError, NotFound

logger = logging.getLogger(__name__)


def utcnow() -> str:
    """Current time as an ISO-8601 UTC timestamp (sorts lexically)."""
    return datetime.now(timezone.utc).isoformat(timespec='microseconds')


def log_rejections(func: Callable) -> Callable:
    """Log a rejected mutation at WARNING with its error kind, then re-raise."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except GameLibError as e:
            logger.warning(f"{func.__name__} rejected ({e.kind}): {e}")
            raise
    return wrapper


class BaseService:
    """
    Base class holding configuration and the clock.

    Args:
        config: Configuration dict (database path, busy timeout, ...)
        db_path: Explicit database path (overrides config)
        now: Callable returning the current ISO-8601 timestamp
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        db_path: Optional[Path] = None,
        now: Optional[Callable[[], str]] = None
    ):
        self.config = config or {}
        self.db_path = db_path
        self.now = now or utcnow

    def _db(self) -> Database:
        return Database(db_path=self.db_path, config=self.config)

    # Lookups shared by the services. All raise instead of returning None.

    @staticmethod
    def _require_project(db: Database, name: str) -> Project:
        project = get_project_by_name(db, name)
        if project is None:
            raise NotFound(f"Project not found: {name}")
        return project

    @staticmethod
    def _require_package(db: Database, project: Project, name: str) -> Package:
        package = get_package(db, project.id, name)
        if package is None:
            raise NotFound(f"Package not found: {project.name}/{name}")
        return package

    @staticmethod
    def _require_user(db: Database, username: str) -> User:
        user = get_user_by_name(db, username)
        if user is None:
            raise NotFound(f"User not found: {username}")
        return user

    @staticmethod
    def _acting_user(db: Database, username: str) -> User:
        """Resolve the acting identity; an unknown username is not allowed to act."""
        user = get_user_by_name(db, username) if isinstance(username, str) else None
        if user is None:
            raise Forbidden()
        return user

    @classmethod
    def _require_owner(cls, db: Database, username: str, project: Project) -> User:
        user = cls._acting_user(db, username)
        if not is_owner(db, user.id, project.id):
            raise Forbidden()
        return user
