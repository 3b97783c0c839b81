"""
Identity and naming service for gamelib.

Allocates usernames, project names and package names. Name rules are
checked before any write; uniqueness is left to the storage constraints,
which report NameTaken.
"""

import logging
from typing import Optional, List

from ..database import (
    add_roles,
    append_revision,
    get_all_users,
    insert_package,
    insert_project,
    insert_user,
    transaction,
)
from ..domain import Package, Project, ProjectData, User, validate_name
from .base import BaseService, log_rejections

logger = logging.getLogger(__name__)


class IdentityService(BaseService):
    """
    Service for users, projects and packages.

    Example:
        identity = IdentityService(db_path=path)
        identity.create_user("alice")
        identity.create_project("Foo", creator="alice")
        identity.create_package("Foo", "main", acting_user="alice")
    """

    @log_rejections
    def create_user(self, username: str) -> User:
        validate_name(username, "username")
        with self._db() as db:
            with transaction(db):
                user_id = insert_user(db, username)
        logger.info(f"Created user {username}")
        return User(id=user_id, username=username)

    def get_user(self, username: str) -> User:
        with self._db() as db:
            return self._require_user(db, username)

    def list_users(self) -> List[User]:
        with self._db() as db:
            return get_all_users(db)

    @log_rejections
    def create_project(
        self,
        name: str,
        creator: str,
        data: Optional[ProjectData] = None,
        readme: Optional[str] = None
    ) -> Project:
        """
        Create a project owned by its creator.

        The project row and the creator's ownership are written in one
        transaction. If ``data`` or ``readme`` is given, revision 1 is
        created in the same transaction; otherwise the project has no
        revision until the first create_revision().

        Raises:
            InvalidName: If the name breaks the naming rules
            Forbidden: If the creator is not a known user
            NameTaken: If the name is already used
        """
        validate_name(name, "project name")
        if data is None and readme is not None:
            data = ProjectData()

        with self._db() as db:
            with transaction(db):
                user = self._acting_user(db, creator)
                created_at = self.now()
                project_id = insert_project(db, name, created_at)
                add_roles(db, 'owners', [user.id], project_id)
                if data is not None:
                    append_revision(db, project_id, data, readme or "", created_at, user.id)

        logger.info(f"Created project {name} (owner {creator})")
        return Project(id=project_id, name=name, created_at=created_at)

    @log_rejections
    def create_package(self, project: str, name: str, acting_user: str) -> Package:
        """
        Create a package inside a project.

        Raises:
            InvalidName: If the name breaks the naming rules
            NotFound: If the project does not exist
            Forbidden: If the acting user is not an owner of the project
            NameTaken: If the project already has a package of that name
        """
        validate_name(name, "package name")
        with self._db() as db:
            with transaction(db):
                proj = self._require_project(db, project)
                user = self._require_owner(db, acting_user, proj)
                created_at = self.now()
                package_id = insert_package(db, proj.id, name, created_at, user.id)

        logger.info(f"Created package {project}/{name}")
        return Package(
            id=package_id,
            project=project,
            name=name,
            created_at=created_at,
            created_by=acting_user,
        )
