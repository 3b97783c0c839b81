"""
Role/authorization service for gamelib.

Three independent relations:
- owner (user x project): may create packages, publish releases and
  images, create revisions, and manage owners and authors
- author (user x release): credit only
- player (user x project): membership only, managed by the player

No role implies another. Grants and revokes are idempotent.
"""

import logging
from typing import Iterable, List, Optional, Union

from ..database import (
    Database,
    add_roles,
    get_release,
    get_user_by_name,
    get_user_ids,
    has_owner,
    has_role,
    list_role,
    remove_roles,
    transaction,
)
from ..domain import Project, Release, parse_version
from ..errors import Forbidden, LastOwnerViolation, NotFound
from .base import BaseService, log_rejections

logger = logging.getLogger(__name__)


def _as_list(usernames: Union[str, Iterable[str]]) -> List[str]:
    if isinstance(usernames, str):
        return [usernames]
    return list(dict.fromkeys(usernames))


class RoleService(BaseService):
    """
    Service for querying and mutating the three role relations.

    Example:
        roles = RoleService(db_path=path)
        roles.grant_owner("Foo", "bob", acting_user="alice")
        roles.is_owner("bob", "Foo")        # True
        roles.revoke_owner("Foo", ["alice", "bob"], acting_user="alice")
        # -> LastOwnerViolation, nothing removed
    """

    def _resolve_targets(self, db: Database, usernames: List[str]) -> List[int]:
        ids = get_user_ids(db, usernames)
        missing = [name for name in usernames if name not in ids]
        if missing:
            raise NotFound(f"User not found: {', '.join(missing)}")
        return [ids[name] for name in usernames]

    def _require_release(self, db: Database, project: Project, package: str, version) -> Release:
        pkg = self._require_package(db, project, package)
        release = get_release(db, pkg.id, parse_version(version))
        if release is None:
            raise NotFound(f"Release not found: {project.name}/{package} {version}")
        return release

    def _has(self, table: str, username: str, target_id: int, db: Database) -> bool:
        user = get_user_by_name(db, username)
        return user is not None and has_role(db, table, user.id, target_id)

    # Queries

    def is_owner(self, username: str, project: str) -> bool:
        with self._db() as db:
            proj = self._require_project(db, project)
            return self._has('owners', username, proj.id, db)

    def is_player(self, username: str, project: str) -> bool:
        with self._db() as db:
            proj = self._require_project(db, project)
            return self._has('players', username, proj.id, db)

    def is_author(self, username: str, project: str, package: str, version) -> bool:
        with self._db() as db:
            proj = self._require_project(db, project)
            release = self._require_release(db, proj, package, version)
            return username in release.authors

    def owners(self, project: str) -> List[str]:
        with self._db() as db:
            proj = self._require_project(db, project)
            return list_role(db, 'owners', proj.id)

    def players(self, project: str) -> List[str]:
        with self._db() as db:
            proj = self._require_project(db, project)
            return list_role(db, 'players', proj.id)

    def authors(self, project: str, package: str, version) -> List[str]:
        with self._db() as db:
            proj = self._require_project(db, project)
            release = self._require_release(db, proj, package, version)
            return list(release.authors)

    # Owners

    @log_rejections
    def grant_owner(
        self,
        project: str,
        usernames: Union[str, Iterable[str]],
        acting_user: str
    ) -> List[str]:
        """
        Make users owners of a project.

        Returns:
            The project's owners afterwards
        """
        names = _as_list(usernames)
        with self._db() as db:
            with transaction(db):
                proj = self._require_project(db, project)
                self._require_owner(db, acting_user, proj)
                added = add_roles(db, 'owners', self._resolve_targets(db, names), proj.id)
                owners = list_role(db, 'owners', proj.id)
        if added:
            logger.info(f"Granted owner of {project} to {', '.join(names)}")
        return owners

    @log_rejections
    def revoke_owner(
        self,
        project: str,
        usernames: Union[str, Iterable[str]],
        acting_user: str
    ) -> List[str]:
        """
        Remove owners from a project.

        All removals happen in one transaction. If the result would leave
        the project without an owner, the transaction is rolled back and
        the owner set is unchanged.

        Raises:
            LastOwnerViolation: If no owner would remain
        """
        names = _as_list(usernames)
        with self._db() as db:
            with transaction(db):
                proj = self._require_project(db, project)
                self._require_owner(db, acting_user, proj)
                removed = remove_roles(db, 'owners', self._resolve_targets(db, names), proj.id)
                if not has_owner(db, proj.id):
                    raise LastOwnerViolation()
                owners = list_role(db, 'owners', proj.id)
        if removed:
            logger.info(f"Revoked owner of {project} from {', '.join(names)}")
        return owners

    # Players

    def _change_player(self, project: str, username: str, acting_user: str, grant: bool) -> List[str]:
        with self._db() as db:
            with transaction(db):
                proj = self._require_project(db, project)
                user = self._acting_user(db, acting_user)
                if user.username != username:
                    raise Forbidden()
                if grant:
                    changed = add_roles(db, 'players', [user.id], proj.id)
                else:
                    changed = remove_roles(db, 'players', [user.id], proj.id)
                players = list_role(db, 'players', proj.id)
        if changed:
            logger.info(f"{'Added' if grant else 'Removed'} player {username} of {project}")
        return players

    @log_rejections
    def grant_player(self, project: str, username: str, acting_user: str) -> List[str]:
        """Register the acting user as a player of a project."""
        return self._change_player(project, username, acting_user, grant=True)

    @log_rejections
    def revoke_player(self, project: str, username: str, acting_user: str) -> List[str]:
        """Remove the acting user from a project's players."""
        return self._change_player(project, username, acting_user, grant=False)

    # Authors

    @log_rejections
    def update_authors(
        self,
        project: str,
        package: str,
        version,
        add: Union[str, Iterable[str]] = (),
        remove: Union[str, Iterable[str]] = (),
        acting_user: Optional[str] = None
    ) -> List[str]:
        """
        Add and remove release authors in one transaction.

        Every named user is resolved before anything changes, so an unknown
        name leaves the author set untouched. Additions are applied before
        removals.

        Returns:
            The release's authors afterwards

        Raises:
            NotFound: If the project, package, release or a named user does not exist
            Forbidden: If the acting user is not an owner
        """
        added, removed = _as_list(add), _as_list(remove)
        with self._db() as db:
            with transaction(db):
                proj = self._require_project(db, project)
                self._require_owner(db, acting_user, proj)
                release = self._require_release(db, proj, package, version)
                add_ids = self._resolve_targets(db, added)
                remove_ids = self._resolve_targets(db, removed)
                changed = add_roles(db, 'authors', add_ids, release.id)
                changed += remove_roles(db, 'authors', remove_ids, release.id)
                authors = list_role(db, 'authors', release.id)
        if changed:
            logger.info(
                f"Changed authors of {project}/{package} {version} "
                f"(added {', '.join(added) or '-'}; removed {', '.join(removed) or '-'})"
            )
        return authors

    def grant_author(self, project, package, version, usernames, acting_user: str) -> List[str]:
        return self.update_authors(project, package, version, add=usernames, acting_user=acting_user)

    def revoke_author(self, project, package, version, usernames, acting_user: str) -> List[str]:
        return self.update_authors(project, package, version, remove=usernames, acting_user=acting_user)
