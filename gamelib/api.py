"""
High-level Python API for gamelib.

Example:
    import gamelib

    lib = gamelib.GameLibrary(db_path="/tmp/library.db")

    lib.create_user("alice")
    lib.create_project("Foo", creator="alice")
    lib.create_revision("Foo", gamelib.ProjectData(game_title="Foo"), "R1", acting_user="alice")
    lib.create_package("Foo", "main", acting_user="alice")

    lib.publish_release(
        "Foo", "main", "1.0.0",
        gamelib.Artifact(url="https://example.org/foo.vmod", filename="foo.vmod",
                         size=1024, checksum="d41d8cd9"),
        acting_user="alice",
    )
    lib.latest_release("Foo", "main")

    # Low-level access to services
    lib.identity
    lib.roles
    lib.revisions
    lib.releases
    lib.projects
"""

from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union
import logging

from .config import load_config
from .domain import (
    Artifact,
    Image,
    Package,
    Project,
    ProjectData,
    ProjectDataPatch,
    ProjectPage,
    ProjectRevision,
    ProjectView,
    Release,
    RevisionSummary,
    User,
    Version,
)
from .services import (
    IdentityService,
    ProjectService,
    ReleaseService,
    RevisionService,
    RoleService,
)

logger = logging.getLogger(__name__)


class GameLibrary:
    """
    High-level API for gamelib.

    Wraps the services behind one object sharing configuration, database
    path and clock. Holds no connection and no cached entity, so one
    instance may be used from several threads.
    """

    def __init__(
        self,
        db_path: Optional[Union[str, Path]] = None,
        config_path: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        now: Optional[Callable[[], str]] = None
    ):
        """
        Initialize GameLibrary.

        Args:
            db_path: Database file (overrides config and GAMELIB_DB)
            config_path: Path to config file (default: ~/.gamelib/config.json)
            config: Full config dict (overrides file if provided)
            now: Clock returning ISO-8601 timestamps (default: UTC now)
        """
        self._config = config if config is not None else load_config(config_path)
        self._db_path = Path(db_path) if db_path else None

        kwargs = dict(config=self._config, db_path=self._db_path, now=now)
        self.identity = IdentityService(**kwargs)
        self.roles = RoleService(**kwargs)
        self.revisions = RevisionService(**kwargs)
        self.releases = ReleaseService(**kwargs)
        self.projects = ProjectService(**kwargs)

    @property
    def config(self) -> Dict[str, Any]:
        return self._config

    # Identity

    def create_user(self, username: str) -> User:
        return self.identity.create_user(username)

    def get_user(self, username: str) -> User:
        return self.identity.get_user(username)

    def create_project(
        self,
        name: str,
        creator: str,
        data: Optional[ProjectData] = None,
        readme: Optional[str] = None
    ) -> Project:
        return self.identity.create_project(name, creator, data=data, readme=readme)

    def create_package(self, project: str, name: str, acting_user: str) -> Package:
        return self.identity.create_package(project, name, acting_user)

    # Projects

    def get_project(self, name: str, revision: Union[int, str, None] = "latest") -> ProjectView:
        return self.projects.get_project(name, revision=revision)

    def list_projects(
        self,
        limit: Optional[int] = None,
        sort: str = 'name',
        descending: bool = False,
        after: Optional[str] = None,
        before: Optional[str] = None,
        last: bool = False
    ) -> ProjectPage:
        return self.projects.list_projects(
            limit=limit, sort=sort, descending=descending,
            after=after, before=before, last=last,
        )

    # Revisions

    def create_revision(
        self,
        project: str,
        data: ProjectData,
        readme: str,
        acting_user: str
    ) -> ProjectRevision:
        return self.revisions.create_revision(project, data, readme, acting_user)

    def revise_project(self, project: str, patch: ProjectDataPatch, acting_user: str) -> ProjectRevision:
        return self.revisions.revise_project(project, patch, acting_user)

    def get_revision(self, project: str, revision: Union[int, str] = "latest") -> ProjectRevision:
        return self.revisions.get_revision(project, revision)

    def list_revisions(self, project: str) -> List[RevisionSummary]:
        return self.revisions.list_revisions(project)

    # Releases

    def publish_release(
        self,
        project: str,
        package: str,
        version: Union[str, Version],
        artifact: Union[Artifact, Dict[str, Any]],
        acting_user: str,
        authors: Optional[Iterable[str]] = None
    ) -> Release:
        return self.releases.publish_release(
            project, package, version, artifact, acting_user, authors=authors
        )

    def get_release(self, project: str, package: str, version: Union[str, Version]) -> Release:
        return self.releases.get_release(project, package, version)

    def list_releases(self, project: str, package: str, as_of: Optional[str] = None) -> List[Release]:
        return self.releases.list_releases(project, package, as_of=as_of)

    def latest_release(
        self,
        project: str,
        package: str,
        include_prerelease: Optional[bool] = None
    ) -> Release:
        return self.releases.latest_release(project, package, include_prerelease=include_prerelease)

    # Roles

    def is_owner(self, username: str, project: str) -> bool:
        return self.roles.is_owner(username, project)

    def grant_owner(self, project: str, usernames, acting_user: str) -> List[str]:
        return self.roles.grant_owner(project, usernames, acting_user)

    def revoke_owner(self, project: str, usernames, acting_user: str) -> List[str]:
        return self.roles.revoke_owner(project, usernames, acting_user)

    def grant_player(self, project: str, username: str, acting_user: str) -> List[str]:
        return self.roles.grant_player(project, username, acting_user)

    def revoke_player(self, project: str, username: str, acting_user: str) -> List[str]:
        return self.roles.revoke_player(project, username, acting_user)

    # Images

    def publish_image(self, project: str, filename: str, url: str, acting_user: str) -> Image:
        return self.projects.publish_image(project, filename, url, acting_user)

    def get_image(self, project: str, filename: str) -> Image:
        return self.projects.get_image(project, filename)
