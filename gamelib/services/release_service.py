"""
Release publication service for gamelib.

Publishing a release runs these checks in order, stopping at the first
failure:

1. the version string parses            -> InvalidVersion
2. the acting user owns the project     -> Forbidden
3. major.minor.patch is not yet taken   -> DuplicateVersion
4. the artifact fields are usable       -> InvalidArtifact
5. every author is a known user         -> UnknownAuthor

Checks 2-5 and the inserts share one write transaction, so a failure
leaves no rows behind.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from ..database import (
    add_roles,
    core_version_exists,
    get_release,
    get_release_by_id,
    get_user_ids,
    insert_release,
    list_releases,
    transaction,
)
from ..domain import Artifact, Release, Version, parse_version
from ..errors import DuplicateVersion, InvalidArtifact, NotFound, UnknownAuthor
from .base import BaseService, log_rejections

logger = logging.getLogger(__name__)


def _coerce_artifact(artifact: Union[Artifact, Dict[str, Any]]) -> Artifact:
    if isinstance(artifact, Artifact):
        return artifact
    if isinstance(artifact, dict):
        return Artifact(
            url=artifact.get('url'),
            filename=artifact.get('filename'),
            size=artifact.get('size'),
            checksum=artifact.get('checksum'),
        )
    raise InvalidArtifact(f"Invalid artifact: {artifact!r}")


class ReleaseService(BaseService):
    """
    Service for publishing and looking up releases.

    Example:
        releases = ReleaseService(db_path=path)
        releases.publish_release(
            "Foo", "main", "1.0.0",
            Artifact(url="https://...", filename="foo.vmod", size=1024, checksum="abc"),
            acting_user="alice",
            authors=["bob"],
        )
        releases.latest_release("Foo", "main")
    """

    @log_rejections
    def publish_release(
        self,
        project: str,
        package: str,
        version: Union[str, Version],
        artifact: Union[Artifact, Dict[str, Any]],
        acting_user: str,
        authors: Optional[Iterable[str]] = None
    ) -> Release:
        """
        Publish a release of a package.

        Returns:
            The stored release, with parsed version fields and authors
        """
        parsed = parse_version(version)
        author_names = list(dict.fromkeys(authors or ()))

        with self._db() as db:
            with transaction(db):
                proj = self._require_project(db, project)
                pkg = self._require_package(db, proj, package)
                user = self._require_owner(db, acting_user, proj)

                if core_version_exists(db, pkg.id, parsed):
                    raise DuplicateVersion(
                        f"{project}/{package} already has a release "
                        f"{parsed.major}.{parsed.minor}.{parsed.patch}"
                    )

                art = _coerce_artifact(artifact)
                problems = art.problems()
                if problems:
                    raise InvalidArtifact("; ".join(problems))

                author_ids = get_user_ids(db, author_names)
                unknown = [name for name in author_names if name not in author_ids]
                if unknown:
                    raise UnknownAuthor(f"Unknown author(s): {', '.join(unknown)}")

                release_id = insert_release(db, pkg.id, parsed, art, self.now(), user.id)
                add_roles(db, 'authors', [author_ids[name] for name in author_names], release_id)
                release = get_release_by_id(db, release_id)

        logger.info(f"Published {project}/{package} {parsed}")
        return release

    def get_release(self, project: str, package: str, version: Union[str, Version]) -> Release:
        """
        Get the release whose version matches exactly, labels included.

        Raises:
            InvalidVersion: If the version string does not parse
            NotFound: If there is no such release
        """
        parsed = parse_version(version)
        with self._db() as db:
            proj = self._require_project(db, project)
            pkg = self._require_package(db, proj, package)
            release = get_release(db, pkg.id, parsed)
        if release is None:
            raise NotFound(f"Release not found: {project}/{package} {parsed}")
        return release

    def list_releases(
        self,
        project: str,
        package: str,
        as_of: Optional[str] = None
    ) -> List[Release]:
        """List a package's releases newest first, optionally as of a timestamp."""
        with self._db() as db:
            proj = self._require_project(db, project)
            pkg = self._require_package(db, proj, package)
            return list_releases(db, pkg.id, as_of=as_of)

    def latest_release(
        self,
        project: str,
        package: str,
        include_prerelease: Optional[bool] = None
    ) -> Release:
        """
        Get the release with the greatest version.

        Pre-releases are skipped unless ``include_prerelease`` is true; when
        it is None the ``releases.include_prerelease`` setting decides.

        Raises:
            NotFound: If the package has no eligible release
        """
        if include_prerelease is None:
            include_prerelease = bool(
                self.config.get('releases', {}).get('include_prerelease', False)
            )
        candidates = [
            r for r in self.list_releases(project, package)
            if include_prerelease or not r.version.is_prerelease
        ]
        if not candidates:
            raise NotFound(f"No release found for {project}/{package}")
        return max(candidates, key=lambda r: r.version)
