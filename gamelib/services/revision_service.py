"""
Revision ledger service for gamelib.

Each edit of a project's metadata appends an immutable revision numbered
one past the current maximum. Reading the maximum and inserting the next
number happen in one immediate write transaction; if another writer still
takes the number, the uniqueness constraint reports RevisionConflict and
the caller retries.
"""

import logging
from typing import List, Optional, Union

from ..database import MAX_INTEGER, append_revision, get_revision, get_revision_summaries, transaction
from ..domain import ProjectData, ProjectDataPatch, ProjectRevision, RevisionSummary
from ..errors import InvalidRevision, NotFound
from .base import BaseService, log_rejections

logger = logging.getLogger(__name__)

LATEST = "latest"


def _coerce_data(data) -> ProjectData:
    if isinstance(data, ProjectData):
        return data
    if isinstance(data, dict):
        try:
            return ProjectData(**data)
        except TypeError as e:
            raise InvalidRevision(f"Invalid project data: {e}") from e
    raise InvalidRevision(f"Invalid project data: {data!r}")


def revision_number(revision: Union[int, str, None]) -> Optional[int]:
    """Translate a revision selector into a number (None for latest)."""
    if revision is None or revision == LATEST:
        return None
    if isinstance(revision, bool):
        raise NotFound(f"Revision not found: {revision!r}")
    if isinstance(revision, str):
        # isdigit() alone also accepts digits int() rejects, like '²'
        if not (revision.isascii() and revision.isdigit()):
            raise NotFound(f"Revision not found: {revision!r}")
        revision = int(revision)
    if not isinstance(revision, int) or not 1 <= revision <= MAX_INTEGER:
        raise NotFound(f"Revision not found: {revision!r}")
    return revision


class RevisionService(BaseService):
    """
    Service for a project's metadata history.

    Example:
        revisions = RevisionService(db_path=path)
        revisions.create_revision("Foo", ProjectData(game_title="Foo"), "R1", "alice")
        revisions.revise_project("Foo", ProjectDataPatch(game_year="1999"), "alice")
        revisions.get_revision("Foo", 1)        # still the first snapshot
    """

    @log_rejections
    def create_revision(
        self,
        project: str,
        data: ProjectData,
        readme: str,
        acting_user: str
    ) -> ProjectRevision:
        """
        Append a revision holding fresh snapshots of ``data`` and ``readme``.

        Raises:
            NotFound: If the project does not exist
            Forbidden: If the acting user is not an owner
            RevisionConflict: If another writer took the revision number
        """
        data = _coerce_data(data)
        readme = readme if readme is not None else ""

        with self._db() as db:
            with transaction(db):
                proj = self._require_project(db, project)
                user = self._require_owner(db, acting_user, proj)
                modified_at = self.now()
                number = append_revision(db, proj.id, data, readme, modified_at, user.id)

        logger.info(f"Created revision {number} of {project}")
        return ProjectRevision(
            project=project,
            revision=number,
            data=data,
            readme=readme,
            modified_at=modified_at,
            modified_by=acting_user,
        )

    @log_rejections
    def revise_project(
        self,
        project: str,
        patch: ProjectDataPatch,
        acting_user: str
    ) -> ProjectRevision:
        """
        Append a revision that changes only the fields set in ``patch``.

        The other fields are carried over from the latest revision, read in
        the same transaction as the insert.

        Raises:
            InvalidRevision: If the patch sets no field
            NotFound: If the project or its latest revision does not exist
            Forbidden: If the acting user is not an owner
        """
        if not isinstance(patch, ProjectDataPatch):
            raise InvalidRevision(f"Invalid revision patch: {patch!r}")
        if patch.is_empty():
            raise InvalidRevision("Revision patch changes nothing")

        with self._db() as db:
            with transaction(db):
                proj = self._require_project(db, project)
                user = self._require_owner(db, acting_user, proj)
                latest = get_revision(db, proj.id)
                if latest is None:
                    raise NotFound(f"Project {project} has no revision to revise")
                data, readme = patch.apply(latest.data, latest.readme)
                modified_at = self.now()
                number = append_revision(db, proj.id, data, readme, modified_at, user.id)

        logger.info(f"Created revision {number} of {project} (patch)")
        return ProjectRevision(
            project=project,
            revision=number,
            data=data,
            readme=readme,
            modified_at=modified_at,
            modified_by=acting_user,
        )

    def get_revision(
        self,
        project: str,
        revision: Union[int, str, None] = LATEST
    ) -> ProjectRevision:
        """
        Get revision ``revision`` of a project, or its latest.

        Raises:
            NotFound: If the project or revision does not exist
        """
        number = revision_number(revision)
        with self._db() as db:
            proj = self._require_project(db, project)
            rev = get_revision(db, proj.id, number)
        if rev is None:
            raise NotFound(f"Revision not found: {project} {revision}")
        return rev

    def list_revisions(self, project: str) -> List[RevisionSummary]:
        with self._db() as db:
            proj = self._require_project(db, project)
            return get_revision_summaries(db, proj.id)
