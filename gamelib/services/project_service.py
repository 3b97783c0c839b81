"""
Project view and image gallery service for gamelib.
"""

import dataclasses
import logging
from typing import List, Optional, Union

from ..database import (
    PROJECT_SORT_COLUMNS,
    get_image,
    get_revision,
    get_sort_value,
    insert_image,
    list_images,
    list_packages,
    list_project_summaries,
    list_releases_for_packages,
    list_role,
    transaction,
)
from ..domain import Image, ProjectPage, ProjectView, validate_name
from ..errors import InvalidArtifact, InvalidQuery, NotFound
from .base import BaseService, log_rejections
from .revision_service import LATEST, revision_number

logger = logging.getLogger(__name__)

# Largest page the project listing returns
MAX_PAGE_SIZE = 100


class ProjectService(BaseService):
    """
    Service for assembled project views and project images.

    Example:
        projects = ProjectService(db_path=path)
        view = projects.get_project("Foo")              # latest
        old = projects.get_project("Foo", revision=1)   # as it was at revision 1
    """

    def get_project(
        self,
        name: str,
        revision: Union[int, str, None] = LATEST
    ) -> ProjectView:
        """
        Assemble a project at its latest revision, or as of revision N.

        A historical view only shows packages and releases that existed at
        the revision's modification time. Owners are always current.

        Raises:
            NotFound: If the project or the requested revision does not exist
        """
        number = revision_number(revision)
        with self._db() as db:
            project = self._require_project(db, name)
            rev = get_revision(db, project.id, number)
            if rev is None and number is not None:
                raise NotFound(f"Revision not found: {name} {revision}")

            as_of = rev.modified_at if number is not None else None
            packages = list_packages(db, project.id, as_of=as_of)
            releases = list_releases_for_packages(db, [p.id for p in packages], as_of=as_of)
            owners = list_role(db, 'owners', project.id)

        return ProjectView(
            project=project,
            revision=rev,
            owners=tuple(owners),
            packages=tuple(
                dataclasses.replace(p, releases=releases.get(p.id, ()))
                for p in packages
            ),
        )

    def list_projects(
        self,
        limit: Optional[int] = None,
        sort: str = 'name',
        descending: bool = False,
        after: Optional[str] = None,
        before: Optional[str] = None,
        last: bool = False
    ) -> ProjectPage:
        """
        List project summaries one page at a time.

        Pages are anchored on project names: ``after`` continues past the
        last project of the previous page, ``before`` steps back from the
        first project of the next one, and ``last`` gives the final page.
        Without an anchor the listing starts at the beginning.

        Args:
            limit: Page size, 1..MAX_PAGE_SIZE (all remaining projects if None)
            sort: One of PROJECT_SORT_COLUMNS ('name', 'title', 'modified', 'created')
            descending: Reverse the order
            after: Name of the project the page starts after
            before: Name of the project the page ends before
            last: Return the final page

        Returns:
            ProjectPage whose next_after/prev_before are set when more
            projects follow/precede the page

        Raises:
            InvalidQuery: If the limit, sort key or anchor combination is invalid
            NotFound: If the anchor project does not exist
        """
        if sort not in PROJECT_SORT_COLUMNS:
            raise InvalidQuery(f"Unknown sort key: {sort!r}")
        if limit is not None and (
            isinstance(limit, bool) or not isinstance(limit, int)
            or not 1 <= limit <= MAX_PAGE_SIZE
        ):
            raise InvalidQuery(f"Page size must be between 1 and {MAX_PAGE_SIZE}: {limit!r}")
        if after is not None and before is not None:
            raise InvalidQuery("Give at most one of after and before")
        if last and (after is not None or before is not None):
            raise InvalidQuery("last cannot be combined with after or before")

        column = PROJECT_SORT_COLUMNS[sort]
        anchor = after if after is not None else before
        # Pages ending at an anchor (or at the end) are read in reverse
        backwards = before is not None or last

        with self._db() as db:
            seek = None
            if anchor is not None:
                value = get_sort_value(db, column, anchor)
                if value is None:
                    raise NotFound(f"Project not found: {anchor}")
                seek = (value, anchor)
            rows = list_project_summaries(
                db,
                column=column,
                descending=descending != backwards,
                limit=limit + 1 if limit else None,
                seek=seek,
            )

        more = limit is not None and len(rows) > limit
        if more:
            rows = rows[:limit]
        if backwards:
            rows.reverse()
            has_prev, has_next = more, before is not None
        else:
            has_prev, has_next = after is not None, more

        return ProjectPage(
            projects=rows,
            next_after=rows[-1].name if has_next and rows else None,
            prev_before=rows[0].name if has_prev and rows else None,
        )

    # Images

    @log_rejections
    def publish_image(self, project: str, filename: str, url: str, acting_user: str) -> Image:
        """
        Add an image to a project's gallery.

        Raises:
            InvalidName: If the filename breaks the naming rules
            InvalidArtifact: If the url is empty
            NotFound: If the project does not exist
            Forbidden: If the acting user is not an owner
            NameTaken: If the filename is already used in the project
        """
        validate_name(filename, "image filename")
        if not isinstance(url, str) or not url.strip():
            raise InvalidArtifact("url must be non-empty")

        with self._db() as db:
            with transaction(db):
                proj = self._require_project(db, project)
                user = self._require_owner(db, acting_user, proj)
                published_at = self.now()
                insert_image(db, proj.id, filename, url, published_at, user.id)

        logger.info(f"Published image {project}/{filename}")
        return Image(
            project=project,
            filename=filename,
            url=url,
            published_at=published_at,
            published_by=acting_user,
        )

    def get_image(self, project: str, filename: str) -> Image:
        with self._db() as db:
            proj = self._require_project(db, project)
            image = get_image(db, proj.id, filename)
        if image is None:
            raise NotFound(f"Image not found: {project}/{filename}")
        return image

    def list_images(self, project: str) -> List[Image]:
        with self._db() as db:
            proj = self._require_project(db, project)
            return list_images(db, proj.id)
