"""
Project domain objects for gamelib.

A project's descriptive metadata lives in immutable snapshots. Each edit
produces a new ProjectRevision binding a fresh ProjectData snapshot and a
fresh readme snapshot under the next revision number.
"""

from dataclasses import dataclass, field, fields
from typing import Optional, Dict, Any, Tuple, List


# Leading articles moved to the end of the title when building a sort key
ARTICLES = ('A', 'An', 'The')


def split_title_sort_key(title: str) -> Tuple[str, Optional[str]]:
    """
    Split a leading article off a game title.

    Returns:
        (rest, article) or (title, None) if there is no leading article
    """
    head, sep, rest = title.partition(' ')
    if not sep or head not in ARTICLES:
        return title, None
    # Probably Spanish or French, "A" is not an article
    if head == 'A' and rest.startswith('la'):
        return title, None
    return rest, head


def title_sort_key(title: str) -> str:
    """
    Build the sortable form of a game title.

    Examples:
        title_sort_key("The Guns of August")  -> "Guns of August, The"
        title_sort_key("A la carte")          -> "A la carte"
    """
    rest, article = split_title_sort_key(title)
    if article is None:
        return title
    return f"{rest}, {article}"


@dataclass(frozen=True)
class ProjectData:
    """Descriptive fields of one project metadata snapshot."""
    description: str = ""
    game_title: str = ""
    game_title_sort: str = ""
    game_publisher: str = ""
    game_year: str = ""

    def __post_init__(self):
        if not self.game_title_sort and self.game_title:
            object.__setattr__(self, 'game_title_sort', title_sort_key(self.game_title))

    @classmethod
    def from_row(cls, row) -> 'ProjectData':
        return cls(
            description=row['description'],
            game_title=row['game_title'],
            game_title_sort=row['game_title_sort'],
            game_publisher=row['game_publisher'],
            game_year=row['game_year'],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'description': self.description,
            'game': {
                'title': self.game_title,
                'title_sort_key': self.game_title_sort,
                'publisher': self.game_publisher,
                'year': self.game_year,
            },
        }


@dataclass(frozen=True)
class ProjectDataPatch:
    """
    Partial update of a project's metadata.

    Fields left as None are carried over from the latest revision.
    """
    description: Optional[str] = None
    game_title: Optional[str] = None
    game_title_sort: Optional[str] = None
    game_publisher: Optional[str] = None
    game_year: Optional[str] = None
    readme: Optional[str] = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def apply(self, data: ProjectData, readme: str) -> Tuple[ProjectData, str]:
        """Overlay this patch on an existing snapshot."""
        title = self.game_title if self.game_title is not None else data.game_title

        if self.game_title_sort is not None:
            sort_key = self.game_title_sort
        elif self.game_title is not None:
            # New title without an explicit key: derive it again
            sort_key = ""
        else:
            sort_key = data.game_title_sort

        new_data = ProjectData(
            description=self.description if self.description is not None else data.description,
            game_title=title,
            game_title_sort=sort_key,
            game_publisher=self.game_publisher if self.game_publisher is not None else data.game_publisher,
            game_year=self.game_year if self.game_year is not None else data.game_year,
        )
        return new_data, self.readme if self.readme is not None else readme


@dataclass(frozen=True)
class ProjectRevision:
    """
    One immutable, numbered snapshot of a project's metadata.

    Attributes:
        project: Project name
        revision: Revision number (1, 2, 3, ... per project)
        data: Descriptive metadata snapshot
        readme: Readme snapshot text
        modified_at: ISO-8601 timestamp of the revision
        modified_by: Username that created the revision
    """
    project: str
    revision: int
    data: ProjectData
    readme: str
    modified_at: str
    modified_by: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> 'ProjectRevision':
        return cls(
            project=row['project_name'],
            revision=row['revision'],
            data=ProjectData.from_row(row),
            readme=row['readme_text'],
            modified_at=row['modified_at'],
            modified_by=row['modified_by_name'],
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {
            'project': self.project,
            'revision': self.revision,
            'modified_at': self.modified_at,
            'modified_by': self.modified_by,
            'readme': self.readme,
        }
        d.update(self.data.to_dict())
        return d


@dataclass(frozen=True)
class Project:
    """A project as stored: identity plus creation time."""
    id: int
    name: str
    created_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'created_at': self.created_at,
        }


@dataclass(frozen=True)
class ProjectView:
    """
    Assembled view of a project at its latest (or a given) revision.

    ``packages`` holds Package objects whose releases are filtered to those
    that existed at ``revision.modified_at``.
    """
    project: Project
    revision: Optional[ProjectRevision]
    owners: Tuple[str, ...] = ()
    packages: Tuple[Any, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            'name': self.project.name,
            'created_at': self.project.created_at,
            'revision': self.revision.revision if self.revision else 0,
            'modified_at': self.revision.modified_at if self.revision else self.project.created_at,
            'readme': self.revision.readme if self.revision else "",
            'owners': list(self.owners),
            'packages': [p.to_dict() for p in self.packages],
        }
        d.update((self.revision.data if self.revision else ProjectData()).to_dict())
        return d


@dataclass(frozen=True)
class RevisionSummary:
    """Entry of a project's revision history."""
    revision: int
    modified_at: str
    modified_by: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'revision': self.revision,
            'modified_at': self.modified_at,
            'modified_by': self.modified_by,
        }


@dataclass(frozen=True)
class ProjectSummary:
    """
    One row of the project listing: the project with its latest metadata.

    A project without revisions has revision 0, empty metadata and
    modified_at equal to created_at.
    """
    name: str
    created_at: str
    modified_at: str
    revision: int = 0
    data: ProjectData = field(default_factory=ProjectData)

    @classmethod
    def from_row(cls, row) -> 'ProjectSummary':
        return cls(
            name=row['name'],
            created_at=row['created_at'],
            modified_at=row['modified_at'],
            revision=row['revision'],
            data=ProjectData.from_row(row),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            'name': self.name,
            'revision': self.revision,
            'created_at': self.created_at,
            'modified_at': self.modified_at,
        }
        d.update(self.data.to_dict())
        return d


@dataclass(frozen=True)
class ProjectPage:
    """
    One page of the project listing.

    ``next_after`` is passed as ``after`` to get the following page and
    ``prev_before`` as ``before`` to get the preceding one; each is None
    at that end of the listing.
    """
    projects: List[ProjectSummary] = field(default_factory=list)
    next_after: Optional[str] = None
    prev_before: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'projects': [p.to_dict() for p in self.projects],
            'next_after': self.next_after,
            'prev_before': self.prev_before,
        }
