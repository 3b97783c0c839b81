"""
Package and release domain objects for gamelib.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any, Tuple

from .version import Version


@dataclass(frozen=True)
class Artifact:
    """
    Location and identity of a release's file.

    The checksum is opaque: it is stored as given and never recomputed.
    """
    url: str
    filename: str
    size: int
    checksum: str

    def problems(self) -> Tuple[str, ...]:
        """Return a description of each invalid field (empty if valid)."""
        found = []
        for name in ('url', 'filename', 'checksum'):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                found.append(f"{name} must be non-empty")
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size <= 0:
            found.append("size must be a positive integer")
        return tuple(found)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'url': self.url,
            'filename': self.filename,
            'size': self.size,
            'checksum': self.checksum,
        }


@dataclass(frozen=True)
class Release:
    """
    One published, versioned artifact of a package.

    Attributes:
        id: Row id
        project: Project name
        package: Package name
        version: Parsed version (keeps pre-release and build labels)
        artifact: File location and identity
        published_at: ISO-8601 timestamp
        published_by: Username of the publisher
        authors: Credited usernames, sorted
    """
    id: int
    project: str
    package: str
    version: Version
    artifact: Artifact
    published_at: str
    published_by: str
    authors: Tuple[str, ...] = ()

    @classmethod
    def from_row(cls, row, authors: Tuple[str, ...] = ()) -> 'Release':
        return cls(
            id=row['release_id'],
            project=row['project_name'],
            package=row['package_name'],
            version=Version.from_row(row),
            artifact=Artifact(
                url=row['url'],
                filename=row['filename'],
                size=row['size'],
                checksum=row['checksum'],
            ),
            published_at=row['published_at'],
            published_by=row['published_by_name'],
            authors=tuple(authors),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {
            'project': self.project,
            'package': self.package,
            'version': str(self.version),
            'version_major': self.version.major,
            'version_minor': self.version.minor,
            'version_patch': self.version.patch,
            'version_pre': self.version.pre,
            'version_build': self.version.build,
            'published_at': self.published_at,
            'published_by': self.published_by,
            'authors': list(self.authors),
        }
        d.update(self.artifact.to_dict())
        return d


@dataclass(frozen=True)
class Package:
    """A named publishable unit of a project, with its releases newest first."""
    id: int
    project: str
    name: str
    created_at: str
    created_by: Optional[str] = None
    releases: Tuple[Release, ...] = ()

    @classmethod
    def from_row(cls, row, releases: Tuple[Release, ...] = ()) -> 'Package':
        return cls(
            id=row['package_id'],
            project=row['project_name'],
            name=row['name'],
            created_at=row['created_at'],
            created_by=row['created_by_name'],
            releases=tuple(releases),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'project': self.project,
            'name': self.name,
            'created_at': self.created_at,
            'created_by': self.created_by,
            'releases': [r.to_dict() for r in self.releases],
        }
