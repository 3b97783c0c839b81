"""
User and image domain objects for gamelib.
"""

from dataclasses import dataclass
from typing import Dict, Any


@dataclass(frozen=True)
class User:
    id: int
    username: str

    def to_dict(self) -> Dict[str, Any]:
        return {'username': self.username}


@dataclass(frozen=True)
class Image:
    """Gallery entry of a project."""
    project: str
    filename: str
    url: str
    published_at: str
    published_by: str

    @classmethod
    def from_row(cls, row) -> 'Image':
        return cls(
            project=row['project_name'],
            filename=row['filename'],
            url=row['url'],
            published_at=row['published_at'],
            published_by=row['published_by_name'],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'project': self.project,
            'filename': self.filename,
            'url': self.url,
            'published_at': self.published_at,
            'published_by': self.published_by,
        }
