"""
Domain layer for gamelib.

Contains pure domain objects with no I/O or side effects:
- Version: Parsed semantic version with semver precedence
- ProjectData / ProjectRevision: Immutable project metadata snapshots
- Package / Release / Artifact: Published versions of a package
- User / Image: Identities and gallery entries

These objects are immutable and provide to_dict() for JSONL output.
"""

from .version import Version, parse_version
from .naming import validate_name, MAX_NAME_LENGTH
from .project import (
    Project,
    ProjectData,
    ProjectDataPatch,
    ProjectRevision,
    ProjectView,
    ProjectPage,
    ProjectSummary,
    RevisionSummary,
    title_sort_key,
)
from .release import Artifact, Package, Release
from .user import User, Image

__all__ = [
    'Version',
    'parse_version',
    'validate_name',
    'MAX_NAME_LENGTH',
    'Project',
    'ProjectData',
    'ProjectDataPatch',
    'ProjectRevision',
    'ProjectView',
    'ProjectPage',
    'ProjectSummary',
    'RevisionSummary',
    'title_sort_key',
    'Artifact',
    'Package',
    'Release',
    'User',
    'Image',
]
