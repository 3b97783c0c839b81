"""
gamelib - Release and project-revision registry for game modules.

gamelib hosts versioned packages of game modules grouped under user-owned
projects, together with an append-only history of each project's
descriptive metadata.

Quick Start:
    import gamelib

    lib = gamelib.GameLibrary(db_path="library.db")
    lib.create_user("alice")
    lib.create_project("Foo", creator="alice")
    lib.create_revision("Foo", gamelib.ProjectData(game_title="Foo"), "R1", "alice")
    lib.create_package("Foo", "main", acting_user="alice")
    lib.publish_release("Foo", "main", "1.0.0-rc.1", artifact, acting_user="alice")

Domain Objects:
    Version - Semantic version with semver precedence
    ProjectData, ProjectRevision - Immutable metadata snapshots
    Package, Release, Artifact - Published versions of a package

Services:
    IdentityService - Users, projects, packages
    RoleService - Owners, players, authors
    RevisionService - Project metadata history
    ReleaseService - Release publication and lookup
    ProjectService - Project views, images
"""

__version__ = "0.1.0"

# High-level API
from .api import GameLibrary

# Domain objects
from .domain import (
    Version,
    parse_version,
    Project,
    ProjectData,
    ProjectDataPatch,
    ProjectRevision,
    ProjectView,
    ProjectPage,
    ProjectSummary,
    RevisionSummary,
    Artifact,
    Package,
    Release,
    User,
    Image,
)

# Errors
from .errors import (
    GameLibError,
    InvalidVersion,
    DuplicateVersion,
    Forbidden,
    LastOwnerViolation,
    RevisionConflict,
    InvalidArtifact,
    UnknownAuthor,
    NotFound,
    Unavailable,
    InvalidName,
    NameTaken,
    InvalidQuery,
    InvalidRevision,
)

# Services (for advanced use)
from .services import (
    IdentityService,
    RoleService,
    RevisionService,
    ReleaseService,
    ProjectService,
)

# Configuration
from .config import load_config, save_config

__all__ = [
    # Version
    "__version__",
    # High-level API
    "GameLibrary",
    # Domain objects
    "Version",
    "parse_version",
    "Project",
    "ProjectData",
    "ProjectDataPatch",
    "ProjectRevision",
    "ProjectView",
    "ProjectPage",
    "ProjectSummary",
    "RevisionSummary",
    "Artifact",
    "Package",
    "Release",
    "User",
    "Image",
    # Errors
    "GameLibError",
    "InvalidVersion",
    "DuplicateVersion",
    "Forbidden",
    "LastOwnerViolation",
    "RevisionConflict",
    "InvalidArtifact",
    "UnknownAuthor",
    "NotFound",
    "Unavailable",
    "InvalidName",
    "NameTaken",
    "InvalidQuery",
    "InvalidRevision",
    # Services
    "IdentityService",
    "RoleService",
    "RevisionService",
    "ReleaseService",
    "ProjectService",
    # Configuration
    "load_config",
    "save_config",
]
