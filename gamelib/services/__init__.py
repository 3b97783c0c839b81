"""
Service layer for gamelib.

Contains the registry's business rules on top of the database layer:
- IdentityService: Users, projects and packages
- RoleService: Owner, player and author relations
- RevisionService: Append-only project metadata history
- ReleaseService: Release publication and lookup
- ProjectService: Project views and image gallery

Services are the primary API for the CLI and the GameLibrary facade.
"""

from .base import BaseService, utcnow
from .identity_service import IdentityService
from .role_service import RoleService
from .revision_service import RevisionService
from .release_service import ReleaseService
from .project_service import ProjectService

__all__ = [
    'BaseService',
    'utcnow',
    'IdentityService',
    'RoleService',
    'RevisionService',
    'ReleaseService',
    'ProjectService',
]
