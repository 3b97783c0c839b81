"""
Database module for gamelib.

Provides SQLite-based persistence for users, projects, revisions,
packages, releases, roles and images. The database is the registry's
ground truth; nothing is cached in memory.

Key components:
- connection: Database connection management and transactions
- schema: Table definitions, append-only triggers, schema versioning
- errors: Translation of constraint and lock errors into gamelib errors
- users, projects, packages, releases, roles, images: CRUD operations
"""

from .connection import (
    get_connection,
    get_db_path,
    Database,
    get_database_info,
    transaction,
)
from .schema import CURRENT_VERSION, APPEND_ONLY_TABLES, MAX_INTEGER, ensure_schema
from .errors import translate_error
from .users import insert_user, get_user_by_name, get_user_ids, get_all_users
from .projects import (
    insert_project,
    get_project_by_name,
    PROJECT_SORT_COLUMNS,
    get_sort_value,
    list_project_summaries,
    append_revision,
    get_max_revision,
    get_revision,
    get_revision_summaries,
)
from .packages import insert_package, get_package, list_packages
from .releases import (
    core_version_exists,
    insert_release,
    get_release,
    get_release_by_id,
    list_releases,
    list_releases_for_packages,
)
from .roles import (
    ROLE_TABLES,
    has_role,
    add_roles,
    remove_roles,
    list_role,
    is_owner,
    has_owner,
    get_authors_for_releases,
)
from .images import insert_image, get_image, list_images

__all__ = [
    # Connection
    'get_connection',
    'get_db_path',
    'Database',
    'get_database_info',
    'transaction',
    # Schema
    'ensure_schema',
    'CURRENT_VERSION',
    'APPEND_ONLY_TABLES',
    'MAX_INTEGER',
    # Errors
    'translate_error',
    # Users
    'insert_user',
    'get_user_by_name',
    'get_user_ids',
    'get_all_users',
    # Projects and revisions
    'insert_project',
    'get_project_by_name',
    'PROJECT_SORT_COLUMNS',
    'get_sort_value',
    'list_project_summaries',
    'append_revision',
    'get_max_revision',
    'get_revision',
    'get_revision_summaries',
    # Packages
    'insert_package',
    'get_package',
    'list_packages',
    # Releases
    'core_version_exists',
    'insert_release',
    'get_release',
    'get_release_by_id',
    'list_releases',
    'list_releases_for_packages',
    # Roles
    'ROLE_TABLES',
    'has_role',
    'add_roles',
    'remove_roles',
    'list_role',
    'is_owner',
    'has_owner',
    'get_authors_for_releases',
    # Images
    'insert_image',
    'get_image',
    'list_images',
]
