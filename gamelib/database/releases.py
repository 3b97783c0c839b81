"""
Release database operations for gamelib.

Releases are insert-only. Uniqueness is scoped to (package, major, minor,
patch): pre-release and build labels are stored but do not distinguish
one release from another.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from ..domain.release import Artifact, Release
from ..domain.version import Version
from .connection import Database
from .roles import get_authors_for_releases


_RELEASE_SELECT = """
    SELECT
        releases.release_id,
        projects.name AS project_name,
        packages.name AS package_name,
        releases.version_major,
        releases.version_minor,
        releases.version_patch,
        releases.version_pre,
        releases.version_build,
        releases.url,
        releases.filename,
        releases.size,
        releases.checksum,
        releases.published_at,
        users.username AS published_by_name
    FROM releases
    JOIN packages ON packages.package_id = releases.package_id
    JOIN projects ON projects.project_id = packages.project_id
    LEFT JOIN users ON users.user_id = releases.published_by
"""


def _rows_to_releases(db: Database, rows: Sequence) -> List[Release]:
    authors = get_authors_for_releases(db, [row['release_id'] for row in rows])
    return [
        Release.from_row(row, authors=authors.get(row['release_id'], ()))
        for row in rows
    ]


def core_version_exists(db: Database, package_id: int, version: Version) -> bool:
    """Check whether the package has a release with the same major.minor.patch."""
    db.execute(
        """
        SELECT 1 FROM releases
        WHERE package_id = ? AND version_major = ? AND version_minor = ? AND version_patch = ?
        """,
        (package_id,) + version.core
    )
    return db.fetchone() is not None


def insert_release(
    db: Database,
    package_id: int,
    version: Version,
    artifact: Artifact,
    published_at: str,
    published_by: int
) -> int:
    """
    Insert a release row.

    Raises:
        DuplicateVersion: If major.minor.patch is already taken (UNIQUE constraint)
    """
    db.execute(
        """
        INSERT INTO releases (
            package_id, version, version_major, version_minor, version_patch,
            version_pre, version_build, url, filename, size, checksum,
            published_at, published_by
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            package_id,
            str(version),
            version.major,
            version.minor,
            version.patch,
            version.pre or '',
            version.build or '',
            artifact.url,
            artifact.filename,
            artifact.size,
            artifact.checksum,
            published_at,
            published_by,
        )
    )
    return db.lastrowid


def get_release_by_id(db: Database, release_id: int) -> Optional[Release]:
    db.execute(_RELEASE_SELECT + " WHERE releases.release_id = ?", (release_id,))
    row = db.fetchone()
    if row is None:
        return None
    return _rows_to_releases(db, [row])[0]


def get_release(db: Database, package_id: int, version: Version) -> Optional[Release]:
    """
    Get the release matching all five version fields exactly.
    """
    db.execute(
        _RELEASE_SELECT
        + """
        WHERE releases.package_id = ?
          AND releases.version_major = ?
          AND releases.version_minor = ?
          AND releases.version_patch = ?
          AND releases.version_pre = ?
          AND releases.version_build = ?
        """,
        (package_id,) + version.core + (version.pre or '', version.build or '')
    )
    row = db.fetchone()
    if row is None:
        return None
    return _rows_to_releases(db, [row])[0]


def list_releases(
    db: Database,
    package_id: int,
    as_of: Optional[str] = None
) -> List[Release]:
    """
    List a package's releases, newest first.

    Args:
        db: Database connection
        package_id: Package row ID
        as_of: Only releases published at or before this timestamp
    """
    sql = _RELEASE_SELECT + " WHERE releases.package_id = ?"
    params: list = [package_id]
    if as_of is not None:
        sql += " AND releases.published_at <= ?"
        params.append(as_of)
    sql += " ORDER BY releases.published_at DESC, releases.release_id DESC"
    db.execute(sql, tuple(params))
    return _rows_to_releases(db, db.fetchall())


def list_releases_for_packages(
    db: Database,
    package_ids: Sequence[int],
    as_of: Optional[str] = None
) -> Dict[int, Tuple[Release, ...]]:
    """List releases of several packages, keyed by package ID."""
    return {
        package_id: tuple(list_releases(db, package_id, as_of=as_of))
        for package_id in package_ids
    }
