"""
Package database operations for gamelib.
"""

from typing import List, Optional

from ..domain.release import Package
from .connection import Database


_PACKAGE_SELECT = """
    SELECT
        packages.package_id,
        projects.name AS project_name,
        packages.name,
        packages.created_at,
        users.username AS created_by_name
    FROM packages
    JOIN projects ON projects.project_id = packages.project_id
    LEFT JOIN users ON users.user_id = packages.created_by
"""


def insert_package(
    db: Database,
    project_id: int,
    name: str,
    created_at: str,
    created_by: int
) -> int:
    """
    Insert a package.

    Raises:
        NameTaken: If the project already has a package of that name
    """
    db.execute(
        "INSERT INTO packages (project_id, name, created_at, created_by) VALUES (?, ?, ?, ?)",
        (project_id, name, created_at, created_by)
    )
    return db.lastrowid


def get_package(db: Database, project_id: int, name: str) -> Optional[Package]:
    db.execute(
        _PACKAGE_SELECT + " WHERE packages.project_id = ? AND packages.name = ?",
        (project_id, name)
    )
    row = db.fetchone()
    return Package.from_row(row) if row else None


def list_packages(
    db: Database,
    project_id: int,
    as_of: Optional[str] = None
) -> List[Package]:
    """
    List a project's packages in creation order.

    Args:
        db: Database connection
        project_id: Project row ID
        as_of: Only packages created at or before this timestamp
    """
    sql = _PACKAGE_SELECT + " WHERE packages.project_id = ?"
    params: list = [project_id]
    if as_of is not None:
        sql += " AND packages.created_at <= ?"
        params.append(as_of)
    sql += " ORDER BY packages.created_at, packages.package_id"
    db.execute(sql, tuple(params))
    return [Package.from_row(row) for row in db.fetchall()]
