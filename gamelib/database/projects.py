"""
Project and revision database operations for gamelib.

Project metadata is stored as snapshots: every revision inserts a fresh
project_data row and a fresh readmes row, bound together by a
project_revisions row. None of the three is ever updated.
"""

from typing import List, Optional, Tuple

from ..domain.project import Project, ProjectData, ProjectRevision, ProjectSummary, RevisionSummary
from .connection import Database


_REVISION_SELECT = """
    SELECT
        projects.name AS project_name,
        project_revisions.revision,
        project_data.description,
        project_data.game_title,
        project_data.game_title_sort,
        project_data.game_publisher,
        project_data.game_year,
        readmes.text AS readme_text,
        project_revisions.modified_at,
        users.username AS modified_by_name
    FROM project_revisions
    JOIN projects ON projects.project_id = project_revisions.project_id
    JOIN project_data ON project_data.project_data_id = project_revisions.project_data_id
    JOIN readmes ON readmes.readme_id = project_revisions.readme_id
    LEFT JOIN users ON users.user_id = project_revisions.modified_by
"""


def _record_to_project(row) -> Project:
    return Project(id=row['project_id'], name=row['name'], created_at=row['created_at'])


def insert_project(db: Database, name: str, created_at: str) -> int:
    """
    Insert a project.

    Raises:
        NameTaken: If the project name exists (from the UNIQUE constraint)
    """
    db.execute(
        "INSERT INTO projects (name, created_at) VALUES (?, ?)",
        (name, created_at)
    )
    return db.lastrowid


def get_project_by_name(db: Database, name: str) -> Optional[Project]:
    db.execute(
        "SELECT project_id, name, created_at FROM projects WHERE name = ?",
        (name,)
    )
    row = db.fetchone()
    return _record_to_project(row) if row else None


# Listing sort keys and the summary columns they order by
PROJECT_SORT_COLUMNS = {
    'name': 'name',
    'title': 'game_title_sort',
    'modified': 'modified_at',
    'created': 'created_at',
}

# Each project joined to its latest revision; projects without one get
# revision 0, empty metadata and modified_at = created_at.
_SUMMARY_SELECT = """
    SELECT * FROM (
        SELECT
            projects.name,
            projects.created_at,
            COALESCE(project_revisions.revision, 0) AS revision,
            COALESCE(project_revisions.modified_at, projects.created_at) AS modified_at,
            COALESCE(project_data.description, '') AS description,
            COALESCE(project_data.game_title, '') AS game_title,
            COALESCE(project_data.game_title_sort, '') AS game_title_sort,
            COALESCE(project_data.game_publisher, '') AS game_publisher,
            COALESCE(project_data.game_year, '') AS game_year
        FROM projects
        LEFT JOIN project_revisions
            ON project_revisions.project_id = projects.project_id
            AND project_revisions.revision = (
                SELECT MAX(latest.revision) FROM project_revisions AS latest
                WHERE latest.project_id = projects.project_id
            )
        LEFT JOIN project_data
            ON project_data.project_data_id = project_revisions.project_data_id
    ) AS summaries
"""


def get_sort_value(db: Database, column: str, name: str) -> Optional[str]:
    """Value of a summary sort column for one project, or None if it does not exist."""
    db.execute(f"{_SUMMARY_SELECT} WHERE name = ?", (name,))
    row = db.fetchone()
    return row[column] if row else None


def list_project_summaries(
    db: Database,
    column: str = 'name',
    descending: bool = False,
    limit: Optional[int] = None,
    seek: Optional[Tuple[str, str]] = None
) -> List[ProjectSummary]:
    """
    List project summaries ordered by ``column``, ties broken by name.

    Args:
        db: Database connection
        column: One of the PROJECT_SORT_COLUMNS values
        descending: Order from the largest value down
        limit: Maximum number of rows (all if None)
        seek: (column value, name) of the row to continue from; only rows
            strictly beyond it in the chosen order are returned
    """
    if column not in PROJECT_SORT_COLUMNS.values():
        raise ValueError(f"Unknown sort column: {column}")

    op = '<' if descending else '>'
    direction = 'DESC' if descending else 'ASC'
    sql = _SUMMARY_SELECT
    params: list = []
    if seek is not None:
        value, name = seek
        if column == 'name':
            sql += f" WHERE name {op} ?"
            params.append(name)
        else:
            sql += f" WHERE ({column} {op} ? OR ({column} = ? AND name {op} ?))"
            params.extend([value, value, name])
    if column == 'name':
        sql += f" ORDER BY name {direction}"
    else:
        sql += f" ORDER BY {column} {direction}, name {direction}"
    if limit is not None:
        sql += " LIMIT ?"
        params.append(limit)
    db.execute(sql, tuple(params))
    return [ProjectSummary.from_row(row) for row in db.fetchall()]


def insert_project_data(db: Database, project_id: int, data: ProjectData) -> int:
    db.execute(
        """
        INSERT INTO project_data (
            project_id, description, game_title, game_title_sort,
            game_publisher, game_year
        ) VALUES (?, ?, ?, ?, ?, ?)
        """,
        (
            project_id,
            data.description,
            data.game_title,
            data.game_title_sort,
            data.game_publisher,
            data.game_year,
        )
    )
    return db.lastrowid


def insert_readme(db: Database, project_id: int, text: str) -> int:
    db.execute(
        "INSERT INTO readmes (project_id, text) VALUES (?, ?)",
        (project_id, text)
    )
    return db.lastrowid


def get_max_revision(db: Database, project_id: int) -> int:
    """Highest revision number of a project, or 0 if it has none."""
    db.execute(
        "SELECT MAX(revision) FROM project_revisions WHERE project_id = ?",
        (project_id,)
    )
    row = db.fetchone()
    return row[0] if row and row[0] is not None else 0


def append_revision(
    db: Database,
    project_id: int,
    data: ProjectData,
    readme: str,
    modified_at: str,
    modified_by: int
) -> int:
    """
    Append the next revision of a project.

    Must run inside a write transaction so that reading the current
    maximum and inserting the next number are not interleaved with
    another writer.

    Returns:
        The new revision number

    Raises:
        RevisionConflict: If the number was taken by another writer
    """
    data_id = insert_project_data(db, project_id, data)
    readme_id = insert_readme(db, project_id, readme)
    revision = get_max_revision(db, project_id) + 1

    db.execute(
        """
        INSERT INTO project_revisions (
            project_id, revision, project_data_id, readme_id,
            modified_at, modified_by
        ) VALUES (?, ?, ?, ?, ?, ?)
        """,
        (project_id, revision, data_id, readme_id, modified_at, modified_by)
    )
    return revision


def get_revision(
    db: Database,
    project_id: int,
    revision: Optional[int] = None
) -> Optional[ProjectRevision]:
    """
    Get one revision of a project.

    Args:
        db: Database connection
        project_id: Project row ID
        revision: Revision number, or None for the latest
    """
    if revision is None:
        db.execute(
            _REVISION_SELECT
            + " WHERE project_revisions.project_id = ?"
            + " ORDER BY project_revisions.revision DESC LIMIT 1",
            (project_id,)
        )
    else:
        db.execute(
            _REVISION_SELECT
            + " WHERE project_revisions.project_id = ? AND project_revisions.revision = ?",
            (project_id, revision)
        )
    row = db.fetchone()
    return ProjectRevision.from_row(row) if row else None


def get_revision_summaries(db: Database, project_id: int) -> List[RevisionSummary]:
    """Revision history of a project, oldest first."""
    db.execute(
        """
        SELECT project_revisions.revision, project_revisions.modified_at,
               users.username AS modified_by_name
        FROM project_revisions
        LEFT JOIN users ON users.user_id = project_revisions.modified_by
        WHERE project_revisions.project_id = ?
        ORDER BY project_revisions.revision
        """,
        (project_id,)
    )
    return [
        RevisionSummary(
            revision=row['revision'],
            modified_at=row['modified_at'],
            modified_by=row['modified_by_name'],
        )
        for row in db.fetchall()
    ]
