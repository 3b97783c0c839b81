"""
Image gallery database operations for gamelib.
"""

from typing import List, Optional

from ..domain.user import Image
from .connection import Database


_IMAGE_SELECT = """
    SELECT
        projects.name AS project_name,
        images.filename,
        images.url,
        images.published_at,
        users.username AS published_by_name
    FROM images
    JOIN projects ON projects.project_id = images.project_id
    LEFT JOIN users ON users.user_id = images.published_by
"""


def insert_image(
    db: Database,
    project_id: int,
    filename: str,
    url: str,
    published_at: str,
    published_by: int
) -> None:
    """
    Insert an image entry.

    Raises:
        NameTaken: If the project already has an image with that filename
    """
    db.execute(
        """
        INSERT INTO images (project_id, filename, url, published_at, published_by)
        VALUES (?, ?, ?, ?, ?)
        """,
        (project_id, filename, url, published_at, published_by)
    )


def get_image(db: Database, project_id: int, filename: str) -> Optional[Image]:
    db.execute(
        _IMAGE_SELECT + " WHERE images.project_id = ? AND images.filename = ?",
        (project_id, filename)
    )
    row = db.fetchone()
    return Image.from_row(row) if row else None


def list_images(db: Database, project_id: int) -> List[Image]:
    db.execute(
        _IMAGE_SELECT + " WHERE images.project_id = ? ORDER BY images.filename",
        (project_id,)
    )
    return [Image.from_row(row) for row in db.fetchall()]
