"""
Tests for gamelib.database module.

Tests cover:
- Database connection management and transactions
- Schema creation and append-only enforcement
- Translation of storage errors
- CRUD helpers
"""

import os
import sqlite3
import tempfile
import shutil
import unittest
from pathlib import Path
from unittest.mock import patch

from gamelib.database.connection import (
    Database,
    get_db_path,
    get_busy_timeout,
    get_database_info,
    transaction,
)
from gamelib.database.schema import (
    APPEND_ONLY_TABLES,
    CURRENT_VERSION,
    get_schema_version,
)
from gamelib.database.errors import translate_error
from gamelib.database.users import insert_user, get_user_by_name, get_user_ids
from gamelib.database.projects import (
    append_revision,
    get_max_revision,
    get_revision,
    insert_project,
)
from gamelib.database.roles import add_roles, remove_roles, list_role, has_owner
from gamelib.domain import ProjectData
from gamelib.errors import (
    DuplicateVersion,
    NameTaken,
    NotFound,
    RevisionConflict,
    Unavailable,
)

NOW = "2024-01-01T00:00:00.000000+00:00"


class DatabaseTestCase(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.db_path = Path(self.temp_dir) / 'test.db'

    def tearDown(self):
        shutil.rmtree(self.temp_dir)


class TestDatabaseConnection(DatabaseTestCase):
    """Tests for database connection management."""

    def test_creates_schema(self):
        with Database(db_path=self.db_path) as db:
            self.assertEqual(get_schema_version(db.conn), CURRENT_VERSION)
            db.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            tables = {row['name'] for row in db.fetchall()}
        for table in ('users', 'projects', 'owners', 'players', 'authors', 'project_data',
                      'readmes', 'project_revisions', 'packages', 'releases', 'images'):
            self.assertIn(table, tables)

    def test_reopen_keeps_data(self):
        with Database(db_path=self.db_path) as db:
            insert_user(db, "alice")
        with Database(db_path=self.db_path) as db:
            self.assertIsNotNone(get_user_by_name(db, "alice"))

    def test_foreign_keys_and_wal(self):
        with Database(db_path=self.db_path) as db:
            db.execute("PRAGMA foreign_keys")
            self.assertEqual(db.fetchone()[0], 1)
            db.execute("PRAGMA journal_mode")
            self.assertEqual(db.fetchone()[0].lower(), 'wal')

    def test_not_connected(self):
        db = Database(db_path=self.db_path)
        with self.assertRaises(RuntimeError):
            db.execute("SELECT 1")

    def test_get_db_path_env_override(self):
        with patch.dict(os.environ, {'GAMELIB_DB': '/tmp/elsewhere.db'}):
            self.assertEqual(get_db_path({'database': {'path': '/x.db'}}), Path('/tmp/elsewhere.db'))

    def test_get_db_path_from_config(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop('GAMELIB_DB', None)
            self.assertEqual(get_db_path({'database': {'path': '/data/lib.db'}}), Path('/data/lib.db'))
            self.assertEqual(get_db_path(), Path.home() / '.gamelib' / 'library.db')

    def test_busy_timeout(self):
        self.assertEqual(get_busy_timeout(), 5.0)
        self.assertEqual(get_busy_timeout({'database': {'busy_timeout': '0.5'}}), 0.5)


class TestTransaction(DatabaseTestCase):
    """Tests for explicit transactions."""

    def test_commit(self):
        with Database(db_path=self.db_path) as db:
            with transaction(db):
                insert_user(db, "alice")
            self.assertFalse(db.in_transaction)
        with Database(db_path=self.db_path) as db:
            self.assertIsNotNone(get_user_by_name(db, "alice"))

    def test_rollback_on_exception(self):
        with Database(db_path=self.db_path) as db:
            with self.assertRaises(ValueError):
                with transaction(db):
                    insert_user(db, "alice")
                    raise ValueError("boom")
            self.assertIsNone(get_user_by_name(db, "alice"))

    def test_locked_database_is_unavailable(self):
        config = {'database': {'busy_timeout': 0.1}}
        with Database(db_path=self.db_path) as holder:
            with transaction(holder):
                insert_user(holder, "alice")
                with Database(db_path=self.db_path, config=config) as other:
                    with self.assertRaises(Unavailable) as ctx:
                        with transaction(other):
                            insert_user(other, "bob")
                    self.assertTrue(ctx.exception.retryable)


class TestAppendOnly(DatabaseTestCase):
    """Snapshot tables reject UPDATE and DELETE."""

    def setUp(self):
        super().setUp()
        with Database(db_path=self.db_path) as db:
            with transaction(db):
                self.user_id = insert_user(db, "alice")
                self.project_id = insert_project(db, "Foo", NOW)
                append_revision(db, self.project_id, ProjectData(game_title="Foo"), "R1", NOW, self.user_id)

    def test_tables_listed(self):
        self.assertEqual(
            set(APPEND_ONLY_TABLES),
            {'project_data', 'readmes', 'project_revisions', 'releases'}
        )

    def test_update_rejected(self):
        statements = [
            "UPDATE project_data SET description = 'changed'",
            "UPDATE readmes SET text = 'changed'",
            "UPDATE project_revisions SET revision = 7",
        ]
        with Database(db_path=self.db_path) as db:
            for sql in statements:
                with self.subTest(sql=sql):
                    with self.assertRaises(sqlite3.DatabaseError) as ctx:
                        db.execute(sql)
                    self.assertIn('append-only', str(ctx.exception))

    def test_delete_rejected(self):
        with Database(db_path=self.db_path) as db:
            for table in ('project_revisions', 'project_data', 'readmes'):
                with self.subTest(table=table):
                    with self.assertRaises(sqlite3.DatabaseError):
                        db.execute(f"DELETE FROM {table}")
            rev = get_revision(db, self.project_id, 1)
        self.assertEqual(rev.readme, "R1")
        self.assertEqual(rev.data.game_title, "Foo")


class TestErrorTranslation(DatabaseTestCase):
    """Tests for mapping sqlite3 errors to gamelib errors."""

    def test_unique_tables(self):
        cases = [
            ("UNIQUE constraint failed: users.username", NameTaken),
            ("UNIQUE constraint failed: projects.name", NameTaken),
            ("UNIQUE constraint failed: packages.project_id, packages.name", NameTaken),
            ("UNIQUE constraint failed: images.project_id, images.filename", NameTaken),
            ("UNIQUE constraint failed: releases.package_id, releases.version_major, "
             "releases.version_minor, releases.version_patch", DuplicateVersion),
            ("UNIQUE constraint failed: project_revisions.project_id, "
             "project_revisions.revision", RevisionConflict),
        ]
        for message, expected in cases:
            with self.subTest(message=message):
                self.assertIsInstance(translate_error(sqlite3.IntegrityError(message)), expected)

    def test_foreign_key(self):
        err = translate_error(sqlite3.IntegrityError("FOREIGN KEY constraint failed"))
        self.assertIsInstance(err, NotFound)

    def test_locked(self):
        self.assertIsInstance(translate_error(sqlite3.OperationalError("database is locked")), Unavailable)
        self.assertIsInstance(translate_error(sqlite3.OperationalError("database table is locked")), Unavailable)

    def test_untranslated(self):
        self.assertIsNone(translate_error(sqlite3.IntegrityError("NOT NULL constraint failed: users.username")))
        self.assertIsNone(translate_error(sqlite3.OperationalError("no such table: nothing")))

    def test_duplicate_user(self):
        with Database(db_path=self.db_path) as db:
            insert_user(db, "alice")
            with self.assertRaises(NameTaken) as ctx:
                insert_user(db, "alice")
        self.assertIsInstance(ctx.exception.__cause__, sqlite3.IntegrityError)

    def test_duplicate_revision_number(self):
        with Database(db_path=self.db_path) as db:
            user_id = insert_user(db, "alice")
            project_id = insert_project(db, "Foo", NOW)
            append_revision(db, project_id, ProjectData(), "", NOW, user_id)
            with self.assertRaises(RevisionConflict):
                db.execute(
                    "INSERT INTO project_revisions (project_id, revision, project_data_id, "
                    "readme_id, modified_at, modified_by) VALUES (?, 1, 1, 1, ?, ?)",
                    (project_id, NOW, user_id)
                )

    def test_missing_reference(self):
        with Database(db_path=self.db_path) as db:
            project_id = insert_project(db, "Foo", NOW)
            with self.assertRaises(NotFound):
                add_roles(db, 'owners', [999], project_id)


class TestCrudHelpers(DatabaseTestCase):

    def test_user_ids(self):
        with Database(db_path=self.db_path) as db:
            alice = insert_user(db, "alice")
            bob = insert_user(db, "bob")
            self.assertEqual(get_user_ids(db, ["bob", "alice", "carol"]), {"alice": alice, "bob": bob})
            self.assertEqual(get_user_ids(db, []), {})

    def test_revision_numbers(self):
        with Database(db_path=self.db_path) as db:
            user_id = insert_user(db, "alice")
            project_id = insert_project(db, "Foo", NOW)
            self.assertEqual(get_max_revision(db, project_id), 0)
            self.assertEqual(append_revision(db, project_id, ProjectData(), "a", NOW, user_id), 1)
            self.assertEqual(append_revision(db, project_id, ProjectData(), "b", NOW, user_id), 2)
            self.assertEqual(get_revision(db, project_id).readme, "b")
            self.assertEqual(get_revision(db, project_id, 1).readme, "a")
            self.assertIsNone(get_revision(db, project_id, 3))

    def test_roles_idempotent(self):
        with Database(db_path=self.db_path) as db:
            user_id = insert_user(db, "alice")
            project_id = insert_project(db, "Foo", NOW)
            self.assertFalse(has_owner(db, project_id))
            self.assertEqual(add_roles(db, 'owners', [user_id], project_id), 1)
            self.assertEqual(add_roles(db, 'owners', [user_id], project_id), 0)
            self.assertEqual(list_role(db, 'owners', project_id), ["alice"])
            self.assertEqual(list_role(db, 'players', project_id), [])
            self.assertEqual(remove_roles(db, 'owners', [user_id], project_id), 1)
            self.assertEqual(remove_roles(db, 'owners', [user_id], project_id), 0)
            self.assertFalse(has_owner(db, project_id))

    def test_unknown_role_table(self):
        with Database(db_path=self.db_path) as db:
            with self.assertRaises(ValueError):
                list_role(db, 'admins', 1)


class TestDatabaseInfo(DatabaseTestCase):

    def test_missing_database(self):
        with patch.dict(os.environ, {'GAMELIB_DB': str(self.db_path)}):
            info = get_database_info()
        self.assertFalse(info['exists'])

    def test_counts(self):
        with Database(db_path=self.db_path) as db:
            insert_user(db, "alice")
            insert_project(db, "Foo", NOW)
        with patch.dict(os.environ, {'GAMELIB_DB': str(self.db_path)}):
            info = get_database_info()
        self.assertTrue(info['exists'])
        self.assertEqual(info['users'], 1)
        self.assertEqual(info['projects'], 1)
        self.assertEqual(info['releases'], 0)
        self.assertEqual(info['schema_version'], CURRENT_VERSION)
