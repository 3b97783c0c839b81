"""Tests for the append-only revision ledger."""

import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from gamelib import (
    Forbidden,
    GameLibrary,
    InvalidRevision,
    NotFound,
    ProjectData,
    ProjectDataPatch,
    RevisionConflict,
    Unavailable,
)
from gamelib.database import Database


class TestCreateRevision:

    def test_history_is_immutable(self, lib):
        a = ProjectData(description="A", game_title="Foo")
        b = ProjectData(description="B", game_title="Foo")

        first = lib.create_revision("Foo", a, "R1", "alice")
        second = lib.create_revision("Foo", b, "R2", "alice")

        assert (first.revision, second.revision) == (1, 2)
        rev1 = lib.get_revision("Foo", 1)
        assert rev1.data == a
        assert rev1.readme == "R1"
        rev2 = lib.get_revision("Foo", 2)
        assert rev2.data == b
        assert rev2.readme == "R2"
        assert lib.get_revision("Foo", "latest").revision == 2

    def test_numbers_are_contiguous(self, lib):
        for i in range(5):
            lib.create_revision("Foo", ProjectData(description=str(i)), "", "alice")
        history = lib.list_revisions("Foo")
        assert [h.revision for h in history] == [1, 2, 3, 4, 5]
        assert all(h.modified_by == "alice" for h in history)
        assert [h.modified_at for h in history] == sorted(h.modified_at for h in history)

    def test_every_revision_stores_new_snapshots(self, lib, db_path):
        data = ProjectData(game_title="Foo")
        lib.create_revision("Foo", data, "same", "alice")
        lib.create_revision("Foo", data, "same", "alice")
        with Database(db_path=db_path) as db:
            db.execute("SELECT COUNT(*) FROM project_data")
            assert db.fetchone()[0] == 2
            db.execute("SELECT COUNT(*) FROM readmes")
            assert db.fetchone()[0] == 2

    def test_accepts_dict(self, lib):
        rev = lib.create_revision("Foo", {'game_title': "The Foo"}, "R", "alice")
        assert rev.data.game_title_sort == "Foo, The"

    def test_bad_data(self, lib):
        with pytest.raises(InvalidRevision):
            lib.create_revision("Foo", {'nonsense': 1}, "R", "alice")

    def test_requires_owner(self, lib):
        with pytest.raises(Forbidden):
            lib.create_revision("Foo", ProjectData(), "R", "bob")
        with pytest.raises(Forbidden):
            lib.create_revision("Foo", ProjectData(), "R", "nobody")
        assert lib.list_revisions("Foo") == []

    def test_unknown_project(self, lib):
        with pytest.raises(NotFound):
            lib.create_revision("Nope", ProjectData(), "R", "alice")

    @pytest.mark.parametrize("selector", [
        0, -1, 2, "0", "two", True, "²", "١", "99999999999999999999", 2**63, "-1", "",
    ])
    def test_unknown_revision(self, lib, selector):
        lib.create_revision("Foo", ProjectData(), "R", "alice")
        with pytest.raises(NotFound):
            lib.get_revision("Foo", selector)

    def test_string_number(self, lib):
        lib.create_revision("Foo", ProjectData(), "R", "alice")
        assert lib.get_revision("Foo", "1").revision == 1


class TestReviseProject:

    def test_patch_carries_other_fields(self, lib):
        lib.create_revision(
            "Foo",
            ProjectData(description="d", game_title="The Foo", game_publisher="GMT", game_year="1990"),
            "R1",
            "alice",
        )
        rev = lib.revise_project("Foo", ProjectDataPatch(game_year="1999"), "alice")
        assert rev.revision == 2
        assert rev.data.game_year == "1999"
        assert rev.data.description == "d"
        assert rev.data.game_title_sort == "Foo, The"
        assert rev.data.game_publisher == "GMT"
        assert rev.readme == "R1"
        assert lib.get_revision("Foo", 1).data.game_year == "1990"

    def test_title_change_rederives_sort_key(self, lib):
        lib.create_revision("Foo", ProjectData(game_title="The Foo"), "R1", "alice")
        rev = lib.revise_project("Foo", ProjectDataPatch(game_title="An Other"), "alice")
        assert rev.data.game_title_sort == "Other, An"

    def test_readme_only(self, lib):
        lib.create_revision("Foo", ProjectData(game_title="Foo"), "R1", "alice")
        rev = lib.revise_project("Foo", ProjectDataPatch(readme="R2"), "alice")
        assert rev.readme == "R2"
        assert rev.data.game_title == "Foo"

    def test_empty_patch(self, lib):
        lib.create_revision("Foo", ProjectData(), "R1", "alice")
        with pytest.raises(InvalidRevision):
            lib.revise_project("Foo", ProjectDataPatch(), "alice")
        assert len(lib.list_revisions("Foo")) == 1

    def test_nothing_to_revise(self, lib):
        with pytest.raises(NotFound):
            lib.revise_project("Foo", ProjectDataPatch(game_year="1999"), "alice")

    def test_requires_owner(self, lib):
        lib.create_revision("Foo", ProjectData(), "R1", "alice")
        with pytest.raises(Forbidden):
            lib.revise_project("Foo", ProjectDataPatch(game_year="1999"), "bob")


class TestConcurrentRevisions:
    """Concurrent writers must end up with contiguous revision numbers."""

    WRITERS = 8

    def _create_with_retry(self, lib, i):
        for _ in range(50):
            try:
                return lib.create_revision("Foo", ProjectData(description=f"writer {i}"), f"R{i}", "alice")
            except (RevisionConflict, Unavailable):
                time.sleep(0.01)
        raise AssertionError("writer never succeeded")

    def test_concurrent_create_revision(self, lib):
        lib.create_revision("Foo", ProjectData(description="start"), "R0", "alice")

        with ThreadPoolExecutor(max_workers=self.WRITERS) as pool:
            results = list(pool.map(lambda i: self._create_with_retry(lib, i), range(self.WRITERS)))

        numbers = sorted(r.revision for r in results)
        assert numbers == list(range(2, self.WRITERS + 2))
        assert [h.revision for h in lib.list_revisions("Foo")] == list(range(1, self.WRITERS + 2))

        # Each writer's snapshot is bound to the number it was given
        for r in results:
            stored = lib.get_revision("Foo", r.revision)
            assert stored.readme == r.readme
            assert stored.data == r.data

    def test_separate_library_instances(self, lib, db_path):
        lib.create_revision("Foo", ProjectData(), "R0", "alice")
        libraries = [GameLibrary(db_path=db_path, config={}) for _ in range(4)]

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda pair: self._create_with_retry(*pair), zip(libraries, range(4))))

        assert sorted(r.revision for r in results) == [2, 3, 4, 5]
