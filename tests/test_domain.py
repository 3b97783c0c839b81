"""Tests for the domain layer."""

import pytest

from gamelib import Artifact, InvalidName, ProjectData, ProjectDataPatch, Version
from gamelib.domain import MAX_NAME_LENGTH, title_sort_key, validate_name
from gamelib.domain.release import Release


class TestTitleSortKey:
    """Tests for deriving the sortable game title."""

    @pytest.mark.parametrize("title,expected", [
        ("The Guns of August", "Guns of August, The"),
        ("A Victory Lost", "Victory Lost, A"),
        ("An Impossible War", "Impossible War, An"),
        ("A la carte", "A la carte"),
        ("Thebes", "Thebes"),
        ("Advanced Squad Leader", "Advanced Squad Leader"),
        ("The", "The"),
        ("", ""),
    ])
    def test_title_sort_key(self, title, expected):
        assert title_sort_key(title) == expected

    def test_project_data_derives_sort_key(self):
        data = ProjectData(game_title="The Guns of August")
        assert data.game_title_sort == "Guns of August, The"

    def test_project_data_keeps_explicit_sort_key(self):
        data = ProjectData(game_title="The Guns of August", game_title_sort="Guns")
        assert data.game_title_sort == "Guns"

    def test_project_data_to_dict(self):
        d = ProjectData(description="d", game_title="T", game_publisher="P", game_year="1979").to_dict()
        assert d == {
            'description': "d",
            'game': {'title': "T", 'title_sort_key': "T", 'publisher': "P", 'year': "1979"},
        }


class TestProjectDataPatch:
    """Tests for partial metadata updates."""

    def setup_method(self):
        self.data = ProjectData(
            description="old description",
            game_title="The Old Title",
            game_publisher="Avalon Hill",
            game_year="1974",
        )

    def test_empty_patch(self):
        assert ProjectDataPatch().is_empty()
        assert not ProjectDataPatch(game_year="1999").is_empty()
        assert not ProjectDataPatch(readme="").is_empty()

    def test_apply_copies_missing_fields(self):
        data, readme = ProjectDataPatch(game_year="1999").apply(self.data, "R1")
        assert data.game_year == "1999"
        assert data.description == "old description"
        assert data.game_title == "The Old Title"
        assert data.game_title_sort == "Old Title, The"
        assert data.game_publisher == "Avalon Hill"
        assert readme == "R1"

    def test_new_title_rederives_sort_key(self):
        data, _ = ProjectDataPatch(game_title="A New Title").apply(self.data, "R1")
        assert data.game_title_sort == "New Title, A"

    def test_explicit_sort_key_wins(self):
        data, _ = ProjectDataPatch(game_title="A New Title", game_title_sort="zzz").apply(self.data, "R1")
        assert data.game_title_sort == "zzz"

    def test_readme_replaced(self):
        data, readme = ProjectDataPatch(readme="R2").apply(self.data, "R1")
        assert data == self.data
        assert readme == "R2"


class TestArtifact:
    """Tests for artifact validation."""

    def test_valid(self):
        assert Artifact(url="u", filename="f", size=1, checksum="c").problems() == ()

    @pytest.mark.parametrize("kwargs", [
        dict(url="", filename="f", size=1, checksum="c"),
        dict(url="u", filename="  ", size=1, checksum="c"),
        dict(url="u", filename="f", size=1, checksum=""),
        dict(url=None, filename="f", size=1, checksum="c"),
        dict(url="u", filename="f", size=0, checksum="c"),
        dict(url="u", filename="f", size=-5, checksum="c"),
        dict(url="u", filename="f", size=True, checksum="c"),
        dict(url="u", filename="f", size="10", checksum="c"),
    ])
    def test_invalid(self, kwargs):
        assert Artifact(**kwargs).problems()

    def test_reports_every_problem(self):
        assert len(Artifact(url="", filename="", size=0, checksum="").problems()) == 4


class TestNaming:
    """Tests for the naming rules."""

    @pytest.mark.parametrize("name", ["alice", "Foo Bar", "x" * MAX_NAME_LENGTH, "Ärger"])
    def test_valid(self, name):
        assert validate_name(name) == name

    @pytest.mark.parametrize("name", [
        "",
        " leading",
        "trailing ",
        "a/b",
        "tab\there",
        "nl\n",
        "x" * (MAX_NAME_LENGTH + 1),
        None,
        42,
    ])
    def test_invalid(self, name):
        with pytest.raises(InvalidName):
            validate_name(name)


class TestRelease:

    def test_to_dict_contains_parsed_fields(self):
        release = Release(
            id=1,
            project="Foo",
            package="main",
            version=Version.parse("1.2.3-rc.1+b5"),
            artifact=Artifact(url="u", filename="f", size=3, checksum="c"),
            published_at="2024-01-01T00:00:00.000000+00:00",
            published_by="alice",
            authors=("bob",),
        )
        d = release.to_dict()
        assert d['version'] == "1.2.3-rc.1+b5"
        assert (d['version_major'], d['version_minor'], d['version_patch']) == (1, 2, 3)
        assert d['version_pre'] == "rc.1"
        assert d['version_build'] == "b5"
        assert d['authors'] == ["bob"]
        assert d['size'] == 3
