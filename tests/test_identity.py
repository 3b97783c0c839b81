"""Tests for users, projects and packages."""

import pytest

from gamelib import (
    Forbidden,
    InvalidName,
    NameTaken,
    NotFound,
    ProjectData,
)


class TestUsers:

    def test_create_and_get(self, lib):
        user = lib.create_user("carol")
        assert user.username == "carol"
        assert lib.get_user("carol").id == user.id

    def test_duplicate(self, lib):
        with pytest.raises(NameTaken):
            lib.create_user("alice")

    @pytest.mark.parametrize("name", ["", " carol", "carol ", "ca/rol", "ca\x00rol", "c" * 65])
    def test_invalid(self, lib, name):
        with pytest.raises(InvalidName):
            lib.create_user(name)

    def test_unknown(self, lib):
        with pytest.raises(NotFound):
            lib.get_user("nobody")

    def test_list(self, lib):
        assert [u.username for u in lib.identity.list_users()] == ["alice", "bob"]


class TestProjects:

    def test_creator_is_owner(self, lib):
        assert lib.is_owner("alice", "Foo")
        assert not lib.is_owner("bob", "Foo")
        assert lib.roles.owners("Foo") == ["alice"]

    def test_no_revision_without_data(self, lib):
        with pytest.raises(NotFound):
            lib.get_revision("Foo")
        assert lib.list_revisions("Foo") == []

    def test_data_creates_first_revision(self, lib):
        lib.create_project("Bar", "bob", data=ProjectData(game_title="The Bar"), readme="hello")
        rev = lib.get_revision("Bar")
        assert rev.revision == 1
        assert rev.data.game_title_sort == "Bar, The"
        assert rev.readme == "hello"
        assert rev.modified_by == "bob"

    def test_readme_alone_creates_first_revision(self, lib):
        lib.create_project("Bar", "bob", readme="hello")
        assert lib.get_revision("Bar", 1).readme == "hello"

    def test_duplicate_name(self, lib):
        with pytest.raises(NameTaken):
            lib.create_project("Foo", "bob")
        assert lib.roles.owners("Foo") == ["alice"]

    def test_invalid_name(self, lib):
        with pytest.raises(InvalidName):
            lib.create_project("a/b", "alice")

    def test_unknown_creator(self, lib):
        with pytest.raises(Forbidden):
            lib.create_project("Bar", "nobody")
        with pytest.raises(NotFound):
            lib.get_project("Bar")


class TestPackages:

    def test_create(self, lib):
        package = lib.create_package("Foo", "main", "alice")
        assert package.name == "main"
        assert package.project == "Foo"
        assert package.created_by == "alice"
        assert [p.name for p in lib.get_project("Foo").packages] == ["main"]

    def test_requires_owner(self, lib):
        with pytest.raises(Forbidden):
            lib.create_package("Foo", "main", "bob")
        with pytest.raises(Forbidden):
            lib.create_package("Foo", "main", "nobody")
        assert lib.get_project("Foo").packages == ()

    def test_duplicate_in_project(self, lib):
        lib.create_package("Foo", "main", "alice")
        with pytest.raises(NameTaken):
            lib.create_package("Foo", "main", "alice")

    def test_same_name_in_other_project(self, lib):
        lib.create_project("Bar", "bob")
        lib.create_package("Foo", "main", "alice")
        lib.create_package("Bar", "main", "bob")
        assert [p.name for p in lib.get_project("Bar").packages] == ["main"]

    def test_unknown_project(self, lib):
        with pytest.raises(NotFound):
            lib.create_package("Nope", "main", "alice")

    def test_invalid_name(self, lib):
        with pytest.raises(InvalidName):
            lib.create_package("Foo", "", "alice")
