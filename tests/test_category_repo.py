# ============================================================================
# CATEGORY REPOSITORY TESTS
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Tests - Category definitions and backing rule files
# PURPOSE: Verify defaults, parse errors and rule-file syncing
# CREATED: 15 OCT 2026
# ============================================================================
"""
Category Repository Tests

Run with:
    pytest tests/test_category_repo.py -v
"""

import json

import pytest

from core.models import CategoryDefinition, CategoryDefinitions, default_category_definitions
from infrastructure.base_repository import CatalogueParseError
from repositories.category_repo import CategoryRepository, category_file_name, stub_rule_file


# ============================================================================
# HELPERS
# ============================================================================

def _make_repo(tmp_path):
    return CategoryRepository(config_dir=tmp_path / "config", match_dir=tmp_path / "match")


def _category(category_id, name=None, file_name=None, description=None):
    return CategoryDefinition(
        id=category_id,
        name=name if name is not None else category_id.title(),
        description=description,
        file_name=file_name,
    )


# ============================================================================
# LOAD / SAVE
# ============================================================================

class TestCategoryLoad:
    def test_absent_file_gives_defaults(self, tmp_path):
        definitions = _make_repo(tmp_path).load()

        assert [c.id for c in definitions.categories] == ["general", "development"]
        development = definitions.find("development")
        assert [v.id for v in development.variable_definitions][:2] == ["tech_stack", "active_project_stack"]
        assert development.variable_definitions[0].default_value == "TypeScript"

    def test_absent_file_is_not_created(self, tmp_path):
        repo = _make_repo(tmp_path)
        repo.load()
        assert not repo.exists()

    def test_round_trip_with_camel_case_keys(self, tmp_path):
        repo = _make_repo(tmp_path)
        repo.save(default_category_definitions())

        data = json.loads(repo.path.read_text(encoding="utf-8"))
        assert "lastUpdated" in data
        assert data["categories"][0]["fileName"] == "project_general.yml"
        assert "variableDefinitions" in data["categories"][0]

        assert repo.load() == CategoryDefinitions.model_validate(data)

    def test_malformed_file_raises(self, tmp_path):
        repo = _make_repo(tmp_path)
        repo.path.parent.mkdir(parents=True)
        repo.path.write_text("{", encoding="utf-8")

        with pytest.raises(CatalogueParseError):
            repo.load()

    def test_find_unknown_is_none(self):
        assert default_category_definitions().find("nope") is None


# ============================================================================
# RULE FILE SYNC
# ============================================================================

class TestCategoryWrite:
    """write() creates stubs for new categories and removes deleted ones."""

    def test_new_category_gets_stub_file(self, tmp_path):
        repo = _make_repo(tmp_path)

        repo.write(CategoryDefinitions(categories=[
            _category("clients", "Clients", "clients.yml", "Client contacts"),
        ]))

        stub = (tmp_path / "match" / "clients.yml").read_text(encoding="utf-8")
        assert stub == "# Clients\n# Client contacts\nmatches:\n  # Add your replacements here\n"
        assert repo.load().find("clients") is not None

    def test_existing_file_not_overwritten(self, tmp_path):
        repo = _make_repo(tmp_path)
        definitions = CategoryDefinitions(categories=[_category("clients", file_name="clients.yml")])
        repo.write(definitions)
        rule_file = tmp_path / "match" / "clients.yml"
        rule_file.write_text("matches:\n  - trigger: ':hi'\n    replace: hi\n", encoding="utf-8")

        repo.write(definitions)

        assert "trigger" in rule_file.read_text(encoding="utf-8")

    def test_missing_file_recreated(self, tmp_path):
        repo = _make_repo(tmp_path)
        definitions = CategoryDefinitions(categories=[_category("clients", file_name="clients.yml")])
        repo.write(definitions)
        (tmp_path / "match" / "clients.yml").unlink()

        repo.write(definitions)

        assert (tmp_path / "match" / "clients.yml").exists()

    def test_removed_category_file_deleted(self, tmp_path):
        repo = _make_repo(tmp_path)
        repo.write(CategoryDefinitions(categories=[
            _category("keep", file_name="keep.yml"),
            _category("drop", file_name="drop.yml"),
        ]))

        repo.write(CategoryDefinitions(categories=[_category("keep", file_name="keep.yml")]))

        assert (tmp_path / "match" / "keep.yml").exists()
        assert not (tmp_path / "match" / "drop.yml").exists()
        assert [c.id for c in repo.load().categories] == ["keep"]

    def test_category_without_file_name_has_no_file(self, tmp_path):
        repo = _make_repo(tmp_path)
        repo.write(CategoryDefinitions(categories=[_category("bare")]))
        assert not (tmp_path / "match").exists()

    def test_file_name_cannot_escape_match_dir(self, tmp_path):
        repo = _make_repo(tmp_path)
        repo.write(CategoryDefinitions(categories=[_category("x", file_name="../outside.yml")]))
        assert (tmp_path / "match" / "outside.yml").exists()
        assert not (tmp_path / "outside.yml").exists()


class TestEnsureFileNames:
    def test_assigns_names_and_creates_files(self, tmp_path):
        repo = _make_repo(tmp_path)
        repo.save(CategoryDefinitions(
            categories=[_category("dev-tools", "Dev Tools"), _category("blank", "")],
            last_updated="2026-01-01T00:00:00+00:00",
        ))

        definitions = repo.ensure_file_names()

        assert [c.file_name for c in definitions.categories] == ["dev_tools.yml", "blank.yml"]
        assert (tmp_path / "match" / "dev_tools.yml").exists()
        assert (tmp_path / "match" / "blank.yml").exists()
        assert definitions.last_updated != "2026-01-01T00:00:00+00:00"

    def test_defaults_get_their_files(self, tmp_path):
        repo = _make_repo(tmp_path)

        repo.ensure_file_names()

        assert (tmp_path / "match" / "project_general.yml").exists()
        assert (tmp_path / "match" / "project_development.yml").exists()
        assert repo.exists()

    def test_nothing_to_do_does_not_save(self, tmp_path):
        repo = _make_repo(tmp_path)
        repo.ensure_file_names()
        before = repo.path.read_text(encoding="utf-8")

        repo.ensure_file_names()

        assert repo.path.read_text(encoding="utf-8") == before


class TestHelpers:
    def test_category_file_name(self):
        assert category_file_name(_category("x", "My Big-Category")) == "my_big_category.yml"
        assert category_file_name(_category("x-id", "")) == "x-id.yml"

    def test_stub_without_description(self):
        assert stub_rule_file(_category("c", "Plain")) == "# Plain\nmatches:\n  # Add your replacements here\n"

    def test_stub_flattens_multiline_text(self):
        stub = stub_rule_file(_category("c", "Two\nLines", description="a\nb"))
        assert stub.splitlines()[:2] == ["# Two Lines", "# a b"]
