# ============================================================================
# RECORD NORMALIZER TESTS
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Tests - Raw record repair and catalogue invariants
# PURPOSE: Verify migration of legacy fields, idempotence, active-id repair
# CREATED: 15 OCT 2026
# ============================================================================
"""
Record Normalizer Tests

Pure unit tests: raw records in, (project, changed) out. No filesystem.

Run with:
    pytest tests/test_normalizer.py -v
"""

import logging

import pytest

from core.config import NormalizationDefaults
from core.models import Catalogue, ProjectPatch, RawCatalogue, RawProject
from core.normalizer import (
    enforce_active_flags,
    ensure_field,
    first_non_blank,
    normalize_project,
    normalize_projects,
    resolve_active_id,
)


# ============================================================================
# HELPERS
# ============================================================================

def _make_raw(**fields):
    """RawProject from camelCase JSON keys, as found on disk."""
    return RawProject.model_validate(fields)


def _clean_raw(**overrides):
    """A record that is already fully normalized."""
    fields = {
        "id": "p-1",
        "name": "Website",
        "description": None,
        "categoryId": "general",
        "isActive": False,
        "createdAt": "2026-01-01T00:00:00+00:00",
        "updatedAt": "2026-01-01T00:00:00+00:00",
        "categoryValues": {
            "general": {
                "project_name": "Website",
                "active_project_name": "Website",
                "project_description": "",
            }
        },
    }
    fields.update(overrides)
    return _make_raw(**fields)


def _renormalize(projects, active_id):
    raws = [RawProject.from_project(p) for p in projects]
    return normalize_projects(raws, active_id)


def _dump(projects, active_id):
    return Catalogue(projects=projects, active_project_id=active_id).to_json()


# ============================================================================
# FIELD HELPERS
# ============================================================================

class TestEnsureField:
    def test_sets_missing_key(self):
        bucket = {}
        assert ensure_field(bucket, "k", "v") is True
        assert bucket == {"k": "v"}

    def test_same_value_is_not_a_change(self):
        bucket = {"k": "v"}
        assert ensure_field(bucket, "k", "v") is False

    def test_never_blanks_out_existing_text(self):
        bucket = {"k": "keep"}
        assert ensure_field(bucket, "k", "") is False
        assert ensure_field(bucket, "k", "   ") is False
        assert bucket == {"k": "keep"}

    def test_overwrites_with_non_blank(self):
        bucket = {"k": "old"}
        assert ensure_field(bucket, "k", "new") is True
        assert bucket["k"] == "new"

    def test_blank_into_missing_key_is_written(self):
        bucket = {}
        assert ensure_field(bucket, "k", "") is True
        assert bucket == {"k": ""}

    def test_first_non_blank(self):
        assert first_non_blank(None, "", "  ", "x", "y") == "x"
        assert first_non_blank(None, " ") is None


# ============================================================================
# PER-RECORD NORMALIZATION
# ============================================================================

class TestNormalizeProject:
    """normalize_project steps 1-7."""

    def test_scenario_a_legacy_flat_record(self):
        raw = _make_raw(
            name="",
            description=None,
            stack="Go",
            directory="/tmp",
            restartCommand="run",
            logCommand="",
            categoryId=None,
        )

        project, changed = normalize_project(raw)

        assert changed is True
        assert project.category_id == "development"
        general = project.category_values["general"]
        assert general["project_name"] == "Unnamed Project"
        assert general["active_project_name"] == "Unnamed Project"
        dev = project.category_values["development"]
        assert dev["tech_stack"] == dev["active_project_stack"] == "Go"
        assert dev["directory"] == dev["active_project_directory"] == "/tmp"
        assert dev["restart_command"] == dev["active_project_restart_cmd"] == "run"
        assert dev["log_command"] == dev["active_project_log_cmd"] == ""

    def test_missing_identity_is_synthesized(self):
        project, changed = normalize_project(_make_raw(name="X"))
        assert changed is True
        assert project.id
        assert project.created_at
        assert project.updated_at
        assert project.is_active is False

    def test_synthesized_ids_are_unique(self):
        first, _ = normalize_project(_make_raw(name="A"))
        second, _ = normalize_project(_make_raw(name="B"))
        assert first.id != second.id

    def test_clean_record_is_unchanged(self):
        raw = _clean_raw()
        project, changed = normalize_project(raw)
        assert changed is False
        assert project.updated_at == raw.updated_at

    def test_change_refreshes_updated_at(self):
        raw = _clean_raw(name="Renamed")
        project, changed = normalize_project(raw)
        assert changed is True
        assert project.updated_at != raw.updated_at
        assert project.created_at == raw.created_at

    def test_non_destructive_name_resolution(self):
        raw = _clean_raw(
            name="",
            categoryValues={"general": {"project_name": "Foo"}},
        )
        project, changed = normalize_project(raw)
        assert project.name == "Foo"
        assert project.category_values["general"]["project_name"] == "Foo"
        assert project.category_values["general"]["active_project_name"] == "Foo"
        assert changed is True

    def test_name_falls_back_to_legacy_alias(self):
        raw = _clean_raw(
            name=None,
            categoryValues={"general": {"project_name": "", "active_project_name": "Legacy"}},
        )
        project, _ = normalize_project(raw)
        assert project.name == "Legacy"
        assert project.category_values["general"]["project_name"] == "Legacy"

    def test_explicit_name_wins_over_bucket(self):
        raw = _clean_raw(
            name="Explicit",
            categoryValues={"general": {"project_name": "Stale", "active_project_name": "Stale"}},
        )
        project, _ = normalize_project(raw)
        assert project.name == "Explicit"
        assert project.category_values["general"]["project_name"] == "Explicit"

    def test_placeholder_name_is_configurable(self):
        defaults = NormalizationDefaults(placeholder_name="Untitled")
        project, _ = normalize_project(_make_raw(), defaults)
        assert project.name == "Untitled"

    def test_description_absorbed_into_general_bucket(self):
        raw = _clean_raw(description="A site")
        project, changed = normalize_project(raw)
        assert changed is True
        assert project.description == "A site"
        assert project.category_values["general"]["project_description"] == "A site"

    def test_blank_description_normalized_to_none(self):
        raw = _clean_raw(description="   ")
        project, changed = normalize_project(raw)
        assert project.description is None
        assert project.category_values["general"]["project_description"] == ""
        assert changed is True

    def test_description_recovered_from_bucket(self):
        raw = _clean_raw(
            description=None,
            categoryValues={"general": {"project_name": "Website", "project_description": "Kept"}},
        )
        project, _ = normalize_project(raw)
        assert project.description == "Kept"

    def test_general_record_gets_no_development_bucket(self):
        project, _ = normalize_project(_make_raw(name="Notes"))
        assert project.category_id == "general"
        assert "development" not in project.category_values

    def test_development_category_gets_full_bucket(self):
        project, _ = normalize_project(_make_raw(name="App", categoryId="development"))
        dev = project.category_values["development"]
        assert set(dev) == {
            "tech_stack", "active_project_stack",
            "directory", "active_project_directory",
            "restart_command", "active_project_restart_cmd",
            "log_command", "active_project_log_cmd",
        }
        assert all(value == "" for value in dev.values())

    def test_alias_only_value_mirrored_to_canonical_key(self):
        raw = _clean_raw(
            categoryId="development",
            categoryValues={"development": {"active_project_stack": "Rust"}},
        )
        project, _ = normalize_project(raw)
        dev = project.category_values["development"]
        assert dev["tech_stack"] == "Rust"
        assert dev["active_project_stack"] == "Rust"

    def test_existing_dev_values_trigger_bucket_on_general_project(self):
        raw = _clean_raw(
            categoryValues={
                "general": {"project_name": "Website"},
                "development": {"directory": "/srv"},
            },
        )
        project, _ = normalize_project(raw)
        assert project.category_id == "general"
        assert project.category_values["development"]["active_project_directory"] == "/srv"

    def test_legacy_field_overrides_bucket(self):
        raw = _clean_raw(
            categoryId="development",
            stack="Go",
            categoryValues={"development": {"tech_stack": "Python", "active_project_stack": "Python"}},
        )
        project, _ = normalize_project(raw)
        assert project.category_values["development"]["tech_stack"] == "Go"

    def test_blank_legacy_field_does_not_erase_bucket(self):
        raw = _clean_raw(
            categoryId="development",
            logCommand="",
            categoryValues={"development": {"log_command": "tail -f app.log"}},
        )
        project, _ = normalize_project(raw)
        dev = project.category_values["development"]
        assert dev["log_command"] == "tail -f app.log"
        assert dev["active_project_log_cmd"] == "tail -f app.log"

    def test_custom_categories_are_preserved(self):
        raw = _clean_raw(
            categoryValues={
                "general": {"project_name": "Website"},
                "clients": {"contact": "ana@example.com"},
            },
        )
        project, _ = normalize_project(raw)
        assert project.category_values["clients"] == {"contact": "ana@example.com"}

    def test_raw_input_not_mutated(self):
        values = {"general": {"project_name": ""}}
        raw = _clean_raw(name="X", categoryValues=values)
        normalize_project(raw)
        assert raw.category_values == {"general": {"project_name": ""}}

    def test_unknown_keys_ignored(self):
        raw = _make_raw(name="X", color="red", priority=3)
        project, _ = normalize_project(raw)
        assert project.name == "X"


# ============================================================================
# CATALOGUE-LEVEL REPAIRS
# ============================================================================

class TestNormalizeProjects:
    """Invariants 1-4 across the whole list."""

    def test_scenario_b_two_active_projects(self):
        raws = [
            _clean_raw(id="a", isActive=True),
            _clean_raw(id="b", isActive=True),
        ]
        projects, active_id, changed = normalize_projects(raws, None)

        assert changed is True
        assert active_id == "a"
        assert [p.is_active for p in projects] == [True, False]

    def test_dangling_active_id_cleared(self):
        projects, active_id, changed = normalize_projects([_clean_raw(id="a")], "missing")
        assert active_id is None
        assert changed is True

    def test_blank_active_id_cleared(self):
        _, active_id, changed = normalize_projects([_clean_raw(id="a")], "")
        assert active_id is None
        assert changed is True

    def test_flags_follow_active_id(self):
        raws = [_clean_raw(id="a", isActive=True), _clean_raw(id="b")]
        projects, active_id, changed = normalize_projects(raws, "b")
        assert active_id == "b"
        assert [p.is_active for p in projects] == [False, True]
        assert changed is True

    def test_duplicate_ids_reissued(self):
        raws = [_clean_raw(id="same"), _clean_raw(id="same", name="Other")]
        projects, _, changed = normalize_projects(raws, None)
        assert changed is True
        assert projects[0].id == "same"
        assert projects[1].id != "same"
        assert len({p.id for p in projects}) == 2

    def test_duplicate_id_warning_tagged_normalizer(self, caplog):
        raws = [_clean_raw(id="same"), _clean_raw(id="same", name="Other")]
        with caplog.at_level(logging.WARNING, logger="core.normalizer"):
            normalize_projects(raws, None)

        record = next(r for r in caplog.records if "Duplicate project id" in r.getMessage())
        assert record.extra["component"] == "normalizer"

    def test_order_preserved(self):
        raws = [_clean_raw(id=str(i), name=f"P{i}") for i in range(5)]
        projects, _, _ = normalize_projects(raws, None)
        assert [p.id for p in projects] == ["0", "1", "2", "3", "4"]

    def test_clean_catalogue_reports_no_change(self):
        raws = [_clean_raw(id="a", isActive=True), _clean_raw(id="b")]
        _, active_id, changed = normalize_projects(raws, "a")
        assert active_id == "a"
        assert changed is False

    def test_empty_list(self):
        assert normalize_projects([], None) == ([], None, False)

    @pytest.mark.parametrize(
        "raws, active_id",
        [
            ([{"name": "", "stack": "Go", "directory": "/tmp", "restartCommand": "run", "logCommand": ""}], None),
            ([{"name": "A", "isActive": True}, {"name": "B", "isActive": True}], None),
            ([{"id": "x", "name": "A"}, {"id": "x", "name": "B"}], "x"),
            ([{"name": "", "categoryValues": {"general": {"active_project_name": "Old"}}}], "gone"),
            ([{"name": "N", "description": "  ", "categoryId": "development"}], None),
            ([{"id": "d", "description": "D", "categoryValues": {"general": {"project_description": "E"}}}], "d"),
            ([], "stale"),
        ],
    )
    def test_idempotent(self, raws, active_id):
        raw_projects = [_make_raw(**fields) for fields in raws]
        first, first_active, _ = normalize_projects(raw_projects, active_id)

        second, second_active, changed = _renormalize(first, first_active)

        assert changed is False
        assert _dump(second, second_active) == _dump(first, first_active)

    def test_legacy_catalogue_shape(self):
        raw = RawCatalogue.model_validate({
            "projects": [{"id": "a", "name": "A", "isActive": True}],
            "activeProjectId": None,
        })
        projects, active_id, _ = normalize_projects(raw.projects, raw.active_project_id)
        assert active_id == "a"


class TestActiveHelpers:
    def test_resolve_keeps_valid_id(self):
        projects, _, _ = normalize_projects([_clean_raw(id="a")], None)
        assert resolve_active_id(projects, "a") == ("a", False)

    def test_enforce_clears_all_when_none(self):
        projects, _, _ = normalize_projects(
            [_clean_raw(id="a", isActive=True), _clean_raw(id="b")], "a"
        )
        assert enforce_active_flags(projects, None) is True
        assert not any(p.is_active for p in projects)

    def test_enforce_noop(self):
        projects, _, _ = normalize_projects([_clean_raw(id="a")], None)
        assert enforce_active_flags(projects, None) is False


# ============================================================================
# PATCH
# ============================================================================

class TestProjectPatch:
    """Typed partial updates: unknown or mistyped keys are ignored."""

    def _project(self):
        projects, _, _ = normalize_projects([_clean_raw(description="Old")], None)
        return projects[0]

    def test_applies_known_fields(self):
        project = self._project()
        ProjectPatch.from_updates({"name": "New", "categoryId": "development"}).apply(project)
        assert project.name == "New"
        assert project.category_id == "development"

    def test_ignores_unknown_and_mistyped(self):
        project = self._project()
        patch = ProjectPatch.from_updates({"name": 5, "bogus": True, "categoryId": ["x"]})
        assert patch.model_fields_set == set()
        patch.apply(project)
        assert project.name == "Website"
        assert project.category_id == "general"

    def test_explicit_null_clears_description(self):
        project = self._project()
        ProjectPatch.from_updates({"description": None}).apply(project)
        assert project.description is None

    def test_absent_description_kept(self):
        project = self._project()
        ProjectPatch.from_updates({"name": "X"}).apply(project)
        assert project.description == "Old"

    def test_category_values_filter_non_strings(self):
        patch = ProjectPatch.from_updates(
            {"categoryValues": {"development": {"tech_stack": "Go", "port": 8080}, "bad": "x"}}
        )
        assert patch.category_values == {"development": {"tech_stack": "Go"}}

    def test_non_dict_envelope_is_empty_patch(self):
        assert ProjectPatch.from_updates("garbage").model_fields_set == set()
        assert ProjectPatch.from_updates(None).model_fields_set == set()

    def test_always_touches_updated_at(self):
        project = self._project()
        project.updated_at = "2020-01-01T00:00:00+00:00"
        ProjectPatch.from_updates({}).apply(project)
        assert project.updated_at > "2020-01-01T00:00:00+00:00"
