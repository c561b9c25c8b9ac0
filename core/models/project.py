# ============================================================================
# PROJECT MODELS
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Core model - Project, raw project record, catalogue, patch
# PURPOSE: Typed shapes of the project catalogue file and its legacy forms
# LAST_REVIEWED: 14 OCT 2026
# EXPORTS: Project, RawProject, Catalogue, RawCatalogue, ProjectPatch
# DEPENDENCIES: pydantic
# ============================================================================
"""
Project Models

Two families of models live here:

- Raw models (RawProject, RawCatalogue) accept anything the catalogue has
  ever looked like: every field optional, legacy flat fields included,
  unknown keys dropped. They are only ever fed to the normalizer.
- Normalized models (Project, Catalogue) are what the normalizer produces
  and what gets written back to disk.

JSON keys are camelCase on disk; Python attributes are snake_case.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, TypeAdapter

from core.contracts import ProjectCategory


CategoryValues = Dict[str, Dict[str, str]]


def utc_now_iso() -> str:
    """Current time as an ISO-8601 string with UTC offset."""
    return datetime.now(timezone.utc).isoformat()


# ============================================================================
# NORMALIZED MODELS
# ============================================================================

class Project(BaseModel):
    """
    A catalogue entry after normalization.

    All project-specific data lives in ``category_values``; the legacy flat
    fields (stack, directory, ...) no longer exist at this level.
    """
    id: str = Field(..., min_length=1)
    name: str
    description: Optional[str] = None
    category_id: str = Field(default=ProjectCategory.GENERAL.value, alias="categoryId")
    is_active: bool = Field(default=False, alias="isActive")
    created_at: str = Field(default_factory=utc_now_iso, alias="createdAt")
    updated_at: str = Field(default_factory=utc_now_iso, alias="updatedAt")
    category_values: CategoryValues = Field(default_factory=dict, alias="categoryValues")

    model_config = {"frozen": False, "populate_by_name": True}

    def touch(self) -> None:
        """Bump updated_at to now."""
        self.updated_at = utc_now_iso()


class Catalogue(BaseModel):
    """The full persisted state: ordered projects plus the active id."""
    projects: List[Project] = Field(default_factory=list)
    active_project_id: Optional[str] = Field(default=None, alias="activeProjectId")

    model_config = {"frozen": False, "populate_by_name": True}

    def get(self, project_id: str) -> Optional[Project]:
        """Find a project by id."""
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    @property
    def active_project(self) -> Optional[Project]:
        if self.active_project_id is None:
            return None
        return self.get(self.active_project_id)

    def to_json(self) -> str:
        """Pretty-printed JSON as stored on disk."""
        return self.model_dump_json(by_alias=True, indent=2)


# ============================================================================
# RAW MODELS
# ============================================================================

class RawProject(BaseModel):
    """
    A project record as found on disk, in any historical shape.

    Nothing is required. Legacy flat development fields are accepted so the
    normalizer can absorb them into ``category_values``.
    """
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = Field(default=None, alias="categoryId")
    is_active: Optional[bool] = Field(default=None, alias="isActive")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    category_values: Optional[CategoryValues] = Field(default=None, alias="categoryValues")

    # Legacy flat fields (pre-category schema)
    stack: Optional[str] = None
    directory: Optional[str] = None
    restart_command: Optional[str] = Field(default=None, alias="restartCommand")
    log_command: Optional[str] = Field(default=None, alias="logCommand")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @classmethod
    def from_project(cls, project: Project) -> "RawProject":
        """Re-enter a normalized project into the normalizer."""
        return cls.model_validate(project.model_dump(by_alias=True))


class RawCatalogue(BaseModel):
    """The current on-disk catalogue shape, before normalization."""
    projects: List[RawProject]
    active_project_id: Optional[str] = Field(default=None, alias="activeProjectId")

    model_config = {"populate_by_name": True, "extra": "ignore"}


# Oldest shape: a bare JSON array of project records
RawProjectList = TypeAdapter(List[RawProject])


# ============================================================================
# PATCH
# ============================================================================

class ProjectPatch(BaseModel):
    """
    A partial update to a project.

    Built with ``from_updates`` from an untyped envelope: only recognized,
    well-typed keys survive, everything else is dropped. Which fields were
    supplied is tracked through ``model_fields_set`` so an explicit
    ``description: null`` can be told apart from an absent description.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    category_values: Optional[CategoryValues] = None

    @classmethod
    def from_updates(cls, updates: Any) -> "ProjectPatch":
        """
        Build a patch from a JSON-like update object.

        Never raises: a non-dict envelope yields an empty patch.
        """
        if not isinstance(updates, dict):
            return cls()

        fields: Dict[str, Any] = {}

        name = updates.get("name")
        if isinstance(name, str):
            fields["name"] = name

        if "description" in updates:
            description = updates["description"]
            if description is None or isinstance(description, str):
                fields["description"] = description

        category_id = updates.get("categoryId")
        if isinstance(category_id, str):
            fields["category_id"] = category_id

        raw_values = updates.get("categoryValues")
        if isinstance(raw_values, dict):
            values: CategoryValues = {}
            for category, variables in raw_values.items():
                if not isinstance(variables, dict):
                    continue
                values[category] = {
                    var_id: value
                    for var_id, value in variables.items()
                    if isinstance(value, str)
                }
            fields["category_values"] = values

        return cls(**fields)

    def apply(self, project: Project) -> Project:
        """Apply supplied fields to ``project`` in place and bump updated_at."""
        supplied = self.model_fields_set
        if "name" in supplied and self.name is not None:
            project.name = self.name
        if "description" in supplied:
            project.description = self.description
        if "category_id" in supplied and self.category_id is not None:
            project.category_id = self.category_id
        if "category_values" in supplied and self.category_values is not None:
            project.category_values = self.category_values
        project.touch()
        return project


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "CategoryValues",
    "Project",
    "Catalogue",
    "RawProject",
    "RawCatalogue",
    "RawProjectList",
    "ProjectPatch",
    "utc_now_iso",
]
