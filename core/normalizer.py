# ============================================================================
# RECORD NORMALIZER
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Core - Repair of raw and legacy project records
# PURPOSE: Turn any historical project list into a consistent catalogue
# CREATED: 14 OCT 2026
# ============================================================================
"""
Record Normalizer

Pure functions that repair raw project records into normalized Projects.
Every function returns the repaired value together with a ``changed`` flag;
callers combine flags with ``or`` and persist only when something changed,
so clean data is never rewritten and timestamps do not churn.

After ``normalize_projects`` the catalogue guarantees:
    - every project has a non-empty id, unique within the list
    - the active id is None or names an existing project
    - exactly the project with the active id has ``is_active`` set
    - ``categoryValues.general`` mirrors name and description
    - ``categoryValues.development`` holds canonical and alias keys whenever
      the project has any development data

Usage:
    from core.normalizer import normalize_projects

    projects, active_id, changed = normalize_projects(raw.projects, raw.active_project_id)
"""

import uuid
from typing import Dict, List, Optional, Sequence, Tuple

from core.config import NormalizationDefaults, get_defaults
from core.contracts import (
    DEVELOPMENT_VARIABLES,
    NAME_KEYS,
    PROJECT_DESCRIPTION_KEY,
    PROJECT_NAME_KEY,
    ACTIVE_PROJECT_NAME_KEY,
    ProjectCategory,
)
from core.logging import ComponentType, get_logger
from core.models.project import CategoryValues, Project, RawProject, utc_now_iso

logger = get_logger(__name__, ComponentType.NORMALIZER)


# ============================================================================
# HELPERS
# ============================================================================

def new_project_id() -> str:
    """Fresh opaque project id."""
    return str(uuid.uuid4())


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def first_non_blank(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if not is_blank(value):
            return value
    return None


def ensure_field(bucket: Dict[str, str], key: str, value: str) -> bool:
    """
    Store ``value`` under ``key`` unless that would blank out existing text.

    Returns True only when the bucket actually changed.
    """
    existing = bucket.get(key)
    if existing == value:
        return False
    if is_blank(value) and not is_blank(existing):
        return False
    bucket[key] = value
    return True


def _copy_values(values: Optional[CategoryValues]) -> Tuple[CategoryValues, bool]:
    if values is None:
        return {}, True
    return {category: dict(variables) for category, variables in values.items()}, False


def _has_legacy_dev_fields(raw: RawProject) -> bool:
    return any(not is_blank(getattr(raw, var.field)) for var in DEVELOPMENT_VARIABLES)


# ============================================================================
# PER-RECORD NORMALIZATION
# ============================================================================

def normalize_project(
    raw: RawProject,
    defaults: Optional[NormalizationDefaults] = None,
) -> Tuple[Project, bool]:
    """
    Repair a single raw record.

    Steps, each able to set ``changed``:
        1. identity and timestamps
        2. category inference from legacy development fields
        3. categoryValues map present
        4. general bucket mirrors name and description
        5. development bucket mirrors stack, directory, restart and log
           commands under canonical and alias keys
        6. name adopted from the resolved value
        7. updated_at refreshed when anything changed

    A non-blank stored value is never replaced by a blank incoming one.
    """
    defaults = defaults or get_defaults().normalization
    changed = False

    # 1. Identity
    project_id = raw.id
    if is_blank(project_id):
        project_id = new_project_id()
        changed = True

    now = utc_now_iso()
    created_at = raw.created_at
    if is_blank(created_at):
        created_at = now
        changed = True
    updated_at = raw.updated_at
    if is_blank(updated_at):
        updated_at = now
        changed = True

    is_active = raw.is_active
    if is_active is None:
        is_active = False
        changed = True

    # 2. Category
    category_id = raw.category_id
    if is_blank(category_id):
        if _has_legacy_dev_fields(raw):
            category_id = defaults.development_category
        else:
            category_id = defaults.general_category
        changed = True

    # 3. Values map
    values, created = _copy_values(raw.category_values)
    changed = changed or created

    # 4. General bucket
    general = values.get(ProjectCategory.GENERAL.value)
    if general is None:
        general = values[ProjectCategory.GENERAL.value] = {}
        changed = True

    name = first_non_blank(
        raw.name,
        general.get(PROJECT_NAME_KEY),
        general.get(ACTIVE_PROJECT_NAME_KEY),
    ) or defaults.placeholder_name
    for key in NAME_KEYS:
        changed = ensure_field(general, key, name) or changed

    description = first_non_blank(raw.description, general.get(PROJECT_DESCRIPTION_KEY))
    changed = ensure_field(general, PROJECT_DESCRIPTION_KEY, description or "") or changed
    if description != raw.description:
        changed = True

    # 5. Development bucket
    changed = _synthesize_development(raw, category_id, values, defaults) or changed

    # 6. Name
    if name != raw.name:
        changed = True

    # 7. Timestamp
    if changed:
        updated_at = utc_now_iso()

    project = Project(
        id=project_id,
        name=name,
        description=description,
        category_id=category_id,
        is_active=is_active,
        created_at=created_at,
        updated_at=updated_at,
        category_values=values,
    )
    return project, changed


def _synthesize_development(
    raw: RawProject,
    category_id: str,
    values: CategoryValues,
    defaults: NormalizationDefaults,
) -> bool:
    existing = values.get(defaults.development_category) or {}
    resolved = {
        var: first_non_blank(getattr(raw, var.field), existing.get(var.key), existing.get(var.alias))
        for var in DEVELOPMENT_VARIABLES
    }

    triggered = (
        category_id == defaults.development_category
        or _has_legacy_dev_fields(raw)
        or any(value is not None for value in resolved.values())
    )
    if not triggered:
        return False

    changed = False
    bucket = values.get(defaults.development_category)
    if bucket is None:
        bucket = values[defaults.development_category] = {}
        changed = True

    for var, value in resolved.items():
        for key in var.keys:
            changed = ensure_field(bucket, key, value or "") or changed
    return changed


# ============================================================================
# CATALOGUE-LEVEL REPAIRS
# ============================================================================

def normalize_projects(
    raw_projects: Sequence[RawProject],
    raw_active_id: Optional[str],
    defaults: Optional[NormalizationDefaults] = None,
) -> Tuple[List[Project], Optional[str], bool]:
    """
    Normalize a whole project list and its active id.

    Returns (projects, active_id, changed). Order of projects is preserved.
    """
    projects: List[Project] = []
    seen = set()
    changed = False

    for raw in raw_projects:
        project, project_changed = normalize_project(raw, defaults)
        if project.id in seen:
            old_id = project.id
            project.id = new_project_id()
            project.touch()
            project_changed = True
            logger.warning(f"Duplicate project id {old_id}, re-issued as {project.id}")
        seen.add(project.id)
        projects.append(project)
        changed = changed or project_changed

    active_id, active_changed = resolve_active_id(projects, raw_active_id)
    changed = changed or active_changed

    changed = enforce_active_flags(projects, active_id) or changed

    if changed:
        logger.info(f"Normalized {len(projects)} project(s), catalogue repaired")
    return projects, active_id, changed


def resolve_active_id(
    projects: Sequence[Project],
    active_id: Optional[str],
) -> Tuple[Optional[str], bool]:
    """
    Drop an active id that names no project; otherwise promote the first
    project flagged active when no id is set.
    """
    changed = False
    if active_id is not None:
        if is_blank(active_id) or not any(p.id == active_id for p in projects):
            logger.debug(f"Active id {active_id!r} names no project, cleared")
            active_id = None
            changed = True

    if active_id is None:
        for project in projects:
            if project.is_active:
                active_id = project.id
                changed = True
                break

    return active_id, changed


def enforce_active_flags(projects: Sequence[Project], active_id: Optional[str]) -> bool:
    """Make ``is_active`` true exactly for the project whose id is ``active_id``."""
    changed = False
    for project in projects:
        should_be_active = active_id is not None and project.id == active_id
        if project.is_active != should_be_active:
            project.is_active = should_be_active
            project.touch()
            changed = True
    return changed


__all__ = [
    "new_project_id",
    "is_blank",
    "first_non_blank",
    "ensure_field",
    "normalize_project",
    "normalize_projects",
    "resolve_active_id",
    "enforce_active_flags",
]
