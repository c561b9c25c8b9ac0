# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# LAST_REVIEWED: 14 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

All Pydantic models for the project catalogue:
    - Project / Catalogue: normalized, written to disk
    - RawProject / RawCatalogue: any historical shape, normalizer input
    - ProjectPatch: typed partial update
    - CategoryDefinition / VariableDefinition: generator lookup table
"""

from core.models.project import (
    CategoryValues,
    Project,
    Catalogue,
    RawProject,
    RawCatalogue,
    RawProjectList,
    ProjectPatch,
    utc_now_iso,
)
from core.models.category import (
    VariableDefinition,
    CategoryDefinition,
    CategoryDefinitions,
    default_category_definitions,
)

__all__ = [
    # Project
    "CategoryValues",
    "Project",
    "Catalogue",
    "RawProject",
    "RawCatalogue",
    "RawProjectList",
    "ProjectPatch",
    "utc_now_iso",
    # Categories
    "VariableDefinition",
    "CategoryDefinition",
    "CategoryDefinitions",
    "default_category_definitions",
]
