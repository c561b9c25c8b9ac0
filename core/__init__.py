# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Core module initialization
# PURPOSE: Export core contracts and models
# LAST_REVIEWED: 14 OCT 2026
# ============================================================================

from core.contracts import ProjectCategory, DevelopmentVariable, DEVELOPMENT_VARIABLES
from core.models import (
    Project,
    Catalogue,
    RawProject,
    RawCatalogue,
    ProjectPatch,
    CategoryDefinition,
    CategoryDefinitions,
    VariableDefinition,
)

__all__ = [
    # Contracts
    "ProjectCategory",
    "DevelopmentVariable",
    "DEVELOPMENT_VARIABLES",
    # Models
    "Project",
    "Catalogue",
    "RawProject",
    "RawCatalogue",
    "ProjectPatch",
    "CategoryDefinition",
    "CategoryDefinitions",
    "VariableDefinition",
]
