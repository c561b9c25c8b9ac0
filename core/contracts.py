# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Foundation - Category ids and well-known variable keys
# PURPOSE: Names shared by the normalizer, the stores and the generator
# LAST_REVIEWED: 14 OCT 2026
# EXPORTS: ProjectCategory, DevelopmentVariable, DEVELOPMENT_VARIABLES
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the project catalogue.

Project data lives in ``categoryValues`` keyed by category id and then by
variable id. The ids below are the ones the normalizer synthesizes; every
other category or variable is user-defined and opaque to this package.
"""

from enum import Enum
from typing import NamedTuple, Tuple


# ============================================================================
# CATEGORY IDS
# ============================================================================

class ProjectCategory(str, Enum):
    """Built-in category ids."""
    GENERAL = "general"          # Name and description, present on every project
    DEVELOPMENT = "development"  # Stack, directory, restart/log commands


# ============================================================================
# WELL-KNOWN VARIABLE KEYS
# ============================================================================

# General bucket
PROJECT_NAME_KEY = "project_name"
ACTIVE_PROJECT_NAME_KEY = "active_project_name"
PROJECT_DESCRIPTION_KEY = "project_description"

NAME_KEYS: Tuple[str, ...] = (PROJECT_NAME_KEY, ACTIVE_PROJECT_NAME_KEY)


class DevelopmentVariable(NamedTuple):
    """
    A development variable and the places it may come from.

    ``field`` is the legacy flat attribute on a raw record, ``key`` the
    canonical variable id and ``alias`` the legacy-compatibility id that is
    written alongside it.
    """
    field: str
    key: str
    alias: str

    @property
    def keys(self) -> Tuple[str, str]:
        return (self.key, self.alias)


DEVELOPMENT_VARIABLES: Tuple[DevelopmentVariable, ...] = (
    DevelopmentVariable("stack", "tech_stack", "active_project_stack"),
    DevelopmentVariable("directory", "directory", "active_project_directory"),
    DevelopmentVariable("restart_command", "restart_command", "active_project_restart_cmd"),
    DevelopmentVariable("log_command", "log_command", "active_project_log_cmd"),
)


__all__ = [
    "ProjectCategory",
    "PROJECT_NAME_KEY",
    "ACTIVE_PROJECT_NAME_KEY",
    "PROJECT_DESCRIPTION_KEY",
    "NAME_KEYS",
    "DevelopmentVariable",
    "DEVELOPMENT_VARIABLES",
]
