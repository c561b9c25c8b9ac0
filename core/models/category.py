# ============================================================================
# CATEGORY DEFINITION MODELS
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Core model - Category and variable definitions
# PURPOSE: Lookup table the generator uses to name project variables
# LAST_REVIEWED: 14 OCT 2026
# EXPORTS: VariableDefinition, CategoryDefinition, CategoryDefinitions
# DEPENDENCIES: pydantic
# ============================================================================
"""
Category Definition Models

A CategoryDefinition is a named bucket of VariableDefinitions, optionally
backed by a rule file in the downstream match directory. Projects link to a
category by id; an id with no definition simply contributes no variables.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from core.contracts import ProjectCategory
from core.models.project import utc_now_iso


class VariableDefinition(BaseModel):
    """One variable a category offers."""
    id: str
    name: str = Field(..., description="Display name, used as the generated variable name")
    description: Optional[str] = None
    default_value: Optional[str] = Field(default=None, alias="defaultValue")
    required: Optional[bool] = None

    model_config = {"populate_by_name": True}


class CategoryDefinition(BaseModel):
    """A category of project variables."""
    id: str
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    is_default: Optional[bool] = Field(default=None, alias="isDefault")
    file_name: Optional[str] = Field(
        default=None,
        alias="fileName",
        description="Backing rule file in the match directory",
    )
    variable_definitions: List[VariableDefinition] = Field(
        default_factory=list,
        alias="variableDefinitions",
    )

    model_config = {"frozen": False, "populate_by_name": True}


class CategoryDefinitions(BaseModel):
    """The category-definition file: ``{categories, lastUpdated}``."""
    categories: List[CategoryDefinition] = Field(default_factory=list)
    last_updated: str = Field(default_factory=utc_now_iso, alias="lastUpdated")

    model_config = {"frozen": False, "populate_by_name": True}

    def find(self, category_id: str) -> Optional[CategoryDefinition]:
        """Look up a category by id; None when unresolved."""
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


# ============================================================================
# BUILT-IN DEFAULTS
# ============================================================================

def _variable(var_id: str, description: str, default_value: Optional[str] = None) -> VariableDefinition:
    return VariableDefinition(
        id=var_id,
        name=var_id,
        description=description,
        default_value=default_value,
        required=False,
    )


def default_category_definitions() -> CategoryDefinitions:
    """
    Categories used when no definition file exists yet.

    Both built-ins list the canonical key and its legacy alias so rule files
    written against either name keep expanding.
    """
    general = CategoryDefinition(
        id=ProjectCategory.GENERAL.value,
        name="General",
        description="Basic project information",
        icon="InfoCircleOutlined",
        color="#1890ff",
        is_default=True,
        file_name="project_general.yml",
        variable_definitions=[
            _variable("project_name", "The name of your project"),
            _variable("active_project_name", "The name of the active project (legacy compatibility)"),
            _variable("project_description", "A brief description of the project"),
        ],
    )
    development = CategoryDefinition(
        id=ProjectCategory.DEVELOPMENT.value,
        name="Development",
        description="Development-related variables",
        icon="CodeOutlined",
        color="#52c41a",
        is_default=True,
        file_name="project_development.yml",
        variable_definitions=[
            _variable("tech_stack", "Technology stack used", "TypeScript"),
            _variable("active_project_stack", "Technology stack (legacy compatibility)", "TypeScript"),
            _variable("directory", "Project directory path"),
            _variable("active_project_directory", "Project directory (legacy compatibility)"),
            _variable("restart_command", "Command to restart the project", "npm run dev"),
            _variable("active_project_restart_cmd", "Restart command (legacy compatibility)", "npm run dev"),
            _variable("log_command", "Command to view logs", "npm run logs"),
            _variable("active_project_log_cmd", "Log command (legacy compatibility)", "npm run logs"),
        ],
    )
    return CategoryDefinitions(categories=[general, development])


__all__ = [
    "VariableDefinition",
    "CategoryDefinition",
    "CategoryDefinitions",
    "default_category_definitions",
]
