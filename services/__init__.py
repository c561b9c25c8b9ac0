# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Core - Business logic layer
# PURPOSE: Rule-file generation and project operations
# CREATED: 14 OCT 2026
# ============================================================================
"""
Services Module

Services coordinate between the repositories and the generated rule files.

Usage:
    from services import ProjectService

    service = ProjectService.from_defaults()
    service.set_active_project(project_id)
"""

from .generator import ConfigGenerator, GenerationError
from .project_service import ProjectService, ProjectServiceError, ProjectNotFoundError

__all__ = [
    "ConfigGenerator",
    "GenerationError",
    "ProjectService",
    "ProjectServiceError",
    "ProjectNotFoundError",
]
