# ============================================================================
# PROJECT SERVICE
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Domain service - Project mutations and rule-file freshness
# PURPOSE: Create/update/delete/activate projects, keep generated files current
# CREATED: 15 OCT 2026
# ============================================================================
"""
ProjectService

Coordination layer between the catalogue, the category definitions and the
generated rule files.

Every operation is a load-mutate-save cycle over CatalogueRepository,
followed by regeneration of whatever generated document the mutation can
affect, all before the call returns:

    create      -> selector
    update      -> selector, active vars when the project is active
    delete      -> selector, cleared active vars when it was active
    activate    -> selector, active vars (or cleared when id is None)

A load that repairs or migrates the stored catalogue writes it back, so both
documents are re-rendered from that load before the operation goes on.

Pattern: Constructor injection of the repositories and the generator; no
module-level state, so tests build one service per temporary directory.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from core.config import PathDefaults, get_defaults
from core.logging import ComponentType, get_logger, log_checkpoint, log_context
from core.models import Catalogue, CategoryValues, Project, ProjectPatch, RawProject
from core.normalizer import enforce_active_flags, normalize_project
from repositories import CatalogueRepository, CategoryRepository, LegacyProjectDiscovery
from services.generator import ConfigGenerator

logger = get_logger(__name__, ComponentType.SERVICE)


class ProjectServiceError(Exception):
    """Base exception for project operations."""


class ProjectNotFoundError(ProjectServiceError):
    """No project with the given id."""

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project '{project_id}' not found")


class ProjectService:
    """Project lifecycle and the generated-file side effects that go with it."""

    def __init__(
        self,
        catalogue_repo: CatalogueRepository,
        category_repo: CategoryRepository,
        generator: ConfigGenerator,
    ):
        self.catalogue_repo = catalogue_repo
        self.category_repo = category_repo
        self.generator = generator

    @classmethod
    def from_paths(cls, paths: PathDefaults) -> "ProjectService":
        """Wire the stores and generator over one set of directories."""
        legacy = LegacyProjectDiscovery(paths.app_data_dir)
        return cls(
            catalogue_repo=CatalogueRepository(paths.config_dir, legacy=legacy),
            category_repo=CategoryRepository(paths.config_dir, paths.match_dir),
            generator=ConfigGenerator(paths.match_dir),
        )

    @classmethod
    def from_defaults(cls) -> "ProjectService":
        return cls.from_paths(get_defaults().paths)

    # ================================================================
    # QUERIES
    # ================================================================

    def get_projects(self) -> Catalogue:
        return self._load()

    def get_project(self, project_id: str) -> Project:
        project = self.get_projects().get(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    # ================================================================
    # MUTATIONS
    # ================================================================

    def create_project(
        self,
        name: str,
        description: Optional[str] = None,
        category_id: Optional[str] = None,
        category_values: Optional[CategoryValues] = None,
    ) -> Project:
        """
        Add a new project with a fresh id and timestamps.

        The record goes through the normalizer, so the general and
        development buckets are populated exactly as on load.
        """
        raw = RawProject(
            name=name,
            description=description,
            category_id=category_id,
            category_values=category_values,
            is_active=False,
        )
        project, _ = normalize_project(raw)

        with log_context(project_id=project.id, operation="create_project"):
            catalogue = self._load()
            catalogue.projects.append(project)
            self.catalogue_repo.save(catalogue)
            logger.info(f"Created project '{project.name}'")

            self.generator.write_selector(catalogue)
        return project

    def update_project(self, project_id: str, updates: Dict[str, Any]) -> Project:
        """
        Apply a partial update.

        Unknown or mistyped keys in ``updates`` are ignored. ``updatedAt`` is
        refreshed even when nothing else changes.

        Raises:
            ProjectNotFoundError: no project with ``project_id``
        """
        with log_context(project_id=project_id, operation="update_project"):
            catalogue = self._load()
            index = self._index_of(catalogue, project_id)

            patched = ProjectPatch.from_updates(updates).apply(catalogue.projects[index])
            project, _ = normalize_project(RawProject.from_project(patched))
            catalogue.projects[index] = project

            self.catalogue_repo.save(catalogue)
            logger.info(f"Updated project '{project.name}'")

            if catalogue.active_project_id == project.id:
                self.generator.write_active_vars(project, self.category_repo.load())
            self.generator.write_selector(catalogue)
        return project

    def delete_project(self, project_id: str) -> None:
        """
        Remove a project; clears the active id when it pointed here.

        Raises:
            ProjectNotFoundError: no project with ``project_id``
        """
        with log_context(project_id=project_id, operation="delete_project"):
            catalogue = self._load()
            index = self._index_of(catalogue, project_id)
            removed = catalogue.projects.pop(index)

            was_active = catalogue.active_project_id == project_id
            if was_active:
                catalogue.active_project_id = None

            self.catalogue_repo.save(catalogue)
            logger.info(f"Deleted project '{removed.name}'")

            if was_active:
                self.generator.write_cleared()
                log_checkpoint("active_project_changed", {"active_project_id": None})
            self.generator.write_selector(catalogue)

    def set_active_project(self, project_id: Optional[str]) -> Catalogue:
        """
        Make ``project_id`` the active project, or clear it with None.

        Raises:
            ProjectNotFoundError: ``project_id`` names no project; nothing is
                saved or regenerated
        """
        with log_context(project_id=project_id, operation="set_active_project"):
            catalogue = self._load()
            if project_id is not None and catalogue.get(project_id) is None:
                raise ProjectNotFoundError(project_id)

            catalogue.active_project_id = project_id
            enforce_active_flags(catalogue.projects, project_id)
            self.catalogue_repo.save(catalogue)

            self._write_active(catalogue)
            self.generator.write_selector(catalogue)
            log_checkpoint("active_project_changed", {"active_project_id": project_id})
        return catalogue

    def handle_project_selection(self, project_id: str) -> Catalogue:
        """Activation coming from the selector trigger."""
        return self.set_active_project(project_id)

    # ================================================================
    # GENERATED FILES
    # ================================================================

    def clear_project_config(self) -> Path:
        """Write the 'no active project' document without touching the catalogue."""
        return self.generator.write_cleared()

    def regenerate(self) -> Catalogue:
        """Re-render both generated documents from the stored catalogue."""
        with log_context(operation="regenerate"):
            catalogue = self.catalogue_repo.load()
            self._write_active(catalogue)
            self.generator.write_selector(catalogue)
        return catalogue

    def _load(self) -> Catalogue:
        """
        Load the catalogue, re-rendering both generated documents when the
        load itself wrote a repaired or migrated catalogue back to disk.
        """
        catalogue = self.catalogue_repo.load()
        if self.catalogue_repo.last_load_persisted:
            logger.info("Catalogue changed while loading, regenerating rule files")
            self._write_active(catalogue)
            self.generator.write_selector(catalogue)
        return catalogue

    def _write_active(self, catalogue: Catalogue) -> None:
        project = catalogue.active_project
        if project is None:
            self.generator.write_cleared()
        else:
            self.generator.write_active_vars(project, self.category_repo.load())

    @staticmethod
    def _index_of(catalogue: Catalogue, project_id: str) -> int:
        for index, project in enumerate(catalogue.projects):
            if project.id == project_id:
                return index
        raise ProjectNotFoundError(project_id)


__all__ = [
    "ProjectService",
    "ProjectServiceError",
    "ProjectNotFoundError",
]
