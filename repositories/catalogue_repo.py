# ============================================================================
# CATALOGUE REPOSITORY
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Repository - Load/save of the normalized project catalogue
# PURPOSE: Sole owner of projects.json
# CREATED: 14 OCT 2026
# ============================================================================
"""
Catalogue Repository

Loads the project catalogue, normalizing it on every load, and saves it
atomically. Every mutation of the catalogue funnels through ``save``; the
only other writer is legacy migration, which saves through the same method.

Load flow:
    file absent        -> legacy discovery -> else save and return empty
    file present       -> strict parse (malformed is fatal)
      no projects      -> legacy discovery -> else fall through
    normalize          -> save back only if something was repaired
"""

from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from core.config import get_defaults
from core.logging import log_context
from core.models import Catalogue, RawCatalogue
from core.normalizer import normalize_projects
from infrastructure.base_repository import BaseRepository, CatalogueParseError
from repositories.legacy_repo import LegacyProjectDiscovery


class CatalogueRepository(BaseRepository):
    """
    Repository for the project catalogue file.

    Example:
        repo = CatalogueRepository(config_dir=tmp_path / "config")
        catalogue = repo.load()
        catalogue.active_project_id = catalogue.projects[0].id
        repo.save(catalogue)
    """

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        legacy: Optional[LegacyProjectDiscovery] = None,
    ):
        super().__init__()
        defaults = get_defaults()
        config_dir = Path(config_dir) if config_dir else defaults.paths.config_dir
        self.path = config_dir / defaults.files.catalogue_file
        self.legacy = legacy if legacy is not None else LegacyProjectDiscovery()
        self.last_load_persisted = False

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Catalogue:
        """
        Load and normalize the catalogue.

        ``last_load_persisted`` is set when this call wrote a repaired or
        migrated catalogue back to disk, so callers know the generated rule
        files may no longer match.

        Raises:
            CatalogueParseError: the file exists but is not a catalogue
            RepositoryError: the file could not be read or written
        """
        self.last_load_persisted = False
        with log_context(operation="catalogue_load", path=str(self.path)):
            if not self.exists():
                migrated = self.legacy.discover(self.save)
                if migrated is not None:
                    self.last_load_persisted = True
                    return migrated
                self.logger.info(f"No catalogue at {self.path}, creating an empty one")
                catalogue = Catalogue()
                self.save(catalogue)
                return catalogue

            raw = self._parse(self._read_text(self.path, "catalogue read"))

            if not raw.projects:
                migrated = self.legacy.discover(self.save)
                if migrated is not None:
                    self.last_load_persisted = True
                    return migrated

            projects, active_id, changed = normalize_projects(raw.projects, raw.active_project_id)
            catalogue = Catalogue(projects=projects, active_project_id=active_id)
            if changed:
                self.logger.info("Catalogue repaired during load, writing back")
                self.save(catalogue)
                self.last_load_persisted = True
            return catalogue

    def save(self, catalogue: Catalogue) -> None:
        """Serialize and atomically replace the catalogue file."""
        self._write_text(self.path, catalogue.to_json(), "catalogue save")
        self.logger.debug(
            f"Saved {len(catalogue.projects)} project(s), active={catalogue.active_project_id}"
        )

    def _parse(self, text: str) -> RawCatalogue:
        try:
            return RawCatalogue.model_validate_json(text)
        except ValidationError as e:
            raise CatalogueParseError(
                f"Catalogue file {self.path} is not valid: {e.error_count()} error(s), "
                f"first: {e.errors()[0]['msg']}",
                path=self.path,
            ) from e


__all__ = ["CatalogueRepository"]
