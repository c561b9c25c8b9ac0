# ============================================================================
# LEGACY PROJECT DISCOVERY
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Repository - One-shot migration of historical project files
# PURPOSE: Find, migrate and retire old project storage files
# CREATED: 14 OCT 2026
# ============================================================================
"""
Legacy Project Discovery

Older releases kept the project list in the application data directory, in
one of several files and in one of two shapes. Discovery checks those files
in priority order, migrates the first one holding projects, and archives it
so the next run does not find it again.

Parsing and archiving are ordered strategy lists: each strategy either
succeeds or lets the next one try.

    parse:    current object shape -> bare list of records
    archive:  rename -> copy then delete original
"""

import logging
import shutil
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from pydantic import ValidationError

from core.config import get_defaults
from core.logging import log_checkpoint, log_context
from core.models import Catalogue, RawCatalogue, RawProjectList
from core.normalizer import normalize_projects
from infrastructure.base_repository import BaseRepository

logger = logging.getLogger(__name__)


SaveCallback = Callable[[Catalogue], None]


# ============================================================================
# PARSE STRATEGIES
# ============================================================================

def parse_current_shape(text: str) -> Optional[RawCatalogue]:
    """``{"projects": [...], "activeProjectId": ...}``"""
    try:
        return RawCatalogue.model_validate_json(text)
    except ValidationError:
        return None


def parse_bare_list(text: str) -> Optional[RawCatalogue]:
    """``[{...}, {...}]``, the oldest shape."""
    try:
        projects = RawProjectList.validate_json(text)
    except ValidationError:
        return None
    return RawCatalogue(projects=projects)


PARSE_STRATEGIES: Tuple[Callable[[str], Optional[RawCatalogue]], ...] = (
    parse_current_shape,
    parse_bare_list,
)


# ============================================================================
# ARCHIVE STRATEGIES
# ============================================================================

def archive_by_rename(source: Path, target: Path) -> None:
    source.rename(target)


def archive_by_copy(source: Path, target: Path) -> None:
    """Copy first, delete only once the backup exists."""
    shutil.copy2(source, target)
    source.unlink()


ARCHIVE_STRATEGIES: Tuple[Callable[[Path, Path], None], ...] = (
    archive_by_rename,
    archive_by_copy,
)


# ============================================================================
# DISCOVERY
# ============================================================================

class LegacyProjectDiscovery(BaseRepository):
    """
    Checks legacy candidate files and migrates the first usable one.

    Stateless between calls: a migrated file is archived under a different
    name, so a second ``discover`` finds nothing and returns None.
    """

    def __init__(
        self,
        app_data_dir: Optional[Path] = None,
        candidates: Optional[Tuple[str, ...]] = None,
        archive_marker: Optional[str] = None,
    ):
        super().__init__()
        defaults = get_defaults()
        self.app_data_dir = Path(app_data_dir) if app_data_dir else defaults.paths.app_data_dir
        self.candidates = candidates or defaults.files.legacy_candidates
        self.archive_marker = archive_marker or defaults.files.archive_marker

    def candidate_paths(self) -> List[Path]:
        return [self.app_data_dir / name for name in self.candidates]

    def archive_path(self, path: Path) -> Path:
        """``projects.json`` -> ``projects.migrated.bak.json``"""
        return path.with_name(f"{path.stem}{self.archive_marker}{path.suffix}")

    def discover(self, save: SaveCallback) -> Optional[Catalogue]:
        """
        Migrate the first candidate that holds at least one project.

        The normalized catalogue is handed to ``save`` before the legacy
        file is archived, so the data is persisted in its new home before
        the old copy is retired.

        Returns:
            The migrated catalogue, or None when no candidate matched.
        """
        with log_context(operation="legacy_discovery"):
            for path in self.candidate_paths():
                raw = self.read_candidate(path)
                if raw is None:
                    continue

                projects, active_id, _ = normalize_projects(raw.projects, raw.active_project_id)
                catalogue = Catalogue(projects=projects, active_project_id=active_id)
                save(catalogue)

                archived = self.archive(path)
                log_checkpoint(
                    "legacy_migrated",
                    {
                        "source": str(path),
                        "projects": len(projects),
                        "archived_to": str(archived) if archived else None,
                    },
                    logger,
                )
                return catalogue

        logger.debug(f"No legacy project file found in {self.app_data_dir}")
        return None

    def read_candidate(self, path: Path) -> Optional[RawCatalogue]:
        """
        Parse one candidate, None when it does not match.

        Absent, empty, unparseable and zero-project files all count as not
        matching. Read errors on a present file propagate.
        """
        if not path.is_file():
            return None

        text = self._read_text(path, "legacy candidate read")
        if not text.strip():
            self.logger.debug(f"Skipping empty legacy candidate {path}")
            return None

        for strategy in PARSE_STRATEGIES:
            raw = strategy(text)
            if raw is not None:
                break
        else:
            self.logger.warning(f"Legacy candidate {path} matches no known shape, skipped")
            return None

        if not raw.projects:
            self.logger.debug(f"Legacy candidate {path} holds no projects, skipped")
            return None

        self.logger.info(f"Found {len(raw.projects)} legacy project(s) in {path} ({strategy.__name__})")
        return raw

    def archive(self, path: Path) -> Optional[Path]:
        """
        Retire a migrated legacy file.

        Returns the archive path, or None when every strategy failed. Failure
        is logged and never raised: the migrated data is already saved, the
        legacy file simply stays where it is.
        """
        target = self.archive_path(path)
        for strategy in ARCHIVE_STRATEGIES:
            try:
                strategy(path, target)
            except OSError as e:
                self.logger.warning(f"Archiving {path} via {strategy.__name__} failed: {e}")
                continue
            self.logger.info(f"Archived legacy file {path} -> {target}")
            return target

        self.logger.error(f"Could not archive legacy file {path}, left in place")
        return None


__all__ = [
    "PARSE_STRATEGIES",
    "ARCHIVE_STRATEGIES",
    "parse_current_shape",
    "parse_bare_list",
    "archive_by_rename",
    "archive_by_copy",
    "LegacyProjectDiscovery",
]
