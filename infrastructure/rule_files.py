# ============================================================================
# RULE FILE BOOTSTRAP
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Infrastructure - First-run setup of the match directory
# PURPOSE: Create the empty rule files the text expander expects
# CREATED: 15 OCT 2026
# ============================================================================
"""
Rule File Bootstrap

Creates the base rule files with an empty match list on first run. Files
that already exist are never touched.
"""

import logging
from pathlib import Path
from typing import List, Optional

from core.config import FileDefaults, PathDefaults, get_defaults
from infrastructure.base_repository import RepositoryError
from infrastructure.yaml_codec import atomic_write

logger = logging.getLogger(__name__)


def initialize_rule_files(
    paths: Optional[PathDefaults] = None,
    files: Optional[FileDefaults] = None,
) -> List[Path]:
    """
    Create missing bootstrap rule files in the match directory.

    Returns:
        Paths that were created (empty when everything already existed)

    Raises:
        RepositoryError: a missing file could not be written
    """
    defaults = get_defaults()
    paths = paths or defaults.paths
    files = files or defaults.files

    created: List[Path] = []
    for name in files.bootstrap_rule_files:
        path = paths.match_dir / name
        if path.exists():
            continue
        try:
            atomic_write(path, files.bootstrap_content)
        except OSError as e:
            raise RepositoryError(
                f"Creating rule file {path} failed: {e}",
                operation="rule file init",
                entity_id=str(path),
            ) from e
        logger.info(f"Created {path}")
        created.append(path)
    return created


__all__ = ["initialize_rule_files"]
