# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for directories, filenames, normalization
# CREATED: 14 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for where the catalogue and the generated rule
files live. These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access

Directory layout:
    <app_data_dir>/                 legacy project files (projects.json, ...)
    <espanso_dir>/config/           projects.json, project_categories.json
    <espanso_dir>/match/            generated and category rule files
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple


APP_DIR_NAME = "BetterReplacementsManager"


def _platform_config_root() -> Path:
    """Per-user configuration root for the current platform."""
    home = Path.home()
    if sys.platform == "darwin":
        return home / "Library" / "Application Support"
    if sys.platform.startswith("win"):
        appdata = os.getenv("APPDATA")
        return Path(appdata) if appdata else home / "AppData" / "Roaming"
    xdg = os.getenv("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else home / ".config"


@dataclass(frozen=True)
class PathDefaults:
    """
    Directory defaults.

    The application data directory holds legacy project files; the espanso
    directory holds the live catalogue (under config/) and the rule files
    the text expander reads (under match/).
    """
    app_data_dir: Path = field(default_factory=lambda: _platform_config_root() / APP_DIR_NAME)
    espanso_dir: Path = field(default_factory=lambda: _platform_config_root() / "espanso")

    @property
    def config_dir(self) -> Path:
        return self.espanso_dir / "config"

    @property
    def match_dir(self) -> Path:
        return self.espanso_dir / "match"

    @classmethod
    def from_env(cls) -> "PathDefaults":
        """Create from environment variables."""
        base = cls()
        app_data = os.getenv("BRM_APP_DATA_DIR")
        espanso = os.getenv("BRM_ESPANSO_DIR")
        return cls(
            app_data_dir=Path(app_data) if app_data else base.app_data_dir,
            espanso_dir=Path(espanso) if espanso else base.espanso_dir,
        )


@dataclass(frozen=True)
class FileDefaults:
    """
    Filenames used by the stores and the generator.
    """
    catalogue_file: str = "projects.json"
    categories_file: str = "project_categories.json"

    # Generated, never hand-edited
    active_vars_file: str = "project_active_vars.yml"
    selector_file: str = "project_selector.yml"

    # Checked in this order in the application data directory
    legacy_candidates: Tuple[str, ...] = (
        "projects.json",
        "projects.legacy.json",
        "projects.backup.json",
    )
    archive_marker: str = ".migrated.bak"

    # Created empty on first run, never overwritten
    bootstrap_rule_files: Tuple[str, ...] = (
        "base.yml",
        "better_replacements.yml",
        "ai_prompts.yml",
    )
    bootstrap_content: str = "matches: []\n"


@dataclass(frozen=True)
class NormalizationDefaults:
    """
    Defaults applied by the record normalizer.
    """
    placeholder_name: str = "Unnamed Project"
    general_category: str = "general"
    development_category: str = "development"

    @classmethod
    def from_env(cls) -> "NormalizationDefaults":
        """Create from environment variables."""
        return cls(
            placeholder_name=os.getenv("BRM_PLACEHOLDER_NAME", "Unnamed Project"),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    paths: PathDefaults = field(default_factory=PathDefaults)
    files: FileDefaults = field(default_factory=FileDefaults)
    normalization: NormalizationDefaults = field(default_factory=NormalizationDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            paths=PathDefaults.from_env(),
            files=FileDefaults(),
            normalization=NormalizationDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "APP_DIR_NAME",
    "PathDefaults",
    "FileDefaults",
    "NormalizationDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
