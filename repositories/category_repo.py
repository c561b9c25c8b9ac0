# ============================================================================
# CATEGORY REPOSITORY
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Repository - Category definitions and their backing rule files
# PURPOSE: Lookup table for the generator, plus per-category stub files
# CREATED: 14 OCT 2026
# ============================================================================
"""
Category Repository

Reads and writes ``project_categories.json``. A missing file means the
built-in defaults. Each category may name a backing rule file in the match
directory; ``write`` and ``ensure_file_names`` keep those files in step with
the definitions.
"""

from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from core.config import get_defaults
from core.models import CategoryDefinition, CategoryDefinitions, default_category_definitions
from core.models.project import utc_now_iso
from infrastructure.base_repository import BaseRepository, CatalogueParseError


def category_file_name(category: CategoryDefinition) -> str:
    """``Dev Tools`` -> ``dev_tools.yml``; blank names fall back to the id."""
    if not category.name:
        return f"{category.id}.yml"
    slug = category.name.lower().replace(" ", "_").replace("-", "_")
    return f"{slug}.yml"


def stub_rule_file(category: CategoryDefinition) -> str:
    """Initial content of a category's rule file."""
    lines = [f"# {_one_line(category.name)}"]
    if category.description:
        lines.append(f"# {_one_line(category.description)}")
    lines.append("matches:")
    lines.append("  # Add your replacements here")
    return "\n".join(lines) + "\n"


def _one_line(text: str) -> str:
    return " ".join(text.splitlines())


class CategoryRepository(BaseRepository):
    """Repository for category definitions."""

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        match_dir: Optional[Path] = None,
    ):
        super().__init__()
        defaults = get_defaults()
        config_dir = Path(config_dir) if config_dir else defaults.paths.config_dir
        self.match_dir = Path(match_dir) if match_dir else defaults.paths.match_dir
        self.path = config_dir / defaults.files.categories_file

    def exists(self) -> bool:
        return self.path.is_file()

    def rule_file_path(self, file_name: str) -> Path:
        # Only the final component; a definition cannot point outside match_dir
        return self.match_dir / Path(file_name).name

    def load(self) -> CategoryDefinitions:
        """
        Load definitions, or the built-in defaults when no file exists.

        Raises:
            CatalogueParseError: the file exists but cannot be parsed
        """
        if not self.exists():
            self.logger.debug(f"No category file at {self.path}, using defaults")
            return default_category_definitions()

        text = self._read_text(self.path, "categories read")
        try:
            return CategoryDefinitions.model_validate_json(text)
        except ValidationError as e:
            raise CatalogueParseError(
                f"Category file {self.path} is not valid: {e.error_count()} error(s)",
                path=self.path,
            ) from e

    def save(self, definitions: CategoryDefinitions) -> None:
        self._write_text(self.path, definitions.to_json(), "categories save")

    def write(self, definitions: CategoryDefinitions) -> None:
        """
        Save definitions and sync the backing rule files.

        New categories (or ones whose file is missing) get a stub file;
        categories that disappeared have their file removed.
        """
        existing = self.load() if self.exists() else CategoryDefinitions()
        known_ids = {category.id for category in existing.categories}

        for category in definitions.categories:
            if not category.file_name:
                continue
            path = self.rule_file_path(category.file_name)
            if category.id not in known_ids or not path.exists():
                self._write_text(path, stub_rule_file(category), "category file create")
                self.logger.info(f"Created rule file for category '{category.name}': {path}")

        kept_ids = {category.id for category in definitions.categories}
        for category in existing.categories:
            if category.id in kept_ids or not category.file_name:
                continue
            path = self.rule_file_path(category.file_name)
            if path.exists():
                with self._error_context("category file delete", str(path)):
                    path.unlink()
                self.logger.info(f"Deleted rule file for category '{category.name}': {path}")

        self.save(definitions)

    def ensure_file_names(self) -> CategoryDefinitions:
        """
        Give every category a file name and a rule file.

        Saves only when a name was assigned or a file created.
        """
        definitions = self.load()
        updated = False

        for category in definitions.categories:
            if category.file_name is None:
                category.file_name = category_file_name(category)
                self.logger.info(f"Assigned file name '{category.file_name}' to category '{category.name}'")
                updated = True

            path = self.rule_file_path(category.file_name)
            if not path.exists():
                self._write_text(path, stub_rule_file(category), "category file create")
                updated = True

        if updated:
            definitions.last_updated = utc_now_iso()
            self.save(definitions)
        return definitions


__all__ = [
    "CategoryRepository",
    "category_file_name",
    "stub_rule_file",
]
