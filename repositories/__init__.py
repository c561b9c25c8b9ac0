# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Core - File-backed stores
# PURPOSE: Load/save for the catalogue and category definitions
# CREATED: 14 OCT 2026
# ============================================================================
"""
Repositories Module

JSON-file stores. Each repository owns one file and is constructed over a
directory, so tests build one per temporary directory.

Usage:
    from repositories import CatalogueRepository, CategoryRepository

    catalogue = CatalogueRepository(config_dir).load()
    definitions = CategoryRepository(config_dir, match_dir).load()
"""

from .legacy_repo import LegacyProjectDiscovery
from .catalogue_repo import CatalogueRepository
from .category_repo import CategoryRepository

__all__ = [
    "LegacyProjectDiscovery",
    "CatalogueRepository",
    "CategoryRepository",
]
