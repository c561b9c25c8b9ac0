# ============================================================================
# VERSION - PROJECT CATALOGUE
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# ============================================================================
"""
Version information for the project catalogue.

This is the single source of truth for the application version.
Updated manually for each release.
"""
# Version format: major.minor.patch
# Criteria for 0.2 - category-aware catalogue with legacy migration
__version__ = "0.2.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-15"

EPOCH = 2
CODENAME = "Project Catalogue"
