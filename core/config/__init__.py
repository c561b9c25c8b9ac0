# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 14 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the project catalogue
and the rule-file generator.
"""

from core.config.defaults import (
    PathDefaults,
    FileDefaults,
    NormalizationDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "PathDefaults",
    "FileDefaults",
    "NormalizationDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
