# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Infrastructure - File access and YAML scalar handling
# PURPOSE: Atomic writes, scalar escaping, repository base class
# CREATED: 14 OCT 2026
# ============================================================================
"""
Infrastructure module.

Provides:
- escape_scalar / indent_scalar: safe YAML scalar tokens for templates
- atomic_write: replace a file without ever exposing a partial write
- BaseRepository: error wrapping and file helpers for the stores

Usage:
    from infrastructure import escape_scalar, atomic_write

    atomic_write(path, f"name: {escape_scalar(value)}\n")
"""

from .yaml_codec import (
    escape_scalar,
    quote_single,
    quote_double,
    indent_scalar,
    atomic_write,
)
from .base_repository import (
    RepositoryError,
    CatalogueParseError,
    BaseRepository,
)

__all__ = [
    "escape_scalar",
    "quote_single",
    "quote_double",
    "indent_scalar",
    "atomic_write",
    "RepositoryError",
    "CatalogueParseError",
    "BaseRepository",
]
