# ============================================================================
# BASE REPOSITORY - FILE STORE ERRORS AND HELPERS
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Infrastructure - Base repository patterns
# PURPOSE: Shared error types and whole-file I/O for the JSON stores
# CREATED: 14 OCT 2026
# ============================================================================
"""
Base Repository Patterns

The stores under ``repositories/`` each own one JSON file (plus, for
categories, a family of rule files). They share:

- ``RepositoryError`` for any I/O failure, carrying the operation and path
- ``CatalogueParseError`` for a primary file that exists but will not parse
- whole-file UTF-8 reads and atomic whole-file replacement

A missing optional file is not an error; callers check ``exists`` first
and take their default branch.
"""

import logging
from abc import ABC
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from infrastructure.yaml_codec import atomic_write


class RepositoryError(Exception):
    """
    A store could not read, write or delete one of its files.

    ``operation`` is a short label such as "catalogue save"; ``entity_id``
    is normally the path involved.
    """

    def __init__(self, message: str, operation: Optional[str] = None, entity_id: Optional[str] = None):
        self.operation = operation
        self.entity_id = entity_id
        super().__init__(message)


class CatalogueParseError(RepositoryError):
    """A primary data file exists but is not valid JSON of the expected shape."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message, operation="parse", entity_id=str(path) if path else None)


class BaseRepository(ABC):
    """
    Common plumbing for the file stores.

    Subclasses get a class-named logger, ``_error_context`` for turning
    stray exceptions into RepositoryError, and text read/write helpers
    that run inside it.
    """

    def __init__(self):
        self.logger = logging.getLogger(type(self).__name__)

    @contextmanager
    def _error_context(self, operation: str, entity_id: Optional[str] = None) -> Iterator[None]:
        """
        Re-raise anything but RepositoryError as RepositoryError.

        Args:
            operation: Short label for the failed step, e.g. "categories read"
            entity_id: Path (or id) the step was working on

        Example:
            with self._error_context("category file delete", str(path)):
                path.unlink()
        """
        try:
            yield
        except RepositoryError:
            raise
        except Exception as e:
            target = f" for {entity_id}" if entity_id else ""
            message = f"{operation} failed{target}: {e}"
            self.logger.error(message)
            raise RepositoryError(message, operation=operation, entity_id=entity_id) from e

    def _read_text(self, path: Path, operation: str) -> str:
        """Whole file as UTF-8 text."""
        with self._error_context(operation, str(path)):
            return path.read_text(encoding="utf-8")

    def _write_text(self, path: Path, content: str, operation: str) -> None:
        """Atomically replace ``path``; parent directories are created."""
        with self._error_context(operation, str(path)):
            atomic_write(path, content)
        self.logger.debug(f"Wrote {path} ({len(content)} chars)")


__all__ = [
    "RepositoryError",
    "CatalogueParseError",
    "BaseRepository",
]
