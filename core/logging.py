# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Core - Structured logging with context
# PURPOSE: Tie every log line to the project, operation and file it concerns
# CREATED: 14 OCT 2026
# ============================================================================
"""
Structured Logging

Every catalogue operation runs inside a ``log_context`` naming the project
it touches, the operation and (for the stores) the file being read or
replaced. Both formatters pick those fields up, so a failed atomic write or
a skipped legacy archive can be traced back to the call that caused it.

Output goes to stderr; the CLI keeps stdout for command results.

Usage:
    from core.logging import get_logger, log_context

    logger = get_logger(__name__, ComponentType.SERVICE)

    with log_context(project_id="p-123", operation="set_active_project"):
        logger.info("Regenerating rule files")
"""

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union


class ComponentType(str, Enum):
    """Component types for logging categorization."""
    NORMALIZER = "normalizer"
    GENERATOR = "generator"
    SERVICE = "service"


# ============================================================================
# CONTEXT
# ============================================================================

@dataclass
class LogContext:
    """
    Fields attached to every record logged while the context is open.

    ``path`` is the catalogue, category or rule file the operation is
    reading or replacing.
    """
    project_id: Optional[str] = None
    operation: Optional[str] = None
    component: Optional[str] = None
    path: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only, with ``extra`` merged in flat."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result


class _ContextStack(threading.local):
    def __init__(self) -> None:
        self.frames: List[LogContext] = []


_stack = _ContextStack()


def get_current_context() -> LogContext:
    """Innermost open context, or an empty one."""
    return _stack.frames[-1] if _stack.frames else LogContext()


@contextmanager
def log_context(**kwargs) -> Iterator[LogContext]:
    """
    Open a nested logging context.

    Fields not given are inherited from the enclosing context; ``extra``
    is merged rather than replaced.

    Example:
        with log_context(project_id="p-1", operation="delete_project"):
            with log_context(path=str(catalogue_path)):
                logger.info("Saving catalogue")
    """
    parent = get_current_context()
    extra = {**parent.extra, **kwargs.pop("extra", {})}
    context = replace(parent, extra=extra, **kwargs)

    _stack.frames.append(context)
    try:
        yield context
    finally:
        _stack.frames.pop()


# ============================================================================
# FORMATTERS
# ============================================================================

def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _record_data(record: logging.LogRecord) -> Optional[Dict[str, Any]]:
    return getattr(record, "extra", None) or None


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per line.

    Keys: timestamp, level, logger, message, plus ``context`` (open
    log_context fields), ``data`` (per-call extra), ``exception`` and
    ``source`` when present or enabled.
    """

    def __init__(self, include_context: bool = True, include_source: bool = True):
        super().__init__()
        self.include_context = include_context
        self.include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": _utc_timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = get_current_context().to_dict() if self.include_context else {}
        if context:
            entry["context"] = context

        data = _record_data(record)
        if data:
            entry["data"] = data

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if self.include_source:
            entry["source"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """
    Single-line console format.

        2026-10-15 09:12:01 INFO     services.project_service [op=delete_project, project=p-1]: Deleted ...
    """

    _LABELS = (("operation", "op"), ("project_id", "project"), ("path", "file"))

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        context = get_current_context()
        labels = [
            f"{label}={getattr(context, attr)}"
            for attr, label in self._LABELS
            if getattr(context, attr)
        ]
        where = f" [{', '.join(labels)}]" if labels else ""

        line = f"{timestamp} {record.levelname:<8} {record.name}{where}: {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


# ============================================================================
# LOGGER ADAPTER
# ============================================================================

class ContextLogger(logging.LoggerAdapter):
    """
    Adapter that snapshots the open log_context onto each record.

    The snapshot lands in ``record.extra`` so the formatters, and tests
    using caplog, can read it after the context has closed.
    """

    def process(self, msg, kwargs):
        snapshot = dict(kwargs.get("extra", {}))
        snapshot.update(get_current_context().to_dict())
        component = (self.extra or {}).get("component")
        if component:
            snapshot.setdefault("component", component)

        kwargs["extra"] = {"extra": snapshot}
        return msg, kwargs


def get_logger(
    name: str,
    component: Optional[ComponentType] = None,
) -> ContextLogger:
    """
    Get a context-aware logger.

    Args:
        name: Logger name, normally ``__name__``
        component: Optional component type for categorization
    """
    return ContextLogger(
        logging.getLogger(name),
        {"component": component.value if component else None},
    )


def configure_logging(
    level: Union[str, int, None] = None,
    json_output: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Install a single root handler.

    Args:
        level: Level name or number; falls back to LOG_LEVEL, then INFO
        json_output: JSON lines instead of the console format (also
            enabled by LOG_FORMAT=json)
        log_file: Append to this file instead of writing to stderr
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    use_json = json_output or os.getenv("LOG_FORMAT", "").lower() == "json"
    formatter = StructuredFormatter() if use_json else HumanFormatter()

    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


# ============================================================================
# CHECKPOINT LOGGING
# ============================================================================

def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a named milestone.

    Used for events worth finding later in a log: a completed legacy
    migration, an active-project switch.

    Args:
        name: Checkpoint name (e.g., "legacy_migrated")
        data: Optional checkpoint data
        logger: Optional specific logger to use
    """
    context = get_current_context()
    payload: Dict[str, Any] = {"checkpoint": name, "timestamp": _utc_timestamp()}
    if context.project_id:
        payload["project_id"] = context.project_id
    if context.operation:
        payload["operation"] = context.operation
    if data:
        payload["data"] = data

    (logger or logging.getLogger("checkpoint")).info(
        f"CHECKPOINT: {name}", extra={"extra": payload}
    )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
