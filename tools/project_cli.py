#!/usr/bin/env python3
# ============================================================================
# PROJECT CATALOGUE CLI
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Tool - Manage projects and generated rule files from a shell
# PURPOSE: Exercise the catalogue and generator without the desktop app
# CREATED: 15 OCT 2026
# ============================================================================
"""
Manage the project catalogue and regenerate the text expander's rule files.

Usage:
    # First run: bootstrap rule files, category files and generated documents
    python tools/project_cli.py init

    # List projects (* marks the active one)
    python tools/project_cli.py list
    python tools/project_cli.py list --json

    # Create and activate
    python tools/project_cli.py create "Website" --category development \\
        --set development.tech_stack=Python --set development.directory=~/src/site
    python tools/project_cli.py activate 3f0c...

    # Deactivate, delete, rebuild generated files
    python tools/project_cli.py clear
    python tools/project_cli.py delete 3f0c...
    python tools/project_cli.py regenerate

Directories default to the platform locations; override with
BRM_APP_DATA_DIR / BRM_ESPANSO_DIR or --app-data-dir / --espanso-dir.
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import List, Optional

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from __version__ import __version__
from core.config import PathDefaults
from core.logging import configure_logging
from core.models import CategoryValues
from infrastructure.base_repository import RepositoryError
from infrastructure.rule_files import initialize_rule_files
from services import GenerationError, ProjectNotFoundError, ProjectService


class AssignmentError(ValueError):
    """A --set argument is not CATEGORY.VARIABLE=VALUE."""


def parse_assignments(assignments: List[str]) -> CategoryValues:
    """``["development.tech_stack=Go"]`` -> ``{"development": {"tech_stack": "Go"}}``"""
    values: CategoryValues = {}
    for item in assignments:
        target, sep, value = item.partition("=")
        category, dot, variable = target.partition(".")
        if not sep or not dot or not category or not variable:
            raise AssignmentError(f"Expected CATEGORY.VARIABLE=VALUE, got {item!r}")
        values.setdefault(category, {})[variable] = value
    return values


def resolve_paths(args: argparse.Namespace) -> PathDefaults:
    paths = PathDefaults.from_env()
    return PathDefaults(
        app_data_dir=Path(args.app_data_dir) if args.app_data_dir else paths.app_data_dir,
        espanso_dir=Path(args.espanso_dir) if args.espanso_dir else paths.espanso_dir,
    )


def cmd_list(service: ProjectService, args: argparse.Namespace) -> int:
    catalogue = service.get_projects()
    if args.json:
        print(catalogue.to_json())
        return 0
    if not catalogue.projects:
        print("No projects")
        return 0
    for project in catalogue.projects:
        marker = "*" if project.is_active else " "
        print(f"{marker} {project.id}  {project.name}  [{project.category_id}]")
    return 0


def cmd_create(service: ProjectService, args: argparse.Namespace) -> int:
    project = service.create_project(
        args.name,
        description=args.description,
        category_id=args.category,
        category_values=parse_assignments(args.set) or None,
    )
    print(project.id)
    return 0


def cmd_activate(service: ProjectService, args: argparse.Namespace) -> int:
    service.set_active_project(args.project_id)
    print(f"Active project: {args.project_id}")
    return 0


def cmd_clear(service: ProjectService, args: argparse.Namespace) -> int:
    service.set_active_project(None)
    print("No active project")
    return 0


def cmd_delete(service: ProjectService, args: argparse.Namespace) -> int:
    service.delete_project(args.project_id)
    print(f"Deleted {args.project_id}")
    return 0


def cmd_regenerate(service: ProjectService, args: argparse.Namespace) -> int:
    service.regenerate()
    print(f"Regenerated {service.generator.active_vars_path} and {service.generator.selector_path}")
    return 0


def cmd_init(service: ProjectService, args: argparse.Namespace) -> int:
    paths = resolve_paths(args)
    for path in initialize_rule_files(paths):
        print(f"Created {path}")
    service.category_repo.ensure_file_names()
    service.regenerate()
    print("Initialized")
    return 0


COMMANDS = {
    "list": cmd_list,
    "create": cmd_create,
    "activate": cmd_activate,
    "clear": cmd_clear,
    "delete": cmd_delete,
    "regenerate": cmd_regenerate,
    "init": cmd_init,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Manage projects and the generated text expander rule files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--app-data-dir", help="Directory holding legacy project files")
    parser.add_argument("--espanso-dir", help="Text expander config root (holds config/ and match/)")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: LOG_LEVEL env var, then INFO)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List projects")
    list_cmd.add_argument("--json", action="store_true", help="Print the catalogue as JSON")

    create = sub.add_parser("create", help="Create a project")
    create.add_argument("name", help="Project name")
    create.add_argument("--description", "-d", help="Project description")
    create.add_argument("--category", "-c", help="Category id (inferred when omitted)")
    create.add_argument(
        "--set", "-s",
        action="append",
        default=[],
        metavar="CATEGORY.VARIABLE=VALUE",
        help="Category variable value (repeatable)",
    )

    activate = sub.add_parser("activate", help="Make a project active")
    activate.add_argument("project_id")

    sub.add_parser("clear", help="Deactivate the active project")

    delete = sub.add_parser("delete", help="Delete a project")
    delete.add_argument("project_id")

    sub.add_parser("regenerate", help="Rewrite both generated rule files")
    sub.add_parser("init", help="Create missing rule files and regenerate")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level)

    service = ProjectService.from_paths(resolve_paths(args))
    try:
        return COMMANDS[args.command](service, args)
    except ProjectNotFoundError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except AssignmentError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except (RepositoryError, GenerationError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
