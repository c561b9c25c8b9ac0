# ============================================================================
# RULE-FILE GENERATOR
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Service - Renders the generated rule files
# PURPOSE: Project catalogue -> active-vars and selector documents
# CREATED: 15 OCT 2026
# ============================================================================
"""
Rule-File Generator

Renders the two documents the text expander reads from its match directory:

    project_active_vars.yml   global_vars of the active project
    project_selector.yml      ":project" trigger listing every project

Documents are Jinja2 templates; every user value passes through the
``yaml_scalar`` filter (infrastructure.yaml_codec) before it reaches a value
position. Each rendered document is parsed back with ``yaml.safe_load`` and
compared against its inputs before it is returned. A mismatch is an escaping
defect and raises GenerationError; it is never written.

Usage:
    generator = ConfigGenerator(match_dir)
    generator.write_active_vars(project, definitions)
    generator.write_selector(catalogue)
"""

from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml
from jinja2 import BaseLoader, Environment, StrictUndefined, TemplateError

from core.config import get_defaults
from core.logging import ComponentType, get_logger
from core.models import Catalogue, CategoryDefinitions, Project
from infrastructure.base_repository import RepositoryError
from infrastructure.yaml_codec import atomic_write, escape_scalar, indent_scalar, quote_double

logger = get_logger(__name__, ComponentType.GENERATOR)


class GenerationError(Exception):
    """Rendered document failed self-validation."""

    def __init__(self, message: str, document: Optional[str] = None):
        self.document = document
        super().__init__(message)


# ============================================================================
# TEMPLATES
# ============================================================================

ACTIVE_VARS_TEMPLATE = """\
# Generated active project variables for: {{ project_name | yaml_comment }}
{% if variables %}
global_vars:
{% for name, value in variables %}
  - name: {{ name | yaml_scalar(4) }}
    type: echo
    params:
      echo: {{ value | yaml_scalar(6) }}
{% endfor %}
{% else %}
global_vars: []
{% endif %}
"""

SELECTOR_TEMPLATE = """\
# Generated project selector for quick switching
matches:
  - trigger: ":project"
    replace: "{% raw %}{{project_choice}}{% endraw %}"
    vars:
      - name: project_choice
        type: choice
        params:
{% if choices %}
          values:
{% for label, project_id in choices %}
            - label: {{ label | yaml_scalar(14) }}
              id: {{ project_id | yaml_quoted }}
{% endfor %}
{% else %}
          values: []
{% endif %}
"""

CLEARED_DOCUMENT = "# No active project - project variables will not be available\nglobal_vars: []\n"

SELECTOR_TRIGGER = ":project"
SELECTOR_REPLACE = "{{project_choice}}"


def _yaml_scalar(value: str, width: int = 0) -> str:
    return indent_scalar(escape_scalar(value), width)


def _yaml_comment(value: str) -> str:
    # Comments end at a line break, so the name is flattened first
    return escape_scalar(" ".join(value.splitlines()))


def build_environment() -> Environment:
    """Jinja2 environment shared by the generated documents."""
    env = Environment(
        loader=BaseLoader(),
        autoescape=False,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["yaml_scalar"] = _yaml_scalar
    env.filters["yaml_quoted"] = quote_double
    env.filters["yaml_comment"] = _yaml_comment
    return env


# ============================================================================
# VARIABLE COLLECTION
# ============================================================================

def collect_variables(project: Project, definitions: CategoryDefinitions) -> List[Tuple[str, str]]:
    """
    (display name, value) pairs for a project's global_vars.

    Ordered by the project's categoryValues, then by declaration order of
    the category's variable definitions. Categories with no definition and
    variables with no stored or blank value contribute nothing.
    """
    variables: List[Tuple[str, str]] = []
    for category_id, values in project.category_values.items():
        category = definitions.find(category_id)
        if category is None:
            logger.debug(f"Project {project.id}: category '{category_id}' has no definition, skipped")
            continue
        for definition in category.variable_definitions:
            value = values.get(definition.id)
            if value is None or not value.strip():
                continue
            variables.append((definition.name, value))
    return variables


# ============================================================================
# GENERATOR
# ============================================================================

class ConfigGenerator:
    """
    Renders and writes the generated rule files.

    Rendering is pure; the ``write_*`` methods render and then replace the
    target file atomically.
    """

    def __init__(self, match_dir: Optional[Path] = None):
        defaults = get_defaults()
        self.match_dir = Path(match_dir) if match_dir else defaults.paths.match_dir
        self.active_vars_path = self.match_dir / defaults.files.active_vars_file
        self.selector_path = self.match_dir / defaults.files.selector_file
        self._env = build_environment()
        self._active_vars = self._env.from_string(ACTIVE_VARS_TEMPLATE)
        self._selector = self._env.from_string(SELECTOR_TEMPLATE)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_active_vars(self, project: Project, definitions: CategoryDefinitions) -> str:
        """
        Render the active-vars document for ``project``.

        Raises:
            GenerationError: the rendered text does not parse back to the
                variables it was rendered from
        """
        variables = collect_variables(project, definitions)
        document = self._render(self._active_vars, project_name=project.name, variables=variables)

        parsed = self._parse(document)
        expected = [
            {"name": name, "type": "echo", "params": {"echo": value}}
            for name, value in variables
        ]
        if not isinstance(parsed, dict) or parsed.get("global_vars") != expected:
            raise GenerationError(
                f"Active-vars document for project {project.id} does not round-trip",
                document,
            )

        logger.debug(f"Rendered {len(variables)} variable(s) for project {project.id}")
        return document

    def render_selector(self, catalogue: Catalogue) -> str:
        """
        Render the selector document listing every project in order.

        Raises:
            GenerationError: the rendered text does not parse back to the
                catalogue's labels and ids
        """
        choices = [(project.name, project.id) for project in catalogue.projects]
        document = self._render(self._selector, choices=choices)

        parsed = self._parse(document)
        expected = [{"label": label, "id": project_id} for label, project_id in choices]
        if _selector_values(parsed) != expected:
            raise GenerationError("Selector document does not round-trip", document)

        return document

    def render_cleared(self) -> str:
        """The constant document used when no project is active."""
        return CLEARED_DOCUMENT

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def write_active_vars(self, project: Project, definitions: CategoryDefinitions) -> Path:
        document = self.render_active_vars(project, definitions)
        self._write(self.active_vars_path, document, "active vars write")
        logger.info(f"Wrote active project variables for '{project.name}' to {self.active_vars_path}")
        return self.active_vars_path

    def write_selector(self, catalogue: Catalogue) -> Path:
        document = self.render_selector(catalogue)
        self._write(self.selector_path, document, "selector write")
        logger.info(f"Wrote project selector ({len(catalogue.projects)} project(s)) to {self.selector_path}")
        return self.selector_path

    def write_cleared(self) -> Path:
        self._write(self.active_vars_path, self.render_cleared(), "active vars clear")
        logger.info(f"Cleared active project variables at {self.active_vars_path}")
        return self.active_vars_path

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _render(self, template, **context: Any) -> str:
        try:
            return template.render(**context)
        except TemplateError as e:
            raise GenerationError(f"Template rendering failed: {e}") from e

    def _parse(self, document: str) -> Any:
        try:
            return yaml.safe_load(document)
        except yaml.YAMLError as e:
            logger.error(f"Generated document is not valid YAML: {e}")
            raise GenerationError(f"Generated invalid YAML: {e}", document) from e

    def _write(self, path: Path, document: str, operation: str) -> None:
        try:
            atomic_write(path, document)
        except OSError as e:
            raise RepositoryError(
                f"{operation} failed for {path}: {e}",
                operation=operation,
                entity_id=str(path),
            ) from e


def _selector_values(parsed: Any) -> Any:
    """Dig ``matches[0].vars[0].params.values`` out of a parsed selector."""
    try:
        match = parsed["matches"][0]
        if match["trigger"] != SELECTOR_TRIGGER or match["replace"] != SELECTOR_REPLACE:
            return None
        return match["vars"][0]["params"]["values"]
    except (KeyError, IndexError, TypeError):
        return None


__all__ = [
    "GenerationError",
    "ConfigGenerator",
    "collect_variables",
    "build_environment",
    "ACTIVE_VARS_TEMPLATE",
    "SELECTOR_TEMPLATE",
    "CLEARED_DOCUMENT",
]
