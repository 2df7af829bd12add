"""
Template registry with registration-time validation.

Widget types register once at startup. Each template is validated and
compiled into a TemplateSchema (flattened menu index + dependency graph);
a malformed template is a configuration error and fails registration loudly.
Lookups never raise: a miss returns None.

Validation:
- Template ids unique within their widget type
- Option ids unique within their template
- Menu ids unique across the flattened template (settings are stored flat)
- select/radio defaults are among the declared choices
- No dependency cycles (group membership counts as a dependency)
- Dangling dependsOn references: warning, or error under the "reject" policy
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from pyqt_embedgen.io.exceptions import (
    DanglingDependencyError, DependencyCycleError, DuplicateMenuIdError,
    DuplicateOptionIdError, DuplicateTemplateIdError, DuplicateWidgetTypeError,
    InvalidDefaultError,
)
from pyqt_embedgen.protocols.embed_config import DANGLING_REJECT, get_embed_config
from .dependency import DependencyEvaluator, DependencyGraph
from .types import Menu, Template, WidgetType, strict_equals

logger = logging.getLogger(__name__)

# Menu types whose default must be one of the declared choices
CHOICE_TYPES = frozenset({"select", "radio"})


@dataclass(frozen=True)
class TemplateSchema:
    """A validated template plus its precomputed dependency graph."""
    widget_type_id: str
    template: Template
    graph: DependencyGraph

    @property
    def menus(self) -> Dict[str, Menu]:
        return self.graph.menus

    def evaluator(self) -> DependencyEvaluator:
        return DependencyEvaluator(self.graph)


def _check_unique_ids(template: Template) -> None:
    seen_options = set()
    for option in template.options:
        if option.id in seen_options:
            raise DuplicateOptionIdError(
                f"Template '{template.id}' declares option id '{option.id}' more than once"
            )
        seen_options.add(option.id)

    seen_menus: Dict[str, str] = {}
    for option in template.options:
        stack = list(option.menus)
        while stack:
            menu = stack.pop()
            if menu.id in seen_menus:
                raise DuplicateMenuIdError(
                    f"Template '{template.id}' declares menu id '{menu.id}' more than once "
                    f"(options '{seen_menus[menu.id]}' and '{option.id}')"
                )
            seen_menus[menu.id] = option.id
            stack.extend(menu.menus)


def _check_defaults(template: Template) -> None:
    for menu in template.flattened_menus():
        if menu.type in CHOICE_TYPES and menu.choices:
            if not any(strict_equals(menu.default_value, choice) for choice in menu.choice_values()):
                raise InvalidDefaultError(
                    f"Menu '{menu.id}' in template '{template.id}' defaults to "
                    f"{menu.default_value!r}, which is not one of {list(menu.choice_values())}"
                )


def compile_template(widget_type_id: str, template: Template,
                     dangling_policy: Optional[str] = None) -> TemplateSchema:
    """
    Validate a template and build its schema.

    Raises:
        SchemaError: subclass describing the first problem found
    """
    policy = dangling_policy or get_embed_config().dangling_dependency_policy

    _check_unique_ids(template)
    _check_defaults(template)

    graph = DependencyGraph.build(template)

    for menu_id, target in graph.dangling.items():
        message = (
            f"Menu '{menu_id}' in template '{widget_type_id}/{template.id}' depends on "
            f"undeclared menu '{target}'"
        )
        if policy == DANGLING_REJECT:
            raise DanglingDependencyError(message)
        logger.warning(f"{message}; it will always be inactive")

    cycle = graph.find_cycle()
    if cycle:
        raise DependencyCycleError(template.id, cycle)

    return TemplateSchema(widget_type_id=widget_type_id, template=template, graph=graph)


class TemplateRegistry:
    """
    Widget type → template lookup.

    Example:
        registry = TemplateRegistry()
        registry.register(WidgetType.from_dict(declaration))
        template = registry.get_template("notice_bar", "classic")
    """

    def __init__(self, dangling_policy: Optional[str] = None):
        self._dangling_policy = dangling_policy
        self._widget_types: Dict[str, WidgetType] = {}
        self._schemas: Dict[Tuple[str, str], TemplateSchema] = {}

    def register(self, widget_type: WidgetType, override: bool = False) -> None:
        """
        Validate and register every template of a widget type.

        Registration is all-or-nothing: if any template fails validation,
        nothing of the widget type is registered.

        Raises:
            DuplicateWidgetTypeError: id already registered and override is False
            SchemaError: a template failed validation
        """
        if widget_type.id in self._widget_types and not override:
            raise DuplicateWidgetTypeError(
                f"Widget type '{widget_type.id}' is already registered. "
                f"Pass override=True to replace it."
            )

        seen = set()
        compiled: List[TemplateSchema] = []
        for template in widget_type.templates:
            if template.id in seen:
                raise DuplicateTemplateIdError(
                    f"Widget type '{widget_type.id}' declares template '{template.id}' more than once"
                )
            seen.add(template.id)
            compiled.append(compile_template(widget_type.id, template, self._dangling_policy))

        if widget_type.id in self._widget_types:
            logger.info(f"Overriding widget type '{widget_type.id}'")
            self._drop_schemas(widget_type.id)

        self._widget_types[widget_type.id] = widget_type
        for schema in compiled:
            self._schemas[(widget_type.id, schema.template.id)] = schema

        logger.debug(
            f"Registered widget type '{widget_type.id}' with templates: "
            f"{[t.id for t in widget_type.templates]}"
        )

    def unregister(self, widget_type_id: str) -> None:
        self._widget_types.pop(widget_type_id, None)
        self._drop_schemas(widget_type_id)

    def _drop_schemas(self, widget_type_id: str) -> None:
        for key in [key for key in self._schemas if key[0] == widget_type_id]:
            del self._schemas[key]

    def get_widget_type(self, widget_type_id: str) -> Optional[WidgetType]:
        return self._widget_types.get(widget_type_id)

    def get_template(self, widget_type_id: str, template_id: str) -> Optional[Template]:
        """Template for the pair, or None when either id is unknown."""
        schema = self._schemas.get((widget_type_id, template_id))
        return schema.template if schema is not None else None

    def get_schema(self, widget_type_id: str, template_id: str) -> Optional[TemplateSchema]:
        return self._schemas.get((widget_type_id, template_id))

    def widget_types(self) -> List[WidgetType]:
        return list(self._widget_types.values())

    def templates(self, widget_type_id: str) -> List[Template]:
        widget_type = self._widget_types.get(widget_type_id)
        return list(widget_type.templates) if widget_type is not None else []

    def __contains__(self, widget_type_id: str) -> bool:
        return widget_type_id in self._widget_types


_default_registry: Optional[TemplateRegistry] = None


def get_template_registry() -> TemplateRegistry:
    """Process-wide registry used when a caller doesn't pass one."""
    global _default_registry
    if _default_registry is None:
        _default_registry = TemplateRegistry()
    return _default_registry
