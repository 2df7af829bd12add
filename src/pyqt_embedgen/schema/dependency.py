"""
Dependency graph and evaluator for conditional menu visibility.

Every menu may depend on another menu's value (``dependsOn``) and, when it
is a sub-menu, implicitly on its enclosing group menu. Those edges form a
directed graph over menu ids that is built and checked for cycles once, at
template registration; evaluation walks the same graph against the current
settings record.

Rules:
- No dependsOn and no enclosing group: always active
- Otherwise active iff the enclosing group is active, the referenced menu is
  active and the referenced value satisfies the condition (transitive)
- A group with a boolean default gates its sub-menus: they are inactive while
  the group value is falsy (the editor shows it as an unchecked group box)
- A reference to an undeclared menu id is inactive (fail-closed)
- A predicate that raises is inactive; the error never reaches the form
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple, Union

from pyqt_embedgen.protocols.embed_config import get_embed_config
from .types import Menu, Template

logger = logging.getLogger(__name__)


@dataclass
class DependencyGraph:
    """Menu id graph of a single template.

    ``edges[menu_id]`` lists the ids the menu requires to be active:
    its enclosing group first, then its dependsOn target.
    """
    template_id: str
    menus: Dict[str, Menu] = field(default_factory=dict)
    parents: Dict[str, Optional[str]] = field(default_factory=dict)
    edges: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    dangling: Dict[str, str] = field(default_factory=dict)  # menu id -> undeclared target

    @classmethod
    def build(cls, template: Template) -> "DependencyGraph":
        """Build the graph. Assumes menu ids are unique (checked by the registry)."""
        graph = cls(template_id=template.id)
        for menu, parent in template.iter_menus():
            graph.menus[menu.id] = menu
            graph.parents[menu.id] = parent.id if parent is not None else None

        for menu_id, menu in graph.menus.items():
            requires = []
            parent_id = graph.parents[menu_id]
            if parent_id is not None:
                requires.append(parent_id)
            if menu.depends_on is not None:
                target = menu.depends_on.menu_id
                if target in graph.menus:
                    requires.append(target)
                else:
                    graph.dangling[menu_id] = target
            graph.edges[menu_id] = tuple(requires)
        return graph

    def find_cycle(self) -> Optional[List[str]]:
        """
        Return one dependency cycle as a list of ids (first id repeated at the
        end), or None if the graph is acyclic.
        """
        WHITE, GREY, BLACK = 0, 1, 2
        color = {menu_id: WHITE for menu_id in self.edges}
        stack: List[str] = []

        def visit(menu_id: str) -> Optional[List[str]]:
            color[menu_id] = GREY
            stack.append(menu_id)
            for target in self.edges.get(menu_id, ()):
                if color.get(target) == GREY:
                    start = stack.index(target)
                    return stack[start:] + [target]
                if color.get(target) == WHITE:
                    cycle = visit(target)
                    if cycle:
                        return cycle
            stack.pop()
            color[menu_id] = BLACK
            return None

        for menu_id in self.edges:
            if color[menu_id] == WHITE:
                cycle = visit(menu_id)
                if cycle:
                    return cycle
        return None

    def dependents_of(self, menu_id: str) -> FrozenSet[str]:
        """Ids whose activity can change when ``menu_id``'s value or activity changes."""
        reverse: Dict[str, List[str]] = {}
        for source, targets in self.edges.items():
            for target in targets:
                reverse.setdefault(target, []).append(source)

        found = set()
        pending = [menu_id]
        while pending:
            current = pending.pop()
            for dependent in reverse.get(current, ()):
                if dependent not in found:
                    found.add(dependent)
                    pending.append(dependent)
        return frozenset(found)


class DependencyEvaluator:
    """
    Decides which menus are active for a settings record.

    Activity is always computed from the record passed in; nothing is cached
    between calls, so a stale record can never leak into a later decision.
    """

    def __init__(self, graph: DependencyGraph, strict: Optional[bool] = None):
        self.graph = graph
        self.strict = get_embed_config().strict_value_match if strict is None else strict

    def _value(self, menu_id: str, settings: Mapping[str, Any]) -> Any:
        if menu_id in settings:
            return settings[menu_id]
        return self.graph.menus[menu_id].default_value

    def _group_closed(self, group_id: str, settings: Mapping[str, Any]) -> bool:
        if not isinstance(self.graph.menus[group_id].default_value, bool):
            return False
        return not self._value(group_id, settings)

    def is_active(self, menu: Union[Menu, str], settings: Mapping[str, Any]) -> bool:
        """True if the menu is active (visible and editable) for ``settings``."""
        menu_id = menu.id if isinstance(menu, Menu) else menu
        return self._evaluate(menu_id, settings, {}, set())

    def active_menu_ids(self, settings: Mapping[str, Any]) -> FrozenSet[str]:
        """Ids of every active menu of the template."""
        memo: Dict[str, bool] = {}
        return frozenset(
            menu_id for menu_id in self.graph.menus
            if self._evaluate(menu_id, settings, memo, set())
        )

    def _evaluate(self, menu_id: str, settings: Mapping[str, Any],
                  memo: Dict[str, bool], visiting: set) -> bool:
        if menu_id in memo:
            return memo[menu_id]

        menu = self.graph.menus.get(menu_id)
        if menu is None:
            return False
        if menu_id in visiting:
            # Only reachable for graphs that skipped registry validation
            logger.warning(f"Dependency cycle through '{menu_id}' in template '{self.graph.template_id}'")
            return False

        visiting.add(menu_id)
        try:
            active = self._check(menu, settings, memo, visiting)
        finally:
            visiting.discard(menu_id)
        memo[menu_id] = active
        return active

    def _check(self, menu: Menu, settings: Mapping[str, Any],
               memo: Dict[str, bool], visiting: set) -> bool:
        parent_id = self.graph.parents.get(menu.id)
        if parent_id is not None:
            if not self._evaluate(parent_id, settings, memo, visiting):
                return False
            if self._group_closed(parent_id, settings):
                return False

        dependency = menu.depends_on
        if dependency is None:
            return True

        if dependency.menu_id not in self.graph.menus:
            logger.debug(
                f"Menu '{menu.id}' depends on undeclared menu '{dependency.menu_id}' "
                f"in template '{self.graph.template_id}' - inactive"
            )
            return False

        if not self._evaluate(dependency.menu_id, settings, memo, visiting):
            return False

        try:
            return dependency.matches(self._value(dependency.menu_id, settings), strict=self.strict)
        except Exception:
            logger.exception(f"dependsOn predicate of menu '{menu.id}' raised - inactive")
            return False


def is_active(schema: Any, menu: Union[Menu, str], settings: Mapping[str, Any]) -> bool:
    """
    Convenience wrapper: evaluate one menu against a compiled template schema.

    Args:
        schema: TemplateSchema (or anything with a ``graph`` attribute)
        menu: Menu or menu id
        settings: Current settings record
    """
    return DependencyEvaluator(schema.graph).is_active(menu, settings)
