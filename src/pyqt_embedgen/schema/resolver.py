"""Default resolution: turn a partial settings record into a complete one."""

import copy
import logging
from typing import Any, Dict, Mapping, Optional

from .types import Template

logger = logging.getLogger(__name__)


def defaults(template: Template) -> Dict[str, Any]:
    """Declared default of every menu in the flattened template."""
    return {menu.id: copy.deepcopy(menu.default_value) for menu in template.flattened_menus()}


def resolve(template: Template, partial: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Fill missing keys of ``partial`` from the template's declared defaults.

    Stored values are kept verbatim (no type coercion; a value of the wrong
    type is passed through and left to the renderers). Keys not declared by
    the template are carried along untouched. Defaults are deep-copied so a
    mutable default can't be shared between records.

    Idempotent: ``resolve(t, resolve(t, s)) == resolve(t, s)``.

    Args:
        template: Template whose menus declare the defaults
        partial: Possibly incomplete settings record (None means empty)

    Returns:
        New dict holding a value for every declared menu id
    """
    resolved = dict(partial or {})
    filled = []
    for menu in template.flattened_menus():
        if menu.id not in resolved:
            resolved[menu.id] = copy.deepcopy(menu.default_value)
            filled.append(menu.id)

    if filled:
        logger.debug(f"Resolved {len(filled)} default(s) for template '{template.id}': {filled}")
    return resolved


def undeclared_keys(template: Template, settings: Mapping[str, Any]) -> set:
    """Keys present in ``settings`` that no menu of ``template`` declares."""
    declared = {menu.id for menu in template.flattened_menus()}
    return set(settings) - declared
