"""
Declarative schema types: widget types, templates, options and menus.

A widget type owns one or more templates. A template groups its menus into
options (editor sections); menus are the configurable fields. Settings are
stored flat, keyed by menu id, so menu ids form one global keyspace per
template.

Declarations are usually written as JSON using camelCase keys:

    {
      "id": "notice_bar",
      "name": "Notice bar",
      "templates": [{
        "id": "classic",
        "name": "Classic",
        "options": [{
          "id": "content",
          "name": "Content",
          "menus": [
            {"id": "showSubtitle", "label": "Show subtitle",
             "type": "toggle", "defaultValue": false},
            {"id": "subtitle", "label": "Subtitle", "type": "text",
             "defaultValue": "",
             "dependsOn": {"menuId": "showSubtitle", "value": true}}
          ]
        }]
      }]
    }
"""

import json
import logging
from dataclasses import dataclass, field
from numbers import Number
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class _Unset:
    """Sentinel for 'no required value declared'."""

    def __repr__(self):
        return "UNSET"


UNSET = _Unset()


def strict_equals(actual: Any, expected: Any) -> bool:
    """
    Equality that doesn't cross value kinds.

    Booleans only match booleans (``1`` never satisfies ``True``), numbers
    match numerically, everything else must share the exact type.
    """
    if isinstance(actual, bool) or isinstance(expected, bool):
        return type(actual) is type(expected) and actual == expected
    if isinstance(actual, Number) and isinstance(expected, Number):
        return actual == expected
    return type(actual) is type(expected) and actual == expected


@dataclass(frozen=True)
class Dependency:
    """Condition on another menu's value controlling a menu's active state."""
    menu_id: str
    value: Any = UNSET
    predicate: Optional[Callable[[Any], bool]] = None

    def __post_init__(self):
        has_value = self.value is not UNSET
        if has_value == (self.predicate is not None):
            raise ValueError(
                f"Dependency on '{self.menu_id}' needs exactly one of value or predicate"
            )

    def matches(self, actual: Any, strict: bool = True) -> bool:
        """True if the referenced menu's value satisfies this condition."""
        if self.predicate is not None:
            return bool(self.predicate(actual))
        if strict:
            return strict_equals(actual, self.value)
        return actual == self.value

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Dependency":
        menu_id = data.get("menuId", data.get("menu_id"))
        if not menu_id:
            raise ValueError(f"dependsOn declaration is missing 'menuId': {dict(data)}")
        if "value" not in data:
            raise ValueError(f"dependsOn on '{menu_id}' is missing 'value'")
        return cls(menu_id=menu_id, value=data["value"])


def _parse_choice(choice: Any) -> Any:
    """Choices are raw values, [value, label] lists or {"value", "label"} objects."""
    if isinstance(choice, dict):
        return (choice["value"], choice.get("label", str(choice["value"])))
    if isinstance(choice, list):
        return tuple(choice)
    return choice


@dataclass(frozen=True)
class Menu:
    """One configurable field."""
    id: str
    label: str
    type: str
    default_value: Any = None
    depends_on: Optional[Dependency] = None
    menus: Tuple["Menu", ...] = ()
    choices: Tuple[Any, ...] = ()
    description: Optional[str] = None
    props: Mapping[str, Any] = field(default_factory=dict)

    def choice_values(self) -> Tuple[Any, ...]:
        """Choice values with any (value, label) pairs unwrapped."""
        return tuple(
            choice[0] if isinstance(choice, (tuple, list)) and len(choice) == 2 else choice
            for choice in self.choices
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Menu":
        depends_on = data.get("dependsOn")
        sub_menus = data.get("subMenus", data.get("menus", ()))
        choices = tuple(_parse_choice(choice) for choice in data.get("choices", ()))
        return cls(
            id=data["id"],
            label=data.get("label", data["id"]),
            type=data["type"],
            default_value=data.get("defaultValue"),
            depends_on=Dependency.from_dict(depends_on) if depends_on else None,
            menus=tuple(cls.from_dict(sub) for sub in sub_menus),
            choices=choices,
            description=data.get("description"),
            props=dict(data.get("props", {})),
        )


@dataclass(frozen=True)
class Option:
    """Named grouping of related menus (an editor section)."""
    id: str
    name: str
    menus: Tuple[Menu, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Option":
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            menus=tuple(Menu.from_dict(menu) for menu in data.get("menus", ())),
        )


@dataclass(frozen=True)
class Template:
    """A named variant of a widget type with its own option/menu schema."""
    id: str
    name: str
    description: str = ""
    options: Tuple[Option, ...] = ()
    is_recommended: bool = False
    preview_image: Optional[str] = None

    def iter_menus(self) -> Iterator[Tuple[Menu, Optional[Menu]]]:
        """Yield (menu, enclosing group menu or None) depth-first in declaration order."""
        def walk(menus, parent):
            for menu in menus:
                yield menu, parent
                yield from walk(menu.menus, menu)

        for option in self.options:
            yield from walk(option.menus, None)

    def flattened_menus(self) -> Tuple[Menu, ...]:
        return tuple(menu for menu, _ in self.iter_menus())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Template":
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            description=data.get("description", ""),
            options=tuple(Option.from_dict(option) for option in data.get("options", ())),
            is_recommended=bool(data.get("isRecommended", False)),
            preview_image=data.get("previewImage"),
        )


@dataclass(frozen=True)
class WidgetType:
    """A widget type: stable identifier, display metadata and its templates."""
    id: str
    name: str
    templates: Tuple[Template, ...] = ()
    description: str = ""

    def get_template(self, template_id: str) -> Optional[Template]:
        for template in self.templates:
            if template.id == template_id:
                return template
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WidgetType":
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            description=data.get("description", ""),
            templates=tuple(Template.from_dict(t) for t in data.get("templates", ())),
        )


@dataclass
class WidgetInstance:
    """
    One placed widget: a (widget type, template) binding plus its settings.

    Created when a user picks a template, mutated on every edit, archived by
    explicit deletion.
    """
    instance_id: str
    widget_type_id: str
    template_id: str
    title: str = ""
    is_active: bool = True
    settings: Dict[str, Any] = field(default_factory=dict)


def load_widget_type(path: Union[str, Path]) -> WidgetType:
    """Read a widget type declaration from a JSON file."""
    path = Path(path)
    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    widget_type = WidgetType.from_dict(data)
    logger.debug(f"Loaded widget type '{widget_type.id}' from {path}")
    return widget_type
