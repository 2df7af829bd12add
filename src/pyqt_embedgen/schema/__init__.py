"""
Template-driven settings schema.

Data model, registration-time validation, default resolution and
dependency evaluation.
"""

from .types import (
    UNSET,
    Dependency,
    Menu,
    Option,
    Template,
    WidgetType,
    WidgetInstance,
    load_widget_type,
    strict_equals,
)
from .resolver import resolve, defaults, undeclared_keys
from .dependency import DependencyGraph, DependencyEvaluator, is_active
from .registry import TemplateRegistry, TemplateSchema, compile_template, get_template_registry

__all__ = [
    "UNSET",
    "Dependency",
    "Menu",
    "Option",
    "Template",
    "WidgetType",
    "WidgetInstance",
    "load_widget_type",
    "strict_equals",
    "resolve",
    "defaults",
    "undeclared_keys",
    "DependencyGraph",
    "DependencyEvaluator",
    "is_active",
    "TemplateRegistry",
    "TemplateSchema",
    "compile_template",
    "get_template_registry",
]
