"""Jinja helpers for evaluating interpolation expressions."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Callable, Dict, Mapping, Optional

import jinja2
from jinja2.sandbox import SandboxedEnvironment

_MISSING = object()


@lru_cache(maxsize=1)
def _environment() -> jinja2.Environment:
    return SandboxedEnvironment(undefined=jinja2.StrictUndefined)


@lru_cache(maxsize=256)
def _compile(expression: str) -> Optional[Callable[..., Any]]:
    try:
        return _environment().compile_expression(expression, undefined_to_none=False)
    except jinja2.TemplateSyntaxError:
        return None


def nest_properties(properties: Mapping[str, Any]) -> Dict[str, Any]:
    """Turn dotted keys (`project.version`) into nested dicts for attribute lookup."""
    nested: Dict[str, Any] = {}
    for key, value in properties.items():
        node = nested
        parts = key.split(".")
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node.setdefault(parts[-1], value)
    return nested


def evaluate_expression(
    expression: str, properties: Mapping[str, Any], context: Mapping[str, Any]
) -> Optional[str]:
    """Resolve an expression to text, or return None when it can't be resolved.

    A flat property key wins over Jinja evaluation against `context`.
    """
    value = properties.get(expression, _MISSING)
    if value is _MISSING:
        compiled = _compile(expression)
        if compiled is None:
            return None
        try:
            value = compiled(**context)
        except (jinja2.TemplateError, ArithmeticError, TypeError, ValueError):
            return None
        if isinstance(value, jinja2.Undefined):
            return None
    if value is None:
        return None
    return str(value)
