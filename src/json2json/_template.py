"""Compilation of raw templates into template nodes.

A raw template is a string (path expression), a callable, or a mapping
(object template). Compiling turns it into one of the node classes below,
so the evaluator dispatches on a closed set of types.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from ._config import DEFAULT_CONFIG, Json2JsonConfig
from ._errors import TemplateError
from ._path import Path, parse_path

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PathTemplate:
    """Resolve a path against the current scope."""

    path: Path


@dataclass(slots=True, frozen=True)
class FunctionTemplate:
    """Apply a unary function to the current scope."""

    fn: Callable[[Any], Any]


@dataclass(slots=True, frozen=True)
class ObjectTemplate:
    """Narrow, format and project the current scope.

    Attributes:
        path: Narrows the scope before anything else, if set.
        formatting: Applied to the narrowed scope, if set.
        fields: Output keys and their templates, in declaration order.

    """

    path: Path | None = None
    formatting: Callable[[Any], Any] | None = None
    fields: tuple[tuple[str, TemplateNode], ...] = ()


TemplateNode: TypeAlias = PathTemplate | FunctionTemplate | ObjectTemplate


def _compile_path(path_str: object, config: Json2JsonConfig, where: str) -> Path:
    if not isinstance(path_str, str):
        msg = f"{where} must be a string, got {type(path_str).__name__}"
        raise TemplateError(msg)
    try:
        return parse_path(path_str, config.root_token)
    except ValueError as e:
        msg = f"Invalid path in {where}: {e}"
        raise TemplateError(msg) from e


def _compile_object(template: Mapping[str, Any], config: Json2JsonConfig) -> ObjectTemplate:
    path = None
    if config.path_key in template:
        path = _compile_path(template[config.path_key], config, config.path_key)

    formatting = template.get(config.formatting_key)
    if config.formatting_key in template and not callable(formatting):
        msg = f"{config.formatting_key} must be callable, got {type(formatting).__name__}"
        raise TemplateError(msg)

    fields = tuple(
        (key, compile_template(sub_template, config))
        for key, sub_template in template.items()
        if key not in (config.path_key, config.formatting_key)
    )
    return ObjectTemplate(path=path, formatting=formatting, fields=fields)


def compile_template(template: Any, config: Json2JsonConfig = DEFAULT_CONFIG) -> TemplateNode:
    """Compile a raw template into a template node.

    Already compiled nodes are returned unchanged.

    Args:
        template: A path string, a callable, a mapping, or a template node.
        config: Reserved tokens to recognise.

    Returns:
        The compiled template node.

    Raises:
        TemplateError: If the template or one of its parts has an unsupported type.

    """
    match template:
        case PathTemplate() | FunctionTemplate() | ObjectTemplate():
            return template
        case str():
            return PathTemplate(path=_compile_path(template, config, "path template"))
        case Mapping():
            return _compile_object(template, config)
        case _ if callable(template):
            return FunctionTemplate(fn=template)
        case _:
            msg = f"Unsupported template type: {type(template).__name__}"
            raise TemplateError(msg)
