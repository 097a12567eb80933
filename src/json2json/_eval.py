"""Recursive evaluation of templates against a document."""

import logging
from collections.abc import Callable
from typing import Any

from ._config import DEFAULT_CONFIG, Json2JsonConfig
from ._path import resolve
from ._template import FunctionTemplate, ObjectTemplate, PathTemplate, TemplateNode, compile_template
from ._values import Distributed, unwrap

logger = logging.getLogger(__name__)


def _apply(fn: Callable[[Any], Any], value: Any) -> Any:
    if isinstance(value, Distributed):
        return value.map(fn)
    return fn(value)


def _project(
    fields: tuple[tuple[str, TemplateNode], ...],
    element: Any,
    root: Any,
    config: Json2JsonConfig,
) -> dict[str, Any]:
    return {key: unwrap(evaluate(template, element, root, config)) for key, template in fields}


def _evaluate_object(node: ObjectTemplate, scope: Any, root: Any, config: Json2JsonConfig) -> Any:
    narrowed = scope
    if node.path is not None:
        narrowed = resolve(node.path, scope, root, config)
        logger.debug("Narrowed scope with '%s' (distributes=%s)", node.path, node.path.distributes)

    if node.formatting is not None:
        narrowed = _apply(node.formatting, narrowed)

    if not node.fields:
        return narrowed

    if isinstance(narrowed, Distributed):
        logger.debug("Projecting %d field(s) over %d element(s)", len(node.fields), len(narrowed))
        return narrowed.map(lambda element: _project(node.fields, element, root, config))
    return _project(node.fields, narrowed, root, config)


def evaluate(
    template: Any,
    scope: Any,
    root: Any,
    config: Json2JsonConfig = DEFAULT_CONFIG,
) -> Any:
    """Evaluate a template against scope.

    Args:
        template: A template node, or a raw template which is compiled first.
        scope: The value the template is evaluated against.
        root: The top-level document, visible to root-token paths at any depth.
        config: Reserved tokens used when compiling raw templates.

    Returns:
        The result value, or a Distributed if a flatten marker was applied
        and not consumed by an enclosing object template.

    """
    node = compile_template(template, config)
    match node:
        case PathTemplate(path):
            return resolve(path, scope, root, config)
        case FunctionTemplate(fn):
            return _apply(fn, scope)
        case ObjectTemplate():
            return _evaluate_object(node, scope, root, config)
        case _:
            msg = f"Unknown template node type: {type(node)}"
            raise TypeError(msg)


def transform(document: Any, template: Any, *, config: Json2JsonConfig | None = None) -> Any:
    """Project a document into a new shape described by template.

    Args:
        document: A JSON-compatible value. It is never modified.
        template: A path string, a unary function, or an object template.
        config: Reserved tokens. Defaults to ``$root``, ``$path`` and ``$formatting``.

    Returns:
        A new JSON-compatible value. Results of flattened paths are returned as lists.

    Raises:
        DereferenceError: If a non-optional path segment is read from an absent value.
        TemplateError: If the template is malformed.

    Example:
        >>> transform({"foo": [{"bar": 1}, {"bar": 2}]}, {"bars": "foo[].bar"})
        {'bars': [1, 2]}

    """
    config = config or DEFAULT_CONFIG
    return unwrap(evaluate(compile_template(template, config), document, document, config))


json2json = transform


class Transformer:
    """A template compiled once and applied to many documents."""

    def __init__(self, template: Any, config: Json2JsonConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG
        self.template = compile_template(template, self.config)

    def __call__(self, document: Any) -> Any:
        return unwrap(evaluate(self.template, document, document, self.config))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.template!r})"
