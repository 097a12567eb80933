"""Declarative JSON-to-JSON projection."""

__all__ = [
    "DEFAULT_CONFIG",
    "ConfigError",
    "DereferenceError",
    "Distributed",
    "FunctionTemplate",
    "Json2JsonConfig",
    "Json2JsonError",
    "ObjectTemplate",
    "Path",
    "PathTemplate",
    "Segment",
    "TemplateError",
    "TemplateNode",
    "Transformer",
    "compile_template",
    "evaluate",
    "json2json",
    "parse_path",
    "resolve",
    "transform",
]

from ._config import DEFAULT_CONFIG, Json2JsonConfig
from ._errors import ConfigError, DereferenceError, Json2JsonError, TemplateError
from ._eval import Transformer, evaluate, json2json, transform
from ._path import Path, Segment, parse_path, resolve
from ._template import FunctionTemplate, ObjectTemplate, PathTemplate, TemplateNode, compile_template
from ._values import Distributed
