import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Self

from pydantic import BaseModel

from ._config import DEFAULT_CONFIG, Json2JsonConfig
from ._errors import DereferenceError
from ._values import Distributed, is_sequence

logger = logging.getLogger(__name__)

FLATTEN_MARKER = "[]"
OPTIONAL_MARKER = "?"

_INDEX_RE = re.compile(r"\d+")


@dataclass(slots=True, frozen=True)
class Segment:
    """One dot-delimited unit of a path.

    An unnamed segment performs no field lookup; it only applies its markers
    to the current value.
    """

    name: str
    optional: bool = False
    flatten: bool = False

    def __str__(self) -> str:
        result = self.name
        if self.flatten:
            result += FLATTEN_MARKER
        if self.optional:
            result += OPTIONAL_MARKER
        return result

    @classmethod
    def parse(cls, piece: str) -> Self:
        name = piece
        optional = flatten = False
        while True:
            if name.endswith(OPTIONAL_MARKER):
                if optional:
                    msg = f"Repeated '{OPTIONAL_MARKER}' marker in segment: {piece}"
                    raise ValueError(msg)
                optional = True
                name = name[: -len(OPTIONAL_MARKER)]
            elif name.endswith(FLATTEN_MARKER):
                if flatten:
                    msg = f"Repeated '{FLATTEN_MARKER}' marker in segment: {piece}"
                    raise ValueError(msg)
                flatten = True
                name = name[: -len(FLATTEN_MARKER)]
            else:
                break
        if "[" in name or "]" in name:
            msg = f"Unexpected bracket in segment: {piece}"
            raise ValueError(msg)
        return cls(name=name, optional=optional, flatten=flatten)


@dataclass(slots=True, frozen=True)
class Path:
    """A parsed path expression.

    Attributes:
        segments: Segments applied left to right.
        root: The root token the path started with, or None for scope-relative paths.

    """

    segments: tuple[Segment, ...]
    root: str | None = None

    @property
    def from_root(self) -> bool:
        return self.root is not None

    @property
    def distributes(self) -> bool:
        """Check if any segment carries the flatten marker."""
        return any(segment.flatten for segment in self.segments)

    def __str__(self) -> str:
        pieces = [str(segment) for segment in self.segments]
        if self.root is not None and pieces:
            pieces[0] = self.root + pieces[0]
        return ".".join(pieces)

    @classmethod
    def parse(cls, path_str: str, root_token: str = DEFAULT_CONFIG.root_token) -> Self:
        segments = [Segment.parse(piece) for piece in path_str.split(".")]
        for position, segment in enumerate(segments[1:], start=1):
            if not segment.name:
                msg = f"Empty segment at position {position} in path: {path_str!r}"
                raise ValueError(msg)

        root = None
        if segments[0].name == root_token:
            root = root_token
            first = segments[0]
            segments[0] = Segment(name="", optional=first.optional, flatten=first.flatten)

        return cls(segments=tuple(segments), root=root)


@lru_cache(maxsize=512)
def parse_path(path_str: str, root_token: str = DEFAULT_CONFIG.root_token) -> Path:
    """Parse a path string, caching the result.

    Raises:
        ValueError: If a segment carries a repeated marker or a stray bracket,
            or a segment after the first is empty.

    """
    path = Path.parse(path_str, root_token)
    logger.debug("Parsed path %r into %s", path_str, path.segments)
    return path


def get_field(value: Any, name: str) -> Any:
    """Look up a single field on a non-absent value, returning None when it is missing."""
    match value:
        case BaseModel():
            if name in type(value).model_fields:
                return getattr(value, name)
            return (value.model_extra or {}).get(name)
        case Mapping():
            return value.get(name)
        case list() | tuple() if _INDEX_RE.fullmatch(name):
            index = int(name)
            if index < len(value):
                return value[index]
            return None
        case _:
            return None


def _walk(value: Any, segments: tuple[Segment, ...]) -> Any:
    for i, segment in enumerate(segments):
        if segment.name:
            if value is None:
                if segment.optional:
                    return None
                raise DereferenceError(segment.name)
            value = get_field(value, segment.name)

        if value is None and segment.optional:
            return None

        if segment.flatten:
            return _flatten(value, segment, segments[i + 1 :])

    return value


def _flatten(value: Any, segment: Segment, rest: tuple[Segment, ...]) -> Distributed:
    if value is None:
        raise DereferenceError(segment.name or FLATTEN_MARKER)
    if not is_sequence(value):
        msg = f"Cannot flatten {type(value).__name__} at segment '{segment}'"
        raise TypeError(msg)

    logger.debug("Flattening %d element(s) at '%s'", len(value), segment)
    return Distributed.splice(_walk(element, rest) for element in value)


def resolve(
    path: str | Path,
    scope: Any,
    root: Any,
    config: Json2JsonConfig = DEFAULT_CONFIG,
) -> Any:
    """Resolve a path expression against scope, or against root for root-token paths.

    Args:
        path: Path string or an already parsed Path.
        scope: The current value.
        root: The top-level document.
        config: Supplies the root token used when parsing a path string.

    Returns:
        The resolved value (None when absent), or a Distributed if a flatten
        marker was applied along the path.

    Raises:
        DereferenceError: If a non-optional segment is read from an absent value.
        TypeError: If a flatten marker is applied to a value that is not a list or tuple.

    """
    if isinstance(path, str):
        path = parse_path(path, config.root_token)

    start = root if path.from_root else scope
    if isinstance(start, Distributed):
        return Distributed.splice(_walk(item, path.segments) for item in start.items)
    return _walk(start, path.segments)
