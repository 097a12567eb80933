"""Value wrappers shared by the path resolver and the template evaluator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


@dataclass(frozen=True, slots=True)
class Distributed:
    """Per-element results produced by an explicit ``[]`` flatten marker.

    Only values wrapped in this type are broadcast over by later template
    steps. A plain list is an ordinary value and is passed on whole.

    Attributes:
        items: Per-element results, in source order.

    """

    items: tuple[Any, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def map(self, fn: Callable[[Any], Any]) -> Distributed:
        """Apply fn to every element, preserving order."""
        return Distributed(tuple(fn(item) for item in self.items))

    @classmethod
    def splice(cls, results: Iterable[Any]) -> Distributed:
        """Collect results into one level, inlining results that are themselves distributed."""
        items: list[Any] = []
        for result in results:
            if isinstance(result, Distributed):
                items.extend(result.items)
            else:
                items.append(result)
        return cls(tuple(items))


def is_sequence(value: Any) -> bool:
    """Check if value is an ordered sequence that ``[]`` may flatten."""
    return isinstance(value, (list, tuple))


def unwrap(value: Any) -> Any:
    """Turn a distributed result into a plain list; leave anything else unchanged."""
    if isinstance(value, Distributed):
        return list(value.items)
    return value
