from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Literal, Tuple, Union

Dir = Literal["asc", "desc"]
SortSpec = Dict[str, Dir]


@dataclass(frozen=True)
class LiteralAttribute:
    """Sortable column exposed under its own name."""

    column: str

    @property
    def alias(self) -> str:
        return self.column


@dataclass(frozen=True)
class ComputedAttribute:
    """Sortable expression built on demand by ``resolver(*args, **kwargs)``.

    The resolver may return a SQLAlchemy column element (e.g. an aggregate
    labelled in the query) or raw SQL text.
    """

    alias: str
    resolver: Callable[..., Any]
    args: Tuple[Any, ...] = ()
    kwargs: Dict[str, Any] = field(default_factory=dict, hash=False)

    def resolve(self) -> Any:
        return self.resolver(*self.args, **self.kwargs)


SortAttribute = Union[LiteralAttribute, ComputedAttribute]


def as_sort_attribute(raw: Union[str, SortAttribute]) -> SortAttribute:
    if isinstance(raw, (LiteralAttribute, ComputedAttribute)):
        return raw
    if isinstance(raw, str):
        return LiteralAttribute(raw)
    raise TypeError(f"Unsupported sort attribute declaration: {raw!r}")


@dataclass
class SortSettings:
    attributes: Tuple[SortAttribute, ...] = ()
    default_order: SortSpec = field(default_factory=dict)

    def __post_init__(self):
        self.attributes = tuple(as_sort_attribute(item) for item in self.attributes)
        self.default_order = {
            str(key): ("desc" if str(direction).strip().lower() == "desc" else "asc")
            for key, direction in dict(self.default_order or {}).items()
        }

    @property
    def aliases(self) -> list[str]:
        return [item.alias for item in self.attributes]
