from __future__ import annotations

from typing import Any, Iterable

from modelscopes.core.config import settings
from modelscopes.schemas.sorting import ComputedAttribute, SortSettings


def default_sort_settings() -> SortSettings:
    attribute = settings.DEFAULT_SORT_ATTRIBUTE
    return SortSettings(attributes=(attribute,), default_order={attribute: "asc"})


class ScopeRegistry:
    """Per-model sort settings, built once at startup and passed to the scopes.

    Lookup walks the model's MRO, so settings registered for an abstract base
    apply to its subclasses unless they register their own.
    """

    def __init__(self, default: SortSettings | None = None):
        self.default = default if default is not None else default_sort_settings()
        self._settings: dict[type, SortSettings] = {}

    def register(self, model: type, sort_settings: SortSettings) -> type:
        if not isinstance(sort_settings, SortSettings):
            raise TypeError("sort_settings must be a SortSettings instance")
        self._settings[model] = sort_settings
        return model

    def sortable(self, *attributes: Any, default_order: dict[str, str] | None = None):
        """Class decorator form of :meth:`register`."""

        def _decorator(model: type) -> type:
            return self.register(model, SortSettings(attributes=attributes, default_order=default_order or {}))

        return _decorator

    def sort_settings_for(self, model: type) -> SortSettings:
        for cls in getattr(model, "__mro__", (model,)):
            found = self._settings.get(cls)
            if found is not None and found.attributes:
                return found
        return self.default

    def __contains__(self, model: type) -> bool:
        return model in self._settings


def resolve_sortable_attributes(sort_settings: SortSettings, only: Iterable[str] | None = None) -> dict[str, Any]:
    """Build the sort allow-list: alias -> column name or column expression.

    Computed attributes are resolved on every call. With ``only`` given, they
    are resolved just for the requested aliases.
    """
    wanted = set(only) if only is not None else None
    allow_list: dict[str, Any] = {}
    for item in sort_settings.attributes:
        if isinstance(item, ComputedAttribute):
            if wanted is not None and item.alias not in wanted:
                continue
            allow_list[item.alias] = item.resolve()
        else:
            allow_list[item.alias] = item.column
    return allow_list
