from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

from modelscopes.schemas.scopes import ListParams
from modelscopes.schemas.sorting import SortSettings
from modelscopes.services import filters, pagination, sorting, time_filters
from modelscopes.services.instants import utcnow
from modelscopes.services.naming import table_name
from modelscopes.services.sort_attributes import ScopeRegistry


class ModelScopes:
    """Query scopes bound to one mapped model.

    Every method takes a SQLAlchemy ``Query`` or ``Select`` and returns a new
    one; the query passed in is left as it was.

    Usage::

        scopes = ModelScopes(User, registry)
        q = scopes.filter_by_strict_values(db.query(User), "status", ["new", None])
        q = scopes.sort_and_paginate(q, "-created_at,name", page=2, per_page=20)
    """

    def __init__(
        self,
        model: type,
        registry: ScopeRegistry | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.model = model
        self.table_name = table_name(model)
        self.registry = registry if registry is not None else ScopeRegistry()
        self.clock = clock

    @property
    def sort_settings(self) -> SortSettings:
        return self.registry.sort_settings_for(self.model)

    def sort_by_demand(self, q, sort: str | None = None):
        return sorting.sort_with_settings(q, sort, self.sort_settings)

    def paginate_by_demand(self, q, page: Any = 1, per_page: Any = 0):
        return pagination.paginate_by_demand(q, page, per_page)

    def sort_and_paginate(self, q, sort: str | None = None, page: Any = 1, per_page: Any = 0):
        return self.paginate_by_demand(self.sort_by_demand(q, sort), page, per_page)

    def filter_by_strict_values(self, q, column: str, values: Any = (), alias: str | None = None):
        return filters.filter_by_strict_values(q, self.model, column, values, alias)

    def filter_by_like_values(
        self,
        q,
        column: str,
        values: Any = (),
        alias: str | None = None,
        min_length: int | None = None,
    ):
        return filters.filter_by_like_values(q, self.model, column, values, alias, min_length)

    def filter_by_time_range(self, q, column: str, from_: Any = None, to: Any = None, alias: str | None = None):
        return time_filters.filter_by_time_range(q, self.model, column, from_, to, alias)

    def filter_by_time_period(self, q, column: str, period: str | None = None, alias: str | None = None):
        return time_filters.filter_by_time_period(q, self.model, column, period, alias, clock=self.clock)

    def active(self, q, alias: str | None = None):
        return filters.active(q, self.model, alias)

    def inactive(self, q, alias: str | None = None):
        return filters.inactive(q, self.model, alias)

    def apply_list_params(self, q, params: ListParams, time_column: str | None = None):
        """Apply the filters, sort and page carried by an API list request.

        Time filters only run when ``time_column`` is given; an explicit
        ``from``/``to`` range wins over ``period``.
        """
        if time_column:
            if params.from_ is not None or params.to is not None:
                q = self.filter_by_time_range(q, time_column, params.from_, params.to)
            elif params.period is not None:
                q = self.filter_by_time_period(q, time_column, params.period)
        return self.sort_and_paginate(q, params.sort, params.page, params.per_page)
