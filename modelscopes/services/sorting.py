from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy import asc, desc, literal_column

from modelscopes.schemas.sorting import SortSettings, SortSpec
from modelscopes.services.sort_attributes import ScopeRegistry, resolve_sortable_attributes
from modelscopes.services.sort_sequence import parse_sort_sequence

_LOG = logging.getLogger("modelscopes.scopes")


def _order_expression(column: Any):
    if isinstance(column, str):
        return literal_column(column)
    return column


def apply_sort(q, sort_spec: SortSpec, allow_list: Mapping[str, Any], default_order: SortSpec | None = None):
    order = dict(sort_spec or {})
    if not order and default_order:
        order = dict(default_order)
    for key, direction in order.items():
        column = allow_list.get(key)
        if column is None:
            _LOG.debug("Dropping sort key %r: not in the allow-list", key)
            continue
        expr = _order_expression(column)
        q = q.order_by(desc(expr) if str(direction).lower() == "desc" else asc(expr))
    return q


def sort_with_settings(q, sort: str | None, sort_settings: SortSettings):
    sort_spec = parse_sort_sequence(sort)
    order = sort_spec or sort_settings.default_order
    allow_list = resolve_sortable_attributes(sort_settings, only=order.keys())
    return apply_sort(q, order, allow_list)


def sort_by_demand(q, model: type, sort: str | None = None, registry: ScopeRegistry | None = None):
    """Sort ``q`` by a client sort sequence, honouring the model's allow-list."""
    registry = registry if registry is not None else ScopeRegistry()
    return sort_with_settings(q, sort, registry.sort_settings_for(model))
