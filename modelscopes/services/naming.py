from __future__ import annotations

from sqlalchemy import Table, inspect, literal_column
from sqlalchemy.orm import Mapper

from modelscopes.core.config import settings
from modelscopes.core.errors import InvalidUsageError


def _model_table(model) -> Table:
    mapper = inspect(model, raiseerr=False)
    if not isinstance(mapper, Mapper) or not isinstance(mapper.local_table, Table):
        raise InvalidUsageError(model, "mapped SQLAlchemy model")
    return mapper.local_table


def table_name(model) -> str:
    return _model_table(model).name


def full_table_name(model, prefix: str | None = None) -> str:
    prefix = settings.DB_TABLE_PREFIX if prefix is None else prefix
    return f"{prefix or ''}{table_name(model)}"


def full_column_name(model, column: str, prefix: str | None = None) -> str:
    return f"{full_table_name(model, prefix)}.{column}"


def column_ref(model, column: str, alias: str | None = None):
    """Column of ``model`` qualified by ``alias`` or by the model's own table.

    The model's column type is kept on aliased references so bound values are
    processed the same way as for the plain column.
    """
    table = _model_table(model)
    own = table.c.get(column)
    if alias:
        return literal_column(f"{alias}.{column}", type_=own.type if own is not None else None)
    if own is not None:
        return own
    return literal_column(f"{table.name}.{column}")
