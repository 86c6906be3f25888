from fastapi import Query

from modelscopes.schemas.scopes import ListParams

def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value

def list_params(
    sort: str | None = Query(default=None, description="Sort sequence, e.g. name,-created_at"),
    page: str | None = Query(default=None),
    per_page: str | None = Query(default=None),
    period: str | None = Query(default=None),
    from_: str | None = Query(default=None, alias="from"),
    to: str | None = Query(default=None),
) -> ListParams:
    # Empty query strings (?period=) count as absent
    return ListParams(
        sort=_blank_to_none(sort),
        page=page if page is not None else 1,
        per_page=per_page if per_page is not None else 0,
        period=_blank_to_none(period),
        from_=_blank_to_none(from_),
        to=_blank_to_none(to),
    )
