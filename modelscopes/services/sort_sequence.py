from __future__ import annotations

from modelscopes.schemas.sorting import SortSpec


def parse_sort_sequence(raw: str | None) -> SortSpec:
    """Parse an API sort sequence such as ``first_name,-last_name``.

    Returns ``{"first_name": "asc", "last_name": "desc"}``. A leading ``-``
    means descending order. Column names are not checked here.
    """
    text = str(raw or "").strip()
    if not text:
        return {}
    sort: SortSpec = {}
    for part in text.split(","):
        token = part.strip()
        if not token:
            continue
        if token.startswith("-"):
            key = token[1:].strip()
            if key:
                sort[key] = "desc"
        else:
            sort[token] = "asc"
    return sort
