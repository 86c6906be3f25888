from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Literal, Optional, Union, get_args

Period = Literal[
    "today",
    "24h",
    "yesterday",
    "this_week",
    "last_week",
    "7d",
    "this_month",
    "last_month",
    "1month",
]

PERIODS: tuple[str, ...] = get_args(Period)

class ListParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sort: Optional[str] = None
    # Left loosely typed: paginate_by_demand coerces and ignores bad values
    page: Union[int, str] = 1
    per_page: Union[int, str] = 0
    period: Optional[str] = None
    from_: Optional[Any] = Field(default=None, alias="from")
    to: Optional[Any] = None
