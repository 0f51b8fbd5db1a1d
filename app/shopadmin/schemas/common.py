from datetime import datetime, timezone
from typing import Annotated, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def _to_naive_utc(value: datetime) -> datetime:
    # Stored datetimes are naive UTC.
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_to_naive_utc)]


class ApiModel(BaseModel):
    """Base for every request/response body: camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Page(ApiModel, Generic[T]):
    items: list[T]
    page: int
    limit: int
    total_pages: int
    total_count: int


class DeleteResponse(ApiModel):
    id: str
    deleted: bool = True
