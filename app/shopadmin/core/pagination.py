import math
from dataclasses import dataclass

from fastapi import Depends, Query

from app.shopadmin.core.config import Settings
from app.shopadmin.core.deps import get_settings


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit) if total else 0


def page_params(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, gt=0),
    settings: Settings = Depends(get_settings),
) -> PageParams:
    # Oversize limits are clamped; the envelope echoes the limit actually applied.
    effective_limit = min(limit or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    return PageParams(page=page, limit=effective_limit)


def page_envelope(items: list, total: int, params: PageParams) -> dict:
    return {
        "items": items,
        "page": params.page,
        "limit": params.limit,
        "total_pages": params.total_pages(total),
        "total_count": total,
    }
