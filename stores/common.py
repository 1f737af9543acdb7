from dataclasses import dataclass, field
from typing import List

from errors import AppMessage, ValidationError


@dataclass(frozen=True)
class DeleteResult:
    acknowledged: bool
    deleted_count: int

    def to_dict(self) -> dict:
        return {"acknowledged": self.acknowledged, "deletedCount": self.deleted_count}


@dataclass
class Page:
    items: List = field(default_factory=list)
    total_count: int = 0
    current_page: int = 1
    limit: int = 10

    @property
    def total_pages(self) -> int:
        if self.total_count == 0:
            return 0
        return (self.total_count + self.limit - 1) // self.limit

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    def meta(self) -> dict:
        return {
            "totalCount": self.total_count,
            "currentPage": self.current_page,
            "limit": self.limit,
            "totalPages": self.total_pages,
            "hasNextPage": self.has_next_page,
        }


def check_pagination(page: int, limit: int, max_limit: int) -> None:
    if not isinstance(page, int) or not isinstance(limit, int) or isinstance(page, bool) or isinstance(limit, bool):
        raise ValidationError(AppMessage.INVALID_PAGINATION)
    if page < 1 or limit < 1 or limit > max_limit:
        raise ValidationError(AppMessage.INVALID_PAGINATION, context={"maxLimit": max_limit})


def paginate(query, page: int, limit: int, max_limit: int = 100) -> Page:
    """Runs an ordered SQLAlchemy query one page at a time."""
    check_pagination(page, limit, max_limit)
    total = query.order_by(None).count()
    rows = query.offset((page - 1) * limit).limit(limit).all()
    return Page(items=rows, total_count=total, current_page=page, limit=limit)


def clean_text(value, field_name: str) -> str:
    """Stripped text of a JSON field; missing or null reads as ""."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(AppMessage.INVALID_PAYLOAD, context={"field": field_name})
    return value.strip()
