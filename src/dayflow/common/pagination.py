from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import MAX_PAGE_SIZE


@dataclass(frozen=True)
class PageRequest:
    """1-based page number and page size, clamped to sane bounds."""

    page: int
    limit: int

    @classmethod
    def of(cls, page: int | None, limit: int | None, *, default_limit: int) -> "PageRequest":
        page = int(page) if page else 1
        limit = int(limit) if limit else default_limit
        return cls(page=max(page, 1), limit=min(max(limit, 1), MAX_PAGE_SIZE))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
