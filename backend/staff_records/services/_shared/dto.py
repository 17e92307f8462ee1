"""Paging values exchanged between endpoints and services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PaginationIn:
    """Requested window: 1-based ``page``, ``limit`` rows, ``sort`` tokens (``-`` = desc)."""

    page: int = 1
    limit: int = 20
    sort: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PageMeta:
    """What the ``meta`` block of a listing reports."""

    page: int
    limit: int
    total: int

    def as_dict(self) -> dict[str, int]:
        return {"total": self.total, "page": self.page, "limit": self.limit}
