"""Paging helpers for list operations.

Tags:
    dms, paging, helpers

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from itertools import islice
from typing import TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PageSlice:
    """An offset + count window over an enumerated sequence."""

    limit: int = 50
    offset: int = 0

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")
        if self.limit < 0:
            raise ValueError(f"limit must be >= 0, got {self.limit}")


def with_paging(items: Iterable[T], page: PageSlice) -> list[T]:
    """Return the items of *items* that fall inside *page*.

    Works lazily on the input so only ``offset + limit`` items are
    consumed from an iterator.
    """
    return list(islice(items, page.offset, page.offset + page.limit))
