"""Helpers that build parameterised SQL filter, paging and ordering clauses."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from logmonitor.filters import ListOptions

DEFAULT_PAGE_LIMIT = 50

O = TypeVar("O", bound=ListOptions)


class SqlFilter:
    """Accumulates WHERE conditions with numbered placeholders and their arguments."""

    def __init__(self) -> None:
        self.where: list[str] = []
        self.args: list[Any] = []

    def add(self, condition: str, value: Any) -> None:
        """Add a condition whose single ``%d`` becomes the next placeholder number."""
        self.args.append(value)
        self.where.append(condition % len(self.args))

    def add_search(self, columns: Iterable[str], query: str) -> None:
        """Add a case-insensitive substring match across columns; blank queries are ignored."""
        query = query.strip()
        if not query:
            return
        self.args.append(f"%{query.lower()}%")
        placeholder = f"${len(self.args)}"
        parts = [f"LOWER({column}) LIKE {placeholder}" for column in columns]
        self.where.append("(" + " OR ".join(parts) + ")")

    def where_sql(self) -> str:
        """Return the WHERE clause, or an empty string when there are no conditions."""
        if not self.where:
            return ""
        return " WHERE " + " AND ".join(self.where)


def normalize_page(options: O) -> O:
    """Return a copy with a non-negative offset and a positive limit."""
    offset = max(options.offset, 0)
    limit = options.limit if options.limit > 0 else DEFAULT_PAGE_LIMIT
    return dataclasses.replace(options, offset=offset, limit=limit)


def order_direction(order: str, default_direction: str) -> str:
    """Map a user order string to ASC or DESC, falling back to the default."""
    normalized = order.strip().lower()
    if normalized == "asc":
        return "ASC"
    if normalized == "desc":
        return "DESC"
    return default_direction


def order_by(
    sort: str,
    allowed: Mapping[str, str],
    default_sort: str,
    order: str,
    default_direction: str,
) -> str:
    """Return an ORDER BY clause for an allowed sort key, else the default column."""
    column = allowed.get(sort)
    if column is None:
        column = allowed.get(default_sort, "")
    return f" ORDER BY {column} {order_direction(order, default_direction)}"