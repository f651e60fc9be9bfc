"""
table.py — Search / sort / paginate for every listing table

State lives in TableState (one per table instance); apply() derives the
visible page from the merged collection:

    state = TableState.from_args(request.args)
    page = state.apply(rows, fields=("name", "code"), date_fields=("date",))

Sorting is three-state per column: asc → desc → unsorted. Clicking a
different column starts it at asc. Changing the search text or the page
size resets to page 1.
"""

import math
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from dateutil.parser import parse as _dp

from sitedesk.core.errors import ValidationError

log = logging.getLogger("sitedesk.table")

PAGE_SIZES = (10, 25, 50, 100)
SORT_DIRECTIONS = ("asc", "desc")


@dataclass
class TablePage:
    rows: List[dict]
    total: int
    page: int
    page_count: int
    page_size: int

    @property
    def start_index(self) -> int:
        """1-based row number of the first visible row (0 when empty)."""
        if not self.rows:
            return 0
        return (self.page - 1) * self.page_size + 1

    def to_dict(self) -> dict:
        return {
            "rows": self.rows, "total": self.total, "page": self.page,
            "page_count": self.page_count, "page_size": self.page_size,
            "start_index": self.start_index,
        }


def page_count(total: int, page_size: int) -> int:
    return max(1, math.ceil(total / page_size))


def _date_key(value):
    if not value:
        return datetime.min
    try:
        return _dp(str(value)).replace(tzinfo=None)
    except (ValueError, OverflowError):
        return datetime.min


def _sort_value(record: dict, key: str, is_date: bool):
    value = record.get(key)
    if is_date:
        return (0, _date_key(value))
    if value is None:
        return (1, "")
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (0, value)
    return (0, str(value).lower())


@dataclass
class TableState:
    search: str = ""
    sort_key: Optional[str] = None
    sort_dir: Optional[str] = None
    page: int = 1
    page_size: int = 10
    _last_count: int = field(default=1, repr=False)

    # ── Mutators ─────────────────────────────────────────────────────────────

    def set_search(self, text: str):
        self.search = text or ""
        self.page = 1

    def set_page_size(self, size):
        try:
            size = int(size)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid page size: {size}")
        if size not in PAGE_SIZES:
            raise ValidationError(f"Page size must be one of {', '.join(map(str, PAGE_SIZES))}")
        self.page_size = size
        self.page = 1

    def toggle_sort(self, key: str):
        """Click on a column header."""
        if self.sort_key != key:
            self.sort_key, self.sort_dir = key, "asc"
        elif self.sort_dir == "asc":
            self.sort_dir = "desc"
        else:
            self.sort_key, self.sort_dir = None, None

    def set_page(self, page):
        try:
            page = int(page)
        except (TypeError, ValueError):
            page = 1
        self.page = min(max(1, page), self._last_count)

    # ── Derivation ───────────────────────────────────────────────────────────

    def filter(self, rows: Iterable[dict], fields: Iterable[str]) -> list:
        rows = list(rows)
        query = self.search.strip().lower()
        if not query:
            return rows
        fields = tuple(fields)
        return [
            r for r in rows
            if any(query in str(r.get(f) if r.get(f) is not None else "").lower() for f in fields)
        ]

    def sort(self, rows: list, date_fields: Iterable[str] = ()) -> list:
        if not self.sort_key or self.sort_dir not in SORT_DIRECTIONS:
            return list(rows)
        is_date = self.sort_key in tuple(date_fields)
        # sorted() is stable, so ties keep their original order
        return sorted(rows, key=lambda r: _sort_value(r, self.sort_key, is_date),
                      reverse=self.sort_dir == "desc")

    def apply(self, rows: Iterable[dict], fields: Iterable[str],
              date_fields: Iterable[str] = ()) -> TablePage:
        filtered = self.sort(self.filter(rows, fields), date_fields)
        total = len(filtered)
        self._last_count = page_count(total, self.page_size)
        self.page = min(max(1, self.page), self._last_count)
        start = (self.page - 1) * self.page_size
        return TablePage(rows=filtered[start:start + self.page_size], total=total,
                         page=self.page, page_count=self._last_count,
                         page_size=self.page_size)

    @classmethod
    def from_args(cls, args) -> "TableState":
        """Build a state from query parameters (search, sort, dir, page, page_size)."""
        state = cls()
        if args.get("page_size"):
            state.set_page_size(args.get("page_size"))
        state.set_search(args.get("search", ""))
        sort_key = args.get("sort")
        if sort_key:
            direction = (args.get("dir") or "asc").lower()
            if direction not in SORT_DIRECTIONS:
                raise ValidationError(f"Invalid sort direction: {direction}")
            state.sort_key, state.sort_dir = sort_key, direction
        try:
            state.page = max(1, int(args.get("page", 1)))
        except (TypeError, ValueError):
            state.page = 1
        return state


def order_by_created(rows: Iterable[dict], order: str = "none", field_name: str = "createdAt") -> list:
    """Card-view ordering: "recent" (newest first), "oldest", or unchanged."""
    rows = list(rows)
    if order == "recent":
        return sorted(rows, key=lambda r: _date_key(r.get(field_name)), reverse=True)
    if order == "oldest":
        return sorted(rows, key=lambda r: _date_key(r.get(field_name)))
    return rows
