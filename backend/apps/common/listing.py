"""Paged, sorted and filtered collections shared by every tabular endpoint.

A list view is described by a :class:`ListQuery` (page, size, sort, order and
filters) that round-trips through URL query parameters, a set of
:class:`Column` descriptors that render rows, and a :class:`PagedCollection`
that drives the ``idle -> loading -> success | error`` cycle around a fetch
callable.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .logger import get_logger

logger = get_logger(__name__).bind(component="common", layer="listing")

SORT_ASC = "asc"
SORT_DESC = "desc"
SORT_ORDERS = (SORT_ASC, SORT_DESC)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_SORT_FIELD = "createdAt"

PAGE_PARAM = "page"
SIZE_PARAM = "size"
SORT_PARAM = "sort"
ORDER_PARAM = "order"
FILTER_PARAM = "filter"
# Older clients send the page size under these names.
SIZE_ALIASES = ("limit", "pageSize")


def _coerce_int(raw: Any, default: int) -> int:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return default


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp ``page`` into ``[1, max(total_pages, 1)]``."""
    upper = max(int(total_pages or 0), 1)
    return min(max(int(page), 1), upper)


@dataclass(frozen=True)
class ListQuery:
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    sort_field: str = DEFAULT_SORT_FIELD
    sort_order: str = SORT_DESC
    filters: Dict[str, str] = field(default_factory=dict)
    default_sort_field: str = DEFAULT_SORT_FIELD
    default_sort_order: str = SORT_DESC
    default_page_size: int = DEFAULT_PAGE_SIZE
    filter_defaults: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_query_params(
        cls,
        params: Optional[Mapping],
        *,
        default_sort_field: str = DEFAULT_SORT_FIELD,
        default_sort_order: str = SORT_DESC,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        sortable_fields: Optional[Iterable[str]] = None,
        filter_keys: Sequence[str] = (FILTER_PARAM,),
        filter_defaults: Optional[Mapping[str, str]] = None,
    ) -> "ListQuery":
        """Build a query from URL parameters.

        Garbage or non-positive pages become page 1, sizes are clamped to
        ``[1, MAX_PAGE_SIZE]`` and unknown sort fields fall back to the view
        default. Filter values equal to their default are dropped.
        """
        params = params or {}
        page = _coerce_int(params.get(PAGE_PARAM), DEFAULT_PAGE)
        if page < 1:
            page = DEFAULT_PAGE

        raw_size = params.get(SIZE_PARAM)
        for alias in SIZE_ALIASES:
            if raw_size is not None:
                break
            raw_size = params.get(alias)
        page_size = _coerce_int(raw_size, default_page_size)
        page_size = min(max(page_size, 1), MAX_PAGE_SIZE)

        allowed = set(sortable_fields) if sortable_fields is not None else None
        sort_field = str(params.get(SORT_PARAM) or default_sort_field).strip()
        if allowed is not None and sort_field not in allowed:
            sort_field = default_sort_field

        sort_order = str(params.get(ORDER_PARAM) or default_sort_order).strip().lower()
        if sort_order not in SORT_ORDERS:
            sort_order = default_sort_order

        defaults = dict(filter_defaults or {})
        filters: Dict[str, str] = {}
        for key in filter_keys:
            value = params.get(key)
            if value is None:
                continue
            value = str(value).strip()
            if value and value != defaults.get(key):
                filters[key] = value

        return cls(
            page=page,
            page_size=page_size,
            sort_field=sort_field,
            sort_order=sort_order,
            filters=filters,
            default_sort_field=default_sort_field,
            default_sort_order=default_sort_order,
            default_page_size=default_page_size,
            filter_defaults=defaults,
        )

    def to_query_params(self) -> Dict[str, str]:
        """Serialize back to URL parameters, omitting every default value."""
        out: Dict[str, str] = {}
        if self.page != DEFAULT_PAGE:
            out[PAGE_PARAM] = str(self.page)
        if self.page_size != self.default_page_size:
            out[SIZE_PARAM] = str(self.page_size)
        if self.sort_field != self.default_sort_field:
            out[SORT_PARAM] = self.sort_field
        if self.sort_order != self.default_sort_order:
            out[ORDER_PARAM] = self.sort_order
        for key, value in self.filters.items():
            if value and value != self.filter_defaults.get(key):
                out[key] = value
        return out

    def filter_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.filters.get(key, self.filter_defaults.get(key, default))

    def toggle_sort(self, sort_field: str) -> "ListQuery":
        if sort_field == self.sort_field:
            order = SORT_ASC if self.sort_order == SORT_DESC else SORT_DESC
        else:
            order = SORT_ASC
        return replace(self, sort_field=sort_field, sort_order=order, page=DEFAULT_PAGE)

    def with_filter(self, **values: Optional[str]) -> "ListQuery":
        filters = dict(self.filters)
        for key, value in values.items():
            value = (value or "").strip() if isinstance(value, str) else value
            if not value or value == self.filter_defaults.get(key):
                filters.pop(key, None)
            else:
                filters[key] = str(value)
        return replace(self, filters=filters, page=DEFAULT_PAGE)

    def with_page_size(self, page_size: int) -> "ListQuery":
        page_size = min(max(int(page_size), 1), MAX_PAGE_SIZE)
        return replace(self, page_size=page_size, page=DEFAULT_PAGE)

    def go_to_page(self, page: int, total_pages: int) -> "ListQuery":
        return replace(self, page=clamp_page(page, total_pages))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def slice_bounds(self) -> Tuple[int, int]:
        return self.offset, self.offset + self.page_size

    def ordering(self, field_map: Mapping[str, str]) -> str:
        """Translate the sort field into an ORM ``order_by`` expression."""
        column = (
            field_map.get(self.sort_field)
            or field_map.get(self.default_sort_field)
            or next(iter(field_map.values()))
        )
        return f"-{column}" if self.sort_order == SORT_DESC else column


@dataclass(frozen=True)
class Pagination:
    total: int
    per_page: int
    current_page: int = DEFAULT_PAGE

    @property
    def total_pages(self) -> int:
        if self.total <= 0 or self.per_page <= 0:
            return 0
        return math.ceil(self.total / self.per_page)

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "totalPages": self.total_pages,
            "currentPage": self.current_page,
            "perPage": self.per_page,
            "hasNext": self.has_next,
            "hasPrevious": self.has_previous,
        }


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    formatter: Optional[Callable[[Any], Any]] = None
    sortable: bool = True

    def value(self, row: Any) -> Any:
        if isinstance(row, Mapping):
            raw = row.get(self.key)
        else:
            raw = getattr(row, self.key, None)
        if raw is None or self.formatter is None:
            return raw
        return self.formatter(raw)


def render_rows(rows: Iterable[Any], columns: Sequence[Column]) -> List[Dict[str, Any]]:
    return [{column.key: column.value(row) for column in columns} for row in rows]


def column_headers(columns: Sequence[Column]) -> List[Dict[str, Any]]:
    return [
        {"key": column.key, "label": str(column.label), "sortable": column.sortable}
        for column in columns
    ]


@dataclass
class PageResult:
    rows: Sequence[Any]
    total: int
    extra: Dict[str, Any] = field(default_factory=dict)


class ListState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class PagedCollection:
    """One page of server-held records plus the query that produced it.

    Every parameter change issues a fresh fetch and replaces the rows. When
    the source reports fewer pages than the requested one, the page is
    clamped and fetched again.
    """

    def __init__(
        self,
        fetch: Callable[[ListQuery], PageResult],
        columns: Sequence[Column],
        query: Optional[ListQuery] = None,
    ):
        self._fetch = fetch
        self.columns = tuple(columns)
        self.query = query or ListQuery()
        self.state = ListState.IDLE
        self.rows: List[Any] = []
        self.extra: Dict[str, Any] = {}
        self.pagination: Optional[Pagination] = None
        self.error: Optional[Exception] = None

    def load(self) -> ListState:
        self.state = ListState.LOADING
        self.error = None
        try:
            result = self._fetch(self.query)
            total_pages = Pagination(result.total, self.query.page_size).total_pages
            if self.query.page > max(total_pages, 1):
                logger.debug(
                    "Requested page beyond range; clamping",
                    page=self.query.page,
                    total_pages=total_pages,
                )
                self.query = self.query.go_to_page(self.query.page, total_pages)
                result = self._fetch(self.query)
        except Exception as exc:
            logger.warning(
                "List fetch failed",
                error=str(exc),
                exception=exc.__class__.__name__,
            )
            self.state = ListState.ERROR
            self.error = exc
            self.rows = []
            self.extra = {}
            self.pagination = None
            return self.state
        self.rows = list(result.rows)
        self.extra = dict(result.extra)
        self.pagination = Pagination(
            total=result.total,
            per_page=self.query.page_size,
            current_page=self.query.page,
        )
        self.state = ListState.SUCCESS
        return self.state

    def update(self, query: ListQuery) -> ListState:
        self.query = query
        return self.load()

    def sort_by(self, sort_field: str) -> ListState:
        return self.update(self.query.toggle_sort(sort_field))

    def filter_by(self, **values: Optional[str]) -> ListState:
        return self.update(self.query.with_filter(**values))

    def set_page_size(self, page_size: int) -> ListState:
        return self.update(self.query.with_page_size(page_size))

    def go_to_page(self, page: int) -> ListState:
        total_pages = self.pagination.total_pages if self.pagination else 1
        return self.update(self.query.go_to_page(page, total_pages))

    def rendered_rows(self) -> List[Dict[str, Any]]:
        return render_rows(self.rows, self.columns)

    def to_payload(self, items_key: str) -> Dict[str, Any]:
        payload = {
            items_key: self.rendered_rows(),
            "pagination": self.pagination.to_dict() if self.pagination else None,
            "query": self.query.to_query_params(),
        }
        payload.update(self.extra)
        return payload
