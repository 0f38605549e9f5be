"""
Generic list/filter/sort/paginate query building.

Each catalog resource describes itself with a `Listing` (which table and
joins, which columns to search, which public sort keys map to which SQL
columns). `build_list_sql` turns that plus the request's `ListQuery` into
parameterized SQL. Nothing here touches the database, so the rules are
easy to unit test:

- search: case-insensitive substring match over all search columns (OR)
- status: exact match, ANDed with search
- sort_by: allow-listed; unknown keys fall back to the default sort key
- sort_direction: asc/desc; anything else falls back to desc
- per_page: positive int, or -1 / "all" for every row
- page and per_page are clamped so LIMIT/OFFSET stay within BIGINT
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from fastapi import Query

ALL = -1
DEFAULT_PER_PAGE = 10
DEFAULT_SORT = "updated_at"
DEFAULT_DIRECTION = "desc"

# Keeps LIMIT and OFFSET inside BIGINT.
MAX_PAGE = 10**12
MAX_PER_PAGE = 10_000

_ALL_SENTINELS = {"-1", "all"}


@dataclass(frozen=True)
class ListQuery:
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE
    search: str = ""
    status: str = ""
    sort_by: str = DEFAULT_SORT
    sort_direction: str = DEFAULT_DIRECTION

    @property
    def paginated(self) -> bool:
        return self.per_page != ALL

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page if self.paginated else 0


@dataclass(frozen=True)
class Listing:
    """
    Per-resource query description.

    `alias` is the alias of the resource's own table inside `from_sql`;
    related columns in `search_columns`/`sort_columns` must be qualified
    with their join alias.
    """

    alias: str
    from_sql: str
    columns_sql: str
    search_columns: tuple[str, ...]
    sort_columns: Mapping[str, str] = field(default_factory=dict)
    default_sort: str = DEFAULT_SORT

    @property
    def id_column(self) -> str:
        return f"{self.alias}.id"

    @property
    def status_column(self) -> str:
        return f"{self.alias}.status"

    def sort_column(self, sort_by: str) -> str:
        column = self.sort_columns.get(sort_by)
        if column is None:
            column = self.sort_columns.get(self.default_sort, f"{self.alias}.{self.default_sort}")
        return column


@dataclass(frozen=True)
class ListSql:
    select: str
    select_args: list[Any]
    count: str
    count_args: list[Any]


def parse_page(raw: Any) -> int:
    try:
        page = int(str(raw).strip())
    except (TypeError, ValueError):
        return 1
    if page < 1:
        return 1
    return min(page, MAX_PAGE)


def parse_per_page(raw: Any) -> int:
    text = str(raw if raw is not None else "").strip().lower()
    if text in _ALL_SENTINELS:
        return ALL
    try:
        value = int(text)
    except ValueError:
        return DEFAULT_PER_PAGE
    if value < 1:
        return DEFAULT_PER_PAGE
    return min(value, MAX_PER_PAGE)


def normalize_direction(raw: Any) -> str:
    text = str(raw or "").strip().lower()
    return text if text in {"asc", "desc"} else DEFAULT_DIRECTION


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def make_query(
    *,
    page: Any = 1,
    per_page: Any = DEFAULT_PER_PAGE,
    search: str | None = "",
    status: str | None = "",
    sort_by: str | None = DEFAULT_SORT,
    sort_direction: str | None = DEFAULT_DIRECTION,
) -> ListQuery:
    return ListQuery(
        page=parse_page(page),
        per_page=parse_per_page(per_page),
        search=(search or "").strip(),
        status=(status or "").strip(),
        sort_by=(sort_by or DEFAULT_SORT).strip(),
        sort_direction=normalize_direction(sort_direction),
    )


def list_query_params(
    page: str = Query("1"),
    per_page: str = Query(str(DEFAULT_PER_PAGE)),
    search: str = Query("", max_length=255),
    status: str = Query(""),
    sort_by: str = Query(DEFAULT_SORT),
    sort_direction: str = Query(DEFAULT_DIRECTION),
) -> ListQuery:
    """
    FastAPI dependency reading the shared list query-string parameters.
    """
    return make_query(
        page=page,
        per_page=per_page,
        search=search,
        status=status,
        sort_by=sort_by,
        sort_direction=sort_direction,
    )


def build_list_sql(listing: Listing, query: ListQuery) -> ListSql:
    args: list[Any] = []
    where: list[str] = []

    if query.search and listing.search_columns:
        args.append(escape_like(query.search))
        n = len(args)
        matches = " OR ".join(
            f"{column}::text ILIKE '%' || ${n} || '%'" for column in listing.search_columns
        )
        where.append(f"({matches})")

    if query.status:
        args.append(query.status)
        where.append(f"{listing.status_column} = ${len(args)}")

    where_sql = f"WHERE {' AND '.join(where)}" if where else ""
    sort_column = listing.sort_column(query.sort_by)
    direction = normalize_direction(query.sort_direction).upper()

    order_sql = f"ORDER BY {sort_column} {direction}"
    if sort_column != listing.id_column:
        order_sql += f", {listing.id_column} DESC"

    count_sql = f"SELECT count(*) FROM {listing.from_sql} {where_sql}".strip()
    select_sql = f"SELECT {listing.columns_sql} FROM {listing.from_sql} {where_sql} {order_sql}"

    select_args = list(args)
    if query.paginated:
        select_args.extend([query.per_page, query.offset])
        select_sql += f" LIMIT ${len(select_args) - 1} OFFSET ${len(select_args)}"

    return ListSql(
        select=" ".join(select_sql.split()),
        select_args=select_args,
        count=" ".join(count_sql.split()),
        count_args=args,
    )


@dataclass(frozen=True)
class Page:
    items: list[dict]
    total: int
    current_page: int
    per_page: int

    @classmethod
    def everything(cls, items: list[dict]) -> "Page":
        return cls(items=items, total=len(items), current_page=1, per_page=len(items))

    @property
    def last_page(self) -> int:
        if self.per_page <= 0:
            return 1
        return max(1, math.ceil(self.total / self.per_page))

    def meta(self) -> dict[str, int]:
        return {
            "current_page": self.current_page,
            "last_page": self.last_page,
            "per_page": self.per_page,
            "total": self.total,
        }


def page_payload(page: Page, present: Callable[[dict], dict]) -> dict:
    return {"data": [present(row) for row in page.items], "meta": page.meta()}
