"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
Provides Sort / PageRequest request models, Page / Slice result models
and the paginate helpers shared by every repository.

Page numbers are zero-based: PageRequest.of(0, 3) is the first three rows.
"""

import math
from collections.abc import Callable, Iterable, Sequence
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field
from sqlalchemy import Select, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from datastudy.utils.exceptions import InvalidSortPropertyError

T = TypeVar("T")
R = TypeVar("R")


class Direction(str, Enum):
    """정렬 방향 — Sort direction."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def from_string(cls, value: str) -> "Direction":
        """대소문자 구분 없이 방향을 파싱합니다 — Case-insensitive parse.

        Raises:
            ValueError: asc/desc가 아닌 경우 (Neither asc nor desc)
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Invalid sort direction {value!r}; expected 'asc' or 'desc'") from None


class Order(BaseModel):
    """단일 정렬 조건 — One (property, direction) pair."""

    model_config = ConfigDict(frozen=True)

    property: str  # 정렬 대상 속성명 (Entity attribute name)
    direction: Direction = Direction.ASC


class Sort(BaseModel):
    """정렬 조건 목록 — Ordered list of sort orders.

    Usage:
        Sort.by("username", direction=Direction.DESC)
        Sort.by("age").and_(Sort.by("username"))
        Sort.parse(["username,desc", "age"])
    """

    model_config = ConfigDict(frozen=True)

    orders: tuple[Order, ...] = ()

    @classmethod
    def by(cls, *properties: str, direction: Direction = Direction.ASC) -> "Sort":
        return cls(orders=tuple(Order(property=p, direction=direction) for p in properties))

    @classmethod
    def unsorted(cls) -> "Sort":
        return cls()

    @classmethod
    def parse(cls, values: Iterable[str]) -> "Sort":
        """웹 파라미터("username,desc")를 정렬 조건으로 변환합니다.

        Parse web-style sort parameters: ``property[,asc|desc]``.
        Blank values are skipped.
        """
        orders: list[Order] = []
        for value in values:
            parts: list[str] = [p.strip() for p in value.split(",") if p.strip()]
            if not parts:
                continue
            direction: Direction = Direction.ASC
            if len(parts) > 1:
                direction = Direction.from_string(parts[-1])
                parts = parts[:-1]
            orders.extend(Order(property=p, direction=direction) for p in parts)
        return cls(orders=tuple(orders))

    def and_(self, other: "Sort") -> "Sort":
        return Sort(orders=self.orders + other.orders)

    def descending(self) -> "Sort":
        return Sort(orders=tuple(Order(property=o.property, direction=Direction.DESC) for o in self.orders))

    @property
    def is_sorted(self) -> bool:
        return bool(self.orders)


class PageRequest(BaseModel):
    """페이지 요청 — Zero-based page index, page size and sort.

    Raises:
        ValueError: page < 0 또는 size < 1 (pydantic ValidationError)
    """

    model_config = ConfigDict(frozen=True)

    page: int = Field(ge=0)  # 0부터 시작하는 페이지 번호 (Zero-based page index)
    size: int = Field(ge=1)  # 페이지 크기 (Rows per page)
    sort: Sort = Sort()

    @classmethod
    def of(cls, page: int, size: int, sort: Sort | None = None) -> "PageRequest":
        return cls(page=page, size=size, sort=sort or Sort.unsorted())

    @property
    def offset(self) -> int:
        return self.page * self.size

    def next(self) -> "PageRequest":
        return PageRequest(page=self.page + 1, size=self.size, sort=self.sort)

    def previous_or_first(self) -> "PageRequest":
        return PageRequest(page=max(self.page - 1, 0), size=self.size, sort=self.sort)

    def first(self) -> "PageRequest":
        return PageRequest(page=0, size=self.size, sort=self.sort)


class Slice(BaseModel, Generic[T]):
    """전체 개수 없이 다음 페이지 존재 여부만 아는 결과.

    Page of results without a total count; ``has_next`` is computed by
    fetching one extra row.

    Attributes:
        content: 현재 페이지 항목 (Items of this slice)
        number: 페이지 번호 (Zero-based page index)
        size: 요청 페이지 크기 (Requested page size)
        has_next: 다음 페이지 존재 여부 (Whether more rows exist)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    content: list[T]
    number: int
    size: int
    has_next: bool

    @computed_field  # type: ignore[prop-decorator]
    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_first(self) -> bool:
        return self.number == 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_previous(self) -> bool:
        return self.number > 0

    def map(self, converter: Callable[[T], R]) -> "Slice[Any]":
        return Slice(
            content=[converter(item) for item in self.content],
            number=self.number,
            size=self.size,
            has_next=self.has_next,
        )


class Page(BaseModel, Generic[T]):
    """페이지네이션 결과 모델.

    Pagination result model. Entities should be mapped to DTOs
    (``page.map(...)``) before leaving the service layer.

    Attributes:
        content: 현재 페이지 항목 목록 (Items for the current page)
        total_elements: 전체 항목 수 (Total count across all pages)
        number: 현재 페이지 번호 (Current page, zero-based)
        size: 페이지당 항목 수 (Requested page size)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    content: list[T]
    total_elements: int
    number: int
    size: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        # 전체 페이지 수 — ceil(total/size)
        return math.ceil(self.total_elements / self.size) if self.size else 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_first(self) -> bool:
        return self.number == 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_last(self) -> bool:
        return not self.has_next

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_next(self) -> bool:
        return self.number + 1 < self.total_pages

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_previous(self) -> bool:
        return self.number > 0

    def map(self, converter: Callable[[T], R]) -> "Page[Any]":
        """페이지 메타데이터를 유지하며 항목을 변환합니다.

        Convert each item while keeping the paging metadata.
        """
        return Page(
            content=[converter(item) for item in self.content],
            total_elements=self.total_elements,
            number=self.number,
            size=self.size,
        )


def apply_sort(query: Select, model: type, sort: Sort) -> Select:
    """엔티티 컬럼 기준으로 ORDER BY를 적용합니다.

    Apply ORDER BY clauses for the given sort on the entity's columns.

    Raises:
        InvalidSortPropertyError: 매핑된 컬럼이 아닌 속성 (Unknown or non-column property)
    """
    columns = inspect(model).column_attrs
    for order in sort.orders:
        if order.property not in columns:
            raise InvalidSortPropertyError(model, order.property)
        attr = getattr(model, order.property)
        query = query.order_by(attr.desc() if order.direction is Direction.DESC else attr.asc())
    return query


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    pageable: PageRequest,
    model: type | None = None,
    count_query: Select[Any] | None = None,
) -> Page[Any]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated query, returning a Page with the total count.
    Runs two queries: the count (the given ``count_query``, or the content
    query wrapped in a subquery) and the page itself with OFFSET/LIMIT.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: 내용 조회 쿼리 (Content query, one entity per row)
        pageable: 페이지 요청 (Page request)
        model: 정렬 대상 엔티티 (Entity the sort properties refer to)
        count_query: 분리된 카운트 쿼리 (Optional lighter count query)

    Returns:
        Page[Any]: 페이지 결과 (Page of entities)
    """
    if pageable.sort.is_sorted:
        if model is None:
            raise ValueError("A model is required to apply a sort")
        query = apply_sort(query, model, pageable.sort)

    # 전체 개수 조회 — 서브쿼리로 감싸서 COUNT 실행 (Count total via subquery)
    if count_query is None:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    # 페이지 항목 조회 — OFFSET/LIMIT 적용 (Fetch page items with offset/limit)
    result = await db.execute(query.offset(pageable.offset).limit(pageable.size))
    items: Sequence[Any] = result.scalars().all()

    return Page(content=list(items), total_elements=total, number=pageable.page, size=pageable.size)


async def paginate_slice(
    db: AsyncSession,
    query: Select[Any],
    pageable: PageRequest,
    model: type | None = None,
) -> Slice[Any]:
    """카운트 쿼리 없이 size + 1개를 조회해 다음 페이지 여부를 판단합니다.

    Fetch ``size + 1`` rows to decide ``has_next`` without a count query.
    """
    if pageable.sort.is_sorted:
        if model is None:
            raise ValueError("A model is required to apply a sort")
        query = apply_sort(query, model, pageable.sort)

    result = await db.execute(query.offset(pageable.offset).limit(pageable.size + 1))
    items: list[Any] = list(result.scalars().all())
    has_next: bool = len(items) > pageable.size

    return Slice(content=items[: pageable.size], number=pageable.page, size=pageable.size, has_next=has_next)
