# fleetops/core/pagination.py

"""
하이브리드 페이지네이션 코디네이터 모듈입니다.

요청마다 페이지네이션을 DB에 맡길 수 있는지(pushdown) 판단하고,
불가능하면 전체 조회 -> 평탄화 -> 메모리 정렬 -> 슬라이스 순서로 처리합니다.
두 경로 모두 같은 PaginatedResult 형태를 반환하므로 호출자는 어떤 경로가
실행되었는지 알 필요가 없습니다.

엑셀 내보내기는 `flatten_all`을 사용하며, 목록 API와 같은 필터/정렬이면
행 순서도 정확히 같습니다.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, List, Optional, Protocol, Sequence

from fleetops.core.config import settings
from fleetops.core.flatten import FlatRow, FlattenPlan, PostFetchFilter, flatten
from fleetops.core.sorting import (
    PushdownPlan,
    SortAllowList,
    SortDirection,
    SortSpec,
    classify_pushdown,
    column_value,
    resolve_sort,
)

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 페이지 창 / 결과
# =============================================================================
@dataclass(frozen=True)
class PageWindow:
    page: int
    per_page: int

    @classmethod
    def clamp(
        cls,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
        *,
        default_per_page: Optional[int] = None,
        min_per_page: Optional[int] = None,
    ) -> "PageWindow":
        """
        잘못된 page/per_page를 오류 없이 가장 가까운 유효값으로 보정합니다.
        page < 1 이면 1, per_page < 최소값이면 최소값, 지정하지 않으면 기본값.
        """
        if default_per_page is None:
            default_per_page = settings.DEFAULT_PER_PAGE
        if min_per_page is None:
            min_per_page = settings.MIN_PER_PAGE

        if page is None:
            page = settings.DEFAULT_PAGE
        if per_page is None:
            per_page = default_per_page
        return cls(page=max(page, 1), per_page=max(per_page, min_per_page, 1))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    def slice(self, rows: Sequence[FlatRow]) -> List[FlatRow]:
        return list(rows[self.offset:self.offset + self.per_page])


@dataclass(frozen=True)
class PaginatedResult:
    rows: List[FlatRow]
    total: int
    page: int
    per_page: int
    total_pages: int

    @classmethod
    def build(cls, rows: List[FlatRow], total: int, window: PageWindow) -> "PaginatedResult":
        return cls(
            rows=rows,
            total=total,
            page=window.page,
            per_page=window.per_page,
            total_pages=math.ceil(total / window.per_page),
        )

    def meta(self) -> dict:
        return {
            "total": self.total,
            "page": self.page,
            "per_page": self.per_page,
            "total_pages": self.total_pages,
        }


# =============================================================================
# 2. 협력자 / 목록 구성
# =============================================================================
class TreeFetcher(Protocol):
    """
    루트 엔티티를 말단까지 자식 컬렉션이 채워진 상태로 돌려주는 조회 협력자.
    `order_by`는 항상 기본키를 마지막 정렬 키로 포함해 같은 offset/limit에 대해 안정적이어야 합니다.
    """

    async def fetch(
        self,
        filters: Any,
        order_by: SortSpec,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Sequence[Any]:
        ...

    async def count(self, filters: Any) -> int:
        ...


@dataclass(frozen=True)
class Listing:
    """목록 하나의 정적 구성: 정렬 허용 목록과 평탄화 계획."""
    name: str
    allow_list: SortAllowList
    plan: FlattenPlan

    def resolve(self, sort: Optional[str]) -> SortSpec:
        return resolve_sort(sort, self.allow_list)


# =============================================================================
# 3. 메모리 정렬
# =============================================================================
def sortable_value(value: Any) -> tuple:
    """
    서로 다른 타입이 섞여도 비교 가능한 정렬 키를 만듭니다.
    순서: None < 숫자 < 날짜/시각 < 문자열(대소문자 무시) < 기타.
    """
    if isinstance(value, Enum):
        value = value.value
    if value is None:
        return (0,)
    if isinstance(value, (bool, int, float, Decimal)):
        return (1, value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return (2, value)
    if isinstance(value, date):
        return (2, datetime.combine(value, time.min))
    if isinstance(value, str):
        return (3, value.casefold(), value)
    return (4, str(value))


def _row_key(row_field: str) -> Callable[[FlatRow], tuple]:
    def key(row: FlatRow) -> tuple:
        return sortable_value(row.get(row_field))
    return key


def sort_rows(
    rows: Sequence[FlatRow],
    spec: SortSpec,
    column_keys: Optional[Sequence[tuple]] = None,
) -> List[FlatRow]:
    """
    평탄화 결과를 SortSpec의 왼쪽 필드부터 우선하여 정렬합니다 (안정 정렬).
    마지막 키부터 차례로 정렬하며, 키가 같은 행은 기존 순서를 유지합니다.

    `column_keys`가 주어지면 DB 정렬 항목(Column)은 행과 같은 위치의 키 튜플에서
    spec에 나온 순서대로 값을 읽습니다. 행 필드에는 없는 루트 컬럼도 DB와 같은 우선순위를 갖습니다.
    """
    keys = []
    column_position = 0
    for entry in spec:
        if entry.is_deferred or column_keys is None:
            row_key = _row_key(entry.row_field)
            keys.append((entry, lambda index, row_key=row_key: row_key(rows[index])))
        else:
            keys.append((entry, lambda index, position=column_position: column_keys[index][position]))
            column_position += 1

    order = list(range(len(rows)))
    for entry, key in reversed(keys):
        order.sort(key=key, reverse=entry.direction is SortDirection.DESC)
    return [rows[index] for index in order]


# =============================================================================
# 4. 코디네이터
# =============================================================================
def can_push_down(
    listing: Listing,
    pushdown: PushdownPlan,
    post_fetch_filters: Sequence[PostFetchFilter] = (),
) -> bool:
    """메모리 정렬과 후처리 필터가 없고, 루트 하나가 정확히 행 하나일 때만 DB 페이지네이션이 유효합니다."""
    return not pushdown.has_deferred and not post_fetch_filters and not listing.plan.fans_out


async def _collect(
    listing: Listing,
    fetcher: TreeFetcher,
    filters: Any,
    pushdown: PushdownPlan,
    post_fetch_filters: Sequence[PostFetchFilter],
) -> List[FlatRow]:
    # 무제한 조회: 루트마다 기여하는 행 수(0개 포함)를 DB가 알 수 없다
    roots = await fetcher.fetch(filters, pushdown.db_order)
    if not pushdown.has_deferred:
        rows = flatten(roots, listing.plan, post_fetch_filters)
    else:
        # 메모리 정렬은 전체 SortSpec 순서를 따른다. DB 항목은 DB가 정렬에 쓴 루트 컬럼 값이 키
        rows, column_keys = [], []
        for root in roots:
            root_key = tuple(sortable_value(column_value(root, entry.target.path)) for entry in pushdown.db_spec)
            root_rows = flatten((root,), listing.plan, post_fetch_filters)
            rows.extend(root_rows)
            column_keys.extend([root_key] * len(root_rows))
        rows = sort_rows(rows, pushdown.sort_spec, column_keys)
    logger.debug(
        "Listing %s flattened %d roots into %d rows (deferred sort: %s)",
        listing.name, len(roots), len(rows), [entry.field for entry in pushdown.deferred_spec],
    )
    return rows


async def flatten_all(
    listing: Listing,
    fetcher: TreeFetcher,
    filters: Any,
    sort_spec: SortSpec,
    post_fetch_filters: Sequence[PostFetchFilter] = (),
) -> List[FlatRow]:
    """전체 행을 목록 API와 같은 순서로 반환합니다 (엑셀 내보내기용)."""
    pushdown = classify_pushdown(sort_spec, listing.allow_list)
    return await _collect(listing, fetcher, filters, pushdown, post_fetch_filters)


async def paginate(
    listing: Listing,
    fetcher: TreeFetcher,
    filters: Any,
    sort_spec: SortSpec,
    window: PageWindow,
    post_fetch_filters: Sequence[PostFetchFilter] = (),
) -> PaginatedResult:
    """
    한 페이지를 계산합니다.

    - pushdown 경로: count 후 offset/limit으로 루트 한 페이지만 조회하고 평탄화합니다.
    - 메모리 경로: `_collect`로 전체 행을 만든 뒤 total을 세고 페이지 구간을 자릅니다.
    """
    pushdown = classify_pushdown(sort_spec, listing.allow_list)

    if can_push_down(listing, pushdown, post_fetch_filters):
        total = await fetcher.count(filters)
        roots = await fetcher.fetch(filters, pushdown.db_order, offset=window.offset, limit=window.per_page)
        rows = flatten(roots, listing.plan)
        logger.debug("Listing %s paginated in database (page=%d, per_page=%d)", listing.name, window.page, window.per_page)
        return PaginatedResult.build(rows, total, window)

    rows = await _collect(listing, fetcher, filters, pushdown, post_fetch_filters)
    logger.debug("Listing %s paginated in memory (page=%d, per_page=%d)", listing.name, window.page, window.per_page)
    return PaginatedResult.build(window.slice(rows), len(rows), window)
