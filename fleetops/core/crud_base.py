# fleetops/core/crud_base.py

"""
목록용 트리 조회를 위한 공통 CRUD 기본 클래스 모듈입니다.
모든 조회 메서드는 비동기(async) 세션을 사용합니다.

- `build_tree_query`: SortSpec의 DB 정렬 항목을 ORDER BY로 변환합니다.
  다대일 관계 경로는 경로마다 한 번씩 별칭(alias)으로 외부 조인하고,
  마지막에 기본키 오름차순을 항상 덧붙여 offset/limit 조회를 안정적으로 만듭니다.
- `SQLTreeFetcher`: CRUD 객체와 세션을 묶어 페이지네이션 코디네이터의
  TreeFetcher 협력자로 사용합니다.
"""

from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import aliased
from sqlalchemy.sql import func
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from fleetops.core.exceptions import ListingConfigurationError
from fleetops.core.sorting import SortDirection, SortSpec

ModelType = TypeVar("ModelType", bound=SQLModel)


class CRUDBase(Generic[ModelType]):
    """
    루트 엔티티 하나에 대한 조회 기본 클래스입니다.
    도메인별 하위 클래스는 `tree_loader_options`로 자식 컬렉션 eager loading을,
    `build_conditions`로 DB 필터 조건을 정의합니다.
    """
    def __init__(self, model: Type[ModelType]):
        self.model = model

    def tree_loader_options(self) -> list:
        """말단 레벨까지 자식 컬렉션을 채우는 로더 옵션 목록 (기본: 없음)."""
        return []

    def build_conditions(self, params: Any) -> list:
        """도메인 필터 파라미터를 SQLAlchemy where 조건 목록으로 변환합니다 (기본: 조건 없음)."""
        return []

    def build_tree_query(
        self,
        conditions: Sequence[Any] = (),
        order_by: SortSpec = (),
        skip: Optional[int] = None,
        limit: Optional[int] = None,
    ):
        query = select(self.model)
        joined: Dict[Tuple[str, ...], Any] = {}
        clauses = []

        for entry in order_by:
            if entry.is_deferred:
                raise ListingConfigurationError(f"Deferred sort field '{entry.field}' cannot be ordered in the database.")
            *relations, column_name = entry.target.path

            # 관계 경로마다 별칭 하나 (같은 경로는 재사용)
            current = self.model
            prefix: Tuple[str, ...] = ()
            for relation in relations:
                prefix += (relation,)
                alias = joined.get(prefix)
                if alias is None:
                    target_class = sa_inspect(current).mapper.relationships[relation].mapper.class_
                    alias = aliased(target_class)
                    query = query.outerjoin(getattr(current, relation).of_type(alias))
                    joined[prefix] = alias
                current = alias

            column = getattr(current, column_name)
            if entry.direction is SortDirection.DESC:
                clauses.append(column.desc().nulls_last())
            else:
                clauses.append(column.asc().nulls_first())

        # 기본키 tie-break
        for pk_column in sa_inspect(self.model).primary_key:
            clauses.append(pk_column.asc())

        if conditions:
            query = query.where(*conditions)
        options = self.tree_loader_options()
        if options:
            query = query.options(*options)
        query = query.order_by(*clauses)
        if skip is not None:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query

    async def get_tree(
        self,
        db: AsyncSession,
        *,
        conditions: Sequence[Any] = (),
        order_by: SortSpec = (),
        skip: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        query = self.build_tree_query(conditions, order_by, skip, limit)
        result = await db.execute(query)
        return result.scalars().all()

    async def get_tree_by_id(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """ID로 루트 하나를 자식 컬렉션까지 채워서 조회합니다."""
        query = select(self.model).where(self.model.id == id)
        options = self.tree_loader_options()
        if options:
            query = query.options(*options)
        result = await db.execute(query)
        return result.scalars().one_or_none()

    async def count_filtered(self, db: AsyncSession, *, conditions: Sequence[Any] = ()) -> int:
        query = select(func.count()).select_from(self.model)
        if conditions:
            query = query.where(*conditions)
        result = await db.execute(query)
        return result.scalar_one()


class SQLTreeFetcher:
    """CRUDBase + AsyncSession을 TreeFetcher 프로토콜에 맞춘 어댑터입니다."""

    def __init__(self, crud: CRUDBase, db: AsyncSession):
        self.crud = crud
        self.db = db

    async def fetch(self, filters, order_by, offset=None, limit=None):
        return await self.crud.get_tree(self.db, conditions=filters, order_by=order_by, skip=offset, limit=limit)

    async def count(self, filters) -> int:
        return await self.crud.count_filtered(self.db, conditions=filters)

    async def get(self, id):
        """루트 하나를 자식 컬렉션까지 채워 조회합니다 (상세 화면용)."""
        return await self.crud.get_tree_by_id(self.db, id)
