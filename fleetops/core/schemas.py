# fleetops/core/schemas.py

"""
여러 도메인이 공유하는 목록 응답/내보내기 요청 스키마를 정의하는 모듈입니다.
"""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

RowType = TypeVar("RowType")


class PaginationMeta(BaseModel):
    total: int = Field(..., description="필터와 후처리 필터를 모두 적용한 뒤의 전체 행 수")
    page: int = Field(..., description="보정된 현재 페이지 (1부터 시작)")
    per_page: int = Field(..., description="보정된 페이지 크기")
    total_pages: int = Field(..., description="ceil(total / per_page)")


class PaginatedResponse(BaseModel, Generic[RowType]):
    data: List[RowType]
    meta: PaginationMeta


class ColumnDefinition(BaseModel):
    """
    내보내기 컬럼 정의입니다.
    `field`는 평탄 행의 키와 같아야 하며, 'sno'는 1부터 시작하는 일련번호입니다.
    """
    label: str = Field(..., description="엑셀 헤더에 표시할 이름")
    field: str = Field(..., description="행 필드 이름")
    max_width: Optional[int] = Field(None, ge=1, description="컬럼 너비 (없으면 기본 너비)")
