# fleetops/domains/agr/schemas.py

"""
'agr' 도메인의 Pydantic 스키마를 정의하는 모듈입니다.

- 목록/내보내기 행 (AgreementRow): 장비 배정 1건당 1행.
- 목록 필터 (AgreementFilterParams): 쿼리 파라미터와 내보내기 요청 본문에서 공통 사용.
- 내보내기 요청 (AgreementExportRequest).
- 계약 상세 트리 (AgreementDetailResponse).
"""

from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from fleetops.core.schemas import ColumnDefinition


# =============================================================================
# 1. 평탄 행
# =============================================================================
class AgreementRow(BaseModel):
    """계약/라인 아이템/할당/배정 속성이 병합된 한 행입니다."""
    schedule_agreement_id: int
    schedule_agreement_ref: Optional[str] = None
    agreement_type: Optional[str] = None
    agreement_po: Optional[str] = None
    lease_po: Optional[str] = None
    contract_created_at: Optional[datetime] = None
    status: Optional[str] = None
    start_date: Optional[date] = None
    termination_date: Optional[date] = None
    facility: Optional[str] = None
    line_item_id: Optional[int] = None
    rate: Optional[Decimal] = None
    allocation_id: Optional[int] = None
    account_id: Optional[int] = None
    account_number: Optional[str] = None
    account_name: Optional[str] = None
    equipment_id: Optional[int] = None
    unit_number: Optional[str] = None
    description: Optional[str] = None


# =============================================================================
# 2. 필터 / 내보내기 요청
# =============================================================================
class AgreementFilterParams(BaseModel):
    account_ids: Optional[str] = Field(None, description="조회할 계정 ID 목록 (필수, '1,2' 또는 '[1,2]')")
    schedule_agreement_ref: Optional[str] = Field(None, description="계약 번호 부분 일치")
    agreement_po: Optional[str] = Field(None, description="PO 부분 일치")
    agreement_type: Optional[str] = Field(None, description="계약 구분 부분 일치")
    status: Optional[str] = Field(None, description="상태 코드 부분 일치")
    facility: Optional[str] = Field(None, description="시설 코드 부분 일치")
    unit_number: Optional[str] = Field(None, description="유닛 번호 부분 일치 (대소문자 구분)")
    account_number: Optional[str] = Field(None, description="계정 번호 부분 일치")
    account_name: Optional[str] = Field(None, description="계정명 부분 일치")
    start_date_from: Optional[date] = Field(None, description="계약 시작일 하한")
    start_date_to: Optional[date] = Field(None, description="계약 시작일 상한")
    termination_date_from: Optional[date] = Field(None, description="계약 종료일 하한")
    termination_date_to: Optional[date] = Field(None, description="계약 종료일 상한")
    contract_created_from: Optional[date] = Field(None, description="계약 유형 생성일 하한")


class AgreementExportRequest(BaseModel):
    filters: AgreementFilterParams = Field(default_factory=AgreementFilterParams)
    sort: Optional[str] = Field(None, description="'field:direction,...' 형식의 정렬")
    columns: Optional[List[ColumnDefinition]] = Field(None, description="없으면 기본 컬럼 구성")
    download_all: bool = Field(False, description="True면 제외 목록을 무시하고 전체를 내보냅니다")
    excluded_equipment_ids: List[int] = Field(default_factory=list)


# =============================================================================
# 3. 계약 상세
# =============================================================================
class AssignmentDetail(BaseModel):
    id: int
    equipment_id: Optional[int] = None
    unit_number: Optional[str] = None
    description: Optional[str] = None


class AllocationDetail(BaseModel):
    id: int
    account_id: Optional[int] = None
    account_number: Optional[str] = None
    account_name: Optional[str] = None
    unit_pickup_date: Optional[date] = None
    unit_turned_in_date: Optional[date] = None
    assignments: List[AssignmentDetail] = []


class LineItemDetail(BaseModel):
    id: int
    rate: Optional[Decimal] = None
    number_of_months: Optional[int] = None
    allocations: List[AllocationDetail] = []


class AgreementDetailResponse(BaseModel):
    id: int
    schedule_agreement_ref: Optional[str] = None
    agreement_type: Optional[str] = None
    agreement_po: Optional[str] = None
    contract_panel_type: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[date] = None
    termination_date: Optional[date] = None
    facility: Optional[str] = None
    line_items: List[LineItemDetail] = []
