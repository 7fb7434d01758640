# fleetops/domains/pm/schemas.py

"""
'pm' 도메인의 Pydantic 스키마를 정의하는 모듈입니다.
"""

from typing import List, Optional
from datetime import date

from pydantic import BaseModel, Field

from fleetops.core.schemas import ColumnDefinition, PaginationMeta


class PMScheduleRow(BaseModel):
    pm_schedule_id: int
    pm_task_description: Optional[str] = None
    frequency_interval: Optional[int] = None
    frequency_type: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    account_id: Optional[int] = None
    equipment_id: Optional[int] = None
    unit_number: Optional[str] = None
    equipment_type: Optional[str] = None
    facility_code: Optional[str] = None
    facility_name: Optional[str] = None
    last_event_id: Optional[int] = None
    last_event_performed_date: Optional[date] = None
    last_event_status: Optional[str] = None
    next_event_id: Optional[int] = None
    next_event_due_date: Optional[date] = None
    next_event_status: Optional[str] = None


class PMFilterParams(BaseModel):
    account_ids: Optional[str] = Field(None, description="쉼표로 구분한 계정 ID 목록 (필수)")
    unit_number: Optional[str] = None
    equipment_type: Optional[str] = None
    facility_code: Optional[str] = None
    facility_name: Optional[str] = None
    pm_task_description: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None


class PMCounts(BaseModel):
    total_units: int = 0
    units_coming_due: int = Field(0, description="예정 이벤트의 다음 예정일이 오늘 이하")
    units_overdue: int = Field(0, description="예정 이벤트의 다음 예정일이 오늘 이전")
    units_recently_completed: int = Field(0, description="최근 30일 이내 완료 이벤트 존재")


class PMScheduleListResponse(BaseModel):
    data: List[PMScheduleRow]
    meta: PaginationMeta
    counts: PMCounts


class PMExportRequest(BaseModel):
    filters: PMFilterParams = Field(default_factory=PMFilterParams)
    sort: Optional[str] = None
    columns: Optional[List[ColumnDefinition]] = None
    download_all: bool = False
    excluded_ids: List[int] = Field(default_factory=list, description="제외할 PM 일정 ID (download_all이면 무시)")
