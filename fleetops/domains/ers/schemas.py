# fleetops/domains/ers/schemas.py

"""
'ers' 도메인의 Pydantic 스키마를 정의하는 모듈입니다.
"""

from typing import List, Optional
from datetime import date, datetime

from pydantic import BaseModel, Field

from fleetops.core.schemas import ColumnDefinition


class ErsRow(BaseModel):
    ers_id: int
    ers_ref_id: Optional[str] = None
    created_at: Optional[datetime] = None
    ers_end_date: Optional[datetime] = None
    ers_service_level: Optional[str] = None
    ers_status: Optional[str] = None
    location: Optional[str] = None
    driver_name: Optional[str] = None
    account_id: Optional[int] = None
    account_number: Optional[str] = None
    account_name: Optional[str] = None
    equipment_id: Optional[int] = None
    unit_number: Optional[str] = None
    customer_unit_number: Optional[str] = None
    event_type: Optional[str] = Field(None, description="사용 부품명을 ', '로 연결한 값")


class ErsFilterParams(BaseModel):
    account_ids: Optional[str] = Field(None, description="쉼표로 구분한 계정 ID 목록 ('all'이면 전체)")
    ers_ref_id: Optional[str] = None
    ers_status: Optional[str] = None
    ers_service_level: Optional[str] = None
    location: Optional[str] = None
    unit_number: Optional[str] = None
    event_type: Optional[str] = Field(None, description="사용 부품명 부분 일치")
    created_from: Optional[date] = None
    created_to: Optional[date] = None


class ErsExportRequest(BaseModel):
    filters: ErsFilterParams = Field(default_factory=ErsFilterParams)
    sort: Optional[str] = None
    columns: Optional[List[ColumnDefinition]] = None
    download_all: bool = False
    excluded_ids: List[int] = Field(default_factory=list, description="제외할 ERS ID (download_all이면 무시)")
