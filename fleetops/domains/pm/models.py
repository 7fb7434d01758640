# fleetops/domains/pm/models.py

"""
'pm' 도메인 (PostgreSQL 'pm' 스키마)의 ORM 모델을 정의하는 모듈입니다.
"""

from enum import Enum
from typing import Optional, List
from datetime import date

from sqlmodel import Field, Relationship, SQLModel

from fleetops.domains.fleet.models import Account, Equipment, Facility


class PMEventStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# =============================================================================
# 1. pm.preventive_maintenance_schedules 테이블 모델 (루트)
# =============================================================================
class PreventiveMaintenanceSchedule(SQLModel, table=True):
    __tablename__ = "preventive_maintenance_schedules"
    __table_args__ = {'schema': 'pm'}

    id: Optional[int] = Field(default=None, primary_key=True)
    equipment_id: Optional[int] = Field(default=None, foreign_key="fleet.equipment.id", index=True)
    account_id: Optional[int] = Field(default=None, foreign_key="fleet.accounts.id", index=True)
    facility_id: Optional[int] = Field(default=None, foreign_key="fleet.facilities.id")
    pm_task_description: Optional[str] = Field(default=None, max_length=500)
    frequency_interval: Optional[int] = Field(default=None, description="정비 주기 값")
    frequency_type: Optional[str] = Field(default=None, max_length=20, description="주기 단위 (DAYS, MONTHS, MILES 등)")
    type: Optional[str] = Field(default=None, max_length=50)
    status: Optional[str] = Field(default=None, max_length=20)

    equipment: Optional[Equipment] = Relationship()
    account: Optional[Account] = Relationship()
    facility: Optional[Facility] = Relationship()
    events: List["PreventiveMaintenanceEvent"] = Relationship(
        back_populates="schedule",
        sa_relationship_kwargs={"order_by": "PreventiveMaintenanceEvent.id"}
    )


# =============================================================================
# 2. pm.preventive_maintenance_events 테이블 모델
# =============================================================================
class PreventiveMaintenanceEvent(SQLModel, table=True):
    __tablename__ = "preventive_maintenance_events"
    __table_args__ = {'schema': 'pm'}

    id: Optional[int] = Field(default=None, primary_key=True)
    pm_schedule_id: int = Field(foreign_key="pm.preventive_maintenance_schedules.id", index=True)
    performed_date: Optional[date] = Field(default=None, description="정비 수행일")
    next_due_date: Optional[date] = Field(default=None, description="다음 정비 예정일")
    status: str = Field(max_length=20, description="SCHEDULED / COMPLETED / CANCELLED")

    schedule: Optional[PreventiveMaintenanceSchedule] = Relationship(back_populates="events")
