# fleetops/domains/pm/listings.py

"""
예방 정비 일정 목록의 정적 구성을 정의하는 모듈입니다.

최근 완료 이벤트(last event)와 다음 예정 이벤트(next event)는 이벤트 컬렉션에서
계산되는 값이라 DB 정렬 대상이 아니며 메모리 정렬로 처리합니다.
"""

from datetime import date
from typing import Any, Dict, Optional

from fleetops.core.flatten import FlattenPlan, Level
from fleetops.core.pagination import Listing
from fleetops.core.schemas import ColumnDefinition
from fleetops.core.sorting import Column, Deferred, SortAllowList
from . import models as pm_models


PM_SORT_FIELDS = SortAllowList(
    {
        "pm_schedule_id": Column("id"),
        "pm_task_description": Column("pm_task_description"),
        "frequency_interval": Column("frequency_interval"),
        "frequency_type": Column("frequency_type"),
        "type": Column("type"),
        "status": Column("status"),
        "unit_number": Column("equipment.unit_number"),
        "equipment_type": Column("equipment.equipment_type"),
        "facility_code": Column("facility.facility_code"),
        "facility_name": Column("facility.facility_name"),
        # 이벤트 컬렉션에서 계산되는 값
        "last_event_performed_date": Deferred(),
        "last_event_status": Deferred(),
        "next_event_due_date": Deferred(),
        "next_event_status": Deferred(),
    },
    default_field="pm_schedule_id",
).bind(pm_models.PreventiveMaintenanceSchedule)


def last_completed_event(schedule):
    """수행일이 가장 늦은 완료 이벤트 (수행일이 같으면 ID가 큰 것)."""
    completed = [
        event for event in (schedule.events or ())
        if event.status == pm_models.PMEventStatus.COMPLETED.value
    ]
    if not completed:
        return None
    return max(completed, key=lambda event: (event.performed_date or date.min, event.id or 0))


def next_scheduled_event(schedule):
    """다음 예정일이 가장 이른 예정 이벤트 (예정일 없는 이벤트는 마지막)."""
    scheduled = [
        event for event in (schedule.events or ())
        if event.status == pm_models.PMEventStatus.SCHEDULED.value
    ]
    if not scheduled:
        return None
    return min(scheduled, key=lambda event: (event.next_due_date or date.max, event.id or 0))


def _event_fields(prefix: str, event, date_field: str, date_attribute: str) -> Dict[str, Optional[Any]]:
    return {
        f"{prefix}_id": event.id if event else None,
        f"{prefix}_{date_field}": getattr(event, date_attribute) if event else None,
        f"{prefix}_status": event.status if event else None,
    }


def _project_schedule(schedule) -> Dict[str, Any]:
    equipment = schedule.equipment
    facility = schedule.facility
    return {
        "pm_schedule_id": schedule.id,
        "pm_task_description": schedule.pm_task_description,
        "frequency_interval": schedule.frequency_interval,
        "frequency_type": schedule.frequency_type,
        "type": schedule.type,
        "status": schedule.status,
        "account_id": schedule.account_id,
        "equipment_id": schedule.equipment_id,
        "unit_number": equipment.unit_number if equipment else None,
        "equipment_type": equipment.equipment_type if equipment else None,
        "facility_code": facility.facility_code if facility else None,
        "facility_name": facility.facility_name if facility else None,
        **_event_fields("last_event", last_completed_event(schedule), "performed_date", "performed_date"),
        **_event_fields("next_event", next_scheduled_event(schedule), "due_date", "next_due_date"),
    }


PM_PLAN = FlattenPlan(Level("schedule", _project_schedule))

PM_SCHEDULES = Listing("pm_schedules", PM_SORT_FIELDS, PM_PLAN)

PM_DATE_FIELDS = ("last_event_performed_date", "next_event_due_date")

DEFAULT_PM_COLUMNS = [
    ColumnDefinition(label="S.No", field="sno"),
    ColumnDefinition(label="Unit #", field="unit_number"),
    ColumnDefinition(label="Equipment Type", field="equipment_type"),
    ColumnDefinition(label="Task", field="pm_task_description", max_width=40),
    ColumnDefinition(label="Frequency", field="frequency_interval"),
    ColumnDefinition(label="Frequency Type", field="frequency_type"),
    ColumnDefinition(label="Status", field="status"),
    ColumnDefinition(label="Last Performed", field="last_event_performed_date"),
    ColumnDefinition(label="Next Due", field="next_event_due_date"),
    ColumnDefinition(label="Facility", field="facility_code"),
]
