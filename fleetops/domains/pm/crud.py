# fleetops/domains/pm/crud.py

"""
'pm' 도메인 (예방 정비 일정)의 조회 및 상태별 집계 로직을 담당하는 모듈입니다.
"""

from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Sequence

from sqlalchemy import and_
from sqlalchemy.orm import selectinload
from sqlmodel.ext.asyncio.session import AsyncSession

from fleetops.core.crud_base import CRUDBase, SQLTreeFetcher
from fleetops.domains.fleet import models as fleet_models
from . import models as pm_models
from . import schemas as pm_schemas

RECENTLY_COMPLETED_DAYS = 30


def _contains(value: str) -> str:
    return f"%{value}%"


# =============================================================================
# 1. 예방 정비 일정 (PreventiveMaintenanceSchedule) CRUD
# =============================================================================
class CRUDPMSchedule(CRUDBase[pm_models.PreventiveMaintenanceSchedule]):
    def __init__(self):
        super().__init__(model=pm_models.PreventiveMaintenanceSchedule)

    def tree_loader_options(self) -> list:
        return [
            selectinload(self.model.equipment),
            selectinload(self.model.facility),
            selectinload(self.model.events),
        ]

    def build_conditions(
        self,
        params: pm_schemas.PMFilterParams,
        account_ids: Sequence[int],
        excluded_ids: Iterable[int] = (),
    ) -> list:
        Schedule = self.model
        Equipment = fleet_models.Equipment
        Facility = fleet_models.Facility
        conditions: List = [Schedule.account_id.in_(list(account_ids))]

        if params.unit_number:
            conditions.append(Schedule.equipment.has(Equipment.unit_number.ilike(_contains(params.unit_number))))
        if params.equipment_type:
            conditions.append(Schedule.equipment.has(Equipment.equipment_type.ilike(_contains(params.equipment_type))))
        if params.facility_code:
            conditions.append(Schedule.facility.has(Facility.facility_code.ilike(_contains(params.facility_code))))
        if params.facility_name:
            conditions.append(Schedule.facility.has(Facility.facility_name.ilike(_contains(params.facility_name))))
        if params.pm_task_description:
            conditions.append(Schedule.pm_task_description.ilike(_contains(params.pm_task_description)))
        if params.type:
            conditions.append(Schedule.type.ilike(_contains(params.type)))
        if params.status:
            conditions.append(Schedule.status.ilike(_contains(params.status)))

        excluded = list(excluded_ids)
        if excluded:
            conditions.append(Schedule.id.notin_(excluded))
        return conditions

    def status_conditions(self, today: date) -> Dict[str, Any]:
        """상태별 집계에 추가할 EXISTS 조건 (기본 필터와 AND로 결합)."""
        Event = pm_models.PreventiveMaintenanceEvent
        scheduled = Event.status == pm_models.PMEventStatus.SCHEDULED.value
        completed = Event.status == pm_models.PMEventStatus.COMPLETED.value
        since = today - timedelta(days=RECENTLY_COMPLETED_DAYS)
        return {
            "units_coming_due": self.model.events.any(and_(scheduled, Event.next_due_date <= today)),
            "units_overdue": self.model.events.any(and_(scheduled, Event.next_due_date < today)),
            "units_recently_completed": self.model.events.any(and_(completed, Event.performed_date >= since)),
        }

    async def count_by_status(self, db: AsyncSession, *, conditions: Sequence[Any], today: date) -> Dict[str, int]:
        # 같은 세션에서 순차 실행
        counts = {"total_units": await self.count_filtered(db, conditions=conditions)}
        for name, condition in self.status_conditions(today).items():
            counts[name] = await self.count_filtered(db, conditions=[*conditions, condition])
        return counts


pm_schedule = CRUDPMSchedule()


class PMScheduleFetcher(SQLTreeFetcher):
    """목록 조회와 함께 상태별 집계를 제공하는 PM 일정 조회 협력자."""

    async def counts(self, filters, today: date) -> Dict[str, int]:
        return await self.crud.count_by_status(self.db, conditions=filters, today=today)
