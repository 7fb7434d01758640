# fleetops/domains/ers/listings.py

"""
ERS 기록 목록의 정적 구성을 정의하는 모듈입니다.

기록 자체가 말단이라 평탄화 계획은 한 레벨뿐입니다.
`event_type`(사용 부품명 목록)만 DB에서 정렬할 수 없어 메모리 정렬로 처리합니다.
"""

from typing import Any, Dict

from fleetops.core.flatten import FlattenPlan, Level
from fleetops.core.pagination import Listing
from fleetops.core.schemas import ColumnDefinition
from fleetops.core.sorting import Column, Deferred, Expansion, SortAllowList
from . import models as ers_models


ERS_SORT_FIELDS = SortAllowList(
    {
        "ers_id": Column("id"),
        "ers_ref_id": Column("ers_ref_id"),
        "created_at": Column("created_at"),
        "ers_end_date": Column("ers_end_date"),
        "ers_service_level": Column("ers_service_level"),
        "ers_status": Column("ers_status"),
        "location": Column("location"),
        "driver_name": Expansion.of("driver_first_name", "driver_last_name"),
        # 관계 경로
        "account_id": Column("service_request.account_id"),
        "equipment_id": Column("service_request.equipment_id"),
        "unit_number": Column("service_request.equipment.unit_number"),
        "customer_unit_number": Column("service_request.equipment.customer_unit_number"),
        "account_number": Column("service_request.account.account_number"),
        "account_name": Column("service_request.account.account_name"),
        "event_type": Deferred(),
    },
    default_field="ers_id",
).bind(ers_models.Ers)


def event_type_of(ers) -> str:
    return ", ".join(part.part_name for part in (ers.parts_used or ()) if part.part_name)


def _project_ers(ers) -> Dict[str, Any]:
    service_request = ers.service_request
    account = service_request.account if service_request else None
    equipment = service_request.equipment if service_request else None
    driver_name = " ".join(name for name in (ers.driver_first_name, ers.driver_last_name) if name)
    return {
        "ers_id": ers.id,
        "ers_ref_id": ers.ers_ref_id,
        "created_at": ers.created_at,
        "ers_end_date": ers.ers_end_date,
        "ers_service_level": ers.ers_service_level,
        "ers_status": ers.ers_status,
        "location": ers.location,
        "driver_name": driver_name or None,
        "account_id": service_request.account_id if service_request else None,
        "account_number": account.account_number if account else None,
        "account_name": account.account_name if account else None,
        "equipment_id": service_request.equipment_id if service_request else None,
        "unit_number": equipment.unit_number if equipment else None,
        "customer_unit_number": equipment.customer_unit_number if equipment else None,
        "event_type": event_type_of(ers),
    }


ERS_PLAN = FlattenPlan(Level("ers", _project_ers))

ERS_RECORDS = Listing("ers_records", ERS_SORT_FIELDS, ERS_PLAN)

ERS_DATE_FIELDS = ("created_at", "ers_end_date")

DEFAULT_ERS_COLUMNS = [
    ColumnDefinition(label="S.No", field="sno"),
    ColumnDefinition(label="ERS #", field="ers_ref_id"),
    ColumnDefinition(label="Created", field="created_at"),
    ColumnDefinition(label="Ended", field="ers_end_date"),
    ColumnDefinition(label="Unit #", field="unit_number"),
    ColumnDefinition(label="Account #", field="account_number"),
    ColumnDefinition(label="Account Name", field="account_name"),
    ColumnDefinition(label="Service Level", field="ers_service_level"),
    ColumnDefinition(label="Status", field="ers_status"),
    ColumnDefinition(label="Location", field="location", max_width=40),
    ColumnDefinition(label="Driver", field="driver_name"),
    ColumnDefinition(label="Event Type", field="event_type", max_width=40),
]
