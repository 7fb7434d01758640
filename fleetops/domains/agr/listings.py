# fleetops/domains/agr/listings.py

"""
스케줄 계약 목록의 정적 구성을 정의하는 모듈입니다.

- 정렬 허용 목록: 계약 컬럼과 다대일 경로는 DB 정렬, 할당/배정 레벨 필드는 메모리 정렬.
- 평탄화 계획: 계약 -> 라인 아이템 -> 할당 -> 장비 배정 (배정 1건 = 1행).
- 후처리 필터: 각 필터가 겨냥하는 레벨의 노드에 적용합니다.
"""

from typing import Any, Dict, Iterable, List, Optional

from fleetops.core.flatten import FlattenPlan, Level, PostFetchFilter
from fleetops.core.pagination import Listing
from fleetops.core.schemas import ColumnDefinition
from fleetops.core.sorting import Column, Deferred, SortAllowList
from fleetops.utils.params import parse_id_list
from . import models as agr_models
from . import schemas as agr_schemas

LEVEL_AGREEMENT = "agreement"
LEVEL_LINE_ITEM = "line_item"
LEVEL_ALLOCATION = "allocation"
LEVEL_ASSIGNMENT = "assignment"


# =============================================================================
# 1. 정렬 허용 목록
# =============================================================================
AGREEMENT_SORT_FIELDS = SortAllowList(
    {
        "schedule_agreement_id": Column("id"),
        "schedule_number": Column("id"),
        "schedule_agreement_ref": Column("schedule_agreement_ref"),
        "agreement_po": Column("agreement_po"),
        "agreement_type": Column("schedule_type"),
        "lease_po": Column("contract_type.contract_panel_type"),
        "contract_created_at": Column("contract_type.created_at"),
        "status": Column("status"),
        "start_date": Column("effective_date"),
        "termination_date": Column("termination_date"),
        "facility": Column("facility.facility_code"),
        # 할당/배정 레벨 필드는 계약 단위 ORDER BY로 표현할 수 없음
        "account_number": Deferred(),
        "account_name": Deferred(),
        "unit_number": Deferred(),
        "description": Deferred(),
    },
    default_field="schedule_agreement_id",
).bind(agr_models.ScheduleAgreement)


# =============================================================================
# 2. 평탄화 계획
# =============================================================================
def _project_agreement(agreement) -> Dict[str, Any]:
    contract_type = agreement.contract_type
    facility = agreement.facility
    return {
        "schedule_agreement_id": agreement.id,
        "schedule_agreement_ref": agreement.schedule_agreement_ref,
        "agreement_type": agreement.schedule_type,
        "agreement_po": agreement.agreement_po,
        "lease_po": contract_type.contract_panel_type if contract_type else None,
        "contract_created_at": contract_type.created_at if contract_type else None,
        "status": agreement.status,
        "start_date": agreement.effective_date,
        "termination_date": agreement.termination_date,
        "facility": facility.facility_code if facility else None,
    }


def _project_line_item(line_item) -> Dict[str, Any]:
    return {"line_item_id": line_item.id, "rate": line_item.rate}


def _project_allocation(allocation) -> Dict[str, Any]:
    account = allocation.account
    return {
        "allocation_id": allocation.id,
        "account_id": allocation.account_id,
        "account_number": account.account_number if account else None,
        "account_name": account.account_name if account else None,
    }


def _project_assignment(assignment) -> Dict[str, Any]:
    equipment = assignment.equipment
    return {
        "equipment_id": assignment.equipment_id,
        "unit_number": equipment.unit_number if equipment else None,
        "description": equipment.description if equipment else None,
    }


AGREEMENT_PLAN = FlattenPlan(
    Level(LEVEL_AGREEMENT, _project_agreement, children=lambda agreement: agreement.line_items),
    Level(LEVEL_LINE_ITEM, _project_line_item, children=lambda line_item: line_item.allocations),
    Level(LEVEL_ALLOCATION, _project_allocation, children=lambda allocation: allocation.assignments),
    Level(LEVEL_ASSIGNMENT, _project_assignment),
)

LEASE_AGREEMENTS = Listing("lease_agreements", AGREEMENT_SORT_FIELDS, AGREEMENT_PLAN)
RENTAL_AGREEMENTS = Listing("rental_agreements", AGREEMENT_SORT_FIELDS, AGREEMENT_PLAN)


# =============================================================================
# 3. 후처리 필터
# =============================================================================
def _unit_number(assignment) -> str:
    equipment = assignment.equipment
    return (equipment.unit_number if equipment else None) or ""


def _account_field(allocation, attribute: str) -> str:
    account = allocation.account
    return (getattr(account, attribute) if account else None) or ""


def unit_number_filter(unit_number: str) -> PostFetchFilter:
    return PostFetchFilter(
        LEVEL_ASSIGNMENT,
        lambda assignment: unit_number in _unit_number(assignment),
        f"unit_number contains {unit_number!r}",
    )


def account_number_filter(account_number: str) -> PostFetchFilter:
    needle = account_number.casefold()
    return PostFetchFilter(
        LEVEL_ALLOCATION,
        lambda allocation: needle in _account_field(allocation, "account_number").casefold(),
        f"account_number contains {account_number!r}",
    )


def account_name_filter(account_name: str) -> PostFetchFilter:
    needle = account_name.casefold()
    return PostFetchFilter(
        LEVEL_ALLOCATION,
        lambda allocation: needle in _account_field(allocation, "account_name").casefold(),
        f"account_name contains {account_name!r}",
    )


def account_ids_filter(account_ids: Iterable[int]) -> PostFetchFilter:
    allowed = frozenset(account_ids)
    return PostFetchFilter(
        LEVEL_ALLOCATION,
        lambda allocation: allocation.account_id in allowed,
        f"account_id in {sorted(allowed)}",
    )


def excluded_equipment_filter(equipment_ids: Iterable[int]) -> PostFetchFilter:
    excluded = frozenset(equipment_ids)
    return PostFetchFilter(
        LEVEL_ASSIGNMENT,
        lambda assignment: assignment.equipment_id not in excluded,
        f"equipment_id not in {sorted(excluded)}",
    )


def build_post_fetch_filters(
    params: agr_schemas.AgreementFilterParams,
    *,
    excluded_equipment_ids: Iterable[int] = (),
    download_all: bool = True,
) -> List[PostFetchFilter]:
    """DB 조건(EXISTS)과 같은 의미로, 조건에 맞지 않는 하위 노드를 레벨별로 제외합니다."""
    filters: List[PostFetchFilter] = []
    account_ids = parse_id_list(params.account_ids)
    if account_ids is not None:
        filters.append(account_ids_filter(account_ids))
    if params.account_number:
        filters.append(account_number_filter(params.account_number))
    if params.account_name:
        filters.append(account_name_filter(params.account_name))
    if params.unit_number:
        filters.append(unit_number_filter(params.unit_number))
    excluded = list(excluded_equipment_ids)
    if not download_all and excluded:
        filters.append(excluded_equipment_filter(excluded))
    return filters


# =============================================================================
# 4. 내보내기 컬럼 / 계약 상세
# =============================================================================
AGREEMENT_DATE_FIELDS = ("start_date", "termination_date", "contract_created_at")

DEFAULT_AGREEMENT_COLUMNS = [
    ColumnDefinition(label="S.No", field="sno"),
    ColumnDefinition(label="Unit #", field="unit_number"),
    ColumnDefinition(label="Description", field="description"),
    ColumnDefinition(label="Schedule #", field="schedule_agreement_ref"),
    ColumnDefinition(label="Agreement Type", field="agreement_type"),
    ColumnDefinition(label="Account #", field="account_number"),
    ColumnDefinition(label="Account Name", field="account_name"),
    ColumnDefinition(label="Lease PO", field="lease_po"),
    ColumnDefinition(label="Agreement PO", field="agreement_po"),
    ColumnDefinition(label="Contract Created", field="contract_created_at"),
    ColumnDefinition(label="Status", field="status"),
    ColumnDefinition(label="Start Date", field="start_date"),
    ColumnDefinition(label="Termination Date", field="termination_date"),
    ColumnDefinition(label="Facility", field="facility"),
]


def build_agreement_detail(agreement, account_ids: Optional[Iterable[int]] = None) -> Dict[str, Any]:
    """
    계약 하나를 중첩 구조로 반환합니다.
    배정이 없는 할당, 남은 할당이 없는 라인 아이템은 제외합니다.
    `account_ids`가 주어지면 해당 계정의 할당만 남깁니다.
    """
    allowed = frozenset(account_ids) if account_ids is not None else None
    line_items = []
    for line_item in agreement.line_items:
        allocations = []
        for allocation in line_item.allocations:
            if allowed is not None and allocation.account_id not in allowed:
                continue
            if not allocation.assignments:
                continue
            allocations.append({
                "id": allocation.id,
                **_project_allocation(allocation),
                "unit_pickup_date": allocation.unit_pickup_date,
                "unit_turned_in_date": allocation.unit_turned_in_date,
                "assignments": [
                    {"id": assignment.id, **_project_assignment(assignment)}
                    for assignment in allocation.assignments
                ],
            })
        if allocations:
            line_items.append({
                "id": line_item.id,
                "rate": line_item.rate,
                "number_of_months": line_item.number_of_months,
                "allocations": allocations,
            })

    header = _project_agreement(agreement)
    return {
        "id": agreement.id,
        "schedule_agreement_ref": header["schedule_agreement_ref"],
        "agreement_type": header["agreement_type"],
        "agreement_po": header["agreement_po"],
        "contract_panel_type": header["lease_po"],
        "status": header["status"],
        "start_date": header["start_date"],
        "termination_date": header["termination_date"],
        "facility": header["facility"],
        "line_items": line_items,
    }
