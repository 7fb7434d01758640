# fleetops/domains/agr/crud.py

"""
'agr' 도메인 (스케줄 계약)의 트리 조회 로직을 담당하는 모듈입니다.

`build_conditions`는 루트(계약) 단위로 안전하게 표현되는 조건만 DB로 내립니다.
손자/증손 레벨 조건(유닛 번호, 계정 번호 등)은 해당 자식을 가진 계약만 남기도록
EXISTS로 거칠게 좁히고, 실제 행 단위 제외는 listings 모듈의 후처리 필터가 담당합니다.
"""

from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.orm import selectinload

from fleetops.core.crud_base import CRUDBase
from fleetops.domains.fleet import models as fleet_models
from fleetops.utils.params import parse_id_list
from . import models as agr_models
from . import schemas as agr_schemas

CONTRACT_TYPE_LEASE = "L"
CONTRACT_TYPE_RENTAL = "R"


def _contains(value: str) -> str:
    return f"%{value}%"


# =============================================================================
# 1. 스케줄 계약 (ScheduleAgreement) CRUD
# =============================================================================
class CRUDScheduleAgreement(CRUDBase[agr_models.ScheduleAgreement]):
    def __init__(self):
        super().__init__(model=agr_models.ScheduleAgreement)

    def tree_loader_options(self) -> list:
        LineItem = agr_models.AgreementLineItem
        Allocation = agr_models.EquipmentTypeAllocation
        Assignment = agr_models.EquipmentAssignment
        allocations = selectinload(self.model.line_items).selectinload(LineItem.allocations)
        return [
            selectinload(self.model.contract_type),
            selectinload(self.model.facility),
            allocations.selectinload(Allocation.account),
            allocations.selectinload(Allocation.assignments).selectinload(Assignment.equipment),
        ]

    def build_conditions(
        self,
        params: agr_schemas.AgreementFilterParams,
        contract_panel_type: Optional[str] = None,
    ) -> list:
        Agreement = self.model
        LineItem = agr_models.AgreementLineItem
        Allocation = agr_models.EquipmentTypeAllocation
        Assignment = agr_models.EquipmentAssignment
        conditions: List = []

        # 1. 루트 속성
        if contract_panel_type:
            conditions.append(
                Agreement.contract_type.has(agr_models.ContractType.contract_panel_type == contract_panel_type)
            )
        if params.schedule_agreement_ref:
            conditions.append(Agreement.schedule_agreement_ref.ilike(_contains(params.schedule_agreement_ref)))
        if params.agreement_po:
            conditions.append(Agreement.agreement_po.ilike(_contains(params.agreement_po)))
        if params.agreement_type:
            conditions.append(Agreement.schedule_type.ilike(_contains(params.agreement_type)))
        if params.status:
            conditions.append(Agreement.status.ilike(_contains(params.status)))
        if params.facility:
            conditions.append(Agreement.facility.has(fleet_models.Facility.facility_code.ilike(_contains(params.facility))))
        if params.contract_created_from:
            conditions.append(Agreement.contract_type.has(agr_models.ContractType.created_at >= params.contract_created_from))

        # 2. 기간 검색
        if params.start_date_from:
            conditions.append(Agreement.effective_date >= params.start_date_from)
        if params.start_date_to:
            conditions.append(Agreement.effective_date <= params.start_date_to)
        if params.termination_date_from:
            conditions.append(Agreement.termination_date >= params.termination_date_from)
        if params.termination_date_to:
            conditions.append(Agreement.termination_date <= params.termination_date_to)

        # 3. 하위 레벨 조건 (EXISTS로 후보 계약만 좁힘)
        allocation_conditions = []
        account_ids = parse_id_list(params.account_ids)
        if account_ids is not None:
            allocation_conditions.append(Allocation.account_id.in_(account_ids))
        if params.account_number:
            allocation_conditions.append(
                Allocation.account.has(fleet_models.Account.account_number.ilike(_contains(params.account_number)))
            )
        if params.account_name:
            allocation_conditions.append(
                Allocation.account.has(fleet_models.Account.account_name.ilike(_contains(params.account_name)))
            )
        if params.unit_number:
            allocation_conditions.append(
                Allocation.assignments.any(
                    Assignment.equipment.has(fleet_models.Equipment.unit_number.contains(params.unit_number))
                )
            )
        if allocation_conditions:
            conditions.append(Agreement.line_items.any(LineItem.allocations.any(and_(*allocation_conditions))))

        return conditions


schedule_agreement = CRUDScheduleAgreement()
