# fleetops/domains/ers/crud.py

"""
'ers' 도메인 (긴급 출동 기록)의 조회 로직을 담당하는 모듈입니다.

루트(기록) 하나가 행 하나이므로 모든 필터는 루트 단위 조건으로 DB에서 처리합니다.
"""

from datetime import timedelta
from typing import Iterable, List

from sqlalchemy.orm import selectinload

from fleetops.core.crud_base import CRUDBase
from fleetops.domains.fleet import models as fleet_models
from fleetops.utils.params import parse_id_list
from . import models as ers_models
from . import schemas as ers_schemas


def _contains(value: str) -> str:
    return f"%{value}%"


# =============================================================================
# 1. ERS 기록 (Ers) CRUD
# =============================================================================
class CRUDErs(CRUDBase[ers_models.Ers]):
    def __init__(self):
        super().__init__(model=ers_models.Ers)

    def tree_loader_options(self) -> list:
        ServiceRequest = ers_models.ServiceRequest
        service_request = selectinload(self.model.service_request)
        return [
            service_request.selectinload(ServiceRequest.account),
            service_request.selectinload(ServiceRequest.equipment),
            selectinload(self.model.parts_used),
        ]

    def build_conditions(self, params: ers_schemas.ErsFilterParams, excluded_ids: Iterable[int] = ()) -> list:
        Ers = self.model
        ServiceRequest = ers_models.ServiceRequest
        conditions: List = []

        account_ids = parse_id_list(params.account_ids)
        if account_ids is not None:
            conditions.append(Ers.service_request.has(ServiceRequest.account_id.in_(account_ids)))
        if params.ers_ref_id:
            conditions.append(Ers.ers_ref_id.ilike(_contains(params.ers_ref_id)))
        if params.ers_status:
            conditions.append(Ers.ers_status.ilike(_contains(params.ers_status)))
        if params.ers_service_level:
            conditions.append(Ers.ers_service_level.ilike(_contains(params.ers_service_level)))
        if params.location:
            conditions.append(Ers.location.ilike(_contains(params.location)))
        if params.unit_number:
            conditions.append(
                Ers.service_request.has(
                    ServiceRequest.equipment.has(fleet_models.Equipment.unit_number.ilike(_contains(params.unit_number)))
                )
            )
        if params.event_type:
            conditions.append(Ers.parts_used.any(ers_models.ErsPartUsed.part_name.ilike(_contains(params.event_type))))

        # 기간 검색 (created_to 당일 포함)
        if params.created_from:
            conditions.append(Ers.created_at >= params.created_from)
        if params.created_to:
            conditions.append(Ers.created_at < params.created_to + timedelta(days=1))

        excluded = list(excluded_ids)
        if excluded:
            conditions.append(Ers.id.notin_(excluded))
        return conditions


ers = CRUDErs()
