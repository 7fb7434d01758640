# fleetops/domains/models/__init__.py

"""
모든 도메인의 SQLModel 모델을 한 곳에서 임포트하여
SQLModel.metadata와 SQLAlchemy 매퍼가 모든 테이블/관계를 인식하도록 보장합니다.
"""

# fleet (Facility, Account, Equipment)
from fleetops.domains.fleet.models import Facility, Account, Equipment

# agr (ContractType, ScheduleAgreement, AgreementLineItem, EquipmentTypeAllocation, EquipmentAssignment)
from fleetops.domains.agr.models import (
    ContractType, ScheduleAgreement, AgreementLineItem, EquipmentTypeAllocation, EquipmentAssignment
)

# ers (ServiceRequest, Ers, ErsPartUsed)
from fleetops.domains.ers.models import ServiceRequest, Ers, ErsPartUsed

# pm (PreventiveMaintenanceSchedule, PreventiveMaintenanceEvent)
from fleetops.domains.pm.models import PreventiveMaintenanceSchedule, PreventiveMaintenanceEvent, PMEventStatus

__all__ = [
    "Facility", "Account", "Equipment",
    "ContractType", "ScheduleAgreement", "AgreementLineItem", "EquipmentTypeAllocation", "EquipmentAssignment",
    "ServiceRequest", "Ers", "ErsPartUsed",
    "PreventiveMaintenanceSchedule", "PreventiveMaintenanceEvent", "PMEventStatus",
]
