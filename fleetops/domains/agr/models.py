# fleetops/domains/agr/models.py

"""
'agr' 도메인 (PostgreSQL 'agr' 스키마)의 ORM 모델을 정의하는 모듈입니다.

계약 트리: ScheduleAgreement -> AgreementLineItem -> EquipmentTypeAllocation -> EquipmentAssignment
자식 컬렉션은 모두 기본키 순서로 로드되어 평탄화 순회 순서가 항상 같습니다.
"""

from typing import Optional, List
from datetime import datetime, date, UTC
from decimal import Decimal

from sqlalchemy.types import TIMESTAMP
from sqlalchemy.sql import func
from sqlmodel import Field, Relationship, SQLModel, Column

# 다대일 참조 대상은 매퍼 구성을 위해 런타임에 임포트합니다.
from fleetops.domains.fleet.models import Account, Equipment, Facility


# =============================================================================
# 1. agr.contract_types 테이블 모델
# =============================================================================
class ContractType(SQLModel, table=True):
    __tablename__ = "contract_types"
    __table_args__ = {'schema': 'agr'}

    id: Optional[int] = Field(default=None, primary_key=True)
    contract_panel_type: str = Field(max_length=5, index=True, description="'L' (리스) 또는 'R' (렌탈)")
    description: Optional[str] = Field(default=None, max_length=200)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="계약 유형 생성 일시"
    )


# =============================================================================
# 2. agr.schedule_agreements 테이블 모델 (루트)
# =============================================================================
class ScheduleAgreement(SQLModel, table=True):
    __tablename__ = "schedule_agreements"
    __table_args__ = {'schema': 'agr'}

    id: Optional[int] = Field(default=None, primary_key=True)
    schedule_agreement_ref: Optional[str] = Field(default=None, max_length=50, index=True)
    agreement_po: Optional[str] = Field(default=None, max_length=50)
    schedule_type: Optional[str] = Field(default=None, max_length=50, description="계약 구분 (목록의 agreement_type)")
    status: Optional[str] = Field(default=None, max_length=20, description="상태 코드 (예: ACTIVE, TERMINATED)")
    effective_date: Optional[date] = Field(default=None, description="계약 시작일")
    termination_date: Optional[date] = Field(default=None, description="계약 종료일")

    contract_type_id: Optional[int] = Field(default=None, foreign_key="agr.contract_types.id")
    facility_id: Optional[int] = Field(default=None, foreign_key="fleet.facilities.id")

    # 관계 정의 (다대일)
    contract_type: Optional[ContractType] = Relationship()
    facility: Optional[Facility] = Relationship()
    # 관계 정의 (일대다)
    line_items: List["AgreementLineItem"] = Relationship(
        back_populates="agreement",
        sa_relationship_kwargs={"order_by": "AgreementLineItem.id"}
    )


# =============================================================================
# 3. agr.agreement_line_items 테이블 모델
# =============================================================================
class AgreementLineItem(SQLModel, table=True):
    __tablename__ = "agreement_line_items"
    __table_args__ = {'schema': 'agr'}

    id: Optional[int] = Field(default=None, primary_key=True)
    schedule_agreement_id: int = Field(foreign_key="agr.schedule_agreements.id", index=True)
    rate: Optional[Decimal] = Field(default=None, max_digits=12, decimal_places=2, description="월 단가")
    number_of_months: Optional[int] = Field(default=None)

    agreement: Optional[ScheduleAgreement] = Relationship(back_populates="line_items")
    allocations: List["EquipmentTypeAllocation"] = Relationship(
        back_populates="line_item",
        sa_relationship_kwargs={"order_by": "EquipmentTypeAllocation.id"}
    )


# =============================================================================
# 4. agr.equipment_type_allocations 테이블 모델
# =============================================================================
class EquipmentTypeAllocation(SQLModel, table=True):
    __tablename__ = "equipment_type_allocations"
    __table_args__ = {'schema': 'agr'}

    id: Optional[int] = Field(default=None, primary_key=True)
    line_item_id: int = Field(foreign_key="agr.agreement_line_items.id", index=True)
    account_id: Optional[int] = Field(default=None, foreign_key="fleet.accounts.id", index=True)
    unit_pickup_date: Optional[date] = Field(default=None)
    unit_turned_in_date: Optional[date] = Field(default=None)

    line_item: Optional[AgreementLineItem] = Relationship(back_populates="allocations")
    account: Optional[Account] = Relationship()
    assignments: List["EquipmentAssignment"] = Relationship(
        back_populates="allocation",
        sa_relationship_kwargs={"order_by": "EquipmentAssignment.id"}
    )


# =============================================================================
# 5. agr.equipment_assignments 테이블 모델 (말단)
# =============================================================================
class EquipmentAssignment(SQLModel, table=True):
    __tablename__ = "equipment_assignments"
    __table_args__ = {'schema': 'agr'}

    id: Optional[int] = Field(default=None, primary_key=True)
    allocation_id: int = Field(foreign_key="agr.equipment_type_allocations.id", index=True)
    equipment_id: Optional[int] = Field(default=None, foreign_key="fleet.equipment.id", index=True)

    allocation: Optional[EquipmentTypeAllocation] = Relationship(back_populates="assignments")
    equipment: Optional[Equipment] = Relationship()
