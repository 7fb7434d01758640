# fleetops/domains/ers/models.py

"""
'ers' 도메인 (PostgreSQL 'ers' 스키마)의 ORM 모델을 정의하는 모듈입니다.
"""

from typing import Optional, List
from datetime import datetime, UTC

from sqlalchemy.types import TIMESTAMP
from sqlalchemy.sql import func
from sqlmodel import Field, Relationship, SQLModel, Column

from fleetops.domains.fleet.models import Account, Equipment


# =============================================================================
# 1. ers.service_requests 테이블 모델
# =============================================================================
class ServiceRequest(SQLModel, table=True):
    __tablename__ = "service_requests"
    __table_args__ = {'schema': 'ers'}

    id: Optional[int] = Field(default=None, primary_key=True)
    account_id: Optional[int] = Field(default=None, foreign_key="fleet.accounts.id", index=True)
    equipment_id: Optional[int] = Field(default=None, foreign_key="fleet.equipment.id", index=True)

    account: Optional[Account] = Relationship()
    equipment: Optional[Equipment] = Relationship()


# =============================================================================
# 2. ers.ers_records 테이블 모델 (루트)
# =============================================================================
class Ers(SQLModel, table=True):
    __tablename__ = "ers_records"
    __table_args__ = {'schema': 'ers'}

    id: Optional[int] = Field(default=None, primary_key=True)
    ers_ref_id: Optional[str] = Field(default=None, max_length=50, index=True)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="출동 요청 일시"
    )
    ers_end_date: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TIMESTAMP(timezone=True), nullable=True),
        description="출동 종료 일시"
    )
    ers_service_level: Optional[str] = Field(default=None, max_length=50)
    ers_status: Optional[str] = Field(default=None, max_length=20)
    location: Optional[str] = Field(default=None, max_length=500)
    driver_first_name: Optional[str] = Field(default=None, max_length=100)
    driver_last_name: Optional[str] = Field(default=None, max_length=100)
    service_request_id: Optional[int] = Field(default=None, foreign_key="ers.service_requests.id", index=True)

    service_request: Optional[ServiceRequest] = Relationship()
    parts_used: List["ErsPartUsed"] = Relationship(
        back_populates="ers",
        sa_relationship_kwargs={"order_by": "ErsPartUsed.id"}
    )


# =============================================================================
# 3. ers.ers_parts_used 테이블 모델
# =============================================================================
class ErsPartUsed(SQLModel, table=True):
    __tablename__ = "ers_parts_used"
    __table_args__ = {'schema': 'ers'}

    id: Optional[int] = Field(default=None, primary_key=True)
    ers_id: int = Field(foreign_key="ers.ers_records.id", index=True)
    part_name: str = Field(max_length=100)
    quantity: Optional[int] = Field(default=None)

    ers: Optional[Ers] = Relationship(back_populates="parts_used")
