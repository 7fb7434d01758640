# fleetops/domains/fleet/models.py

"""
'fleet' 도메인 (PostgreSQL 'fleet' 스키마)의 ORM 모델을 정의하는 모듈입니다.

다른 도메인에서 단방향(다대일)으로만 참조하므로 이 모듈은 다른 도메인을 임포트하지 않습니다.
"""

from typing import Optional

from sqlmodel import Field, SQLModel


# =============================================================================
# 1. fleet.facilities 테이블 모델
# =============================================================================
class Facility(SQLModel, table=True):
    __tablename__ = "facilities"
    __table_args__ = {'schema': 'fleet'}

    id: Optional[int] = Field(default=None, primary_key=True)
    facility_code: str = Field(max_length=20, unique=True, index=True, description="시설 코드")
    facility_name: Optional[str] = Field(default=None, max_length=200)


# =============================================================================
# 2. fleet.accounts 테이블 모델
# =============================================================================
class Account(SQLModel, table=True):
    __tablename__ = "accounts"
    __table_args__ = {'schema': 'fleet'}

    id: Optional[int] = Field(default=None, primary_key=True)
    account_number: str = Field(max_length=50, index=True, description="고객 계정 번호")
    account_name: Optional[str] = Field(default=None, max_length=200)
    status: Optional[str] = Field(default=None, max_length=20)


# =============================================================================
# 3. fleet.equipment 테이블 모델
# =============================================================================
class Equipment(SQLModel, table=True):
    __tablename__ = "equipment"
    __table_args__ = {'schema': 'fleet'}

    id: Optional[int] = Field(default=None, primary_key=True)
    unit_number: str = Field(max_length=50, index=True, description="유닛 번호")
    customer_unit_number: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    vin: Optional[str] = Field(default=None, max_length=50, description="차대번호")
    equipment_type: Optional[str] = Field(default=None, max_length=50)
    status: Optional[str] = Field(default=None, max_length=20)
