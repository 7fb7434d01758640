# fleetops/domains/fleet/__init__.py

"""
'fleet' 도메인 패키지입니다.

PostgreSQL 'fleet' 스키마의 공용 조회 엔티티(시설, 고객 계정, 장비)를 정의합니다.
계약(agr), 긴급 출동(ers), 예방 정비(pm) 도메인이 이 모델을 다대일로 참조합니다.

주요 서브모듈:
- `models.py`: 'fleet' 스키마의 테이블에 매핑되는 SQLModel 정의.
"""

# 패키지 메타데이터
__title__ = "FleetOps Fleet Domain"
__description__ = "Shared lookup entities: facilities, customer accounts and equipment."
__version__ = "0.1.0"
__all__ = []
